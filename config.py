"""
Configurazione centralizzata - modifica qui i percorsi, le regole e i mapping.
"""

from datetime import date

# Percorsi di default per l'esecuzione batch (fix_csv.py)
SETTINGS_PATH = "settings.json"
BOOKINGS_CSV_PATH = "bookings.csv"
OUTPUT_CSV_PATH = "out.csv"

# Data di apertura dell'attività: gli anni nel codice prenotazione partono da qui
BUSINESS_OPENING_DATE = date(2011, 1, 1)

# Commissione fissa applicata alle prenotazioni arrivate da Booking.com
BOOKING_COM_COMMISSION = 0.15

# Fee minima trattenuta dal gestore per ogni prenotazione (€)
HOUSE_OWNER_FEE_MIN = 35.0

# Le tariffe laundry/consumables hanno 6 scaglioni (1..6 persone)
MAX_PARTY_SIZE = 6

# Etichette sorgente prenotazione, nell'ordine dell'enum Source (1-indexed)
SOURCE_LABELS = ["booking.com", "airbnb", "email", "phone", "visit", "other"]

# Livello di log per gli script da riga di comando
LOG_LEVEL = "INFO"

# Mapping colonne CSV import 0-indexed (stesso layout del CSV esportato)
IMPORT_COL_MAP = {
    "booking_ref":       0,   # codice prenotazione (es. 6ASJUN1719)
    # 1 = property (ricalcolata dal codice)
    "first_name":        2,
    "last_name":         3,
    "email":             4,
    "mobile":            5,
    "notes":             6,
    "booking_date":      7,   # YYYY-MM-DD
    "source":            8,   # booking.com | airbnb | email | phone | visit | other
    # 9, 10 = arrival/departure (ricalcolate dal codice)
    "number_of_people": 11,
    "gross":            12,
}

# Nome del foglio Google Sheets per le righe corrette
SHEET_FIXED = "fixed"
