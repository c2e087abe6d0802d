"""
Modelli dati: proprietà, input del form, prenotazione calcolata e riga
del foglio esportato.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Tuple

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import (
    BUSINESS_OPENING_DATE,
    BOOKING_COM_COMMISSION,
    HOUSE_OWNER_FEE_MIN,
    SOURCE_LABELS,
)


class Source(Enum):
    """Canale da cui arriva la prenotazione. I valori sono stabili (serializzati)."""
    BOOKING_COM = 1
    AIRBNB = 2
    EMAIL = 3
    PHONE = 4
    VISIT = 5
    OTHER = 6

    @property
    def label(self) -> str:
        return _LABEL_BY_SOURCE[self]

    @classmethod
    def from_label(cls, label: str) -> Optional["Source"]:
        """Etichetta CSV → Source. None se l'etichetta non è riconosciuta."""
        return _SOURCE_BY_LABEL.get(label.strip().lower())


_LABEL_BY_SOURCE = {s: SOURCE_LABELS[s.value - 1] for s in Source}
_SOURCE_BY_LABEL = {label: s for s, label in _LABEL_BY_SOURCE.items()}


@dataclass(frozen=True)
class BusinessConfig:
    """Regole di business per un'esecuzione; costruita una volta e passata esplicitamente."""
    opening_date: date = BUSINESS_OPENING_DATE
    booking_com_commission: float = BOOKING_COM_COMMISSION
    house_owner_fee_min: float = HOUSE_OWNER_FEE_MIN


@dataclass(frozen=True)
class PropertyConfig:
    """Impostazioni di una proprietà, come da file settings.json."""
    short_name: str                     # 2 lettere, chiave univoca (es. "AS")
    long_name: str
    calendar: str                       # id calendario, solo passthrough
    commission: float
    booking_commission: float
    house_owner_commission: float
    greeting: float                     # prezzo fisso accoglienza
    laundry: Tuple[float, ...]          # 6 scaglioni per numero persone
    cleaning: float                     # prezzo fisso pulizie
    consumables: Tuple[float, ...]      # 6 scaglioni per numero persone


@dataclass(frozen=True)
class BookingInput:
    """Dati grezzi di una prenotazione (form o riga CSV importata)."""
    booking_ref: str
    first_name: str
    last_name: str
    email: str
    mobile: str
    notes: str
    source: Source
    number_of_people: int
    gross: float
    booking_date: date
    is_greeting: bool = False
    is_laundry: bool = False
    is_cleaning: bool = False
    is_consumables: bool = False
    source_line: int = 0    # riga nel CSV di origine (traceability)


@dataclass(frozen=True)
class DecodedReference:
    """
    Contenuto di un codice prenotazione.
    arrival/departure sono None se il mese non è stato riconosciuto.
    """
    year_offset: int
    prefix_length: int
    year: int
    short_name: str
    month: str
    arrival: Optional[date]
    departure: Optional[date]

    @property
    def is_valid(self) -> bool:
        return self.arrival is not None and self.departure is not None


@dataclass(frozen=True)
class Fees:
    booking_fee: float
    house_owner_fee: float
    net: float
    services_cost: float
    total_fees: float
    owner_income: float


@dataclass(frozen=True)
class Booking:
    """Prenotazione completa: input + proprietà + date decodificate + importi."""
    form: BookingInput
    property: PropertyConfig
    arrival: date
    departure: date
    booking_date: date
    booking_fee: float
    house_owner_fee: float
    net: float
    total_fees: float
    owner_income: float

    @property
    def nights(self) -> int:
        return (self.departure - self.arrival).days


@dataclass(frozen=True)
class SpreadsheetRow:
    """Una riga del foglio corretto (stesso ordine delle colonne esportate)."""
    booking_ref: str
    property_long_name: str
    first_name: str
    last_name: str
    email: str
    mobile: str
    notes: str
    booking_date: date
    source: Source
    arrival: date
    departure: date
    number_of_people: int
    gross: float
    net: float
    is_discount: bool
    commission: float
    due_date: date
    is_commission: bool
    greeting: float
    laundry: float
    cleaning: float
    consumables: float
    booking_fee: float
    house_owner_fee: float
    total_fees: float
    owner_income: float


@dataclass
class RowError:
    """Riga scartata durante import o ricalcolo."""
    line: int                # numero riga nel file (1-indexed), 0 se non noto
    booking_ref: str
    message: str
    field: str = ""
