"""
Errori di dominio.

Gli errori BookingError riguardano una singola riga: il batch li registra e
prosegue. SettingsError invece blocca l'esecuzione (senza proprietà non si
può calcolare nulla).
"""


class BookingError(ValueError):
    """Errore recuperabile a livello di riga."""


class ReferenceFormatError(BookingError):
    """Codice prenotazione che non rispetta il formato <anni><PP><MMM><gg><gg>."""

    def __init__(self, reference: str, reason: str):
        self.reference = reference
        self.reason = reason
        super().__init__(f"codice prenotazione non valido {reference!r}: {reason}")


class UnknownMonthError(BookingError):
    def __init__(self, reference: str, month: str):
        self.reference = reference
        self.month = month
        super().__init__(f"mese sconosciuto {month!r} nel codice prenotazione {reference!r}")


class UnknownPropertyError(BookingError):
    def __init__(self, short_name: str):
        self.short_name = short_name
        super().__init__(f"proprietà sconosciuta: {short_name!r}")


class InvalidFieldError(BookingError):
    """Campo di input non valido; `field` è il nome della colonna."""

    def __init__(self, field: str, value, reason: str = "valore non valido"):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field}: {reason} ({value!r})")


class SettingsError(ValueError):
    """Errore fatale nel file settings delle proprietà."""


class EmptyCatalogError(SettingsError):
    def __init__(self):
        super().__init__("nessuna proprietà definita nel file settings")
