"""
Codice prenotazione: decodifica e ricostruzione.

Formato:  <anni><PP><MMM><gg><gg>     es. 6ASJUN1719
  anni = cifre iniziali, anni trascorsi dall'apertura (vuoto = 0)
  PP   = codice proprietà (2 caratteri, il primo non è una cifra)
  MMM  = mese di arrivo, abbreviazione inglese maiuscola (JAN..DEC)
  gg   = giorno di arrivo
  gg   = giorno di partenza; se <= giorno di arrivo la partenza cade nel
         mese successivo (DEC3103 → 31/12 - 03/01 dell'anno dopo)
"""

import logging
from datetime import date
from typing import Optional, Tuple, Union

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.errors import ReferenceFormatError
from core.models import Booking, BusinessConfig, DecodedReference

logger = logging.getLogger(__name__)

MONTH_ABBREVIATIONS = {
    "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4, "MAY": 5, "JUN": 6,
    "JUL": 7, "AUG": 8, "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
}
_ABBREVIATION_BY_MONTH = {num: abbr for abbr, num in MONTH_ABBREVIATIONS.items()}

_DIGITS = "0123456789"

# Dopo le cifre: 2 codice + 3 mese + 2 giorno arrivo + 2 giorno partenza
BODY_LENGTH = 9


def digit_prefix_length(reference: str) -> int:
    """Numero di cifre iniziali del codice (0 se inizia con una lettera)."""
    n = 0
    for ch in reference:
        if ch not in _DIGITS:
            break
        n += 1
    return n


def month_abbreviation(month: int) -> str:
    return _ABBREVIATION_BY_MONTH[month]


def _parse_day(reference: str, text: str, label: str) -> int:
    if len(text) != 2 or any(ch not in _DIGITS for ch in text):
        raise ReferenceFormatError(reference, f"giorno di {label} {text!r} non numerico")
    return int(text)


def _make_date(reference: str, year: int, month: int, day: int) -> date:
    try:
        return date(year, month, day)
    except (ValueError, OverflowError) as e:
        raise ReferenceFormatError(reference, f"data inesistente {year}-{month:02d}-{day:02d} ({e})") from e


def _next_month(year: int, month: int) -> Tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def departure_date(reference: str, arrival: date, departure_day: int) -> date:
    """Data di partenza dal solo giorno: giorno <= arrivo → mese successivo."""
    year, month = arrival.year, arrival.month
    if departure_day <= arrival.day:
        year, month = _next_month(year, month)
    return _make_date(reference, year, month, departure_day)


def decode_reference(reference: str, config: BusinessConfig) -> DecodedReference:
    """
    Decodifica il codice prenotazione.

    Un mese non riconosciuto NON solleva eccezioni: viene loggato un warning
    e arrival/departure restano None (vedi DecodedReference.is_valid).
    Lunghezza errata, giorni non numerici o date inesistenti sollevano
    ReferenceFormatError.
    """
    ref = reference.strip()
    prefix_length = digit_prefix_length(ref)
    body = ref[prefix_length:]
    if len(body) != BODY_LENGTH:
        raise ReferenceFormatError(
            reference,
            f"dopo le {prefix_length} cifre dell'anno servono {BODY_LENGTH} caratteri, trovati {len(body)}",
        )

    try:
        year_offset = int(ref[:prefix_length]) if prefix_length else 0
    except ValueError as e:
        raise ReferenceFormatError(reference, f"anno di {prefix_length} cifre non convertibile") from e
    year = config.opening_date.year + year_offset
    if year > date.max.year:
        raise ReferenceFormatError(reference, f"anno fuori intervallo (massimo {date.max.year})")
    short_name = body[0:2]
    month_text = body[2:5]
    arrival_day = _parse_day(reference, body[5:7], "arrivo")
    departure_day = _parse_day(reference, body[7:9], "partenza")

    arrival: Optional[date] = None
    departure: Optional[date] = None
    month = MONTH_ABBREVIATIONS.get(month_text)
    if month is None:
        logger.warning("unknown month in booking reference: %s", month_text)
    else:
        arrival = _make_date(reference, year, month, arrival_day)
        departure = departure_date(reference, arrival, departure_day)

    return DecodedReference(
        year_offset=year_offset,
        prefix_length=prefix_length,
        year=year,
        short_name=short_name,
        month=month_text,
        arrival=arrival,
        departure=departure,
    )


def encode_reference(short_name: str, arrival: date, departure: date, config: BusinessConfig) -> str:
    """Ricostruisce il codice canonico da proprietà e date."""
    offset = arrival.year - config.opening_date.year
    if offset < 0:
        raise ReferenceFormatError(
            f"{short_name}{arrival.isoformat()}",
            f"arrivo precedente all'apertura ({config.opening_date.isoformat()})",
        )
    return f"{offset}{short_name}{month_abbreviation(arrival.month)}{arrival.day:02d}{departure.day:02d}"


def create_booking_ref(item: Union[Booking, DecodedReference], config: BusinessConfig) -> str:
    """Codice canonico di una prenotazione calcolata o di un codice decodificato."""
    if isinstance(item, Booking):
        return encode_reference(item.property.short_name, item.arrival, item.departure, config)
    if not item.is_valid:
        raise ReferenceFormatError(item.short_name + item.month, "mese sconosciuto, impossibile ricostruire")
    return encode_reference(item.short_name, item.arrival, item.departure, config)
