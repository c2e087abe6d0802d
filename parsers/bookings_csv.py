"""
Parser per il CSV delle prenotazioni da correggere.

Il layout è lo stesso del CSV esportato (vedi core/export.py), così un file
già corretto può essere rielaborato. L'intestazione è opzionale: se la prima
cella è 'booking_ref' la riga viene saltata.

Colonne usate (0-indexed, vedi IMPORT_COL_MAP in config.py):
  0  = codice prenotazione
  2  = nome,  3 = cognome,  4 = email,  5 = cellulare,  6 = note
  7  = data prenotazione (YYYY-MM-DD)
  8  = sorgente (booking.com | airbnb | email | phone | visit | other)
  11 = numero persone
  12 = importo lordo

Property, arrivo e partenza non vengono letti: si ricalcolano dal codice.
"""

import csv
import logging
import math
from datetime import date, datetime
from typing import List, Tuple

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import IMPORT_COL_MAP
from core.errors import InvalidFieldError
from core.models import BookingInput, RowError, Source

logger = logging.getLogger(__name__)

HEADER_MARKER = "booking_ref"


def _to_date(val: str, field: str) -> date:
    """Converte stringa YYYY-MM-DD in date."""
    try:
        return datetime.strptime(val.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise InvalidFieldError(field, val, "data non valida, atteso YYYY-MM-DD") from None


def _to_int(val: str, field: str) -> int:
    try:
        n = int(val.strip())
    except ValueError:
        raise InvalidFieldError(field, val, "numero intero non valido") from None
    if n < 1:
        raise InvalidFieldError(field, val, "deve essere almeno 1")
    return n


def _to_float(val: str, field: str) -> float:
    """Converte stringa CSV in float. Accetta la virgola come separatore decimale."""
    try:
        n = float(val.strip().replace(",", "."))
    except ValueError:
        raise InvalidFieldError(field, val, "importo non valido") from None
    if math.isnan(n) or math.isinf(n) or n < 0:
        raise InvalidFieldError(field, val, "importo non valido")
    return n


def _to_source(val: str, field: str) -> Source:
    source = Source.from_label(val)
    if source is None:
        raise InvalidFieldError(field, val, "sorgente sconosciuta")
    return source


def parse_row(row: List[str], line: int = 0) -> BookingInput:
    """Converte una riga CSV in BookingInput. Solleva InvalidFieldError."""
    n_cols = max(IMPORT_COL_MAP.values()) + 1
    if len(row) < n_cols:
        raise InvalidFieldError("row", len(row), f"attese almeno {n_cols} colonne")

    def col(name: str) -> str:
        return row[IMPORT_COL_MAP[name]]

    booking_ref = col("booking_ref").strip()
    if not booking_ref:
        raise InvalidFieldError("booking_ref", booking_ref, "codice prenotazione mancante")

    return BookingInput(
        booking_ref=booking_ref,
        first_name=col("first_name").strip(),
        last_name=col("last_name").strip(),
        email=col("email").strip(),
        mobile=col("mobile").strip(),
        notes=col("notes"),
        source=_to_source(col("source"), "source"),
        number_of_people=_to_int(col("number_of_people"), "number_of_people"),
        gross=_to_float(col("gross"), "gross"),
        booking_date=_to_date(col("booking_date"), "booking_date"),
        source_line=line,
    )


def parse_bookings_csv(filepath: str) -> Tuple[List[BookingInput], List[RowError]]:
    """
    Legge il CSV e restituisce (prenotazioni valide, righe scartate).
    Le righe con campi non validi non interrompono la lettura.
    """
    try:
        with open(filepath, encoding="utf-8-sig", newline="") as f:
            rows = list(csv.reader(f))
    except UnicodeDecodeError:
        try:
            with open(filepath, encoding="latin-1", newline="") as f:
                rows = list(csv.reader(f))
        except Exception as e:
            raise ValueError(f"Errore lettura CSV prenotazioni: {e}")
    except Exception as e:
        raise ValueError(f"Errore lettura CSV prenotazioni: {e}")

    forms = []
    errors = []
    for idx, row in enumerate(rows):
        line = idx + 1
        if not row or all(not c.strip() for c in row):
            continue
        if idx == 0 and row[0].strip() == HEADER_MARKER:
            continue
        try:
            forms.append(parse_row(row, line))
        except InvalidFieldError as e:
            ref = row[0].strip() if row else ""
            logger.warning("%s riga %d (%s) scartata: %s", os.path.basename(filepath), line, ref, e)
            errors.append(RowError(line=line, booking_ref=ref, message=str(e), field=e.field))

    logger.info("Lette %d prenotazioni da %s (%d scartate)", len(forms), filepath, len(errors))
    return forms, errors
