"""
Composizione prenotazione e ricalcolo delle righe del foglio.

  BookingInput ──decode_reference──► date + codice proprietà
               ──PropertyCatalog───► PropertyConfig
               ──compute_fees──────► importi
               => Booking => SpreadsheetRow

Il ricalcolo ("fix") forza sempre tutti e quattro i servizi: la regola
attuale è che vengono sempre addebitati, anche se nello storico non lo erano.
"""

import dataclasses
import logging
from typing import Iterable, List, Tuple

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.catalog import PropertyCatalog
from core.errors import BookingError, UnknownMonthError
from core.fees import compute_fees, service_prices
from core.models import Booking, BookingInput, BusinessConfig, RowError, SpreadsheetRow
from core.reference import decode_reference

logger = logging.getLogger(__name__)


def create_booking(form: BookingInput, catalog: PropertyCatalog, config: BusinessConfig) -> Booking:
    """
    Calcola la prenotazione completa da un input.
    Solleva BookingError (mese sconosciuto, proprietà sconosciuta, campi non validi).
    """
    decoded = decode_reference(form.booking_ref, config)
    if not decoded.is_valid:
        raise UnknownMonthError(form.booking_ref, decoded.month)

    prop = catalog.get(decoded.short_name)
    fees = compute_fees(form, prop, config)
    return Booking(
        form=form,
        property=prop,
        arrival=decoded.arrival,
        departure=decoded.departure,
        booking_date=form.booking_date,
        booking_fee=fees.booking_fee,
        house_owner_fee=fees.house_owner_fee,
        net=fees.net,
        total_fees=fees.total_fees,
        owner_income=fees.owner_income,
    )


def booking_to_row(booking: Booking) -> SpreadsheetRow:
    """Converte una Booking nella riga del foglio esportato."""
    f = booking.form
    greeting, laundry, cleaning, consumables = service_prices(booking.property, f.number_of_people)
    return SpreadsheetRow(
        booking_ref=f.booking_ref,
        property_long_name=booking.property.long_name,
        first_name=f.first_name,
        last_name=f.last_name,
        email=f.email,
        mobile=f.mobile,
        notes=f.notes,
        booking_date=f.booking_date,
        source=f.source,
        arrival=booking.arrival,
        departure=booking.departure,
        number_of_people=f.number_of_people,
        gross=f.gross,
        net=booking.net,
        is_discount=False,
        commission=booking.property.commission,
        due_date=f.booking_date,
        is_commission=True,
        greeting=greeting,
        laundry=laundry,
        cleaning=cleaning,
        consumables=consumables,
        booking_fee=booking.booking_fee,
        house_owner_fee=booking.house_owner_fee,
        total_fees=booking.total_fees,
        owner_income=booking.owner_income,
    )


def with_all_services(form: BookingInput) -> BookingInput:
    return dataclasses.replace(
        form,
        is_greeting=True,
        is_laundry=True,
        is_cleaning=True,
        is_consumables=True,
    )


def reconcile(form: BookingInput, catalog: PropertyCatalog, config: BusinessConfig) -> SpreadsheetRow:
    """Ricalcola una riga con tutti i servizi attivi."""
    return booking_to_row(create_booking(with_all_services(form), catalog, config))


def row_to_input(row: SpreadsheetRow) -> BookingInput:
    """Riporta una riga esportata ai soli dati di input (gli importi vengono ricalcolati)."""
    return BookingInput(
        booking_ref=row.booking_ref,
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        mobile=row.mobile,
        notes=row.notes,
        source=row.source,
        number_of_people=row.number_of_people,
        gross=row.gross,
        booking_date=row.booking_date,
    )


def fix_spreadsheet_row(bad: SpreadsheetRow, catalog: PropertyCatalog, config: BusinessConfig) -> SpreadsheetRow:
    """Rimette una riga (anche con importi sbagliati) nel calcolo con le impostazioni correnti."""
    return reconcile(row_to_input(bad), catalog, config)


def reconcile_batch(
    forms: Iterable[BookingInput],
    catalog: PropertyCatalog,
    config: BusinessConfig,
) -> Tuple[List[SpreadsheetRow], List[RowError]]:
    """
    Ricalcola tutte le righe. Una riga con errori viene scartata e registrata,
    il resto del batch prosegue.

    Returns: (rows, errors)
    """
    rows = []
    errors = []
    for i, form in enumerate(forms, start=1):
        line = form.source_line or i
        try:
            rows.append(reconcile(form, catalog, config))
        except BookingError as e:
            logger.warning("Riga %d (%s) scartata: %s", line, form.booking_ref, e)
            errors.append(RowError(
                line=line,
                booking_ref=form.booking_ref,
                message=str(e),
                field=getattr(e, "field", ""),
            ))

    logger.info("Ricalcolate %d righe, %d scartate", len(rows), len(errors))
    return rows, errors
