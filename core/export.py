"""
Esportazione delle righe corrette: CSV (come il foglio originale) e XLSX.

Formati:
  - date         YYYY-MM-DD
  - importi      2 decimali
  - commissione  3 decimali
  - booleani     TRUE / FALSE
  - sorgente     etichetta (booking.com, airbnb, ...)
"""

import io
import logging
from datetime import date
from typing import List

import pandas as pd

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.models import SpreadsheetRow

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "booking_ref", "property", "first_name", "last_name", "email",
    "mobile", "notes", "booking_date", "source", "arrival_date", "departure_date",
    "number_of_people", "gross", "net", "is_discount", "commission", "due_date",
    "is_commission", "greeting", "laundry", "cleaning", "consumables", "booking_fee",
    "house_owner_fee", "total_fees", "owner_income",
]


def fmt_date(d: date) -> str:
    return d.strftime("%Y-%m-%d")


def fmt_money(x: float) -> str:
    return f"{x:.2f}"


def fmt_bool(b: bool) -> str:
    return "TRUE" if b else "FALSE"


def row_to_record(r: SpreadsheetRow) -> List[str]:
    """Converte una SpreadsheetRow nella lista di celle del CSV."""
    return [
        r.booking_ref,                  # booking_ref
        r.property_long_name,           # property
        r.first_name,                   # first_name
        r.last_name,                    # last_name
        r.email,                        # email
        r.mobile,                       # mobile
        r.notes,                        # notes
        fmt_date(r.booking_date),       # booking_date
        r.source.label,                 # source
        fmt_date(r.arrival),            # arrival_date
        fmt_date(r.departure),          # departure_date
        str(r.number_of_people),        # number_of_people
        fmt_money(r.gross),             # gross
        fmt_money(r.net),               # net
        fmt_bool(r.is_discount),        # is_discount
        f"{r.commission:.3f}",          # commission
        fmt_date(r.due_date),           # due_date
        fmt_bool(r.is_commission),      # is_commission
        fmt_money(r.greeting),          # greeting
        fmt_money(r.laundry),           # laundry
        fmt_money(r.cleaning),          # cleaning
        fmt_money(r.consumables),       # consumables
        fmt_money(r.booking_fee),       # booking_fee
        fmt_money(r.house_owner_fee),   # house_owner_fee
        fmt_money(r.total_fees),        # total_fees
        fmt_money(r.owner_income),      # owner_income
    ]


def rows_to_dataframe(rows: List[SpreadsheetRow]) -> pd.DataFrame:
    """DataFrame di stringhe già formattate, colonne = EXPORT_COLUMNS."""
    return pd.DataFrame([row_to_record(r) for r in rows], columns=EXPORT_COLUMNS, dtype=str)


def write_spreadsheet_csv(rows: List[SpreadsheetRow], filepath: str) -> str:
    """Scrive il CSV corretto (con intestazione). Restituisce il percorso scritto."""
    df = rows_to_dataframe(rows)
    df.to_csv(filepath, index=False, encoding="utf-8")
    logger.info("Scritte %d righe in %s", len(df), filepath)
    return filepath


def df_to_excel_bytes(df: pd.DataFrame, sheet_name: str = "fixed") -> bytes:
    """Converte DataFrame in bytes XLSX per il download."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return buf.getvalue()


def write_spreadsheet_xlsx(rows: List[SpreadsheetRow], filepath: str) -> str:
    with open(filepath, "wb") as f:
        f.write(df_to_excel_bytes(rows_to_dataframe(rows)))
    logger.info("Scritte %d righe in %s", len(rows), filepath)
    return filepath
