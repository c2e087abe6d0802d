"""
Google Sheets: destinazione opzionale delle righe corrette.

Il Google Sheet ha il foglio:
  - fixed → righe ricalcolate, stesse colonne del CSV esportato

Autenticazione via Service Account (credenziali in Streamlit secrets):
  [gcp_service_account]  ... credenziali JSON ...
  [google_sheets]
  spreadsheet_id = "..."
"""

import logging
from typing import List, Set, Tuple

import gspread
import streamlit as st

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import SHEET_FIXED
from core.export import EXPORT_COLUMNS, row_to_record
from core.models import SpreadsheetRow

logger = logging.getLogger(__name__)


@st.cache_resource
def get_gspread_client():
    """Client gspread autenticato via Service Account (da st.secrets)."""
    creds_dict = dict(st.secrets["gcp_service_account"])
    return gspread.service_account_from_dict(creds_dict)


def get_sheet(sheet_name: str = SHEET_FIXED):
    """Apre il foglio specificato, creandolo con l'intestazione se non esiste."""
    gc = get_gspread_client()
    spreadsheet_id = st.secrets["google_sheets"]["spreadsheet_id"]
    sh = gc.open_by_key(spreadsheet_id)
    try:
        return sh.worksheet(sheet_name)
    except gspread.WorksheetNotFound:
        ws = sh.add_worksheet(title=sheet_name, rows=1000, cols=len(EXPORT_COLUMNS))
        ws.append_row(EXPORT_COLUMNS)
        return ws


def get_existing_refs(ws) -> Set[str]:
    """Codici prenotazione già presenti nel foglio (colonna booking_ref)."""
    all_values = ws.get_all_values()
    if len(all_values) <= 1:
        return set()
    headers = all_values[0]
    ref_idx = headers.index("booking_ref") if "booking_ref" in headers else 0
    return {row[ref_idx].strip() for row in all_values[1:] if len(row) > ref_idx and row[ref_idx].strip()}


def save_to_sheets(
    rows: List[SpreadsheetRow],
    ws=None,
    dry_run: bool = False,
) -> Tuple[int, List[str]]:
    """
    Aggiunge le righe corrette al foglio, saltando i codici già presenti.

    Returns: (added_rows, skipped_refs)
    """
    if ws is None:
        ws = get_sheet()
    existing = get_existing_refs(ws)

    new_rows = []
    skipped = []
    for r in rows:
        if r.booking_ref in existing:
            skipped.append(r.booking_ref)
        else:
            new_rows.append(r)
            existing.add(r.booking_ref)

    if dry_run or not new_rows:
        return len(new_rows), skipped

    # Una sola chiamata API per tutte le righe
    ws.append_rows([row_to_record(r) for r in new_rows], value_input_option="USER_ENTERED")
    logger.info("Aggiunte %d righe al foglio '%s' (%d già presenti)", len(new_rows), ws.title, len(skipped))
    return len(new_rows), skipped
