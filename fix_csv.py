"""
Corregge un CSV di prenotazioni ricalcolando commissioni e fee.

  python fix_csv.py --settings settings.json --input bookings.csv --output out.csv

Le righe non valide vengono segnalate e saltate; un file settings senza
proprietà (o illeggibile) interrompe l'esecuzione con exit code 1.
"""

import argparse
import logging
from datetime import date
from typing import List, Optional

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import BOOKINGS_CSV_PATH, BUSINESS_OPENING_DATE, LOG_LEVEL, OUTPUT_CSV_PATH, SETTINGS_PATH
from core.bookings import reconcile_batch
from core.catalog import load_settings
from core.errors import SettingsError
from core.export import write_spreadsheet_csv, write_spreadsheet_xlsx
from core.logging_config import configure_logging
from core.models import BusinessConfig, RowError
from parsers.bookings_csv import parse_bookings_csv

logger = logging.getLogger("fix_csv")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ricalcola commissioni e fee di un CSV di prenotazioni.")
    parser.add_argument("--settings", default=SETTINGS_PATH, help="File JSON con le proprietà")
    parser.add_argument("--input", default=BOOKINGS_CSV_PATH, help="CSV prenotazioni da correggere")
    parser.add_argument("--output", default=OUTPUT_CSV_PATH, help="CSV corretto in uscita")
    parser.add_argument("--xlsx", default=None, help="Scrive anche una copia XLSX")
    parser.add_argument(
        "--opening-date",
        type=date.fromisoformat,
        default=BUSINESS_OPENING_DATE,
        help="Data di apertura (YYYY-MM-DD), base degli anni nel codice prenotazione",
    )
    parser.add_argument("--log-level", default=LOG_LEVEL)
    parser.add_argument("--log-file", default=None)
    return parser


def _report_errors(errors: List[RowError]) -> None:
    for e in errors:
        print(f"riga {e.line:>4} | {e.booking_ref or '-':<14} | {e.message}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    config = BusinessConfig(opening_date=args.opening_date)
    try:
        catalog = load_settings(args.settings)
    except SettingsError as e:
        logger.error("%s", e)
        return 1

    try:
        forms, parse_errors = parse_bookings_csv(args.input)
    except ValueError as e:
        logger.error("%s", e)
        return 1
    rows, calc_errors = reconcile_batch(forms, catalog, config)

    write_spreadsheet_csv(rows, args.output)
    if args.xlsx:
        write_spreadsheet_xlsx(rows, args.xlsx)

    errors = sorted(parse_errors + calc_errors, key=lambda e: e.line)
    if errors:
        logger.warning("%d righe scartate", len(errors))
        _report_errors(errors)
    print(f"{len(rows)} righe corrette scritte in {args.output}, {len(errors)} scartate")
    return 0


if __name__ == "__main__":
    sys.exit(main())
