from __future__ import annotations

import csv
import io

import pandas as pd
import pytest
from openpyxl import load_workbook

from core.bookings import reconcile
from core.export import (
    EXPORT_COLUMNS,
    df_to_excel_bytes,
    row_to_record,
    rows_to_dataframe,
    write_spreadsheet_csv,
    write_spreadsheet_xlsx,
)
from core.models import Source
from parsers.bookings_csv import parse_bookings_csv


@pytest.fixture
def row(catalog, config, make_form):
    return reconcile(make_form(booking_ref="1AMDEC1703", source=Source.BOOKING_COM, gross=2000.0, number_of_people=8), catalog, config)


def test_export_columns():
    assert len(EXPORT_COLUMNS) == 26
    assert EXPORT_COLUMNS[0] == "booking_ref"
    assert EXPORT_COLUMNS[-1] == "owner_income"


def test_row_to_record(row):
    record = dict(zip(EXPORT_COLUMNS, row_to_record(row)))
    assert record == {
        "booking_ref": "1AMDEC1703",
        "property": "Amber Mews",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "mobile": "07700900000",
        "notes": "",
        "booking_date": "2017-05-20",
        "source": "booking.com",
        "arrival_date": "2012-12-17",
        "departure_date": "2013-01-03",
        "number_of_people": "8",
        "gross": "2000.00",
        "net": "1700.00",
        "is_discount": "FALSE",
        "commission": "0.200",
        "due_date": "2017-05-20",
        "is_commission": "TRUE",
        "greeting": "25.00",
        "laundry": "35.00",
        "cleaning": "35.00",
        "consumables": "35.00",
        "booking_fee": "300.00",
        "house_owner_fee": "510.00",
        "total_fees": "640.00",
        "owner_income": "1060.00",
    }


def test_rows_to_dataframe_empty():
    df = rows_to_dataframe([])
    assert list(df.columns) == EXPORT_COLUMNS
    assert df.empty


def test_write_spreadsheet_csv(tmp_path, row):
    path = tmp_path / "out.csv"
    write_spreadsheet_csv([row, row], str(path))

    with open(path, encoding="utf-8", newline="") as f:
        lines = list(csv.reader(f))
    assert lines[0] == EXPORT_COLUMNS
    assert lines[1] == row_to_record(row)
    assert len(lines) == 3


def test_exported_csv_can_be_reimported(tmp_path, row, catalog, config):
    path = tmp_path / "out.csv"
    write_spreadsheet_csv([row], str(path))

    forms, errors = parse_bookings_csv(str(path))
    assert errors == []
    assert reconcile(forms[0], catalog, config) == row


def test_df_to_excel_bytes(row):
    data = df_to_excel_bytes(rows_to_dataframe([row]))
    ws = load_workbook(io.BytesIO(data))["fixed"]
    values = list(ws.iter_rows(values_only=True))
    assert list(values[0]) == EXPORT_COLUMNS
    assert values[1][0] == "1AMDEC1703"


def test_write_spreadsheet_xlsx(tmp_path, row):
    path = tmp_path / "out.xlsx"
    write_spreadsheet_xlsx([row], str(path))
    df = pd.read_excel(path, engine="openpyxl", dtype=str)
    assert df.loc[0, "owner_income"] == "1060.00"
