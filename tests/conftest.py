from __future__ import annotations

import json
from datetime import date

import pytest

from core.catalog import PropertyCatalog
from core.models import BookingInput, BusinessConfig, Source

SETTINGS = {
    "properties": [
        {
            "long_name": "Apple Studio",
            "short_name": "AS",
            "calendar": "apple@mycalendar.com",
            "commission": 0.1,
            "booking_commission": 0.0,
            "house_owner_commission": 0.1,
            "greeting": 15,
            "laundry": [10, 10, 15, 15, 25, 25],
            "cleaning": 35,
            "consumables": [15, 15, 25, 25, 35, 35],
        },
        {
            "long_name": "Amber Mews",
            "short_name": "AM",
            "calendar": "amber@mycalendar.com",
            "commission": 0.2,
            "booking_commission": 0.1,
            "house_owner_commission": 0.3,
            "greeting": 25,
            "laundry": [15, 15, 20, 20, 35, 35],
            "cleaning": 35,
            "consumables": [15, 15, 25, 25, 35, 35],
        },
    ]
}


@pytest.fixture
def settings() -> dict:
    return json.loads(json.dumps(SETTINGS))


@pytest.fixture
def catalog(settings) -> PropertyCatalog:
    return PropertyCatalog.from_settings(settings)


@pytest.fixture
def config() -> BusinessConfig:
    return BusinessConfig(opening_date=date(2011, 1, 1))


@pytest.fixture
def settings_file(tmp_path, settings):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(settings), encoding="utf-8")
    return path


def make_input(**overrides) -> BookingInput:
    values = dict(
        booking_ref="6ASJUN1719",
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        mobile="07700900000",
        notes="",
        source=Source.EMAIL,
        number_of_people=2,
        gross=1000.0,
        booking_date=date(2017, 5, 20),
    )
    values.update(overrides)
    return BookingInput(**values)


@pytest.fixture
def make_form():
    return make_input
