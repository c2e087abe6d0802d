"""
Catalogo proprietà, caricato dal file settings.json.

Formato:
  { "properties": [
    { "long_name" : "Apple Studio",
      "short_name" : "AS",
      "calendar" : "calendar@mycalendar.com",
      "commission" : 0.1,
      "booking_commission" : 0.0,
      "house_owner_commission" : 0.1,
      "greeting" : 15,
      "laundry" : [10,10,15,15,25,25],
      "cleaning" : 35,
      "consumables" : [15,15,25,25,35,35]
    }
  ]}

Il catalogo viene costruito una volta per batch ed è di sola lettura.
"""

import json
import logging
from typing import Dict, Iterable, Iterator, List

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import MAX_PARTY_SIZE
from core.errors import EmptyCatalogError, SettingsError, UnknownPropertyError
from core.models import PropertyConfig

logger = logging.getLogger(__name__)

_NUMBER_KEYS = ("commission", "booking_commission", "house_owner_commission", "greeting", "cleaning")
_TIER_KEYS = ("laundry", "consumables")
_TEXT_KEYS = ("long_name", "short_name", "calendar")


class PropertyCatalog:
    """Lookup delle proprietà per codice a 2 lettere."""

    def __init__(self, properties: Iterable[PropertyConfig]):
        self._by_code: Dict[str, PropertyConfig] = {}
        for prop in properties:
            if prop.short_name in self._by_code:
                raise SettingsError(f"codice proprietà duplicato: {prop.short_name!r}")
            self._by_code[prop.short_name] = prop
        if not self._by_code:
            raise EmptyCatalogError()

    @classmethod
    def from_settings(cls, settings: dict) -> "PropertyCatalog":
        if not isinstance(settings, dict) or not isinstance(settings.get("properties"), list):
            raise SettingsError("il file settings deve contenere una lista 'properties'")
        return cls(_parse_property(p, i) for i, p in enumerate(settings["properties"]))

    def get(self, short_name: str) -> PropertyConfig:
        try:
            return self._by_code[short_name]
        except KeyError:
            raise UnknownPropertyError(short_name) from None

    def __contains__(self, short_name: str) -> bool:
        return short_name in self._by_code

    def __iter__(self) -> Iterator[PropertyConfig]:
        return iter(self._by_code.values())

    def __len__(self) -> int:
        return len(self._by_code)

    @property
    def short_names(self) -> List[str]:
        return list(self._by_code)


def _to_number(value, key: str, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SettingsError(f"{where}: '{key}' deve essere numerico, trovato {value!r}")
    return float(value)


def _parse_property(raw: dict, index: int) -> PropertyConfig:
    """Valida un record proprietà del file settings."""
    where = f"properties[{index}]"
    if not isinstance(raw, dict):
        raise SettingsError(f"{where}: atteso un oggetto, trovato {raw!r}")
    missing = [key for key in _TEXT_KEYS + _NUMBER_KEYS + _TIER_KEYS if key not in raw]
    if missing:
        raise SettingsError(f"{where}: chiavi mancanti: {', '.join(missing)}")

    short_name = str(raw["short_name"])
    # Il codice segue le cifre dell'anno nel codice prenotazione: non può iniziare con una cifra
    if len(short_name) != 2 or short_name[0].isdigit():
        raise SettingsError(f"{where}: short_name deve avere 2 caratteri e non iniziare con una cifra ({short_name!r})")
    where = f"{where} ({short_name})"

    numbers = {key: _to_number(raw[key], key, where) for key in _NUMBER_KEYS}

    tiers = {}
    for key in _TIER_KEYS:
        values = raw[key]
        if not isinstance(values, list) or len(values) != MAX_PARTY_SIZE:
            raise SettingsError(f"{where}: '{key}' deve avere {MAX_PARTY_SIZE} prezzi, trovato {values!r}")
        tiers[key] = tuple(_to_number(v, key, where) for v in values)

    return PropertyConfig(
        short_name=short_name,
        long_name=str(raw["long_name"]),
        calendar=str(raw["calendar"]),
        laundry=tiers["laundry"],
        consumables=tiers["consumables"],
        **numbers,
    )


def load_settings(filepath: str) -> PropertyCatalog:
    """Legge settings.json e restituisce il catalogo proprietà."""
    try:
        with open(filepath, encoding="utf-8") as f:
            settings = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SettingsError(f"Errore lettura settings: {e}") from e

    catalog = PropertyCatalog.from_settings(settings)
    logger.info("Caricate %d proprietà da %s: %s", len(catalog), filepath, ", ".join(catalog.short_names))
    return catalog
