"""
Calcolo commissioni, fee del gestore e servizi.

  commissione booking = 15% fisso se Source.BOOKING_COM, altrimenti quella della proprietà
  booking_fee         = commissione × lordo
  net                 = lordo − booking_fee
  house_owner_fee     = max(35, house_owner_commission × net)
  total_fees          = servizi + house_owner_fee
  owner_income        = net − total_fees

Laundry e consumables dipendono dal numero di persone (scaglioni 1..6,
oltre 6 si usa l'ultimo scaglione).
"""

from typing import Tuple

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import MAX_PARTY_SIZE
from core.errors import InvalidFieldError
from core.models import BookingInput, BusinessConfig, Fees, PropertyConfig, Source


def tier_index(number_of_people: int) -> int:
    """Indice nello scaglione prezzi (0-indexed)."""
    if number_of_people < 1:
        raise InvalidFieldError("number_of_people", number_of_people, "deve essere almeno 1")
    return min(number_of_people, MAX_PARTY_SIZE) - 1


def service_prices(prop: PropertyConfig, number_of_people: int) -> Tuple[float, float, float, float]:
    """Prezzi (greeting, laundry, cleaning, consumables) per questa proprietà e numero persone."""
    i = tier_index(number_of_people)
    return prop.greeting, prop.laundry[i], prop.cleaning, prop.consumables[i]


def services_cost(prop: PropertyConfig, form: BookingInput) -> float:
    greeting, laundry, cleaning, consumables = service_prices(prop, form.number_of_people)
    cost = 0.0
    if form.is_consumables:
        cost += consumables
    if form.is_laundry:
        cost += laundry
    if form.is_greeting:
        cost += greeting
    if form.is_cleaning:
        cost += cleaning
    return cost


def booking_commission_rate(form: BookingInput, prop: PropertyConfig, config: BusinessConfig) -> float:
    if form.source is Source.BOOKING_COM:
        return config.booking_com_commission
    return prop.booking_commission


def compute_fees(form: BookingInput, prop: PropertyConfig, config: BusinessConfig) -> Fees:
    if form.gross < 0:
        raise InvalidFieldError("gross", form.gross, "non può essere negativo")

    booking_fee = booking_commission_rate(form, prop, config) * form.gross
    net = form.gross - booking_fee
    house_owner_fee = max(config.house_owner_fee_min, prop.house_owner_commission * net)
    services = services_cost(prop, form)
    total_fees = services + house_owner_fee
    return Fees(
        booking_fee=booking_fee,
        house_owner_fee=house_owner_fee,
        net=net,
        services_cost=services,
        total_fees=total_fees,
        owner_income=net - total_fees,
    )
