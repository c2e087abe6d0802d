from __future__ import annotations

import pytest

from config import MAX_PARTY_SIZE
from core.errors import InvalidFieldError
from core.fees import booking_commission_rate, compute_fees, service_prices, services_cost, tier_index
from core.models import Source

ALL_SERVICES = dict(is_greeting=True, is_laundry=True, is_cleaning=True, is_consumables=True)


@pytest.mark.parametrize("people, index", [(1, 0), (2, 1), (5, 4), (6, 5), (7, 5), (8, 5), (40, 5)])
def test_tier_index_clamps_to_six(people, index):
    assert tier_index(people) == index


@pytest.mark.parametrize("people", [0, -1])
def test_tier_index_rejects_empty_party(people):
    with pytest.raises(InvalidFieldError) as exc:
        tier_index(people)
    assert exc.value.field == "number_of_people"


def test_party_of_eight_uses_last_consumables_tier(catalog):
    prop = catalog.get("AS")
    assert service_prices(prop, 8)[3] == 35.0
    assert service_prices(prop, 8) == service_prices(prop, 6)


def test_tiers_cover_every_party_size(catalog):
    for prop in catalog:
        assert len(prop.laundry) == len(prop.consumables) == MAX_PARTY_SIZE
        for people in range(1, MAX_PARTY_SIZE + 3):
            service_prices(prop, people)


def test_services_cost_only_counts_opted_in(catalog, make_form):
    prop = catalog.get("AS")
    assert services_cost(prop, make_form(number_of_people=2)) == 0.0
    assert services_cost(prop, make_form(number_of_people=2, is_greeting=True)) == 15.0
    assert services_cost(prop, make_form(number_of_people=2, is_laundry=True, is_consumables=True)) == 25.0
    assert services_cost(prop, make_form(number_of_people=2, **ALL_SERVICES)) == 75.0
    assert services_cost(prop, make_form(number_of_people=5, **ALL_SERVICES)) == 15 + 25 + 35 + 35


@pytest.mark.parametrize("short_name", ["AS", "AM"])
def test_services_cost_non_decreasing_then_constant(catalog, make_form, short_name):
    prop = catalog.get(short_name)
    costs = [services_cost(prop, make_form(number_of_people=n, **ALL_SERVICES)) for n in range(1, 13)]
    assert costs[:6] == sorted(costs[:6])
    assert set(costs[5:]) == {costs[5]}


def test_booking_com_uses_fixed_commission(catalog, config, make_form):
    for short_name in ("AS", "AM"):
        prop = catalog.get(short_name)
        form = make_form(source=Source.BOOKING_COM, gross=1000.0)
        assert booking_commission_rate(form, prop, config) == 0.15
        assert compute_fees(form, prop, config).booking_fee == pytest.approx(150.0)


def test_other_sources_use_property_commission(catalog, config, make_form):
    form = make_form(source=Source.AIRBNB, gross=1000.0)
    assert compute_fees(form, catalog.get("AS"), config).booking_fee == 0.0
    assert compute_fees(form, catalog.get("AM"), config).booking_fee == pytest.approx(100.0)


def test_compute_fees_percentage_house_owner_fee(catalog, config, make_form):
    fees = compute_fees(make_form(source=Source.EMAIL, gross=1000.0, **ALL_SERVICES), catalog.get("AM"), config)
    assert fees.booking_fee == pytest.approx(100.0)
    assert fees.net == pytest.approx(900.0)
    assert fees.house_owner_fee == pytest.approx(270.0)
    assert fees.services_cost == 25 + 15 + 35 + 15
    assert fees.total_fees == pytest.approx(360.0)
    assert fees.owner_income == pytest.approx(540.0)


def test_compute_fees_house_owner_fee_floor(catalog, config, make_form):
    fees = compute_fees(make_form(source=Source.PHONE, gross=200.0), catalog.get("AS"), config)
    assert fees.net == 200.0
    assert fees.house_owner_fee == 35.0
    assert fees.total_fees == 35.0
    assert fees.owner_income == 165.0


def test_compute_fees_zero_gross(catalog, config, make_form):
    fees = compute_fees(make_form(gross=0.0, **ALL_SERVICES), catalog.get("AS"), config)
    assert fees.house_owner_fee == 35.0
    assert fees.owner_income == -(35.0 + 75.0)


def test_compute_fees_rejects_negative_gross(catalog, config, make_form):
    with pytest.raises(InvalidFieldError) as exc:
        compute_fees(make_form(gross=-1.0), catalog.get("AS"), config)
    assert exc.value.field == "gross"


@pytest.mark.parametrize("source", list(Source))
@pytest.mark.parametrize("gross", [0.0, 99.99, 350.0, 1234.56, 10000.0])
@pytest.mark.parametrize("people", [1, 3, 6, 9])
def test_fee_invariants(catalog, config, make_form, source, gross, people):
    for prop in catalog:
        form = make_form(source=source, gross=gross, number_of_people=people, **ALL_SERVICES)
        fees = compute_fees(form, prop, config)
        assert fees.house_owner_fee >= 35
        assert fees.net == gross - fees.booking_fee
        assert fees.total_fees == fees.services_cost + fees.house_owner_fee
        assert fees.owner_income == fees.net - fees.total_fees
