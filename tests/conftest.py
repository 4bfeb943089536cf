"""Fixture condivise: canali, proprietà e factory per prenotazioni e costi."""
from datetime import date

import pytest

from core.models import Booking, Channel, FixedCost, Frequency, Property


@pytest.fixture
def airbnb():
    return Channel(id="ch-airbnb", name="Airbnb", commission_rate=15)


@pytest.fixture
def booking_com():
    return Channel(id="ch-booking", name="Booking.com", commission_rate=18)


@pytest.fixture
def direct():
    return Channel(id="ch-direct", name="Diretto", commission_rate=0)


@pytest.fixture
def properties():
    return [
        Property(id="p5", name="Caldiero 5", bedrooms=2, bathrooms=1),
        Property(id="p7", name="Caldiero 7", bedrooms=3, bathrooms=2),
    ]


@pytest.fixture
def booking_factory():
    """Factory per prenotazioni con default ragionevoli."""
    counter = {"n": 0}

    def _create(**overrides):
        counter["n"] += 1
        data = {
            "id": f"b{counter['n']}",
            "property_id": "p5",
            "check_in": date(2025, 3, 10),
            "check_out": date(2025, 3, 13),
            "gross_revenue": 300.0,
            "number_of_guests": 2,
            "guest_name": "Mario Rossi",
        }
        data.update(overrides)
        return Booking(**data)
    return _create


@pytest.fixture
def cost_factory():
    counter = {"n": 0}

    def _create(amount, frequency=Frequency.MONTHLY, property_id=None, **overrides):
        counter["n"] += 1
        data = {
            "id": f"c{counter['n']}",
            "amount": amount,
            "frequency": frequency,
            "start_date": date(2025, 1, 1),
            "property_id": property_id,
        }
        data.update(overrides)
        return FixedCost(**data)
    return _create
