"""Test del punto d'ingresso FinancialEngine sopra lo store."""
import logging
from datetime import date

import pytest

from config import configure_logging
from core.models import BookingStatus, Guest
from core.store import InMemoryStore
from reports.engine import FinancialEngine
from reports.period import compute_property_summaries
from reports.tourist_tax import TaxRules


class UnfilteredStore(InMemoryStore):
    """Store che ignora i filtri richiesti: il motore deve rifiltrare da sé."""

    def list_bookings(self, property_id=None, status=None, start=None, end=None):
        return list(self._bookings)


@pytest.fixture
def bookings(booking_factory, airbnb, direct):
    return [
        booking_factory(property_id="p5", channel=airbnb, gross_revenue=300.0,
                        check_in=date(2025, 7, 3), check_out=date(2025, 7, 8)),
        booking_factory(property_id="p7", channel=direct, gross_revenue=180.0,
                        check_in=date(2025, 7, 12), check_out=date(2025, 7, 14)),
        booking_factory(property_id="p7", channel=airbnb, gross_revenue=250.0,
                        check_in=date(2025, 6, 10), check_out=date(2025, 6, 12),
                        guests=[Guest("Paolo", "Neri", birth_date=date(1970, 1, 1))]),
        booking_factory(property_id="p5", channel=airbnb, gross_revenue=999.0,
                        status=BookingStatus.CANCELLED,
                        check_in=date(2025, 7, 20), check_out=date(2025, 7, 22)),
    ]


@pytest.fixture
def costs(cost_factory):
    return [cost_factory(60.0, property_id="p7"), cost_factory(40.0)]


@pytest.mark.parametrize("store_cls", [InMemoryStore, UnfilteredStore])
def test_period_summary_matches_direct_computation(store_cls, bookings, properties, costs):
    store = store_cls(bookings=bookings, properties=properties, fixed_costs=costs)
    engine = FinancialEngine(store)
    start, end = date(2025, 7, 1), date(2025, 7, 31)

    assert engine.compute_property_period_summary(start, end) == compute_property_summaries(
        bookings, properties, costs, start, end,
    )


def test_period_summary_figures(bookings, properties, costs):
    engine = FinancialEngine(InMemoryStore(bookings=bookings, properties=properties, fixed_costs=costs))
    summaries, portfolio = engine.compute_property_period_summary(date(2025, 7, 1), date(2025, 7, 31))

    assert [s.bookings_count for s in summaries] == [1, 1]
    assert summaries[0].fixed_costs == pytest.approx(20.0)
    assert summaries[1].fixed_costs == pytest.approx(80.0)
    assert portfolio.margin == pytest.approx(255.0 + 180.0 - 100.0)


@pytest.mark.parametrize("store_cls", [InMemoryStore, UnfilteredStore])
def test_tourist_tax_for_month(store_cls, bookings, properties):
    engine = FinancialEngine(store_cls(bookings=bookings, properties=properties))
    result = engine.compute_tourist_tax(2025, 7)

    # luglio: la diretta è esente, la cancellata (airbnb) resta nel conteggio
    assert [line.booking_id for line in result.lines] == [bookings[0].id, bookings[3].id]
    assert result.totals.total_tax == pytest.approx(2 * 3 * 2 + 2 * 2 * 2)


def test_tourist_tax_uses_engine_rules(bookings, properties):
    engine = FinancialEngine(
        InMemoryStore(bookings=bookings, properties=properties),
        tax_rules=TaxRules(rate_per_person_per_night=1.0),
    )
    result = engine.compute_tourist_tax(2025, 6)

    assert result.totals.total_bookings == 1
    assert result.totals.total_tax == pytest.approx(2.0)


def test_tourist_tax_rejects_invalid_month(bookings):
    engine = FinancialEngine(InMemoryStore(bookings=bookings))
    with pytest.raises(ValueError):
        engine.compute_tourist_tax(2025, 0)


def test_overview_compares_with_previous_period(bookings, properties, costs):
    engine = FinancialEngine(InMemoryStore(bookings=bookings, properties=properties, fixed_costs=costs))
    overview = engine.compute_overview(date(2025, 7, 1), date(2025, 7, 31))

    assert overview["previous"].bookings_count == 1
    assert overview["change"]["bookings"] == 100
    assert overview["change"]["revenue"] == round((480.0 - 250.0) / 250.0 * 100)


def test_in_memory_store_filters_and_copies(bookings, properties):
    store = InMemoryStore(bookings=bookings, properties=properties)

    assert len(store.list_bookings(property_id="p7")) == 2
    assert len(store.list_bookings(status=BookingStatus.CANCELLED)) == 1
    assert len(store.list_bookings(start=date(2025, 7, 1), end=date(2025, 7, 31))) == 3

    store.list_properties().clear()
    assert len(store.list_properties()) == 2


def test_engine_logs_each_computation(bookings, properties, caplog):
    configure_logging("DEBUG")
    engine = FinancialEngine(InMemoryStore(bookings=bookings, properties=properties))

    with caplog.at_level(logging.DEBUG):
        engine.compute_tourist_tax(2025, 7)

    assert "Tassa di soggiorno 2025-07: 2 prenotazioni tassabili" in caplog.text
    assert "canale non tassabile" in caplog.text
