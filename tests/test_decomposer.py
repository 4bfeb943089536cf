"""Test scomposizione economica della singola prenotazione."""
from decimal import Decimal

import pytest

from core.decomposer import calculate_booking_margin, calculate_commission, decompose_booking
from core.models import BookingStatus, Channel, Product, ProductLine


def test_channel_booking(booking_factory, airbnb):
    booking = booking_factory(
        channel=airbnb,
        gross_revenue=300.0,
        products=[
            ProductLine("kit", "Kit cortesia", 2, 5.5),
            ProductLine("pul", "Pulizie", 1, 12.0),
        ],
    )
    result = decompose_booking(booking)

    assert result.commission_rate == 15
    assert result.commission_amount == pytest.approx(45.0)
    assert result.net_revenue == pytest.approx(255.0)
    assert result.variable_costs == pytest.approx(23.0)
    assert result.net_margin == pytest.approx(232.0)


def test_cancelled_booking_pays_no_commission(booking_factory, booking_com):
    booking = booking_factory(channel=booking_com, status=BookingStatus.CANCELLED, gross_revenue=150.0)
    result = decompose_booking(booking)

    assert result.commission_rate == 0
    assert result.commission_amount == 0
    assert result.net_revenue == pytest.approx(150.0)


def test_direct_booking_without_channel(booking_factory):
    result = decompose_booking(booking_factory(channel=None, gross_revenue=200.0))

    assert result.commission_amount == 0
    assert result.net_revenue == pytest.approx(200.0)
    assert result.variable_costs == 0
    assert result.net_margin == pytest.approx(200.0)


def _cents(value):
    return Decimal(str(value))


@pytest.mark.parametrize("gross,rate", [
    (480.0, 15),
    (0.50, 15),
    (0.85, 10),
    (1.48, 12.5),
    (1.0, 12.5),
    (99.99, 18),
    (1234.57, 3),
])
@pytest.mark.parametrize("status", [BookingStatus.CONFIRMED, BookingStatus.CANCELLED])
def test_margin_is_gross_minus_commission_minus_variable(booking_factory, gross, rate, status):
    booking = booking_factory(
        channel=Channel(id="ch", name="Canale", commission_rate=rate),
        status=status,
        gross_revenue=gross,
        products=[ProductLine("kit", "Kit cortesia", 4, 3.25)],
    )
    result = decompose_booking(booking)

    assert _cents(result.commission_amount) + _cents(result.net_revenue) == _cents(gross)
    assert _cents(result.net_margin) == (
        _cents(gross) - _cents(result.commission_amount) - _cents(result.variable_costs)
    )


def test_commission_plus_net_is_gross_for_every_cent_amount():
    mismatches = []
    for cents in range(1, 100000):
        gross = cents / 100
        commission, net = calculate_commission(gross, 15)
        if _cents(commission) + _cents(net) != _cents(gross):
            mismatches.append(gross)
    assert mismatches == []
    result = decompose_booking(booking)

    assert result.net_margin == pytest.approx(
        booking.gross_revenue - result.commission_amount - result.variable_costs
    )


def test_product_line_keeps_price_at_booking_time(booking_factory):
    product = Product(id="kit", name="Kit cortesia", price=4.0)
    line = ProductLine.from_product(product, 3)
    booking = booking_factory(products=[line])
    repriced = Product(id="kit", name="Kit cortesia", price=9.0)

    assert repriced.unit_price == 9.0
    assert line.unit_price == 4.0
    assert decompose_booking(booking).variable_costs == pytest.approx(12.0)


@pytest.mark.parametrize("product,expected", [
    (Product(id="a", name="Sapone", package_cost=24.0, package_quantity=12), 2.0),
    (Product(id="b", name="Detersivo", package_cost=10.0), 10.0),
    (Product(id="c", name="Caffè", price=3.5), 3.5),
])
def test_product_unit_price(product, expected):
    assert product.unit_price == pytest.approx(expected)


def test_commission_helpers_round_to_cents():
    assert calculate_commission(200.0, 12.5) == (25.0, 175.0)
    assert calculate_booking_margin(175.0, 20.123) == 154.88


@pytest.mark.parametrize("gross,rate,expected", [
    (1.0, 12.5, (0.13, 0.87)),
    (0.50, 15, (0.08, 0.42)),
    (0.85, 10, (0.09, 0.76)),
    (1.48, 12.5, (0.19, 1.29)),
])
def test_half_cent_commission_rounds_up(gross, rate, expected):
    assert calculate_commission(gross, rate) == expected


def test_half_cent_margin_rounds_up():
    assert calculate_booking_margin(10.0, 2.345) == 7.66


def test_unknown_status_is_rejected(booking_factory):
    with pytest.raises(ValueError):
        booking_factory(status="PENDING")
