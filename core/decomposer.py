"""
Scomposizione economica di una singola prenotazione:
commissione canale, netto, costi variabili (prodotti) e margine.

I costi fissi NON entrano nel margine della prenotazione: vengono
ripartiti a livello di proprietà/periodo (vedi core.allocator).
"""

from dataclasses import dataclass
from typing import Tuple

from core.models import Booking
from core.money import quantize_cents, round_cents, to_decimal


@dataclass(frozen=True)
class BookingFinancials:
    commission_rate: float
    commission_amount: float
    net_revenue: float
    variable_costs: float
    net_margin: float


def calculate_commission(gross_revenue: float, commission_rate: float) -> Tuple[float, float]:
    """
    Restituisce (commissione, netto). Si arrotonda solo la commissione;
    il netto è lordo - commissione, così commissione + netto = lordo.
    """
    gross = to_decimal(gross_revenue)
    commission = quantize_cents(gross * to_decimal(commission_rate) / 100)
    return float(commission), float(gross - commission)


def calculate_booking_margin(net_revenue: float, variable_costs: float) -> float:
    return round_cents(to_decimal(net_revenue) - to_decimal(variable_costs))


def commission_rate_for(booking: Booking) -> float:
    """
    Percentuale di commissione applicata alla prenotazione.

    Politica del gestore: le cancellate non pagano commissione al canale,
    qualunque sia il canale. Dirette (nessun canale) = 0%.
    """
    if booking.is_cancelled or booking.channel is None:
        return 0.0
    return float(booking.channel.commission_rate)


def decompose_booking(booking: Booking) -> BookingFinancials:
    """
    Calcola commissione, netto, costi variabili e margine di una prenotazione.
    I costi variabili usano il prezzo unitario congelato su ogni riga prodotto,
    non il prezzo corrente di listino.
    """
    rate = commission_rate_for(booking)
    commission, net = calculate_commission(booking.gross_revenue, rate)
    variable = round_cents(sum(line.quantity * line.unit_price for line in booking.products))

    return BookingFinancials(
        commission_rate=rate,
        commission_amount=commission,
        net_revenue=net,
        variable_costs=variable,
        net_margin=calculate_booking_margin(net, variable),
    )
