"""
Riepilogo economico per proprietà e per portafoglio su un intervallo di date.

Per ogni proprietà:
  - prenotazioni della proprietà con check-in in [start, end] (estremi inclusi),
    escluse le cancellate (o solo lo stato richiesto, se indicato)
  - somme di lordo, commissioni, netto, costi variabili
  - costo fisso ripartito nel periodo (core.allocator)
  - margine = netto - variabili - fissi
L'ordine delle proprietà è quello della collezione in ingresso.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from config import DIRECT_CHANNEL_LABEL
from core.allocator import allocate_fixed_costs
from core.decomposer import decompose_booking
from core.models import Booking, BookingStatus, FixedCost, Property
from core.money import round_cents

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertySummary:
    property_id: str
    property_name: str
    bookings_count: int
    nights: int
    revenue: float
    commissions: float
    net_revenue: float
    variable_costs: float
    fixed_costs: float
    margin: float
    occupied_nights: int
    available_nights: int
    occupancy_rate: int
    avg_revenue_per_night: float


@dataclass(frozen=True)
class PortfolioSummary:
    property_count: int
    bookings_count: int
    nights: int
    revenue: float
    commissions: float
    net_revenue: float
    variable_costs: float
    fixed_costs: float
    unallocated_fixed_costs: float
    margin: float
    occupied_nights: int
    available_nights: int
    occupancy_rate: int
    avg_revenue_per_night: float


def _check_range(start: date, end: date):
    if end < start:
        raise ValueError(f"Intervallo non valido: {start} > {end}")


def _status_matches(booking: Booking, status: Optional[BookingStatus]) -> bool:
    if status is None:
        return not booking.is_cancelled
    return booking.status == status


def select_bookings(
    bookings: Iterable[Booking],
    start: date,
    end: date,
    property_id: Optional[str] = None,
    status: Optional[BookingStatus] = None,
) -> List[Booking]:
    """
    Prenotazioni con check-in nell'intervallo (inclusivo), filtrate per proprietà e stato.
    Le prenotazioni della proprietà scartate per stato o date finiscono nel log DEBUG.
    """
    status = BookingStatus(status) if status is not None else None
    selected = []
    for b in bookings:
        if property_id is not None and b.property_id != property_id:
            continue
        if not _status_matches(b, status):
            logger.debug("Prenotazione %s esclusa: stato %s", b.id, b.status.value)
            continue
        if not start <= b.check_in <= end:
            logger.debug("Prenotazione %s esclusa: check-in %s fuori periodo", b.id, b.check_in)
            continue
        selected.append(b)
    return selected


def occupied_nights_in_range(bookings: Iterable[Booking], start: date, end: date) -> int:
    """Notti occupate dentro [start, end], tagliando i soggiorni a cavallo."""
    range_end = end + timedelta(days=1)
    total = 0
    for b in bookings:
        first = max(b.check_in, start)
        last = min(b.check_out, range_end)
        total += max(0, (last - first).days)
    return total


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _percent(part: float, whole: float) -> int:
    return _round_half_up(part / whole * 100) if whole > 0 else 0


def compute_property_summaries(
    bookings: Iterable[Booking],
    properties: Iterable[Property],
    fixed_costs: Iterable[FixedCost],
    start: date,
    end: date,
    status: Optional[BookingStatus] = None,
) -> Tuple[List[PropertySummary], PortfolioSummary]:
    """
    Riepilogo per proprietà + totale portafoglio.

    Returns: (summaries, portfolio)
    """
    _check_range(start, end)
    bookings = list(bookings)
    properties = list(properties)
    status = BookingStatus(status) if status is not None else None

    allocation = allocate_fixed_costs(fixed_costs, start, end, properties)
    available = (end - start).days + 1

    summaries = []
    for prop in properties:
        selected = select_bookings(bookings, start, end, property_id=prop.id, status=status)
        figures = [decompose_booking(b) for b in selected]

        revenue = sum(b.gross_revenue for b in selected)
        commissions = sum(f.commission_amount for f in figures)
        net = sum(f.net_revenue for f in figures)
        variable = sum(f.variable_costs for f in figures)
        fixed = round_cents(allocation.for_property(prop.id))
        nights = sum(b.nights for b in selected)

        overlapping = [
            b for b in bookings
            if b.property_id == prop.id and _status_matches(b, status)
        ]
        occupied = occupied_nights_in_range(overlapping, start, end)

        summaries.append(PropertySummary(
            property_id=prop.id,
            property_name=prop.name,
            bookings_count=len(selected),
            nights=nights,
            revenue=round_cents(revenue),
            commissions=round_cents(commissions),
            net_revenue=round_cents(net),
            variable_costs=round_cents(variable),
            fixed_costs=fixed,
            margin=round_cents(net - variable - fixed),
            occupied_nights=occupied,
            available_nights=available,
            occupancy_rate=_percent(occupied, available),
            avg_revenue_per_night=round_cents(revenue / nights) if nights > 0 else 0.0,
        ))

    portfolio = _pool(summaries, allocation.unallocated, len(properties), available)
    logger.info(
        "Riepilogo periodo %s → %s: %d proprietà, %d prenotazioni, %d mesi di costi fissi",
        start, end, len(properties), portfolio.bookings_count, allocation.months,
    )
    return summaries, portfolio


def _pool(
    summaries: List[PropertySummary],
    unallocated: float,
    property_count: int,
    available_per_property: int,
) -> PortfolioSummary:
    """
    Somma le proprietà. La quota generica non viene ridivisa: è già nei fissi di ognuna.
    I costi non ripartiti (nessuna proprietà, o proprietà non in elenco) restano fuori
    da fissi e margine e sono riportati solo in unallocated_fixed_costs: il margine di
    portafoglio è la somma dei margini delle proprietà.
    """
    revenue = sum(s.revenue for s in summaries)
    net = sum(s.net_revenue for s in summaries)
    variable = sum(s.variable_costs for s in summaries)
    fixed = sum(s.fixed_costs for s in summaries)
    nights = sum(s.nights for s in summaries)
    occupied = sum(s.occupied_nights for s in summaries)
    available = available_per_property * property_count

    return PortfolioSummary(
        property_count=property_count,
        bookings_count=sum(s.bookings_count for s in summaries),
        nights=nights,
        revenue=round_cents(revenue),
        commissions=round_cents(sum(s.commissions for s in summaries)),
        net_revenue=round_cents(net),
        variable_costs=round_cents(variable),
        fixed_costs=round_cents(fixed),
        unallocated_fixed_costs=round_cents(unallocated),
        margin=round_cents(net - variable - fixed),
        occupied_nights=occupied,
        available_nights=available,
        occupancy_rate=_percent(occupied, available),
        avg_revenue_per_night=round_cents(revenue / nights) if nights > 0 else 0.0,
    )


# ── Confronto con il periodo precedente ─────────────────────────────────────

def previous_period(start: date, end: date) -> Tuple[date, date]:
    """Intervallo di pari durata che termina il giorno prima di start."""
    _check_range(start, end)
    length = (end - start).days
    return start - timedelta(days=length + 1), start - timedelta(days=1)


def percent_change(current: float, previous: float) -> int:
    if previous == 0:
        return 100 if current > 0 else 0
    return _round_half_up((current - previous) / previous * 100)


def compare_periods(current: PortfolioSummary, previous: PortfolioSummary) -> Dict[str, int]:
    """Variazione % di prenotazioni, lordo e netto rispetto al periodo precedente."""
    return {
        "bookings": percent_change(current.bookings_count, previous.bookings_count),
        "revenue": percent_change(current.revenue, previous.revenue),
        "net_revenue": percent_change(current.net_revenue, previous.net_revenue),
    }


# ── Ripartizione per canale ─────────────────────────────────────────────────

def channel_breakdown(bookings: Iterable[Booking], start: date, end: date) -> List[dict]:
    """Prenotazioni non cancellate nel periodo raggruppate per canale, ordinate per numero."""
    _check_range(start, end)
    selected = select_bookings(bookings, start, end)

    by_channel: Dict[str, dict] = {}
    for b in selected:
        name = b.channel_name or DIRECT_CHANNEL_LABEL
        row = by_channel.setdefault(name, {
            "channel": name,
            "bookings": 0,
            "revenue": 0.0,
            "commissions": 0.0,
            "net_revenue": 0.0,
        })
        f = decompose_booking(b)
        row["bookings"] += 1
        row["revenue"] += b.gross_revenue
        row["commissions"] += f.commission_amount
        row["net_revenue"] += f.net_revenue

    breakdown = []
    for row in by_channel.values():
        breakdown.append({
            **row,
            "revenue": round_cents(row["revenue"]),
            "commissions": round_cents(row["commissions"]),
            "net_revenue": round_cents(row["net_revenue"]),
            "percentage": _percent(row["bookings"], len(selected)),
        })
    # sorted() è stabile: a parità resta l'ordine di prima comparsa
    return sorted(breakdown, key=lambda r: r["bookings"], reverse=True)
