"""
Riparto dei costi fissi sulle proprietà per un periodo di report.

Regole:
  - costi di una proprietà → solo a quella proprietà
  - costi generici (senza proprietà) → divisi in parti UGUALI tra le proprietà
    (non pesati su incassi o posti letto)
  - mesi del periodo = giorni / 30 arrotondato, minimo 1 (approssimazione,
    non conteggio calendario)
  - una tantum esclusi (equivalente mensile = 0)
"""

import logging
import math
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional

from config import DAYS_PER_MONTH, GENERIC_COSTS_LABEL, UNCATEGORIZED_LABEL
from core.models import FixedCost, Property
from core.money import round_cents
from core.proration import monthly_equivalent, yearly_equivalent

logger = logging.getLogger(__name__)


@dataclass
class FixedCostAllocation:
    """Esito del riparto per un periodo."""
    months: int
    generic_monthly_total: float
    generic_share_per_property: float
    property_monthly: Dict[str, float] = field(default_factory=dict)
    by_property: Dict[str, float] = field(default_factory=dict)
    # Quota non attribuibile: generici senza proprietà e costi di proprietà sconosciute
    unallocated: float = 0.0

    def for_property(self, property_id: str) -> float:
        return self.by_property.get(property_id, 0.0)

    @property
    def total(self) -> float:
        return sum(self.by_property.values()) + self.unallocated


def months_in_period(start: date, end: date) -> int:
    """Mesi approssimati del periodo: round(giorni / 30), minimo 1."""
    if end < start:
        raise ValueError(f"Periodo non valido: {start} > {end}")
    days = (end - start).days
    # Arrotondamento half-up (round() di Python arrotonda al pari)
    return max(1, int(math.floor(days / DAYS_PER_MONTH + 0.5)))


def allocate_fixed_costs(
    costs: Iterable[FixedCost],
    start: date,
    end: date,
    properties: Iterable[Property],
) -> FixedCostAllocation:
    """
    Costo fisso attribuito a ogni proprietà nel periodo:
      (mensile proprietà + quota generici) × mesi
    """
    properties = list(properties)
    months = months_in_period(start, end)
    known_ids = {p.id for p in properties}

    property_monthly: Dict[str, float] = OrderedDict((p.id, 0.0) for p in properties)
    generic_monthly = 0.0
    orphan_monthly = 0.0

    for cost in costs:
        monthly = monthly_equivalent(cost.amount, cost.frequency)
        if cost.is_generic:
            generic_monthly += monthly
        elif cost.property_id in known_ids:
            property_monthly[cost.property_id] += monthly
        else:
            logger.debug("Costo %s su proprietà sconosciuta %s", cost.id, cost.property_id)
            orphan_monthly += monthly

    # Nessuna proprietà: divisore 1, la quota generica resta non attribuita
    property_count = len(properties) or 1
    generic_share = generic_monthly / property_count

    by_property = OrderedDict(
        (pid, (monthly + generic_share) * months) for pid, monthly in property_monthly.items()
    )
    unallocated = orphan_monthly * months
    if not properties:
        unallocated += generic_monthly * months

    return FixedCostAllocation(
        months=months,
        generic_monthly_total=generic_monthly,
        generic_share_per_property=generic_share,
        property_monthly=dict(property_monthly),
        by_property=dict(by_property),
        unallocated=unallocated,
    )


def fixed_cost_totals(costs: Iterable[FixedCost], property_id: Optional[str] = None) -> dict:
    """
    Statistiche costi fissi: totale mensile, totale annuale e mensile per categoria.
    Con property_id considera solo i costi di quella proprietà.
    """
    selected: List[FixedCost] = [
        c for c in costs if property_id is None or c.property_id == property_id
    ]
    by_category: Dict[str, float] = {}
    monthly_total = 0.0
    yearly_total = 0.0
    for c in selected:
        monthly = monthly_equivalent(c.amount, c.frequency)
        monthly_total += monthly
        yearly_total += yearly_equivalent(c.amount, c.frequency)
        cat = c.category or UNCATEGORIZED_LABEL
        by_category[cat] = by_category.get(cat, 0.0) + monthly

    return {
        "monthly_total": round_cents(monthly_total),
        "yearly_total": round_cents(yearly_total),
        "by_category": {k: round_cents(v) for k, v in by_category.items()},
        "count": len(selected),
    }


def costs_by_property(costs: Iterable[FixedCost], properties: Iterable[Property]) -> Dict[str, float]:
    """Mensile equivalente raggruppato per nome proprietà; i generici sotto 'Condivisi' (per primi)."""
    names = {p.id: p.name for p in properties}
    grouped: Dict[str, float] = OrderedDict()
    grouped[GENERIC_COSTS_LABEL] = 0.0
    for c in costs:
        label = GENERIC_COSTS_LABEL if c.is_generic else names.get(c.property_id, c.property_id)
        grouped[label] = grouped.get(label, 0.0) + monthly_equivalent(c.amount, c.frequency)
    return {k: round_cents(v) for k, v in grouped.items()}
