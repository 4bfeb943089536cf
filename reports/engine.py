"""
Punto d'ingresso per i report: legge gli snapshot dallo store e calcola.

Nessuno stato tra una chiamata e l'altra, nessuna cache: ogni report viene
ricalcolato dalle collezioni correnti.
"""

import calendar
import logging
from datetime import date
from typing import List, Optional, Tuple

from core.models import BookingStatus
from core.store import BookingStore
from reports.period import (
    PortfolioSummary,
    PropertySummary,
    compare_periods,
    compute_property_summaries,
    previous_period,
)
from reports.tourist_tax import TaxRules, TouristTaxResult, compute_tourist_tax

logger = logging.getLogger(__name__)


class FinancialEngine:
    def __init__(self, store: BookingStore, tax_rules: Optional[TaxRules] = None):
        self.store = store
        self.tax_rules = tax_rules or TaxRules()

    def compute_property_period_summary(
        self,
        start: date,
        end: date,
        status: Optional[BookingStatus] = None,
    ) -> Tuple[List[PropertySummary], PortfolioSummary]:
        """Riepilogo per proprietà e totale portafoglio sull'intervallo [start, end]."""
        # Tutte le prenotazioni: l'occupazione conta anche i soggiorni iniziati prima di start
        bookings = self.store.list_bookings()
        return compute_property_summaries(
            bookings,
            self.store.list_properties(),
            self.store.list_fixed_costs(),
            start,
            end,
            status=status,
        )

    def compute_overview(self, start: date, end: date) -> dict:
        """Portafoglio del periodo con variazione % rispetto al periodo precedente."""
        _, current = self.compute_property_period_summary(start, end)
        prev_start, prev_end = previous_period(start, end)
        _, previous = self.compute_property_period_summary(prev_start, prev_end)
        return {
            "period": (start, end),
            "current": current,
            "previous": previous,
            "change": compare_periods(current, previous),
        }

    def compute_tourist_tax(
        self,
        year: int,
        month: int,
        property_filter: Optional[str] = None,
    ) -> TouristTaxResult:
        """Tassa di soggiorno del mese; property_filter vale solo per il riepilogo per notti."""
        if not 1 <= month <= 12:
            raise ValueError(f"Mese non valido: {month}")
        month_start = date(year, month, 1)
        month_end = date(year, month, calendar.monthrange(year, month)[1])
        # Lo store può già filtrare, ma il filtro sul mese viene comunque ripetuto
        bookings = self.store.list_bookings(start=month_start, end=month_end)
        return compute_tourist_tax(
            bookings, year, month, rules=self.tax_rules, property_filter=property_filter,
        )
