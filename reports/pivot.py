"""
Tabelle pandas dai risultati del motore, pronte per la visualizzazione o l'export:
  - riepilogo per proprietà (con riga TOTALE)
  - tassa di soggiorno per prenotazione e per durata soggiorno
  - ripartizione per canale
  - andamento mensile degli ultimi N mesi
"""

from datetime import date
from typing import Dict, Iterable, List, Optional

import pandas as pd

from core.decomposer import decompose_booking
from core.models import Booking
from core.money import round_cents
from reports.period import PortfolioSummary, PropertySummary
from reports.tourist_tax import NightsBucket, TouristTaxResult

MONEY_COLUMNS = ["lordo", "commissioni", "netto", "costi_variabili", "costi_fissi", "margine"]
TREND_COLUMNS = ["prenotazioni", "lordo", "netto", "costi_variabili", "margine", "notti"]


def summaries_to_df(
    summaries: List[PropertySummary],
    portfolio: Optional[PortfolioSummary] = None,
) -> pd.DataFrame:
    """Una riga per proprietà, nell'ordine ricevuto; con portfolio aggiunge la riga TOTALE."""
    rows = []
    for s in summaries:
        rows.append({
            "proprieta": s.property_name,
            "prenotazioni": s.bookings_count,
            "notti": s.nights,
            "lordo": s.revenue,
            "commissioni": s.commissions,
            "netto": s.net_revenue,
            "costi_variabili": s.variable_costs,
            "costi_fissi": s.fixed_costs,
            "margine": s.margin,
            "occupazione_%": s.occupancy_rate,
            "euro_notte": s.avg_revenue_per_night,
        })
    if portfolio is not None:
        rows.append({
            "proprieta": "TOTALE",
            "prenotazioni": portfolio.bookings_count,
            "notti": portfolio.nights,
            "lordo": portfolio.revenue,
            "commissioni": portfolio.commissions,
            "netto": portfolio.net_revenue,
            "costi_variabili": portfolio.variable_costs,
            "costi_fissi": portfolio.fixed_costs,
            "margine": portfolio.margin,
            "occupazione_%": portfolio.occupancy_rate,
            "euro_notte": portfolio.avg_revenue_per_night,
        })
    return pd.DataFrame(rows)


def tax_lines_to_df(result: TouristTaxResult) -> pd.DataFrame:
    """Dettaglio tassa di soggiorno, una riga per prenotazione tassabile."""
    if not result.lines:
        return pd.DataFrame()

    rows = []
    for line in result.lines:
        rows.append({
            "check_in": line.check_in,
            "ospite": line.guest_name,
            "canale": line.channel_display,
            "notti": line.nights,
            "notti_tassabili": line.taxable_nights,
            "ospiti": line.number_of_guests,
            "paganti": line.eligible_guests,
            "esenti": line.exempt_guests,
            "tassa": line.tax_amount,
        })
    return pd.DataFrame(rows).sort_values("check_in").reset_index(drop=True)


def nights_breakdown_to_df(breakdown: Dict[str, NightsBucket]) -> pd.DataFrame:
    rows = []
    for bucket in breakdown.values():
        rows.append({
            "durata": bucket.label,
            "prenotazioni": bucket.bookings,
            "ospiti": bucket.total_guests,
            "paganti": bucket.paying_guests,
            "esenti": bucket.exempt_guests,
        })
    return pd.DataFrame(rows)


def channels_to_df(breakdown: List[dict]) -> pd.DataFrame:
    if not breakdown:
        return pd.DataFrame()
    df = pd.DataFrame(breakdown)
    return df.rename(columns={
        "channel": "canale",
        "bookings": "prenotazioni",
        "revenue": "lordo",
        "commissions": "commissioni",
        "net_revenue": "netto",
        "percentage": "percentuale",
    })


def monthly_trends(bookings: Iterable[Booking], end: date, months: int = 12) -> pd.DataFrame:
    """
    Andamento mensile (per mese di check-in) degli ultimi `months` mesi fino al mese di `end`.
    Le cancellate sono escluse; i mesi senza prenotazioni compaiono a zero.
    """
    periods = pd.period_range(end=pd.Period(year=end.year, month=end.month, freq="M"),
                              periods=months, freq="M")

    rows = []
    for b in bookings:
        if b.is_cancelled:
            continue
        f = decompose_booking(b)
        rows.append({
            "anno_mese": b.check_in.strftime("%Y-%m"),
            "prenotazioni": 1,
            "lordo": b.gross_revenue,
            "netto": f.net_revenue,
            "costi_variabili": f.variable_costs,
            "margine": f.net_margin,
            "notti": b.nights,
        })
    df = pd.DataFrame(rows, columns=["anno_mese"] + TREND_COLUMNS)

    index = [p.strftime("%Y-%m") for p in periods]
    trends = df.groupby("anno_mese")[TREND_COLUMNS].sum().reindex(index, fill_value=0)
    trends.index.name = "anno_mese"
    trends = trends.reset_index()
    trends.insert(1, "mese_label", [p.strftime("%b %Y") for p in periods])

    for col in ["prenotazioni", "notti"]:
        trends[col] = trends[col].astype(int)
    for col in ["lordo", "netto", "costi_variabili", "margine"]:
        trends[col] = trends[col].astype(float).map(round_cents)
    return trends
