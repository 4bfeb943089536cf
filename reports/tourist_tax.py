"""
Calcolo tassa di soggiorno mensile.

Regola (default in config.py):
  - solo prenotazioni da Booking.com / Airbnb; le dirette sono sempre esenti
  - € per persona per notte, massimo N notti tassabili per soggiorno
  - esenti gli ospiti sotto l'età minima al check-in
  - senza schedine ospiti → tutti gli ospiti della prenotazione sono tassati

Il mese è quello del check-in. Il riepilogo per durata soggiorno
(1 / 2 / 3+ notti) può essere filtrato per proprietà senza toccare i totali.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from config import (
    DIRECT_CHANNEL_KEYWORDS,
    NIGHTS_BUCKET_LABELS,
    TAXABLE_CHANNEL_KEYWORDS,
    TOURIST_TAX_MAX_NIGHTS,
    TOURIST_TAX_MIN_AGE,
    TOURIST_TAX_RATE,
)
from core.models import Booking
from core.money import round_cents

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxRules:
    rate_per_person_per_night: float = TOURIST_TAX_RATE
    max_taxable_nights: int = TOURIST_TAX_MAX_NIGHTS
    min_exempt_age: int = TOURIST_TAX_MIN_AGE
    taxable_keywords: Tuple[str, ...] = TAXABLE_CHANNEL_KEYWORDS
    direct_keywords: Tuple[str, ...] = DIRECT_CHANNEL_KEYWORDS


@dataclass(frozen=True)
class TaxLine:
    """Tassa dovuta per una prenotazione."""
    booking_id: str
    property_id: str
    guest_name: str
    check_in: date
    nights: int
    number_of_guests: int
    eligible_guests: int
    exempt_guests: int
    taxable_nights: int
    tax_amount: float
    channel_display: str


@dataclass
class TaxTotals:
    total_tax: float = 0.0
    total_nights: int = 0
    total_taxable_nights: int = 0
    total_all_guests: int = 0
    total_paying_guests: int = 0
    total_exempt: int = 0
    total_bookings: int = 0


@dataclass
class NightsBucket:
    label: str
    total_guests: int = 0
    paying_guests: int = 0
    exempt_guests: int = 0
    bookings: int = 0


@dataclass
class TouristTaxResult:
    year: int
    month: int
    lines: List[TaxLine]
    totals: TaxTotals
    breakdown_by_nights: Dict[str, NightsBucket]
    properties: List[str] = field(default_factory=list)   # proprietà presenti, in ordine di apparizione


def age_at(birth_date: Optional[date], reference: date) -> Optional[int]:
    """Età compiuta alla data di riferimento (differenza anno/mese/giorno)."""
    if birth_date is None:
        return None
    age = reference.year - birth_date.year
    if (reference.month, reference.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def is_taxable_channel(booking: Booking, rules: TaxRules = TaxRules()) -> bool:
    """
    True se il canale (o la sorgente iCal) è un portale tassabile e non è diretto.
    Match per substring, case-insensitive.
    """
    labels = [booking.channel_name.lower(), (booking.ical_source or "").lower()]

    def matches(keywords):
        return any(k in label for k in keywords for label in labels)

    return matches(rules.taxable_keywords) and not matches(rules.direct_keywords)


def count_guests(booking: Booking, rules: TaxRules = TaxRules()) -> Tuple[int, int]:
    """
    Returns: (eligible, exempt)

    Ospiti senza data di nascita non finiscono in nessuno dei due conteggi.
    Senza schedine: tutti gli ospiti dichiarati sono tassabili.
    """
    if not booking.guests:
        return booking.number_of_guests, 0

    eligible = exempt = 0
    for guest in booking.guests:
        age = age_at(guest.birth_date, booking.check_in)
        if age is None:
            continue
        if age >= rules.min_exempt_age:
            eligible += 1
        else:
            exempt += 1
    return eligible, exempt


def compute_tax_line(booking: Booking, rules: TaxRules = TaxRules()) -> TaxLine:
    eligible, exempt = count_guests(booking, rules)
    taxable_nights = min(booking.nights, rules.max_taxable_nights)
    return TaxLine(
        booking_id=booking.id,
        property_id=booking.property_id,
        guest_name=booking.guest_name,
        check_in=booking.check_in,
        nights=booking.nights,
        number_of_guests=booking.number_of_guests,
        eligible_guests=eligible,
        exempt_guests=exempt,
        taxable_nights=taxable_nights,
        tax_amount=round_cents(eligible * taxable_nights * rules.rate_per_person_per_night),
        channel_display=booking.channel_name or booking.ical_source or "N/A",
    )


def nights_bucket(nights: int) -> str:
    if nights == 1:
        return "1"
    if nights == 2:
        return "2"
    return "3+"


def breakdown_by_nights(lines: Iterable[TaxLine], property_id: Optional[str] = None) -> Dict[str, NightsBucket]:
    """Ospiti per durata del soggiorno; property_id filtra solo questa vista."""
    buckets = {key: NightsBucket(label=label) for key, label in NIGHTS_BUCKET_LABELS.items()}
    for line in lines:
        if property_id is not None and line.property_id != property_id:
            continue
        bucket = buckets[nights_bucket(line.nights)]
        bucket.total_guests += line.number_of_guests
        bucket.paying_guests += line.eligible_guests
        bucket.exempt_guests += line.exempt_guests
        bucket.bookings += 1
    return buckets


def compute_tourist_tax(
    bookings: Iterable[Booking],
    year: int,
    month: int,
    rules: TaxRules = TaxRules(),
    property_filter: Optional[str] = None,
) -> TouristTaxResult:
    """Tassa di soggiorno per le prenotazioni con check-in nel mese indicato."""
    if not 1 <= month <= 12:
        raise ValueError(f"Mese non valido: {month}")

    lines: List[TaxLine] = []
    for b in bookings:
        if (b.check_in.year, b.check_in.month) != (year, month):
            continue
        if not is_taxable_channel(b, rules):
            logger.debug("Prenotazione %s esclusa: canale non tassabile", b.id)
            continue
        lines.append(compute_tax_line(b, rules))

    totals = TaxTotals()
    properties: List[str] = []
    for line in lines:
        totals.total_tax += line.tax_amount
        totals.total_nights += line.nights
        totals.total_taxable_nights += line.taxable_nights
        totals.total_all_guests += line.number_of_guests
        totals.total_paying_guests += line.eligible_guests
        totals.total_exempt += line.exempt_guests
        totals.total_bookings += 1
        if line.property_id not in properties:
            properties.append(line.property_id)
    totals.total_tax = round_cents(totals.total_tax)

    logger.info(
        "Tassa di soggiorno %04d-%02d: %d prenotazioni tassabili, totale %.2f",
        year, month, totals.total_bookings, totals.total_tax,
    )
    return TouristTaxResult(
        year=year,
        month=month,
        lines=lines,
        totals=totals,
        breakdown_by_nights=breakdown_by_nights(lines, property_filter),
        properties=properties,
    )
