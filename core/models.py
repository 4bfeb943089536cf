"""
Modelli dati: proprietà, canali, prodotti, prenotazioni, ospiti e costi fissi.

Sono snapshot immutabili forniti dallo store: il motore di calcolo li legge
e non li modifica mai.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional


class Frequency(str, Enum):
    """Ricorrenza di un costo fisso."""
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"
    ONE_TIME = "ONE_TIME"


class BookingStatus(str, Enum):
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class Property:
    """Un appartamento gestito."""
    id: str
    name: str
    bedrooms: int = 0
    bathrooms: int = 0


@dataclass(frozen=True)
class Channel:
    """Canale di vendita (Airbnb, Booking, ...) con la sua commissione."""
    id: str
    name: str
    commission_rate: float   # percentuale 0-100
    color: str = ""


@dataclass(frozen=True)
class Product:
    """Prodotto di consumo (kit cortesia, lenzuola, pulizie...)."""
    id: str
    name: str
    price: float = 0.0
    unit: str = "pz"
    package_cost: float = 0.0       # costo della confezione
    package_quantity: float = 0.0   # pezzi per confezione

    @property
    def unit_price(self) -> float:
        """Prezzo unitario: da confezione se indicata, altrimenti prezzo diretto."""
        if self.package_quantity and self.package_quantity > 1 and self.package_cost:
            return self.package_cost / self.package_quantity
        if self.package_cost:
            return self.package_cost
        return self.price


@dataclass(frozen=True)
class ProductLine:
    """Riga prodotto su una prenotazione, con prezzo congelato al momento dell'aggiunta."""
    product_id: str
    product_name: str
    quantity: float
    unit_price: float

    @classmethod
    def from_product(cls, product: Product, quantity: float) -> "ProductLine":
        return cls(
            product_id=product.id,
            product_name=product.name,
            quantity=quantity,
            unit_price=product.unit_price,
        )

    @property
    def total(self) -> float:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class Guest:
    """Ospite registrato (schedina alloggiati). Serve solo per l'età."""
    first_name: str = ""
    last_name: str = ""
    birth_date: Optional[date] = None
    document_type: str = ""
    document_number: str = ""


@dataclass(frozen=True)
class Booking:
    """Una prenotazione, da canale o diretta."""
    id: str
    property_id: str
    check_in: date
    check_out: date
    gross_revenue: float            # importo lordo pagato dall'ospite
    number_of_guests: int = 1
    status: BookingStatus = BookingStatus.CONFIRMED
    channel: Optional[Channel] = None   # None = prenotazione diretta
    guest_name: str = ""
    products: List[ProductLine] = field(default_factory=list)
    guests: List[Guest] = field(default_factory=list)
    ical_source: str = ""           # etichetta sorgente import (es. "Airbnb iCal")

    def __post_init__(self):
        # Stato sconosciuto = violazione di contratto dello store
        object.__setattr__(self, "status", BookingStatus(self.status))

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED

    @property
    def channel_name(self) -> str:
        return self.channel.name if self.channel else ""


@dataclass(frozen=True)
class FixedCost:
    """Costo fisso ricorrente: di una proprietà o generico (tutto il portafoglio)."""
    id: str
    amount: float
    frequency: Frequency
    start_date: date
    property_id: Optional[str] = None   # None = costo generico
    description: str = ""
    category: str = ""

    def __post_init__(self):
        object.__setattr__(self, "frequency", Frequency(self.frequency))

    @property
    def is_generic(self) -> bool:
        return not self.property_id
