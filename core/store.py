"""
Interfaccia verso lo store CRUD (prenotazioni, proprietà, costi, canali).

Il motore legge solo snapshot: qualunque filtro applicato dallo store viene
comunque ripetuto dal motore.
"""

from datetime import date
from typing import Iterable, List, Optional, Protocol

from core.models import Booking, BookingStatus, Channel, FixedCost, Property


class BookingStore(Protocol):
    def list_bookings(
        self,
        property_id: Optional[str] = None,
        status: Optional[BookingStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Booking]: ...

    def list_properties(self) -> List[Property]: ...

    def list_fixed_costs(self) -> List[FixedCost]: ...

    def list_channels(self) -> List[Channel]: ...


class InMemoryStore:
    """Store su collezioni già caricate. Restituisce sempre copie delle liste."""

    def __init__(
        self,
        bookings: Iterable[Booking] = (),
        properties: Iterable[Property] = (),
        fixed_costs: Iterable[FixedCost] = (),
        channels: Iterable[Channel] = (),
    ):
        self._bookings = list(bookings)
        self._properties = list(properties)
        self._fixed_costs = list(fixed_costs)
        self._channels = list(channels)

    def list_bookings(self, property_id=None, status=None, start=None, end=None) -> List[Booking]:
        result = []
        for b in self._bookings:
            if property_id is not None and b.property_id != property_id:
                continue
            if status is not None and b.status != BookingStatus(status):
                continue
            if start is not None and b.check_in < start:
                continue
            if end is not None and b.check_in > end:
                continue
            result.append(b)
        return result

    def list_properties(self) -> List[Property]:
        return list(self._properties)

    def list_fixed_costs(self) -> List[FixedCost]:
        return list(self._fixed_costs)

    def list_channels(self) -> List[Channel]:
        return list(self._channels)
