# models/booking.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from travel_booking.models.flight import Flight
from travel_booking.models.hotel import Hotel


class TripStage(str, Enum):
    SEARCHING = "searching"
    OUTBOUND_SELECTED = "outbound-selected"
    RETURN_SELECTED = "return-selected"
    LODGING_SELECTED = "lodging-selected"
    LODGING_SKIPPED = "lodging-skipped"
    CHECKOUT = "checkout"
    CONFIRMED = "confirmed"


@dataclass
class LodgingSelection:
    """A lodging line item; `price` is charged once, as captured at selection time."""
    id: int
    title: str
    price: float
    bullet_points: List[str] = field(default_factory=list)

    @classmethod
    def from_hotel(cls, hotel: Hotel, nights: int = 1) -> "LodgingSelection":
        return cls(
            id=hotel.id,
            title=hotel.name,
            price=hotel.price * max(1, nights),
            bullet_points=list(hotel.amenities[:4]),
        )


@dataclass
class BookingConfirmation:
    reference: str
    outbound_flight: Flight
    return_flight: Optional[Flight]
    lodgings: List[LodgingSelection]
    fee: float
    total: float
    confirmed_at: datetime
