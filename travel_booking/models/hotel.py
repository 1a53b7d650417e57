# models/hotel.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from travel_booking.utils.filters import contains_all, within_range


@dataclass
class HotelQuery:
    city: str
    check_in: str
    check_out: str
    limit: int = 10


@dataclass
class Hotel:
    id: int
    name: str
    # per-night price; a stay total is nights * price
    price: float
    rating: float
    amenities: List[str]
    image: str
    location: str
    brand: Optional[str] = None
    description: str = ""
    booking_link: Optional[str] = None
    policies: Optional[Dict[str, Any]] = None


@dataclass
class HotelFilters:
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_rating: Optional[float] = None
    amenities: List[str] = field(default_factory=list)
    hotel_chains: List[str] = field(default_factory=list)

    def matches(self, hotel: Hotel) -> bool:
        if not within_range(hotel.price, self.min_price, self.max_price):
            return False
        if not within_range(hotel.rating, self.min_rating, None):
            return False
        # independent hotels are never excluded by a chain preference
        if self.hotel_chains and hotel.brand:
            wanted = {c.lower() for c in self.hotel_chains}
            if hotel.brand.lower() not in wanted:
                return False
        return contains_all(hotel.amenities, self.amenities)

    def describe(self) -> str:
        """Plain-language version of the filters for the search prompt."""
        parts = []
        if self.min_price or self.max_price:
            parts.append(f"Price range: {self.min_price or 0} to {self.max_price or '∞'} USD per night.")
        if self.min_rating:
            parts.append(f"Minimum rating: {self.min_rating} out of 5 stars.")
        if self.amenities:
            parts.append(f"Must include amenities: {', '.join(self.amenities)}.")
        if self.hotel_chains:
            parts.append(f"Preferred hotel chains: {', '.join(self.hotel_chains)}.")
        return " ".join(parts)
