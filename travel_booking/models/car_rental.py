# models/car_rental.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from travel_booking.utils.filters import contains_all, within_range


@dataclass
class CarRentalQuery:
    location: str
    pickup_date: str
    return_date: str
    limit: int = 8


@dataclass
class CarRental:
    id: int
    company: str
    image: str
    car_type: str
    price_per_day: float
    total_price: float
    location: str
    features: List[str]
    availability: str
    pickup_location: str
    dropoff_location: str


@dataclass
class CarRentalFilters:
    car_type: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    features: List[str] = field(default_factory=list)

    def matches(self, rental: CarRental) -> bool:
        if self.car_type and rental.car_type.lower() != self.car_type.lower():
            return False
        if not within_range(rental.price_per_day, self.min_price, self.max_price):
            return False
        return contains_all(rental.features, self.features)

    def describe(self) -> str:
        parts = []
        if self.car_type:
            parts.append(f"Car type: {self.car_type}.")
        if self.min_price or self.max_price:
            parts.append(f"Price range: {self.min_price or 0} to {self.max_price or '∞'} USD per day.")
        if self.features:
            parts.append(f"Must include features: {', '.join(self.features)}.")
        return " ".join(parts)
