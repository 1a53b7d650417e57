# models/travel_package.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from travel_booking.utils.filters import contains_all, within_range


@dataclass
class PackageQuery:
    destination: str
    departure_date: str
    return_date: str
    limit: int = 8


@dataclass
class TravelPackage:
    id: int
    name: str
    agency: str
    image: str
    package_type: str
    total_price: float
    price_per_person: float
    duration: str
    destination: str
    departure_date: str
    return_date: str
    rating: float
    inclusions: List[str]
    url: str


@dataclass
class PackageFilters:
    package_type: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_rating: Optional[float] = None
    inclusions: List[str] = field(default_factory=list)

    def matches(self, pkg: TravelPackage) -> bool:
        if self.package_type and pkg.package_type.lower() != self.package_type.lower():
            return False
        if not within_range(pkg.total_price, self.min_price, self.max_price):
            return False
        if not within_range(pkg.rating, self.min_rating, None):
            return False
        return contains_all(pkg.inclusions, self.inclusions)

    def describe(self) -> str:
        parts = []
        if self.package_type:
            parts.append(f"Package type: {self.package_type}.")
        if self.min_price or self.max_price:
            parts.append(f"Price range: {self.min_price or 0} to {self.max_price or '∞'} USD total.")
        if self.min_rating:
            parts.append(f"Minimum rating: {self.min_rating} out of 5 stars.")
        if self.inclusions:
            parts.append(f"Must include: {', '.join(self.inclusions)}.")
        return " ".join(parts)
