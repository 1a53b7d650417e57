# models/flight.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from travel_booking.utils.date_parser import parse_datetime
from travel_booking.utils.filters import contains_all, within_range
from travel_booking.utils.formatters import format_clock


@dataclass
class FlightQuery:
    origin: str
    destination: str
    departure_date: str
    return_date: Optional[str] = None
    trip_type: str = "oneway"  # or "roundtrip"
    page: int = 1
    limit: int = 10


@dataclass
class Flight:
    id: int
    airline: str
    flight_number: str
    departure_time: str  # ISO timestamp
    arrival_time: str
    duration: str  # ISO 8601, e.g. PT3H15M
    stops: int
    cabin: str
    price: float
    departure_airport: str
    arrival_airport: str
    aircraft: str = "Boeing 737"
    booking_link: str = ""
    amenities: List[str] = field(default_factory=list)
    baggage_allowance: str = ""
    cancellation_policy: str = ""
    on_time_performance: str = ""
    terminal_info: Dict[str, str] = field(default_factory=dict)
    trip_type: str = "oneway"

    @property
    def departure(self) -> Optional[datetime]:
        return parse_datetime(self.departure_time)

    @property
    def arrival(self) -> Optional[datetime]:
        return parse_datetime(self.arrival_time)

    @property
    def summary(self) -> str:
        return (
            f"{self.departure_airport} → {self.arrival_airport} "
            f"({format_clock(self.departure)} - {format_clock(self.arrival)})"
        )


@dataclass
class FlightFilters:
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    cabin: Optional[str] = None
    max_stops: Optional[int] = None
    airlines: List[str] = field(default_factory=list)
    sort_by: str = "price"  # or "time"

    def matches(self, flight: Flight) -> bool:
        if not within_range(flight.price, self.min_price, self.max_price):
            return False
        if self.max_stops is not None and flight.stops > self.max_stops:
            return False
        if self.cabin and not contains_all([flight.cabin], [self.cabin]):
            return False
        return contains_all([flight.airline], self.airlines)
