# stores/preferences.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from travel_booking.clients.local_storage import LocalStorage
from travel_booking.models.city import CityOption
from travel_booking.utils.date_parser import default_departure_date, parse_date

logger = logging.getLogger(__name__)

MAX_RECENT_LOCATIONS = 10

FROM_CODE = "fromLocation"
FROM_NAME = "fromLocationName"
TO_CODE = "toLocation"
TO_NAME = "toLocationName"
DEPARTURE_DATE = "departureDate"
RETURN_DATE = "returnDate"
ROUND_TRIP = "isRoundTrip"
RECENT_LOCATIONS = "recentLocations"


@dataclass
class LastSearch:
    origin: Optional[CityOption] = None
    destination: Optional[CityOption] = None
    departure_date: Optional[date] = None
    return_date: Optional[date] = None


class PreferencesStore:
    """
    Remembers what the user searched for between sessions: the last search,
    whether it was a round trip, and the recently used locations.
    """

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def _city(self, code_key: str, name_key: str) -> Optional[CityOption]:
        code = self.storage.get(code_key)
        if not code:
            return None
        return CityOption(code=code, name=self.storage.get(name_key) or code)

    def save_last_search(self, search: LastSearch) -> None:
        if search.origin:
            self.storage.set(FROM_CODE, search.origin.code)
            self.storage.set(FROM_NAME, search.origin.name)
        if search.destination:
            self.storage.set(TO_CODE, search.destination.code)
            self.storage.set(TO_NAME, search.destination.name)
        if search.departure_date:
            self.storage.set(DEPARTURE_DATE, search.departure_date.isoformat())
        if search.return_date:
            self.storage.set(RETURN_DATE, search.return_date.isoformat())
        else:
            self.storage.remove(RETURN_DATE)

    def last_search(self, today: Optional[date] = None) -> LastSearch:
        today = today or date.today()
        departure = parse_date(self.storage.get(DEPARTURE_DATE))
        # stale dates from an old session are replaced rather than searched
        if departure is None or departure < today:
            departure = default_departure_date(today)
        return_date = parse_date(self.storage.get(RETURN_DATE))
        if return_date is not None and return_date < departure:
            return_date = None
        return LastSearch(
            origin=self._city(FROM_CODE, FROM_NAME),
            destination=self._city(TO_CODE, TO_NAME),
            departure_date=departure,
            return_date=return_date,
        )

    def is_round_trip(self) -> bool:
        return self.storage.get(ROUND_TRIP) == "true"

    def set_round_trip(self, value: bool) -> None:
        self.storage.set(ROUND_TRIP, "true" if value else "false")

    def recent_locations(self) -> List[CityOption]:
        raw = self.storage.get(RECENT_LOCATIONS)
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Dropping unreadable recent locations")
            return []
        if not isinstance(items, list):
            return []
        return [CityOption.from_dict(i) for i in items if isinstance(i, dict) and i.get("code")]

    def add_recent_location(self, city: CityOption) -> List[CityOption]:
        """Most recent first, one entry per code, at most MAX_RECENT_LOCATIONS."""
        items = [c for c in self.recent_locations() if c.code != city.code]
        items.insert(0, city)
        items = items[:MAX_RECENT_LOCATIONS]
        self.storage.set(RECENT_LOCATIONS, json.dumps([c.to_dict() for c in items]))
        return items

    def clear_recent_locations(self) -> None:
        self.storage.remove(RECENT_LOCATIONS)
