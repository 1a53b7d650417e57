import json
from datetime import date

import pytest

from travel_booking.clients.local_storage import LocalStorage
from travel_booking.models.city import CityOption
from travel_booking.stores.preferences import (
    DEPARTURE_DATE,
    MAX_RECENT_LOCATIONS,
    RECENT_LOCATIONS,
    RETURN_DATE,
    LastSearch,
    PreferencesStore,
)

TODAY = date(2026, 3, 1)


@pytest.fixture
def prefs(storage):
    return PreferencesStore(storage)


def test_last_search_round_trip(prefs):
    prefs.save_last_search(LastSearch(
        origin=CityOption("GYD", "Baku"),
        destination=CityOption("BER", "Berlin"),
        departure_date=date(2026, 3, 10),
        return_date=date(2026, 3, 17),
    ))

    search = prefs.last_search(today=TODAY)
    assert search.origin == CityOption("GYD", "Baku")
    assert search.destination == CityOption("BER", "Berlin")
    assert search.departure_date == date(2026, 3, 10)
    assert search.return_date == date(2026, 3, 17)


def test_empty_storage_defaults_departure_ten_days_out(prefs):
    search = prefs.last_search(today=TODAY)
    assert search.origin is None
    assert search.destination is None
    assert search.departure_date == date(2026, 3, 11)
    assert search.return_date is None


def test_stale_departure_is_replaced(prefs, storage):
    storage.set(DEPARTURE_DATE, "2025-12-24")
    storage.set(RETURN_DATE, "2025-12-31")

    search = prefs.last_search(today=TODAY)
    assert search.departure_date == date(2026, 3, 11)
    # the old return date now precedes the departure
    assert search.return_date is None


def test_one_way_search_clears_old_return_date(prefs, storage):
    storage.set(RETURN_DATE, "2026-04-01")
    prefs.save_last_search(LastSearch(departure_date=date(2026, 3, 20)))
    assert storage.get(RETURN_DATE) is None


def test_round_trip_flag(prefs):
    assert prefs.is_round_trip() is False
    prefs.set_round_trip(True)
    assert prefs.is_round_trip() is True
    prefs.set_round_trip(False)
    assert prefs.is_round_trip() is False


def test_recent_locations_most_recent_first_without_duplicates(prefs):
    prefs.add_recent_location(CityOption("LHR", "London"))
    prefs.add_recent_location(CityOption("CDG", "Paris"))
    recent = prefs.add_recent_location(CityOption("LHR", "London Heathrow"))

    assert [c.code for c in recent] == ["LHR", "CDG"]
    assert recent[0].name == "London Heathrow"
    assert prefs.recent_locations() == recent


def test_recent_locations_capped(prefs):
    for i in range(MAX_RECENT_LOCATIONS + 3):
        prefs.add_recent_location(CityOption(f"C{i:02d}", f"City {i}"))

    recent = prefs.recent_locations()
    assert len(recent) == MAX_RECENT_LOCATIONS
    assert recent[0].code == f"C{MAX_RECENT_LOCATIONS + 2:02d}"


def test_recent_locations_survive_restart(tmp_path):
    path = tmp_path / "storage.json"
    PreferencesStore(LocalStorage(path)).add_recent_location(CityOption("NRT", "Tokyo"))

    assert PreferencesStore(LocalStorage(path)).recent_locations() == [CityOption("NRT", "Tokyo")]


def test_unreadable_recent_locations_are_dropped(prefs, storage):
    storage.set(RECENT_LOCATIONS, "not json")
    assert prefs.recent_locations() == []
    storage.set(RECENT_LOCATIONS, json.dumps([{"name": "no code"}, {"code": "SYD", "name": "Sydney"}]))
    assert prefs.recent_locations() == [CityOption("SYD", "Sydney")]


def test_clear_recent_locations(prefs):
    prefs.add_recent_location(CityOption("DXB", "Dubai"))
    prefs.clear_recent_locations()
    assert prefs.recent_locations() == []
