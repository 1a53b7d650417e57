import json
from unittest.mock import MagicMock

import pytest
import requests

from travel_booking.clients.completion_client import CompletionClient
from travel_booking.clients.key_store import STORAGE_KEY, KeyStore
from travel_booking.clients.local_storage import LocalStorage
from travel_booking.models.flight import Flight
from travel_booking.utils.config import Settings
from travel_booking.utils.notifications import Notifier

VALID_KEY = "pplx-" + "a1B2c3D4e5F6g7H8i9J0k1L2m3"


def make_response(status=200, body=None, text=None):
    """A stand-in for requests.Response with just what the client reads."""
    res = MagicMock(spec=requests.Response)
    res.status_code = status
    res.ok = 200 <= status < 300
    if body is not None:
        res.json.return_value = body
    else:
        res.json.side_effect = ValueError("no json")
    res.text = text if text is not None else json.dumps(body)
    return res


def completion(content):
    return make_response(200, {"choices": [{"message": {"role": "assistant", "content": content}}]})


def make_flight(id=1, price=300.0, **overrides):
    fields = dict(
        id=id,
        airline="Delta",
        flight_number=f"DL{100 + id}",
        departure_time="2026-05-01T08:00:00",
        arrival_time="2026-05-01T11:30:00",
        duration="PT3H30M",
        stops=0,
        cabin="Economy",
        price=price,
        departure_airport="LAX",
        arrival_airport="JFK",
    )
    fields.update(overrides)
    return Flight(**fields)


@pytest.fixture
def settings():
    return Settings(storage_path=None, timeout=30.0)


@pytest.fixture
def storage():
    return LocalStorage()


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def key_store(storage, settings):
    return KeyStore(storage, settings)


@pytest.fixture
def http():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(key_store, settings, notifier, http):
    """Completion client with a stored key and a fake HTTP session."""
    key_store.storage.set(STORAGE_KEY, VALID_KEY)
    return CompletionClient(key_store, settings, notifier, session=http)


@pytest.fixture
def keyless_client(key_store, settings, notifier, http):
    return CompletionClient(key_store, settings, notifier, session=http)
