# agents/travel_agent.py
from __future__ import annotations

import dataclasses
from typing import Optional

import requests

from travel_booking.agents.car_rental_agent import CarRentalAgent
from travel_booking.agents.city_search_agent import CitySearchAgent, CityTypeahead
from travel_booking.agents.destination_agent import DestinationAgent
from travel_booking.agents.details_agent import DetailsAgent
from travel_booking.agents.final_output_agent import FinalOutputAgent
from travel_booking.agents.flight_finder_agent import FlightFinderAgent
from travel_booking.agents.hotel_finder_agent import HotelFinderAgent
from travel_booking.agents.package_finder_agent import PackageFinderAgent
from travel_booking.agents.result_pager import Page, ResultPager
from travel_booking.clients.completion_client import CompletionClient
from travel_booking.clients.key_store import KeyStore
from travel_booking.clients.local_storage import LocalStorage
from travel_booking.models.flight import Flight, FlightFilters, FlightQuery
from travel_booking.stores.booking_store import BookingSession
from travel_booking.stores.preferences import PreferencesStore
from travel_booking.utils.config import Settings
from travel_booking.utils.notifications import Notifier


class TravelAgent:
    """
    Wires storage, the API key, the completion client and every search agent
    together with one booking session. The Streamlit app keeps one per
    browser session; the console demo builds its own.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        storage: Optional[LocalStorage] = None,
        notifier: Optional[Notifier] = None,
        http: Optional[requests.Session] = None,
    ):
        self.settings = settings or Settings.from_env()
        self.storage = storage or LocalStorage(self.settings.storage_path)
        self.notifier = notifier or Notifier()

        self.key_store = KeyStore(self.storage, self.settings)
        self.client = CompletionClient(self.key_store, self.settings, self.notifier, http)
        self.preferences = PreferencesStore(self.storage)
        self.booking = BookingSession(fee=self.settings.booking_fee)

        self.flight_agent = FlightFinderAgent(self.client, self.notifier)
        self.hotel_agent = HotelFinderAgent(self.client, self.notifier)
        self.car_agent = CarRentalAgent(self.client, self.notifier)
        self.package_agent = PackageFinderAgent(self.client, self.notifier)
        self.city_agent = CitySearchAgent(self.client, self.notifier)
        self.details_agent = DetailsAgent(self.client)
        self.destination_agent = DestinationAgent(self.client)
        self.output_agent = FinalOutputAgent()

    def city_typeahead(self, on_results=None) -> CityTypeahead:
        return CityTypeahead(self.city_agent, on_results, delay=self.settings.typeahead_delay)

    def flight_pager(self, query: FlightQuery, filters: Optional[FlightFilters] = None) -> ResultPager[Flight]:
        def fetch_page(page: int):
            result = self.flight_agent.search(dataclasses.replace(query, page=page), filters)
            # example flights are not a real result set to page through
            return Page(result.records, last=result.example_data)

        return ResultPager(fetch_page, page_size=query.limit)

    def save_api_key(self, value: str) -> bool:
        """Probe the key against the endpoint, then store it. Probe failures raise."""
        saved = self.key_store.validate_and_store(self.client, value)
        if saved:
            self.notifier.success("API key saved", "Your Perplexity API key has been validated and saved.")
        else:
            self.notifier.error("Invalid API key format", "Keys start with pk- or pplx- followed by at least 24 characters.")
        return saved
