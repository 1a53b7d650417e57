import logging
from typing import Any, Dict, List, Optional, Tuple

from travel_booking.agents.search_pipeline import SearchPipeline, SearchStrategy
from travel_booking.clients.completion_client import CancelToken, CompletionClient
from travel_booking.models.booking import LodgingSelection
from travel_booking.models.hotel import Hotel, HotelFilters, HotelQuery
from travel_booking.utils.brand_images import HOTEL_CHAIN_IMAGES, hotel_image, match_brand
from travel_booking.utils.coercion import number_or, random_price, record_id, string_list_or, text_or
from travel_booking.utils.date_parser import nights_between
from travel_booking.utils.mock_data import generate_mock_hotels
from travel_booking.utils.notifications import Notifier

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a hotel booking API. Return only valid JSON arrays of hotel data based on the query."

EXAMPLE_HOTELS = """[
    {
      "id": 1,
      "name": "Grand Plaza Hotel Marriott",
      "price": 199,
      "rating": 4.5,
      "amenities": ["Free WiFi", "Pool", "Spa", "Fitness Center", "Restaurant"],
      "location": "Downtown Chicago",
      "description": "Luxury hotel in the heart of downtown with stunning city views.",
      "bookingLink": "https://www.marriott.com/hotels/travel/chiax-chicago-marriott-downtown-magnificent-mile/",
      "policies": {
        "cancellation": "Free cancellation up to 24 hours before check-in",
        "checkIn": "From 3:00 PM",
        "checkOut": "Until 11:00 AM"
      }
    },
    ...
  ]"""


class HotelSearch(SearchStrategy[HotelQuery, Hotel]):
    name = "hotels"
    required_params = ("city", "check_in", "check_out")
    max_tokens = 1500

    def describe(self, query: HotelQuery) -> str:
        return f"{query.city} from {query.check_in} to {query.check_out}"

    def build_prompt(self, query: HotelQuery, filters: Optional[HotelFilters] = None) -> Tuple[str, str]:
        requirements = filters.describe() if filters else ""
        lines = [f"Find {query.limit} hotels in {query.city} for a stay from {query.check_in} to {query.check_out}."]
        if requirements:
            lines.append(f"Filter requirements: {requirements}")
        lines += [
            "Include major hotel chains such as Marriott, Hilton, Hyatt, InterContinental, Holiday Inn, "
            "Sheraton, and other well-known brands.",
            "Return results as a JSON array with each hotel having: id, name, price (per night in USD), "
            "rating (out of 5), amenities (array of strings), location, and a brief description. "
            "Also include policies with checkin, checkout times and cancellation policy.",
            "Example format:",
            EXAMPLE_HOTELS,
            "Return only the JSON array, no explanations.",
        ]
        return SYSTEM_PROMPT, "\n".join(lines)

    def normalize(self, items: List[Dict[str, Any]], query: HotelQuery) -> List[Hotel]:
        hotels = []
        seen_ids = set()
        for index, h in enumerate(items):
            name = text_or(h.get("name"), f"Hotel {index + 1}")
            policies = h.get("policies")
            hotels.append(Hotel(
                id=record_id(h.get("id"), index, seen_ids),
                name=name,
                price=number_or(h.get("price"), lambda: random_price(150, 350), parse_strings=True),
                rating=number_or(h.get("rating"), 4.0, parse_strings=True),
                amenities=string_list_or(h.get("amenities"), ["Free WiFi", "Breakfast"]),
                image=hotel_image(name),
                location=text_or(h.get("location"), query.city),
                brand=match_brand(name, HOTEL_CHAIN_IMAGES),
                description=text_or(h.get("description"), f"Comfortable accommodations in {query.city}"),
                booking_link=text_or(h.get("bookingLink"), None),
                policies=dict(policies) if isinstance(policies, dict) else None,
            ))
        return hotels

    def generate(self, query: HotelQuery, count: int) -> List[Hotel]:
        return generate_mock_hotels(query, count)


class HotelFinderAgent:
    """
    Searches hotels for one city and stay. Prices are per night; use
    `to_lodging` to turn a chosen hotel into a booking line item for the stay.
    """

    def __init__(self, client: CompletionClient, notifier: Optional[Notifier] = None):
        self.pipeline = SearchPipeline(client, HotelSearch(), notifier)

    def fetch(
        self,
        query: HotelQuery,
        filters: Optional[HotelFilters] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> List[Hotel]:
        return self.pipeline.fetch(query, filters, cancel_token)

    def to_lodging(self, hotel: Hotel, query: HotelQuery) -> LodgingSelection:
        return LodgingSelection.from_hotel(hotel, nights_between(query.check_in, query.check_out))
