import logging
from typing import Any, Dict, List, Optional, Tuple

from travel_booking.agents.search_pipeline import SearchPipeline, SearchStrategy
from travel_booking.clients.completion_client import CancelToken, CompletionClient
from travel_booking.models.car_rental import CarRental, CarRentalFilters, CarRentalQuery
from travel_booking.utils.brand_images import car_rental_image
from travel_booking.utils.coercion import is_number, random_price, record_id, string_list_or, text_or
from travel_booking.utils.date_parser import nights_between
from travel_booking.utils.mock_data import generate_mock_car_rentals
from travel_booking.utils.notifications import Notifier

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a car rental API. Return only valid JSON arrays of car rental data based on the query."

EXAMPLE_RENTALS = """[
    {
      "id": 1,
      "company": "Hertz",
      "carType": "Economy",
      "pricePerDay": 35,
      "features": ["Automatic Transmission", "Air Conditioning", "Bluetooth"],
      "availability": "Available",
      "pickupLocation": "JFK Airport",
      "dropoffLocation": "JFK Airport"
    },
    ...
  ]"""


class CarRentalSearch(SearchStrategy[CarRentalQuery, CarRental]):
    name = "car rentals"
    required_params = ("location", "pickup_date", "return_date")
    max_tokens = 1500

    def describe(self, query: CarRentalQuery) -> str:
        return f"{query.location} from {query.pickup_date} to {query.return_date}"

    def build_prompt(self, query: CarRentalQuery, filters: Optional[CarRentalFilters] = None) -> Tuple[str, str]:
        requirements = filters.describe() if filters else ""
        lines = [
            f"Find {query.limit} car rentals in {query.location} for pickup on {query.pickup_date} "
            f"and return on {query.return_date}."
        ]
        if requirements:
            lines.append(f"Filter requirements: {requirements}")
        lines += [
            "Include major car rental companies such as Hertz, Enterprise, Avis, Budget, National, Alamo, "
            "Sixt, Thrifty, and Dollar.",
            "Return results as a JSON array with each car rental having: id, company, carType, pricePerDay, "
            "features (array of strings), availability, pickupLocation, and dropoffLocation.",
            "Example format:",
            EXAMPLE_RENTALS,
            "Return only the JSON array, no explanations.",
        ]
        return SYSTEM_PROMPT, "\n".join(lines)

    def normalize(self, items: List[Dict[str, Any]], query: CarRentalQuery) -> List[CarRental]:
        days = nights_between(query.pickup_date, query.return_date)
        rentals = []
        seen_ids = set()
        for index, r in enumerate(items):
            company = text_or(r.get("company"), f"Car Rental {index + 1}")
            price = r.get("pricePerDay")
            price_per_day = price if is_number(price) else random_price(35, 100)
            rentals.append(CarRental(
                id=record_id(r.get("id"), index, seen_ids),
                company=company,
                image=car_rental_image(company),
                car_type=text_or(r.get("carType"), "Standard"),
                price_per_day=price_per_day,
                total_price=price_per_day * days,
                location=query.location,
                features=string_list_or(r.get("features"), ["Automatic Transmission", "Air Conditioning"]),
                availability=text_or(r.get("availability"), "Available"),
                pickup_location=text_or(r.get("pickupLocation"), f"{query.location} Airport"),
                dropoff_location=text_or(r.get("dropoffLocation"), f"{query.location} Airport"),
            ))
        return rentals

    def generate(self, query: CarRentalQuery, count: int) -> List[CarRental]:
        return generate_mock_car_rentals(query, count)


class CarRentalAgent:
    def __init__(self, client: CompletionClient, notifier: Optional[Notifier] = None):
        self.pipeline = SearchPipeline(client, CarRentalSearch(), notifier)

    def fetch(
        self,
        query: CarRentalQuery,
        filters: Optional[CarRentalFilters] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> List[CarRental]:
        return self.pipeline.fetch(query, filters, cancel_token)
