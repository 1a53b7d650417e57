import logging
import random
from typing import Any, Dict, List, Optional, Tuple

from travel_booking.agents.search_pipeline import SearchPipeline, SearchStrategy
from travel_booking.clients.completion_client import CancelToken, CompletionClient
from travel_booking.models.travel_package import PackageFilters, PackageQuery, TravelPackage
from travel_booking.utils.brand_images import travel_agency_image
from travel_booking.utils.coercion import number_or, random_price, record_id, string_list_or, text_or
from travel_booking.utils.date_parser import nights_between
from travel_booking.utils.mock_data import generate_mock_packages
from travel_booking.utils.notifications import Notifier

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a travel package API. Return only valid JSON arrays of travel package data based on the query."
)

EXAMPLE_PACKAGES = """[
    {
      "id": 1,
      "name": "7-Day All Inclusive Paris Getaway",
      "agency": "Expedia",
      "packageType": "All Inclusive",
      "totalPrice": 1299,
      "pricePerPerson": 649,
      "duration": "7 days",
      "rating": 4.5,
      "inclusions": ["Flight", "Hotel", "Meals", "Activities"],
      "url": "https://www.expedia.com/packages/paris-all-inclusive"
    },
    ...
  ]"""


def _package_url(agency: str, destination: str) -> str:
    return f"https://www.{''.join(agency.lower().split())}.com/packages/{'-'.join(destination.lower().split())}"


class PackageSearch(SearchStrategy[PackageQuery, TravelPackage]):
    name = "travel packages"
    required_params = ("destination", "departure_date", "return_date")
    max_tokens = 1500

    def describe(self, query: PackageQuery) -> str:
        return f"{query.destination} from {query.departure_date} to {query.return_date}"

    def build_prompt(self, query: PackageQuery, filters: Optional[PackageFilters] = None) -> Tuple[str, str]:
        days = nights_between(query.departure_date, query.return_date)
        requirements = filters.describe() if filters else ""
        lines = [
            f"Find {query.limit} travel packages to {query.destination} for {days} days starting on "
            f"{query.departure_date} and ending on {query.return_date}."
        ]
        if requirements:
            lines.append(f"Filter requirements: {requirements}")
        lines += [
            "Include major travel agencies such as Expedia, TripAdvisor, Booking.com, Travelocity, and Kayak.",
            "Return results as a JSON array with each package having: id, name, agency, packageType, "
            "totalPrice, pricePerPerson, duration, rating (out of 5), inclusions (array of strings), and url.",
            "Example format:",
            EXAMPLE_PACKAGES,
            "Return only the JSON array, no explanations.",
        ]
        return SYSTEM_PROMPT, "\n".join(lines)

    def normalize(self, items: List[Dict[str, Any]], query: PackageQuery) -> List[TravelPackage]:
        days = nights_between(query.departure_date, query.return_date)
        packages = []
        seen_ids = set()
        for index, p in enumerate(items):
            agency = text_or(p.get("agency"), f"Travel Agency {index + 1}")
            packages.append(TravelPackage(
                id=record_id(p.get("id"), index, seen_ids),
                name=text_or(p.get("name"), f"{days}-Day Package to {query.destination}"),
                agency=agency,
                image=travel_agency_image(agency),
                package_type=text_or(p.get("packageType"), "Flight + Hotel"),
                total_price=number_or(p.get("totalPrice"), lambda: random_price(699, 1899)),
                price_per_person=number_or(p.get("pricePerPerson"), lambda: round(random_price(699, 1899) / 2)),
                duration=text_or(p.get("duration"), f"{days} days"),
                destination=query.destination,
                departure_date=query.departure_date,
                return_date=query.return_date,
                rating=number_or(p.get("rating"), lambda: round(3.5 + random.random() * 1.5, 1)),
                inclusions=string_list_or(p.get("inclusions"), ["Flight", "Hotel"]),
                url=text_or(p.get("url"), _package_url(agency, query.destination)),
            ))
        return packages

    def generate(self, query: PackageQuery, count: int) -> List[TravelPackage]:
        return generate_mock_packages(query, count)


class PackageFinderAgent:
    def __init__(self, client: CompletionClient, notifier: Optional[Notifier] = None):
        self.pipeline = SearchPipeline(client, PackageSearch(), notifier)

    def fetch(
        self,
        query: PackageQuery,
        filters: Optional[PackageFilters] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> List[TravelPackage]:
        return self.pipeline.fetch(query, filters, cancel_token)
