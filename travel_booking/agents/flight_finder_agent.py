import logging
from datetime import datetime, timedelta
from functools import cmp_to_key
from typing import Any, Dict, List, Optional, Tuple

from travel_booking.agents.search_pipeline import SearchPipeline, SearchResult, SearchStrategy
from travel_booking.clients.completion_client import CancelToken, CompletionClient
from travel_booking.models.flight import Flight, FlightFilters, FlightQuery
from travel_booking.utils.coercion import dict_or, int_or, number_or, random_price, record_id, string_list_or, text_or
from travel_booking.utils.date_parser import format_date_for_display
from travel_booking.utils.mock_data import generate_mock_flights
from travel_booking.utils.notifications import Notifier

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a flight search API that provides real and accurate flight information. "
    "Return ONLY a valid JSON array of flight data with no additional text, comments, or markdown formatting."
)

EXAMPLE_FLIGHT = """{{
      "airline": "Delta Air Lines",
      "flightNumber": "DL1234",
      "departureTime": "2023-12-10T08:30:00.000Z",
      "arrivalTime": "2023-12-10T11:45:00.000Z",
      "duration": "PT3H15M",
      "stops": 0,
      "cabin": "ECONOMY",
      "price": 299,
      "departureAirport": "{origin}",
      "arrivalAirport": "{destination}",
      "aircraft": "Boeing 737-800",
      "bookingLink": "https://www.delta.com/booking/DL1234",
      "amenities": ["Wi-Fi", "Power outlets", "In-flight entertainment"],
      "baggageAllowance": "1 carry-on, 1 personal item, first checked bag $30",
      "cancellationPolicy": "Non-refundable, changes allowed with fee",
      "onTimePerformance": "86%",
      "terminalInfo": {{
        "departure": "Terminal 2",
        "arrival": "Terminal 4"
      }}
    }}"""


def _display_date(value: str) -> str:
    try:
        return format_date_for_display(value)
    except ValueError:
        return value


def _comparable(a: datetime, b: datetime) -> Tuple[datetime, datetime]:
    if (a.tzinfo is None) != (b.tzinfo is None):
        return a.replace(tzinfo=None), b.replace(tzinfo=None)
    return a, b


def _compare(sort_by: str):
    def cmp(a: Flight, b: Flight) -> int:
        if sort_by == "time":
            da, db = a.departure, b.departure
            # flights without a parseable departure keep their place
            if da is None or db is None:
                return 0
            da, db = _comparable(da, db)
            return (da > db) - (da < db)
        return (a.price > b.price) - (a.price < b.price)
    return cmp


def sort_flights(flights: List[Flight], sort_by: str = "price") -> List[Flight]:
    """Cheapest first, or earliest departure first with sort_by="time". Stable."""
    return sorted(flights, key=cmp_to_key(_compare(sort_by)))


class FlightSearch(SearchStrategy[FlightQuery, Flight]):
    name = "flights"
    required_params = ("origin", "destination", "departure_date")
    temperature = 0.2
    max_tokens = 2000

    def describe(self, query: FlightQuery) -> str:
        text = f"{query.origin} -> {query.destination} on {query.departure_date}"
        if query.return_date:
            text += f", returning {query.return_date}"
        return text

    def build_prompt(self, query: FlightQuery, filters: Optional[FlightFilters] = None) -> Tuple[str, str]:
        kind = "round-trip" if query.trip_type == "roundtrip" else "one-way"
        when = _display_date(query.departure_date)
        if query.return_date:
            when += f" with return on {_display_date(query.return_date)}"
        example = EXAMPLE_FLIGHT.format(origin=query.origin, destination=query.destination)
        if query.page > 1:
            when += f" (results page {query.page}: list different flights than the earlier pages)"
        user = (
            f"Search for real {kind} flights from {query.origin} to {query.destination} on {when}.\n"
            f"Format the results as a JSON array of exactly {query.limit} flight options with this exact structure:\n"
            f"[\n    {example}\n]\n"
            "ONLY return a valid, parseable JSON array. Do not include any text before or after the JSON. "
            "Do not use markdown formatting or code blocks. Just return the raw JSON array."
        )
        return SYSTEM_PROMPT, user

    def normalize(self, items: List[Dict[str, Any]], query: FlightQuery) -> List[Flight]:
        now = datetime.now().replace(microsecond=0)
        flights = []
        seen_ids = set()
        for index, f in enumerate(items):
            flights.append(Flight(
                id=record_id(f.get("id"), index, seen_ids),
                airline=text_or(f.get("airline"), f"Airline {index + 1}"),
                flight_number=text_or(f.get("flightNumber"), f"FL{1000 + index}"),
                departure_time=text_or(f.get("departureTime"), now.isoformat()),
                arrival_time=text_or(f.get("arrivalTime"), (now + timedelta(hours=3)).isoformat()),
                duration=text_or(f.get("duration"), "PT3H00M"),
                stops=int_or(f.get("stops"), 0),
                cabin=text_or(f.get("cabin"), "ECONOMY"),
                price=number_or(f.get("price"), lambda: random_price(200, 500)),
                departure_airport=query.origin,
                arrival_airport=query.destination,
                aircraft=text_or(f.get("aircraft"), "Boeing 737"),
                booking_link=text_or(
                    f.get("bookingLink"),
                    f"https://www.google.com/flights?q={query.origin}+to+{query.destination}",
                ),
                amenities=string_list_or(f.get("amenities"), ["Wi-Fi", "Power outlets"]),
                baggage_allowance=text_or(f.get("baggageAllowance"), "1 carry-on, 1 personal item"),
                cancellation_policy=text_or(f.get("cancellationPolicy"), "Non-refundable, changes allowed with fee"),
                on_time_performance=text_or(f.get("onTimePerformance"), "85%"),
                terminal_info=dict_or(f.get("terminalInfo"), {"departure": "Main Terminal", "arrival": "Main Terminal"}),
                trip_type=query.trip_type,
            ))
        return flights

    def generate(self, query: FlightQuery, count: int) -> List[Flight]:
        return generate_mock_flights(query, count)

    def apply_filters(self, records: List[Flight], filters: Optional[FlightFilters] = None) -> List[Flight]:
        if filters is None:
            return list(records)
        kept = [f for f in records if filters.matches(f)]
        return sort_flights(kept, filters.sort_by)


class FlightFinderAgent:
    """
    Asks the completion endpoint for flights on one route and returns Flight records.
    Unreadable answers are replaced by example flights.
    """

    def __init__(self, client: CompletionClient, notifier: Optional[Notifier] = None):
        self.pipeline = SearchPipeline(client, FlightSearch(), notifier)

    def fetch(
        self,
        query: FlightQuery,
        filters: Optional[FlightFilters] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> List[Flight]:
        return self.pipeline.fetch(query, filters, cancel_token)

    def search(
        self,
        query: FlightQuery,
        filters: Optional[FlightFilters] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> SearchResult[Flight]:
        """Like fetch, but also says whether the flights are example data."""
        return self.pipeline.search(query, filters, cancel_token)

    def refine(self, flights: List[Flight], filters: Optional[FlightFilters] = None) -> List[Flight]:
        """Re-apply filters and sorting to flights already fetched."""
        return self.pipeline.strategy.apply_filters(flights, filters)

    def return_query(self, query: FlightQuery) -> FlightQuery:
        """The inbound leg of a round trip: same trip, origin and destination swapped."""
        if not query.return_date:
            raise ValueError("return_date is required for the return leg")
        return FlightQuery(
            origin=query.destination,
            destination=query.origin,
            departure_date=query.return_date,
            trip_type=query.trip_type,
            limit=query.limit,
        )
