import json
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
import requests

from conftest import completion, make_flight, make_response
from travel_booking.agents.car_rental_agent import CarRentalAgent
from travel_booking.agents.city_search_agent import CitySearchAgent
from travel_booking.agents.destination_agent import DestinationAgent, fallback_destination_info
from travel_booking.agents.details_agent import DetailsAgent
from travel_booking.agents.flight_finder_agent import FlightFinderAgent, FlightSearch
from travel_booking.agents.hotel_finder_agent import HotelFinderAgent
from travel_booking.agents.package_finder_agent import PackageFinderAgent
from travel_booking.models.car_rental import CarRentalQuery
from travel_booking.models.city import CityOption, CityQuery
from travel_booking.models.flight import FlightFilters, FlightQuery
from travel_booking.models.hotel import HotelQuery
from travel_booking.models.travel_package import PackageQuery
from travel_booking.stores.booking_store import BookingSession
from travel_booking.utils.errors import (
    CredentialInvalid,
    CredentialMissing,
    MissingQueryParameter,
    RequestFailed,
    Unparseable,
)

FLIGHT_QUERY = FlightQuery(origin="LAX", destination="JFK", departure_date="2026-05-01", limit=4)
HOTEL_QUERY = HotelQuery(city="Paris", check_in="2026-05-01", check_out="2026-05-04")


def warnings_of(notifier):
    return [n for n in notifier.notices if n.level == "warning"]


class TestFlightSearch:
    def test_parses_flights_from_prose(self, client, http):
        payload = [
            {"airline": "Delta Air Lines", "flightNumber": "DL1", "price": 320, "stops": 0,
             "departureTime": "2026-05-01T08:00:00", "arrivalTime": "2026-05-01T16:30:00", "duration": "PT5H30M"},
            {"airline": "JetBlue Airways", "flightNumber": "B62", "price": 210, "stops": 1,
             "departureTime": "2026-05-01T06:00:00", "arrivalTime": "2026-05-01T15:00:00", "duration": "PT6H0M"},
        ]
        http.post.return_value = completion("Here you go:\n" + json.dumps(payload))

        flights = FlightFinderAgent(client).fetch(FLIGHT_QUERY)

        assert [f.flight_number for f in flights] == ["DL1", "B62"]
        assert [f.id for f in flights] == [1, 2]
        assert all(f.departure_airport == "LAX" and f.arrival_airport == "JFK" for f in flights)
        sent = http.post.call_args.kwargs["json"]
        assert "LAX" in sent["messages"][1]["content"]
        assert sent["temperature"] == 0.2

    def test_missing_fields_get_defaults(self):
        flights = FlightSearch().normalize([{"price": "cheap"}, {"airline": "KLM", "price": 410}], FLIGHT_QUERY)

        first = flights[0]
        assert first.airline == "Airline 1"
        assert first.flight_number == "FL1000"
        assert first.duration == "PT3H00M"
        assert first.cabin == "ECONOMY"
        assert first.stops == 0
        assert 200 <= first.price < 500
        assert first.arrival - first.departure == timedelta(hours=3)
        assert flights[1].airline == "KLM"
        assert flights[1].price == 410
        assert flights[1].flight_number == "FL1001"

    def test_ids_are_unique_within_a_batch(self):
        flights = FlightSearch().normalize([{"id": 2}, {"id": 2}, {}], FLIGHT_QUERY)
        assert [f.id for f in flights] == [2, 3, 4]

    def test_filters_and_sort_applied(self, client, http):
        payload = [
            {"airline": "Delta", "price": 450},
            {"airline": "United", "price": 199},
            {"airline": "Delta", "price": 300},
        ]
        http.post.return_value = completion(json.dumps(payload))

        flights = FlightFinderAgent(client).fetch(FLIGHT_QUERY, FlightFilters(airlines=["delta"]))

        assert [f.price for f in flights] == [300, 450]

    def test_unreadable_answer_switches_to_example_data(self, client, http, notifier):
        http.post.return_value = completion("Sorry, I cannot browse live fares.")

        flights = FlightFinderAgent(client).fetch(FLIGHT_QUERY)

        assert len(flights) == FLIGHT_QUERY.limit
        assert [n.title for n in warnings_of(notifier)] == ["Using example data"]
        assert "flights" in warnings_of(notifier)[0].description

    def test_empty_array_switches_to_example_data(self, client, http, notifier):
        http.post.return_value = completion("[]")
        assert len(FlightFinderAgent(client).fetch(FLIGHT_QUERY)) == FLIGHT_QUERY.limit
        assert len(warnings_of(notifier)) == 1

    def test_missing_parameter(self, client, http):
        query = FlightQuery(origin="LAX", destination=" ", departure_date="2026-05-01")
        with pytest.raises(MissingQueryParameter) as exc_info:
            FlightFinderAgent(client).fetch(query)
        assert exc_info.value.field == "destination"
        http.post.assert_not_called()

    def test_missing_key_is_a_hard_error(self, keyless_client, http, notifier):
        with pytest.raises(CredentialMissing):
            FlightFinderAgent(keyless_client).fetch(FLIGHT_QUERY)
        http.post.assert_not_called()
        assert [n.title for n in notifier.notices] == ["API Key Missing"]

    def test_transport_errors_propagate(self, client, http, notifier):
        http.post.return_value = make_response(401, {"error": {"message": "Invalid API key"}})
        with pytest.raises(CredentialInvalid):
            FlightFinderAgent(client).fetch(FLIGHT_QUERY)
        assert warnings_of(notifier) == []

    def test_refine_reuses_results(self):
        agent = FlightFinderAgent(MagicMock())
        flights = [make_flight(1, price=500), make_flight(2, price=100)]
        assert [f.id for f in agent.refine(flights, FlightFilters(max_price=400))] == [2]
        assert [f.id for f in agent.refine(flights, FlightFilters())] == [2, 1]

    def test_return_query_swaps_route(self):
        agent = FlightFinderAgent(MagicMock())
        query = FlightQuery("LAX", "JFK", "2026-05-01", return_date="2026-05-08", trip_type="roundtrip")

        inbound = agent.return_query(query)

        assert (inbound.origin, inbound.destination) == ("JFK", "LAX")
        assert inbound.departure_date == "2026-05-08"
        assert inbound.return_date is None
        with pytest.raises(ValueError):
            agent.return_query(FLIGHT_QUERY)


class TestHotelSearch:
    def test_prices_from_strings_and_brand(self, client, http):
        payload = [
            {"name": "Hilton Paris Opera", "price": "$249", "rating": "4.5", "amenities": ["Spa"]},
            {"name": "Hotel du Nord", "price": 120, "rating": 4.1},
        ]
        http.post.return_value = completion("```json\n" + json.dumps(payload) + "\n```")

        hotels = HotelFinderAgent(client).fetch(HOTEL_QUERY)

        assert hotels[0].price == 249
        assert hotels[0].rating == 4.5
        assert hotels[0].brand == "Hilton"
        assert hotels[1].brand is None
        assert hotels[1].amenities == ["Free WiFi", "Breakfast"]
        assert http.post.call_args.kwargs["json"]["max_tokens"] == 1500

    def test_missing_key_is_a_hard_error(self, keyless_client):
        with pytest.raises(CredentialMissing):
            HotelFinderAgent(keyless_client).fetch(HOTEL_QUERY)

    def test_to_lodging_charges_the_whole_stay(self, client, http):
        http.post.return_value = completion(json.dumps([{"name": "Inn", "price": 100, "amenities": ["Pool"]}]))
        agent = HotelFinderAgent(client)
        hotel = agent.fetch(HOTEL_QUERY)[0]

        lodging = agent.to_lodging(hotel, HOTEL_QUERY)

        assert lodging.price == 300
        assert lodging.title == "Inn"
        assert lodging.bullet_points == ["Pool"]

    def test_repeated_ids_are_renumbered(self, client, http):
        payload = [{"id": 1, "name": "Hilton A"}, {"id": 1, "name": "Marriott B"}, {"id": "2", "name": "Hyatt C"}]
        http.post.return_value = completion(json.dumps(payload))
        agent = HotelFinderAgent(client)
        hotels = agent.fetch(HOTEL_QUERY)

        assert [h.id for h in hotels] == [1, 2, 3]

        session = BookingSession(fee=25.0)
        for hotel in hotels:
            session.add_lodging(agent.to_lodging(hotel, HOTEL_QUERY))
        session.remove_lodging(hotels[0].id)
        assert [item.title for item in session.lodgings] == ["Marriott B", "Hyatt C"]


class TestCarAndPackageSearch:
    def test_car_total_is_price_per_day_times_days(self, client, http):
        payload = [{"company": "Hertz", "carType": "SUV", "pricePerDay": 60}, {"company": "Avis", "pricePerDay": "cheap"}]
        http.post.return_value = completion(json.dumps(payload))

        rentals = CarRentalAgent(client).fetch(CarRentalQuery("Denver", "2026-05-01", "2026-05-04"))

        assert rentals[0].total_price == 180
        assert 35 <= rentals[1].price_per_day < 100
        assert rentals[1].total_price == rentals[1].price_per_day * 3
        assert rentals[1].car_type == "Standard"

    def test_package_fallback_on_bad_answer(self, client, http, notifier):
        http.post.return_value = completion('{"message": "no packages"}')

        packages = PackageFinderAgent(client).fetch(PackageQuery("Cancun", "2026-06-01", "2026-06-08", limit=3))

        assert len(packages) == 3
        assert "travel packages" in warnings_of(notifier)[0].description


class TestCitySearch:
    def test_cities_from_answer(self, client, http):
        http.post.return_value = completion('[{"code": "lhr", "name": "London Heathrow, UK"}, {"code": 5}]')

        cities = CitySearchAgent(client).fetch(CityQuery("London"))

        assert cities == [CityOption("LHR", "London Heathrow, UK")]
        sent = http.post.call_args.kwargs["json"]
        assert sent["temperature"] == 0.1
        assert sent["max_tokens"] == 1000

    def test_no_key_uses_static_list_quietly(self, keyless_client, http, notifier):
        cities = CitySearchAgent(keyless_client).fetch(CityQuery("paris"))

        assert cities == [CityOption("CDG", "Paris, France")]
        http.post.assert_not_called()
        assert notifier.notices == []

    def test_transport_failure_uses_static_list(self, client, http):
        http.post.side_effect = requests.ConnectionError("offline")
        assert CitySearchAgent(client).fetch(CityQuery("tokyo")) == [CityOption("HND", "Tokyo, Japan")]

    def test_unmatched_query_with_bad_answer_is_empty(self, client, http, notifier):
        http.post.return_value = completion("no idea")
        assert CitySearchAgent(client).fetch(CityQuery("Xyzzy")) == []
        assert warnings_of(notifier) == []

    def test_blank_query_skips_the_endpoint(self, client, http):
        cities = CitySearchAgent(client).fetch(CityQuery("  "))
        assert len(cities) == 10
        http.post.assert_not_called()


class TestDetailsAndDestination:
    def test_flight_without_link_has_no_details(self, client, http):
        assert DetailsAgent(client).flight_details(make_flight(booking_link="")) is None
        http.post.assert_not_called()

    def test_flight_details(self, client, http):
        http.post.return_value = completion('Info: {"aircraft": "A321neo"}')
        details = DetailsAgent(client).flight_details(make_flight(booking_link="https://example.com/DL1"))
        assert details == {"aircraft": "A321neo"}

    def test_hotel_details_errors_are_not_softened(self, client, http):
        http.post.return_value = completion("nothing useful")
        hotel = HotelFinderAgent(MagicMock()).pipeline.strategy.generate(HOTEL_QUERY, 1)[0]
        with pytest.raises(Unparseable):
            DetailsAgent(client).hotel_details(hotel)

    def test_destination_without_key(self, keyless_client, http):
        assert DestinationAgent(keyless_client).run("Miami") == fallback_destination_info("Miami")
        http.post.assert_not_called()

    def test_destination_failure_uses_generic_blurb(self, client, http):
        http.post.return_value = make_response(500, {"error": {"message": "boom"}})
        text = DestinationAgent(client).run("Lisbon")
        assert text.startswith("Lisbon is a popular travel destination")

    def test_destination_from_answer(self, client, http):
        http.post.return_value = completion("  Lisbon is sunny.  ")
        assert DestinationAgent(client).run("Lisbon") == "Lisbon is sunny."
        sent = http.post.call_args.kwargs["json"]
        assert (sent["temperature"], sent["max_tokens"]) == (0.3, 300)


def test_request_failed_keeps_status(client, http):
    http.post.return_value = make_response(503, {"error": "overloaded"})
    with pytest.raises(RequestFailed) as exc_info:
        FlightFinderAgent(client).fetch(FLIGHT_QUERY)
    assert exc_info.value.status_code == 503
    assert str(exc_info.value).startswith("overloaded")
