# main.py
from __future__ import annotations

from datetime import timedelta

from travel_booking.agents.travel_agent import TravelAgent
from travel_booking.models.flight import FlightFilters, FlightQuery
from travel_booking.models.hotel import HotelQuery
from travel_booking.utils.date_parser import default_departure_date
from travel_booking.utils.errors import TravelBookingError
from travel_booking.utils.logging_config import setup_logging

if __name__ == "__main__":
    agent = TravelAgent()
    setup_logging(agent.settings.log_level, agent.settings.log_format)

    typeahead = agent.city_typeahead(lambda text, cities: print(f"🔎 {text!r}: {[c.code for c in cities]}"))
    typeahead.type("Lon")
    typeahead.type("London")
    typeahead.wait()

    departure = default_departure_date()
    query = FlightQuery(origin="LAX", destination="JFK", departure_date=departure.isoformat())
    stay = HotelQuery(city="New York", check_in=departure.isoformat(), check_out=(departure + timedelta(days=3)).isoformat())
    try:
        flights = agent.flight_agent.fetch(query, FlightFilters(sort_by="price"))
        hotels = agent.hotel_agent.fetch(stay)
    except TravelBookingError as exc:
        print(f"❌ {exc}")
        raise SystemExit(1)

    if not flights:
        print("❌ No flights found for LAX → JFK")
        raise SystemExit(1)

    booking = agent.booking
    booking.set_outbound_flight(flights[0])
    if hotels:
        booking.add_lodging(agent.hotel_agent.to_lodging(hotels[0], stay))
    else:
        booking.set_skip_hotels(True)

    print(agent.output_agent.render(booking))
    booking.begin_checkout()
    print()
    print(agent.output_agent.render_confirmation(booking.confirm()))
