from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Callable, List, Optional

import streamlit as st

from travel_booking.agents.travel_agent import TravelAgent
from travel_booking.models.booking import TripStage
from travel_booking.models.car_rental import CarRentalFilters, CarRentalQuery
from travel_booking.models.city import CityOption, CityQuery
from travel_booking.models.flight import Flight, FlightFilters, FlightQuery
from travel_booking.models.hotel import HotelFilters, HotelQuery
from travel_booking.models.travel_package import PackageFilters, PackageQuery
from travel_booking.stores.preferences import LastSearch
from travel_booking.utils.brand_images import available_hotel_chains
from travel_booking.utils.config import Settings
from travel_booking.utils.date_parser import default_departure_date
from travel_booking.utils.errors import BookingStateError, CredentialMissing, TravelBookingError
from travel_booking.utils.formatters import format_duration, format_price
from travel_booking.utils.logging_config import setup_logging
from travel_booking.utils.mock_data import CAR_FEATURES, CAR_TYPES, PACKAGE_INCLUSIONS, PACKAGE_TYPES
from travel_booking.utils.notifications import Notice, Notifier

APP_STYLE = """
<style>
:root {
  --bg: #f6f8fb;
  --panel: #ffffff;
  --text: #0f172a;
  --muted: #475569;
  --accent: #0ea5e9;
}
.main .block-container {
  padding: 1.5rem 2rem 3rem;
  background: var(--bg);
}
.hero {
  background: linear-gradient(135deg, rgba(14,165,233,0.18), rgba(34,197,94,0.14));
  border: 1px solid rgba(14,165,233,0.12);
  padding: 1.25rem 1.5rem;
  border-radius: 14px;
  margin-bottom: 1rem;
}
.hero h1 {
  margin: 0;
  color: var(--text);
}
.hero p {
  margin: 0.25rem 0 0;
  color: var(--muted);
}
.result-subtle {
  color: var(--muted);
  font-size: 0.92rem;
}
</style>
"""

TOAST_ICONS = {"info": "ℹ️", "success": "✅", "warning": "⚠️", "error": "❌"}


@st.cache_resource
def get_settings() -> Settings:
    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_format)
    return settings


def toast(notice: Notice) -> None:
    text = f"**{notice.title}**" + (f" {notice.description}" if notice.description else "")
    st.toast(text, icon=TOAST_ICONS.get(notice.level))


def get_agent() -> TravelAgent:
    # one agent per browser session so bookings never mix between users
    if "agent" not in st.session_state:
        st.session_state.agent = TravelAgent(get_settings(), notifier=Notifier(sink=toast))
    return st.session_state.agent


def after(value: Optional[date], floor: date, days: int) -> date:
    """A stored end date, unless it falls before `floor`."""
    if value and value >= floor:
        return value
    return floor + timedelta(days=days)


def guarded(action: Callable[[], Any]) -> Optional[Any]:
    """Run a search; hard failures become an inline message with the reason."""
    try:
        return action()
    except CredentialMissing:
        st.warning("Add your Perplexity API key in the sidebar to search.")
    except TravelBookingError as exc:
        st.error(f"Something went wrong: {exc}. Please try again.")
    return None


def city_picker(label: str, key: str, agent: TravelAgent, default: Optional[CityOption]) -> Optional[CityOption]:
    text = st.text_input(f"{label} (city or airport)", value=default.name if default else "", key=f"{key}_text")
    options: List[CityOption] = []
    if default:
        options.append(default)
    options += [c for c in agent.preferences.recent_locations() if not default or c.code != default.code]
    if text and (not default or text != default.name):
        lookups = st.session_state.setdefault("city_lookups", {})
        if text not in lookups:
            lookups[text] = agent.city_agent.fetch(CityQuery(query=text))
        found = lookups[text]
        options = found + [c for c in options if c.code not in {f.code for f in found}]
    if not options:
        return None
    choice = st.selectbox(label, options, format_func=lambda c: f"{c.name} ({c.code})", key=f"{key}_choice")
    return choice


def sidebar(agent: TravelAgent) -> None:
    st.sidebar.header("Settings")
    if agent.key_store.centralized:
        st.sidebar.success("Using the operator's API key.")
        return
    if agent.key_store.present():
        st.sidebar.success("API key saved.")
        if st.sidebar.button("Remove API key"):
            agent.key_store.remove()
            agent.notifier.info("API key removed")
            st.rerun()
    candidate = st.sidebar.text_input("Perplexity API key", type="password", placeholder="pplx-...")
    if st.sidebar.button("Validate and save", disabled=not candidate):
        with st.sidebar:
            with st.spinner("Checking your key..."):
                guarded(lambda: agent.save_api_key(candidate))


def flight_card(
    flight: Flight,
    button_key: str,
    on_select: Callable[[Flight], None],
    agent: Optional[TravelAgent] = None,
) -> None:
    with st.container(border=True):
        left, right = st.columns([4, 1])
        left.markdown(f"**{flight.airline}** {flight.flight_number} | {flight.summary}")
        stops = "Nonstop" if flight.stops == 0 else f"{flight.stops} stop(s)"
        left.markdown(
            f"<span class='result-subtle'>{format_duration(flight.duration)} · {stops} · "
            f"{flight.cabin.title()} · {flight.aircraft}</span>",
            unsafe_allow_html=True,
        )
        right.markdown(f"### {format_price(flight.price)}")
        if right.button("Select", key=button_key):
            on_select(flight)
            st.rerun()
        if agent is not None and flight.booking_link and right.button("Details", key=f"{button_key}_details"):
            details = guarded(lambda: agent.details_agent.flight_details(flight))
            if details is not None:
                left.json(details)


def flight_filters(key: str, flights: List[Flight]) -> FlightFilters:
    with st.expander("Filters"):
        c1, c2, c3 = st.columns(3)
        min_price = c1.number_input("Min price", min_value=0, value=0, key=f"{key}_min")
        max_price = c2.number_input("Max price", min_value=0, value=0, key=f"{key}_max")
        max_stops = c3.selectbox("Max stops", [None, 0, 1, 2], format_func=lambda s: "Any" if s is None else str(s), key=f"{key}_stops")
        cabin = c1.selectbox("Cabin", ["", "ECONOMY", "PREMIUM", "BUSINESS", "FIRST"], key=f"{key}_cabin")
        # every listed airline must match, and a flight has one airline
        airline = c2.selectbox("Airline", [""] + sorted({f.airline for f in flights}), key=f"{key}_airline")
        sort_by = c3.radio("Sort by", ["price", "time"], horizontal=True, key=f"{key}_sort")
    return FlightFilters(
        min_price=min_price or None,
        max_price=max_price or None,
        cabin=cabin or None,
        max_stops=max_stops,
        airlines=[airline] if airline else [],
        sort_by=sort_by,
    )


def flights_tab(agent: TravelAgent) -> None:
    last = agent.preferences.last_search()
    round_trip = st.toggle("Round trip", value=agent.preferences.is_round_trip())
    col1, col2 = st.columns(2)
    with col1:
        origin = city_picker("From", "origin", agent, last.origin)
    with col2:
        destination = city_picker("To", "destination", agent, last.destination)
    d1, d2 = st.columns(2)
    departure = d1.date_input("Departure", value=last.departure_date or default_departure_date(), min_value=date.today())
    return_date = None
    if round_trip:
        return_date = d2.date_input(
            "Return", value=after(last.return_date, departure, 7), min_value=departure
        )

    if st.button("Search flights", type="primary", disabled=not (origin and destination)):
        agent.preferences.set_round_trip(round_trip)
        agent.preferences.save_last_search(LastSearch(origin, destination, departure, return_date))
        agent.preferences.add_recent_location(origin)
        agent.preferences.add_recent_location(destination)
        agent.booking.reset()
        agent.booking.set_round_trip(round_trip)
        query = FlightQuery(
            origin=origin.code,
            destination=destination.code,
            departure_date=departure.isoformat(),
            return_date=return_date.isoformat() if return_date else None,
            trip_type="roundtrip" if round_trip else "oneway",
        )
        pager = agent.flight_pager(query)
        with st.spinner("Searching flights..."):
            if guarded(pager.load_more) is not None:
                st.session_state.flight_query = query
                st.session_state.outbound_pager = pager
                st.session_state.pop("return_pager", None)

    pager = st.session_state.get("outbound_pager")
    if pager is None:
        return

    booking = agent.booking
    if booking.outbound_flight is None:
        st.subheader("Choose your outbound flight")
        filters = flight_filters("out", pager.items)
        for flight in agent.flight_agent.refine(pager.items, filters):
            flight_card(flight, f"out_{flight.id}", booking.set_outbound_flight, agent)
        if pager.has_more and st.button("Load more", disabled=pager.busy):
            with st.spinner("Loading more flights..."):
                guarded(pager.load_more)
            st.rerun()
        return

    st.success(f"Outbound: {booking.outbound_flight.summary} · {format_price(booking.outbound_flight.price)}")
    if st.button("Change outbound flight"):
        booking.set_outbound_flight(None)
        st.rerun()

    if booking.round_trip and booking.return_flight is None:
        query = st.session_state.flight_query
        if "return_pager" not in st.session_state:
            return_pager = agent.flight_pager(agent.flight_agent.return_query(query))
            with st.spinner("Searching return flights..."):
                if guarded(return_pager.load_more) is None:
                    return
            st.session_state.return_pager = return_pager
        return_pager = st.session_state.return_pager
        st.subheader("Choose your return flight")
        filters = flight_filters("ret", return_pager.items)
        for flight in agent.flight_agent.refine(return_pager.items, filters):
            flight_card(flight, f"ret_{flight.id}", booking.set_return_flight, agent)
        return

    if booking.return_flight is not None:
        st.success(f"Return: {booking.return_flight.summary} · {format_price(booking.return_flight.price)}")
    st.info("Flights selected. Continue with lodging or go to checkout.")


def hotels_tab(agent: TravelAgent) -> None:
    last = agent.preferences.last_search()
    city = st.text_input("City", value=last.destination.name.split(",")[0] if last.destination else "")
    c1, c2 = st.columns(2)
    check_in = c1.date_input("Check-in", value=last.departure_date or default_departure_date(), key="hotel_in")
    check_out = c2.date_input(
        "Check-out", value=after(last.return_date, check_in, 3), min_value=check_in, key="hotel_out"
    )

    with st.expander("Filters"):
        f1, f2, f3 = st.columns(3)
        filters = HotelFilters(
            min_price=f1.number_input("Min per night", min_value=0, value=0) or None,
            max_price=f2.number_input("Max per night", min_value=0, value=0) or None,
            min_rating=f3.slider("Min rating", 0.0, 5.0, 0.0, 0.5) or None,
            amenities=st.multiselect("Amenities", ["Free WiFi", "Breakfast", "Pool", "Spa", "Fitness Center", "Parking"]),
            hotel_chains=st.multiselect("Hotel chains", available_hotel_chains()),
        )

    if city:
        blurbs = st.session_state.setdefault("blurbs", {})
        if city not in blurbs:
            blurbs[city] = agent.destination_agent.run(city)
        with st.expander(f"About {city}"):
            st.write(blurbs[city])

    query = HotelQuery(city=city, check_in=check_in.isoformat(), check_out=check_out.isoformat())
    if st.button("Search hotels", type="primary", disabled=not city):
        with st.spinner("Searching hotels..."):
            hotels = guarded(lambda: agent.hotel_agent.fetch(query, filters))
        if hotels is not None:
            st.session_state.hotels = (query, hotels)

    booking = agent.booking
    skip = st.checkbox("Skip hotels", value=booking.skip_hotels)
    if skip != booking.skip_hotels:
        booking.set_skip_hotels(skip)

    if "hotels" not in st.session_state:
        return
    query, hotels = st.session_state.hotels
    chosen = {item.id for item in booking.lodgings}
    if not hotels:
        st.info("No hotels match these filters.")
    for hotel in hotels:
        with st.container(border=True):
            img, body, action = st.columns([1, 3, 1])
            img.image(hotel.image)
            body.markdown(f"**{hotel.name}** · ⭐ {hotel.rating}")
            body.markdown(f"<span class='result-subtle'>{hotel.location} · {', '.join(hotel.amenities[:4])}</span>", unsafe_allow_html=True)
            body.caption(hotel.description)
            action.markdown(f"**{format_price(hotel.price)}** / night")
            if hotel.id in chosen:
                if action.button("Remove", key=f"hotel_rm_{hotel.id}"):
                    booking.remove_lodging(hotel.id)
                    st.rerun()
            elif action.button("Add", key=f"hotel_add_{hotel.id}"):
                booking.add_lodging(agent.hotel_agent.to_lodging(hotel, query))
                st.rerun()
            if action.button("Details", key=f"hotel_details_{hotel.id}"):
                details = guarded(lambda: agent.details_agent.hotel_details(hotel))
                if details is not None:
                    st.json(details)


def cars_tab(agent: TravelAgent) -> None:
    last = agent.preferences.last_search()
    location = st.text_input("Pickup location", value=last.destination.code if last.destination else "", key="car_loc")
    c1, c2 = st.columns(2)
    pickup = c1.date_input("Pickup", value=last.departure_date or default_departure_date(), key="car_pickup")
    dropoff = c2.date_input("Return", value=after(last.return_date, pickup, 3), min_value=pickup, key="car_return")
    with st.expander("Filters"):
        f1, f2, f3 = st.columns(3)
        filters = CarRentalFilters(
            car_type=f1.selectbox("Car type", [""] + CAR_TYPES) or None,
            min_price=f2.number_input("Min per day", min_value=0, value=0, key="car_min") or None,
            max_price=f3.number_input("Max per day", min_value=0, value=0, key="car_max") or None,
            features=st.multiselect("Features", CAR_FEATURES),
        )
    if st.button("Search cars", type="primary", disabled=not location):
        query = CarRentalQuery(location=location, pickup_date=pickup.isoformat(), return_date=dropoff.isoformat())
        with st.spinner("Searching car rentals..."):
            rentals = guarded(lambda: agent.car_agent.fetch(query, filters))
        if rentals is not None:
            st.session_state.cars = rentals
    for rental in st.session_state.get("cars", []):
        with st.container(border=True):
            img, body, price = st.columns([1, 3, 1])
            img.image(rental.image)
            body.markdown(f"**{rental.company}** · {rental.car_type} · {rental.availability}")
            body.caption(f"{rental.pickup_location} → {rental.dropoff_location} · {', '.join(rental.features)}")
            price.markdown(f"**{format_price(rental.price_per_day)}** / day")
            price.caption(f"{format_price(rental.total_price)} total")


def packages_tab(agent: TravelAgent) -> None:
    last = agent.preferences.last_search()
    destination = st.text_input(
        "Destination", value=last.destination.name.split(",")[0] if last.destination else "New York", key="pkg_dest"
    )
    c1, c2 = st.columns(2)
    start = c1.date_input("Departure", value=last.departure_date or default_departure_date(), key="pkg_start")
    end = c2.date_input("Return", value=after(last.return_date, start, 7), min_value=start, key="pkg_end")
    with st.expander("Filters"):
        f1, f2, f3 = st.columns(3)
        filters = PackageFilters(
            package_type=f1.selectbox("Package type", [""] + PACKAGE_TYPES) or None,
            min_price=f2.number_input("Min total", min_value=0, value=0, key="pkg_min") or None,
            max_price=f3.number_input("Max total", min_value=0, value=0, key="pkg_max") or None,
            min_rating=st.slider("Min rating", 0.0, 5.0, 0.0, 0.5, key="pkg_rating") or None,
            inclusions=st.multiselect("Must include", PACKAGE_INCLUSIONS),
        )
    if st.button("Search packages", type="primary", disabled=not destination):
        query = PackageQuery(destination=destination, departure_date=start.isoformat(), return_date=end.isoformat())
        with st.spinner("Searching travel packages..."):
            packages = guarded(lambda: agent.package_agent.fetch(query, filters))
        if packages is not None:
            st.session_state.packages = packages
    for pkg in st.session_state.get("packages", []):
        with st.container(border=True):
            img, body, price = st.columns([1, 3, 1])
            img.image(pkg.image)
            body.markdown(f"**{pkg.name}** · {pkg.agency} · ⭐ {pkg.rating}")
            body.caption(f"{pkg.package_type} · {pkg.duration} · {', '.join(pkg.inclusions)}")
            price.markdown(f"**{format_price(pkg.total_price)}**")
            price.caption(f"{format_price(pkg.price_per_person)} per person")
            price.link_button("View", pkg.url)


def checkout_tab(agent: TravelAgent) -> None:
    booking = agent.booking
    confirmation = booking.confirmation
    if confirmation is not None and not booking.has_selection():
        st.markdown(agent.output_agent.render_confirmation(confirmation))
        if st.button("Start a new search"):
            booking.reset()
            for key in ("outbound_pager", "return_pager", "flight_query", "hotels"):
                st.session_state.pop(key, None)
            st.rerun()
        return

    st.markdown(agent.output_agent.render(booking))
    st.caption(f"Trip stage: {booking.stage.value}")
    if booking.stage is not TripStage.CHECKOUT:
        if st.button("Proceed to checkout", type="primary"):
            try:
                booking.begin_checkout()
            except BookingStateError as exc:
                st.warning(exc.message)
            else:
                st.rerun()
        return
    if st.button("Confirm booking", type="primary"):
        booking.confirm()
        agent.notifier.success("Booking confirmed", "Have a great trip!")
        st.rerun()


st.set_page_config(page_title="Travel Booking", page_icon="✈️", layout="wide")
st.markdown(APP_STYLE, unsafe_allow_html=True)
st.markdown(
    """
    <div class="hero">
      <h1>Travel Booking</h1>
      <p>Search flights, hotels, cars and packages, pick what you like, and check out in one place.</p>
    </div>
    """,
    unsafe_allow_html=True,
)

agent = get_agent()
sidebar(agent)
st.sidebar.metric("Current total", format_price(agent.booking.total()))

flights, hotels, cars, packages, checkout = st.tabs(["Flights", "Hotels", "Cars", "Packages", "Checkout"])
with flights:
    flights_tab(agent)
with hotels:
    hotels_tab(agent)
with cars:
    cars_tab(agent)
with packages:
    packages_tab(agent)
with checkout:
    checkout_tab(agent)
