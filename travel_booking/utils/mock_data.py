"""
Example data for flights, hotels, car rentals and packages, plus the static
airport list used when the city lookup is unavailable.
Used whenever the completion endpoint answers with something that cannot be
turned into records, so every generator returns exactly `count` items.
"""
from __future__ import annotations

import random
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from travel_booking.models.car_rental import CarRental, CarRentalQuery
from travel_booking.models.city import CityOption
from travel_booking.models.flight import Flight, FlightQuery
from travel_booking.models.hotel import Hotel, HotelQuery
from travel_booking.models.travel_package import PackageQuery, TravelPackage
from travel_booking.utils.brand_images import (
    CAR_RENTAL_IMAGES,
    HOTEL_CHAIN_IMAGES,
    TRAVEL_AGENCY_IMAGES,
    car_rental_image,
    hotel_image,
    travel_agency_image,
)
from travel_booking.utils.date_parser import nights_between, parse_date
from travel_booking.utils.formatters import to_iso_duration

AIRLINES = [
    "Delta Air Lines",
    "American Airlines",
    "United Airlines",
    "Southwest Airlines",
    "JetBlue Airways",
]

AIRCRAFTS = [
    "Boeing 737-800",
    "Airbus A320",
    "Boeing 787 Dreamliner",
    "Airbus A321neo",
    "Embraer E190",
]

HOTEL_AMENITIES = [
    "Free WiFi",
    "Breakfast",
    "Pool",
    "Fitness Center",
    "Spa",
    "Restaurant",
    "Parking",
    "Airport Shuttle",
]

HOTEL_AREAS = ["Downtown", "Airport", "City Center", "Riverside", "Old Town"]

CAR_TYPES = [
    "Economy", "Compact", "Mid-size", "Standard", "Full-size",
    "Premium", "Luxury", "SUV", "Minivan", "Convertible",
]

CAR_FEATURES = [
    "Automatic Transmission",
    "Air Conditioning",
    "Bluetooth",
    "Cruise Control",
    "GPS Navigation",
    "USB Charging",
    "Backup Camera",
]

PACKAGE_TYPES = [
    "All Inclusive", "Flight + Hotel", "Flight + Hotel + Car", "Cruise", "Tour",
    "Adventure", "Luxury", "Family", "Romantic", "Beach",
]

PACKAGE_INCLUSIONS = [
    "Flight",
    "Hotel",
    "Car Rental",
    "Breakfast",
    "All Meals",
    "Airport Transfer",
    "Guided Tours",
    "Activities",
    "Travel Insurance",
    "WiFi",
]

# Major airports, searched by code or name when the city lookup is unavailable
FALLBACK_DESTINATIONS = [
    CityOption("JFK", "New York (JFK), USA"),
    CityOption("LGA", "New York (LaGuardia), USA"),
    CityOption("EWR", "Newark, USA"),
    CityOption("LAX", "Los Angeles, USA"),
    CityOption("SFO", "San Francisco, USA"),
    CityOption("ORD", "Chicago, USA"),
    CityOption("MIA", "Miami, USA"),
    CityOption("DFW", "Dallas, USA"),
    CityOption("ATL", "Atlanta, USA"),
    CityOption("LAS", "Las Vegas, USA"),
    CityOption("BOS", "Boston, USA"),
    CityOption("SEA", "Seattle, USA"),
    CityOption("DEN", "Denver, USA"),
    CityOption("HNL", "Honolulu, USA"),
    CityOption("ANC", "Anchorage, USA"),
    CityOption("YYZ", "Toronto, Canada"),
    CityOption("YVR", "Vancouver, Canada"),
    CityOption("YUL", "Montreal, Canada"),
    CityOption("LHR", "London, UK"),
    CityOption("CDG", "Paris, France"),
    CityOption("FCO", "Rome, Italy"),
    CityOption("MAD", "Madrid, Spain"),
    CityOption("BCN", "Barcelona, Spain"),
    CityOption("AMS", "Amsterdam, Netherlands"),
    CityOption("FRA", "Frankfurt, Germany"),
    CityOption("MUC", "Munich, Germany"),
    CityOption("ZRH", "Zurich, Switzerland"),
    CityOption("VIE", "Vienna, Austria"),
    CityOption("SVO", "Moscow, Russia"),
    CityOption("DXB", "Dubai, UAE"),
    CityOption("DOH", "Doha, Qatar"),
    CityOption("SIN", "Singapore"),
    CityOption("BKK", "Bangkok, Thailand"),
    CityOption("HKG", "Hong Kong"),
    CityOption("PEK", "Beijing, China"),
    CityOption("PVG", "Shanghai, China"),
    CityOption("HND", "Tokyo, Japan"),
    CityOption("SYD", "Sydney, Australia"),
    CityOption("MEL", "Melbourne, Australia"),
    CityOption("AKL", "Auckland, New Zealand"),
    CityOption("GRU", "São Paulo, Brazil"),
    CityOption("EZE", "Buenos Aires, Argentina"),
    CityOption("MEX", "Mexico City, Mexico"),
    CityOption("JNB", "Johannesburg, South Africa"),
    CityOption("CPT", "Cape Town, South Africa"),
    CityOption("CAI", "Cairo, Egypt"),
    CityOption("NBO", "Nairobi, Kenya"),
    CityOption("DEL", "Delhi, India"),
    CityOption("BOM", "Mumbai, India"),
]


def _rng(rng: Optional[random.Random]) -> random.Random:
    return rng or random.Random()


def _pick_some(rng: random.Random, items: List[str], low: int, high: int) -> List[str]:
    """low..high distinct items, keeping their list order."""
    chosen = set(rng.sample(range(len(items)), rng.randint(low, high)))
    return [item for i, item in enumerate(items) if i in chosen]


def _slug(text: str, sep: str = "-") -> str:
    return sep.join(text.lower().split())


def generate_mock_flights(query: FlightQuery, count: int, rng: Optional[random.Random] = None) -> List[Flight]:
    """Generate example flights on the query's departure date."""
    rng = _rng(rng)
    day = parse_date(query.departure_date) or date.today()
    flights = []
    for i in range(count):
        airline = AIRLINES[i % len(AIRLINES)]
        departure = datetime.combine(day, time(7 + rng.randrange(10), rng.randrange(60)))
        duration = timedelta(hours=2 + rng.randrange(4), minutes=rng.randrange(60))
        arrival = departure + duration
        flight_number = f"{airline[:2].upper()}{1000 + rng.randrange(1000)}"

        flights.append(Flight(
            id=i + 1,
            airline=airline,
            flight_number=flight_number,
            departure_time=departure.isoformat(),
            arrival_time=arrival.isoformat(),
            duration=to_iso_duration(duration),
            stops=1 if rng.random() > 0.7 else 0,
            cabin="BUSINESS" if rng.random() > 0.8 else "ECONOMY",
            price=150 + rng.randrange(350),
            departure_airport=query.origin,
            arrival_airport=query.destination,
            aircraft=AIRCRAFTS[i % len(AIRCRAFTS)],
            booking_link=f"https://www.google.com/flights?q={query.origin}+to+{query.destination}",
            amenities=["Wi-Fi", "Power outlets", "In-flight entertainment"],
            baggage_allowance="1 carry-on, 1 personal item, first checked bag $30",
            cancellation_policy="Non-refundable, changes allowed with fee",
            on_time_performance=f"{80 + rng.randrange(15)}%",
            terminal_info={
                "departure": f"Terminal {1 + i % 3}",
                "arrival": f"Terminal {1 + i % 4}",
            },
            trip_type=query.trip_type,
        ))
    return flights


def generate_mock_hotels(query: HotelQuery, count: int, rng: Optional[random.Random] = None) -> List[Hotel]:
    """Generate example hotels from the known chains."""
    rng = _rng(rng)
    chains = list(HOTEL_CHAIN_IMAGES)
    hotels = []
    for i in range(count):
        chain = chains[i % len(chains)]
        area = HOTEL_AREAS[i % len(HOTEL_AREAS)]
        name = f"{chain} {query.city} {area}"
        hotels.append(Hotel(
            id=i + 1,
            name=name,
            price=90 + rng.randrange(260),
            rating=round(3.5 + rng.random() * 1.5, 1),
            amenities=_pick_some(rng, HOTEL_AMENITIES, 3, 6),
            image=hotel_image(name),
            location=f"{area}, {query.city}",
            brand=chain,
            description=f"Comfortable accommodations in {query.city}",
            policies={
                "cancellation": "Free cancellation up to 24 hours before check-in",
                "checkIn": "From 3:00 PM",
                "checkOut": "Until 11:00 AM",
            },
        ))
    return hotels


def generate_mock_car_rentals(query: CarRentalQuery, count: int, rng: Optional[random.Random] = None) -> List[CarRental]:
    rng = _rng(rng)
    companies = list(CAR_RENTAL_IMAGES)
    days = nights_between(query.pickup_date, query.return_date)
    rentals = []
    for i in range(count):
        company = companies[i % len(companies)]
        price_per_day = 25 + rng.randrange(125)
        rentals.append(CarRental(
            id=i + 1,
            company=company,
            image=car_rental_image(company),
            car_type=CAR_TYPES[rng.randrange(len(CAR_TYPES))],
            price_per_day=price_per_day,
            total_price=price_per_day * days,
            location=query.location,
            features=_pick_some(rng, CAR_FEATURES, 3, 5),
            availability="Available" if rng.random() > 0.2 else "Limited",
            pickup_location=f"{query.location} Airport",
            dropoff_location=f"{query.location} Airport",
        ))
    return rentals


def generate_mock_packages(query: PackageQuery, count: int, rng: Optional[random.Random] = None) -> List[TravelPackage]:
    rng = _rng(rng)
    agencies = list(TRAVEL_AGENCY_IMAGES)
    days = nights_between(query.departure_date, query.return_date, minimum=3)
    packages = []
    for i in range(count):
        agency = agencies[i % len(agencies)]
        package_type = PACKAGE_TYPES[rng.randrange(len(PACKAGE_TYPES))]
        total_price = 499 + rng.randrange(2500)
        inclusions = _pick_some(rng, PACKAGE_INCLUSIONS, 4, 7)
        if package_type == "All Inclusive" and "All Meals" not in inclusions:
            inclusions.append("All Meals")

        packages.append(TravelPackage(
            id=i + 1,
            name=f"{days}-Day {package_type} Package to {query.destination}",
            agency=agency,
            image=travel_agency_image(agency),
            package_type=package_type,
            total_price=total_price,
            price_per_person=round(total_price / 2),
            duration=f"{days} days",
            destination=query.destination,
            departure_date=query.departure_date,
            return_date=query.return_date,
            rating=round(3.5 + rng.random() * 1.5, 1),
            inclusions=inclusions,
            url=f"https://www.{_slug(agency, '')}.com/packages/{_slug(query.destination)}",
        ))
    return packages


def search_fallback_destinations(text: Optional[str], limit: int = 10) -> List[CityOption]:
    """Airports whose code or name contains `text`; the first `limit` airports for empty text."""
    needle = (text or "").strip().lower()
    matches = [
        c for c in FALLBACK_DESTINATIONS
        if not needle or needle in c.name.lower() or needle in c.code.lower()
    ]
    return [CityOption(c.code, c.name) for c in matches[:limit]]

