# utils/brand_images.py
from __future__ import annotations

from typing import Dict, List, Optional


def _unsplash(photo_id: str) -> str:
    return f"https://images.unsplash.com/photo-{photo_id}?ixlib=rb-1.2.1&auto=format&fit=crop&w=500&q=60"


HOTEL_CHAIN_IMAGES: Dict[str, str] = {
    "Marriott": _unsplash("1566073771259-6a8506099945"),
    "Hilton": _unsplash("1551882547-ff40c63fe5fa"),
    "Hyatt": _unsplash("1564501049412-61c2a3083791"),
    "InterContinental": _unsplash("1542314831-068cd1dbfeeb"),
    "Holiday Inn": _unsplash("1584132967334-10e028bd69f7"),
    "Sheraton": _unsplash("1560448204-603b3fc33ddc"),
    "Westin": _unsplash("1576354302919-96748cb8299e"),
    "Radisson": _unsplash("1551882547-ff40c63fe5fa"),
    "Four Seasons": _unsplash("1540962351504-03099e0a754b"),
    "Ritz-Carlton": _unsplash("1586611292717-f828b167408c"),
    "Best Western": _unsplash("1596394516093-501ba68a0ba6"),
    "Wyndham": _unsplash("1559599238-308793637427"),
    "Choice Hotels": _unsplash("1520250497591-112f2f40a3f4"),
    "Accor": _unsplash("1551958219-acbc608c6377"),
    "Crowne Plaza": _unsplash("1566073771259-6a8506099945"),
    "DoubleTree": _unsplash("1512918728675-ed5a9ecdebfd"),
    "Hampton": _unsplash("1578683010236-d716f9a3f461"),
    "Embassy Suites": _unsplash("1566195992011-5f6b21e539aa"),
    "Comfort Inn": _unsplash("1551882547-ff40c63fe5fa"),
    "Courtyard": _unsplash("1566073771259-6a8506099945"),
    "Fairfield Inn": _unsplash("1564501049412-61c2a3083791"),
    "SpringHill Suites": _unsplash("1540962351504-03099e0a754b"),
    "Renaissance Hotels": _unsplash("1566195992011-5f6b21e539aa"),
    "Residence Inn": _unsplash("1584132967334-10e028bd69f7"),
}
DEFAULT_HOTEL_IMAGE = _unsplash("1566073771259-6a8506099945")

CAR_RENTAL_IMAGES: Dict[str, str] = {
    "Hertz": _unsplash("1589360510512-ddb05a345511"),
    "Enterprise": _unsplash("1554223090-7e482851df45"),
    "Avis": _unsplash("1597007066704-67bf2068d5b2"),
    "Budget": _unsplash("1551830820-330a71b99659"),
    "National": _unsplash("1583267746897-2cf66da7b86e"),
    "Alamo": _unsplash("1601514526053-7014073018ca"),
    "Sixt": _unsplash("1549317661-bd32c8ce0db2"),
    "Thrifty": _unsplash("1533473359331-0135ef1b58bf"),
    "Dollar": _unsplash("1585503418537-88331351ad99"),
    "Europcar": _unsplash("1617469226350-faa82d6a3837"),
}
DEFAULT_CAR_RENTAL_IMAGE = _unsplash("1549317661-bd32c8ce0db2")

TRAVEL_AGENCY_IMAGES: Dict[str, str] = {
    "Expedia": _unsplash("1566073771259-6a8506099945"),
    "Booking.com": _unsplash("1551882547-ff40c63fe5fa"),
    "TripAdvisor": _unsplash("1564501049412-61c2a3083791"),
    "Travelocity": _unsplash("1542314831-068cd1dbfeeb"),
    "Kayak": _unsplash("1584132967334-10e028bd69f7"),
    "Orbitz": _unsplash("1560448204-603b3fc33ddc"),
    "CheapOair": _unsplash("1576354302919-96748cb8299e"),
    "Priceline": _unsplash("1551882547-ff40c63fe5fa"),
    "Hotwire": _unsplash("1540962351504-03099e0a754b"),
    "CheapTickets": _unsplash("1586611292717-f828b167408c"),
    "TUI": _unsplash("1596394516093-501ba68a0ba6"),
    "Thomas Cook": _unsplash("1559599238-308793637427"),
    "Liberty Travel": _unsplash("1520250497591-112f2f40a3f4"),
    "Flight Centre": _unsplash("1551958219-acbc608c6377"),
    "Costco Travel": _unsplash("1566073771259-6a8506099945"),
    "AAA Travel": _unsplash("1512918728675-ed5a9ecdebfd"),
}
DEFAULT_TRAVEL_AGENCY_IMAGE = _unsplash("1530521954074-e64f6810b32d")


def match_brand(name: Optional[str], table: Dict[str, str]) -> Optional[str]:
    """First brand in table order whose name appears (case-insensitively) in `name`."""
    if not name:
        return None
    lowered = name.lower()
    for brand in table:
        if brand.lower() in lowered:
            return brand
    return None


def hotel_image(name: Optional[str]) -> str:
    brand = match_brand(name, HOTEL_CHAIN_IMAGES)
    return HOTEL_CHAIN_IMAGES[brand] if brand else DEFAULT_HOTEL_IMAGE


def car_rental_image(company: Optional[str]) -> str:
    brand = match_brand(company, CAR_RENTAL_IMAGES)
    return CAR_RENTAL_IMAGES[brand] if brand else DEFAULT_CAR_RENTAL_IMAGE


def travel_agency_image(agency: Optional[str]) -> str:
    brand = match_brand(agency, TRAVEL_AGENCY_IMAGES)
    return TRAVEL_AGENCY_IMAGES[brand] if brand else DEFAULT_TRAVEL_AGENCY_IMAGE


def available_hotel_chains() -> List[str]:
    return list(HOTEL_CHAIN_IMAGES.keys())
