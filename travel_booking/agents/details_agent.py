import logging
from typing import Any, Optional

from travel_booking.clients.completion_client import CompletionClient
from travel_booking.models.flight import Flight
from travel_booking.models.hotel import Hotel
from travel_booking.utils.json_extract import extract_json

logger = logging.getLogger(__name__)


class DetailsAgent:
    """
    Extra information about a single flight or hotel, returned as whatever
    JSON the endpoint produced. Errors are not softened here; the caller
    decides how to show them.
    """

    def __init__(self, client: CompletionClient):
        self.client = client

    def flight_details(self, flight: Flight) -> Optional[Any]:
        if not flight.booking_link:
            return None
        logger.info("Fetching details for %s %s", flight.airline, flight.flight_number)
        system = (
            "You are a flight information API. "
            "Provide detailed information about the requested flight in JSON format."
        )
        user = (
            f"Provide detailed information about {flight.airline} flight {flight.flight_number} "
            f"from {flight.departure_airport} to {flight.arrival_airport}.\n"
            "Include details about the aircraft, in-flight services, baggage policies, "
            "and any other relevant information.\n"
            "Return the information in JSON format without any explanations."
        )
        return extract_json(self.client.complete(system, user))

    def hotel_details(self, hotel: Hotel) -> Any:
        logger.info("Fetching details for %s", hotel.name)
        system = (
            "You are a hotel information API. "
            "Provide detailed information about the requested hotel in JSON format."
        )
        user = (
            f"Provide detailed information about {hotel.name} in {hotel.location}.\n"
            "Include details about amenities, location details, check-in/check-out policies, "
            "nearby attractions, and any other relevant information.\n"
            "Also include a website URL for the hotel if available. If not available, "
            "provide a best guess for the official hotel website URL.\n"
            "Return the information in JSON format with these properties: locationDetails, checkIn, "
            "checkOut, policies, nearbyAttractions, publicTransport, parking, internetAccess, "
            "breakfastDetails, roomTypes, specialFeatures, websiteUrl.\n"
            "Return only a valid JSON object without any explanations."
        )
        return extract_json(self.client.complete(system, user))
