import logging
from typing import Dict

from travel_booking.clients.completion_client import CompletionClient
from travel_booking.utils.errors import TravelBookingError

logger = logging.getLogger(__name__)

FALLBACK_INFO: Dict[str, str] = {
    "New York": (
        "New York City offers iconic attractions like Times Square, Central Park, and the Statue of Liberty. "
        "The city that never sleeps has world-class museums, Broadway shows, and diverse neighborhoods to "
        "explore. Best visited in spring or fall to avoid extreme temperatures. Known for its energy, diverse "
        "food scene, and cultural experiences."
    ),
    "Los Angeles": (
        "Los Angeles is home to Hollywood, beautiful beaches, and year-round sunshine. Visit attractions like "
        "Universal Studios, the Getty Center, and the Hollywood Walk of Fame. The sprawling city offers diverse "
        "neighborhoods from Beverly Hills to Venice Beach. Best time to visit is May to October for perfect "
        "beach weather."
    ),
    "Miami": (
        "Miami features stunning beaches, vibrant nightlife, and Latin American influences. South Beach is "
        "famous for its Art Deco architecture and beach scene. Explore Wynwood Walls for street art or "
        "Everglades National Park nearby. Winter months offer perfect weather while avoiding hurricane season."
    ),
    "Chicago": (
        "Chicago boasts impressive architecture, world-class museums, and a stunning lakefront. The Windy City "
        "offers attractions like Millennium Park, Navy Pier, and the Art Institute. Known for deep-dish pizza, "
        "blues music, and sports culture. Best visited in summer and early fall for pleasant weather and "
        "outdoor activities."
    ),
    "San Francisco": (
        "San Francisco features iconic attractions like the Golden Gate Bridge, cable cars, and Alcatraz "
        "Island. The city is known for distinctive neighborhoods, Victorian architecture, and nearby wine "
        "country. Bring layers as weather can be foggy and cool year-round. Famous for its progressive culture "
        "and food scene."
    ),
}


def fallback_destination_info(destination: str) -> str:
    return FALLBACK_INFO.get(destination) or (
        f"{destination} is a popular travel destination with various attractions and experiences for visitors. "
        "Research specific points of interest before your trip and check the best seasons to visit for optimal "
        "weather conditions."
    )


class DestinationAgent:
    """Short travel blurb for a destination; any failure gives the canned paragraph."""

    def __init__(self, client: CompletionClient):
        self.client = client

    def run(self, destination: str) -> str:
        if not self.client.enabled():
            logger.info("No API key, using stored description for %s", destination)
            return fallback_destination_info(destination)

        system = (
            "You are a travel guide API. "
            "Provide concise and informative summaries about travel destinations."
        )
        user = (
            f"Provide a short paragraph about {destination} as a travel destination. Include key attractions, "
            "best time to visit, and a brief description of the atmosphere. Keep it under 150 words and "
            "focused on travel information."
        )
        try:
            content = self.client.complete(system, user, temperature=0.3, max_tokens=300)
        except TravelBookingError as e:
            logger.warning("Destination info for %s unavailable: %s", destination, e)
            return fallback_destination_info(destination)
        return content.strip() or fallback_destination_info(destination)
