import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

from travel_booking.agents.search_pipeline import SearchPipeline, SearchStrategy
from travel_booking.clients.completion_client import CancelToken, CompletionClient
from travel_booking.models.city import CityOption, CityQuery
from travel_booking.utils.errors import RequestCancelled, TravelBookingError
from travel_booking.utils.mock_data import search_fallback_destinations
from travel_booking.utils.notifications import Notifier

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a travel API that returns ONLY valid JSON arrays of city and airport information "
    "based on the query. No explanations, just data."
)

FALLBACK_LIMIT = 10


def fallback_city_search(query: Optional[str]) -> List[CityOption]:
    """Static airport lookup by code or name; the first ten airports for an empty query."""
    return search_fallback_destinations(query, FALLBACK_LIMIT)


class CitySearch(SearchStrategy[CityQuery, CityOption]):
    name = "cities"
    required_params = ("query",)
    temperature = 0.1
    max_tokens = 1000
    requires_credential = False
    soft_transport_errors = True
    announce_fallback = False

    def describe(self, query: CityQuery) -> str:
        return repr(query.query)

    def build_prompt(self, query: CityQuery, filters: Any = None) -> Tuple[str, str]:
        user = (
            f'Find airports and cities matching "{query.query}". Return results as a JSON array of objects, '
            'each with "code" (IATA airport code or city code) and "name" (full city/airport name with country).\n'
            "Return only major airports and cities. For example:\n"
            "[\n"
            '  {"code": "LAX", "name": "Los Angeles, USA"},\n'
            '  {"code": "LHR", "name": "London Heathrow, UK"},\n'
            '  {"code": "NYC", "name": "New York, USA"}\n'
            "]\n"
            f"Return exactly {query.limit} results. Only valid JSON, no explanations."
        )
        return SYSTEM_PROMPT, user

    def normalize(self, items: List[Dict[str, Any]], query: CityQuery) -> List[CityOption]:
        cities = []
        for item in items:
            code, name = item.get("code"), item.get("name")
            if isinstance(code, str) and code.strip() and isinstance(name, str) and name.strip():
                cities.append(CityOption(code=code.strip().upper(), name=name.strip()))
        return cities

    def generate(self, query: CityQuery, count: int) -> List[CityOption]:
        return search_fallback_destinations(query.query, count)

    def fallback_count(self, query: CityQuery) -> int:
        return FALLBACK_LIMIT


class CitySearchAgent:
    """City and airport lookup for the origin and destination pickers. Never fails on bad data."""

    def __init__(self, client: CompletionClient, notifier: Optional[Notifier] = None):
        self.pipeline = SearchPipeline(client, CitySearch(), notifier)

    def fetch(
        self,
        query: CityQuery,
        filters: Any = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> List[CityOption]:
        if not (query.query or "").strip():
            return fallback_city_search("")
        return self.pipeline.fetch(query, filters, cancel_token)


class CityTypeahead:
    """
    Debounced city lookup. Every keystroke replaces the pending timer and
    cancels the previous request; only the newest input may publish results.
    """

    def __init__(
        self,
        agent: CitySearchAgent,
        on_results: Optional[Callable[[str, List[CityOption]], None]] = None,
        delay: float = 0.3,
        limit: int = 5,
    ):
        self.agent = agent
        self.on_results = on_results
        self.delay = delay
        self.limit = limit
        self.results: List[CityOption] = []
        self.last_query: Optional[str] = None
        self._lock = threading.Lock()
        self._generation = 0
        self._timer: Optional[threading.Timer] = None
        self._token: Optional[CancelToken] = None
        self._workers: List[threading.Thread] = []

    def type(self, text: str) -> None:
        with self._lock:
            self._generation += 1
            generation = self._generation
            if self._timer is not None:
                self._timer.cancel()
            if self._token is not None:
                self._token.cancel()
            token = CancelToken()
            self._token = token
            self._timer = threading.Timer(self.delay, self._run, args=(text, generation, token))
            self._timer.daemon = True
            self._workers = [w for w in self._workers if w.is_alive()]
            self._workers.append(self._timer)
            self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
            if self._token is not None:
                self._token.cancel()

    def _is_latest(self, generation: int) -> bool:
        return generation == self._generation

    def _run(self, text: str, generation: int, token: CancelToken) -> None:
        if token.cancelled:
            return
        try:
            results = self.agent.fetch(CityQuery(query=text, limit=self.limit), cancel_token=token)
        except RequestCancelled:
            logger.debug("City lookup for %r superseded", text)
            return
        except TravelBookingError as e:
            logger.warning("City lookup for %r failed: %s", text, e)
            results = fallback_city_search(text)

        with self._lock:
            if not self._is_latest(generation):
                logger.debug("Dropping stale city results for %r", text)
                return
            self.results = results
            self.last_query = text
        if self.on_results is not None:
            self.on_results(text, results)

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until every started lookup has finished (used by the console demo and tests)."""
        with self._lock:
            workers = list(self._workers)
        for worker in workers:
            worker.join(timeout)
        with self._lock:
            self._workers = [w for w in self._workers if w.is_alive()]
