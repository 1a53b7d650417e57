import threading

from travel_booking.agents.city_search_agent import CityTypeahead
from travel_booking.models.city import CityOption
from travel_booking.utils.errors import RequestFailed

LONDON = [CityOption("LHR", "London Heathrow, UK")]


class FakeCityAgent:
    """Answers lookups from a table; "Lon" can be held in flight with `gate`."""

    def __init__(self, hold_short_query=False):
        self.calls = []
        self.started = threading.Event()
        self.gate = threading.Event()
        self.hold_short_query = hold_short_query

    def fetch(self, query, filters=None, cancel_token=None):
        self.calls.append(query.query)
        if query.query == "Lon":
            self.started.set()
            if self.hold_short_query:
                self.gate.wait(2)
            return [CityOption("LON", "London (all airports), UK")]
        if query.query == "Broken":
            raise RequestFailed("offline")
        return LONDON


def collect():
    published = []

    def on_results(text, cities):
        published.append((text, cities))

    return published, on_results


def test_fast_typing_sends_one_lookup():
    agent = FakeCityAgent()
    published, on_results = collect()
    typeahead = CityTypeahead(agent, on_results, delay=0.05)

    typeahead.type("Lon")
    typeahead.type("London")
    typeahead.wait(2)

    assert agent.calls == ["London"]
    assert published == [("London", LONDON)]
    assert typeahead.results == LONDON
    assert typeahead.last_query == "London"


def test_slow_answer_for_older_input_is_dropped():
    agent = FakeCityAgent(hold_short_query=True)
    published, on_results = collect()
    typeahead = CityTypeahead(agent, on_results, delay=0.01)

    typeahead.type("Lon")
    assert agent.started.wait(2)
    typeahead.type("London")
    for _ in range(200):
        if published:
            break
        threading.Event().wait(0.01)
    agent.gate.set()
    typeahead.wait(2)

    assert agent.calls == ["Lon", "London"]
    assert published == [("London", LONDON)]
    assert typeahead.results == LONDON


def test_failed_lookup_falls_back_to_static_list():
    published, on_results = collect()
    typeahead = CityTypeahead(FakeCityAgent(), on_results, delay=0.01)

    typeahead.type("Broken")
    typeahead.wait(2)

    # nothing in the static list matches
    assert published == [("Broken", [])]


def test_cancel_drops_pending_lookup():
    agent = FakeCityAgent()
    published, on_results = collect()
    typeahead = CityTypeahead(agent, on_results, delay=0.05)

    typeahead.type("London")
    typeahead.cancel()
    typeahead.wait(2)

    assert agent.calls == []
    assert published == []


def test_finished_lookups_are_not_kept():
    agent = FakeCityAgent()
    typeahead = CityTypeahead(agent, None, delay=0.01)

    for text in ("London", "Paris", "Rome", "Oslo"):
        typeahead.type(text)
        typeahead._timer.join(2)

    assert agent.calls == ["London", "Paris", "Rome", "Oslo"]
    assert len(typeahead._workers) == 1
