# agents/search_pipeline.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

from travel_booking.clients.completion_client import CancelToken, CompletionClient
from travel_booking.utils.errors import (
    CompletionError,
    CredentialMissing,
    ExtractionError,
    InvalidDomainData,
    MissingQueryParameter,
    RequestCancelled,
)
from travel_booking.utils.json_extract import extract_json
from travel_booking.utils.notifications import Notifier

logger = logging.getLogger(__name__)

Q = TypeVar("Q")
R = TypeVar("R")


@dataclass
class SearchResult(Generic[R]):
    records: List[R]
    # True when the records are generated examples, not endpoint results
    example_data: bool = False


class SearchStrategy(Generic[Q, R]):
    """
    Everything that differs between one kind of search and another:
    which query fields are required, the prompt, how raw objects become
    records, the example data and the filters.
    """

    name = "records"
    required_params: Sequence[str] = ()
    temperature = 0.2
    max_tokens = 2000
    # False: a missing key quietly switches to example data
    requires_credential = True
    # True: transport failures also switch to example data
    soft_transport_errors = False
    announce_fallback = True

    def build_prompt(self, query: Q, filters: Any = None) -> Tuple[str, str]:
        raise NotImplementedError

    def normalize(self, items: List[Dict[str, Any]], query: Q) -> List[R]:
        raise NotImplementedError

    def generate(self, query: Q, count: int) -> List[R]:
        raise NotImplementedError

    def apply_filters(self, records: List[R], filters: Any = None) -> List[R]:
        if filters is None:
            return list(records)
        return [r for r in records if filters.matches(r)]

    def fallback_count(self, query: Q) -> int:
        return getattr(query, "limit", 5)

    def describe(self, query: Q) -> str:
        return repr(query)


class SearchPipeline(Generic[Q, R]):
    """
    Prompt -> completion -> JSON extraction -> records -> filters.
    Text that cannot be turned into records is replaced by example data and
    the user is told so; credential and transport errors propagate unless
    the strategy says otherwise.
    """

    def __init__(self, client: CompletionClient, strategy: SearchStrategy[Q, R], notifier: Optional[Notifier] = None):
        self.client = client
        self.strategy = strategy
        self.notifier = notifier or client.notifier

    def _check_params(self, query: Q) -> None:
        for field in self.strategy.required_params:
            value = getattr(query, field, None)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise MissingQueryParameter(field)

    def _fallback(self, query: Q, reason: str) -> List[R]:
        logger.warning("Using example %s (%s)", self.strategy.name, reason)
        if self.strategy.announce_fallback:
            self.notifier.warning(
                "Using example data",
                f"We had trouble getting real-time {self.strategy.name}. Showing example {self.strategy.name} instead.",
            )
        return self.strategy.generate(query, self.strategy.fallback_count(query))

    def _to_records(self, content: str, query: Q) -> List[R]:
        data = extract_json(content)
        if not isinstance(data, list) or not data:
            raise InvalidDomainData(f"Expected a non-empty list of {self.strategy.name}")
        items = [item for item in data if isinstance(item, dict)]
        if not items:
            raise InvalidDomainData(f"No {self.strategy.name} objects in response")
        records = self.strategy.normalize(items, query)
        if not records:
            raise InvalidDomainData(f"No usable {self.strategy.name} in response")
        return records

    def fetch(self, query: Q, filters: Any = None, cancel_token: Optional[CancelToken] = None) -> List[R]:
        return self.search(query, filters, cancel_token).records

    def search(self, query: Q, filters: Any = None, cancel_token: Optional[CancelToken] = None) -> SearchResult[R]:
        self._check_params(query)
        logger.info("Searching %s: %s", self.strategy.name, self.strategy.describe(query))

        if not self.client.enabled():
            if self.strategy.requires_credential:
                self.notifier.error("API Key Missing", "Please add your Perplexity API key in settings.")
                raise CredentialMissing()
            records = self._fallback(query, "no API key")
            return SearchResult(self.strategy.apply_filters(records, filters), example_data=True)

        system_instruction, user_instruction = self.strategy.build_prompt(query, filters)
        try:
            content = self.client.complete(
                system_instruction,
                user_instruction,
                temperature=self.strategy.temperature,
                max_tokens=self.strategy.max_tokens,
                cancel_token=cancel_token,
            )
        except RequestCancelled:
            raise
        except (CompletionError, CredentialMissing) as e:
            if not self.strategy.soft_transport_errors:
                raise
            records = self._fallback(query, str(e))
            return SearchResult(self.strategy.apply_filters(records, filters), example_data=True)

        example_data = False
        try:
            records = self._to_records(content, query)
            logger.info("Found %d %s", len(records), self.strategy.name)
        except ExtractionError as e:
            records = self._fallback(query, str(e))
            example_data = True

        return SearchResult(self.strategy.apply_filters(records, filters), example_data)
