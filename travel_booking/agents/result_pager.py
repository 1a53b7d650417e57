import dataclasses
import logging
import threading
from typing import Callable, Generic, List, NamedTuple, TypeVar, Union

from travel_booking.utils.errors import RequestCancelled

logger = logging.getLogger(__name__)

R = TypeVar("R")

PAGE_SIZE = 10


class Page(NamedTuple):
    items: list
    # no further pages, whatever the size of this one
    last: bool = False


class ResultPager(Generic[R]):
    """
    "Load more" over a page-numbered search. Records are renumbered so ids
    stay unique across pages, and a busy flag drops overlapping requests.

    Paging stops after a short page, a Page marked `last`, or a failed fetch.
    A cancelled fetch leaves paging open. `reset` starts over.
    """

    def __init__(self, fetch_page: Callable[[int], Union[List[R], Page]], page_size: int = PAGE_SIZE):
        self.fetch_page = fetch_page
        self.page_size = page_size
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        self.items: List[R] = []
        self.page = 0
        self.has_more = True
        self.busy = False

    def _renumber(self, batch: List[R], page: int) -> List[R]:
        offset = (page - 1) * self.page_size
        return [dataclasses.replace(r, id=offset + i + 1) for i, r in enumerate(batch)]

    def load_more(self) -> List[R]:
        with self._lock:
            if self.busy or not self.has_more:
                return []
            self.busy = True
            page = self.page + 1
        try:
            result = self.fetch_page(page)
        except RequestCancelled:
            raise
        except Exception:
            logger.warning("Page %d failed, no more pages will be loaded", page)
            with self._lock:
                self.has_more = False
            raise
        finally:
            with self._lock:
                self.busy = False

        if isinstance(result, Page):
            batch, last = list(result.items), result.last
        else:
            batch, last = result, False
        batch = self._renumber(batch, page)
        with self._lock:
            self.page = page
            self.items.extend(batch)
            self.has_more = not last and len(batch) >= self.page_size
        logger.info("Loaded page %d (%d results, more: %s)", page, len(batch), self.has_more)
        return batch
