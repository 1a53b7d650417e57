# utils/filters.py
from __future__ import annotations

from typing import Iterable, Optional, Sequence


def within_range(value: float, low: Optional[float] = None, high: Optional[float] = None) -> bool:
    """Inclusive bounds; a missing bound is open."""
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def contains_all(haystack: Iterable[str], needles: Optional[Sequence[str]]) -> bool:
    """
    Every requested value must appear as a case-insensitive substring of at
    least one of the record's own values. An empty request matches everything.
    """
    if not needles:
        return True
    lowered = [str(h).lower() for h in haystack if h is not None]
    return all(any(str(n).lower() in h for h in lowered) for n in needles)
