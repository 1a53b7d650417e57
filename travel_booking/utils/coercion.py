# utils/coercion.py
"""Helpers that take a field from loosely typed model output or fall back to a default."""
from __future__ import annotations

import random
from typing import Any, Callable, Dict, List, Optional, Set, Union

Default = Union[Any, Callable[[], Any]]


def _resolve(default: Default) -> Any:
    return default() if callable(default) else default


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a price
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def number_or(value: Any, default: Default, parse_strings: bool = False) -> float:
    if is_number(value):
        return value
    if parse_strings and isinstance(value, str):
        try:
            parsed = float(value.strip().lstrip("$").replace(",", ""))
        except ValueError:
            parsed = None
        # a zero parse counts as missing, same as the UI always did
        if parsed:
            return int(parsed) if parsed.is_integer() else parsed
    return _resolve(default)


def int_or(value: Any, default: Default) -> int:
    if is_number(value):
        return int(value)
    return _resolve(default)


def text_or(value: Any, default: Default) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return _resolve(default)


def string_list_or(value: Any, default: Default) -> List[str]:
    if isinstance(value, list):
        return [str(v) for v in value if v is not None]
    return list(_resolve(default))


def dict_or(value: Any, default: Default) -> Dict[str, Any]:
    if isinstance(value, dict):
        return dict(value)
    return dict(_resolve(default))


def record_id(value: Any, index: int, seen: Optional[Set[int]] = None) -> int:
    """
    Keep a usable model-supplied id, otherwise number records from 1.
    With `seen`, an id already taken in the batch is replaced by the next
    free number from `index + 1`, and the result is added to `seen`.
    """
    if is_number(value) and value:
        candidate = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        candidate = int(value.strip())
    else:
        candidate = index + 1
    if seen is None:
        return candidate
    if candidate in seen:
        candidate = index + 1
        while candidate in seen:
            candidate += 1
    seen.add(candidate)
    return candidate


def random_price(low: int, high: int, rng: Optional[random.Random] = None) -> int:
    rng = rng or random
    return low + rng.randrange(high - low)
