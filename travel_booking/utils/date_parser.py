# utils/date_parser.py
from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import Optional, Union

import dateparser

DateLike = Union[str, date, datetime, None]

_FORMATS = ["%Y-%m-%d", "%Y/%m/%d", "%d.%m.%Y", "%m/%d/%Y"]


def parse_date(value: DateLike) -> Optional[date]:
    """
    Parses common date inputs. Supports:
    - date / datetime objects
    - YYYY-MM-DD, YYYY/MM/DD, DD.MM.YYYY, MM/DD/YYYY
    - ISO timestamps (2024-06-01T08:30:00.000Z)
    - Natural language ("June 1", "next friday") via dateparser
    If parsing fails, returns None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    v = str(value).strip()
    if not v:
        return None

    for fmt in _FORMATS:
        try:
            return datetime.strptime(v, fmt).date()
        except ValueError:
            pass

    try:
        return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    parsed = dateparser.parse(v, languages=["en"], settings={"PREFER_DATES_FROM": "future"})
    if parsed:
        return parsed.date()
    return None


def parse_datetime(value: DateLike) -> Optional[datetime]:
    """ISO timestamp parsing for flight times; tz-aware values are kept as given."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    v = str(value).strip()
    if not v:
        return None
    try:
        return datetime.fromisoformat(v.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_date_for_display(value: DateLike) -> str:
    """June 1, 2024. Raises ValueError for input that is not a date."""
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Invalid date format: {value!r}")
    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"


def default_departure_date(today: Optional[date] = None) -> date:
    return (today or date.today()) + timedelta(days=10)


def _as_datetime(value: DateLike) -> Optional[datetime]:
    parsed = parse_datetime(value)
    if parsed is not None:
        return parsed
    day = parse_date(value)
    return datetime(day.year, day.month, day.day) if day else None


def nights_between(start: DateLike, end: DateLike, minimum: int = 1) -> int:
    """Whole days between two dates, rounded up and never below `minimum`."""
    s = _as_datetime(start)
    e = _as_datetime(end)
    if s is None or e is None:
        return minimum
    if (s.tzinfo is None) != (e.tzinfo is None):
        s = s.replace(tzinfo=None)
        e = e.replace(tzinfo=None)
    days = math.ceil((e - s).total_seconds() / 86400)
    return max(minimum, days)
