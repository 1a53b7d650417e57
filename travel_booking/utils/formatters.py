# utils/formatters.py
from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Optional

_HOURS = re.compile(r"(\d+)H")
_MINUTES = re.compile(r"(\d+)M")


def parse_iso_duration(duration: Optional[str]) -> Optional[timedelta]:
    """PT5H30M -> timedelta(hours=5, minutes=30). None when neither part is present."""
    if not duration or not isinstance(duration, str):
        return None
    hours = _HOURS.search(duration)
    minutes = _MINUTES.search(duration)
    if not hours and not minutes:
        return None
    return timedelta(
        hours=int(hours.group(1)) if hours else 0,
        minutes=int(minutes.group(1)) if minutes else 0,
    )


def to_iso_duration(delta: timedelta) -> str:
    total_minutes = int(delta.total_seconds() // 60)
    return f"PT{total_minutes // 60}H{total_minutes % 60}M"


def format_duration(duration: Optional[str]) -> str:
    """PT5H30M -> 5h 30m"""
    if not isinstance(duration, str):
        return "Duration unavailable"
    hours = _HOURS.search(duration)
    minutes = _MINUTES.search(duration)
    return f"{hours.group(1) if hours else '0'}h {minutes.group(1) if minutes else '0'}m"


def format_clock(value: Optional[datetime]) -> str:
    return value.strftime("%H:%M") if value else "--:--"


def format_price(amount: float) -> str:
    if float(amount).is_integer():
        return f"${int(amount):,}"
    return f"${amount:,.2f}"
