# utils/notifications.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class Notice:
    level: str
    title: str
    description: str = ""


class Notifier:
    """
    Collects user-facing notices (toasts in the UI).
    Purely observational: nothing here changes the caller's control flow.
    """

    def __init__(self, sink: Optional[Callable[[Notice], None]] = None):
        self.sink = sink
        self.notices: List[Notice] = []

    def notify(self, level: str, title: str, description: str = "") -> Notice:
        notice = Notice(level=level, title=title, description=description)
        self.notices.append(notice)
        logger.log(_LOG_LEVELS.get(level, logging.INFO), "%s: %s", title, description)
        if self.sink is not None:
            self.sink(notice)
        return notice

    def info(self, title: str, description: str = "") -> Notice:
        return self.notify("info", title, description)

    def success(self, title: str, description: str = "") -> Notice:
        return self.notify("success", title, description)

    def warning(self, title: str, description: str = "") -> Notice:
        return self.notify("warning", title, description)

    def error(self, title: str, description: str = "") -> Notice:
        return self.notify("error", title, description)

    def clear(self) -> None:
        self.notices.clear()
