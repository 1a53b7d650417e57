# utils/logging_config.py
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

LOGGER_ROOT = "travel_booking"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, for log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> logging.Logger:
    level_name = (log_level or os.getenv("TRAVEL_BOOKING_LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    format_name = (log_format or os.getenv("TRAVEL_BOOKING_LOG_FORMAT", "text")).lower()

    logger = logging.getLogger(LOGGER_ROOT)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if format_name == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logger.addHandler(handler)
    return logger
