# utils/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_API_URL = "https://api.perplexity.ai/chat/completions"
DEFAULT_MODEL = "llama-3.1-sonar-small-128k-online"
DEFAULT_TIMEOUT = 30.0
DEFAULT_STORAGE_PATH = Path.home() / ".travel_booking" / "storage.json"
# flat service fee added once to every non-empty booking
BOOKING_FEE = 2500.0

_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUTHY


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class Settings:
    """
    Runtime settings. Values come from the environment (and a local .env file)
    so the Streamlit app, the console demo and tests share one source.
    """
    api_url: str = DEFAULT_API_URL
    model: str = DEFAULT_MODEL
    timeout: float = DEFAULT_TIMEOUT
    # operator key used instead of per-user keys when centralized mode is on
    central_api_key: Optional[str] = None
    centralized_credential_mode: bool = False
    storage_path: Optional[Path] = DEFAULT_STORAGE_PATH
    booking_fee: float = BOOKING_FEE
    typeahead_delay: float = 0.3
    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        storage = os.getenv("TRAVEL_BOOKING_STORAGE")
        return cls(
            api_url=os.getenv("PERPLEXITY_API_URL", DEFAULT_API_URL),
            model=os.getenv("PERPLEXITY_MODEL", DEFAULT_MODEL),
            timeout=_env_float("PERPLEXITY_TIMEOUT", DEFAULT_TIMEOUT),
            central_api_key=os.getenv("PERPLEXITY_API_KEY") or None,
            centralized_credential_mode=_env_bool("CENTRALIZED_CREDENTIAL_MODE"),
            storage_path=Path(storage).expanduser() if storage else DEFAULT_STORAGE_PATH,
            booking_fee=_env_float("BOOKING_FEE", BOOKING_FEE),
            typeahead_delay=_env_float("TYPEAHEAD_DELAY", 0.3),
            log_level=os.getenv("TRAVEL_BOOKING_LOG_LEVEL", "INFO"),
            log_format=os.getenv("TRAVEL_BOOKING_LOG_FORMAT", "text"),
        )
