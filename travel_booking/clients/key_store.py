# clients/key_store.py
from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Optional

from travel_booking.clients.local_storage import LocalStorage
from travel_booking.utils.config import Settings

if TYPE_CHECKING:
    from travel_booking.clients.completion_client import CompletionClient

logger = logging.getLogger(__name__)

STORAGE_KEY = "PERPLEXITY_API_KEY"
KEY_PATTERN = re.compile(r"^(pk-|pplx-)[A-Za-z0-9]{24,}$")


class KeyStore:
    """
    Holds the bearer credential for the completion endpoint.
    In centralized credential mode the operator's key from the environment is
    used and no per-user key is needed.
    """

    def __init__(self, storage: LocalStorage, settings: Optional[Settings] = None):
        self.storage = storage
        self.settings = settings or Settings()

    @staticmethod
    def is_valid(value: Optional[str]) -> bool:
        return bool(value) and KEY_PATTERN.match(value) is not None

    @property
    def centralized(self) -> bool:
        return self.settings.centralized_credential_mode and bool(self.settings.central_api_key)

    def get(self) -> Optional[str]:
        if self.centralized:
            return self.settings.central_api_key
        return self.storage.get(STORAGE_KEY) or None

    def present(self) -> bool:
        return bool(self.get())

    def store(self, value: str) -> bool:
        value = (value or "").strip()
        if not self.is_valid(value):
            logger.warning("Rejected API key with invalid format")
            return False
        self.storage.set(STORAGE_KEY, value)
        logger.info("API key saved")
        return True

    def remove(self) -> None:
        self.storage.remove(STORAGE_KEY)
        logger.info("API key removed")

    def probe(self, client: "CompletionClient", value: str) -> None:
        """
        Sends a tiny completion with the candidate key. Raises the client's
        error on failure; the stored key is never touched here.
        """
        client.complete(
            "You are a helpful assistant.",
            "Test API key with a simple hello",
            max_tokens=5,
            api_key=value,
        )

    def validate_and_store(self, client: "CompletionClient", value: str) -> bool:
        value = (value or "").strip()
        if not self.is_valid(value):
            return False
        self.probe(client, value)
        return self.store(value)
