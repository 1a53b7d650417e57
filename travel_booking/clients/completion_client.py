# clients/completion_client.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from time import monotonic
from typing import Any, Dict, List, Optional

import requests

from travel_booking.clients.key_store import KeyStore
from travel_booking.utils.config import Settings
from travel_booking.utils.errors import (
    CompletionTimeout,
    CredentialInvalid,
    CredentialMissing,
    EmptyCompletion,
    RateLimited,
    RequestCancelled,
    RequestFailed,
)
from travel_booking.utils.notifications import Notifier

logger = logging.getLogger(__name__)


class CancelToken:
    """Set by a newer request to tell an older one its result is unwanted."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise RequestCancelled("Request was cancelled")


@dataclass
class PromptSpec:
    system_instruction: str
    user_instruction: str
    model: str
    temperature: float = 0.2
    max_tokens: int = 2000

    def messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system_instruction},
            {"role": "user", "content": self.user_instruction},
        ]

    def to_body(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": self.messages(),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }


def _server_message(res: requests.Response) -> Optional[str]:
    try:
        data = res.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and isinstance(err.get("message"), str):
            return err["message"]
        if isinstance(err, str):
            return err
    return None


class CompletionClient:
    """
    Sends one chat-completion request and returns the assistant text.
    No retries; every failure is raised after a single user notice.
    """

    def __init__(
        self,
        key_store: KeyStore,
        settings: Optional[Settings] = None,
        notifier: Optional[Notifier] = None,
        session: Optional[requests.Session] = None,
    ):
        self.key_store = key_store
        self.settings = settings or Settings()
        self.notifier = notifier or Notifier()
        self.session = session or requests.Session()

    def enabled(self) -> bool:
        return self.key_store.present()

    def _fail(self, exc: Exception, title: str) -> Exception:
        logger.error("Completion request failed: %s", exc)
        self.notifier.error(title, str(exc))
        return exc

    def complete(
        self,
        system_instruction: str,
        user_instruction: str,
        temperature: float = 0.2,
        max_tokens: int = 2000,
        model: Optional[str] = None,
        cancel_token: Optional[CancelToken] = None,
        api_key: Optional[str] = None,
    ) -> str:
        key = api_key or self.key_store.get()
        if not key:
            raise self._fail(CredentialMissing(), "API Key Missing")
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        prompt = PromptSpec(
            system_instruction=system_instruction,
            user_instruction=user_instruction,
            model=model or self.settings.model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        headers = {
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }
        logger.debug("POST %s model=%s max_tokens=%s", self.settings.api_url, prompt.model, max_tokens)
        started = monotonic()
        try:
            res = self.session.post(
                self.settings.api_url,
                json=prompt.to_body(),
                headers=headers,
                timeout=self.settings.timeout,
            )
        except requests.Timeout:
            raise self._fail(
                CompletionTimeout(f"Request timed out after {self.settings.timeout:g}s"),
                "Request Timed Out",
            )
        except requests.RequestException as e:
            raise self._fail(RequestFailed(f"Connection failed: {e}"), "Request Failed")

        # a newer request superseded this one while it was in flight
        if cancel_token is not None and cancel_token.cancelled:
            logger.debug("Discarding result of cancelled request")
            raise RequestCancelled("Request was cancelled")

        # requests applies `timeout` per connect and per read, not to the whole call
        elapsed = monotonic() - started
        if elapsed > self.settings.timeout:
            raise self._fail(
                CompletionTimeout(f"Request took {elapsed:.0f}s, limit is {self.settings.timeout:g}s"),
                "Request Timed Out",
            )

        if res.status_code == 401:
            raise self._fail(
                CredentialInvalid("Invalid API key. Please check your API key in settings."),
                "Invalid API Key",
            )
        if res.status_code == 429:
            raise self._fail(
                RateLimited("Rate limit exceeded. Please try again later."),
                "Rate Limited",
            )
        if not res.ok:
            message = _server_message(res) or f"API error: {res.status_code}"
            raise self._fail(RequestFailed(message, res.status_code), "Request Failed")

        try:
            data = res.json()
        except ValueError:
            raise self._fail(EmptyCompletion("Response body is not JSON"), "Empty Response")
        choices = data.get("choices") if isinstance(data, dict) else None
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise self._fail(EmptyCompletion("No choices in completion response"), "Empty Response")
        message = choices[0].get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise self._fail(EmptyCompletion("Completion has no text content"), "Empty Response")
        return content
