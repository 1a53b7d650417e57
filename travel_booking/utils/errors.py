# utils/errors.py
"""
Error hierarchy for the booking assistant.

Completion errors are raised by the completion client and surface to callers as
hard failures. Extraction errors are raised while turning model text into
records; list searches catch them and switch to example data.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class TravelBookingError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class CredentialMissing(TravelBookingError):
    """No API key is stored; raised before any network call."""

    def __init__(self, message: str = "Perplexity API key not found. Please add your API key in settings."):
        super().__init__(message)


class CompletionError(TravelBookingError):
    pass


class CredentialInvalid(CompletionError):
    pass


class RateLimited(CompletionError):
    pass


class RequestFailed(CompletionError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        details = {"status": status_code} if status_code is not None else None
        super().__init__(message, details)
        self.status_code = status_code


class CompletionTimeout(CompletionError):
    pass


class EmptyCompletion(CompletionError):
    pass


class RequestCancelled(CompletionError):
    pass


class ExtractionError(TravelBookingError):
    pass


class Unparseable(ExtractionError):
    pass


class InvalidDomainData(ExtractionError):
    pass


class MissingQueryParameter(TravelBookingError):
    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"Missing required search parameter: {field}", {"field": field})
        self.field = field


class BookingStateError(TravelBookingError):
    pass
