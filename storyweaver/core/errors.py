"""
Error taxonomy for provider calls and book generation.

Provider adapters translate vendor SDK exceptions into ProviderError
subclasses with an explicit ErrorKind. The retry engine reads the kind to
decide whether another attempt is worthwhile. Exceptions that did not come
from an adapter are classified by their message text.
"""

import re
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """How a provider failure should be treated by the retry engine."""

    AUTH = "auth"
    BAD_REQUEST = "bad_request"
    TRANSIENT = "transient"
    UNAVAILABLE = "unavailable"


NON_RETRYABLE_KINDS = frozenset({ErrorKind.AUTH, ErrorKind.BAD_REQUEST})

_AUTH_PATTERN = re.compile(
    r"unauthorized|forbidden|invalid api key|authentication|\b401\b|\b403\b",
    re.IGNORECASE,
)
_BAD_REQUEST_PATTERN = re.compile(r"invalid request|bad request|\b400\b", re.IGNORECASE)


class ProviderError(Exception):
    """A provider call failed. Carries the provider name and failure kind."""

    kind: ErrorKind = ErrorKind.TRANSIENT

    def __init__(
        self,
        message: str,
        provider: str,
        original_error: Optional[BaseException] = None,
        kind: Optional[ErrorKind] = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.original_error = original_error
        if kind is not None:
            self.kind = kind

    def __str__(self) -> str:
        return self.message


class AuthError(ProviderError):
    """Credentials were rejected (401/403)."""

    kind = ErrorKind.AUTH


class BadRequestError(ProviderError):
    """The provider refused the request as malformed (400)."""

    kind = ErrorKind.BAD_REQUEST


class TransientError(ProviderError):
    """Rate limits, timeouts, overloaded servers and other retryable failures."""

    kind = ErrorKind.TRANSIENT


class UnavailableError(ProviderError):
    """The provider or model is not configured, not installed, or not found."""

    kind = ErrorKind.UNAVAILABLE


class ConfigurationError(ProviderError):
    """No provider of the required channel or capability is configured."""

    kind = ErrorKind.UNAVAILABLE

    def __init__(self, message: str):
        super().__init__(message, provider="none")


class ProvidersExhaustedError(Exception):
    """Every fallback candidate failed."""

    def __init__(self, attempted: int, last_error: Optional[BaseException] = None):
        self.attempted = attempted
        self.last_error = last_error
        if last_error is None:
            message = "All providers exhausted: no providers to try"
        else:
            message = f"All {attempted} providers exhausted. Last error: {last_error}"
        super().__init__(message)


class BookGenerationError(Exception):
    """Illustrated book generation produced no deliverable pages."""


def classify_error(error: BaseException) -> ErrorKind:
    """
    Determine the ErrorKind of an exception.

    ProviderError instances report their own kind. Anything else is matched
    against authentication and malformed-request message patterns and is
    otherwise treated as transient.
    """
    if isinstance(error, ProviderError):
        return error.kind

    message = str(error)
    if _AUTH_PATTERN.search(message):
        return ErrorKind.AUTH
    if _BAD_REQUEST_PATTERN.search(message):
        return ErrorKind.BAD_REQUEST
    return ErrorKind.TRANSIENT


def is_non_retryable(error: BaseException) -> bool:
    """True for authentication and malformed-request failures."""
    return classify_error(error) in NON_RETRYABLE_KINDS
