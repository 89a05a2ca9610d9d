"""
Exception hierarchy for the guarded_fetch request core.

Validation errors are raised while an endpoint is composed or checked and
are always converted to a Failed outcome by the request engine; they only
reach user code when the guard functions are called directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .models.http import RawResponse
    from .models.outcome import Failed

MAX_URL_LENGTH = 2048


class GuardedFetchError(Exception):
    """
    Base exception for all guarded_fetch errors.

    Attributes:
        message: Human-readable error message
        url: URL that caused the error (if applicable)
        details: Additional error details as keyword arguments
    """

    default_message = "Request failed"

    def __init__(
        self, message: Optional[str] = None, url: Optional[str] = None, **kwargs: Any
    ) -> None:
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.url = url
        self.details = kwargs


class ValidationError(GuardedFetchError):
    """Raised when a request is rejected before it reaches the network."""

    default_message = "Request validation failed"


class UnsafeUrlError(ValidationError):
    """
    Raised when a URL targets a forbidden destination.

    Covers disallowed schemes, loopback and private address ranges, and
    ambiguous (zero-padded) IPv4 literals.
    """

    default_message = "Unsafe URL"


class InvalidMetadataError(ValidationError):
    """Raised when a header value contains characters outside the safe range."""

    default_message = "Invalid metadata"


class InvalidUrlError(ValidationError):
    """Raised when an absolute endpoint cannot be parsed as a URL."""

    default_message = "Invalid URL"


class UrlTooLongError(ValidationError):
    """
    Raised when the composed endpoint exceeds the maximum length.

    Attributes:
        max_length: The limit that was exceeded
    """

    default_message = "URL too long"
    max_length = MAX_URL_LENGTH

    def __init__(
        self,
        message: Optional[str] = None,
        url: Optional[str] = None,
        max_length: Optional[int] = None,
    ) -> None:
        super().__init__(message, url)
        if max_length is not None:
            self.max_length = max_length


class VerifyError(GuardedFetchError):
    """Raised when a verify predicate rejects an otherwise successful payload."""

    default_message = "Verification failed"


class ResponseFailure(GuardedFetchError):
    """
    Carries a failed outcome out of the response stage.

    The engine raises this after the response interceptors have run so that
    HTTP failures take the same conversion path as network errors.

    Attributes:
        response: The raw response received from the transport
        outcome: The (possibly interceptor-modified) failed outcome
    """

    def __init__(
        self, response: RawResponse, outcome: Failed, url: Optional[str] = None
    ) -> None:
        super().__init__(outcome.message, url or response.url)
        self.response = response
        self.outcome = outcome


__all__ = [
    "MAX_URL_LENGTH",
    "GuardedFetchError",
    "ValidationError",
    "UnsafeUrlError",
    "InvalidMetadataError",
    "InvalidUrlError",
    "UrlTooLongError",
    "VerifyError",
    "ResponseFailure",
]
