"""
Endpoint composition for guarded_fetch.

Joins a base URL with a route, appends the serialized query string and
enforces the length and syntax rules every composed endpoint must satisfy.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from urllib.parse import urlencode, urlsplit

from ..exceptions import MAX_URL_LENGTH, InvalidUrlError, UrlTooLongError
from .security import assert_url

logger = logging.getLogger(__name__)


def is_absolute(endpoint: str) -> bool:
    """Whether ``endpoint`` carries its own scheme."""
    return "://" in endpoint


def stringify(value: Any) -> str:
    """
    Render a query value the way a browser would stringify it.

    Booleans become ``true``/``false``, None becomes ``null`` and sequences
    are joined with commas.
    """
    match value:
        case bool():
            return "true" if value else "false"
        case None:
            return "null"
        case list() | tuple():
            return ",".join(stringify(item) for item in value)
        case _:
            return str(value)


def serialize_queries(queries: Optional[Mapping[str, Any]]) -> str:
    """Form-urlencode ``queries`` after stringifying every value."""
    if not queries:
        return ""
    return urlencode([(str(key), stringify(value)) for key, value in queries.items()])


def append_query(endpoint: str, search: str) -> str:
    if not search:
        return endpoint

    if endpoint.endswith(("?", "&")):
        separator = ""
    elif "?" in endpoint:
        separator = "&"
    else:
        separator = "?"
    return f"{endpoint}{separator}{search}"


def join_route(base: Optional[str], route: str) -> str:
    """
    Join ``route`` onto ``base``.

    Absolute routes are returned unchanged; an empty route yields the base.
    """
    if is_absolute(route):
        return route

    base = base or ""
    if not route:
        return base

    if not route.startswith("/"):
        route = f"/{route}"
    return f"{base.rstrip('/')}{route}"


def validate_endpoint(
    endpoint: str,
    unsafe: bool = False,
    localhost: bool = False,
    max_length: int = MAX_URL_LENGTH,
) -> str:
    """
    Check a composed endpoint.

    Raises:
        UrlTooLongError: If the endpoint exceeds ``max_length``
        InvalidUrlError: If an absolute endpoint cannot be parsed
        UnsafeUrlError: If an absolute endpoint fails the URL guard
    """
    if len(endpoint) > max_length:
        raise UrlTooLongError(
            f"URL exceeds maximum length of {max_length} characters",
            url=endpoint[:100],
            max_length=max_length,
        )

    if is_absolute(endpoint):
        try:
            parsed = urlsplit(endpoint)
            hostname = parsed.hostname
        except ValueError as e:
            raise InvalidUrlError(f"Invalid URL: {e}", url=endpoint) from e

        if not parsed.scheme or (
            parsed.scheme.lower() in ("http", "https") and not hostname
        ):
            raise InvalidUrlError(url=endpoint)

        assert_url(endpoint, unsafe, localhost)

    return endpoint


def build_endpoint(
    route: str,
    base: Optional[str] = None,
    queries: Optional[Mapping[str, Any]] = None,
    unsafe: bool = False,
    localhost: bool = False,
    max_length: int = MAX_URL_LENGTH,
) -> str:
    """
    Compose the final endpoint for a request.

    Args:
        route: Absolute URL or path relative to ``base``
        base: URL prefix for relative routes
        queries: Query parameters appended to the endpoint
        unsafe: Disable the private-network guard
        localhost: Allow loopback destinations
        max_length: Maximum length of the composed endpoint

    Returns:
        The composed endpoint

    Example:
        >>> build_endpoint("/users", "https://api.example.com", {"page": 2})
        'https://api.example.com/users?page=2'
    """
    endpoint = append_query(join_route(base, route), serialize_queries(queries))
    logger.debug(f"Composed endpoint {endpoint}")
    return validate_endpoint(endpoint, unsafe, localhost, max_length)


__all__ = [
    "is_absolute",
    "stringify",
    "serialize_queries",
    "append_query",
    "join_route",
    "validate_endpoint",
    "build_endpoint",
]
