"""
HTTP-specific models for the guarded_fetch library.

This module contains the option models (per-call and per-client), the
interceptor registry, the immutable contexts threaded through the
interceptor pipeline, and the transport-level request/response values.
"""

from __future__ import annotations

import codecs
import json
from dataclasses import dataclass, field, replace
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from multidict import CIMultiDict, CIMultiDictProxy
from pydantic import Field

from .base import BaseConfig, Credentials, Method
from .outcome import Outcome


class RequestOptions(BaseConfig):
    """
    Per-call request options.

    Every field is optional; unset fields fall back to the client
    configuration and then to the client settings.

    Example:
        ```python
        options = RequestOptions(
            queries={"page": 1, "limit": 10},
            headers={"X-Trace": "abc"},
            timeout=3.0,
            verify=lambda data: isinstance(data, list),
        )
        outcome = await client.get("/users", options)
        ```
    """

    headers: Dict[str, str] = Field(
        default_factory=dict, description="Headers merged over the client headers"
    )
    queries: Dict[str, Any] = Field(
        default_factory=dict,
        description="Query parameters; every value is stringified before encoding",
    )
    timeout: Optional[float] = Field(
        default=None, ge=0, description="Timeout in seconds for this call"
    )
    base: Optional[str] = Field(
        default=None, description="Base URL used instead of the client base"
    )
    verify: Optional[Callable[[Any], Any]] = Field(
        default=None, description="Predicate applied to successful data"
    )
    unsafe: Optional[bool] = Field(
        default=None, description="Disable the private-network guard"
    )
    localhost: Optional[bool] = Field(
        default=None, description="Allow loopback destinations"
    )
    credentials: Optional[Credentials] = Field(
        default=None, description="Credential policy for this call"
    )


class OnInterceptor(BaseConfig):
    """Lifecycle callbacks fired once per request after the response stage."""

    success: Optional[Callable[..., Any]] = None
    failure: Optional[Callable[..., Any]] = None
    unauthorized: Optional[Callable[..., Any]] = None


class Interceptors(BaseConfig):
    """Registered request/response interceptors and lifecycle callbacks."""

    request: Tuple[Callable[..., Any], ...] = ()
    response: Tuple[Callable[..., Any], ...] = ()
    on: Optional[OnInterceptor] = None


class HttpOptions(BaseConfig):
    """
    Client configuration.

    Constructed once per client. ``extend`` distinguishes explicitly
    provided fields (including ``False`` and ``0``) from absent ones through
    ``model_fields_set``.
    """

    base: Optional[str] = Field(default=None, description="URL prefix for routes")
    timeout: Optional[float] = Field(
        default=None, ge=0, description="Default timeout in seconds"
    )
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Headers sent with every request"
    )
    interceptors: Interceptors = Field(default_factory=Interceptors)
    credentials: Optional[Credentials] = None
    unsafe: Optional[bool] = None
    localhost: Optional[bool] = None

    def is_explicit(self, name: str) -> bool:
        """Whether ``name`` was provided with a non-None value."""
        return name in self.model_fields_set and getattr(self, name) is not None


@dataclass(frozen=True)
class RequestContext:
    """
    Request state threaded through the request interceptors.

    Interceptors return a (possibly new) context; the ``with_*`` helpers
    build modified copies without touching the original.
    """

    method: Method
    endpoint: str
    options: RequestOptions
    body: Any = None

    @property
    def headers(self) -> Dict[str, str]:
        return self.options.headers

    def with_headers(self, headers: Mapping[str, str]) -> RequestContext:
        merged = {**self.options.headers, **headers}
        return self.with_options(headers=merged)

    def with_options(self, **updates: Any) -> RequestContext:
        return replace(self, options=self.options.model_copy(update=updates))

    def with_body(self, body: Any) -> RequestContext:
        return replace(self, body=body)

    def with_endpoint(self, endpoint: str) -> RequestContext:
        return replace(self, endpoint=endpoint)


@dataclass(frozen=True)
class RawResponse:
    """
    Fully read response returned by a transport.

    Headers are stored in a read-only case-insensitive multidict.
    """

    status: int
    reason: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    url: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.headers, CIMultiDictProxy):
            object.__setattr__(
                self, "headers", CIMultiDictProxy(CIMultiDict(self.headers))
            )

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 400

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("Content-Type")

    @property
    def charset(self) -> str:
        for param in (self.content_type or "").split(";")[1:]:
            key, _, value = param.strip().partition("=")
            if key.lower() == "charset" and value:
                try:
                    return codecs.lookup(value.strip('"')).name
                except LookupError:
                    break
        return "utf-8"

    def text(self) -> str:
        return self.body.decode(self.charset, errors="replace")

    def json(self) -> Any:
        return json.loads(self.text())


@dataclass(frozen=True)
class ResponseContext:
    """Response state threaded through the response interceptors."""

    method: Method
    endpoint: str
    outcome: Outcome[Any]
    raw: RawResponse

    def with_outcome(self, outcome: Outcome[Any]) -> ResponseContext:
        return replace(self, outcome=outcome)


@dataclass(frozen=True)
class TransportRequest:
    """Serialized request handed to a transport."""

    method: str
    url: str
    headers: Dict[str, str]
    body: Any = None
    credentials: Credentials = Credentials.SAME_ORIGIN
    timeout: Optional[float] = None


RequestInterceptor = Callable[
    [RequestContext], Union[RequestContext, Awaitable[RequestContext]]
]
ResponseInterceptor = Callable[
    [ResponseContext], Union[ResponseContext, Awaitable[ResponseContext]]
]


__all__ = [
    "RequestOptions",
    "OnInterceptor",
    "Interceptors",
    "HttpOptions",
    "RequestContext",
    "RawResponse",
    "ResponseContext",
    "TransportRequest",
    "RequestInterceptor",
    "ResponseInterceptor",
]
