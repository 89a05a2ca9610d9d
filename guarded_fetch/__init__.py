"""
Guarded async HTTP client built on AIOHTTP.

This package wraps a network transport with the safety and composition
layers an application needs when it fetches URLs it does not fully control.

Features:
- SSRF guard rejecting private, loopback and link-local destinations
- Header validation against control and non-Latin-1 characters
- Request/response interceptor pipeline with lifecycle callbacks
- Per-call timeouts, normalized to a 408 outcome
- Uniform Success/Failed outcomes: request methods never raise
- Parent/child client composition through ``extend``
"""

from .composer import join_base, merge_options
from .config import ClientSettings, ConfigLoader, GlobalConfig, LoggingConfig, load_config
from .core_client import HttpClient, create
from .exceptions import (
    MAX_URL_LENGTH,
    GuardedFetchError,
    InvalidMetadataError,
    InvalidUrlError,
    ResponseFailure,
    UnsafeUrlError,
    UrlTooLongError,
    ValidationError,
    VerifyError,
)
from .http import monitor
from .http.interceptors import chain
from .http.monitor import logging_interceptors
from .http.security import assert_metadata, assert_url, is_safe_url
from .http.transport import AiohttpTransport, Transport
from .logging import setup_logging
from .models import (
    Credentials,
    Failed,
    HttpOptions,
    Interceptors,
    Method,
    OnInterceptor,
    Outcome,
    RawResponse,
    RequestContext,
    RequestOptions,
    ResponseContext,
    Success,
    TransportRequest,
    is_outcome,
    successify,
)
from .server import SourceClient, server
from .utils import Resolver, Route, failify, outcomify, reason_phrase, unify, unwrap

__version__ = "0.1.0"

__all__ = [
    # Clients
    "HttpClient",
    "create",
    "SourceClient",
    "server",
    # Outcome
    "Success",
    "Failed",
    "Outcome",
    "successify",
    "is_outcome",
    "unwrap",
    "outcomify",
    "failify",
    "reason_phrase",
    "unify",
    "Route",
    "Resolver",
    # Options and contexts
    "Method",
    "Credentials",
    "HttpOptions",
    "RequestOptions",
    "Interceptors",
    "OnInterceptor",
    "RequestContext",
    "ResponseContext",
    "RawResponse",
    "TransportRequest",
    # Pipeline
    "chain",
    "monitor",
    "logging_interceptors",
    # Guard
    "assert_url",
    "assert_metadata",
    "is_safe_url",
    # Composition
    "merge_options",
    "join_base",
    # Transport
    "Transport",
    "AiohttpTransport",
    # Configuration and logging
    "ClientSettings",
    "GlobalConfig",
    "LoggingConfig",
    "ConfigLoader",
    "load_config",
    "setup_logging",
    # Exceptions
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
