"""
HTTP layer for guarded_fetch.

URL and header guards, endpoint composition, the interceptor pipeline and
the network transport.
"""

from . import monitor
from .endpoint import build_endpoint, join_route, serialize_queries, validate_endpoint
from .interceptors import (
    chain,
    run_request_interceptors,
    run_response_interceptors,
    select_callback,
)
from .monitor import MonitorKind, MonitorRequested, MonitorResponded
from .security import assert_metadata, assert_url, is_safe_url
from .transport import AiohttpTransport, Transport

__all__ = [
    # Guard
    "assert_url",
    "assert_metadata",
    "is_safe_url",
    # Endpoint
    "build_endpoint",
    "join_route",
    "serialize_queries",
    "validate_endpoint",
    # Pipeline
    "run_request_interceptors",
    "run_response_interceptors",
    "chain",
    "select_callback",
    "monitor",
    "MonitorKind",
    "MonitorRequested",
    "MonitorResponded",
    # Transport
    "Transport",
    "AiohttpTransport",
]
