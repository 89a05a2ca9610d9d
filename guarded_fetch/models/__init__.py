"""
Models package for guarded_fetch.

Re-exports the outcome union, the option models and the pipeline contexts.
"""

from .base import BaseConfig, Credentials, Method
from .http import (
    HttpOptions,
    Interceptors,
    OnInterceptor,
    RawResponse,
    RequestContext,
    RequestInterceptor,
    RequestOptions,
    ResponseContext,
    ResponseInterceptor,
    TransportRequest,
)
from .outcome import Failed, Outcome, Success, is_outcome, successify

__all__ = [
    # Base types
    "BaseConfig",
    "Credentials",
    "Method",
    # Outcome
    "Success",
    "Failed",
    "Outcome",
    "successify",
    "is_outcome",
    # Options and contexts
    "RequestOptions",
    "HttpOptions",
    "Interceptors",
    "OnInterceptor",
    "RequestContext",
    "ResponseContext",
    "RawResponse",
    "TransportRequest",
    "RequestInterceptor",
    "ResponseInterceptor",
]
