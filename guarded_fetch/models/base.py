"""
Base models and common types for the guarded_fetch library.

This module contains the enums and the pydantic base configuration shared by
the option models.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Method(str, Enum):
    """HTTP methods supported by the request engine."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class Credentials(str, Enum):
    """
    Credential policy forwarded to the transport.

    Mirrors the fetch credentials modes: OMIT never sends stored cookies,
    SAME_ORIGIN and INCLUDE send them.
    """

    OMIT = "omit"
    SAME_ORIGIN = "same-origin"
    INCLUDE = "include"


class BaseConfig(BaseModel):
    """
    Base class for option models.

    Instances are frozen: a client's configuration is never mutated after
    construction, and ``extend`` always builds a new one.
    """

    model_config = ConfigDict(
        frozen=True, extra="forbid", arbitrary_types_allowed=True
    )


__all__ = [
    "Method",
    "Credentials",
    "BaseConfig",
]
