"""
Utility functions for guarded_fetch.

Response unwrapping, failure normalization and source resolution.
"""

from .awaitables import call, resolve
from .response import failify, is_cancelled, outcomify, reason_phrase, unwrap
from .sources import Resolver, Route, Source, as_source, unify

__all__ = [
    "resolve",
    "call",
    "reason_phrase",
    "is_cancelled",
    "unwrap",
    "outcomify",
    "failify",
    "Route",
    "Resolver",
    "Source",
    "as_source",
    "unify",
]
