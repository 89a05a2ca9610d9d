"""
Observation-only interceptors.

Monitors hand a snapshot of each request or response to an observer and
return the context unchanged, which makes them suitable for diagnostics and
telemetry without affecting request semantics.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..models.base import Method
from ..models.http import Interceptors, RequestContext, ResponseContext
from ..models.outcome import Outcome
from ..utils.awaitables import call


class MonitorKind(str, Enum):
    """Which side of the exchange an event describes."""

    REQUEST = "request"
    RESPONSE = "response"


@dataclass(frozen=True)
class MonitorRequested:
    """Snapshot of an outgoing request."""

    method: Method
    endpoint: str
    options: Dict[str, Any]
    body: Any = None
    kind: MonitorKind = field(default=MonitorKind.REQUEST, init=False)


@dataclass(frozen=True)
class MonitorResponded:
    """Snapshot of a received response."""

    method: Method
    endpoint: str
    status: int
    outcome: Outcome[Any]
    kind: MonitorKind = field(default=MonitorKind.RESPONSE, init=False)


def requested(
    observer: Callable[[MonitorRequested], Any],
) -> Callable[[RequestContext], Any]:
    """
    Build a request interceptor reporting every request to ``observer``.

    The options snapshot leaves out ``verify``.
    """

    async def monitor_request(context: RequestContext) -> RequestContext:
        await call(
            observer,
            MonitorRequested(
                method=context.method,
                endpoint=context.endpoint,
                options=context.options.model_dump(exclude={"verify"}),
                body=context.body,
            ),
        )
        return context

    return monitor_request


def responded(
    observer: Callable[[MonitorResponded], Any],
) -> Callable[[ResponseContext], Any]:
    """Build a response interceptor reporting every response to ``observer``."""

    async def monitor_response(context: ResponseContext) -> ResponseContext:
        await call(
            observer,
            MonitorResponded(
                method=context.method,
                endpoint=context.endpoint,
                status=context.raw.status,
                outcome=context.outcome,
            ),
        )
        return context

    return monitor_response


def logging_interceptors(
    logger: Optional[logging.Logger] = None, level: int = logging.DEBUG
) -> Interceptors:
    """
    Monitors that log each request and response.

    Example:
        ```python
        client = create(interceptors=logging_interceptors())
        ```
    """
    logger = logger or logging.getLogger("guarded_fetch.monitor")

    def log_request(event: MonitorRequested) -> None:
        logger.log(level, f"--> {event.method.value} {event.endpoint}")

    def log_response(event: MonitorResponded) -> None:
        logger.log(
            level,
            f"<-- {event.method.value} {event.endpoint} {event.status} "
            f"({'success' if event.outcome.success else 'failed'})",
        )

    return Interceptors(request=(requested(log_request),), response=(responded(log_response),))


__all__ = [
    "MonitorKind",
    "MonitorRequested",
    "MonitorResponded",
    "requested",
    "responded",
    "logging_interceptors",
]
