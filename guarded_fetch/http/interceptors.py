"""
Interceptor pipeline for guarded_fetch.

Request interceptors receive a RequestContext and return a (possibly new)
one; response interceptors do the same with a ResponseContext. Either kind
may be a coroutine function. Lifecycle callbacks fire once per request after
the response stage.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Callable, Iterable, Optional

from ..models.http import OnInterceptor, RequestContext, ResponseContext
from ..models.outcome import Outcome
from ..utils.awaitables import call


async def run_request_interceptors(
    context: RequestContext, interceptors: Iterable[Callable[..., Any]]
) -> RequestContext:
    """
    Thread ``context`` through ``interceptors`` in order.

    Raises:
        TypeError: If an interceptor does not return a RequestContext
        Exception: Anything an interceptor raises aborts the pipeline
    """
    for interceptor in interceptors:
        context = await call(interceptor, context)
        if not isinstance(context, RequestContext):
            raise TypeError(
                f"Request interceptor {_name(interceptor)} returned "
                f"{type(context).__name__}, expected RequestContext"
            )
    return context


async def run_response_interceptors(
    context: ResponseContext, interceptors: Iterable[Callable[..., Any]]
) -> ResponseContext:
    """Thread ``context`` through response ``interceptors`` in order."""
    for interceptor in interceptors:
        context = await call(interceptor, context)
        if not isinstance(context, ResponseContext):
            raise TypeError(
                f"Response interceptor {_name(interceptor)} returned "
                f"{type(context).__name__}, expected ResponseContext"
            )
    return context


def chain(
    parent: Optional[Callable[..., Any]], child: Optional[Callable[..., Any]]
) -> Optional[Callable[..., Any]]:
    """
    Combine two callbacks so both fire, parent first.

    When only one is given it is returned unchanged; when neither is, the
    result is None.
    """
    if parent is None:
        return child
    if child is None:
        return parent

    async def chained(*args: Any) -> None:
        await call(parent, *args)
        await call(child, *args)

    chained.__name__ = f"chain({_name(parent)}, {_name(child)})"
    return chained


def select_callback(
    on: Optional[OnInterceptor], outcome: Outcome[Any]
) -> Optional[Callable[..., Any]]:
    """Pick the lifecycle callback matching ``outcome``."""
    if on is None:
        return None
    if outcome.success:
        return on.success
    if outcome.status == HTTPStatus.UNAUTHORIZED:
        return on.unauthorized
    return on.failure


def _name(fn: Any) -> str:
    return getattr(fn, "__name__", type(fn).__name__)


__all__ = [
    "run_request_interceptors",
    "run_response_interceptors",
    "chain",
    "select_callback",
]
