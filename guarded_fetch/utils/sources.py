"""
Source resolution for guarded_fetch.

A source is either a fixed route or a resolver function. Resolvers receive
the call parameters and return either a route to fetch or an already
computed Outcome, which lets callers mix remote endpoints and local
computations behind one interface.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Sequence, Union

from ..exceptions import VerifyError
from ..models.outcome import Outcome, is_outcome
from .awaitables import call, resolve
from .response import failify

Executor = Callable[[str], Awaitable[Outcome[Any]]]


@dataclass(frozen=True)
class Route:
    """A literal endpoint, fetched through the executor."""

    endpoint: str


@dataclass(frozen=True)
class Resolver:
    """A function returning an endpoint or a precomputed Outcome."""

    fn: Callable[..., Any]


Source = Union[Route, Resolver]


def as_source(source: Union[Source, str, Callable[..., Any]]) -> Source:
    """
    Coerce a plain string or callable into a tagged Source.

    Raises:
        TypeError: If ``source`` is neither
    """
    match source:
        case Route() | Resolver():
            return source
        case str():
            return Route(source)
        case _ if callable(source):
            return Resolver(source)
        case _:
            raise TypeError(f"Unsupported source type: {type(source).__name__}")


async def unify(
    source: Union[Source, str, Callable[..., Any]],
    executor: Executor,
    parameters: Sequence[Any] = (),
    verify: Optional[Callable[[Any], Any]] = None,
) -> Outcome[Any]:
    """
    Resolve ``source`` into an Outcome.

    Routes go straight to ``executor``. Resolvers are called with
    ``parameters``; a string result goes to ``executor`` and an Outcome result
    is returned as-is after ``verify`` has accepted its data. Nothing raised
    while resolving escapes: it is converted with :func:`failify`.

    Args:
        source: Route, Resolver, endpoint string or resolver callable
        executor: Coroutine function fetching an endpoint
        parameters: Positional arguments for a resolver
        verify: Predicate applied to a precomputed successful Outcome

    Returns:
        The resulting Outcome
    """
    try:
        match as_source(source):
            case Route(endpoint):
                return await resolve(executor(endpoint))
            case Resolver(fn):
                resolved = await call(fn, *parameters)

        if isinstance(resolved, str):
            return await resolve(executor(resolved))

        if not is_outcome(resolved):
            raise TypeError(
                f"Resolver must return an endpoint or an outcome, got {type(resolved).__name__}"
            )

        if resolved.success and verify is not None and not await call(verify, resolved.data):
            raise VerifyError()

        return resolved
    except Exception as e:
        return failify(e)


__all__ = [
    "Route",
    "Resolver",
    "Source",
    "Executor",
    "as_source",
    "unify",
]
