"""Helpers for user hooks that may be plain functions or coroutine functions."""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, TypeVar, Union

T = TypeVar("T")


async def resolve(value: Union[T, Awaitable[T]]) -> T:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


async def call(fn: Any, *args: Any) -> Any:
    """Call a sync or async hook and return its resolved result."""
    return await resolve(fn(*args))


__all__ = ["resolve", "call"]
