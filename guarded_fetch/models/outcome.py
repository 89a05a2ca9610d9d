"""
Outcome model: the uniform result of every request.

A request either succeeds with decoded data or fails with a status, a
human-readable message and, where one was received, the decoded body.
"""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Generic, Literal, Optional, TypeVar, Union

Data = TypeVar("Data")


@dataclass(frozen=True)
class Success(Generic[Data]):
    """Successful outcome carrying the decoded payload."""

    status: int
    data: Data

    @property
    def success(self) -> Literal[True]:
        return True


@dataclass(frozen=True)
class Failed:
    """
    Failed outcome.

    Attributes:
        status: HTTP status (408 for timeouts, 500 for local errors)
        message: Reason phrase or error message
        body: Decoded response body, when one was received
    """

    status: int
    message: str
    body: Optional[Any] = None

    @property
    def success(self) -> Literal[False]:
        return False


Outcome = Union[Success[Data], Failed]


def successify(data: Data, status: int = HTTPStatus.OK) -> Success[Data]:
    """Wrap already-computed data in a Success outcome."""
    return Success(status=int(status), data=data)


def is_outcome(value: Any) -> bool:
    return isinstance(value, (Success, Failed))


__all__ = [
    "Success",
    "Failed",
    "Outcome",
    "successify",
    "is_outcome",
]
