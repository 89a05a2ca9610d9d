"""
Response unwrapping for the guarded_fetch library.

This module turns raw transport responses into decoded data and Outcome
values, and normalizes anything raised during a request into a Failed
outcome.
"""

from __future__ import annotations

import asyncio
from http import HTTPStatus
from typing import Any, Callable, Optional

from ..exceptions import GuardedFetchError, ResponseFailure, VerifyError
from ..models.http import RawResponse
from ..models.outcome import Failed, Outcome, Success
from .awaitables import call

UNKNOWN_STATUS = "Unknown Status"


def reason_phrase(status: int) -> str:
    """
    Standard reason phrase for ``status``.

    Example:
        >>> reason_phrase(404)
        'Not Found'
        >>> reason_phrase(599)
        'Unknown Status'
    """
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return UNKNOWN_STATUS


def is_cancelled(thrown: BaseException) -> bool:
    """Whether ``thrown`` belongs to the timeout/cancellation class."""
    return isinstance(thrown, (asyncio.TimeoutError, TimeoutError, asyncio.CancelledError))


def unwrap(raw: RawResponse) -> Any:
    """
    Decode a response body according to its Content-Type.

    JSON types are parsed, XML and ``text/*`` types are decoded as text.
    Anything else is decoded as text, except a 204 which yields None.

    Raises:
        ValueError: If a JSON response carries a malformed body
    """
    content_type = (raw.content_type or "").lower()

    if "application/json" in content_type:
        # An empty JSON body (e.g. 204 with a JSON content type) has no value
        if not raw.body.strip():
            return None
        return raw.json()

    if "xml" in content_type or "text/" in content_type:
        return raw.text()

    if raw.status == HTTPStatus.NO_CONTENT:
        return None

    return raw.text()


async def outcomify(
    raw: RawResponse, verify: Optional[Callable[[Any], Any]] = None
) -> Outcome[Any]:
    """
    Convert a raw response into an Outcome.

    Args:
        raw: Fully read transport response
        verify: Optional predicate (sync or async) applied to successful data

    Returns:
        ``Failed(status, reason phrase, body)`` for non-ok statuses, with no
        body when it does not decode,
        ``Success(status, data)`` otherwise

    Raises:
        VerifyError: If ``verify`` rejects the decoded data
    """
    if not raw.ok:
        try:
            body = unwrap(raw)
        except ValueError:
            body = None
        return Failed(status=raw.status, message=reason_phrase(raw.status), body=body)

    data = unwrap(raw)

    if verify is not None and not await call(verify, data):
        raise VerifyError(url=raw.url)

    return Success(status=raw.status, data=data)


def _fail_response(raw: RawResponse, status: int) -> Failed:
    try:
        body = raw.json()
    except ValueError:
        return Failed(status=status, message=reason_phrase(status))

    message = body.get("message") if isinstance(body, dict) else None
    return Failed(status=status, message=message or reason_phrase(status), body=body)


def failify(thrown: Any) -> Failed:
    """
    Normalize anything raised during a request into a Failed outcome.

    - A failed response (raw or carried by ResponseFailure): its status, the
      body's ``message`` field or the reason phrase, and the JSON body when
      it decodes.
    - A timeout or cancellation: 408 "Request Timeout".
    - Any other exception: 500 with the exception's message.
    - Anything else: 500 "Internal Server Error".
    """
    match thrown:
        case ResponseFailure():
            return _fail_response(thrown.response, thrown.outcome.status)
        case RawResponse():
            return _fail_response(thrown, thrown.status)
        case BaseException() if is_cancelled(thrown):
            return Failed(
                status=int(HTTPStatus.REQUEST_TIMEOUT),
                message=reason_phrase(HTTPStatus.REQUEST_TIMEOUT),
            )
        case GuardedFetchError():
            return Failed(
                status=int(HTTPStatus.INTERNAL_SERVER_ERROR), message=thrown.message
            )
        case BaseException():
            return Failed(
                status=int(HTTPStatus.INTERNAL_SERVER_ERROR),
                message=str(thrown) or reason_phrase(HTTPStatus.INTERNAL_SERVER_ERROR),
            )
        case _:
            return Failed(
                status=int(HTTPStatus.INTERNAL_SERVER_ERROR),
                message=reason_phrase(HTTPStatus.INTERNAL_SERVER_ERROR),
            )


__all__ = [
    "UNKNOWN_STATUS",
    "reason_phrase",
    "is_cancelled",
    "unwrap",
    "outcomify",
    "failify",
]
