"""
Network transport for guarded_fetch.

The request engine never talks to the network directly: it hands a
serialized TransportRequest to a Transport and receives a fully read
RawResponse back. AiohttpTransport is the default implementation.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from aiohttp import ClientSession, ClientTimeout, DummyCookieJar, TCPConnector

from ..models.base import Credentials
from ..models.http import RawResponse, TransportRequest

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Anything able to perform a single HTTP exchange."""

    async def send(self, request: TransportRequest) -> RawResponse: ...

    async def close(self) -> None: ...


class AiohttpTransport:
    """
    Transport backed by aiohttp.

    Sessions are created lazily, one per cookie policy: requests with
    ``credentials="omit"`` use a session whose cookie jar never stores or
    sends cookies, every other policy shares a regular session. Sessions are
    reused across calls until :meth:`close`.

    Example:
        ```python
        async with AiohttpTransport() as transport:
            raw = await transport.send(
                TransportRequest(method="GET", url="https://example.com", headers={})
            )
        ```
    """

    def __init__(
        self,
        connector_limit: int = 100,
        limit_per_host: int = 10,
        verify_ssl: bool = True,
    ) -> None:
        self.connector_limit = connector_limit
        self.limit_per_host = limit_per_host
        self.verify_ssl = verify_ssl
        self._sessions: Dict[bool, ClientSession] = {}

    async def __aenter__(self) -> AiohttpTransport:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _session(self, credentials: Credentials) -> ClientSession:
        cookies = credentials != Credentials.OMIT
        session = self._sessions.get(cookies)
        if session is None or session.closed:
            connector = TCPConnector(
                limit=self.connector_limit,
                limit_per_host=self.limit_per_host,
                ssl=self.verify_ssl,
            )
            session = ClientSession(
                connector=connector,
                timeout=ClientTimeout(total=None),
                cookie_jar=None if cookies else DummyCookieJar(),
                raise_for_status=False,
            )
            self._sessions[cookies] = session
        return session

    async def send(self, request: TransportRequest) -> RawResponse:
        """
        Perform the request and read the whole body.

        Redirects are followed. Non-2xx statuses are returned, not raised.

        Raises:
            aiohttp.ClientError: On connection level failures
            asyncio.TimeoutError: If the transport level timeout elapses
        """
        session = self._session(request.credentials)
        timeout: Optional[ClientTimeout] = (
            ClientTimeout(total=request.timeout) if request.timeout else None
        )

        logger.debug(f"{request.method} {request.url}")
        async with session.request(
            method=request.method,
            url=request.url,
            headers=request.headers,
            data=request.body,
            timeout=timeout,
            allow_redirects=True,
        ) as response:
            body = await response.read()
            return RawResponse(
                status=response.status,
                reason=response.reason,
                headers=response.headers,
                body=body,
                url=str(response.url),
            )

    async def close(self) -> None:
        """Close every open session."""
        sessions, self._sessions = self._sessions, {}
        for session in sessions.values():
            if not session.closed:
                await session.close()


__all__ = [
    "Transport",
    "AiohttpTransport",
]
