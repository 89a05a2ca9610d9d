"""
Shared test fixtures and configuration for the guarded_fetch test suite.
"""

import asyncio
import json
import tempfile
from pathlib import Path
from typing import Any, AsyncGenerator, Callable, Dict, Generator, List, Optional

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from guarded_fetch import HttpClient, RawResponse, TransportRequest

BASE = "https://api.example.com"


class FakeTransport:
    """In-memory transport recording every request it receives."""

    def __init__(self) -> None:
        self.requests: List[TransportRequest] = []
        self.responses: List[RawResponse] = []
        self.delay = 0.0
        self.error: Optional[BaseException] = None
        self.closed = False

    def reply(self, response: RawResponse) -> "FakeTransport":
        self.responses.append(response)
        return self

    @property
    def last(self) -> TransportRequest:
        return self.requests[-1]

    async def send(self, request: TransportRequest) -> RawResponse:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return RawResponse(
            status=200, headers={"Content-Type": "application/json"}, body=b"{}"
        )

    async def close(self) -> None:
        self.closed = True


def _json_response(
    data: Any, status: int = 200, headers: Optional[Dict[str, str]] = None
) -> RawResponse:
    return RawResponse(
        status=status,
        headers={"Content-Type": "application/json", **(headers or {})},
        body=json.dumps(data).encode(),
    )


@pytest.fixture
def json_response() -> Callable[..., RawResponse]:
    """Factory building JSON RawResponse values."""
    return _json_response


@pytest.fixture
def transport() -> FakeTransport:
    """Fresh in-memory transport."""
    return FakeTransport()


@pytest.fixture
def client(transport: FakeTransport) -> HttpClient:
    """Client with a fixed base URL talking to the in-memory transport."""
    return HttpClient(base=BASE, transport=transport)


async def _users(request: web.Request) -> web.Response:
    return web.json_response({"id": 1})


async def _create_item(request: web.Request) -> web.Response:
    return web.json_response(
        {"received": await request.json(), "content_type": request.content_type},
        status=201,
    )


async def _missing(request: web.Request) -> web.Response:
    return web.json_response({"error": "msg"}, status=404)


async def _slow(request: web.Request) -> web.Response:
    await asyncio.sleep(0.5)
    return web.json_response({})


async def _text(request: web.Request) -> web.Response:
    return web.Response(text="hello")


@pytest.fixture
async def live_base() -> AsyncGenerator[str, None]:
    """Base URL of a local aiohttp server serving a small API."""
    app = web.Application()
    app.router.add_get("/users", _users)
    app.router.add_post("/items", _create_item)
    app.router.add_get("/missing", _missing)
    app.router.add_get("/slow", _slow)
    app.router.add_get("/text", _text)

    server = TestServer(app)
    await server.start_server()
    yield f"http://{server.host}:{server.port}"
    await server.close()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)
