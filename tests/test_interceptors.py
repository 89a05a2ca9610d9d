"""
Tests for the interceptor pipeline and monitors.
"""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from guarded_fetch.http import monitor
from guarded_fetch.http.interceptors import (
    chain,
    run_request_interceptors,
    run_response_interceptors,
    select_callback,
)
from guarded_fetch.http.monitor import (
    MonitorKind,
    MonitorRequested,
    MonitorResponded,
    logging_interceptors,
)
from guarded_fetch.models import (
    Failed,
    Method,
    OnInterceptor,
    RawResponse,
    RequestContext,
    RequestOptions,
    ResponseContext,
    Success,
)

ENDPOINT = "https://api.example.com/users"


@pytest.fixture
def request_context():
    return RequestContext(
        method=Method.POST,
        endpoint=ENDPOINT,
        options=RequestOptions(headers={"Accept": "application/json"}, verify=bool),
        body={"name": "ada"},
    )


@pytest.fixture
def response_context():
    return ResponseContext(
        method=Method.GET,
        endpoint=ENDPOINT,
        outcome=Success(status=201, data={"id": 1}),
        raw=RawResponse(status=201),
    )


class TestRequestInterceptors:
    """Test request interceptor threading."""

    @pytest.mark.asyncio
    async def test_run_in_order(self, request_context):
        """Each interceptor receives the previous one's result."""
        seen = []

        def first(context):
            seen.append("first")
            return context.with_headers({"X-Step": "1"})

        async def second(context):
            seen.append(context.headers["X-Step"])
            return context.with_headers({"X-Step": "2"})

        result = await run_request_interceptors(request_context, [first, second])

        assert seen == ["first", "1"]
        assert result.headers["X-Step"] == "2"
        assert result.headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_original_context_untouched(self, request_context):
        result = await run_request_interceptors(
            request_context, [lambda c: c.with_headers({"X-New": "1"})]
        )

        assert "X-New" not in request_context.headers
        assert result is not request_context

    @pytest.mark.asyncio
    async def test_error_aborts_pipeline(self, request_context):
        """Later interceptors do not run after a failure."""
        later = MagicMock(side_effect=lambda c: c)

        def failing(context):
            raise RuntimeError("rejected")

        with pytest.raises(RuntimeError, match="rejected"):
            await run_request_interceptors(request_context, [failing, later])

        later.assert_not_called()

    @pytest.mark.asyncio
    async def test_wrong_return_type(self, request_context):
        with pytest.raises(TypeError, match="RequestContext"):
            await run_request_interceptors(request_context, [lambda c: None])

    @pytest.mark.asyncio
    async def test_empty_pipeline(self, request_context):
        assert await run_request_interceptors(request_context, ()) is request_context


class TestResponseInterceptors:
    """Test response interceptor threading."""

    @pytest.mark.asyncio
    async def test_outcome_rewrite(self, response_context):
        async def downgrade(context):
            return context.with_outcome(Failed(status=422, message="Unprocessable"))

        result = await run_response_interceptors(response_context, [downgrade])

        assert result.outcome == Failed(status=422, message="Unprocessable")
        assert response_context.outcome.success

    @pytest.mark.asyncio
    async def test_wrong_return_type(self, response_context):
        with pytest.raises(TypeError, match="ResponseContext"):
            await run_response_interceptors(response_context, [lambda c: c.outcome])


class TestChain:
    """Test callback chaining."""

    @pytest.mark.asyncio
    async def test_parent_then_child(self):
        calls = []
        chained = chain(lambda o: calls.append(("parent", o)), lambda o: calls.append(("child", o)))

        await chained("outcome")

        assert calls == [("parent", "outcome"), ("child", "outcome")]

    @pytest.mark.asyncio
    async def test_async_callbacks_awaited(self):
        parent, child = AsyncMock(), AsyncMock()

        await chain(parent, child)("x")

        parent.assert_awaited_once_with("x")
        child.assert_awaited_once_with("x")

    def test_single_or_none(self):
        fn = MagicMock()
        assert chain(fn, None) is fn
        assert chain(None, fn) is fn
        assert chain(None, None) is None


class TestSelectCallback:
    """Test lifecycle callback selection."""

    def setup_method(self):
        self.on = OnInterceptor(success=MagicMock(), failure=MagicMock(), unauthorized=MagicMock())

    def test_success(self):
        assert select_callback(self.on, Success(status=200, data=None)) is self.on.success

    def test_unauthorized(self):
        assert select_callback(self.on, Failed(status=401, message="x")) is self.on.unauthorized

    def test_failure(self):
        assert select_callback(self.on, Failed(status=403, message="x")) is self.on.failure

    def test_missing_unauthorized_does_not_fall_back(self):
        """A 401 never triggers the generic failure callback."""
        on = OnInterceptor(failure=MagicMock())
        assert select_callback(on, Failed(status=401, message="x")) is None

    def test_no_callbacks(self):
        assert select_callback(None, Success(status=200, data=1)) is None


class TestMonitor:
    """Test observation-only interceptors."""

    @pytest.mark.asyncio
    async def test_requested(self, request_context):
        observer = MagicMock()

        result = await monitor.requested(observer)(request_context)

        assert result is request_context
        event = observer.call_args.args[0]
        assert isinstance(event, MonitorRequested)
        assert event.kind == MonitorKind.REQUEST
        assert event.method == Method.POST
        assert event.endpoint == ENDPOINT
        assert event.body == {"name": "ada"}
        assert event.options["headers"] == {"Accept": "application/json"}
        assert "verify" not in event.options

    @pytest.mark.asyncio
    async def test_responded(self, response_context):
        observer = AsyncMock()

        result = await monitor.responded(observer)(response_context)

        assert result is response_context
        event = observer.await_args.args[0]
        assert isinstance(event, MonitorResponded)
        assert event.kind == MonitorKind.RESPONSE
        assert event.status == 201
        assert event.outcome == Success(status=201, data={"id": 1})

    @pytest.mark.asyncio
    async def test_responded_reports_raw_status(self, response_context):
        """The reported status is the transport's, not the outcome's."""
        observer = MagicMock()
        context = response_context.with_outcome(Failed(status=500, message="rewritten"))

        await monitor.responded(observer)(context)

        assert observer.call_args.args[0].status == 201

    @pytest.mark.asyncio
    async def test_logging_interceptors(self, request_context, response_context, caplog):
        logger = logging.getLogger("tests.monitor")
        interceptors = logging_interceptors(logger, level=logging.INFO)

        with caplog.at_level(logging.INFO, logger="tests.monitor"):
            await interceptors.request[0](request_context)
            await interceptors.response[0](response_context)

        assert f"--> POST {ENDPOINT}" in caplog.text
        assert f"<-- GET {ENDPOINT} 201 (success)" in caplog.text
