"""
Tests for response unwrapping and failure normalization.
"""

import asyncio

import pytest

from guarded_fetch.exceptions import ResponseFailure, UnsafeUrlError, VerifyError
from guarded_fetch.models import Failed, RawResponse, Success
from guarded_fetch.utils.response import (
    failify,
    is_cancelled,
    outcomify,
    reason_phrase,
    unwrap,
)


class TestUnwrap:
    """Test Content-Type driven body decoding."""

    def test_json(self, json_response):
        """JSON bodies are parsed."""
        assert unwrap(json_response({"a": [1, 2]})) == {"a": [1, 2]}

    def test_json_with_charset(self):
        """Parameters after the media type are ignored."""
        raw = RawResponse(
            status=200,
            headers={"content-type": "application/json; charset=utf-8"},
            body=b'{"ok": true}',
        )
        assert unwrap(raw) == {"ok": True}

    def test_xml_is_text(self):
        """XML types are decoded as text."""
        raw = RawResponse(
            status=200, headers={"Content-Type": "application/rss+xml"}, body=b"<rss/>"
        )
        assert unwrap(raw) == "<rss/>"

    def test_text(self):
        """text/* types are decoded as text."""
        raw = RawResponse(status=200, headers={"Content-Type": "text/html"}, body=b"<p>hi</p>")
        assert unwrap(raw) == "<p>hi</p>"

    def test_latin1_charset(self):
        """The declared charset is honored."""
        raw = RawResponse(
            status=200,
            headers={"Content-Type": "text/plain; charset=iso-8859-1"},
            body="café".encode("latin-1"),
        )
        assert unwrap(raw) == "café"

    def test_no_content(self):
        """A 204 without a recognized type yields None."""
        assert unwrap(RawResponse(status=204)) is None

    def test_empty_json_body(self):
        """An empty JSON body yields None."""
        raw = RawResponse(status=204, headers={"Content-Type": "application/json"})
        assert unwrap(raw) is None

    def test_unknown_type_defaults_to_text(self):
        """Anything else is decoded as text."""
        raw = RawResponse(
            status=200, headers={"Content-Type": "application/octet-stream"}, body=b"abc"
        )
        assert unwrap(raw) == "abc"

    def test_malformed_json_raises(self):
        """A JSON type with a broken body raises."""
        raw = RawResponse(status=200, headers={"Content-Type": "application/json"}, body=b"{")
        with pytest.raises(ValueError):
            unwrap(raw)


class TestOutcomify:
    """Test raw response to Outcome conversion."""

    @pytest.mark.asyncio
    async def test_success(self, json_response):
        """A 200 JSON response becomes Success."""
        outcome = await outcomify(json_response({"a": 1}))

        assert outcome == Success(status=200, data={"a": 1})
        assert outcome.success is True

    @pytest.mark.asyncio
    async def test_redirect_status_is_ok(self, json_response):
        """3xx statuses count as ok."""
        outcome = await outcomify(json_response({}, status=304))
        assert outcome.success

    @pytest.mark.asyncio
    async def test_failure(self, json_response):
        """A 404 becomes Failed with the reason phrase and decoded body."""
        outcome = await outcomify(json_response({"error": "msg"}, status=404))

        assert outcome == Failed(status=404, message="Not Found", body={"error": "msg"})
        assert outcome.success is False

    @pytest.mark.asyncio
    async def test_failure_with_undecodable_body(self):
        """An error status survives a body that does not match its JSON type."""
        raw = RawResponse(
            status=502, headers={"Content-Type": "application/json"}, body=b"<h1>Bad Gateway</h1>"
        )

        outcome = await outcomify(raw)

        assert outcome == Failed(status=502, message="Bad Gateway")

    @pytest.mark.asyncio
    async def test_verify_rejects(self, json_response):
        """A rejecting predicate raises VerifyError instead of returning."""
        with pytest.raises(VerifyError):
            await outcomify(json_response([1]), verify=lambda data: len(data) > 1)

    @pytest.mark.asyncio
    async def test_async_verify(self, json_response):
        """Coroutine predicates are awaited."""

        async def verify(data):
            return data["id"] == 7

        outcome = await outcomify(json_response({"id": 7}), verify=verify)
        assert outcome == Success(status=200, data={"id": 7})

    @pytest.mark.asyncio
    async def test_verify_not_applied_to_failures(self, json_response):
        """Failures are returned without consulting verify."""
        outcome = await outcomify(json_response({}, status=500), verify=lambda data: False)
        assert outcome.status == 500


class TestFailify:
    """Test normalization of raised values."""

    def test_raw_response_with_message(self, json_response):
        """The body's message field becomes the failure message."""
        failed = failify(json_response({"message": "quota exceeded"}, status=429))

        assert failed == Failed(
            status=429, message="quota exceeded", body={"message": "quota exceeded"}
        )

    def test_raw_response_without_message(self, json_response):
        """Without a message field the reason phrase is used."""
        failed = failify(json_response({"error": "x"}, status=403))

        assert failed == Failed(status=403, message="Forbidden", body={"error": "x"})

    def test_raw_response_non_json(self):
        """Undecodable bodies are dropped."""
        raw = RawResponse(status=502, headers={"Content-Type": "text/html"}, body=b"<h1>bad</h1>")

        assert failify(raw) == Failed(status=502, message="Bad Gateway")

    def test_response_failure_uses_outcome_status(self, json_response):
        """The status comes from the (possibly rewritten) failed outcome."""
        raw = json_response({"message": "nope"}, status=500)
        thrown = ResponseFailure(raw, Failed(status=418, message="rewritten"))

        failed = failify(thrown)

        assert failed.status == 418
        assert failed.message == "nope"
        assert failed.body == {"message": "nope"}

    @pytest.mark.parametrize(
        "thrown", [asyncio.TimeoutError(), TimeoutError("slow"), asyncio.CancelledError()]
    )
    def test_timeouts(self, thrown):
        """Timeout and cancellation become 408."""
        assert failify(thrown) == Failed(status=408, message="Request Timeout")

    def test_exception_message(self):
        """Other exceptions become 500 with their message."""
        assert failify(RuntimeError("boom")) == Failed(status=500, message="boom")

    def test_exception_without_message(self):
        """An empty message falls back to the reason phrase."""
        assert failify(RuntimeError()) == Failed(status=500, message="Internal Server Error")

    def test_library_error(self):
        """Library errors keep their message."""
        failed = failify(UnsafeUrlError("Blocked private address: 10.0.0.1"))
        assert failed == Failed(status=500, message="Blocked private address: 10.0.0.1")

    def test_library_error_default_message(self):
        """Library errors without a message use their default."""
        assert failify(VerifyError()).message == "Verification failed"

    @pytest.mark.parametrize("thrown", ["oops", 42, None, {"status": 404}])
    def test_non_exception_values(self, thrown):
        """Anything that is not an exception becomes a generic 500."""
        assert failify(thrown) == Failed(status=500, message="Internal Server Error")


class TestHelpers:
    """Test reason phrases and cancellation detection."""

    @pytest.mark.parametrize(
        "status,phrase",
        [(200, "OK"), (401, "Unauthorized"), (404, "Not Found"), (408, "Request Timeout")],
    )
    def test_reason_phrase(self, status, phrase):
        assert reason_phrase(status) == phrase

    def test_unknown_status(self):
        assert reason_phrase(599) == "Unknown Status"

    def test_is_cancelled(self):
        assert is_cancelled(asyncio.TimeoutError())
        assert is_cancelled(asyncio.CancelledError())
        assert not is_cancelled(ValueError())
