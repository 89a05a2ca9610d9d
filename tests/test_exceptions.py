"""
Tests for the exception hierarchy.
"""

import pytest

from guarded_fetch.exceptions import (
    MAX_URL_LENGTH,
    GuardedFetchError,
    InvalidMetadataError,
    InvalidUrlError,
    ResponseFailure,
    UnsafeUrlError,
    UrlTooLongError,
    ValidationError,
    VerifyError,
)
from guarded_fetch.models import Failed, RawResponse


class TestExceptions:
    """Test exception attributes and hierarchy."""

    def test_base_error(self):
        error = GuardedFetchError("boom", url="https://api.example.com", attempt=2)

        assert str(error) == "boom"
        assert error.message == "boom"
        assert error.url == "https://api.example.com"
        assert error.details == {"attempt": 2}

    @pytest.mark.parametrize(
        "cls,message",
        [
            (UnsafeUrlError, "Unsafe URL"),
            (InvalidUrlError, "Invalid URL"),
            (InvalidMetadataError, "Invalid metadata"),
            (UrlTooLongError, "URL too long"),
            (VerifyError, "Verification failed"),
        ],
    )
    def test_default_messages(self, cls, message):
        assert cls().message == message

    @pytest.mark.parametrize(
        "cls", [UnsafeUrlError, InvalidUrlError, InvalidMetadataError, UrlTooLongError]
    )
    def test_validation_errors(self, cls):
        assert issubclass(cls, ValidationError)
        assert issubclass(cls, GuardedFetchError)

    def test_metadata_details(self):
        error = InvalidMetadataError("bad", header="X-A", code=10)
        assert error.details == {"header": "X-A", "code": 10}

    def test_url_too_long_limit(self):
        assert UrlTooLongError().max_length == MAX_URL_LENGTH
        assert UrlTooLongError(max_length=100).max_length == 100

    def test_response_failure(self):
        raw = RawResponse(status=404, url="https://api.example.com/x")
        outcome = Failed(status=404, message="Not Found")

        error = ResponseFailure(raw, outcome)

        assert error.message == "Not Found"
        assert error.url == "https://api.example.com/x"
        assert error.response is raw
        assert error.outcome is outcome
