"""Tests for API status classification."""
import pytest

from kagglepy.core.api.errors import (
    KaggleAPIError,
    RateLimitedError,
    UnauthorizedError,
    UnexpectedStatusError,
    classify_status,
)
from kagglepy.core.api.errors.api_errors import parse_retry_after
from kagglepy.core.exceptions import KaggleException


class TestClassifyStatus:
    """Test suite for classify_status."""

    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_success_is_not_an_error(self, status):
        assert classify_status(status, {}) is None

    def test_unauthorized(self):
        error = classify_status(401, {})

        assert isinstance(error, UnauthorizedError)
        assert error.status_code == 401
        assert "Unauthorized" in str(error)

    def test_rate_limited_with_retry_after(self):
        error = classify_status(429, {'Retry-After': '30'})

        assert isinstance(error, RateLimitedError)
        assert error.retry_after == 30
        assert "please wait 30 seconds" in str(error)

    def test_rate_limited_without_retry_after(self):
        error = classify_status(429, {})

        assert isinstance(error, RateLimitedError)
        assert error.retry_after is None

    def test_rate_limited_with_http_date(self):
        error = classify_status(429, {'Retry-After': 'Wed, 21 Oct 2015 07:28:00 GMT'})

        assert error.retry_after is None

    def test_unexpected_status_carries_code(self):
        error = classify_status(418, {})

        assert isinstance(error, UnexpectedStatusError)
        assert error.status_code == 418
        assert "418" in str(error)

    @pytest.mark.parametrize("status", [400, 403, 404, 500, 503])
    def test_other_statuses(self, status):
        error = classify_status(status)

        assert type(error) is UnexpectedStatusError
        assert error.status_code == status

    def test_all_errors_share_base(self):
        for error in (classify_status(401), classify_status(429), classify_status(500)):
            assert isinstance(error, KaggleAPIError)
            assert isinstance(error, KaggleException)


class TestParseRetryAfter:
    """Test suite for Retry-After parsing."""

    @pytest.mark.parametrize("value,expected", [
        ('0', 0),
        ('120', 120),
        (' 5 ', 5),
        (None, None),
        ('', None),
        ('-1', None),
        ('1.5', None),
    ])
    def test_values(self, value, expected):
        assert parse_retry_after(value) == expected
