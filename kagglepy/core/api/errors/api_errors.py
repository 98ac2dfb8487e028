"""Kaggle API HTTP status errors and their classification."""
from http import HTTPStatus
from typing import Mapping, Optional

from ...exceptions import KaggleException


class APIErrorCodes:
    """HTTP status codes with a dedicated meaning for the Kaggle API."""

    UNAUTHORIZED = 401
    TOO_MANY_REQUESTS = 429

    ERROR_MESSAGES = {
        401: 'Unauthorized request to API',
        429: 'Exceeded API request limit',
    }

    @classmethod
    def get_message(cls, code: int) -> str:
        """Gets error message for a status code."""
        if code in cls.ERROR_MESSAGES:
            return cls.ERROR_MESSAGES[code]
        return f"Kaggle API reported error code {code}"


class KaggleAPIError(KaggleException):
    """Exception raised for non-2xx API responses."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(message or APIErrorCodes.get_message(status_code))


class UnauthorizedError(KaggleAPIError):
    """Bad or missing credentials (HTTP 401)."""

    def __init__(self):
        super().__init__(APIErrorCodes.UNAUTHORIZED)


class RateLimitedError(KaggleAPIError):
    """
    Server-side throttling (HTTP 429).

    ``retry_after`` is the advertised wait in seconds, when the server
    sent a numeric ``Retry-After`` header.
    """

    def __init__(self, retry_after: Optional[int] = None):
        self.retry_after = retry_after
        message = APIErrorCodes.get_message(APIErrorCodes.TOO_MANY_REQUESTS)
        if retry_after is not None:
            message = f"{message} - please wait {retry_after} seconds"
        super().__init__(APIErrorCodes.TOO_MANY_REQUESTS, message)


class UnexpectedStatusError(KaggleAPIError):
    """Any other non-2xx status."""

    def __init__(self, status_code: int):
        try:
            reason = HTTPStatus(status_code).phrase
        except ValueError:
            reason = None
        message = APIErrorCodes.get_message(status_code)
        if reason:
            message = f"{message} ({reason})"
        super().__init__(status_code, message)


def parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Parses a ``Retry-After`` value given in seconds; dates yield None."""
    if value is None:
        return None
    value = value.strip()
    if not value.isdigit():
        return None
    return int(value)


def classify_status(
    status: int,
    headers: Optional[Mapping[str, str]] = None
) -> Optional[KaggleAPIError]:
    """
    Map a response status to the error it represents.

    Args:
        status: HTTP status code
        headers: Response headers (only ``Retry-After`` is consulted)

    Returns:
        None for 2xx statuses, otherwise the matching exception instance
    """
    if 200 <= status < 300:
        return None
    if status == APIErrorCodes.UNAUTHORIZED:
        return UnauthorizedError()
    if status == APIErrorCodes.TOO_MANY_REQUESTS:
        retry_after = parse_retry_after((headers or {}).get('Retry-After'))
        return RateLimitedError(retry_after)
    return UnexpectedStatusError(status)
