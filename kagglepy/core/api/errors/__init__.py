"""Kaggle API errors and exceptions."""
from .api_errors import (
    APIErrorCodes,
    KaggleAPIError,
    UnauthorizedError,
    RateLimitedError,
    UnexpectedStatusError,
    classify_status,
    parse_retry_after,
)

__all__ = [
    'APIErrorCodes',
    'KaggleAPIError',
    'UnauthorizedError',
    'RateLimitedError',
    'UnexpectedStatusError',
    'classify_status',
    'parse_retry_after',
]
