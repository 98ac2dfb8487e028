"""Kaggle REST API transport layer."""
from .config import APIConfig, TimeoutConfig, DEFAULT_BASE_URL
from .async_client import AsyncAPIClient
from .errors import (
    KaggleAPIError,
    UnauthorizedError,
    RateLimitedError,
    UnexpectedStatusError,
    classify_status,
)
from .request import RequestBuilder, CompetitionsList, DatasetsList, KernelsList

__all__ = [
    'APIConfig',
    'TimeoutConfig',
    'DEFAULT_BASE_URL',
    'AsyncAPIClient',
    'KaggleAPIError',
    'UnauthorizedError',
    'RateLimitedError',
    'UnexpectedStatusError',
    'classify_status',
    'RequestBuilder',
    'CompetitionsList',
    'DatasetsList',
    'KernelsList',
]
