"""
kagglepy - Async Python client for the Kaggle REST API.

Usage:
    >>> from kagglepy import KaggleClient, Authentication
    >>>
    >>> async with KaggleClient(Authentication.env()) as kaggle:
    ...     await kaggle.competition_submit("submission.csv", "titanic", "baseline")
"""
import logging

__version__ = '0.1.0'

from .client import KaggleClient, KaggleClientBuilder
from .core.auth import Authentication, Credentials, basic_auth_header

# Configuration
from .core.api import (
    APIConfig,
    TimeoutConfig,
    AsyncAPIClient,
    CompetitionsList,
    DatasetsList,
    KernelsList,
    KaggleAPIError,
    UnauthorizedError,
    RateLimitedError,
    UnexpectedStatusError,
)

# Uploads
from .core.upload import (
    ArchiveMode,
    DatasetUploadFile,
    FileUploader,
    SubmissionOrchestrator,
    UploadSessionInfo,
    UploadProgress,
)
from .core.metadata import Metadata, Resource, Column
from .core.exceptions import (
    KaggleException,
    CredentialsError,
    TransportError,
    KaggleFileNotFoundError,
    MalformedResponseError,
    MissingTokenError,
    DecodeError,
    MetadataError,
)


def setup_logging(level=logging.INFO):
    """
    Configure logging for kagglepy modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'kagglepy',
        'kagglepy.api',
        'kagglepy.client',
        'kagglepy.upload',
        'kagglepy.upload.stream',
        'kagglepy.upload.negotiate',
        'kagglepy.submission',
        'kagglepy.archive',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'KaggleClient',
    'KaggleClientBuilder',
    'Authentication',
    'Credentials',
    'basic_auth_header',
    'APIConfig',
    'TimeoutConfig',
    'AsyncAPIClient',
    'CompetitionsList',
    'DatasetsList',
    'KernelsList',
    'ArchiveMode',
    'DatasetUploadFile',
    'FileUploader',
    'SubmissionOrchestrator',
    'UploadSessionInfo',
    'UploadProgress',
    'Metadata',
    'Resource',
    'Column',
    'KaggleException',
    'KaggleAPIError',
    'UnauthorizedError',
    'RateLimitedError',
    'UnexpectedStatusError',
    'CredentialsError',
    'TransportError',
    'KaggleFileNotFoundError',
    'MalformedResponseError',
    'MissingTokenError',
    'DecodeError',
    'MetadataError',
    'setup_logging',
]
