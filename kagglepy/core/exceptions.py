"""
Custom exceptions for Kaggle API operations.

This module defines the local and response-shape failures. HTTP status
failures live in ``kagglepy.core.api.errors``.
"""
from pathlib import Path
from typing import Optional, Any, Union


class KaggleException(Exception):
    """Base exception for all kagglepy errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class CredentialsError(KaggleException):
    """Raised when no username/key pair could be resolved."""
    pass


class TransportError(KaggleException):
    """Network level failure (connection reset, timeout, DNS...)."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        super().__init__(message)


class KaggleFileNotFoundError(KaggleException):
    """A local file or directory required by an operation does not exist."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        super().__init__(f"File not found: {self.path}")


class MalformedResponseError(KaggleException):
    """
    The server answered with a payload of an unexpected shape.

    Args:
        message: Error message
        payload: The decoded payload that could not be interpreted
    """

    def __init__(self, message: str, payload: Any = None) -> None:
        self.payload = payload
        super().__init__(message)


class MissingTokenError(MalformedResponseError):
    """An upload result did not carry a usable ``token`` field."""
    pass


class DecodeError(KaggleException):
    """A 2xx response body could not be decoded into the expected type."""

    def __init__(self, message: str, body: Optional[str] = None) -> None:
        self.body = body
        super().__init__(message)


class MetadataError(KaggleException):
    """Dataset metadata failed validation."""
    pass
