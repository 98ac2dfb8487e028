"""Request building and query models."""
from .request_builder import RequestBuilder
from .queries import CompetitionsList, DatasetsList, KernelsList

__all__ = [
    'RequestBuilder',
    'CompetitionsList',
    'DatasetsList',
    'KernelsList',
]
