"""Upload services module."""
from .file_service import FileValidator
from .negotiator import UploadNegotiator
from .stream_service import FileStream, iter_chunks, file_stream, local_read_errors

__all__ = [
    'FileValidator',
    'UploadNegotiator',
    'iter_chunks',
    'file_stream',
    'FileStream',
    'local_read_errors',
]
