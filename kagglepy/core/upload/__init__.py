"""
Upload module for Kaggle dataset files and competition submissions.

Negotiation, streaming and archiving are separate pieces injected into the
uploader and the submission orchestrator.
"""
from .coordinator import FileUploader
from .submission import (
    SubmissionOrchestrator,
    classify_upload,
    parse_create_url,
    extract_token,
)
from .models import (
    FileStat,
    UploadSessionInfo,
    DatasetUploadFile,
    LegacyUpload,
    LegacyUploadTarget,
    DirectUpload,
    UploadProgress,
)
from .protocols import NegotiatorProtocol, ArchiverProtocol
from .services import UploadNegotiator, FileValidator, iter_chunks, file_stream
from .strategies import ArchiveMode

__all__ = [
    # Main classes
    'FileUploader',
    'SubmissionOrchestrator',
    'UploadNegotiator',
    'FileValidator',

    # Pure helpers
    'classify_upload',
    'parse_create_url',
    'extract_token',
    'iter_chunks',
    'file_stream',

    # Models
    'FileStat',
    'UploadSessionInfo',
    'DatasetUploadFile',
    'LegacyUpload',
    'LegacyUploadTarget',
    'DirectUpload',
    'UploadProgress',
    'ArchiveMode',

    # Protocols
    'NegotiatorProtocol',
    'ArchiverProtocol',
]
