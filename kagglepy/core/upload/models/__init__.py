"""Upload models."""
from .upload_models import (
    FileStat,
    UploadSessionInfo,
    DatasetUploadFile,
    LegacyUpload,
    LegacyUploadTarget,
    DirectUpload,
    UploadPlan,
    UploadProgress,
)

__all__ = [
    'FileStat',
    'UploadSessionInfo',
    'DatasetUploadFile',
    'LegacyUpload',
    'LegacyUploadTarget',
    'DirectUpload',
    'UploadPlan',
    'UploadProgress',
]
