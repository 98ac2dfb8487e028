"""
Data models for upload module.

Uses dataclasses for immutable, type-safe data structures.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional, List, Union

from ...metadata import Column, Resource


@dataclass(frozen=True)
class FileStat:
    """
    Size and modification time of a local file.

    Attributes:
        path: File path
        content_length: Size in bytes
        last_modified: Modification time in whole seconds since the Unix epoch
    """
    path: Path
    content_length: int
    last_modified: int

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class UploadSessionInfo:
    """
    Result of an upload negotiation.

    The token is valid for exactly one upload of a file with the declared
    size. ``create_url``, when present, is where the bytes go.
    """
    token: str
    content_length: int
    last_modified: int
    create_url: Optional[str] = None

    @classmethod
    def from_response(
        cls,
        data: Dict[str, Any],
        content_length: int,
        last_modified: int
    ) -> 'UploadSessionInfo':
        create_url = data.get('createUrl')
        return cls(
            token=data['token'],
            content_length=content_length,
            last_modified=last_modified,
            create_url=create_url if isinstance(create_url, str) and create_url else None,
        )


@dataclass
class DatasetUploadFile:
    """
    A file entry for dataset creation.

    ``token`` must be the token negotiated for this very file.

    Example:
        >>> f = DatasetUploadFile("tok", description="Training split")
        >>> f.to_dict()
        {'token': 'tok', 'description': 'Training split'}
    """
    token: str
    description: Optional[str] = None
    columns: Optional[List[Column]] = None

    @classmethod
    def from_session(
        cls,
        info: UploadSessionInfo,
        resource: Optional[Resource] = None
    ) -> 'DatasetUploadFile':
        upload_file = cls(token=info.token)
        if resource is not None:
            upload_file.description = resource.description
            if resource.schema is not None:
                upload_file.columns = resource.schema.processed_columns()
        return upload_file

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'token': self.token}
        if self.description is not None:
            result['description'] = self.description
        if self.columns is not None:
            result['columns'] = [c.to_dict() for c in self.columns]
        return result


@dataclass(frozen=True)
class LegacyUpload:
    """
    Older submission flow: the file is posted to an upload-by-guid endpoint.

    ``create_url`` is kept as sent; its segments are read when uploading.
    """
    create_url: str


@dataclass(frozen=True)
class LegacyUploadTarget:
    """Upload-by-guid endpoint read off the last three segments of ``createUrl``."""
    guid: str
    content_length: int
    last_modified: int

    def path(self) -> str:
        return (
            f"/competitions/submissions/upload/"
            f"{self.guid}/{self.content_length}/{self.last_modified}"
        )


@dataclass(frozen=True)
class DirectUpload:
    """Current submission flow: raw bytes are PUT to ``create_url``."""
    create_url: str


UploadPlan = Union[LegacyUpload, DirectUpload]


@dataclass
class UploadProgress:
    """
    Streamed upload progress.

    Attributes:
        total_bytes: Declared file size
        uploaded_bytes: Bytes handed to the transport so far
    """
    total_bytes: int
    uploaded_bytes: int = 0
    file_name: str = field(default='')

    @property
    def percentage(self) -> float:
        if self.total_bytes == 0:
            return 100.0
        return (self.uploaded_bytes / self.total_bytes) * 100

    @property
    def is_complete(self) -> bool:
        return self.uploaded_bytes >= self.total_bytes
