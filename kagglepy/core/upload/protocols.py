"""
Protocol definitions for upload module.

Defines interfaces for dependency injection, so negotiation and archiving
can be swapped out (in tests, or for other API generations).
"""
from pathlib import Path
from typing import Protocol, Dict, Any

from .models import UploadSessionInfo


class NegotiatorProtocol(Protocol):
    """Protocol for upload negotiation."""

    async def negotiate_upload(
        self,
        file_name: str,
        content_length: int,
        last_modified: int
    ) -> UploadSessionInfo:
        """
        Obtain an upload session for one dataset file.

        Args:
            file_name: Declared file name
            content_length: File size in bytes
            last_modified: Seconds since the epoch

        Returns:
            Session info carrying a single-use token
        """
        ...

    async def negotiate_submission(
        self,
        competition: str,
        file_name: str,
        content_length: int,
        last_modified: int
    ) -> Dict[str, Any]:
        """Obtain the raw submission upload target for a competition."""
        ...


class ArchiverProtocol(Protocol):
    """Protocol for packing a directory into a single file."""

    def make_archive(self, source: Path, target_dir: Path) -> Path:
        """
        Archive a directory.

        Args:
            source: Directory to pack
            target_dir: Where to write the archive

        Returns:
            Path of the archive
        """
        ...
