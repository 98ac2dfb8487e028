"""File validation service."""
from pathlib import Path
from typing import Union

from ..models import FileStat
from ...exceptions import KaggleFileNotFoundError


class FileValidator:
    """
    Validates files before upload.

    Responsibilities:
    - Check file existence
    - Verify file is not a directory
    - Get file size and modification time
    """

    def stat(self, file_path: Union[str, Path]) -> FileStat:
        """
        Read size and modification time of a file.

        The file may still change or vanish between this call and the upload.

        Raises:
            KaggleFileNotFoundError: If file doesn't exist
            ValueError: If path is not a regular file
        """
        path = Path(file_path)

        if not path.exists():
            raise KaggleFileNotFoundError(path)

        if not path.is_file():
            raise ValueError(f"Path is not a file: {path}")

        st = path.stat()
        return FileStat(
            path=path,
            content_length=st.st_size,
            last_modified=int(st.st_mtime),
        )
