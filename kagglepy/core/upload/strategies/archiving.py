"""
Archiving strategies for sub-directories of a dataset folder.

A sub-directory is packed into one archive file that is then uploaded like
any other file. Entries keep their paths relative to the archived directory.
"""
import os
import tarfile
import zipfile
from enum import Enum
from pathlib import Path
from typing import Iterator, Union

from ...logging import get_logger

logger = get_logger('kagglepy.archive')


class ArchiveMode(str, Enum):
    """How a sub-directory is packaged before upload."""
    TAR = 'tar'
    ZIP = 'zip'

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @classmethod
    def parse(cls, value: Union[str, 'ArchiveMode']) -> 'ArchiveMode':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Unknown archive mode {value!r}, expected one of "
                f"{', '.join(m.value for m in cls)}"
            ) from None

    def make_archive(self, source: Union[str, Path], target_dir: Union[str, Path]) -> Path:
        """
        Archive ``source`` into ``target_dir/<source name>.<ext>``.

        Args:
            source: Directory to archive
            target_dir: Existing directory receiving the archive

        Returns:
            Path of the created archive
        """
        source = Path(source)
        if not source.is_dir():
            raise NotADirectoryError(f"Cannot archive {source}: not a directory")

        target = Path(target_dir) / f"{source.name}{self.extension}"
        count = 0

        if self is ArchiveMode.ZIP:
            with zipfile.ZipFile(target, 'w', compression=zipfile.ZIP_DEFLATED) as zf:
                for path in _walk_sorted(source):
                    zf.write(path, arcname=path.relative_to(source).as_posix())
                    count += 1
        else:
            with tarfile.open(target, 'w') as tf:
                for path in _walk_sorted(source):
                    tf.add(path, arcname=path.relative_to(source).as_posix(), recursive=False)
                    count += 1

        logger.debug(f"Archived {count} entries of {source} into {target.name}")
        return target


def _walk_sorted(root: Path) -> Iterator[Path]:
    """Yield every directory and file below ``root`` in sorted order."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        current = Path(dirpath)
        if current != root:
            yield current
        for name in sorted(filenames):
            yield current / name
