"""
Dataset file uploader.

Drives a file through negotiate -> stream -> token, and a dataset folder
through the same sequence one child at a time.
"""
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

from .models import DatasetUploadFile, UploadProgress, UploadSessionInfo
from .protocols import ArchiverProtocol, NegotiatorProtocol
from .services import FileStream, FileValidator, UploadNegotiator, local_read_errors
from .strategies import ArchiveMode
from ..api.async_client import AsyncAPIClient
from ..exceptions import MalformedResponseError
from ..logging import get_logger
from ..metadata import METADATA_FILES, Resource

logger = get_logger('kagglepy.upload')


class FileUploader:
    """
    Uploads dataset files.

    Uses dependency injection for the negotiator, making it:
    - Testable (mock negotiation)
    - Extensible (swap API generations)

    Example:
        >>> uploader = FileUploader(api)
        >>> upload_file = await uploader.upload("train.csv")
        >>> upload_file.token
    """

    def __init__(
        self,
        api: AsyncAPIClient,
        negotiator: Optional[NegotiatorProtocol] = None,
        chunk_size: Optional[int] = None,
        progress_callback: Optional[Callable[[UploadProgress], None]] = None
    ):
        """
        Initialize file uploader.

        Args:
            api: Shared transport
            negotiator: Upload negotiator (defaults to the REST one)
            chunk_size: Streaming read size (defaults to the API config)
            progress_callback: Optional callback for streamed progress
        """
        self._api = api
        self._negotiator = negotiator or UploadNegotiator(api)
        self._chunk_size = chunk_size or api.config.chunk_size
        self._progress_callback = progress_callback
        self._validator = FileValidator()
        self._tmp_dir: Optional[Path] = None

    async def upload(
        self,
        path: Union[str, Path],
        declared_name: Optional[str] = None,
        resource: Optional[Resource] = None
    ) -> DatasetUploadFile:
        """
        Upload one file.

        Args:
            path: Local file
            declared_name: Name in the dataset (defaults to the file name)
            resource: Optional metadata whose description and columns are
                copied onto the result

        Returns:
            Upload file entry carrying the negotiated token

        Raises:
            KaggleFileNotFoundError: If the file does not exist
        """
        stat = self._validator.stat(path)
        name = declared_name or stat.name
        logger.info(f"Starting upload: {name} ({stat.content_length / (1024 * 1024):.2f} MB)")

        info = await self._negotiator.negotiate_upload(
            name, stat.content_length, stat.last_modified
        )

        if info.create_url:
            await self.stream_to(stat.path, info)
        else:
            logger.debug(f"No upload URL for {name}; byte transfer left to the caller")

        logger.info(f"Upload of {name} complete")
        return DatasetUploadFile.from_session(info, resource)

    async def stream_to(self, path: Path, info: UploadSessionInfo) -> None:
        """PUT the file body to the negotiated URL without buffering it."""
        stream = FileStream(
            path,
            self._chunk_size,
            progress_callback=self._progress_callback,
            total_bytes=info.content_length
        )
        headers = {
            'Content-Type': 'application/octet-stream',
            'Content-Length': str(info.content_length),
        }
        async with local_read_errors(stream):
            async with self._api.execute(
                'PUT', info.create_url, data=stream, headers=headers
            ) as response:
                await response.read()

    async def upload_directory(
        self,
        folder: Union[str, Path],
        resources: Sequence[Resource] = (),
        archive_mode: Union[ArchiveMode, str, ArchiverProtocol] = ArchiveMode.ZIP
    ) -> List[DatasetUploadFile]:
        """
        Upload the immediate children of ``folder``.

        Regular files are uploaded as-is; sub-directories are archived first
        and the archive is uploaded. Metadata files are skipped. Nothing below
        depth one is visited directly. Files are processed one at a time, in
        name order.

        Args:
            folder: Dataset folder
            resources: Declared resources, matched by file name
            archive_mode: How to pack sub-directories

        Returns:
            One entry per uploaded child
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(f"Not a directory: {folder}")
        if isinstance(archive_mode, str):
            archive_mode = ArchiveMode.parse(archive_mode)

        by_name: Dict[str, Resource] = {r.path: r for r in resources}
        uploads: List[DatasetUploadFile] = []
        seen_tokens = set()

        for entry in sorted(folder.iterdir(), key=lambda p: p.name):
            if entry.name in METADATA_FILES:
                continue
            if entry.is_file():
                upload_file = await self.upload(entry, entry.name, by_name.get(entry.name))
            elif entry.is_dir():
                archive = archive_mode.make_archive(entry, self._temp_dir())
                upload_file = await self.upload(archive, archive.name, by_name.get(archive.name))
            else:
                continue

            if upload_file.token in seen_tokens:
                raise MalformedResponseError(
                    f"Server returned token {upload_file.token!r} for more than one file"
                )
            seen_tokens.add(upload_file.token)
            uploads.append(upload_file)

        logger.info(f"Uploaded {len(uploads)} files from {folder}")
        return uploads

    def _temp_dir(self) -> Path:
        if self._tmp_dir is None:
            self._tmp_dir = Path(tempfile.mkdtemp(prefix='kagglepy-upload-'))
        return self._tmp_dir

    def close(self) -> None:
        """Remove archives created for directory uploads."""
        if self._tmp_dir is not None:
            shutil.rmtree(self._tmp_dir, ignore_errors=True)
            self._tmp_dir = None
