"""
Streaming codec.

Turns a file into a lazy sequence of byte chunks that aiohttp can send as
a request body, so a file never has to sit in memory as a whole.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable, Optional, Union

import aiofiles

from ..models import UploadProgress
from ...api.config import DEFAULT_CHUNK_SIZE
from ...exceptions import TransportError
from ...logging import get_logger

logger = get_logger('kagglepy.upload.stream')


async def iter_chunks(
    handle,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> AsyncIterator[bytes]:
    """
    Yield chunks from an open aiofiles handle until EOF.

    Read errors propagate as ``OSError``; the stream is never silently
    truncated. The generator is single pass.

    Args:
        handle: Async file handle opened in binary mode
        chunk_size: Maximum size of each chunk
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    while True:
        chunk = await handle.read(chunk_size)
        if not chunk:
            break
        yield chunk


async def file_stream(
    path: Union[str, Path],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    progress_callback: Optional[Callable[[UploadProgress], None]] = None,
    total_bytes: int = 0
) -> AsyncIterator[bytes]:
    """
    Open ``path`` and stream its contents.

    The handle is closed once the stream is exhausted or abandoned. A fresh
    stream must be created to send the file again.

    Args:
        path: File to read
        chunk_size: Maximum size of each chunk
        progress_callback: Called after every chunk with the running total
        total_bytes: Declared size reported through the progress callback
    """
    path = Path(path)
    progress = UploadProgress(total_bytes=total_bytes, file_name=path.name)

    async with aiofiles.open(path, 'rb') as handle:
        async for chunk in iter_chunks(handle, chunk_size):
            progress.uploaded_bytes += len(chunk)
            if progress_callback:
                progress_callback(progress)
            yield chunk

    logger.debug(f"Streamed {progress.uploaded_bytes} bytes from {path.name}")


class FileStream:
    """
    Request body streaming a file, for use as aiohttp ``data``.

    aiohttp reports a failed body read as a network error. The ``OSError``
    raised by the file is kept in ``read_error``.
    """

    def __init__(
        self,
        path: Union[str, Path],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        progress_callback: Optional[Callable[[UploadProgress], None]] = None,
        total_bytes: int = 0
    ):
        self._chunks = file_stream(path, chunk_size, progress_callback, total_bytes)
        self.read_error: Optional[OSError] = None

    def __aiter__(self) -> 'FileStream':
        return self

    async def __anext__(self) -> bytes:
        try:
            return await self._chunks.__anext__()
        except OSError as e:
            self.read_error = e
            raise


@asynccontextmanager
async def local_read_errors(stream: FileStream):
    """Raise the file's own ``OSError`` in place of the transport error it caused."""
    try:
        yield
    except TransportError as e:
        if stream.read_error is not None:
            raise stream.read_error from e
        raise
