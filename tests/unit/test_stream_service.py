"""Tests for the streaming codec and file validation."""
import os
from unittest.mock import AsyncMock, Mock

import pytest

from kagglepy.core.exceptions import KaggleFileNotFoundError, TransportError
from kagglepy.core.upload import FileUploader, UploadSessionInfo
from kagglepy.core.upload.services import (
    FileStream,
    FileValidator,
    file_stream,
    iter_chunks,
    local_read_errors,
)
from kagglepy.core.upload.services import stream_service


def failing_file_stream(path, *args, **kwargs):
    async def chunks():
        yield b'partial'
        raise OSError(5, "Input/output error")
    return chunks()


async def collect(stream):
    return [chunk async for chunk in stream]


class TestFileStream:
    """Test suite for file_stream."""

    @pytest.mark.asyncio
    async def test_empty_file(self, make_file):
        path = make_file('empty.bin', b'')

        chunks = await collect(file_stream(path, 1024))

        assert chunks == []

    @pytest.mark.asyncio
    async def test_small_file_single_chunk(self, make_file):
        path = make_file('small.csv', b'a,b\n1,2\n')

        chunks = await collect(file_stream(path, 1024))

        assert chunks == [b'a,b\n1,2\n']

    @pytest.mark.asyncio
    async def test_large_file_is_chunked_and_complete(self, make_file):
        content = os.urandom(3 * 1024 * 1024 + 17)
        path = make_file('large.bin', content)

        chunks = await collect(file_stream(path, 64 * 1024))

        assert b''.join(chunks) == content
        assert all(len(c) <= 64 * 1024 for c in chunks)
        assert len(chunks) == 49

    @pytest.mark.asyncio
    async def test_progress_callback(self, make_file):
        path = make_file('data.bin', b'x' * 10)
        seen = []

        await collect(file_stream(
            path, 4,
            progress_callback=lambda p: seen.append(p.uploaded_bytes),
            total_bytes=10
        ))

        assert seen == [4, 8, 10]

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await collect(file_stream(tmp_path / 'nope.bin'))


class TestIterChunks:
    """Test suite for iter_chunks."""

    @pytest.mark.asyncio
    async def test_read_error_propagates(self):
        handle = Mock()
        handle.read = AsyncMock(side_effect=[b'first', OSError("device gone")])

        stream = iter_chunks(handle, 5)
        assert await stream.__anext__() == b'first'

        with pytest.raises(OSError, match="device gone"):
            await stream.__anext__()

    @pytest.mark.asyncio
    async def test_invalid_chunk_size(self):
        with pytest.raises(ValueError):
            await collect(iter_chunks(Mock(), 0))


class TestLocalReadErrors:
    """Test suite for FileStream read failures."""

    @pytest.mark.asyncio
    async def test_read_error_is_recorded(self, make_file, monkeypatch):
        monkeypatch.setattr(stream_service, 'file_stream', failing_file_stream)
        stream = FileStream(make_file('a.bin', b'abc'))

        with pytest.raises(OSError):
            await collect(stream)

        assert stream.read_error.errno == 5

    @pytest.mark.asyncio
    async def test_transport_error_becomes_read_error(self, make_file, monkeypatch):
        monkeypatch.setattr(stream_service, 'file_stream', failing_file_stream)
        stream = FileStream(make_file('a.bin', b'abc'))

        with pytest.raises(OSError) as excinfo:
            async with local_read_errors(stream):
                try:
                    await collect(stream)
                except OSError as e:
                    raise TransportError("Network error", cause=e) from e

        assert excinfo.value is stream.read_error

    @pytest.mark.asyncio
    async def test_network_errors_pass_through(self, make_file):
        stream = FileStream(make_file('a.bin', b'abc'))

        with pytest.raises(TransportError):
            async with local_read_errors(stream):
                raise TransportError("Connection reset")

    @pytest.mark.asyncio
    async def test_upload_reports_local_read_error(
        self, fake_kaggle, api_factory, make_file, monkeypatch
    ):
        path = make_file('data.bin', b'0123456789')
        fake_kaggle.route('PUT', '/blob', prefix='')
        api = api_factory(await fake_kaggle.start())
        monkeypatch.setattr(stream_service, 'file_stream', failing_file_stream)
        uploader = FileUploader(api)
        info = UploadSessionInfo('tok', 10, 0, create_url=fake_kaggle.url('/blob'))

        with pytest.raises(OSError) as excinfo:
            await uploader.stream_to(path, info)

        assert not isinstance(excinfo.value, TransportError)
        assert excinfo.value.errno == 5


class TestFileValidator:
    """Test suite for FileValidator."""

    @pytest.fixture
    def validator(self):
        return FileValidator()

    def test_stat(self, validator, make_file):
        path = make_file('train.csv', b'12345')
        os.utime(path, (1700000000, 1700000000))

        stat = validator.stat(path)

        assert stat.path == path
        assert stat.name == 'train.csv'
        assert stat.content_length == 5
        assert stat.last_modified == 1700000000

    def test_missing(self, validator, tmp_path):
        with pytest.raises(KaggleFileNotFoundError) as exc_info:
            validator.stat(tmp_path / 'missing.csv')

        assert exc_info.value.path == tmp_path / 'missing.csv'

    def test_directory(self, validator, tmp_path):
        with pytest.raises(ValueError):
            validator.stat(tmp_path)
