"""Pytest fixtures for kagglepy tests."""
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from kagglepy import APIConfig, AsyncAPIClient, basic_auth_header

API_PREFIX = '/api/v1'


@dataclass
class RecordedRequest:
    """What the fake server saw for one request."""
    method: str
    path: str
    query: Dict[str, str]
    headers: Any
    content_type: str
    body: bytes = b''
    form: Dict[str, Any] = field(default_factory=dict)

    def json(self) -> Any:
        return json.loads(self.body)


class FakeKaggle:
    """
    A Kaggle API double running on an aiohttp test server.

    Routes are registered before ``start()``; every request is recorded.
    Multipart bodies are parsed into ``form`` (file parts become
    ``(filename, bytes)`` tuples), anything else is kept raw in ``body``.
    """

    def __init__(self):
        self.requests: List[RecordedRequest] = []
        self.app = web.Application(client_max_size=64 * 1024 * 1024)
        self.server: Optional[test_utils.TestServer] = None

    def route(
        self,
        method: str,
        path: str,
        response: Any = None,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
        prefix: str = API_PREFIX
    ) -> None:
        """
        Answer ``method prefix+path`` with a canned response.

        ``response`` may be a callable, evaluated per request, for answers
        that need the server address.
        """
        path = prefix + path

        async def handler(request: web.Request) -> web.StreamResponse:
            await self._record(request)
            body = response() if callable(response) else response
            if isinstance(body, (dict, list)):
                return web.json_response(body, status=status, headers=headers)
            if isinstance(body, str):
                return web.Response(text=body, status=status, headers=headers)
            if isinstance(body, bytes):
                return web.Response(body=body, status=status, headers=headers)
            return web.Response(status=status, headers=headers)

        self.app.router.add_route(method, path, handler)

    async def _record(self, request: web.Request) -> None:
        body = b''
        form: Dict[str, Any] = {}
        if request.content_type == 'multipart/form-data':
            post = await request.post()
            for name, value in post.items():
                if isinstance(value, web.FileField):
                    form[name] = (value.filename, value.file.read())
                else:
                    form[name] = value
        else:
            body = await request.read()

        self.requests.append(RecordedRequest(
            method=request.method,
            path=request.path,
            query=dict(request.query),
            headers=request.headers.copy(),
            content_type=request.content_type,
            body=body,
            form=form,
        ))

    async def start(self) -> str:
        self.server = test_utils.TestServer(self.app)
        await self.server.start_server()
        return self.base_url

    async def close(self) -> None:
        if self.server is not None:
            await self.server.close()

    def url(self, path: str) -> str:
        return str(self.server.make_url(path))

    @property
    def base_url(self) -> str:
        return self.url(API_PREFIX)

    def requests_to(self, path: str, prefix: str = API_PREFIX) -> List[RecordedRequest]:
        return [r for r in self.requests if r.path == prefix + path]


@pytest_asyncio.fixture
async def fake_kaggle():
    """Unstarted fake Kaggle server; register routes, then ``await fake_kaggle.start()``."""
    fake = FakeKaggle()
    yield fake
    await fake.close()


@pytest_asyncio.fixture
async def api_factory():
    """Creates transports against a base URL and closes them afterwards."""
    clients = []

    def factory(base_url: str, **config_kwargs) -> AsyncAPIClient:
        config = APIConfig(base_url=base_url, **config_kwargs)
        client = AsyncAPIClient(config, basic_auth_header('user', 'key'))
        clients.append(client)
        return client

    yield factory
    for client in clients:
        await client.close()


@pytest.fixture
def make_file(tmp_path):
    """Writes a file under ``tmp_path`` and returns its path."""
    def factory(name: str, content: bytes = b"id,target\n1,0\n") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path
    return factory


@pytest.fixture
def kaggle_env(monkeypatch, tmp_path):
    """Points credential lookup away from the real home directory."""
    monkeypatch.delenv('KAGGLE_USERNAME', raising=False)
    monkeypatch.delenv('KAGGLE_KEY', raising=False)
    monkeypatch.setenv('KAGGLE_CONFIG_DIR', str(tmp_path / 'config'))
    return tmp_path / 'config'
