"""
Async Kaggle API client.

Owns the HTTP session and classifies every non-2xx answer into the error
taxonomy of ``kagglepy.core.api.errors``. It never retries.
"""
import json
import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict, Optional, Any, AsyncIterator, Union

import aiofiles
import aiohttp

from .config import APIConfig
from .errors import classify_status
from .request import RequestBuilder
from .request.request_builder import QueryPairs
from ..exceptions import DecodeError, TransportError
from ..logging import get_logger


class AsyncAPIClient:
    """
    Asynchronous Kaggle API transport.

    Features:
    - Default ``Authorization`` and ``User-Agent`` headers on every request
    - Status classification (401, 429 with ``Retry-After``, anything else)
    - JSON decoding with shape checks, separate from transport failures
    - Streamed downloads to disk

    The session is meant to be shared by every component of one client on a
    single event loop; it is not safe to use from several threads.

    Example:
        >>> async with AsyncAPIClient(config, auth_header) as api:
        ...     competitions = await api.get_json('competitions/list')
    """

    HEADER_API_VERSION = 'X-Kaggle-ApiVersion'

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        auth_header: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize async API client.

        Args:
            config: API configuration (uses defaults if not provided)
            auth_header: Pre-computed ``Authorization`` header value
            session: Optional externally managed session; it is not closed
                by this client and the default headers are sent per request
        """
        self._config = config or APIConfig.default()
        self._auth_header = auth_header
        self._session = session
        self._owns_session = session is None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._builder = RequestBuilder(self._config.base_url)
        self._last_api_version: Optional[str] = None
        self._closed = False

        self._logger = get_logger('kagglepy.api')
        root_logger = logging.getLogger()
        if not root_logger.handlers:
            self._logger.setLevel(self._config.log_level)

    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config

    @property
    def builder(self) -> RequestBuilder:
        return self._builder

    @property
    def last_api_version(self) -> Optional[str]:
        """API version echoed by the server on the last response, if any."""
        return self._last_api_version

    async def __aenter__(self) -> 'AsyncAPIClient':
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._closed:
            raise TransportError("Client is closed")
        if self._session is None or self._session.closed:
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                **self._config.get_session_kwargs(self._auth_header)
            )
            self._owns_session = True
        return self._session

    async def close(self):
        """Close client and release resources."""
        self._closed = True

        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None

        if self._connector and not self._connector.closed:
            await self._connector.close()
        self._connector = None

    def build_url(self, path: str, params: Optional[QueryPairs] = None) -> str:
        """Build a request URL relative to the configured base URL."""
        return self._builder.build_url(path, params)

    def _request_headers(self, headers: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
        """Session defaults only need repeating on a borrowed session."""
        if self._owns_session:
            return headers
        merged = self._config.get_session_kwargs(self._auth_header)['headers']
        merged.update(headers or {})
        return merged

    @asynccontextmanager
    async def execute(
        self,
        method: str,
        url: str,
        params: Optional[QueryPairs] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs
    ) -> AsyncIterator[aiohttp.ClientResponse]:
        """
        Execute a request and yield the 2xx response for the caller to read.

        Args:
            method: HTTP verb
            url: Path relative to the base URL, or an absolute URL
            params: Ordered query parameters
            headers: Extra request headers
            **kwargs: Passed to ``aiohttp.ClientSession.request`` (data, json...)

        Raises:
            UnauthorizedError, RateLimitedError, UnexpectedStatusError: non-2xx
            TransportError: network failure or timeout
        """
        session = await self._ensure_session()
        full_url = self.build_url(url, params)
        if self._config.proxy:
            kwargs.setdefault('proxy', self._config.proxy)

        self._logger.debug(f"{method} {full_url}")

        try:
            async with session.request(
                method,
                full_url,
                headers=self._request_headers(headers),
                **kwargs
            ) as response:
                version = response.headers.get(self.HEADER_API_VERSION)
                if version:
                    self._last_api_version = version
                    self._logger.debug(f"Server API version: {version}")

                error = classify_status(response.status, response.headers)
                if error is not None:
                    self._logger.error(f"{method} {full_url} failed: {error}")
                    raise error

                yield response
        except aiohttp.ClientError as e:
            self._logger.error(f"Network error on {method} {full_url}: {e}")
            raise TransportError(f"Network error: {e}", cause=e) from e
        except asyncio.TimeoutError as e:
            self._logger.error(f"Timeout on {method} {full_url}")
            raise TransportError(f"Request timed out: {method} {full_url}", cause=e) from e

    async def request_json(
        self,
        method: str,
        url: str,
        expect: Optional[type] = None,
        **kwargs
    ) -> Any:
        """
        Execute a request and decode the body as JSON.

        Args:
            method: HTTP verb
            url: Path or absolute URL
            expect: Optional type the decoded value must have (dict, list)

        Raises:
            DecodeError: If the body is not JSON or not of the expected type
        """
        async with self.execute(method, url, **kwargs) as response:
            body = await response.text()

        self._logger.debug(f"Response data: {body[:1000] if len(body) > 1000 else body}")
        return self._decode(body, expect)

    @staticmethod
    def _decode(body: str, expect: Optional[type] = None) -> Any:
        try:
            data = json.loads(body)
        except ValueError as e:
            raise DecodeError(f"Response is not valid JSON: {e}", body=body) from e

        if expect is not None and not isinstance(data, expect):
            raise DecodeError(
                f"Expected JSON {expect.__name__}, got {type(data).__name__}",
                body=body
            )
        return data

    async def get_json(
        self,
        url: str,
        params: Optional[QueryPairs] = None,
        expect: Optional[type] = None
    ) -> Any:
        return await self.request_json('GET', url, params=params, expect=expect)

    async def post_json(
        self,
        url: str,
        payload: Optional[Any] = None,
        data: Optional[Any] = None,
        expect: Optional[type] = None
    ) -> Any:
        """POST either a JSON payload or a prepared body (multipart, stream)."""
        kwargs: Dict[str, Any] = {}
        if payload is not None:
            kwargs['json'] = payload
        if data is not None:
            kwargs['data'] = data
        return await self.request_json('POST', url, expect=expect, **kwargs)

    async def download(
        self,
        url: str,
        target: Union[str, Path],
        params: Optional[QueryPairs] = None
    ) -> Path:
        """
        Stream a response body to ``target``.

        Returns:
            The path written to
        """
        target = Path(target)
        target.parent.mkdir(parents=True, exist_ok=True)

        written = 0
        async with self.execute('GET', url, params=params) as response:
            async with aiofiles.open(target, 'wb') as f:
                async for chunk in response.content.iter_chunked(self._config.chunk_size):
                    await f.write(chunk)
                    written += len(chunk)

        self._logger.info(f"Downloaded {written} bytes to {target}")
        return target
