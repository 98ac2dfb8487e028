"""Request builder for API requests."""
from urllib.parse import urlencode
from typing import Iterable, Optional, Sequence, Tuple, Any

import aiohttp

QueryPairs = Sequence[Tuple[str, Any]]


class RequestBuilder:
    """Builds API URLs and request bodies relative to a base URL."""

    def __init__(self, base_url: str):
        """Initializes request builder."""
        self.base_url = base_url.rstrip('/')

    def build_url(self, path: str, params: Optional[QueryPairs] = None) -> str:
        """
        Builds request URL.

        ``path`` is joined onto the base URL keeping its path prefix
        (``/api/v1``); absolute URLs are returned as given.
        """
        if path.startswith(('http://', 'https://')):
            url = path
        else:
            url = f"{self.base_url}/{path.strip().lstrip('/')}"
        if params:
            url = f"{url}?{self.build_query(params)}"
        return url

    @staticmethod
    def build_query(params: QueryPairs) -> str:
        """Encodes ordered query pairs; booleans are sent lowercase."""
        pairs = []
        for key, value in params:
            if isinstance(value, bool):
                value = 'true' if value else 'false'
            elif value is None:
                value = ''
            pairs.append((key, value))
        return urlencode(pairs)

    @staticmethod
    def build_form(fields: Iterable[Tuple[str, str]]) -> aiohttp.MultipartWriter:
        """Builds a ``multipart/form-data`` body out of text fields."""
        writer = aiohttp.MultipartWriter('form-data')
        for name, value in fields:
            part = writer.append(str(value))
            part.set_content_disposition('form-data', name=name)
        return writer
