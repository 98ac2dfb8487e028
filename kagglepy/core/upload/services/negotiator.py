"""
Upload session negotiation.

Asks the server where (and under which token) a file may be uploaded,
before any byte is sent.
"""
from typing import Any, Dict

from ..models import UploadSessionInfo
from ...api.async_client import AsyncAPIClient
from ...exceptions import MissingTokenError
from ...logging import get_logger

logger = get_logger('kagglepy.upload.negotiate')


class UploadNegotiator:
    """Negotiates dataset file uploads and competition submission URLs."""

    def __init__(self, api: AsyncAPIClient):
        self._api = api

    async def negotiate_upload(
        self,
        file_name: str,
        content_length: int,
        last_modified: int
    ) -> UploadSessionInfo:
        """
        Get a token (and usually a URL) to upload one dataset file.

        Args:
            file_name: Name the file will have in the dataset
            content_length: File size in bytes
            last_modified: Modification time in seconds since the epoch

        Returns:
            Session info whose token is good for one upload of this file

        Raises:
            MissingTokenError: If the response carries no usable token
        """
        path = f"/datasets/upload/file/{content_length}/{last_modified}"
        form = self._api.builder.build_form([('fileName', file_name)])
        data = await self._api.post_json(path, data=form, expect=dict)

        token = data.get('token')
        if not isinstance(token, str) or not token:
            raise MissingTokenError(f"No upload token returned for {file_name}", data)

        logger.debug(f"Negotiated upload of {file_name} ({content_length} bytes)")
        return UploadSessionInfo.from_response(data, content_length, last_modified)

    async def negotiate_submission(
        self,
        competition: str,
        file_name: str,
        content_length: int,
        last_modified: int
    ) -> Dict[str, Any]:
        """
        Get the submission upload target for a competition.

        The response shape differs between API generations and is returned
        undecoded for ``classify_upload``.
        """
        path = (
            f"/competitions/{competition}/submissions/url/"
            f"{content_length}/{last_modified}"
        )
        form = self._api.builder.build_form([('fileName', file_name)])
        data = await self._api.post_json(path, data=form, expect=dict)
        logger.debug(f"Negotiated submission URL for {competition}: {sorted(data)}")
        return data
