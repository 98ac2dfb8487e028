"""
Competition submission.

Submitting is negotiate -> upload -> finalize. The negotiation answer comes
in two shapes, depending on the API generation serving it:

- legacy: carries an ``isComplete`` key; ``createUrl`` ends in
  ``.../{guid}/{content_length}/{last_modified}`` and the file is posted as
  multipart to an upload-by-guid endpoint, whose answer holds the token.
- direct: no ``isComplete`` key; raw bytes are PUT to ``createUrl`` and the
  token is already in the negotiation answer.

The branch is chosen on the shape of the answer alone; a legacy ``createUrl``
is only read once the legacy upload starts.
"""
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import aiohttp

from .models import (
    DirectUpload,
    FileStat,
    LegacyUpload,
    LegacyUploadTarget,
    UploadPlan,
    UploadProgress,
)
from .protocols import NegotiatorProtocol
from .services import FileStream, FileValidator, UploadNegotiator, local_read_errors
from ..api.async_client import AsyncAPIClient
from ..exceptions import MalformedResponseError, MissingTokenError
from ..logging import get_logger

logger = get_logger('kagglepy.submission')


def parse_create_url(create_url: str) -> LegacyUploadTarget:
    """
    Read ``(guid, content_length, last_modified)`` off a legacy ``createUrl``.

    The last three path segments are the guid, the content length and the
    modification time in seconds, in that order.

    Raises:
        MalformedResponseError: Fewer than three segments, or non-numeric
            length/time
    """
    parts = create_url.split('/')
    if len(parts) < 3:
        raise MalformedResponseError(
            f"createUrl response with incomplete segments {create_url}"
        )

    guid, length, modified = parts[-3], parts[-2], parts[-1]
    if not guid:
        raise MalformedResponseError(f"createUrl has an empty guid: {create_url}")
    if not length.isdigit() or not modified.isdigit():
        raise MalformedResponseError(
            f"createUrl segments are not unsigned integers: {create_url}"
        )

    return LegacyUploadTarget(
        guid=guid,
        content_length=int(length),
        last_modified=int(modified),
    )


def classify_upload(response: Any) -> UploadPlan:
    """
    Decide which upload flow a negotiation response asks for.

    Raises:
        MalformedResponseError: Not an object, or no string ``createUrl``
    """
    if not isinstance(response, dict):
        raise MalformedResponseError("Expected json response object", response)

    create_url = response.get('createUrl')
    if not isinstance(create_url, str) or not create_url:
        raise MalformedResponseError("Missing `createUrl` field", response)

    if 'isComplete' in response:
        return LegacyUpload(create_url=create_url)
    return DirectUpload(create_url=create_url)


def extract_token(result: Any) -> str:
    """
    Get the upload token out of an upload result.

    Raises:
        MissingTokenError: If there is no non-empty string ``token``
    """
    token = result.get('token') if isinstance(result, dict) else None
    if not isinstance(token, str) or not token:
        raise MissingTokenError("Missing upload token", result)
    return token


class SubmissionOrchestrator:
    """
    Runs a competition submission end to end.

    Steps are strictly sequential. Nothing is rolled back on failure; a new
    submission must start from a fresh negotiation since tokens are single use.

    Example:
        >>> orchestrator = SubmissionOrchestrator(api)
        >>> result = await orchestrator.submit("submission.csv", "titanic", "first try")
    """

    def __init__(
        self,
        api: AsyncAPIClient,
        negotiator: Optional[NegotiatorProtocol] = None,
        chunk_size: Optional[int] = None,
        progress_callback: Optional[Callable[[UploadProgress], None]] = None
    ):
        self._api = api
        self._negotiator = negotiator or UploadNegotiator(api)
        self._chunk_size = chunk_size or api.config.chunk_size
        self._progress_callback = progress_callback
        self._validator = FileValidator()

    async def submit(
        self,
        path: Union[str, Path],
        competition: str,
        message: str
    ) -> Dict[str, Any]:
        """
        Submit a file to a competition.

        Args:
            path: Submission file
            competition: Competition id (slug)
            message: Submission description

        Returns:
            The finalize response, unchanged
        """
        stat = self._validator.stat(path)
        logger.info(f"Submitting {stat.name} to {competition} ({stat.content_length} bytes)")

        negotiation = await self._negotiator.negotiate_submission(
            competition, stat.name, stat.content_length, stat.last_modified
        )
        plan = classify_upload(negotiation)

        if isinstance(plan, LegacyUpload):
            target = parse_create_url(plan.create_url)
            logger.debug(f"Legacy upload flow, guid {target.guid}")
            upload_result = await self.upload_legacy(stat, target)
        else:
            logger.debug("Direct upload flow")
            await self.upload_direct(stat, plan)
            upload_result = negotiation

        token = extract_token(upload_result)
        result = await self.finalize(competition, token, message)
        logger.info(f"Submission to {competition} accepted")
        return result

    def _stream(self, stat: FileStat) -> FileStream:
        return FileStream(
            stat.path,
            self._chunk_size,
            progress_callback=self._progress_callback,
            total_bytes=stat.content_length
        )

    async def upload_legacy(self, stat: FileStat, target: LegacyUploadTarget) -> Dict[str, Any]:
        """POST the file as the multipart part ``file`` to the upload-by-guid endpoint."""
        stream = self._stream(stat)
        form = aiohttp.FormData()
        form.add_field(
            'file',
            stream,
            filename=stat.name,
            content_type='application/octet-stream'
        )
        async with local_read_errors(stream):
            return await self._api.post_json(target.path(), data=form, expect=dict)

    async def upload_direct(self, stat: FileStat, plan: DirectUpload) -> None:
        """PUT the raw file bytes to the negotiated URL."""
        stream = self._stream(stat)
        headers = {
            'Content-Type': 'application/octet-stream',
            'Content-Length': str(stat.content_length),
        }
        async with local_read_errors(stream):
            async with self._api.execute(
                'PUT', plan.create_url, data=stream, headers=headers
            ) as response:
                await response.read()

    async def finalize(self, competition: str, token: str, message: str) -> Dict[str, Any]:
        """Create the submission from an uploaded blob token."""
        form = self._api.builder.build_form([
            ('blobFileTokens', token),
            ('submissionDescription', message),
        ])
        return await self._api.post_json(
            f"/competitions/submissions/submit/{competition}",
            data=form,
            expect=dict
        )
