"""
KaggleClient - High-level async client for the Kaggle REST API.

Example:
    >>> async with KaggleClient.builder().auth(Authentication.env()).build() as kaggle:
    ...     competitions = await kaggle.competitions_list()
    ...     await kaggle.competition_submit("submission.csv", "titanic", "first try")
"""
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import aiohttp

from .core.api import (
    APIConfig,
    AsyncAPIClient,
    CompetitionsList,
    DatasetsList,
    KernelsList,
)
from .core.auth import Authentication, basic_auth_header
from .core.logging import get_logger
from .core.metadata import DatasetNewRequest, DatasetNewVersionRequest, Metadata
from .core.upload import (
    ArchiveMode,
    DatasetUploadFile,
    FileUploader,
    SubmissionOrchestrator,
    UploadNegotiator,
    UploadProgress,
    UploadSessionInfo,
)
from .core.upload.models import LegacyUploadTarget, FileStat

PathLike = Union[str, Path]


class KaggleClient:
    """
    High-level async client for Kaggle.

    One transport (and one HTTP session) is shared by every operation of the
    client. Use it from a single event loop.

        >>> client = KaggleClient(Authentication.with_credentials("me", "key"))
        >>> async with client:
        ...     board = await client.competition_view_leaderboard("titanic")
    """

    def __init__(
        self,
        auth: Optional[Authentication] = None,
        *,
        config: Optional[APIConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
        progress_callback: Optional[Callable[[UploadProgress], None]] = None
    ):
        """
        Initialize Kaggle client.

        Args:
            auth: Credential source (defaults to the kaggle.json config file)
            config: Optional API configuration
            session: Optional externally managed aiohttp session
            progress_callback: Optional callback for streamed upload progress
        """
        self._config = config or APIConfig.default()
        self._logger = get_logger('kagglepy.client')

        credentials = (auth or Authentication.default()).credentials()
        self._user_name = credentials.user_name

        self._api = AsyncAPIClient(
            self._config,
            basic_auth_header(credentials.user_name, credentials.key),
            session=session
        )
        self._negotiator = UploadNegotiator(self._api)
        self._uploader = FileUploader(
            self._api, self._negotiator, progress_callback=progress_callback
        )
        self._submissions = SubmissionOrchestrator(
            self._api, self._negotiator, progress_callback=progress_callback
        )
        self._download_dir: Optional[Path] = self._config.download_dir

    @staticmethod
    def builder() -> 'KaggleClientBuilder':
        """Convenience method to create a :class:`KaggleClientBuilder`."""
        return KaggleClientBuilder()

    @property
    def user_name(self) -> str:
        return self._user_name

    @property
    def api(self) -> AsyncAPIClient:
        return self._api

    @property
    def config(self) -> APIConfig:
        return self._config

    @property
    def download_dir(self) -> Path:
        """The directory where downloads are stored, created on first use."""
        if self._download_dir is None:
            self._download_dir = Path(tempfile.mkdtemp(prefix='kagglepy-'))
            self._logger.debug(f"Using temporary download dir {self._download_dir}")
        else:
            self._download_dir.mkdir(parents=True, exist_ok=True)
        return self._download_dir

    async def __aenter__(self) -> 'KaggleClient':
        await self._api.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the HTTP session and remove temporary archives."""
        self._uploader.close()
        await self._api.close()

    def _target(self, target: Optional[PathLike], default_name: str) -> Path:
        if target is not None:
            return Path(target)
        return self.download_dir / default_name

    # Competitions

    async def competitions_list(
        self,
        query: Optional[CompetitionsList] = None
    ) -> List[Dict[str, Any]]:
        """List competitions matching ``query`` (all defaults when omitted)."""
        query = query or CompetitionsList()
        return await self._api.get_json('competitions/list', params=query.to_query())

    async def competition_download_leaderboard(
        self,
        id: str,
        target: Optional[PathLike] = None
    ) -> Path:
        """Download the leaderboard archive (``{id}-leaderboard.zip`` by default)."""
        return await self._api.download(
            f"/competitions/{id}/leaderboard/download",
            self._target(target, f"{id}-leaderboard.zip")
        )

    async def competition_view_leaderboard(self, id: str) -> Any:
        return await self._api.get_json(f"/competitions/{id}/leaderboard/view")

    async def competitions_data_download_file(
        self,
        id: str,
        file_name: str,
        target: Optional[PathLike] = None
    ) -> Path:
        """Download one competition data file."""
        return await self._api.download(
            f"/competitions/data/download/{id}/{file_name}",
            self._target(target, f"{id}.zip")
        )

    async def competitions_data_download_files(
        self,
        id: str,
        target: Optional[PathLike] = None
    ) -> Path:
        """Download all competition data files as one archive."""
        return await self._api.download(
            f"/competitions/data/download-all/{id}",
            self._target(target, f"{id}.zip")
        )

    async def competitions_data_list_files(self, id: str) -> List[Dict[str, Any]]:
        return await self._api.get_json(f"/competitions/data/list/{id}", expect=list)

    async def competitions_submissions_list(
        self,
        id: str,
        page: int = 1
    ) -> List[Dict[str, Any]]:
        return await self._api.get_json(
            f"/competitions/submissions/list/{id}",
            params=[('page', page)],
            expect=list
        )

    async def competitions_submissions_url(
        self,
        id: str,
        content_length: int,
        last_modified: int,
        file_name: str
    ) -> Dict[str, Any]:
        """Negotiate a submission upload target."""
        return await self._negotiator.negotiate_submission(
            id, file_name, content_length, last_modified
        )

    async def competitions_submissions_upload(
        self,
        file: PathLike,
        guid: str,
        content_length: int,
        last_modified: int
    ) -> Dict[str, Any]:
        """Upload a submission file through the legacy upload-by-guid endpoint."""
        path = Path(file)
        stat = FileStat(path=path, content_length=content_length, last_modified=last_modified)
        target = LegacyUploadTarget(
            guid=guid, content_length=content_length, last_modified=last_modified
        )
        return await self._submissions.upload_legacy(stat, target)

    async def competitions_submissions_submit(
        self,
        id: str,
        blob_file_tokens: str,
        submission_description: str
    ) -> Dict[str, Any]:
        """Finalize a submission from an uploaded blob token."""
        return await self._submissions.finalize(id, blob_file_tokens, submission_description)

    async def competition_submit(
        self,
        file: PathLike,
        competition: str,
        message: str
    ) -> Dict[str, Any]:
        """Upload ``file`` and submit it to ``competition``."""
        return await self._submissions.submit(file, competition, message)

    # Datasets

    async def datasets_upload_file(
        self,
        file_name: str,
        content_length: int,
        last_modified: int
    ) -> UploadSessionInfo:
        """Get URL and token to start uploading a data file."""
        return await self._negotiator.negotiate_upload(file_name, content_length, last_modified)

    async def upload_file(
        self,
        file: PathLike,
        file_name: Optional[str] = None
    ) -> DatasetUploadFile:
        """Negotiate and stream one dataset file."""
        return await self._uploader.upload(file, file_name)

    async def upload_files(
        self,
        folder: PathLike,
        metadata: Optional[Metadata] = None,
        archive_mode: Union[ArchiveMode, str] = ArchiveMode.ZIP
    ) -> List[DatasetUploadFile]:
        """Upload every immediate child of ``folder``."""
        resources = metadata.resources if metadata else []
        return await self._uploader.upload_directory(
            folder, resources, ArchiveMode.parse(archive_mode)
        )

    async def dataset_create_new(
        self,
        folder: PathLike,
        public: bool = False,
        convert_to_csv: bool = True,
        archive_mode: Union[ArchiveMode, str] = ArchiveMode.ZIP
    ) -> Dict[str, Any]:
        """
        Create a new dataset from a folder holding ``dataset-metadata.json``.

        Metadata is validated before any file is uploaded.
        """
        metadata = Metadata.load(folder)
        metadata.validate(folder)

        files = await self.upload_files(folder, metadata, archive_mode)
        request = DatasetNewRequest.from_metadata(metadata, files, public, convert_to_csv)
        return await self.datasets_create_new(request)

    async def dataset_create_version(
        self,
        folder: PathLike,
        version_notes: str,
        convert_to_csv: bool = True,
        delete_old_versions: bool = False,
        archive_mode: Union[ArchiveMode, str] = ArchiveMode.ZIP
    ) -> Dict[str, Any]:
        """Upload a folder as a new version of the dataset named in its metadata."""
        metadata = Metadata.load(folder)
        owner_slug, dataset_slug = metadata.require_slugs()
        metadata.validate_resources(folder)

        files = await self.upload_files(folder, metadata, archive_mode)
        request = DatasetNewVersionRequest(
            version_notes=version_notes,
            files=files,
            subtitle=metadata.subtitle,
            description=metadata.description,
            convert_to_csv=convert_to_csv,
            delete_old_versions=delete_old_versions,
            category_ids=list(metadata.keywords),
        )
        return await self.datasets_create_version(owner_slug, dataset_slug, request)

    async def datasets_create_new(self, request: DatasetNewRequest) -> Dict[str, Any]:
        return await self._api.post_json(
            '/datasets/create/new', payload=request.to_dict(), expect=dict
        )

    async def datasets_create_version(
        self,
        owner_slug: str,
        dataset_slug: str,
        request: DatasetNewVersionRequest
    ) -> Dict[str, Any]:
        return await self._api.post_json(
            f"/datasets/create/version/{owner_slug}/{dataset_slug}",
            payload=request.to_dict(),
            expect=dict
        )

    async def datasets_create_version_by_id(
        self,
        id: int,
        request: DatasetNewVersionRequest
    ) -> Dict[str, Any]:
        return await self._api.post_json(
            f"/datasets/create/versionById/{id}",
            payload=request.to_dict(),
            expect=dict
        )

    async def datasets_list(self, query: Optional[DatasetsList] = None) -> List[Dict[str, Any]]:
        query = query or DatasetsList()
        return await self._api.get_json('/datasets/list', params=query.to_query())

    async def datasets_view(self, owner_slug: str, dataset_slug: str) -> Dict[str, Any]:
        return await self._api.get_json(f"/datasets/view/{owner_slug}/{dataset_slug}")

    async def datasets_list_files(self, owner_slug: str, dataset_slug: str) -> Dict[str, Any]:
        return await self._api.get_json(f"/datasets/list/{owner_slug}/{dataset_slug}")

    async def datasets_status(self, owner_slug: str, dataset_slug: str) -> Any:
        return await self._api.get_json(f"/datasets/status/{owner_slug}/{dataset_slug}")

    async def datasets_download(
        self,
        owner_slug: str,
        dataset_slug: str,
        version: Optional[str] = None,
        target: Optional[PathLike] = None
    ) -> Path:
        """Download a whole dataset as ``{dataset_slug}.zip``."""
        params = [('datasetVersionNumber', version)] if version else None
        return await self._api.download(
            f"/datasets/download/{owner_slug}/{dataset_slug}",
            self._target(target, f"{dataset_slug}.zip"),
            params=params
        )

    async def datasets_download_file(
        self,
        owner_slug: str,
        dataset_slug: str,
        file_name: str,
        version: Optional[str] = None,
        target: Optional[PathLike] = None
    ) -> Path:
        params = [('datasetVersionNumber', version)] if version else None
        return await self._api.download(
            f"/datasets/download/{owner_slug}/{dataset_slug}/{file_name}",
            self._target(target, file_name),
            params=params
        )

    async def metadata_get(self, owner_slug: str, dataset_slug: str) -> Dict[str, Any]:
        return await self._api.get_json(f"/datasets/metadata/{owner_slug}/{dataset_slug}")

    async def metadata_post(
        self,
        owner_slug: str,
        dataset_slug: str,
        settings: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._api.post_json(
            f"/datasets/metadata/{owner_slug}/{dataset_slug}",
            payload={'settings': settings}
        )

    # Kernels

    async def kernels_list(self, query: Optional[KernelsList] = None) -> List[Dict[str, Any]]:
        query = query or KernelsList()
        return await self._api.get_json('/kernels/list', params=query.to_query())

    def _kernel_params(self, user_name: str, kernel_slug: str):
        return [('userName', user_name), ('kernelSlug', kernel_slug)]

    async def kernel_pull(self, user_name: str, kernel_slug: str) -> Dict[str, Any]:
        return await self._api.get_json(
            '/kernels/pull', params=self._kernel_params(user_name, kernel_slug)
        )

    async def kernel_status(self, user_name: str, kernel_slug: str) -> Dict[str, Any]:
        return await self._api.get_json(
            '/kernels/status', params=self._kernel_params(user_name, kernel_slug)
        )

    async def kernel_output(self, user_name: str, kernel_slug: str) -> Dict[str, Any]:
        return await self._api.get_json(
            '/kernels/output', params=self._kernel_params(user_name, kernel_slug)
        )

    async def kernel_push(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self._api.post_json('/kernels/push', payload=request, expect=dict)


class KaggleClientBuilder:
    """
    Fluent builder for :class:`KaggleClient`.

    Example:
        >>> client = (
        ...     KaggleClient.builder()
        ...     .auth(Authentication.with_credentials("me", "key"))
        ...     .download_dir("./downloads")
        ...     .build()
        ... )
    """

    def __init__(self):
        self._config = APIConfig.default()
        self._auth: Optional[Authentication] = None
        self._session: Optional[aiohttp.ClientSession] = None
        self._progress_callback: Optional[Callable[[UploadProgress], None]] = None

    def config(self, config: APIConfig) -> 'KaggleClientBuilder':
        self._config = config
        return self

    def base_url(self, base_url: str) -> 'KaggleClientBuilder':
        self._config.base_url = base_url
        return self

    def user_agent(self, user_agent: str) -> 'KaggleClientBuilder':
        self._config.user_agent = user_agent
        return self

    def headers(self, headers: Dict[str, str]) -> 'KaggleClientBuilder':
        self._config.extra_headers = dict(headers)
        return self

    def download_dir(self, download_dir: PathLike) -> 'KaggleClientBuilder':
        self._config.download_dir = Path(download_dir)
        return self

    def auth(self, auth: Authentication) -> 'KaggleClientBuilder':
        self._auth = auth
        return self

    def session(self, session: aiohttp.ClientSession) -> 'KaggleClientBuilder':
        self._session = session
        return self

    def progress(self, callback: Callable[[UploadProgress], None]) -> 'KaggleClientBuilder':
        self._progress_callback = callback
        return self

    def build(self) -> KaggleClient:
        return KaggleClient(
            self._auth,
            config=self._config,
            session=self._session,
            progress_callback=self._progress_callback
        )
