"""Cloud Storage path builder.

Turns ``gs://<bucket>[/<path>]`` strings into ``GcsPath`` objects. One
builder holds one credential/project/policy scope and a filesystem cache
shared by every path it builds.

Example:
    >>> builder = from_credentials(
    ...     credentials,
    ...     application_name="my-app",
    ...     retry_settings=GcsRetrySettings(),
    ...     cloud_storage_config=CloudStorageConfig(),
    ...     options=PathBuilderOptions(google_project="my-project"),
    ...     default_project=None,
    ...     bucket_information_policy=BucketInformationPolicy.ON_DEMAND,
    ... )
    >>> path = builder.build("gs://my-bucket/some/object.txt")
    >>> path.path_without_scheme
    'my-bucket/some/object.txt'
"""

from __future__ import annotations

import asyncio
import logging

from google.api_core.retry import Retry
from google.auth.credentials import Credentials
from google.cloud import storage

from bucketpath.core.config.models import (
    BucketInformationPolicy,
    CloudStorageConfig,
    GcsConfig,
    GcsRetrySettings,
    PathBuilderOptions,
)
from bucketpath.core.gcs.auth import GoogleAuthMode, auth_mode_from_config
from bucketpath.core.gcs.bucket.policies import to_request_handler
from bucketpath.core.gcs.bucket.request_handler import GcsRequestHandler
from bucketpath.core.gcs.cache import GcsFileSystemCache
from bucketpath.core.gcs.client import gcs_storage_client
from bucketpath.core.gcs.errors import (
    FileSystemConstructionError,
    InvalidGcsPathError,
    PathBuildError,
    RelativePathNotSupportedError,
)
from bucketpath.core.gcs.filesystem import FileSystemFactory, create_bucket_filesystem
from bucketpath.core.gcs.path import GcsPath
from bucketpath.core.gcs.result import PathBuildResult, failure_result, success_result
from bucketpath.core.gcs.validation import (
    InvalidFullGcsPath,
    InvalidScheme,
    PossiblyValidRelativeGcsPath,
    UnparseableGcsPath,
    ValidFullGcsPath,
    validate_gcs_path,
)

logger = logging.getLogger(__name__)


class GcsPathBuilder:
    """
    Builds GcsPaths for absolute ``gs://`` strings.

    Filesystems are cached per bucket: they only depend on the bucket and on
    the credentials, which are fixed for a builder. Concurrent builds for
    the same bucket construct its filesystem once.
    """

    def __init__(
        self,
        storage_client: storage.Client,
        cloud_storage_config: CloudStorageConfig,
        bucket_information_policy: BucketInformationPolicy = BucketInformationPolicy.ON_DEMAND,
        *,
        project_id: str | None = None,
        retry: Retry | None = None,
        request_handler: GcsRequestHandler | None = None,
        filesystem_factory: FileSystemFactory = create_bucket_filesystem,
    ) -> None:
        """
        Initialize the builder.

        Args:
            storage_client: Client shared by every path of this builder
            cloud_storage_config: Configuration for per-bucket filesystems
            bucket_information_policy: Requester-pays policy for the default handler
            project_id: Project id (defaults to the client's project)
            retry: Retry policy for requests of the default handler
            request_handler: Handler overriding the policy-derived default
            filesystem_factory: Builds the filesystem for one bucket
        """
        self.storage_client = storage_client
        self.cloud_storage_config = cloud_storage_config
        self.project_id = project_id if project_id is not None else storage_client.project
        if request_handler is None:
            request_handler = to_request_handler(
                bucket_information_policy, storage_client, self.project_id, retry
            )
        self.request_handler = request_handler
        self._filesystem_cache = GcsFileSystemCache(
            storage_client, cloud_storage_config, self.project_id, filesystem_factory
        )

    @property
    def name(self) -> str:
        return "Google Cloud Storage"

    @property
    def filesystem_cache(self) -> GcsFileSystemCache:
        return self._filesystem_cache

    def build(self, string: str) -> GcsPath:
        """
        Create a GcsPath from an absolute gcs path: ``gs://<bucket>[/<path>]``.

        Blocks until the bucket filesystem is available.

        Args:
            string: Path string

        Returns:
            Resolved path bound to this builder's client, project and handler

        Raises:
            InvalidGcsPathError: If the string fails validation
            RelativePathNotSupportedError: If the string has no scheme
            FileSystemConstructionError: If the bucket filesystem could not be built
        """
        match validate_gcs_path(string):
            case ValidFullGcsPath(bucket=bucket, path=path):
                try:
                    filesystem = self._filesystem_cache.get_or_build(bucket)
                except FileSystemConstructionError as e:
                    # The cache error is shared by every waiter; raise a copy naming this input
                    raise FileSystemConstructionError(
                        e.bucket, e.cause, path_string=string
                    ) from e.cause
                return GcsPath(
                    filesystem.get_path(path),
                    self.storage_client,
                    self.project_id,
                    self.request_handler,
                )
            case PossiblyValidRelativeGcsPath():
                raise RelativePathNotSupportedError(string)
            case InvalidScheme() | InvalidFullGcsPath() | UnparseableGcsPath() as invalid:
                raise InvalidGcsPathError(invalid)

    def try_build(self, string: str) -> PathBuildResult:
        """
        Like ``build`` but returns failures as a result instead of raising.

        Args:
            string: Path string

        Returns:
            PathBuildResult with either the path or the typed failure
        """
        try:
            path = self.build(string)
        except PathBuildError as e:
            logger.debug("Could not build path %r: %s", string, e.message)
            return failure_result(string, e)
        return success_result(string, path)

    async def build_async(self, string: str) -> GcsPath:
        """Async variant of ``build``; filesystem construction runs in a worker thread."""
        return await asyncio.to_thread(self.build, string)


def from_credentials(
    credentials: Credentials,
    application_name: str,
    retry_settings: GcsRetrySettings,
    cloud_storage_config: CloudStorageConfig,
    options: PathBuilderOptions,
    default_project: str | None,
    bucket_information_policy: BucketInformationPolicy,
) -> GcsPathBuilder:
    """
    Create a path builder for already obtained credentials.

    The project comes from ``options.google_project`` when set, otherwise
    from ``default_project``.

    Args:
        credentials: Credentials for every request
        application_name: User agent for requests
        retry_settings: Transport retry settings
        cloud_storage_config: Configuration for per-bucket filesystems
        options: Per-run options
        default_project: Project used when options do not name one
        bucket_information_policy: Requester-pays policy

    Returns:
        Ready path builder
    """
    project = options.google_project or default_project
    storage_client = gcs_storage_client(credentials, application_name, project)
    return GcsPathBuilder(
        storage_client,
        cloud_storage_config,
        bucket_information_policy,
        project_id=project,
        retry=retry_settings.to_retry(),
    )


async def from_auth_mode(
    auth_mode: GoogleAuthMode,
    application_name: str,
    retry_settings: GcsRetrySettings,
    cloud_storage_config: CloudStorageConfig,
    options: PathBuilderOptions,
    default_project: str | None,
    bucket_information_policy: BucketInformationPolicy,
) -> GcsPathBuilder:
    """
    Create a path builder, obtaining credentials from an auth mode.

    Same arguments as ``from_credentials`` with an auth mode instead of
    credentials.
    """
    credentials = await auth_mode.retry_credential(options)
    return from_credentials(
        credentials,
        application_name,
        retry_settings,
        cloud_storage_config,
        options,
        default_project,
        bucket_information_policy,
    )


async def from_config(
    config: GcsConfig, options: PathBuilderOptions | None = None
) -> GcsPathBuilder:
    """
    Create a path builder from a loaded ``GcsConfig``.

    Args:
        config: Loaded configuration
        options: Per-run options (empty if None)

    Returns:
        Ready path builder
    """
    return await from_auth_mode(
        auth_mode_from_config(config.auth, config.retry),
        config.application_name,
        config.retry,
        config.filesystem,
        options or PathBuilderOptions(),
        config.default_project,
        config.bucket_information_policy,
    )
