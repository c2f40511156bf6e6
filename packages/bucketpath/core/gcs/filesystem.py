"""Per-bucket Cloud Storage filesystem handles and their native paths.

A ``GcsBucketFileSystem`` is the session object for one bucket: it owns the
``google.cloud.storage.Bucket`` handle and resolves path strings within the
bucket into ``CloudStoragePath`` objects. Handles are built through a
``FileSystemFactory`` and cached per bucket by ``GcsFileSystemCache``.
"""

from __future__ import annotations

import logging
import posixpath
from typing import Protocol

from google.cloud import storage

from bucketpath.core.config.models import CloudStorageConfig

logger = logging.getLogger(__name__)

URI_SCHEME = "gs"


class CloudStoragePath:
    """
    Immutable POSIX-style path inside one bucket.

    The path string is kept exactly as given (including a trailing slash,
    which marks a "directory" prefix in Cloud Storage); normalization only
    happens in ``to_real_path``.
    """

    __slots__ = ("_filesystem", "_path")

    def __init__(self, filesystem: GcsBucketFileSystem, path: str) -> None:
        self._filesystem = filesystem
        self._path = path

    @property
    def filesystem(self) -> GcsBucketFileSystem:
        return self._filesystem

    @property
    def bucket(self) -> str:
        return self._filesystem.bucket_name

    @property
    def name(self) -> str:
        """Final path component (empty for the bucket root)."""
        return posixpath.basename(self._path.rstrip("/"))

    @property
    def parent(self) -> CloudStoragePath | None:
        """Parent directory, or None at the bucket root."""
        stripped = self._path.rstrip("/")
        if not stripped:
            return None
        head = posixpath.dirname(stripped)
        if not head:
            return None
        return CloudStoragePath(self._filesystem, head if head == "/" else f"{head}/")

    @property
    def object_name(self) -> str:
        """Blob name for this path (realized path, prefix slash stripped if configured)."""
        real = str(self.to_real_path())
        if self._filesystem.config.strip_prefix_slash:
            return real.removeprefix("/")
        return real

    def is_absolute(self) -> bool:
        return self._path.startswith("/")

    def to_absolute_path(self) -> CloudStoragePath:
        if self.is_absolute():
            return self
        return CloudStoragePath(
            self._filesystem,
            posixpath.join(self._filesystem.config.working_directory, self._path),
        )

    def to_real_path(self) -> CloudStoragePath:
        """Absolute path with ``.`` and ``..`` segments collapsed."""
        absolute = str(self.to_absolute_path())
        # normpath keeps a leading "//", so re-anchor on a single slash
        normalized = "/" + posixpath.normpath(absolute).lstrip("/")
        if absolute.endswith("/") and normalized != "/":
            normalized += "/"
        return CloudStoragePath(self._filesystem, normalized)

    def resolve(self, other: str) -> CloudStoragePath:
        """Resolve ``other`` against this path; absolute ``other`` wins."""
        if not other:
            return self
        if other.startswith("/") or not self._path:
            return CloudStoragePath(self._filesystem, other)
        return CloudStoragePath(self._filesystem, posixpath.join(self._path, other))

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"CloudStoragePath(bucket={self.bucket!r}, path={self._path!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CloudStoragePath):
            return NotImplemented
        return (self.bucket, self._path) == (other.bucket, other._path)

    def __hash__(self) -> int:
        return hash((self.bucket, self._path))


class GcsBucketFileSystem:
    """
    Filesystem handle scoped to a single bucket.

    Holds the ``storage.Bucket`` used for requests against the bucket. When
    ``config.use_user_project`` is set the handle bills requests to the
    builder project.
    """

    provider_scheme = URI_SCHEME

    def __init__(
        self,
        bucket_name: str,
        storage_client: storage.Client,
        project_id: str | None,
        config: CloudStorageConfig,
    ) -> None:
        """
        Initialize the bucket filesystem.

        Args:
            bucket_name: Bucket this handle is scoped to
            storage_client: Authenticated Cloud Storage client
            project_id: Project id of the owning builder
            config: Filesystem configuration
        """
        self.bucket_name = bucket_name
        self.project_id = project_id
        self.config = config
        user_project = project_id if config.use_user_project else None
        self.gcs_bucket = storage_client.bucket(bucket_name, user_project=user_project)

    @property
    def uri(self) -> str:
        return f"{URI_SCHEME}://{self.bucket_name}"

    def get_path(self, first: str, *more: str) -> CloudStoragePath:
        """
        Resolve path segments within this bucket (no I/O).

        Args:
            first: First path segment, usually an absolute path
            *more: Further segments joined with "/"

        Returns:
            Native path bound to this filesystem
        """
        path = "/".join(segment for segment in (first, *more) if segment)
        return CloudStoragePath(self, path)

    def __repr__(self) -> str:
        return f"GcsBucketFileSystem({self.uri!r})"


class FileSystemFactory(Protocol):
    """Builds the filesystem handle for one bucket."""

    def __call__(
        self,
        bucket_name: str,
        storage_client: storage.Client,
        project_id: str | None,
        config: CloudStorageConfig,
    ) -> GcsBucketFileSystem: ...


def create_bucket_filesystem(
    bucket_name: str,
    storage_client: storage.Client,
    project_id: str | None,
    config: CloudStorageConfig,
) -> GcsBucketFileSystem:
    """Default ``FileSystemFactory``: a handle backed by ``storage.Client.bucket``."""
    logger.debug("Opening Cloud Storage filesystem for bucket %s", bucket_name)
    return GcsBucketFileSystem(bucket_name, storage_client, project_id, config)


def is_gcs_path(native_path: object) -> bool:
    """Whether a native path belongs to a Cloud Storage filesystem."""
    return (
        isinstance(native_path, CloudStoragePath)
        and native_path.filesystem.provider_scheme == URI_SCHEME
    )
