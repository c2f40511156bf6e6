"""Cloud Storage path entity."""

from __future__ import annotations

import asyncio
import threading
from typing import BinaryIO

from google.cloud import storage

from bucketpath.core.gcs.bucket.request_handler import GcsRequestHandler
from bucketpath.core.gcs.client import BlobId
from bucketpath.core.gcs.errors import NotCloudStoragePathError
from bucketpath.core.gcs.filesystem import URI_SCHEME, CloudStoragePath
from bucketpath.core.io.models import OpenOptions


class GcsPath:
    """
    Addressable object path inside a bucket.

    Wraps a native ``CloudStoragePath`` together with the storage client,
    project id and request handler of the builder that produced it. Paths
    derived from this one (``with_new_native_path``, ``resolve``,
    ``parent``) carry the same client, project id and handler.

    Reads and writes are delegated to the request handler. ``read`` and
    ``write`` block (they run the handler coroutine with ``asyncio.run``
    and cannot be called from a running event loop); use ``aread`` and
    ``awrite`` from async code.
    """

    def __init__(
        self,
        native_path: object,
        storage_client: storage.Client,
        project_id: str | None,
        request_handler: GcsRequestHandler,
    ) -> None:
        self.native_path = native_path
        self.storage_client = storage_client
        self.project_id = project_id
        self.request_handler = request_handler
        self._blob_id: BlobId | None = None
        self._blob_id_lock = threading.Lock()

    @property
    def cloud_storage_path(self) -> CloudStoragePath:
        """
        Native path as a CloudStoragePath.

        Raises:
            NotCloudStoragePathError: If the native path belongs to another provider
        """
        if isinstance(self.native_path, CloudStoragePath):
            return self.native_path
        raise NotCloudStoragePathError(self.native_path)

    @property
    def blob_id(self) -> BlobId:
        """Bucket and object name, computed on first access."""
        if self._blob_id is None:
            with self._blob_id_lock:
                if self._blob_id is None:
                    native = self.cloud_storage_path
                    self._blob_id = BlobId(bucket=native.bucket, name=native.object_name)
        return self._blob_id

    @property
    def bucket(self) -> str:
        return self.cloud_storage_path.bucket

    @property
    def name(self) -> str:
        return self.cloud_storage_path.name

    @property
    def requester_pays(self) -> bool:
        return self.request_handler.requester_pays(self.blob_id.bucket)

    @property
    def path_as_string(self) -> str:
        native = self.cloud_storage_path
        host = native.bucket.removesuffix("/")
        path = str(native).removeprefix("/")
        return f"{URI_SCHEME}://{host}/{path}"

    @property
    def path_without_scheme(self) -> str:
        native = self.cloud_storage_path
        return native.bucket + str(native.to_absolute_path())

    def with_new_native_path(self, native_path: object) -> GcsPath:
        return GcsPath(native_path, self.storage_client, self.project_id, self.request_handler)

    def resolve(self, other: str) -> GcsPath:
        """Child (or absolute) path within the same bucket."""
        return self.with_new_native_path(self.cloud_storage_path.resolve(other))

    @property
    def parent(self) -> GcsPath | None:
        native_parent = self.cloud_storage_path.parent
        if native_parent is None:
            return None
        return self.with_new_native_path(native_parent)

    async def aread(self) -> BinaryIO:
        return await self.request_handler.input_stream(self)

    def read(self) -> BinaryIO:
        return asyncio.run(self.aread())

    async def awrite(
        self,
        content: str,
        open_options: OpenOptions | None = None,
        encoding: str | None = None,
    ) -> GcsPath:
        """
        Write text content through the request handler.

        Args:
            content: Text to write
            open_options: Write options (content type from the filesystem config if None)
            encoding: Text encoding (filesystem config encoding if None)

        Returns:
            Path reported by the request handler for the written object
        """
        config = self.cloud_storage_path.filesystem.config
        if open_options is None:
            open_options = OpenOptions(content_type=config.content_type)
        return await self.request_handler.write(
            self, content, open_options, encoding or config.encoding
        )

    def write(
        self,
        content: str,
        open_options: OpenOptions | None = None,
        encoding: str | None = None,
    ) -> GcsPath:
        return asyncio.run(self.awrite(content, open_options, encoding))

    def __str__(self) -> str:
        return self.path_as_string

    def __repr__(self) -> str:
        return f"GcsPath({self.native_path!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GcsPath):
            return NotImplemented
        return self.native_path == other.native_path

    def __hash__(self) -> int:
        return hash(self.native_path)
