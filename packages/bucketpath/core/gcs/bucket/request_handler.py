"""Request handlers: the I/O and billing strategy behind every GcsPath.

A request handler decides who pays for requests against a bucket
(requester pays) and performs the actual reads and writes. Handlers are
async-first; ``GcsPath`` offers blocking wrappers.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, BinaryIO, Protocol

from google.api_core.retry import Retry
from google.cloud import storage

from bucketpath.core.io.models import OpenOptions

if TYPE_CHECKING:
    from bucketpath.core.gcs.path import GcsPath

logger = logging.getLogger(__name__)


class GcsRequestHandler(Protocol):
    """
    Protocol for the access policy injected into every GcsPath.

    ``write`` and ``input_stream`` may block on network I/O and are
    therefore coroutines.
    """

    def requester_pays(self, bucket: str) -> bool:
        """Whether requests against ``bucket`` must be billed to our project."""
        ...

    async def write(
        self,
        path: GcsPath,
        content: str,
        open_options: OpenOptions,
        encoding: str,
    ) -> GcsPath:
        """
        Write text content to the object behind ``path``.

        Args:
            path: Target path
            content: Text to write
            open_options: Content type and overwrite behaviour
            encoding: Text encoding

        Returns:
            Path of the written object

        Raises:
            google.api_core.exceptions.GoogleAPIError: On request failure
        """
        ...

    async def input_stream(self, path: GcsPath) -> BinaryIO:
        """
        Open the object behind ``path`` for reading.

        Args:
            path: Source path

        Returns:
            Binary stream over the object content
        """
        ...


class StorageRequestHandler:
    """
    Request handler backed by ``google-cloud-storage``.

    Requester-pays decisions are delegated to ``requester_pays_policy`` (see
    ``bucketpath.core.gcs.bucket.policies``). When it answers True the
    builder project is sent as ``user_project`` on every request.
    """

    def __init__(
        self,
        storage_client: storage.Client,
        project_id: str | None,
        requester_pays_policy: Callable[[str], bool],
        retry: Retry | None = None,
    ) -> None:
        """
        Initialize the handler.

        Args:
            storage_client: Client used for all requests
            project_id: Project billed for requester-pays buckets
            requester_pays_policy: Decides requester pays per bucket
            retry: Retry policy for requests (client default if None)
        """
        self.storage_client = storage_client
        self.project_id = project_id
        self._requester_pays_policy = requester_pays_policy
        self._retry_kwargs: dict[str, Any] = {"retry": retry} if retry is not None else {}

    def requester_pays(self, bucket: str) -> bool:
        return self._requester_pays_policy(bucket)

    def _blob(self, path: GcsPath) -> storage.Blob:
        blob_id = path.blob_id
        user_project = self.project_id if self.requester_pays(blob_id.bucket) else None
        return self.storage_client.bucket(blob_id.bucket, user_project=user_project).blob(
            blob_id.name
        )

    def _upload(
        self, path: GcsPath, content: str, open_options: OpenOptions, encoding: str
    ) -> None:
        kwargs = dict(self._retry_kwargs)
        if not open_options.overwrite:
            # Precondition: only succeed if no live object exists yet
            kwargs["if_generation_match"] = 0
        self._blob(path).upload_from_string(
            content.encode(encoding),
            content_type=f"{open_options.content_type}; charset={encoding}",
            **kwargs,
        )

    def _open(self, path: GcsPath) -> BinaryIO:
        chunk_size = path.cloud_storage_path.filesystem.config.block_size
        return self._blob(path).open("rb", chunk_size=chunk_size, **self._retry_kwargs)

    async def write(
        self,
        path: GcsPath,
        content: str,
        open_options: OpenOptions,
        encoding: str,
    ) -> GcsPath:
        logger.debug("Writing %s", path)
        await asyncio.to_thread(self._upload, path, content, open_options, encoding)
        return path

    async def input_stream(self, path: GcsPath) -> BinaryIO:
        logger.debug("Opening %s for reading", path)
        return await asyncio.to_thread(self._open, path)
