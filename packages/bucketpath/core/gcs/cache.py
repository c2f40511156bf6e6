"""Per-bucket cache of Cloud Storage filesystem handles.

Filesystems only depend on the bucket and on the credentials, which are
fixed per path builder, so one cache instance lives inside each builder.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from concurrent.futures import Future

from google.cloud import storage

from bucketpath.core.config.models import CloudStorageConfig
from bucketpath.core.gcs.errors import FileSystemConstructionError
from bucketpath.core.gcs.filesystem import (
    FileSystemFactory,
    GcsBucketFileSystem,
    create_bucket_filesystem,
)

logger = logging.getLogger(__name__)


class GcsFileSystemCache:
    """
    Thread-safe get-or-build cache keyed by bucket name.

    At most one construction per bucket is in flight at any time: the first
    caller for an uncached bucket runs the factory while concurrent callers
    for the same bucket wait on its future and receive the same handle (or
    the same failure). Failed constructions are dropped so a later call
    retries. Entries are never evicted.

    The lock only guards the entry map; the factory runs outside it, so
    constructions for distinct buckets proceed independently.
    """

    def __init__(
        self,
        storage_client: storage.Client,
        config: CloudStorageConfig,
        project_id: str | None,
        factory: FileSystemFactory = create_bucket_filesystem,
    ) -> None:
        """
        Initialize the cache.

        Args:
            storage_client: Client handed to the factory
            config: Filesystem configuration handed to the factory
            project_id: Project id handed to the factory
            factory: Builds the filesystem for one bucket
        """
        self._storage_client = storage_client
        self._config = config
        self._project_id = project_id
        self._factory = factory
        self._entries: dict[str, Future[GcsBucketFileSystem]] = {}
        self._lock = threading.Lock()

    def get_or_build(self, bucket_name: str) -> GcsBucketFileSystem:
        """
        Return the filesystem for a bucket, building it on first request.

        Blocks while another caller is building the same bucket.

        Args:
            bucket_name: Bucket to get the filesystem for

        Returns:
            Cached filesystem handle (same object for every call)

        Raises:
            FileSystemConstructionError: If the factory failed
        """
        with self._lock:
            future = self._entries.get(bucket_name)
            is_builder = future is None
            if future is None:
                future = Future()
                self._entries[bucket_name] = future

        if is_builder:
            self._build(bucket_name, future)

        return future.result()

    async def aget_or_build(self, bucket_name: str) -> GcsBucketFileSystem:
        """Async variant of ``get_or_build``; waits in a worker thread."""
        return await asyncio.to_thread(self.get_or_build, bucket_name)

    def _build(self, bucket_name: str, future: Future[GcsBucketFileSystem]) -> None:
        start = time.perf_counter()
        try:
            filesystem = self._factory(
                bucket_name, self._storage_client, self._project_id, self._config
            )
        except Exception as e:
            logger.warning("Building filesystem for bucket %s failed: %s", bucket_name, e)
            # Drop the entry before publishing so waiters that retry start fresh
            with self._lock:
                del self._entries[bucket_name]
            future.set_exception(FileSystemConstructionError(bucket_name, e))
            return
        except BaseException as e:
            # Interrupts reach the caller unchanged; waiters get a construction error
            with self._lock:
                del self._entries[bucket_name]
            future.set_exception(FileSystemConstructionError(bucket_name, e))
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info("Built filesystem for bucket %s in %.1fms", bucket_name, duration_ms)
        future.set_result(filesystem)

    def cached_buckets(self) -> list[str]:
        """Buckets with a successfully built filesystem, sorted."""
        with self._lock:
            futures = dict(self._entries)
        return sorted(
            name
            for name, future in futures.items()
            if future.done() and future.exception() is None
        )

    def __contains__(self, bucket_name: object) -> bool:
        return bucket_name in self.cached_buckets()

    def __len__(self) -> int:
        return len(self.cached_buckets())
