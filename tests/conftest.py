"""Shared pytest fixtures for bucketpath tests."""

from __future__ import annotations

import io
import logging
import threading
import time
from typing import BinaryIO
from unittest.mock import MagicMock

import pytest

from bucketpath.core.config.models import CloudStorageConfig
from bucketpath.core.gcs.builder import GcsPathBuilder
from bucketpath.core.gcs.filesystem import GcsBucketFileSystem, create_bucket_filesystem
from bucketpath.core.gcs.path import GcsPath
from bucketpath.core.io.models import OpenOptions

# ============================================================================
# Fakes
# ============================================================================


class CountingFileSystemFactory:
    """FileSystemFactory that counts constructions per bucket.

    Args:
        delay: Seconds to sleep inside each construction
        failures: Number of leading constructions that raise
    """

    def __init__(self, delay: float = 0.0, failures: int = 0) -> None:
        self.delay = delay
        self.failures = failures
        self.calls: dict[str, int] = {}
        self._lock = threading.Lock()

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    def __call__(self, bucket_name, storage_client, project_id, config) -> GcsBucketFileSystem:
        with self._lock:
            self.calls[bucket_name] = self.calls.get(bucket_name, 0) + 1
            fail = self.failures > 0
            if fail:
                self.failures -= 1
        if self.delay:
            time.sleep(self.delay)
        if fail:
            raise OSError(f"cannot reach bucket {bucket_name}")
        return create_bucket_filesystem(bucket_name, storage_client, project_id, config)


class FakeRequestHandler:
    """In-memory request handler keyed by blob name."""

    def __init__(self, requester_pays: bool = False) -> None:
        self._requester_pays = requester_pays
        self.objects: dict[str, bytes] = {}
        self.writes: list[tuple[str, OpenOptions, str]] = []

    def requester_pays(self, bucket: str) -> bool:
        return self._requester_pays

    async def write(
        self, path: GcsPath, content: str, open_options: OpenOptions, encoding: str
    ) -> GcsPath:
        self.objects[str(path.blob_id)] = content.encode(encoding)
        self.writes.append((str(path.blob_id), open_options, encoding))
        return path

    async def input_stream(self, path: GcsPath) -> BinaryIO:
        return io.BytesIO(self.objects[str(path.blob_id)])


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def storage_client() -> MagicMock:
    """Mock storage client; no request ever leaves the process."""
    client = MagicMock(name="storage_client")
    client.project = "test-project"
    return client


@pytest.fixture
def cloud_storage_config() -> CloudStorageConfig:
    """Default filesystem configuration."""
    return CloudStorageConfig()


@pytest.fixture
def counting_factory() -> CountingFileSystemFactory:
    """Filesystem factory that records constructions."""
    return CountingFileSystemFactory()


@pytest.fixture
def request_handler() -> FakeRequestHandler:
    """In-memory request handler."""
    return FakeRequestHandler()


@pytest.fixture
def builder(
    storage_client: MagicMock,
    cloud_storage_config: CloudStorageConfig,
    counting_factory: CountingFileSystemFactory,
    request_handler: FakeRequestHandler,
) -> GcsPathBuilder:
    """Builder wired to fakes."""
    return GcsPathBuilder(
        storage_client,
        cloud_storage_config,
        project_id="test-project",
        request_handler=request_handler,
        filesystem_factory=counting_factory,
    )


@pytest.fixture
def bucket_filesystem(
    storage_client: MagicMock, cloud_storage_config: CloudStorageConfig
) -> GcsBucketFileSystem:
    """Filesystem handle for ``my-bucket``."""
    return GcsBucketFileSystem("my-bucket", storage_client, "test-project", cloud_storage_config)


@pytest.fixture
def isolated_root_logger():
    """Restore root logger handlers and level after the test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
