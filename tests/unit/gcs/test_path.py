"""Tests for the GcsPath entity."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import PurePosixPath

import pytest

from bucketpath.core.config.models import CloudStorageConfig
from bucketpath.core.gcs.client import BlobId
from bucketpath.core.gcs.errors import NotCloudStoragePathError
from bucketpath.core.gcs.filesystem import GcsBucketFileSystem
from bucketpath.core.gcs.path import GcsPath
from bucketpath.core.io.models import OpenOptions
from tests.conftest import FakeRequestHandler


@pytest.fixture
def path(bucket_filesystem: GcsBucketFileSystem, storage_client, request_handler) -> GcsPath:
    """Path to ``gs://my-bucket/dir/file.txt``."""
    return GcsPath(
        bucket_filesystem.get_path("/dir/file.txt"),
        storage_client,
        "test-project",
        request_handler,
    )


class TestIdentity:
    """Tests for naming and identity."""

    def test_strings(self, path: GcsPath):
        """String forms with and without scheme."""
        assert path.path_as_string == "gs://my-bucket/dir/file.txt"
        assert path.path_without_scheme == "my-bucket/dir/file.txt"
        assert str(path) == "gs://my-bucket/dir/file.txt"
        assert path.name == "file.txt"
        assert path.bucket == "my-bucket"

    def test_blob_id(self, path: GcsPath):
        """The blob id has no leading slash."""
        assert path.blob_id == BlobId(bucket="my-bucket", name="dir/file.txt")
        assert str(path.blob_id) == "my-bucket/dir/file.txt"

    def test_blob_id_is_memoized(self, path: GcsPath):
        """Every access returns the same object, across threads too."""
        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(lambda _: path.blob_id, range(32)))

        assert all(blob_id is ids[0] for blob_id in ids)
        assert path.blob_id is ids[0]

    def test_blob_id_keeps_prefix_slash_when_configured(self, storage_client, request_handler):
        """The leading slash is kept when stripping is disabled."""
        config = CloudStorageConfig(strip_prefix_slash=False)
        filesystem = GcsBucketFileSystem("my-bucket", storage_client, None, config)
        path = GcsPath(filesystem.get_path("/a/b"), storage_client, None, request_handler)

        assert path.blob_id.name == "/a/b"

    def test_blob_id_normalizes_dot_segments(self, bucket_filesystem, storage_client, request_handler):
        """``.`` and ``..`` segments are collapsed in the object name."""
        path = GcsPath(
            bucket_filesystem.get_path("/a/./b/../c.txt"),
            storage_client,
            "test-project",
            request_handler,
        )

        assert path.blob_id.name == "a/c.txt"

    def test_equality(self, path: GcsPath, bucket_filesystem, storage_client, request_handler):
        """Paths are equal when their native paths are equal."""
        same = GcsPath(
            bucket_filesystem.get_path("/dir/file.txt"),
            storage_client,
            "test-project",
            request_handler,
        )

        assert path == same
        assert hash(path) == hash(same)
        assert path != path.resolve("other")

    def test_foreign_native_path(self, storage_client, request_handler):
        """A native path of another provider is an internal defect."""
        path = GcsPath(PurePosixPath("/tmp/x"), storage_client, None, request_handler)

        with pytest.raises(NotCloudStoragePathError, match="not a cloud storage path"):
            _ = path.blob_id
        with pytest.raises(NotCloudStoragePathError):
            _ = path.path_as_string


class TestDerivedPaths:
    """Tests for paths derived from an existing one."""

    def test_with_new_native_path_copies_context(self, path: GcsPath, bucket_filesystem):
        """Client, project and handler are carried over unchanged."""
        other = path.with_new_native_path(bucket_filesystem.get_path("/other.txt"))

        assert other.storage_client is path.storage_client
        assert other.project_id == path.project_id
        assert other.request_handler is path.request_handler
        assert other.path_as_string == "gs://my-bucket/other.txt"

    def test_resolve(self, path: GcsPath):
        """Relative segments resolve against the path."""
        child = path.parent.resolve("sub/leaf.txt")

        assert child.path_as_string == "gs://my-bucket/dir/sub/leaf.txt"
        assert child.request_handler is path.request_handler

    def test_resolve_absolute(self, path: GcsPath):
        """An absolute segment replaces the path within the bucket."""
        assert path.resolve("/top.txt").path_as_string == "gs://my-bucket/top.txt"

    def test_parent_chain(self, path: GcsPath):
        """Parents are directory prefixes up to the bucket root."""
        parent = path.parent
        assert parent is not None
        assert parent.path_as_string == "gs://my-bucket/dir/"

        root = parent.parent
        assert root is not None
        assert root.path_as_string == "gs://my-bucket/"
        assert root.parent is None


class TestIO:
    """Tests for reads and writes through the request handler."""

    def test_write_then_read(self, path: GcsPath, request_handler: FakeRequestHandler):
        """Blocking wrappers delegate to the handler."""
        returned = path.write("hello")

        assert returned is path
        assert request_handler.objects == {"my-bucket/dir/file.txt": b"hello"}
        assert path.read().read() == b"hello"

    def test_write_uses_filesystem_defaults(
        self, path: GcsPath, request_handler: FakeRequestHandler
    ):
        """Content type and encoding default to the filesystem config."""
        path.write("hello")

        [(_, open_options, encoding)] = request_handler.writes
        assert open_options == OpenOptions(content_type="text/plain")
        assert encoding == "utf-8"

    async def test_async_write_with_options(
        self, path: GcsPath, request_handler: FakeRequestHandler
    ):
        """Explicit options and encoding are passed through."""
        options = OpenOptions(content_type="application/json", overwrite=False)

        await path.awrite('{"k": "é"}', options, encoding="latin-1")

        assert request_handler.writes == [("my-bucket/dir/file.txt", options, "latin-1")]
        stream = await path.aread()
        assert stream.read() == '{"k": "é"}'.encode("latin-1")

    def test_requester_pays_asks_the_handler(self, path: GcsPath, storage_client):
        """Requester pays is the handler's decision for the path's bucket."""
        assert not path.requester_pays

        paying = GcsPath(
            path.native_path, storage_client, "test-project", FakeRequestHandler(requester_pays=True)
        )

        assert paying.requester_pays
