"""Tests that Cloud Storage paths are usable through the provider-independent contract."""

from __future__ import annotations

from pydantic import ValidationError
import pytest

from bucketpath.core.gcs.builder import GcsPathBuilder
from bucketpath.core.io import OpenOptions, Path, PathBuilder


def to_strings(builder: PathBuilder, raw: list[str]) -> list[str]:
    return [builder.build(s).path_as_string for s in raw]


def copy_text(source: Path, target: Path) -> Path:
    return target.write(source.read().read().decode("utf-8"))


class TestPathContract:
    """GcsPathBuilder and GcsPath through the protocols."""

    def test_builder_as_path_builder(self, builder: GcsPathBuilder):
        """Callers typed on PathBuilder get canonical strings."""
        assert to_strings(builder, ["gs://my-bucket/a", "gs://other-bucket/b/"]) == [
            "gs://my-bucket/a",
            "gs://other-bucket/b/",
        ]

    def test_paths_as_paths(self, builder: GcsPathBuilder, request_handler):
        """Callers typed on Path can read and write."""
        source = builder.build("gs://my-bucket/in.txt").write("payload")

        target = copy_text(source, builder.build("gs://other-bucket/out.txt"))

        assert target.path_without_scheme == "other-bucket/out.txt"
        assert request_handler.objects["other-bucket/out.txt"] == b"payload"


class TestOpenOptions:
    """Tests for write options."""

    def test_defaults(self):
        """Text content that may be overwritten."""
        options = OpenOptions()

        assert options.content_type == "text/plain"
        assert options.overwrite

    def test_unknown_option_rejected(self):
        """Options are a closed set."""
        with pytest.raises(ValidationError):
            OpenOptions(append=True)  # type: ignore[call-arg]
