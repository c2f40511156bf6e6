"""Tests for syntactic validation of Cloud Storage path strings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from bucketpath.core.gcs.validation import (
    POSSIBLY_VALID_RELATIVE,
    InvalidFullGcsPath,
    InvalidScheme,
    PossiblyValidRelativeGcsPath,
    UnparseableGcsPath,
    ValidFullGcsPath,
    validate_gcs_path,
)


class TestValidFullPaths:
    """Strings that name a bucket and a path."""

    def test_bucket_and_object(self):
        """A hostname bucket yields the bucket and the absolute path."""
        result = validate_gcs_path("gs://my-bucket/some/object.txt")
        assert result == ValidFullGcsPath(bucket="my-bucket", path="/some/object.txt")

    def test_bucket_only(self):
        """A bare bucket has an empty path."""
        assert validate_gcs_path("gs://my-bucket") == ValidFullGcsPath(
            bucket="my-bucket", path=""
        )

    def test_trailing_slash_kept(self):
        """A trailing slash marks a directory prefix and is preserved."""
        result = validate_gcs_path("gs://my-bucket/dir/")
        assert isinstance(result, ValidFullGcsPath)
        assert result.path == "/dir/"

    @pytest.mark.parametrize(
        "string,bucket",
        [
            ("gs://my_bucket/x", "my_bucket"),
            ("gs://bucket_with_underscores/a/b", "bucket_with_underscores"),
            ("gs://1-2_3.4/x", "1-2_3.4"),
        ],
    )
    def test_soft_bucket_names(self, string: str, bucket: str):
        """Bucket names that are not hostnames fall back to the soft grammar."""
        result = validate_gcs_path(string)
        assert isinstance(result, ValidFullGcsPath)
        assert result.bucket == bucket

    def test_space_in_object_name(self):
        """Characters illegal in a URI are escaped before parsing and decoded after."""
        result = validate_gcs_path("gs://my-bucket/with space/file name.txt")
        assert result == ValidFullGcsPath(bucket="my-bucket", path="/with space/file name.txt")

    def test_percent_sequence_is_literal(self):
        """A literal percent sequence is not decoded."""
        result = validate_gcs_path("gs://my-bucket/a%20b")
        assert isinstance(result, ValidFullGcsPath)
        assert result.path == "/a%20b"

    @pytest.mark.parametrize(
        "string,path",
        [
            ("gs://my-bucket/a?b", "/a?b"),
            ("gs://my-bucket/a?", "/a?"),
            ("gs://my-bucket/report?x=1&y=2", "/report?x=1&y=2"),
        ],
    )
    def test_question_mark_is_part_of_the_path(self, string: str, path: str):
        """``?`` does not start a query in object names."""
        assert validate_gcs_path(string) == ValidFullGcsPath(bucket="my-bucket", path=path)

    def test_hash_is_part_of_the_path(self):
        """``#`` is not a fragment separator in object names."""
        result = validate_gcs_path("gs://my-bucket/file#1.txt")
        assert isinstance(result, ValidFullGcsPath)
        assert result.path == "/file#1.txt"

    def test_scheme_is_case_insensitive(self):
        """An uppercase scheme is still Cloud Storage."""
        assert isinstance(validate_gcs_path("GS://my-bucket/x"), ValidFullGcsPath)

    def test_port_is_not_part_of_the_bucket(self):
        """A numeric port parses and is dropped from the bucket name."""
        result = validate_gcs_path("gs://my-bucket:443/x")
        assert result == ValidFullGcsPath(bucket="my-bucket", path="/x")


class TestRelativePaths:
    """Strings without a scheme."""

    @pytest.mark.parametrize("string", ["relative/thing", "/absolute/no/scheme", "file.txt"])
    def test_no_scheme(self, string: str):
        """No scheme means possibly relative."""
        assert validate_gcs_path(string) == POSSIBLY_VALID_RELATIVE
        assert isinstance(validate_gcs_path(string), PossiblyValidRelativeGcsPath)


class TestInvalidPaths:
    """Strings that can never be Cloud Storage paths."""

    @pytest.mark.parametrize("string", ["s3://bucket/x", "file:///tmp/x", "https://host/x"])
    def test_other_scheme(self, string: str):
        """Other schemes are rejected and the message names the input."""
        result = validate_gcs_path(string)
        assert result == InvalidScheme(path_string=string)
        assert "'gs' scheme" in result.error_message
        assert string in result.error_message

    def test_short_bucket(self):
        """A one-letter bucket is shorter than any valid bucket name."""
        result = validate_gcs_path("gs://a/x")
        assert result == InvalidFullGcsPath(path_string="gs://a/x")

    @pytest.mark.parametrize(
        "string",
        ["gs://", "gs:///x", "gs://a_/x", "gs://-bucket/x", "gs://Bad_Bucket/x"],
    )
    def test_no_acceptable_bucket(self, string: str):
        """Neither a hostname nor the soft grammar matches."""
        result = validate_gcs_path(string)
        assert isinstance(result, InvalidFullGcsPath)
        assert string in result.error_message
        assert "https://cloud.google.com/storage/docs/naming" in result.error_message

    def test_backslash_not_accepted_in_soft_bucket(self):
        """Backslashes are not part of the soft bucket grammar."""
        assert isinstance(validate_gcs_path("gs://my\\bucket/x"), InvalidFullGcsPath)

    def test_unparseable(self):
        """A malformed authority cannot be parsed as a URI."""
        result = validate_gcs_path("gs://::bad::")
        assert isinstance(result, UnparseableGcsPath)
        assert result.cause is not None
        assert isinstance(result.cause, ValueError)
        assert result.error_message.startswith(
            "The specified GCS path 'gs://::bad::' does not parse as a URI."
        )
        assert str(result.cause) in result.error_message


class TestOutcomes:
    """Validation outcomes as values."""

    def test_outcomes_are_immutable(self):
        """Outcomes are frozen."""
        result = validate_gcs_path("gs://my-bucket/x")
        with pytest.raises(ValidationError):
            result.bucket = "other"  # type: ignore[misc]

    def test_match_is_exhaustive_over_kinds(self):
        """Every outcome carries a distinct kind tag."""
        kinds = {
            validate_gcs_path(s).kind
            for s in ["gs://my-bucket/x", "rel", "s3://b/x", "gs://a/x", "gs://::bad::"]
        }
        assert kinds == {
            "valid_full",
            "possibly_valid_relative",
            "invalid_scheme",
            "invalid_full_path",
            "unparseable",
        }
