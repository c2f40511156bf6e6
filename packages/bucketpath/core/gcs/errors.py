"""Exceptions raised while resolving Cloud Storage paths.

Build failures (``PathBuildError`` and subclasses) are caller-facing: they
carry a ``kind`` so callers can branch on the failure programmatically, and
their message echoes the offending input. ``NotCloudStoragePathError`` is
an internal consistency defect and deliberately does not derive from
``PathBuildError``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from bucketpath.core.gcs.validation import (
    InvalidFullGcsPath,
    InvalidGcsPath,
    InvalidScheme,
    UnparseableGcsPath,
)


class PathBuildErrorKind(str, Enum):
    """Why a path could not be built."""

    INVALID_SCHEME = "invalid_scheme"
    INVALID_FULL_PATH = "invalid_full_path"
    UNPARSEABLE = "unparseable"
    RELATIVE_PATH_NOT_SUPPORTED = "relative_path_not_supported"
    FILESYSTEM_CONSTRUCTION = "filesystem_construction"

    @property
    def retryable(self) -> bool:
        """Only filesystem construction can succeed on a later attempt."""
        return self is PathBuildErrorKind.FILESYSTEM_CONSTRUCTION


class PathBuildError(Exception):
    """Base exception for strings that could not be turned into a path.

    Attributes:
        kind: Failure category
        message: Human-readable error description
        path_string: Offending input string (None when not known)
    """

    kind: PathBuildErrorKind

    def __init__(self, message: str, *, path_string: str | None = None) -> None:
        self.message = message
        self.path_string = path_string
        super().__init__(message)


_KIND_BY_VALIDATION: dict[type[Any], PathBuildErrorKind] = {
    InvalidScheme: PathBuildErrorKind.INVALID_SCHEME,
    InvalidFullGcsPath: PathBuildErrorKind.INVALID_FULL_PATH,
    UnparseableGcsPath: PathBuildErrorKind.UNPARSEABLE,
}


class InvalidGcsPathError(PathBuildError, ValueError):
    """The string failed syntactic validation.

    The message is the validation outcome's ``error_message`` verbatim.
    """

    def __init__(self, validation: InvalidGcsPath) -> None:
        self.validation = validation
        self.kind = _KIND_BY_VALIDATION[type(validation)]
        super().__init__(validation.error_message, path_string=validation.path_string)
        if isinstance(validation, UnparseableGcsPath):
            self.__cause__ = validation.cause


class RelativePathNotSupportedError(PathBuildError, ValueError):
    """The string has no scheme; relative paths cannot be built."""

    kind = PathBuildErrorKind.RELATIVE_PATH_NOT_SUPPORTED

    def __init__(self, path_string: str) -> None:
        super().__init__(f"{path_string} does not have a gcs scheme", path_string=path_string)


class FileSystemConstructionError(PathBuildError):
    """Building the filesystem for a bucket failed.

    Never cached: a later call for the same bucket tries again.

    Attributes:
        bucket: Bucket whose filesystem could not be built
        cause: Exception raised by the filesystem factory
        path_string: Path string whose build needed the filesystem (None
            when raised by the cache directly)
    """

    kind = PathBuildErrorKind.FILESYSTEM_CONSTRUCTION

    def __init__(
        self, bucket: str, cause: BaseException, *, path_string: str | None = None
    ) -> None:
        self.bucket = bucket
        self.cause = cause
        super().__init__(
            f"Failed to build Cloud Storage filesystem for bucket '{bucket}': {cause}",
            path_string=path_string,
        )
        self.__cause__ = cause


class NotCloudStoragePathError(RuntimeError):
    """A GcsPath was bound to a native path of another provider (programming error)."""

    def __init__(self, native_path: object) -> None:
        self.native_path = native_path
        super().__init__(f"Internal path was not a cloud storage path: {native_path}")
