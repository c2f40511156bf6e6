"""Result type for path building.

Lets callers branch on build failures without exception handling.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from bucketpath.core.gcs.errors import PathBuildError, PathBuildErrorKind
from bucketpath.core.gcs.path import GcsPath


class PathBuildResult(BaseModel):
    """Result of building a path from a string.

    Immutable; exactly one of ``path`` and ``error`` is set.

    Attributes:
        success: Whether a path was built
        path_string: Input string
        path: Built path (if success=True)
        error: Typed build failure (if success=False)

    Example:
        >>> result = builder.try_build("s3://bucket/x")
        >>> if not result.success:
        ...     print(result.error_kind, result.error_message)
    """

    success: bool = Field(description="Whether a path was built")
    path_string: str = Field(description="Input string")
    path: GcsPath | None = Field(default=None, description="Built path (if success)")
    error: PathBuildError | None = Field(
        default=None, repr=False, description="Build failure (if failure)"
    )

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    @property
    def error_kind(self) -> PathBuildErrorKind | None:
        return self.error.kind if self.error is not None else None

    @property
    def error_message(self) -> str | None:
        return self.error.message if self.error is not None else None

    def unwrap(self) -> GcsPath:
        """Return the path, raising the build failure if there is none."""
        if self.error is not None:
            raise self.error
        assert self.path is not None
        return self.path


def success_result(path_string: str, path: GcsPath) -> PathBuildResult:
    """Create success result."""
    return PathBuildResult(success=True, path_string=path_string, path=path)


def failure_result(path_string: str, error: PathBuildError) -> PathBuildResult:
    """Create failure result."""
    return PathBuildResult(success=False, path_string=path_string, error=error)
