"""Syntactic validation of Cloud Storage path strings.

Triage for user-supplied strings so that mistyped paths fail fast, without
contacting Cloud Storage. A ``ValidFullGcsPath`` means the string *looks*
like ``gs://<bucket>[/<path>]``; neither the bucket nor the object is
checked for existence. Exact bucket naming rules are enforced by GCS, see
https://cloud.google.com/storage/docs/naming.

The outcome is a closed set of variants, meant to be consumed with ``match``:

    >>> match validate_gcs_path("gs://my-bucket/some/object.txt"):
    ...     case ValidFullGcsPath(bucket=bucket, path=path):
    ...         print(bucket, path)
    my-bucket /some/object.txt
"""

from __future__ import annotations

import re
from typing import Literal, TypeAlias
from urllib.parse import SplitResult, quote, unquote, urlsplit

from pydantic import BaseModel, ConfigDict, Field

from bucketpath.core.gcs.filesystem import URI_SCHEME

# Left unescaped before splitting besides letters, digits and "_.-~".
# "?" and "#" are escaped: both are object name characters, never query or fragment.
_URI_SAFE_CHARS = "!$&'()*+,;=:@/"

# Soft validation of bucket names, applied when the authority is not a valid host
_GCS_BUCKET_PATTERN = re.compile(
    r"""
    ^gs://
    (                               # bucket name
      [a-z0-9][a-z0-9\-_.]+[a-z0-9]
    )
    (?:
      /.*                           # no validation here
    )?
    """,
    re.VERBOSE,
)

# Server-based authority host: domain labels, the last one starting with a letter
_HOSTNAME_PATTERN = re.compile(
    r"^(?:[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?\.)*[A-Za-z](?:[A-Za-z0-9-]*[A-Za-z0-9])?\.?$"
)
_IPV4_PATTERN = re.compile(r"^\d{1,3}(?:\.\d{1,3}){3}$")

# Bucket names have at least three characters
_MIN_BUCKET_LENGTH = 3


class ValidFullGcsPath(BaseModel):
    """Bucket and path are both known."""

    kind: Literal["valid_full"] = "valid_full"
    bucket: str
    path: str

    model_config = ConfigDict(frozen=True)


class PossiblyValidRelativeGcsPath(BaseModel):
    """No scheme: the string may be a path relative to something else."""

    kind: Literal["possibly_valid_relative"] = "possibly_valid_relative"

    model_config = ConfigDict(frozen=True)


class InvalidScheme(BaseModel):
    """A scheme is present but it is not ``gs``."""

    kind: Literal["invalid_scheme"] = "invalid_scheme"
    path_string: str

    model_config = ConfigDict(frozen=True)

    @property
    def error_message(self) -> str:
        return f"Cloud Storage URIs must have '{URI_SCHEME}' scheme: {self.path_string}"


class InvalidFullGcsPath(BaseModel):
    """The scheme is ``gs`` but no acceptable bucket name could be found."""

    kind: Literal["invalid_full_path"] = "invalid_full_path"
    path_string: str

    model_config = ConfigDict(frozen=True)

    @property
    def error_message(self) -> str:
        return (
            f"The path '{self.path_string}' does not seem to be a valid GCS path. "
            "Please check that it starts with gs:// and that the bucket and object follow "
            "GCS naming guidelines at https://cloud.google.com/storage/docs/naming."
        )


class UnparseableGcsPath(BaseModel):
    """The string could not be parsed as a URI at all."""

    kind: Literal["unparseable"] = "unparseable"
    path_string: str
    cause: BaseException = Field(repr=False, description="Exception raised by the URI parser")

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def error_message(self) -> str:
        return "\n".join(
            [
                f"The specified GCS path '{self.path_string}' does not parse as a URI.",
                str(self.cause),
            ]
        )


InvalidGcsPath: TypeAlias = InvalidScheme | InvalidFullGcsPath | UnparseableGcsPath
GcsPathValidation: TypeAlias = ValidFullGcsPath | PossiblyValidRelativeGcsPath | InvalidGcsPath

POSSIBLY_VALID_RELATIVE = PossiblyValidRelativeGcsPath()


def _split_uri(string: str) -> SplitResult:
    """Escape characters that are not plain URI path characters, then split as a URI.

    Raises:
        ValueError: If the string cannot be parsed, including a non-numeric
            or out of range port in the authority
    """
    parts = urlsplit(quote(string, safe=_URI_SAFE_CHARS))
    if parts.netloc:
        # .port is parsed lazily and raises on a malformed authority
        parts.port  # noqa: B018
    return parts


def _server_host(netloc: str) -> str | None:
    """Host of a server-based authority (``[userinfo@]host[:port]``), if any."""
    hostinfo = netloc.rpartition("@")[2]
    host = hostinfo.partition(":")[0]
    if len(host) < _MIN_BUCKET_LENGTH:
        return None
    if _HOSTNAME_PATTERN.fullmatch(host) or _IPV4_PATTERN.fullmatch(host):
        return host
    return None


def _soft_bucket_parsing(string: str) -> str | None:
    """Extract a bucket name using rules less strict than URI hostnames.

    GCS allows (albeit discourages) bucket names such as ``my_bucket`` that are
    not valid hostnames.
    """
    match = _GCS_BUCKET_PATTERN.fullmatch(string)
    return match.group(1) if match else None


def validate_gcs_path(string: str) -> GcsPathValidation:
    """
    Classify a user-supplied string.

    Args:
        string: Raw path string

    Returns:
        One of ValidFullGcsPath, PossiblyValidRelativeGcsPath, InvalidScheme,
        InvalidFullGcsPath or UnparseableGcsPath

    Example:
        >>> validate_gcs_path("relative/thing")
        PossiblyValidRelativeGcsPath(kind='possibly_valid_relative')
        >>> validate_gcs_path("s3://bucket/x").kind
        'invalid_scheme'
    """
    try:
        uri = _split_uri(string)
    except ValueError as e:
        return UnparseableGcsPath(path_string=string, cause=e)

    if not uri.scheme:
        return POSSIBLY_VALID_RELATIVE
    if uri.scheme.lower() != URI_SCHEME:
        return InvalidScheme(path_string=string)

    path = unquote(uri.path)
    host = _server_host(uri.netloc)
    if host is not None:
        return ValidFullGcsPath(bucket=host, path=path)

    bucket = _soft_bucket_parsing(string)
    if bucket is None:
        return InvalidFullGcsPath(path_string=string)
    return ValidFullGcsPath(bucket=bucket, path=path)
