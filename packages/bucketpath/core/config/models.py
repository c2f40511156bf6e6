"""Configuration models for bucketpath."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from google.api_core.retry import Retry, if_transient_error
from pydantic import BaseModel, ConfigDict, Field, model_validator


class BucketInformationPolicy(str, Enum):
    """How bucket billing metadata is obtained for requester-pays decisions."""

    ON_DEMAND = "on_demand"  # read bucket metadata once per bucket
    EXPECT = "expect"  # assume every bucket is requester pays
    DISABLED = "disabled"  # never bill the requester


class CloudStorageConfig(BaseModel):
    """Per-bucket filesystem configuration.

    Handed to the filesystem factory every time a bucket filesystem is built.
    Immutable so that every handle built from one builder sees the same values.
    """

    block_size: int = Field(
        default=2 * 1024 * 1024, gt=0, description="Read chunk size in bytes"
    )

    encoding: str = Field(default="utf-8", description="Default text encoding for writes")

    content_type: str = Field(default="text/plain", description="Content type for text writes")

    use_user_project: bool = Field(
        default=False,
        description="Bill bucket handle requests to the builder project (requester pays)",
    )

    working_directory: str = Field(
        default="/",
        pattern="^/",
        description="Directory relative paths are made absolute against",
    )

    strip_prefix_slash: bool = Field(
        default=True,
        description="Strip the leading slash when deriving blob names from paths",
    )

    model_config = ConfigDict(extra="forbid", frozen=True)


class GcsRetrySettings(BaseModel):
    """Transport retry settings, turned into a ``google.api_core`` Retry."""

    initial_delay_seconds: float = Field(default=1.0, gt=0.0)
    max_delay_seconds: float = Field(default=32.0, gt=0.0)
    multiplier: float = Field(default=2.0, ge=1.0)
    total_timeout_seconds: float = Field(
        default=50.0, gt=0.0, description="Deadline across all attempts of one call"
    )
    max_attempts: int = Field(
        default=3, ge=1, description="Attempts for credential acquisition"
    )

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def _check_delays(self) -> GcsRetrySettings:
        if self.max_delay_seconds < self.initial_delay_seconds:
            raise ValueError("max_delay_seconds must be >= initial_delay_seconds")
        return self

    def to_retry(self) -> Retry:
        """Build the Retry passed to every Cloud Storage call."""
        return Retry(
            predicate=if_transient_error,
            initial=self.initial_delay_seconds,
            maximum=self.max_delay_seconds,
            multiplier=self.multiplier,
            timeout=self.total_timeout_seconds,
        )


class GcsAuthConfig(BaseModel):
    """Authentication mode configuration.

    Example:
        >>> GcsAuthConfig(scheme="service_account", json_file="/secrets/sa.json")
    """

    name: str = Field(default="application-default", description="Auth mode name")

    scheme: Literal["application_default", "service_account", "user_service_account"] = (
        "application_default"
    )

    json_file: str | None = Field(
        default=None, description="Service account key file (service_account scheme)"
    )

    scopes: list[str] = Field(
        default_factory=lambda: ["https://www.googleapis.com/auth/devstorage.full_control"]
    )

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def _check_json_file(self) -> GcsAuthConfig:
        if self.scheme == "service_account" and not self.json_file:
            raise ValueError("json_file is required for the service_account scheme")
        return self


class PathBuilderOptions(BaseModel):
    """Per-run options bag consulted when creating a path builder.

    Unknown keys are kept so callers can pass their whole options mapping.
    """

    google_project: str | None = Field(
        default=None, description="Project to bill, overrides the configured default"
    )

    user_service_account_json: str | None = Field(
        default=None, description="Service account key JSON (user_service_account scheme)"
    )

    model_config = ConfigDict(extra="allow", frozen=True)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False
    filename: str | None = None


class GcsConfig(BaseModel):
    """Top-level configuration for building Cloud Storage path builders."""

    application_name: str = Field(default="bucketpath", description="User agent for requests")

    default_project: str | None = Field(
        default=None, description="Project used when options do not name one"
    )

    bucket_information_policy: BucketInformationPolicy = BucketInformationPolicy.ON_DEMAND

    auth: GcsAuthConfig = Field(default_factory=GcsAuthConfig)
    retry: GcsRetrySettings = Field(default_factory=GcsRetrySettings)
    filesystem: CloudStorageConfig = Field(default_factory=CloudStorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")
