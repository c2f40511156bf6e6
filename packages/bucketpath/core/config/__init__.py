"""Configuration management for bucketpath."""

from bucketpath.core.config.loader import (
    configure_logging,
    detect_format,
    load_config,
    load_gcs_config,
)
from bucketpath.core.config.models import (
    BucketInformationPolicy,
    CloudStorageConfig,
    GcsAuthConfig,
    GcsConfig,
    GcsRetrySettings,
    LoggingConfig,
    PathBuilderOptions,
)

__all__ = [
    # Loaders
    "configure_logging",
    "detect_format",
    "load_config",
    "load_gcs_config",
    # Models
    "BucketInformationPolicy",
    "CloudStorageConfig",
    "GcsAuthConfig",
    "GcsConfig",
    "GcsRetrySettings",
    "LoggingConfig",
    "PathBuilderOptions",
]
