"""Shared utilities for bucketpath."""

from bucketpath.core.utils.logging import StructuredJSONFormatter, configure_logging, get_logger

__all__ = [
    "StructuredJSONFormatter",
    "configure_logging",
    "get_logger",
]
