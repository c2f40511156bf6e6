"""Bucket access policies and request handlers."""

from bucketpath.core.gcs.bucket.policies import OnDemandRequesterPays, to_request_handler
from bucketpath.core.gcs.bucket.request_handler import GcsRequestHandler, StorageRequestHandler

__all__ = [
    "GcsRequestHandler",
    "OnDemandRequesterPays",
    "StorageRequestHandler",
    "to_request_handler",
]
