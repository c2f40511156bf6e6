"""Bucket information policies.

Turn a ``BucketInformationPolicy`` into the requester-pays strategy and the
request handler used by every path of a builder.
"""

from __future__ import annotations

import logging
import threading

from google.api_core.retry import Retry
from google.cloud import storage

from bucketpath.core.config.models import BucketInformationPolicy
from bucketpath.core.gcs.bucket.request_handler import StorageRequestHandler

logger = logging.getLogger(__name__)


def _never(bucket: str) -> bool:
    return False


def _always(bucket: str) -> bool:
    return True


class OnDemandRequesterPays:
    """
    Requester-pays strategy that reads bucket billing metadata.

    Metadata is fetched the first time a bucket is asked about and
    remembered for the lifetime of the strategy. Lookup failures propagate
    and are not remembered.
    """

    def __init__(
        self,
        storage_client: storage.Client,
        project_id: str | None,
        retry: Retry | None = None,
    ) -> None:
        self.storage_client = storage_client
        self.project_id = project_id
        self._retry_kwargs = {"retry": retry} if retry is not None else {}
        self._known: dict[str, bool] = {}
        self._lock = threading.Lock()

    def __call__(self, bucket: str) -> bool:
        with self._lock:
            if bucket in self._known:
                return self._known[bucket]

        # Billing the lookup itself to our project works for both kinds of bucket
        gcs_bucket = self.storage_client.bucket(bucket, user_project=self.project_id)
        gcs_bucket.reload(**self._retry_kwargs)
        requester_pays = bool(gcs_bucket.requester_pays)
        logger.debug("Bucket %s requester pays: %s", bucket, requester_pays)

        with self._lock:
            return self._known.setdefault(bucket, requester_pays)


def to_request_handler(
    policy: BucketInformationPolicy,
    storage_client: storage.Client,
    project_id: str | None,
    retry: Retry | None = None,
) -> StorageRequestHandler:
    """
    Build the request handler for a policy.

    Args:
        policy: How requester pays is decided
        storage_client: Client used for all requests
        project_id: Project billed for requester-pays buckets
        retry: Retry policy for requests (client default if None)

    Returns:
        Request handler shared by all paths of one builder
    """
    match policy:
        case BucketInformationPolicy.DISABLED:
            requester_pays = _never
        case BucketInformationPolicy.EXPECT:
            requester_pays = _always
        case BucketInformationPolicy.ON_DEMAND:
            requester_pays = OnDemandRequesterPays(storage_client, project_id, retry)
        case _:
            raise ValueError(f"Unknown bucket information policy: {policy}")

    return StorageRequestHandler(storage_client, project_id, requester_pays, retry)
