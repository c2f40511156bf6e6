"""Cloud Storage client construction and blob identifiers."""

from __future__ import annotations

from google.api_core.client_info import ClientInfo
from google.auth.credentials import Credentials
from google.cloud import storage
from pydantic import BaseModel, ConfigDict


class BlobId(BaseModel):
    """Identifies one object: bucket plus object name."""

    bucket: str
    name: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.bucket}/{self.name}"


def gcs_storage_client(
    credentials: Credentials,
    application_name: str,
    project: str | None,
) -> storage.Client:
    """
    Create the Cloud Storage client shared by all paths of a builder.

    Args:
        credentials: Credentials used for every request
        application_name: Sent as the user agent
        project: Project to bill; None lets the client infer it

    Returns:
        Configured storage client
    """
    return storage.Client(
        project=project,
        credentials=credentials,
        client_info=ClientInfo(user_agent=application_name),
    )
