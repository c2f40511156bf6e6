"""Models for the path abstraction layer."""

from pydantic import BaseModel, ConfigDict, Field


class OpenOptions(BaseModel):
    """Options applied when writing content to a path.

    Attributes:
        content_type: MIME type stored with the object (charset is appended)
        overwrite: Replace an existing object; when False the write fails if
            the object already exists
    """

    content_type: str = Field(default="text/plain", description="MIME type of written content")
    overwrite: bool = Field(default=True, description="Replace an existing object")

    model_config = ConfigDict(extra="forbid", frozen=True)
