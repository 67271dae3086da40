"""Asset data models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AssetStatus(str, Enum):
    """Status attribute persisted on an asset record."""

    RESERVED = "reserved"  # Id claimed, awaiting upload confirmation
    UPLOADED = "uploaded"  # Client confirmed the upload


class AssetState(str, Enum):
    """Observed lifecycle state of an asset id."""

    NOT_FOUND = "not_found"
    RESERVED = "reserved"
    UPLOADED = "uploaded"


class MarkUploadedRequest(BaseModel):
    """Request body for confirming an upload.

    Keys are matched case-insensitively, so ``Status``, ``status`` and
    ``STATUS`` all name the same field. The last spelling in the body wins.
    """

    status: str = Field("", description="Must be 'uploaded'")

    @model_validator(mode="before")
    @classmethod
    def lowercase_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {str(key).lower(): value for key, value in data.items()}
        return data


class InitiateAssetResponse(BaseModel):
    """Response model for asset initiation."""

    upload_url: str
    id: str


class DownloadURLResponse(BaseModel):
    """Response model for a download URL request."""

    model_config = ConfigDict(populate_by_name=True)

    download_url: str = Field(..., alias="Download_url")
