"""Signed URL issuance policy."""

import asyncio
import logging
import re
from typing import Optional

from assetbroker.core.exceptions import (
    AssetNotFoundError,
    AssetNotReadyError,
    InvalidInputError,
    SigningError,
)
from assetbroker.models.asset import AssetState
from assetbroker.storage.base import ObjectStore
from assetbroker.storage.exceptions import ObjectStoreError

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def parse_download_ttl(raw: Optional[str], default_seconds: int, max_seconds: int) -> int:
    """Resolve a requested download TTL.

    Args:
        raw: Requested TTL in seconds as sent by the client, or None
        default_seconds: TTL used when nothing was requested
        max_seconds: Largest accepted TTL, inclusive

    Returns:
        TTL in seconds

    Raises:
        InvalidInputError: If the value is not an integer or is outside [1, max_seconds]
    """
    if raw is None or raw == "":
        return default_seconds

    if not _INTEGER_RE.fullmatch(raw):
        raise InvalidInputError("Invalid argument for timeout, must be integer.")

    ttl = int(raw)
    if ttl < 1 or ttl > max_seconds:
        raise InvalidInputError("Please use a more reasonable timeout.")
    return ttl


class CapabilityIssuer:
    """Decides which signed URLs a client may get and for how long."""

    def __init__(
        self,
        objects: ObjectStore,
        upload_ttl_seconds: int = 24 * 60 * 60,
        default_download_ttl_seconds: int = 60,
        max_download_ttl_seconds: int = 24 * 60 * 60,
    ):
        self.objects = objects
        self.upload_ttl_seconds = upload_ttl_seconds
        self.default_download_ttl_seconds = default_download_ttl_seconds
        self.max_download_ttl_seconds = max_download_ttl_seconds

    async def issue_upload(self, asset_id: str) -> str:
        """Return a signed PUT URL for a freshly reserved asset."""
        return await self._sign(self.objects.presign_put, asset_id, self.upload_ttl_seconds)

    async def issue_download(self, asset_id: str, state: AssetState, requested_ttl: Optional[str] = None) -> str:
        """Return a signed GET URL if the asset has been uploaded.

        Raises:
            AssetNotFoundError: If the asset does not exist
            AssetNotReadyError: If the upload is not confirmed yet
            InvalidInputError: If the requested TTL is invalid
            SigningError: If the URL cannot be signed
        """
        if state == AssetState.NOT_FOUND:
            raise AssetNotFoundError(asset_id)
        if state != AssetState.UPLOADED:
            raise AssetNotReadyError(asset_id)

        ttl = parse_download_ttl(
            requested_ttl,
            default_seconds=self.default_download_ttl_seconds,
            max_seconds=self.max_download_ttl_seconds,
        )
        return await self._sign(self.objects.presign_get, asset_id, ttl)

    async def _sign(self, presign, asset_id: str, ttl_seconds: int) -> str:
        try:
            return await asyncio.to_thread(presign, asset_id, ttl_seconds)
        except ObjectStoreError as e:
            logger.error(f"Failed to sign URL: {e}", exc_info=True)
            raise SigningError(f"Failed to sign URL for asset '{asset_id}'") from e
