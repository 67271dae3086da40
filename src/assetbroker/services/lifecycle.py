"""Asset lifecycle state machine: reserved -> uploaded."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from assetbroker.core.exceptions import AssetNotFoundError, InternalError
from assetbroker.models.asset import AssetState, AssetStatus
from assetbroker.storage.base import RecordStore
from assetbroker.storage.exceptions import ConditionFailedError, RecordStoreError

logger = logging.getLogger(__name__)


def classify_record(record: Optional[Dict[str, Any]]) -> AssetState:
    """Map a stored record to its lifecycle state.

    Only an explicit ``status == "uploaded"`` counts as uploaded; a record
    without a status attribute reads as reserved.
    """
    if record is None:
        return AssetState.NOT_FOUND
    if record.get("status") == AssetStatus.UPLOADED.value:
        return AssetState.UPLOADED
    return AssetState.RESERVED


class AssetLifecycle:
    """Reads and advances asset lifecycle state in the record store."""

    def __init__(self, records: RecordStore):
        self.records = records

    async def mark_uploaded(self, asset_id: str) -> None:
        """Move an asset to the uploaded state.

        The write is conditioned on the record existing, not on its prior
        status, so confirming an already uploaded asset succeeds again.

        Raises:
            AssetNotFoundError: If the id was never reserved
            InternalError: If the store write fails
        """
        attributes = {
            "status": AssetStatus.UPLOADED.value,
            "uploaded_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            await asyncio.to_thread(self.records.update_if_exists, asset_id, attributes)
        except ConditionFailedError as e:
            raise AssetNotFoundError(asset_id) from e
        except RecordStoreError as e:
            logger.error(f"Failed to mark asset uploaded: {e}", exc_info=True)
            raise InternalError(f"Failed to mark asset '{asset_id}' uploaded") from e

        logger.info(f"Asset marked uploaded: {asset_id}")

    async def current_state(self, asset_id: str) -> AssetState:
        """Return the lifecycle state of an asset using a strongly consistent read.

        Raises:
            InternalError: If the store read fails
        """
        try:
            record = await asyncio.to_thread(self.records.get, asset_id, True)
        except RecordStoreError as e:
            logger.error(f"Failed to read asset record: {e}", exc_info=True)
            raise InternalError(f"Failed to read asset '{asset_id}'") from e

        return classify_record(record)
