"""Asset identifier reservation.

Ids are independent random draws from a large sparse namespace. The
conditional insert is what makes an id ours: a collision just means
drawing again, any other store failure aborts.
"""

import asyncio
import logging
import secrets
from datetime import datetime, timezone
from typing import Callable, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from assetbroker.core.exceptions import ReservationError, ReservationExhaustedError
from assetbroker.models.asset import AssetStatus
from assetbroker.storage.base import RecordStore
from assetbroker.storage.exceptions import ConditionFailedError, RecordStoreError

logger = logging.getLogger(__name__)

MIN_ID_BYTES = 12


def generate_asset_id(num_bytes: int = MIN_ID_BYTES) -> str:
    """Return a URL-safe, unpadded base64 token of ``num_bytes`` random bytes."""
    return secrets.token_urlsafe(num_bytes)


class IdentifierReservation:
    """Claims fresh asset ids in the record store."""

    def __init__(
        self,
        records: RecordStore,
        id_bytes: int = MIN_ID_BYTES,
        max_retries: int = 10,
        backoff_initial_seconds: float = 0.05,
        backoff_max_seconds: float = 1.0,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        """Initialize the reservation component.

        Args:
            records: Record store providing conditional inserts
            id_bytes: Random bytes per id, at least 12
            max_retries: Collision retries after the first attempt
            backoff_initial_seconds: Multiplier of the jittered exponential wait
            backoff_max_seconds: Upper bound of a single wait
            id_factory: Id generator override, used by tests
        """
        if id_bytes < MIN_ID_BYTES:
            raise ValueError(f"id_bytes must be at least {MIN_ID_BYTES}, got {id_bytes}")
        if max_retries < 0:
            raise ValueError("max_retries must not be negative")

        self.records = records
        self.id_bytes = id_bytes
        self.max_retries = max_retries
        self.max_attempts = max_retries + 1
        self.backoff_initial_seconds = backoff_initial_seconds
        self.backoff_max_seconds = backoff_max_seconds
        self._id_factory = id_factory or (lambda: generate_asset_id(self.id_bytes))

    async def reserve(self) -> str:
        """Claim a new asset id.

        Returns:
            An id for which a reserved record now exists

        Raises:
            ReservationExhaustedError: If every attempt collided
            ReservationError: If the store failed for another reason
        """
        asset_id = ""
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_random_exponential(
                    multiplier=self.backoff_initial_seconds,
                    max=self.backoff_max_seconds,
                ),
                retry=retry_if_exception_type(ConditionFailedError),
                before_sleep=self._log_collision,
            ):
                with attempt:
                    asset_id = self._id_factory()
                    await asyncio.to_thread(self.records.put_if_absent, self._new_record(asset_id))
        except RetryError as e:
            last_error = e.last_attempt.exception()
            logger.error(
                f"Asset id reservation exhausted after {self.max_attempts} attempts: {last_error}",
                extra={"attempts": self.max_attempts},
            )
            raise ReservationExhaustedError(
                f"Could not reserve a unique asset id: {last_error}"
            ) from last_error
        except RecordStoreError as e:
            logger.error(f"Asset id reservation failed: {e}", exc_info=True)
            raise ReservationError(f"Could not reserve an asset id: {e}") from e

        logger.info(f"Reserved asset id {asset_id}", extra={"reserved_id": asset_id})
        return asset_id

    @staticmethod
    def _new_record(asset_id: str) -> dict:
        return {
            "id": asset_id,
            "status": AssetStatus.RESERVED.value,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }

    @staticmethod
    def _log_collision(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"Asset id collision on attempt {retry_state.attempt_number}: {error}",
            extra={"attempt": retry_state.attempt_number},
        )
