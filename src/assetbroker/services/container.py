"""Service wiring."""

from dataclasses import dataclass
from typing import Optional

from assetbroker.core.config import Settings
from assetbroker.services.capabilities import CapabilityIssuer
from assetbroker.services.lifecycle import AssetLifecycle
from assetbroker.services.reservation import IdentifierReservation
from assetbroker.storage.base import ObjectStore, RecordStore
from assetbroker.storage.factory import get_object_store, get_record_store


@dataclass(frozen=True)
class AssetServices:
    """Handles the request layer works with, built once per process."""

    reservation: IdentifierReservation
    lifecycle: AssetLifecycle
    capabilities: CapabilityIssuer


def build_services(
    settings: Settings,
    records: Optional[RecordStore] = None,
    objects: Optional[ObjectStore] = None,
) -> AssetServices:
    """Build the asset services from settings.

    Args:
        settings: Application settings
        records: Record store override, built from settings when None
        objects: Object store override, built from settings when None
    """
    records = records or get_record_store(settings)
    objects = objects or get_object_store(settings)

    return AssetServices(
        reservation=IdentifierReservation(
            records,
            id_bytes=settings.RESERVATION_ID_BYTES,
            max_retries=settings.RESERVATION_MAX_RETRIES,
            backoff_initial_seconds=settings.RESERVATION_BACKOFF_INITIAL_SECONDS,
            backoff_max_seconds=settings.RESERVATION_BACKOFF_MAX_SECONDS,
        ),
        lifecycle=AssetLifecycle(records),
        capabilities=CapabilityIssuer(
            objects,
            upload_ttl_seconds=settings.UPLOAD_URL_TTL_SECONDS,
            default_download_ttl_seconds=settings.DOWNLOAD_URL_DEFAULT_TTL_SECONDS,
            max_download_ttl_seconds=settings.DOWNLOAD_URL_MAX_TTL_SECONDS,
        ),
    )
