"""Storage backend selection."""

from assetbroker.core.config import Settings
from assetbroker.storage.base import ObjectStore, RecordStore


def get_object_store(settings: Settings) -> ObjectStore:
    """Build the object store named by OBJECT_STORE_BACKEND.

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = settings.OBJECT_STORE_BACKEND.lower()

    if backend == "s3":
        from assetbroker.storage.s3 import S3ObjectStore

        return S3ObjectStore(
            bucket=settings.BUCKET_NAME,
            region=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url,
        )
    if backend == "gcs":
        from assetbroker.storage.gcs import GCSObjectStore

        return GCSObjectStore(
            bucket_name=settings.BUCKET_NAME,
            project_id=settings.GCP_PROJECT_ID or None,
            use_iam_signer=settings.GCS_USE_IAM_SIGNER,
        )

    raise ValueError(f"Unknown OBJECT_STORE_BACKEND: {settings.OBJECT_STORE_BACKEND}")


def get_record_store(settings: Settings) -> RecordStore:
    """Build the record store named by RECORD_STORE_BACKEND.

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = settings.RECORD_STORE_BACKEND.lower()

    if backend == "dynamodb":
        from assetbroker.storage.dynamodb import DynamoDBRecordStore

        return DynamoDBRecordStore(
            table_name=settings.TABLE_NAME,
            region=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url,
            connect_timeout=settings.STORE_CONNECT_TIMEOUT_SECONDS,
            read_timeout=settings.STORE_READ_TIMEOUT_SECONDS,
        )
    if backend == "memory":
        from assetbroker.storage.memory import InMemoryRecordStore

        return InMemoryRecordStore()

    raise ValueError(f"Unknown RECORD_STORE_BACKEND: {settings.RECORD_STORE_BACKEND}")
