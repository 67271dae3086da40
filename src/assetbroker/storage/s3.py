"""AWS S3 object store."""

import logging
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from assetbroker.storage.base import ObjectStore
from assetbroker.storage.exceptions import ObjectStoreError

logger = logging.getLogger(__name__)


class S3ObjectStore(ObjectStore):
    """S3 object store producing SigV4 presigned URLs.

    Uses boto3 credential resolution (env, profile, instance role).
    """

    def __init__(
        self,
        bucket: str,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ):
        bucket = (bucket or "").strip()
        if not bucket:
            raise ValueError("BUCKET_NAME not configured")

        self.bucket = bucket
        cfg = Config(region_name=region, signature_version="s3v4")
        kwargs: Dict[str, Any] = {"config": cfg}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self.s3 = boto3.client("s3", **kwargs)

    def presign_put(self, key: str, ttl_seconds: int) -> str:
        return self._presign("put_object", key, ttl_seconds)

    def presign_get(self, key: str, ttl_seconds: int) -> str:
        return self._presign("get_object", key, ttl_seconds)

    def _presign(self, client_method: str, key: str, ttl_seconds: int) -> str:
        try:
            return self.s3.generate_presigned_url(
                ClientMethod=client_method,
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=int(ttl_seconds),
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Failed to presign S3 URL",
                extra={"bucket": self.bucket, "key": key, "method": client_method, "error": str(e)},
            )
            raise ObjectStoreError(f"Failed to sign {client_method} URL for '{key}': {e}") from e

    def get_backend_name(self) -> str:
        return "s3"
