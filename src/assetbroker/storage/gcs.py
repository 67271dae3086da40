"""Google Cloud Storage object store."""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from google.cloud import storage
from google.auth.exceptions import GoogleAuthError
from google.cloud.exceptions import GoogleCloudError
from google.oauth2 import service_account

from assetbroker.storage.base import ObjectStore
from assetbroker.storage.exceptions import ObjectStoreError

logger = logging.getLogger(__name__)


class GCSObjectStore(ObjectStore):
    """Google Cloud Storage object store producing V4 signed URLs."""

    def __init__(self, bucket_name: str, project_id: Optional[str] = None, use_iam_signer: bool = False):
        """Initialize the store.

        Args:
            bucket_name: Name of the GCS bucket
            project_id: GCP project ID. If None, uses default credentials.
            use_iam_signer: Sign through the IAM signBlob API instead of a
                private key (Cloud Run / GCE / GKE service accounts)
        """
        self.bucket_name = bucket_name
        self.project_id = project_id
        self.use_iam_signer = use_iam_signer
        self._client: Optional[storage.Client] = None
        self._bucket: Optional[storage.Bucket] = None

    def _get_bucket(self) -> storage.Bucket:
        """Lazy-load and cache GCS bucket."""
        if self._bucket is None:
            if not self.bucket_name:
                raise ValueError("BUCKET_NAME not configured")

            self._client = storage.Client(project=self.project_id)
            self._bucket = self._client.bucket(self.bucket_name)

        return self._bucket

    def _iam_signing_kwargs(self) -> Dict[str, Any]:
        """Build signing credentials backed by the IAM signBlob API.

        The service account must have roles/iam.serviceAccountTokenCreator
        on itself.
        """
        from google.auth import compute_engine, iam
        from google.auth.transport import requests as auth_requests

        credentials = compute_engine.Credentials()
        auth_request = auth_requests.Request()
        credentials.refresh(auth_request)
        service_account_email = credentials.service_account_email

        signer = iam.Signer(
            request=auth_request,
            credentials=credentials,
            service_account_email=service_account_email,
        )
        # token_uri is required by the constructor, signing goes through the signer
        signing_creds = service_account.Credentials(
            signer=signer,
            service_account_email=service_account_email,
            token_uri="https://oauth2.googleapis.com/token",
        )
        return {"credentials": signing_creds, "service_account_email": service_account_email}

    def presign_put(self, key: str, ttl_seconds: int) -> str:
        return self._sign("PUT", key, ttl_seconds)

    def presign_get(self, key: str, ttl_seconds: int) -> str:
        return self._sign("GET", key, ttl_seconds)

    def _sign(self, method: str, key: str, ttl_seconds: int) -> str:
        try:
            blob = self._get_bucket().blob(key)
            extra = self._iam_signing_kwargs() if self.use_iam_signer else {}
            return blob.generate_signed_url(
                version="v4",
                expiration=timedelta(seconds=ttl_seconds),
                method=method,
                **extra,
            )
        except (GoogleCloudError, GoogleAuthError, AttributeError, ValueError) as e:
            # AttributeError/ValueError: credentials without a private key cannot sign
            logger.error(
                "Failed to generate signed URL",
                extra={"bucket": self.bucket_name, "key": key, "method": method, "error": str(e)},
            )
            raise ObjectStoreError(f"Failed to sign {method} URL for '{key}': {e}") from e

    def get_backend_name(self) -> str:
        return "gcs"
