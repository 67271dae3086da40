"""Configuration management for the asset broker."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    ENV: str = "local"
    SERVICE_NAME: str = "asset-broker"
    SERVICE_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Storage Configuration
    OBJECT_STORE_BACKEND: str = "s3"  # "s3" or "gcs"
    RECORD_STORE_BACKEND: str = "dynamodb"  # "dynamodb" or "memory"
    BUCKET_NAME: str = "1brown2green"
    TABLE_NAME: str = "assets"

    # Cloud clients
    AWS_REGION: str = ""
    AWS_ENDPOINT_URL: str = ""  # e.g. http://localhost:4566 for localstack
    GCP_PROJECT_ID: str = ""
    GCS_USE_IAM_SIGNER: bool = False  # sign via IAM signBlob (no key file)
    STORE_CONNECT_TIMEOUT_SECONDS: float = 5.0
    STORE_READ_TIMEOUT_SECONDS: float = 10.0

    # Signed URL validity
    UPLOAD_URL_TTL_SECONDS: int = 24 * 60 * 60
    DOWNLOAD_URL_DEFAULT_TTL_SECONDS: int = 60
    DOWNLOAD_URL_MAX_TTL_SECONDS: int = 24 * 60 * 60

    # Identifier reservation
    RESERVATION_ID_BYTES: int = 12
    RESERVATION_MAX_RETRIES: int = 10  # retries after the first attempt
    RESERVATION_BACKOFF_INITIAL_SECONDS: float = 0.05
    RESERVATION_BACKOFF_MAX_SECONDS: float = 1.0

    @property
    def aws_region(self) -> str | None:
        """Region for boto3 clients, None lets boto3 resolve it."""
        return self.AWS_REGION or None

    @property
    def aws_endpoint_url(self) -> str | None:
        """Endpoint override for boto3 clients."""
        return self.AWS_ENDPOINT_URL or None


# Singleton settings instance
settings = Settings()
