"""Domain exceptions for the asset broker.

Every failure that leaves the service layer is one of these. Each class
carries the HTTP status it is answered with.
"""


class AssetBrokerError(Exception):
    """Base exception for the asset broker."""

    status_code = 500


class InvalidInputError(AssetBrokerError):
    """Exception raised for a malformed body, status value or timeout."""

    status_code = 400


class AssetNotFoundError(AssetBrokerError):
    """Exception raised when no record exists for an asset id."""

    status_code = 404

    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(f"Asset id '{asset_id}' not found.")


class AssetNotReadyError(AssetBrokerError):
    """Exception raised when an asset is reserved but its upload is not confirmed."""

    status_code = 202

    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(f"Asset id '{asset_id}' found but upload is not complete.")


class ReservationError(AssetBrokerError):
    """Exception raised when no asset id could be claimed.

    Nothing was durably reserved, so the whole call may be retried.
    """

    status_code = 503


class ReservationExhaustedError(ReservationError):
    """Exception raised when every reservation attempt collided."""


class InternalError(AssetBrokerError):
    """Exception raised when a store or signing call fails."""

    status_code = 500


class SigningError(InternalError):
    """Exception raised when a signed URL cannot be produced."""
