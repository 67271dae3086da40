"""Abstract storage interfaces."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ObjectStore(ABC):
    """Abstract base class for object stores able to sign URLs."""

    @abstractmethod
    def presign_put(self, key: str, ttl_seconds: int) -> str:
        """Generate a signed URL allowing a single PUT of an object.

        Args:
            key: Object key
            ttl_seconds: Validity of the URL in seconds

        Returns:
            Signed URL

        Raises:
            ObjectStoreError: If the URL cannot be signed
        """
        pass

    @abstractmethod
    def presign_get(self, key: str, ttl_seconds: int) -> str:
        """Generate a signed URL allowing a GET of an object.

        Args:
            key: Object key
            ttl_seconds: Validity of the URL in seconds

        Returns:
            Signed URL

        Raises:
            ObjectStoreError: If the URL cannot be signed
        """
        pass

    @abstractmethod
    def get_backend_name(self) -> str:
        """Return backend identifier."""
        pass


class RecordStore(ABC):
    """Abstract base class for key-value record stores with conditional writes.

    Records are dicts keyed by their ``id`` attribute.
    """

    @abstractmethod
    def get(self, key: str, consistent: bool = True) -> Optional[Dict[str, Any]]:
        """Read a record by key.

        Args:
            key: Record id
            consistent: Require a strongly consistent read

        Returns:
            The record, or None if absent

        Raises:
            RecordStoreError: If the read fails
        """
        pass

    @abstractmethod
    def put_if_absent(self, item: Dict[str, Any]) -> None:
        """Insert a record only if no record with the same id exists.

        Raises:
            ConditionFailedError: If the id is already taken
            RecordStoreError: If the write fails for any other reason
        """
        pass

    @abstractmethod
    def update_if_exists(self, key: str, attributes: Dict[str, Any]) -> None:
        """Set attributes on a record only if the record exists.

        Raises:
            ConditionFailedError: If no record exists for the key
            RecordStoreError: If the write fails for any other reason
            ValueError: If attributes is empty
        """
        pass

    @abstractmethod
    def get_backend_name(self) -> str:
        """Return backend identifier."""
        pass
