"""Exceptions raised by storage adapters."""


class StorageError(Exception):
    """Base exception for storage adapters."""
    pass


class ConditionFailedError(StorageError):
    """Exception raised when a conditional write's precondition does not hold."""
    pass


class RecordStoreError(StorageError):
    """Exception raised when a record store call fails for any other reason."""
    pass


class ObjectStoreError(StorageError):
    """Exception raised when an object store call fails."""
    pass
