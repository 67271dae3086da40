"""In-process record store for local development and tests."""

import copy
import threading
from typing import Any, Dict, Optional

from assetbroker.storage.base import RecordStore
from assetbroker.storage.exceptions import ConditionFailedError


class InMemoryRecordStore(RecordStore):
    """In-memory store for asset records.

    Conditional writes are serialised under a lock so they are atomic
    with respect to each other, like a single-key store write.
    """

    def __init__(self):
        self._records: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str, consistent: bool = True) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._records.get(key)
            return copy.deepcopy(record) if record is not None else None

    def put_if_absent(self, item: Dict[str, Any]) -> None:
        key = item["id"]
        with self._lock:
            if key in self._records:
                raise ConditionFailedError(f"Record '{key}' already exists")
            self._records[key] = copy.deepcopy(item)

    def update_if_exists(self, key: str, attributes: Dict[str, Any]) -> None:
        if not attributes:
            raise ValueError("update_if_exists needs at least one attribute")
        with self._lock:
            if key not in self._records:
                raise ConditionFailedError(f"Record '{key}' does not exist")
            self._records[key].update(copy.deepcopy(attributes))

    def get_backend_name(self) -> str:
        return "memory"

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
