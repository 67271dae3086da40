"""Pytest configuration and shared fixtures."""

from typing import Any, Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from assetbroker.main import create_app
from assetbroker.services.capabilities import CapabilityIssuer
from assetbroker.services.container import AssetServices
from assetbroker.services.lifecycle import AssetLifecycle
from assetbroker.services.reservation import IdentifierReservation
from assetbroker.storage.base import ObjectStore, RecordStore
from assetbroker.storage.exceptions import ObjectStoreError, RecordStoreError
from assetbroker.storage.memory import InMemoryRecordStore


class FakeObjectStore(ObjectStore):
    """Object store returning deterministic URLs that embed key and TTL."""

    def __init__(self, bucket: str = "test-bucket", fail: bool = False):
        self.bucket = bucket
        self.fail = fail
        self.calls: List[Tuple[str, str, int]] = []

    def presign_put(self, key: str, ttl_seconds: int) -> str:
        return self._sign("PUT", key, ttl_seconds)

    def presign_get(self, key: str, ttl_seconds: int) -> str:
        return self._sign("GET", key, ttl_seconds)

    def _sign(self, method: str, key: str, ttl_seconds: int) -> str:
        self.calls.append((method, key, ttl_seconds))
        if self.fail:
            raise ObjectStoreError("signing unavailable")
        return f"https://{self.bucket}.example.com/{key}?X-Method={method}&X-Expires={ttl_seconds}"

    def get_backend_name(self) -> str:
        return "fake"


class FailingRecordStore(RecordStore):
    """Record store whose every call fails like an unreachable backend."""

    def __init__(self):
        self.calls = 0

    def _fail(self):
        self.calls += 1
        raise RecordStoreError("connection reset")

    def get(self, key: str, consistent: bool = True) -> Optional[Dict[str, Any]]:
        self._fail()

    def put_if_absent(self, item: Dict[str, Any]) -> None:
        self._fail()

    def update_if_exists(self, key: str, attributes: Dict[str, Any]) -> None:
        self._fail()

    def get_backend_name(self) -> str:
        return "failing"


def make_services(
    records: RecordStore,
    objects: ObjectStore,
    id_factory=None,
) -> AssetServices:
    """Wire services against the given stores with backoff disabled."""
    return AssetServices(
        reservation=IdentifierReservation(
            records,
            backoff_initial_seconds=0,
            backoff_max_seconds=0,
            id_factory=id_factory,
        ),
        lifecycle=AssetLifecycle(records),
        capabilities=CapabilityIssuer(objects),
    )


@pytest.fixture
def record_store():
    """Create a fresh in-memory record store for each test."""
    return InMemoryRecordStore()


@pytest.fixture
def object_store():
    """Create a fake object store."""
    return FakeObjectStore()


@pytest.fixture
def services(record_store, object_store):
    """Services wired against the in-memory and fake stores."""
    return make_services(record_store, object_store)


@pytest.fixture
def client(services):
    """Create test client."""
    return TestClient(create_app(services))
