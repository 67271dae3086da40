"""Tests for the asset API routes."""

import pytest
from fastapi.testclient import TestClient

from assetbroker.main import create_app

from conftest import FailingRecordStore, FakeObjectStore, make_services


@pytest.fixture
def scripted_client(record_store, object_store):
    """Client whose reservations hand out fixed ids."""
    ids = iter(["abc123", "def456", "ghi789"])
    services = make_services(record_store, object_store, id_factory=lambda: next(ids))
    return TestClient(create_app(services))


def test_end_to_end_scenario(scripted_client, object_store):
    """Test initiate, poll, confirm and download in sequence."""
    response = scripted_client.post("/asset")
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == "abc123"
    assert data["upload_url"].startswith("https://test-bucket.example.com/abc123?")

    response = scripted_client.get("/asset/abc123")
    assert response.status_code == 202
    assert "not complete" in response.json()["detail"]

    response = scripted_client.put("/asset/abc123", json={"Status": "uploaded"})
    assert response.status_code == 200
    assert response.content == b""

    response = scripted_client.get("/asset/abc123", params={"timeout": "300"})
    assert response.status_code == 200
    body = response.json()
    assert list(body) == ["Download_url"]
    assert body["Download_url"].startswith("https://test-bucket.example.com/abc123?")
    assert object_store.calls[-1] == ("GET", "abc123", 300)

    response = scripted_client.get("/asset/doesnotexist")
    assert response.status_code == 404
    assert "doesnotexist" in response.json()["detail"]


def test_initiate_returns_fresh_ids(client, record_store):
    """Test that each initiate call reserves a distinct id."""
    first = client.post("/asset").json()["id"]
    second = client.post("/asset").json()["id"]

    assert first != second
    assert record_store.get(first)["status"] == "reserved"
    assert record_store.get(second)["status"] == "reserved"


def test_initiate_upload_url_valid_for_a_day(client, object_store):
    """Test that the upload URL is signed for PUT with a 24h validity."""
    asset_id = client.post("/asset").json()["id"]

    assert object_store.calls == [("PUT", asset_id, 86400)]


def test_initiate_reservation_exhausted(record_store, object_store):
    """Test that exhausted reservations answer 503."""
    record_store.put_if_absent({"id": "taken"})
    services = make_services(record_store, object_store, id_factory=lambda: "taken")
    client = TestClient(create_app(services))

    response = client.post("/asset")

    assert response.status_code == 503
    assert object_store.calls == []


def test_initiate_store_unavailable(object_store):
    """Test that a failing store during reservation answers 503."""
    client = TestClient(create_app(make_services(FailingRecordStore(), object_store)))

    response = client.post("/asset")

    assert response.status_code == 503
    assert "connection reset" not in response.text


def test_initiate_signing_failure(record_store):
    """Test that a signing failure answers 500 with a generic message."""
    client = TestClient(create_app(make_services(record_store, FakeObjectStore(fail=True))))

    response = client.post("/asset")

    assert response.status_code == 500
    assert response.json()["detail"] == "Unexpected internal error."


def test_download_default_timeout(client, record_store, object_store):
    """Test that downloads default to a 60 second URL."""
    record_store.put_if_absent({"id": "done", "status": "uploaded"})

    response = client.get("/asset/done")

    assert response.status_code == 200
    assert object_store.calls == [("GET", "done", 60)]


@pytest.mark.parametrize("timeout", ["0", "-5", "86401", "abc"])
def test_download_bad_timeout(client, record_store, timeout):
    """Test that invalid timeouts answer 400."""
    record_store.put_if_absent({"id": "done", "status": "uploaded"})

    response = client.get("/asset/done", params={"timeout": timeout})

    assert response.status_code == 400
    assert "timeout" in response.json()["detail"].lower()


@pytest.mark.parametrize("timeout", ["1", "86400"])
def test_download_timeout_bounds(client, record_store, timeout):
    """Test that both inclusive bounds are accepted."""
    record_store.put_if_absent({"id": "done", "status": "uploaded"})

    response = client.get("/asset/done", params={"timeout": timeout})

    assert response.status_code == 200


def test_download_unknown_id_checked_before_timeout(client):
    """Test that an unknown id answers 404 even with a bad timeout."""
    response = client.get("/asset/missing", params={"timeout": "abc"})

    assert response.status_code == 404


def test_download_store_failure(object_store):
    """Test that a failing lookup answers 500."""
    client = TestClient(create_app(make_services(FailingRecordStore(), object_store)))

    response = client.get("/asset/abc")

    assert response.status_code == 500
    assert response.json()["detail"] == "Unexpected internal error."


@pytest.mark.parametrize(
    "body",
    [
        b'{"Status":"other"}',
        b'{"Status":""}',
        b"{}",
        b"not json",
        b"",
        b"[1, 2]",
        b'{"Status": 5}',
    ],
)
def test_mark_uploaded_bad_body(client, record_store, body):
    """Test that malformed bodies and wrong status values answer 400."""
    record_store.put_if_absent({"id": "x", "status": "reserved"})

    response = client.put("/asset/x", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert record_store.get("x")["status"] == "reserved"


def test_mark_uploaded_wrong_status_message(client, record_store):
    """Test that the error names the expected value."""
    record_store.put_if_absent({"id": "x", "status": "reserved"})

    response = client.put("/asset/x", json={"Status": "other"})

    assert response.json()["detail"] == "Invalid value for key Status. Expecting 'uploaded', got: 'other'"


@pytest.mark.parametrize("key", ["Status", "status", "STATUS", "sTaTuS"])
def test_mark_uploaded_key_case_insensitive(client, record_store, key):
    """Test that the status key is matched regardless of case."""
    record_store.put_if_absent({"id": "x", "status": "reserved"})

    response = client.put("/asset/x", content=f'{{"{key}":"uploaded"}}'.encode())

    assert response.status_code == 200
    assert record_store.get("x")["status"] == "uploaded"


def test_mark_uploaded_unknown_id(client, record_store):
    """Test that confirming an unreserved id answers 404 and creates nothing."""
    response = client.put("/asset/nope", json={"Status": "uploaded"})

    assert response.status_code == 404
    assert record_store.get("nope") is None


def test_mark_uploaded_store_failure(object_store):
    """Test that a failing store answers 500."""
    client = TestClient(create_app(make_services(FailingRecordStore(), object_store)))

    response = client.put("/asset/abc", json={"Status": "uploaded"})

    assert response.status_code == 500


def test_mark_uploaded_twice(client, record_store):
    """Test that a repeated confirmation still answers 200."""
    record_store.put_if_absent({"id": "x", "status": "reserved"})

    assert client.put("/asset/x", json={"Status": "uploaded"}).status_code == 200
    assert client.put("/asset/x", json={"Status": "uploaded"}).status_code == 200


def test_initiate_wrong_method(client):
    """Test that /asset only allows POST."""
    response = client.get("/asset")

    assert response.status_code == 405
    assert response.headers["allow"] == "POST"


@pytest.mark.parametrize("method", ["POST", "DELETE", "PATCH"])
def test_manage_asset_wrong_method(client, method):
    """Test that /asset/{id} only allows GET and PUT."""
    response = client.request(method, "/asset/abc")

    assert response.status_code == 405
    allowed = {m.strip() for m in response.headers["allow"].split(",")}
    assert allowed == {"GET", "PUT"}
