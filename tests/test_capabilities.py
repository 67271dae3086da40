"""Tests for signed URL issuance."""

import pytest

from assetbroker.core.exceptions import (
    AssetNotFoundError,
    AssetNotReadyError,
    InvalidInputError,
    SigningError,
)
from assetbroker.models.asset import AssetState
from assetbroker.services.capabilities import CapabilityIssuer, parse_download_ttl

from conftest import FakeObjectStore

DAY = 24 * 60 * 60


@pytest.mark.parametrize("raw", ["0", "-5", "86401", "abc", "1.5", " 5", "5s", "1e3"])
def test_parse_download_ttl_rejects(raw):
    """Test that out-of-range and non-integer TTLs are rejected, not clamped."""
    with pytest.raises(InvalidInputError):
        parse_download_ttl(raw, default_seconds=60, max_seconds=DAY)


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 60), ("", 60), ("1", 1), ("300", 300), ("86400", 86400), ("+30", 30)],
)
def test_parse_download_ttl_accepts(raw, expected):
    """Test the default and the inclusive bounds."""
    assert parse_download_ttl(raw, default_seconds=60, max_seconds=DAY) == expected


def test_parse_download_ttl_messages():
    """Test that non-integer and out-of-range values get distinct messages."""
    with pytest.raises(InvalidInputError, match="must be integer"):
        parse_download_ttl("abc", default_seconds=60, max_seconds=DAY)

    with pytest.raises(InvalidInputError, match="more reasonable timeout"):
        parse_download_ttl("0", default_seconds=60, max_seconds=DAY)


@pytest.mark.asyncio
async def test_issue_upload_uses_fixed_day_ttl():
    """Test that upload URLs are PUT URLs valid for 24 hours."""
    objects = FakeObjectStore()
    issuer = CapabilityIssuer(objects)

    url = await issuer.issue_upload("abc123")

    assert "/abc123?" in url
    assert objects.calls == [("PUT", "abc123", DAY)]


@pytest.mark.asyncio
async def test_issue_download_for_uploaded_asset():
    """Test that a download URL carries the requested TTL."""
    objects = FakeObjectStore()
    issuer = CapabilityIssuer(objects)

    url = await issuer.issue_download("abc123", AssetState.UPLOADED, "300")

    assert "X-Expires=300" in url
    assert objects.calls == [("GET", "abc123", 300)]


@pytest.mark.asyncio
async def test_issue_download_default_ttl():
    """Test that a missing TTL falls back to 60 seconds."""
    objects = FakeObjectStore()
    issuer = CapabilityIssuer(objects)

    await issuer.issue_download("abc123", AssetState.UPLOADED)

    assert objects.calls == [("GET", "abc123", 60)]


@pytest.mark.asyncio
async def test_issue_download_refused_before_upload():
    """Test that reserved and unknown assets get no URL."""
    objects = FakeObjectStore()
    issuer = CapabilityIssuer(objects)

    with pytest.raises(AssetNotReadyError):
        await issuer.issue_download("abc123", AssetState.RESERVED, "300")

    with pytest.raises(AssetNotFoundError):
        await issuer.issue_download("abc123", AssetState.NOT_FOUND)

    assert objects.calls == []


@pytest.mark.asyncio
async def test_issue_download_invalid_ttl_not_signed():
    """Test that an invalid TTL is rejected before signing."""
    objects = FakeObjectStore()
    issuer = CapabilityIssuer(objects)

    with pytest.raises(InvalidInputError):
        await issuer.issue_download("abc123", AssetState.UPLOADED, "86401")

    assert objects.calls == []


@pytest.mark.asyncio
async def test_signing_failure():
    """Test that object store failures become signing errors."""
    issuer = CapabilityIssuer(FakeObjectStore(fail=True))

    with pytest.raises(SigningError):
        await issuer.issue_upload("abc123")
