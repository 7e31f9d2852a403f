"""Tests for HTTP-based adapters."""

import asyncio

import httpx
import pytest

from member_audit.adapters.storage_asset_client import HttpxStorageAssetClient

BASE_URL = "https://example.supabase.co"


def _client(handler) -> HttpxStorageAssetClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxStorageAssetClient(
        base_url=BASE_URL,
        bucket="uploads",
        service_key="service-key",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_storage_client_public_url() -> None:
    client = HttpxStorageAssetClient.create(
        supabase_url=f"{BASE_URL}/", bucket="uploads", service_key="service-key"
    )

    assert client.public_url("profile-photos/me 1.jpg") == (
        f"{BASE_URL}/storage/v1/object/public/uploads/profile-photos/me%201.jpg"
    )
    assert client.public_url("https://cdn.test/a.jpg") == "https://cdn.test/a.jpg"
    asyncio.run(client.close())


def test_storage_client_downloads_with_service_key() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/storage/v1/object/uploads/profile-photos/a.jpg"
        assert request.headers["Authorization"] == "Bearer service-key"
        assert request.headers["apikey"] == "service-key"
        return httpx.Response(200, content=b"jpeg-bytes")

    client = _client(handler)

    assert asyncio.run(client.download_asset("/profile-photos/a.jpg")) == b"jpeg-bytes"


def test_storage_client_absolute_url_gets_no_credentials() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.host == "cdn.test"
        assert "Authorization" not in request.headers
        assert "apikey" not in request.headers
        return httpx.Response(200, content=b"external")

    client = _client(handler)

    assert asyncio.run(client.download_asset("https://cdn.test/a.jpg")) == b"external"


def test_storage_client_raises_on_missing_object() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": "not_found"})

    client = _client(handler)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.download_asset("gone.jpg"))
