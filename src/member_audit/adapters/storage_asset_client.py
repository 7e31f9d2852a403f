"""Supabase Storage access for photo binaries."""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote

import httpx


class AssetClient(Protocol):
    """Interface for resolving and downloading stored binaries."""

    def public_url(self, asset_ref: str) -> str:
        """Return a displayable URL for an asset reference."""

    async def download_asset(self, asset_ref: str) -> bytes:
        """Download the bytes behind an asset reference."""


@dataclass
class HttpxStorageAssetClient(AssetClient):
    """Storage client using httpx against the Supabase Storage REST API."""

    base_url: str
    bucket: str
    service_key: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, supabase_url: str, bucket: str, service_key: str
    ) -> "HttpxStorageAssetClient":
        """Create a storage client with a managed httpx session."""
        return cls(
            base_url=supabase_url.rstrip("/"),
            bucket=bucket,
            service_key=service_key,
            http_client=httpx.AsyncClient(),
        )

    def public_url(self, asset_ref: str) -> str:
        """Return the public object URL, leaving absolute URLs untouched."""
        if _is_absolute(asset_ref):
            return asset_ref
        path = _path(asset_ref)
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{path}"

    async def download_asset(self, asset_ref: str) -> bytes:
        """Download an object with the service key."""
        if _is_absolute(asset_ref):
            response = await self.http_client.get(asset_ref, timeout=20)
        else:
            path = _path(asset_ref)
            response = await self.http_client.get(
                f"{self.base_url}/storage/v1/object/{self.bucket}/{path}",
                headers={
                    "Authorization": f"Bearer {self.service_key}",
                    "apikey": self.service_key,
                },
                timeout=20,
            )
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _is_absolute(asset_ref: str) -> bool:
    return asset_ref.startswith(("http://", "https://"))


def _path(asset_ref: str) -> str:
    return quote(asset_ref.lstrip("/"), safe="/")
