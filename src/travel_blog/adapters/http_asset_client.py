"""HTTP client for reading stored assets back."""

from dataclasses import dataclass

import httpx

from travel_blog.services.photo_pipeline import AssetClient


@dataclass
class HttpxAssetClient(AssetClient):
    """Asset client using httpx."""

    http_client: httpx.AsyncClient
    timeout_seconds: float = 10.0

    @classmethod
    def create(cls, timeout_seconds: float = 10.0) -> "HttpxAssetClient":
        """Create an asset client with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(follow_redirects=True),
            timeout_seconds=timeout_seconds,
        )

    async def download_bytes(self, url: str) -> bytes:
        """Download the bytes stored at a public URL."""
        response = await self.http_client.get(url, timeout=self.timeout_seconds)
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
