"""Supabase Storage-backed asset store."""

from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import uuid4

from supabase import Client

from travel_blog.domain.files import StoredFile
from travel_blog.services.photo_pipeline import AssetStore


@dataclass
class SupabaseAssetStore(AssetStore):
    """Stores photos in a public Supabase Storage bucket.

    Objects get a random prefix so two uploads with the same display name
    never collide and every stored file has its own URL.
    """

    client: Client
    bucket: str
    key_factory: Callable[[], str] = field(default=lambda: uuid4().hex)

    def store_file(self, name: str, content: bytes, content_type: str) -> StoredFile:
        """Upload bytes and return the public reference."""
        path = f"{self.key_factory()}_{name}"
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(
            path=path,
            file=content,
            file_options={"content-type": content_type, "upsert": "false"},
        )
        url = bucket.get_public_url(path)
        if not url:
            raise RuntimeError("Failed to resolve stored file URL")
        return StoredFile(name=name, url=url, size=len(content), path=path)
