"""Shared test fixtures."""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from io import BytesIO
from uuid import UUID, uuid4

import httpx
import pytest
from PIL import Image

from travel_blog.config import Settings
from travel_blog.containers import AppContainer
from travel_blog.domain.files import StoredFile
from travel_blog.domain.islands import Island
from travel_blog.services.islands import IslandRepository, IslandService
from travel_blog.services.photo_pipeline import (
    AssetClient,
    AssetStore,
    PhotoPipeline,
)

ADMIN_TOKEN = "admin-token"


def make_image_bytes(
    width: int = 64, height: int = 48, image_format: str = "JPEG"
) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), color=(20, 120, 200)).save(
        buffer, format=image_format
    )
    return buffer.getvalue()


def make_island(**overrides: object) -> Island:
    values: dict[str, object] = {
        "id": None,
        "name": "Hvar",
        "short_description": "Sunny island",
        "description": "Lavender fields and old stone towns.",
        "order": 1,
    }
    values.update(overrides)
    return Island(**values)  # type: ignore[arg-type]


@dataclass
class InMemoryIslandRepository(IslandRepository):
    """In-memory island repository for tests."""

    islands: dict[UUID, Island] = field(default_factory=dict)
    updates: list[Island] = field(default_factory=list)
    unavailable: bool = False

    def list_islands(self) -> list[Island]:
        return sorted(self.islands.values(), key=lambda island: island.order)

    def get_island(self, island_id: UUID) -> Island | None:
        return self.islands.get(island_id)

    def search_islands(self, term: str, limit: int) -> list[Island]:
        needle = term.lower()
        return [
            island
            for island in self.list_islands()
            if needle in island.name.lower()
            or needle in island.short_description.lower()
            or needle in island.description.lower()
        ][:limit]

    def insert_island(self, island: Island) -> Island:
        now = datetime.now(tz=UTC)
        created = replace(island, id=uuid4(), created_at=now, updated_at=now)
        self.islands[created.id] = created
        return created

    def update_island(self, island_id: UUID, changes: Mapping[str, object]) -> Island:
        current = self.islands.get(island_id)
        if current is None:
            raise RuntimeError("Failed to update island")
        updated = replace(current, **changes, updated_at=datetime.now(tz=UTC))
        self.islands[island_id] = updated
        self.updates.append(updated)
        return updated

    def set_photo_thumb(
        self, island_id: UUID, thumbnail: StoredFile, expected_photo_url: str
    ) -> Island | None:
        current = self.islands.get(island_id)
        if current is None or current.photo is None:
            return None
        if current.photo.url != expected_photo_url:
            return None
        updated = replace(current, photo_thumb=thumbnail)
        self.islands[island_id] = updated
        return updated

    def delete_island(self, island_id: UUID) -> None:
        self.islands.pop(island_id, None)

    def ping(self) -> None:
        if self.unavailable:
            raise RuntimeError("Database unavailable")


@dataclass
class InMemoryAssetStore(AssetStore):
    """In-memory asset store keyed by URL."""

    files: dict[str, bytes] = field(default_factory=dict)
    fail: bool = False

    def store_file(self, name: str, content: bytes, content_type: str) -> StoredFile:
        if self.fail:
            raise RuntimeError("Storage unavailable")
        path = f"{uuid4().hex}_{name}"
        url = f"https://assets.test/{path}"
        self.files[url] = content
        return StoredFile(name=name, url=url, size=len(content), path=path)


@dataclass
class InMemoryAssetClient(AssetClient):
    """Asset client that reads from an in-memory store."""

    store: InMemoryAssetStore
    downloads: list[str] = field(default_factory=list)
    unreachable: bool = False

    async def download_bytes(self, url: str) -> bytes:
        self.downloads.append(url)
        if self.unreachable or url not in self.store.files:
            raise httpx.ConnectError(f"Cannot reach {url}")
        return self.store.files[url]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        admin_token=ADMIN_TOKEN,
        thumb_width=300,
        thumb_height=300,
    )


@pytest.fixture
def island_repository() -> InMemoryIslandRepository:
    return InMemoryIslandRepository()


@pytest.fixture
def asset_store() -> InMemoryAssetStore:
    return InMemoryAssetStore()


@pytest.fixture
def asset_client(asset_store: InMemoryAssetStore) -> InMemoryAssetClient:
    return InMemoryAssetClient(store=asset_store)


@pytest.fixture
def photo_pipeline(
    settings: Settings,
    island_repository: InMemoryIslandRepository,
    asset_store: InMemoryAssetStore,
    asset_client: InMemoryAssetClient,
) -> PhotoPipeline:
    return PhotoPipeline(
        record_store=island_repository,
        asset_store=asset_store,
        asset_client=asset_client,
        thumb_width=settings.thumb_width,
        thumb_height=settings.thumb_height,
        max_image_size_bytes=settings.max_image_size_bytes,
    )


@pytest.fixture
def island_service(
    island_repository: InMemoryIslandRepository, photo_pipeline: PhotoPipeline
) -> IslandService:
    return IslandService(repository=island_repository, photo_pipeline=photo_pipeline)


@pytest.fixture
def container(
    settings: Settings,
    island_service: IslandService,
    photo_pipeline: PhotoPipeline,
    asset_store: InMemoryAssetStore,
) -> AppContainer:
    async def close_resources() -> None:
        await photo_pipeline.wait_idle()

    return AppContainer(
        settings=settings,
        island_service=island_service,
        photo_pipeline=photo_pipeline,
        asset_store=asset_store,
        close_resources=close_resources,
    )


@pytest.fixture
def app_logs(
    caplog: pytest.LogCaptureFixture,
) -> Iterator[pytest.LogCaptureFixture]:
    """Capture the application logger even when it does not propagate."""
    logger = logging.getLogger("travel_blog")
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.INFO, logger="travel_blog")
    yield caplog
    logger.removeHandler(caplog.handler)
