"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from travel_blog.adapters.http_asset_client import HttpxAssetClient
from travel_blog.adapters.supabase_asset_store import SupabaseAssetStore
from travel_blog.adapters.supabase_island_repository import SupabaseIslandRepository
from travel_blog.config import Settings
from travel_blog.services.islands import IslandService
from travel_blog.services.photo_pipeline import AssetStore, PhotoPipeline


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    island_service: IslandService
    photo_pipeline: PhotoPipeline
    asset_store: AssetStore
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    island_repository = SupabaseIslandRepository(
        supabase_client, table_name=resolved_settings.islands_table
    )
    asset_store = SupabaseAssetStore(
        supabase_client, bucket=resolved_settings.photo_bucket
    )
    asset_client = HttpxAssetClient.create(
        timeout_seconds=resolved_settings.asset_fetch_timeout_seconds
    )
    photo_pipeline = PhotoPipeline(
        record_store=island_repository,
        asset_store=asset_store,
        asset_client=asset_client,
        thumb_width=resolved_settings.thumb_width,
        thumb_height=resolved_settings.thumb_height,
        max_image_size_bytes=resolved_settings.max_image_size_bytes,
    )
    island_service = IslandService(
        repository=island_repository,
        photo_pipeline=photo_pipeline,
    )

    async def close_resources() -> None:
        await photo_pipeline.wait_idle()
        await asset_client.close()

    return AppContainer(
        settings=resolved_settings,
        island_service=island_service,
        photo_pipeline=photo_pipeline,
        asset_store=asset_store,
        close_resources=close_resources,
    )
