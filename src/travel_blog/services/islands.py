"""Island listing business logic."""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from travel_blog.domain.files import StoredFile
from travel_blog.domain.islands import (
    EDITABLE_FIELDS,
    WRITABLE_FIELDS,
    GeoPoint,
    Island,
)
from travel_blog.services.photo_pipeline import PhotoChange, PhotoPipeline


class IslandNotFoundError(LookupError):
    """Raised when an island id does not exist."""


class IslandRepository(Protocol):
    """Persistence interface for island listings."""

    def list_islands(self) -> list[Island]:
        """Return all islands ordered by their display order."""

    def get_island(self, island_id: UUID) -> Island | None:
        """Return an island by id, if present."""

    def search_islands(self, term: str, limit: int) -> list[Island]:
        """Return islands whose text fields contain the term."""

    def insert_island(self, island: Island) -> Island:
        """Persist a new island and return it with its id."""

    def update_island(self, island_id: UUID, changes: Mapping[str, object]) -> Island:
        """Write only the given fields of an island and return the stored version."""

    def set_photo_thumb(
        self, island_id: UUID, thumbnail: StoredFile, expected_photo_url: str
    ) -> Island | None:
        """Set the thumbnail only while the photo URL still matches."""

    def delete_island(self, island_id: UUID) -> None:
        """Delete an island."""

    def ping(self) -> None:
        """Run a minimal query against the store."""


@dataclass
class IslandService:
    """Application service for reading and editing islands.

    Every write goes through the photo hooks so direct record edits are
    covered as well as photo uploads. Updates send only the fields that
    changed, so a concurrent thumbnail attach is never overwritten.
    """

    repository: IslandRepository
    photo_pipeline: PhotoPipeline

    def list_islands(self) -> list[Island]:
        """Return all islands for the list view."""
        return self.repository.list_islands()

    def get_island(self, island_id: UUID) -> Island:
        """Return an island or raise if it does not exist."""
        island = self.repository.get_island(island_id)
        if island is None:
            raise IslandNotFoundError(f"Island {island_id} not found")
        return island

    def search(self, query: str | None, limit: int = 20) -> list[Island]:
        """Search islands by name and descriptions."""
        term = (query or "").strip()
        if not term:
            raise ValueError("Search query is required")
        return self.repository.search_islands(term, limit)

    def ping(self) -> None:
        self.repository.ping()

    async def create_island(self, fields: dict[str, object]) -> Island:
        """Create an island from editable fields."""
        island = Island(
            id=None,
            name=str(fields.get("name", "")),
            short_description=str(fields.get("short_description", "")),
            description=str(fields.get("description", "")),
            order=int(fields.get("order", 0)),
            site=_optional_str(fields.get("site")),
            location=_parse_location(fields.get("location")),
        )
        return await self.save(island)

    async def update_island(
        self, island_id: UUID, changes: dict[str, object]
    ) -> Island:
        """Apply editable field changes to an island."""
        updates = {key: value for key, value in changes.items() if key in EDITABLE_FIELDS}
        if not updates:
            raise ValueError("No valid fields provided for update")
        if "location" in updates:
            updates["location"] = _parse_location(updates["location"])
        island = self.get_island(island_id)
        return await self._write(island, updates)

    async def set_photo(self, island_id: UUID, photo: StoredFile) -> Island:
        """Replace an island's photo and clear its stale thumbnail."""
        island = self.get_island(island_id)
        return await self._write(island, {"photo": photo, "photo_thumb": None})

    def delete_island(self, island_id: UUID) -> None:
        """Delete an island."""
        self.get_island(island_id)
        self.repository.delete_island(island_id)

    async def save(self, island: Island) -> Island:
        """Persist a whole island, writing only the fields that differ."""
        previous = (
            self.repository.get_island(island.id) if island.id is not None else None
        )
        if previous is None:
            change = PhotoChange.between(None, island)
            self.photo_pipeline.before_save(change)
            saved = self.repository.insert_island(island)
            self.photo_pipeline.after_save(replace(change, record_id=saved.id))
            return saved
        changes = {
            name: getattr(island, name)
            for name in WRITABLE_FIELDS
            if getattr(island, name) != getattr(previous, name)
        }
        if not changes:
            return previous
        return await self._write(previous, changes)

    async def _write(self, current: Island, changes: dict[str, object]) -> Island:
        change = PhotoChange.between(current, replace(current, **changes))
        self.photo_pipeline.before_save(change)
        saved = self.repository.update_island(current.id, changes)
        self.photo_pipeline.after_save(replace(change, record_id=saved.id))
        return saved


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_location(value: object) -> GeoPoint | None:
    if value is None or isinstance(value, GeoPoint):
        return value
    if isinstance(value, dict):
        try:
            return GeoPoint(
                latitude=float(value["latitude"]),
                longitude=float(value["longitude"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError("Location must have latitude and longitude") from exc
    raise ValueError("Location must have latitude and longitude")
