"""Request and response models for the island API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from travel_blog.domain.files import StoredFile
from travel_blog.domain.islands import Island


class Location(BaseModel):
    """Geographic coordinates."""

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class IslandCreate(BaseModel):
    """Payload for creating an island."""

    name: str = Field(min_length=1)
    short_description: str = Field(min_length=1)
    description: str = Field(min_length=1)
    order: int
    site: str | None = None
    location: Location | None = None


class IslandUpdate(BaseModel):
    """Partial update of editable island fields."""

    name: str | None = Field(default=None, min_length=1)
    short_description: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    order: int | None = None
    site: str | None = None
    location: Location | None = None


class FileView(BaseModel):
    """Public view of a stored file."""

    name: str
    url: str
    size: int

    @classmethod
    def from_stored(cls, stored: StoredFile | None) -> "FileView | None":
        if stored is None:
            return None
        return cls(name=stored.name, url=stored.url, size=stored.size)


class IslandSummary(BaseModel):
    """List view of an island."""

    id: UUID
    name: str
    short_description: str
    order: int
    photo_thumb: FileView | None = None

    @classmethod
    def from_island(cls, island: Island) -> "IslandSummary":
        return cls(
            id=island.id,
            name=island.name,
            short_description=island.short_description,
            order=island.order,
            photo_thumb=FileView.from_stored(island.photo_thumb),
        )


class IslandDetail(IslandSummary):
    """Detail view of an island."""

    description: str
    site: str | None = None
    location: Location | None = None
    photo: FileView | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_island(cls, island: Island) -> "IslandDetail":
        return cls(
            id=island.id,
            name=island.name,
            short_description=island.short_description,
            description=island.description,
            order=island.order,
            site=island.site,
            location=(
                Location(
                    latitude=island.location.latitude,
                    longitude=island.location.longitude,
                )
                if island.location
                else None
            ),
            photo=FileView.from_stored(island.photo),
            photo_thumb=FileView.from_stored(island.photo_thumb),
            created_at=island.created_at,
            updated_at=island.updated_at,
        )


class SearchHit(BaseModel):
    """Minimal island reference for search dropdowns."""

    id: UUID
    name: str
