"""Domain models for island listings."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from travel_blog.domain.files import StoredFile

EDITABLE_FIELDS = (
    "name",
    "short_description",
    "description",
    "order",
    "site",
    "location",
)


@dataclass(frozen=True)
class GeoPoint:
    """Geographic coordinates of an island."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class Island:
    """Represents an island listing stored in the record store."""

    id: UUID | None
    name: str
    short_description: str
    description: str
    order: int
    site: str | None = None
    location: GeoPoint | None = None
    photo: StoredFile | None = None
    photo_thumb: StoredFile | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

# Columns a write may touch; ``id`` and timestamps are managed by the store.
WRITABLE_FIELDS = (*EDITABLE_FIELDS, "photo", "photo_thumb")
