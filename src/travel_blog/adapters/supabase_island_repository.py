"""Supabase-backed island repository."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from travel_blog.domain.files import StoredFile
from travel_blog.domain.islands import WRITABLE_FIELDS, GeoPoint, Island
from travel_blog.services.islands import IslandRepository

_COLUMNS = (
    "id, name, short_description, description, order, site, latitude, longitude, "
    "photo, photo_thumb, created_at, updated_at"
)
_SEARCH_FIELDS = ("name", "short_description", "description")


@dataclass
class SupabaseIslandRepository(IslandRepository):
    """Supabase implementation for island persistence."""

    client: Client
    table_name: str = "islands"

    def list_islands(self) -> list[Island]:
        """Return all islands ordered by display order."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .order("order", desc=False)
            .execute()
        )
        return [_parse_island(row) for row in response.data or []]

    def get_island(self, island_id: UUID) -> Island | None:
        """Return an island by id, if present."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("id", str(island_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_island(response.data[0])

    def search_islands(self, term: str, limit: int) -> list[Island]:
        """Return islands whose name or descriptions contain the term."""
        pattern = _quote_filter_value(f"*{_escape_like(term)}*")
        filters = ",".join(f"{column}.ilike.{pattern}" for column in _SEARCH_FIELDS)
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .or_(filters)
            .order("order", desc=False)
            .limit(limit)
            .execute()
        )
        return [_parse_island(row) for row in response.data or []]

    def insert_island(self, island: Island) -> Island:
        """Create an island row and return it."""
        response = (
            self.client.table(self.table_name).insert(_to_row(island)).execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create island")
        return _parse_island(response.data[0])

    def update_island(self, island_id: UUID, changes: Mapping[str, object]) -> Island:
        """Write the changed fields of an island row and return it."""
        payload = {
            **_to_columns(changes),
            "updated_at": datetime.now(tz=UTC).isoformat(),
        }
        response = (
            self.client.table(self.table_name)
            .update(payload)
            .eq("id", str(island_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update island")
        return _parse_island(response.data[0])

    def set_photo_thumb(
        self, island_id: UUID, thumbnail: StoredFile, expected_photo_url: str
    ) -> Island | None:
        """Set the thumbnail column if the photo URL still matches.

        The URL filter is part of the update itself, so a photo replaced in
        the meantime leaves the row untouched.
        """
        response = (
            self.client.table(self.table_name)
            .update(
                {
                    "photo_thumb": thumbnail.to_row(),
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", str(island_id))
            .eq("photo->>url", expected_photo_url)
            .execute()
        )
        if not response.data:
            return None
        return _parse_island(response.data[0])

    def delete_island(self, island_id: UUID) -> None:
        """Delete an island row."""
        self.client.table(self.table_name).delete().eq("id", str(island_id)).execute()

    def ping(self) -> None:
        """Select a single id to confirm the table is reachable."""
        self.client.table(self.table_name).select("id").limit(1).execute()


def _to_row(island: Island) -> dict[str, object]:
    return _to_columns({name: getattr(island, name) for name in WRITABLE_FIELDS})


def _to_columns(changes: Mapping[str, object]) -> dict[str, object]:
    columns: dict[str, object] = {}
    for name, value in changes.items():
        if name == "location":
            location = value if isinstance(value, GeoPoint) else None
            columns["latitude"] = location.latitude if location else None
            columns["longitude"] = location.longitude if location else None
        elif name in ("photo", "photo_thumb"):
            columns[name] = value.to_row() if isinstance(value, StoredFile) else None
        else:
            columns[name] = value
    return columns


def _parse_island(row: dict[str, object]) -> Island:
    latitude = row.get("latitude")
    longitude = row.get("longitude")
    location = (
        GeoPoint(latitude=float(latitude), longitude=float(longitude))
        if latitude is not None and longitude is not None
        else None
    )
    return Island(
        id=UUID(str(row["id"])),
        name=str(row.get("name") or ""),
        short_description=str(row.get("short_description") or ""),
        description=str(row.get("description") or ""),
        order=int(row.get("order") or 0),
        site=row.get("site"),
        location=location,
        photo=StoredFile.from_row(row.get("photo")),
        photo_thumb=StoredFile.from_row(row.get("photo_thumb")),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _quote_filter_value(value: str) -> str:
    """Quote a value so commas and parentheses survive PostgREST filter parsing."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
