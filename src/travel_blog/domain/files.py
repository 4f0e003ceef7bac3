"""Domain models for files committed to the asset store."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StoredFile:
    """A file persisted in the asset store.

    ``url`` identifies the stored bytes; two references with the same URL point
    at the same content.
    """

    name: str
    url: str
    size: int
    path: str | None = None

    def to_row(self) -> dict[str, object]:
        """Serialize for a JSON column."""
        return {
            "name": self.name,
            "url": self.url,
            "size": self.size,
            "path": self.path,
        }

    @classmethod
    def from_row(cls, row: dict[str, object] | None) -> "StoredFile | None":
        """Build a stored file from a JSON column value, if present."""
        if not row:
            return None
        return cls(
            name=str(row.get("name") or ""),
            url=str(row["url"]),
            size=int(row.get("size") or 0),
            path=str(row["path"]) if row.get("path") else None,
        )
