"""Photo save hooks and background thumbnail generation."""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol
from uuid import UUID

from travel_blog.domain.files import StoredFile
from travel_blog.domain.islands import Island
from travel_blog.services.thumbnails import (
    THUMBNAIL_CONTENT_TYPE,
    ImageDecodeError,
    derive_thumbnail,
    thumb_name,
)
from travel_blog.services.uploads import MAX_IMAGE_SIZE_BYTES, size_in_mb

_logger = logging.getLogger(__name__)


class IslandRecordStore(Protocol):
    """Record operations the pipeline needs to attach thumbnails."""

    def get_island(self, island_id: UUID) -> Island | None:
        """Return an island by id, if present."""

    def set_photo_thumb(
        self, island_id: UUID, thumbnail: StoredFile, expected_photo_url: str
    ) -> Island | None:
        """Set the thumbnail only while the photo URL still matches.

        Returns ``None`` when no row matched.
        """


class AssetStore(Protocol):
    """Interface for persisting files in the asset store."""

    def store_file(self, name: str, content: bytes, content_type: str) -> StoredFile:
        """Store bytes under a display name and return the stored reference."""


class AssetClient(Protocol):
    """Interface for reading stored files back."""

    async def download_bytes(self, url: str) -> bytes:
        """Download the bytes behind a stored file URL."""


class PipelineStage(StrEnum):
    """Stages a thumbnail run moves through."""

    SCHEDULED = "scheduled"
    FETCHING = "fetching"
    DERIVING = "deriving"
    PERSISTING = "persisting"
    ATTACHING = "attaching"
    DONE = "done"


class PhotoTooLargeError(ValueError):
    """Raised when a save would store a photo above the size limit."""


class PhotoPipelineError(Exception):
    """Base error for a failed thumbnail run."""

    stage: PipelineStage = PipelineStage.SCHEDULED


class FetchError(PhotoPipelineError):
    """The original photo could not be downloaded."""

    stage = PipelineStage.FETCHING


class DecodeError(PhotoPipelineError):
    """The original photo could not be turned into a thumbnail."""

    stage = PipelineStage.DERIVING


class AssetPersistError(PhotoPipelineError):
    """The thumbnail could not be stored."""

    stage = PipelineStage.PERSISTING


class RecordReattachError(PhotoPipelineError):
    """The thumbnail could not be attached to its record."""

    stage = PipelineStage.ATTACHING


@dataclass(frozen=True)
class PhotoChange:
    """Photo attribute of a record before and after a save."""

    record_id: UUID | None
    is_update: bool
    previous_photo: StoredFile | None
    new_photo: StoredFile | None

    @classmethod
    def between(cls, previous: Island | None, current: Island) -> "PhotoChange":
        """Diff the photo attribute of two versions of a record."""
        return cls(
            record_id=current.id,
            is_update=previous is not None,
            previous_photo=previous.photo if previous else None,
            new_photo=current.photo,
        )

    @property
    def photo_changed(self) -> bool:
        return _photo_url(self.previous_photo) != _photo_url(self.new_photo)


def should_generate_thumbnail(change: PhotoChange) -> bool:
    """Return true when a completed save needs a new thumbnail."""
    return (
        change.is_update
        and change.record_id is not None
        and change.new_photo is not None
        and change.photo_changed
    )


@dataclass
class PhotoPipeline:
    """Runs the photo checks around record saves.

    ``before_save`` is a synchronous gate that can fail the save.
    ``after_save`` schedules thumbnail generation as a detached task whose
    failures are logged and never reach the caller.
    """

    record_store: IslandRecordStore
    asset_store: AssetStore
    asset_client: AssetClient
    thumb_width: int
    thumb_height: int
    max_image_size_bytes: int = MAX_IMAGE_SIZE_BYTES
    _tasks: set[asyncio.Task[bool]] = field(
        default_factory=set, init=False, repr=False
    )

    def before_save(self, change: PhotoChange) -> None:
        """Reject a save whose new photo exceeds the size limit."""
        photo = change.new_photo
        if photo is None or not change.photo_changed:
            return
        if photo.size > self.max_image_size_bytes:
            raise PhotoTooLargeError(
                f"Photo must be smaller than {size_in_mb(self.max_image_size_bytes)}MB"
            )

    def after_save(self, change: PhotoChange) -> asyncio.Task[bool] | None:
        """Schedule thumbnail generation when the saved photo changed."""
        record_id = change.record_id
        photo = change.new_photo
        if record_id is None or photo is None or not should_generate_thumbnail(change):
            return None
        task = asyncio.get_running_loop().create_task(self.run(record_id, photo))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run(self, record_id: UUID, photo: StoredFile) -> bool:
        """Generate and attach a thumbnail; return whether it succeeded."""
        context = {"record_id": str(record_id), "source_url": photo.url}
        try:
            await self._generate(record_id, photo)
        except PhotoPipelineError as exc:
            _logger.error(
                "Thumbnail generation failed while %s",
                exc.stage,
                exc_info=exc,
                extra={**context, "stage": str(exc.stage)},
            )
            return False
        except Exception:
            _logger.exception(
                "Thumbnail generation failed unexpectedly",
                extra={**context, "stage": "unknown"},
            )
            return False
        return True

    async def wait_idle(self) -> None:
        """Wait until every scheduled run has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def _generate(self, record_id: UUID, photo: StoredFile) -> None:
        try:
            original = await self.asset_client.download_bytes(photo.url)
        except Exception as exc:
            raise FetchError(f"Could not download {photo.url}") from exc

        try:
            thumbnail = await asyncio.to_thread(
                derive_thumbnail, original, self.thumb_width, self.thumb_height
            )
        except ImageDecodeError as exc:
            raise DecodeError(str(exc)) from exc

        try:
            stored = await asyncio.to_thread(
                self.asset_store.store_file,
                thumb_name(photo.name or "photo.jpg"),
                thumbnail,
                THUMBNAIL_CONTENT_TYPE,
            )
        except Exception as exc:
            raise AssetPersistError("Could not store thumbnail") from exc

        await self._attach(record_id, photo, stored)

    async def _attach(
        self, record_id: UUID, photo: StoredFile, thumbnail: StoredFile
    ) -> None:
        try:
            attached = await asyncio.to_thread(
                self.record_store.set_photo_thumb, record_id, thumbnail, photo.url
            )
        except Exception as exc:
            raise RecordReattachError("Could not save record thumbnail") from exc
        if attached is not None:
            return

        try:
            current = await asyncio.to_thread(self.record_store.get_island, record_id)
        except Exception as exc:
            raise RecordReattachError("Could not reload record") from exc
        if current is None:
            raise RecordReattachError("Record no longer exists")
        _logger.info(
            "Dropping thumbnail for superseded photo",
            extra={"record_id": str(record_id), "source_url": photo.url},
        )


def _photo_url(photo: StoredFile | None) -> str | None:
    return photo.url if photo else None
