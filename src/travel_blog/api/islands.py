"""Island listing, search and photo upload endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from travel_blog.api.auth import require_admin
from travel_blog.api.models import (
    IslandCreate,
    IslandDetail,
    IslandSummary,
    IslandUpdate,
    SearchHit,
)
from travel_blog.domain.islands import Island  # noqa: TC001
from travel_blog.domain.uploads import ErrorKind, Rejected, UploadCandidate
from travel_blog.services.uploads import admit_upload, safe_filename

if TYPE_CHECKING:
    from travel_blog.containers import AppContainer

router = APIRouter(prefix="/api", tags=["islands"])

_logger = logging.getLogger(__name__)

_REJECTION_STATUS = {
    ErrorKind.FILE_TOO_LARGE: status.HTTP_413_CONTENT_TOO_LARGE,
}


@router.get("/islands")
async def list_islands(request: Request) -> dict[str, object]:
    """Return all islands for the list view."""
    container: AppContainer = request.app.state.container
    islands = container.island_service.list_islands()
    return {
        "success": True,
        "data": [
            IslandSummary.from_island(island).model_dump(mode="json")
            for island in islands
        ],
    }


@router.get("/islands/{island_id}")
async def get_island(island_id: UUID, request: Request) -> dict[str, object]:
    """Return the detail view of an island."""
    container: AppContainer = request.app.state.container
    island = container.island_service.get_island(island_id)
    return {"success": True, "data": _detail(island)}


@router.get("/search")
async def search_islands(request: Request, q: str | None = None) -> dict[str, object]:
    """Search islands by name and descriptions."""
    container: AppContainer = request.app.state.container
    try:
        islands = container.island_service.search(q)
    except ValueError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    payload: dict[str, object] = {
        "success": True,
        "count": len(islands),
        "data": [
            SearchHit(id=island.id, name=island.name).model_dump(mode="json")
            for island in islands
        ],
    }
    if not islands:
        payload["message"] = "No islands found"
    return payload


@router.post(
    "/islands",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_island(payload: IslandCreate, request: Request) -> dict[str, object]:
    """Create an island."""
    container: AppContainer = request.app.state.container
    island = await container.island_service.create_island(payload.model_dump())
    return {"success": True, "data": _detail(island)}


@router.put("/islands/{island_id}", dependencies=[Depends(require_admin)])
async def update_island(
    island_id: UUID, payload: IslandUpdate, request: Request
) -> dict[str, object]:
    """Update editable island fields."""
    container: AppContainer = request.app.state.container
    try:
        island = await container.island_service.update_island(
            island_id, payload.model_dump(exclude_unset=True)
        )
    except ValueError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    return {"success": True, "data": _detail(island)}


@router.delete(
    "/islands/{island_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def delete_island(island_id: UUID, request: Request) -> None:
    """Delete an island."""
    container: AppContainer = request.app.state.container
    container.island_service.delete_island(island_id)


@router.post("/islands/{island_id}/photo", dependencies=[Depends(require_admin)])
async def upload_photo(
    island_id: UUID, request: Request, photo: UploadFile = File(...)
) -> dict[str, object]:
    """Validate and store a new island photo.

    The thumbnail is generated in the background after the save; the
    response does not wait for it.
    """
    container: AppContainer = request.app.state.container
    max_size_bytes = container.settings.max_image_size_bytes
    content = await photo.read(max_size_bytes + 1)
    if not content:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Photo file is required")

    name = safe_filename(photo.filename)
    candidate = UploadCandidate(
        declared_name=name,
        declared_mime_type=photo.content_type or "",
        size_bytes=max(photo.size or 0, len(content)),
        content=content,
    )
    outcome = admit_upload(candidate, max_size_bytes=max_size_bytes)
    if isinstance(outcome, Rejected):
        _logger.info(
            "Rejected photo upload",
            extra={"island_id": str(island_id), "reason": str(outcome.reason)},
        )
        raise HTTPException(
            _REJECTION_STATUS.get(outcome.reason, status.HTTP_400_BAD_REQUEST),
            {"reason": str(outcome.reason), "message": outcome.detail},
        )

    container.island_service.get_island(island_id)
    stored = await asyncio.to_thread(
        container.asset_store.store_file,
        name,
        content,
        candidate.declared_mime_type.strip().lower(),
    )
    await container.island_service.set_photo(island_id, stored)
    return {"success": True, "photo_url": stored.url}


def _detail(island: Island) -> dict[str, object]:
    return IslandDetail.from_island(island).model_dump(mode="json")
