"""FastAPI application factory."""

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from travel_blog.api.islands import router as islands_router
from travel_blog.app_logging import configure_logging
from travel_blog.config import parse_allowed_origins
from travel_blog.containers import AppContainer
from travel_blog.services.islands import IslandNotFoundError
from travel_blog.services.photo_pipeline import PhotoTooLargeError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        try:
            await app.state.container.close_resources()
        except Exception:
            logger.exception("Failed to close application resources")

    app = FastAPI(title="Travel Blog API", lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_allowed_origins(container.settings.cors_allowed_origins),
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["Content-Type", "Authorization", "X-Admin-Token"],
        max_age=86400,
    )

    app.include_router(islands_router)

    @app.exception_handler(IslandNotFoundError)
    async def island_not_found(
        _request: Request, exc: IslandNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "Island not found"},
        )

    @app.exception_handler(PhotoTooLargeError)
    async def photo_too_large(_request: Request, exc: PhotoTooLargeError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health(request: Request) -> JSONResponse:
        """Report service health, probing the record store."""
        app_container: AppContainer = request.app.state.container
        started = time.perf_counter()
        database: dict[str, object] = {"status": "ok"}
        try:
            await asyncio.to_thread(app_container.island_service.ping)
        except Exception as exc:
            logger.exception("Database health check failed")
            database = {"status": "error", "message": str(exc)}
        database["response_time_ms"] = round((time.perf_counter() - started) * 1000, 1)

        healthy = database["status"] == "ok"
        return JSONResponse(
            status_code=(
                status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE
            ),
            content={
                "status": "ok" if healthy else "error",
                "environment": app_container.settings.environment,
                "checks": {"database": database},
            },
        )

    return app
