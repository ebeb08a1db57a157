"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from healthlog.config import get_settings
from healthlog.domain.exceptions import StorageError, ValidationError
from healthlog.infrastructure.database import Base, engine
from healthlog.infrastructure.dependencies import get_stats_config
from healthlog.infrastructure.logging.log_config import setup_logging
from healthlog.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — validate stats config, then create tables."""
    setup_logging()

    # Fails startup with ConfigurationError on a bad zone or horizon.
    config = get_stats_config()
    logger.info(
        "Statistics configured: time_zone=%s, streak_horizon=%d days",
        config.time_zone.key,
        config.streak_horizon_days,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    await engine.dispose()


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Return a 422 listing every broken rule."""
    logger.debug("Validation failed on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.to_dict()},
    )


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Generic 503 — the cause was already logged by the repository."""
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage is temporarily unavailable"},
    )


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    application = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(ValidationError, validation_error_handler)
    application.add_exception_handler(StorageError, storage_error_handler)

    # Mount API routes
    application.include_router(api_router)
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "healthlog.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
