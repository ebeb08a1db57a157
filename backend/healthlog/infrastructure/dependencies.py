"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from healthlog.application.services import RecordService, StatisticsService
from healthlog.config import get_settings
from healthlog.domain.stats_engine import StatsConfig, build_stats_config
from healthlog.infrastructure.database.session import get_db_session
from healthlog.infrastructure.database.repositories import SQLAlchemyRecordRepository


@lru_cache
def get_stats_config() -> StatsConfig:
    """Validated statistics config; raises ConfigurationError on bad settings."""
    settings = get_settings()
    return build_stats_config(settings.stats_time_zone, settings.streak_horizon_days)


def get_current_owner_id(request: Request) -> str:
    """Owner id of the authenticated caller, taken from the proxy's identity header.

    Request bodies and query strings are never consulted.
    """
    settings = get_settings()
    owner_id = request.headers.get(settings.auth_user_header, "").strip()
    if not owner_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return owner_id


def require_admin(
    request: Request,
    caller_id: str = Depends(get_current_owner_id),
) -> str:
    """Admin-only gate; returns the admin's own id."""
    settings = get_settings()
    role = request.headers.get(settings.auth_role_header, "").strip().lower()
    if role != settings.admin_role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required",
        )
    return caller_id


async def get_record_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[RecordService, None]:
    """Provides a RecordService instance with its repository wired up."""
    settings = get_settings()
    repository = SQLAlchemyRecordRepository(session)
    yield RecordService(
        repository,
        time_zone=get_stats_config().time_zone,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )


async def get_statistics_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[StatisticsService, None]:
    """Provides a StatisticsService bound to the configured zone and horizon."""
    repository = SQLAlchemyRecordRepository(session)
    yield StatisticsService(repository, get_stats_config())
