"""Admin endpoints — operate on one named owner's records at a time."""

import logging

from fastapi import APIRouter, Depends

from healthlog.application.schemas.record import PurgeResponse
from healthlog.application.services import RecordService
from healthlog.infrastructure.dependencies import get_record_service, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.delete("/owners/{owner_id}/records", response_model=PurgeResponse)
async def purge_owner_records(
    owner_id: str,
    admin_id: str = Depends(require_admin),
    service: RecordService = Depends(get_record_service),
) -> PurgeResponse:
    """Delete every record belonging to ``owner_id`` (e.g. on account removal)."""
    logger.info("Admin %s requested purge of owner %s", admin_id, owner_id)
    deleted = await service.purge_owner_records(owner_id)
    return PurgeResponse(owner_id=owner_id, deleted_count=deleted)
