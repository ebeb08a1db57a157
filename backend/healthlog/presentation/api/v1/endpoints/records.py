"""Record CRUD endpoints — always scoped to the authenticated owner."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from healthlog.application.schemas.record import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    ListParams,
    PaginationResponse,
    RecordCreate,
    RecordListResponse,
    RecordResponse,
    RecordUpdate,
)
from healthlog.application.services import RecordService
from healthlog.domain.exceptions import EntityNotFoundError
from healthlog.infrastructure.dependencies import get_current_owner_id, get_record_service

router = APIRouter(prefix="/records", tags=["Records"])

_NOT_FOUND = "Record not found"


@router.get("", response_model=RecordListResponse)
async def list_records(
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
    start_date: date | None = Query(None, description="First local day (inclusive)"),
    end_date: date | None = Query(None, description="Last local day (inclusive)"),
    sort_by: str = Query("occurred_at"),
    sort_order: str = Query("desc"),
    owner_id: str = Depends(get_current_owner_id),
    service: RecordService = Depends(get_record_service),
) -> RecordListResponse:
    """Retrieve a paginated list of the caller's records."""
    params = ListParams(
        page=page,
        page_size=page_size,
        start_date=start_date,
        end_date=end_date,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    result = await service.list_records(owner_id, params)
    return RecordListResponse(
        records=[
            RecordResponse.model_validate(r, from_attributes=True) for r in result.items
        ],
        pagination=PaginationResponse(
            page=result.page,
            page_size=result.page_size,
            total=result.total,
            total_pages=result.total_pages,
            has_next=result.has_next,
            has_prev=result.has_prev,
        ),
    )


@router.post("", response_model=RecordResponse, status_code=status.HTTP_201_CREATED)
async def create_record(
    data: RecordCreate,
    owner_id: str = Depends(get_current_owner_id),
    service: RecordService = Depends(get_record_service),
) -> RecordResponse:
    """Create a new record owned by the caller."""
    record = await service.create_record(owner_id, data)
    return RecordResponse.model_validate(record, from_attributes=True)


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
async def delete_records(
    data: BulkDeleteRequest,
    owner_id: str = Depends(get_current_owner_id),
    service: RecordService = Depends(get_record_service),
) -> BulkDeleteResponse:
    """Delete several of the caller's records; ids the caller does not own are skipped."""
    deleted = await service.delete_records(owner_id, data.ids)
    return BulkDeleteResponse(deleted_count=deleted)


@router.get("/{record_id}", response_model=RecordResponse)
async def get_record(
    record_id: str,
    owner_id: str = Depends(get_current_owner_id),
    service: RecordService = Depends(get_record_service),
) -> RecordResponse:
    """Retrieve a single record by ID."""
    try:
        record = await service.get_record(owner_id, record_id)
    except EntityNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    return RecordResponse.model_validate(record, from_attributes=True)


@router.patch("/{record_id}", response_model=RecordResponse)
async def update_record(
    record_id: str,
    data: RecordUpdate,
    owner_id: str = Depends(get_current_owner_id),
    service: RecordService = Depends(get_record_service),
) -> RecordResponse:
    """Partially update one of the caller's records."""
    try:
        record = await service.update_record(owner_id, record_id, data)
    except EntityNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    return RecordResponse.model_validate(record, from_attributes=True)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    record_id: str,
    owner_id: str = Depends(get_current_owner_id),
    service: RecordService = Depends(get_record_service),
) -> None:
    """Delete one of the caller's records by ID."""
    try:
        await service.delete_record(owner_id, record_id)
    except EntityNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
