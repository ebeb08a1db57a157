"""Pydantic DTOs (Data Transfer Objects) for the Record feature.

Record bodies accept any JSON value per field: typing, range and length rules
are all checked by the domain so that every violation is reported together.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RecordCreate(BaseModel):
    """Schema for creating a new record.

    Unknown keys (including any owner id) are dropped. Missing fields arrive
    as ``None`` and are reported as ``required`` by the domain.
    """

    model_config = ConfigDict(extra="ignore")

    occurred_at: Any = Field(None, examples=["2026-10-18T08:00:00Z"])
    quality_rating: Any = Field(None, examples=[4])
    notes: Any = Field(None, examples=["after breakfast"])


class RecordUpdate(BaseModel):
    """Schema for a partial update — only fields that are sent are applied."""

    model_config = ConfigDict(extra="ignore")

    occurred_at: Any = None
    quality_rating: Any = None
    notes: Any = None

    def changes(self) -> dict:
        """Fields explicitly present in the request, including explicit nulls."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class RecordResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    owner_id: str
    occurred_at: datetime
    quality_rating: int
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ListParams(BaseModel):
    page: int = 1
    page_size: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    sort_by: str = "occurred_at"
    sort_order: str = "desc"


class PaginationResponse(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class RecordListResponse(BaseModel):
    records: list[RecordResponse]
    pagination: PaginationResponse


class BulkDeleteRequest(BaseModel):
    ids: list[str] = Field(default_factory=list, max_length=500)


class BulkDeleteResponse(BaseModel):
    deleted_count: int


class PurgeResponse(BaseModel):
    owner_id: str
    deleted_count: int
