"""Application service (use case) enforcing per-owner access to records.

Every public method takes the authenticated owner id and works through an
``OwnerScopedStore`` bound to it. A record that belongs to someone else is
reported exactly like a record that does not exist.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from healthlog.application.interfaces import SORT_FIELDS, RecordRepository
from healthlog.application.schemas.record import ListParams, RecordCreate, RecordUpdate
from healthlog.application.services.record_store import OwnerScopedStore
from healthlog.config import get_settings
from healthlog.domain.entities import Page, Record
from healthlog.domain.exceptions import (
    EntityNotFoundError,
    FieldViolation,
    ValidationError,
)
from healthlog.domain.stats_engine import start_of_day
from healthlog.domain.validation import (
    parse_timestamp,
    validate_new_record,
    validate_record_patch,
)

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RecordService:
    """Orchestrates owner-scoped record CRUD. Depends on the repository port (DI)."""

    def __init__(
        self,
        repository: RecordRepository,
        *,
        time_zone: ZoneInfo | None = None,
        default_page_size: int | None = None,
        max_page_size: int | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._repository = repository
        self._time_zone = time_zone or ZoneInfo("UTC")
        settings = get_settings()
        self._default_page_size = default_page_size or settings.default_page_size
        self._max_page_size = max_page_size or settings.max_page_size
        self._clock = clock

    def store_for(self, owner_id: str) -> OwnerScopedStore:
        return OwnerScopedStore(self._repository, owner_id)

    async def create_record(self, owner_id: str, data: RecordCreate) -> Record:
        store = self.store_for(owner_id)
        now = self._clock()
        occurred_at = parse_timestamp(data.occurred_at)
        validate_new_record(
            occurred_at=occurred_at,
            quality_rating=data.quality_rating,
            notes=data.notes,
            now=now,
        )
        record = Record(
            owner_id=store.owner_id,
            occurred_at=occurred_at,
            quality_rating=data.quality_rating,
            notes=data.notes,
            created_at=now,
            updated_at=now,
        )
        created = await store.add(record)
        logger.info("Created record %s for owner %s", created.id, owner_id)
        return created

    async def get_record(self, owner_id: str, record_id: str) -> Record:
        record = await self.store_for(owner_id).get(record_id)
        if record is None:
            logger.debug("Record %s not visible to owner %s", record_id, owner_id)
            raise EntityNotFoundError("Record", record_id)
        return record

    async def update_record(self, owner_id: str, record_id: str, patch: RecordUpdate) -> Record:
        store = self.store_for(owner_id)
        record = await store.get(record_id)
        if record is None:
            raise EntityNotFoundError("Record", record_id)

        changes = patch.changes()
        if not changes:
            return record
        if "occurred_at" in changes:
            changes["occurred_at"] = parse_timestamp(changes["occurred_at"])
        now = self._clock()
        validate_record_patch(changes, now=now)

        record.apply_changes(changes, now=now)
        saved = await store.save(record)
        if saved is None:
            # Removed between the read and the write.
            raise EntityNotFoundError("Record", record_id)
        logger.info(
            "Updated record %s for owner %s (%s)",
            record_id,
            owner_id,
            ", ".join(sorted(changes)),
        )
        return saved

    async def delete_record(self, owner_id: str, record_id: str) -> None:
        deleted = await self.store_for(owner_id).remove([record_id])
        if deleted == 0:
            raise EntityNotFoundError("Record", record_id)
        logger.info("Deleted record %s for owner %s", record_id, owner_id)

    async def delete_records(self, owner_id: str, record_ids: list[str]) -> int:
        """Delete the caller's records among ``record_ids``; others are skipped."""
        deleted = await self.store_for(owner_id).remove(list(record_ids))
        logger.info(
            "Bulk delete for owner %s: %d of %d id(s) removed",
            owner_id,
            deleted,
            len(set(record_ids)),
        )
        return deleted

    async def list_records(self, owner_id: str, params: ListParams | None = None) -> Page[Record]:
        store = self.store_for(owner_id)
        params = params or ListParams()
        if params.page_size is None:
            params = params.model_copy(update={"page_size": self._default_page_size})
        self._validate_list_params(params)

        occurred_from = occurred_to = None
        if params.start_date is not None:
            occurred_from = start_of_day(params.start_date, self._time_zone)
        if params.end_date is not None:
            occurred_to = start_of_day(
                params.end_date + timedelta(days=1), self._time_zone
            )

        return await store.page(
            page=params.page,
            page_size=params.page_size,
            occurred_from=occurred_from,
            occurred_to=occurred_to,
            sort_by=params.sort_by,
            descending=params.sort_order == "desc",
        )

    async def purge_owner_records(self, owner_id: str) -> int:
        """Admin path: remove every record of ``owner_id``."""
        deleted = await self.store_for(owner_id).purge()
        logger.warning("Purged %d record(s) of owner %s", deleted, owner_id)
        return deleted

    def _validate_list_params(self, params: ListParams) -> None:
        violations: list[FieldViolation] = []
        if params.page < 1:
            violations.append(FieldViolation("page", "range", "page must be >= 1"))
        if not 1 <= params.page_size <= self._max_page_size:
            violations.append(
                FieldViolation(
                    "page_size",
                    "range",
                    f"page_size must be between 1 and {self._max_page_size}",
                )
            )
        if _after(params.start_date, params.end_date):
            violations.append(
                FieldViolation(
                    "start_date", "order", "start_date must not be after end_date"
                )
            )
        if params.sort_by not in SORT_FIELDS:
            violations.append(
                FieldViolation(
                    "sort_by", "choice", f"sort_by must be one of {', '.join(SORT_FIELDS)}"
                )
            )
        if params.sort_order not in ("asc", "desc"):
            violations.append(
                FieldViolation("sort_order", "choice", "sort_order must be asc or desc")
            )
        if violations:
            raise ValidationError(violations)


def _after(start: date | None, end: date | None) -> bool:
    return start is not None and end is not None and start > end
