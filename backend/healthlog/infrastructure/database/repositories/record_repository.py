"""Concrete repository implementation for Record backed by SQLAlchemy."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import ColumnElement, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from healthlog.application.interfaces import SORT_FIELDS, RecordRepository
from healthlog.domain.entities import Record, RecordQuery
from healthlog.domain.entities.record import ensure_utc
from healthlog.domain.exceptions import StorageError
from healthlog.infrastructure.database.models import RecordModel

logger = logging.getLogger(__name__)


def _conditions(query: RecordQuery) -> list[ColumnElement[bool]]:
    """Build the WHERE clause for ``query``; the owner filter is always first."""
    conditions = [RecordModel.owner_id == query.owner_id]
    if query.record_ids is not None:
        conditions.append(RecordModel.id.in_(query.record_ids))
    if query.occurred_from is not None:
        conditions.append(RecordModel.occurred_at >= query.occurred_from)
    if query.occurred_to is not None:
        conditions.append(RecordModel.occurred_at < query.occurred_to)
    return conditions


@contextmanager
def _storage_errors(operation: str, owner_id: str) -> Iterator[None]:
    """Translate driver errors into ``StorageError`` after logging them."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Storage failure during %s (owner=%s)", operation, owner_id)
        raise StorageError(operation) from exc


class SQLAlchemyRecordRepository(RecordRepository):
    """Implements the RecordRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: RecordModel) -> Record:
        """Map ORM model → domain entity."""
        return Record(
            id=model.id,
            owner_id=model.owner_id,
            occurred_at=ensure_utc(model.occurred_at),
            quality_rating=model.quality_rating,
            notes=model.notes,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )

    def _to_model(self, entity: Record) -> RecordModel:
        """Map domain entity → ORM model (for creation)."""
        return RecordModel(
            id=entity.id,
            owner_id=entity.owner_id,
            occurred_at=ensure_utc(entity.occurred_at),
            quality_rating=entity.quality_rating,
            notes=entity.notes,
            created_at=ensure_utc(entity.created_at),
            updated_at=ensure_utc(entity.updated_at),
        )

    async def find(
        self,
        query: RecordQuery,
        *,
        skip: int = 0,
        limit: int | None = None,
        sort_by: str = "occurred_at",
        descending: bool = True,
    ) -> list[Record]:
        if sort_by not in SORT_FIELDS:
            raise ValueError(f"Unsupported sort field: {sort_by}")
        column = getattr(RecordModel, sort_by)
        order = (column.desc(), RecordModel.id.desc()) if descending else (
            column.asc(),
            RecordModel.id.asc(),
        )

        stmt = select(RecordModel).where(*_conditions(query)).order_by(*order)
        if skip:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)

        with _storage_errors("find", query.owner_id):
            result = await self._session.execute(stmt)
            return [self._to_entity(row) for row in result.scalars().all()]

    async def count(self, query: RecordQuery) -> int:
        stmt = select(func.count()).select_from(RecordModel).where(*_conditions(query))
        with _storage_errors("count", query.owner_id):
            result = await self._session.execute(stmt)
            return int(result.scalar_one())

    async def create(self, record: Record) -> Record:
        model = self._to_model(record)
        with _storage_errors("create", record.owner_id):
            self._session.add(model)
            await self._session.flush()
        return self._to_entity(model)

    async def update(self, record: Record) -> Record | None:
        query = RecordQuery(owner_id=record.owner_id).with_ids([record.id])
        with _storage_errors("update", record.owner_id):
            result = await self._session.execute(
                select(RecordModel).where(*_conditions(query))
            )
            model = result.scalar_one_or_none()
            if model is None:
                return None
            model.occurred_at = ensure_utc(record.occurred_at)
            model.quality_rating = record.quality_rating
            model.notes = record.notes
            model.updated_at = ensure_utc(record.updated_at)
            await self._session.flush()
        return self._to_entity(model)

    async def delete(self, query: RecordQuery) -> int:
        with _storage_errors("delete", query.owner_id):
            result = await self._session.execute(
                delete(RecordModel)
                .where(*_conditions(query))
                .execution_options(synchronize_session=False)
            )
            await self._session.flush()
        return result.rowcount or 0
