"""Owner-scoped facade over the record repository.

An ``OwnerScopedStore`` is bound to one owner when it is constructed. It has
no method that accepts an owner id, and every query it sends to the
repository is derived from ``RecordQuery(owner_id=<bound owner>)``.
"""

from datetime import datetime

from healthlog.application.interfaces import RecordRepository
from healthlog.domain.entities import Page, Record, RecordQuery


class OwnerScopedStore:
    """Record storage capability limited to a single owner's records."""

    def __init__(self, repository: RecordRepository, owner_id: str):
        # Fails here, not later, when the owner id is blank.
        self._base_query = RecordQuery(owner_id=owner_id)
        self._repository = repository

    @property
    def owner_id(self) -> str:
        return self._base_query.owner_id

    def query(self) -> RecordQuery:
        """A fresh query already filtered to the bound owner."""
        return self._base_query

    async def get(self, record_id: str) -> Record | None:
        matches = await self._repository.find(
            self.query().with_ids([record_id]), limit=1
        )
        return matches[0] if matches else None

    async def page(
        self,
        *,
        page: int,
        page_size: int,
        occurred_from: datetime | None = None,
        occurred_to: datetime | None = None,
        sort_by: str = "occurred_at",
        descending: bool = True,
    ) -> Page[Record]:
        query = self.query().between(occurred_from, occurred_to)
        total = await self._repository.count(query)
        items = await self._repository.find(
            query,
            skip=(page - 1) * page_size,
            limit=page_size,
            sort_by=sort_by,
            descending=descending,
        )
        return Page(items=items, page=page, page_size=page_size, total=total)

    async def fetch_all(
        self,
        occurred_from: datetime | None = None,
        occurred_to: datetime | None = None,
    ) -> list[Record]:
        """Every owned record in ``[occurred_from, occurred_to)``, oldest first."""
        return await self._repository.find(
            self.query().between(occurred_from, occurred_to),
            descending=False,
        )

    async def add(self, record: Record) -> Record:
        if record.owner_id != self.owner_id:
            raise ValueError("record belongs to a different owner")
        return await self._repository.create(record)

    async def save(self, record: Record) -> Record | None:
        if record.owner_id != self.owner_id:
            return None
        return await self._repository.update(record)

    async def remove(self, record_ids: list[str]) -> int:
        if not record_ids:
            return 0
        return await self._repository.delete(self.query().with_ids(record_ids))

    async def purge(self) -> int:
        """Delete every record the bound owner has."""
        return await self._repository.delete(self.query())
