"""Abstract repository interface (port) for Record persistence.

Every method is driven by a ``RecordQuery`` (or by a record that carries its
own owner id), so implementations always start from an owner filter.
"""

from abc import ABC, abstractmethod

from healthlog.domain.entities import Record, RecordQuery

SORT_FIELDS = ("occurred_at", "created_at", "quality_rating")


class RecordRepository(ABC):
    """Port for record persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def find(
        self,
        query: RecordQuery,
        *,
        skip: int = 0,
        limit: int | None = None,
        sort_by: str = "occurred_at",
        descending: bool = True,
    ) -> list[Record]:
        """Return records matching ``query``, sorted, with id as tie-breaker."""
        ...

    @abstractmethod
    async def count(self, query: RecordQuery) -> int:
        """Count records matching ``query``."""
        ...

    @abstractmethod
    async def create(self, record: Record) -> Record:
        """Persist a new record and return it."""
        ...

    @abstractmethod
    async def update(self, record: Record) -> Record | None:
        """Write the mutable fields of a record owned by ``record.owner_id``.

        Returns None when no such record exists for that owner.
        """
        ...

    @abstractmethod
    async def delete(self, query: RecordQuery) -> int:
        """Delete every record matching ``query``; return how many were removed."""
        ...
