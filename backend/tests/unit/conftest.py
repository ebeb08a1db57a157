"""Shared fakes for unit tests."""

import copy
from datetime import datetime, timedelta, timezone

import pytest

from healthlog.application.interfaces import RecordRepository
from healthlog.domain.entities import Record, RecordQuery

# A Monday.
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


# ── Fakes ────────────────────────────────────────────────────────────


class FakeRecordRepository(RecordRepository):
    """In-memory fake repository that honours RecordQuery like the real one."""

    def __init__(self):
        self._records: dict[str, Record] = {}
        self.queries: list[RecordQuery] = []

    def seed(self, *records: Record) -> None:
        for record in records:
            self._records[record.id] = copy.copy(record)

    def all(self) -> list[Record]:
        return list(self._records.values())

    async def find(
        self,
        query: RecordQuery,
        *,
        skip: int = 0,
        limit: int | None = None,
        sort_by: str = "occurred_at",
        descending: bool = True,
    ) -> list[Record]:
        self.queries.append(query)
        matches = [r for r in self._records.values() if query.matches(r)]
        matches.sort(key=lambda r: (getattr(r, sort_by), r.id), reverse=descending)
        end = None if limit is None else skip + limit
        return [copy.copy(r) for r in matches[skip:end]]

    async def count(self, query: RecordQuery) -> int:
        self.queries.append(query)
        return sum(1 for r in self._records.values() if query.matches(r))

    async def create(self, record: Record) -> Record:
        self._records[record.id] = copy.copy(record)
        return copy.copy(record)

    async def update(self, record: Record) -> Record | None:
        stored = self._records.get(record.id)
        if stored is None or stored.owner_id != record.owner_id:
            return None
        self._records[record.id] = copy.copy(record)
        return copy.copy(record)

    async def delete(self, query: RecordQuery) -> int:
        self.queries.append(query)
        doomed = [r.id for r in self._records.values() if query.matches(r)]
        for record_id in doomed:
            del self._records[record_id]
        return len(doomed)


class FakeClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def make_record(owner_id: str, occurred_at: datetime, rating: int, notes: str | None = None) -> Record:
    return Record(
        owner_id=owner_id,
        occurred_at=occurred_at,
        quality_rating=rating,
        notes=notes,
        created_at=occurred_at,
        updated_at=occurred_at,
    )


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def repository() -> FakeRecordRepository:
    return FakeRecordRepository()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
