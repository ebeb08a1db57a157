"""Integration tests for the SQLAlchemy record repository (SQLite backend)."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from healthlog.domain.entities import Record, RecordQuery
from healthlog.domain.exceptions import StorageError
from healthlog.infrastructure.database.repositories import SQLAlchemyRecordRepository

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _record(owner: str, hours_ago: int, rating: int = 4) -> Record:
    occurred = NOW - timedelta(hours=hours_ago)
    return Record(
        owner_id=owner,
        occurred_at=occurred,
        quality_rating=rating,
        created_at=occurred,
        updated_at=occurred,
    )


@pytest.mark.asyncio
async def test_create_and_find_round_trip(session):
    repo = SQLAlchemyRecordRepository(session)
    created = await repo.create(_record("alice", 3, rating=6))

    (found,) = await repo.find(RecordQuery("alice").with_ids([created.id]))
    assert found.id == created.id
    assert found.quality_rating == 6
    assert found.occurred_at == NOW - timedelta(hours=3)
    assert found.occurred_at.tzinfo is not None


@pytest.mark.asyncio
async def test_find_is_filtered_by_owner(session):
    repo = SQLAlchemyRecordRepository(session)
    bobs = await repo.create(_record("bob", 1))
    await repo.create(_record("alice", 2))

    assert await repo.find(RecordQuery("alice").with_ids([bobs.id])) == []
    assert [r.owner_id for r in await repo.find(RecordQuery("alice"))] == ["alice"]
    assert await repo.count(RecordQuery("bob")) == 1


@pytest.mark.asyncio
async def test_time_range_is_half_open(session):
    repo = SQLAlchemyRecordRepository(session)
    for hours in (1, 5, 10):
        await repo.create(_record("alice", hours))

    query = RecordQuery("alice").between(NOW - timedelta(hours=10), NOW - timedelta(hours=1))
    found = await repo.find(query, descending=False)
    assert [r.occurred_at for r in found] == [
        NOW - timedelta(hours=10),
        NOW - timedelta(hours=5),
    ]


@pytest.mark.asyncio
async def test_time_range_accepts_other_offsets(session):
    repo = SQLAlchemyRecordRepository(session)
    await repo.create(_record("alice", 2))
    berlin = timezone(timedelta(hours=2))
    query = RecordQuery("alice").between(
        datetime(2026, 10, 19, 11, 0, tzinfo=berlin),  # 09:00 UTC
        datetime(2026, 10, 19, 13, 0, tzinfo=berlin),  # 11:00 UTC
    )
    assert await repo.count(query) == 1


@pytest.mark.asyncio
async def test_find_paginates_and_sorts(session):
    repo = SQLAlchemyRecordRepository(session)
    for hours, rating in ((1, 3), (2, 7), (3, 1), (4, 5)):
        await repo.create(_record("alice", hours, rating))

    newest = await repo.find(RecordQuery("alice"), skip=1, limit=2)
    assert [r.occurred_at for r in newest] == [NOW - timedelta(hours=2), NOW - timedelta(hours=3)]

    by_rating = await repo.find(RecordQuery("alice"), sort_by="quality_rating", descending=False)
    assert [r.quality_rating for r in by_rating] == [1, 3, 5, 7]

    with pytest.raises(ValueError):
        await repo.find(RecordQuery("alice"), sort_by="owner_id")


@pytest.mark.asyncio
async def test_update_requires_matching_owner(session):
    repo = SQLAlchemyRecordRepository(session)
    created = await repo.create(_record("alice", 1, rating=2))

    created.quality_rating = 5
    created.notes = "better"
    saved = await repo.update(created)
    assert saved is not None and saved.quality_rating == 5 and saved.notes == "better"

    hijack = Record(
        id=created.id,
        owner_id="mallory",
        occurred_at=created.occurred_at,
        quality_rating=1,
    )
    assert await repo.update(hijack) is None
    (stored,) = await repo.find(RecordQuery("alice"))
    assert stored.quality_rating == 5


@pytest.mark.asyncio
async def test_delete_counts_only_owned_rows(session):
    repo = SQLAlchemyRecordRepository(session)
    mine = await repo.create(_record("alice", 1))
    theirs = await repo.create(_record("bob", 1))

    deleted = await repo.delete(RecordQuery("alice").with_ids([mine.id, theirs.id, "nope"]))
    assert deleted == 1
    assert await repo.count(RecordQuery("bob")) == 1
    assert await repo.count(RecordQuery("alice")) == 0


@pytest.mark.asyncio
async def test_driver_errors_become_storage_errors(session, monkeypatch):
    repo = SQLAlchemyRecordRepository(session)

    async def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(session, "execute", broken_execute)
    with pytest.raises(StorageError) as excinfo:
        await repo.count(RecordQuery("alice"))
    assert excinfo.value.operation == "count"
    assert "locked" not in str(excinfo.value)
