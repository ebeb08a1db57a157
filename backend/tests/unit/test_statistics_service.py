"""Unit tests for the StatisticsService — windows, isolation and the clock."""

from datetime import date, datetime, timedelta, timezone

import pytest

from healthlog.application.services import StatisticsService
from healthlog.domain.entities import ActivityTrend, BucketPeriod
from healthlog.domain.exceptions import ValidationError
from healthlog.domain.stats_engine import build_stats_config

TODAY = datetime(2026, 10, 19, tzinfo=timezone.utc)


@pytest.fixture
def service(repository, clock) -> StatisticsService:
    return StatisticsService(repository, build_stats_config("UTC"), clock=clock)


@pytest.fixture
def seeded(repository, record_factory):
    repository.seed(
        record_factory("u1", TODAY.replace(hour=8), 4),
        record_factory("u1", TODAY.replace(hour=9) - timedelta(days=1), 2),
        record_factory("u1", TODAY.replace(hour=20) - timedelta(days=1), 2),
        # Another owner's records must never show up in u1's numbers.
        record_factory("u2", TODAY.replace(hour=7), 7),
        record_factory("u2", TODAY.replace(hour=6), 7),
        record_factory("u2", TODAY.replace(hour=5), 7),
    )
    return repository


@pytest.mark.asyncio
async def test_overview_matches_example_scenario(service, seeded):
    summary = await service.overview("u1")
    assert summary.total_count == 3
    assert summary.streak_days == 2
    assert summary.most_common_quality == 2
    # First record was 1 day 3 hours ago -> 2 elapsed days.
    assert summary.daily_average == pytest.approx(1.5)


@pytest.mark.asyncio
async def test_overview_for_owner_without_records(service, seeded):
    summary = await service.overview("nobody")
    assert summary.total_count == 0
    assert summary.daily_average == 0.0
    assert summary.streak_days == 0
    assert summary.most_common_quality is None


@pytest.mark.asyncio
async def test_quality_distribution_is_owner_scoped(service, seeded):
    distribution = await service.quality_distribution("u1")
    assert distribution.counts == {1: 0, 2: 2, 3: 0, 4: 1, 5: 0, 6: 0, 7: 0}
    assert distribution.total_records == 3


@pytest.mark.asyncio
async def test_daily_excludes_records_outside_window(service, repository, record_factory):
    repository.seed(
        record_factory("u1", TODAY.replace(hour=10), 3),
        record_factory("u1", TODAY - timedelta(days=6, hours=-1), 5),
        record_factory("u1", TODAY - timedelta(days=7, hours=-1), 1),
    )
    stats = await service.daily("u1", days=7)
    assert [b.date for b in stats.buckets] == [date(2026, 10, 13), date(2026, 10, 19)]
    assert stats.summary.total_records == 2
    assert stats.summary.total_days == 2


@pytest.mark.asyncio
async def test_weekly_and_monthly_buckets(service, repository, record_factory):
    repository.seed(
        record_factory("u1", datetime(2026, 10, 18, 9, tzinfo=timezone.utc), 2),
        record_factory("u1", datetime(2026, 10, 19, 9, tzinfo=timezone.utc), 6),
        record_factory("u1", datetime(2026, 9, 2, 9, tzinfo=timezone.utc), 4),
    )
    weekly = await service.weekly("u1", weeks=2)
    assert [(b.period, b.start_date, b.count) for b in weekly] == [
        (BucketPeriod.WEEK, date(2026, 10, 12), 1),
        (BucketPeriod.WEEK, date(2026, 10, 19), 1),
    ]

    monthly = await service.monthly("u1", months=2)
    assert [(b.start_date, b.count) for b in monthly] == [
        (date(2026, 9, 1), 1),
        (date(2026, 10, 1), 2),
    ]
    assert await service.monthly("u1", months=1) == monthly[1:]


@pytest.mark.asyncio
async def test_frequency_trend_window(service, seeded):
    points = await service.frequency_trend("u1", days=14)
    assert len(points) == 14
    assert points[-1].date == date(2026, 10, 19)
    assert sum(p.count for p in points) == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("days", [0, 10, 31])
async def test_frequency_trend_rejects_other_windows(service, days):
    with pytest.raises(ValidationError) as excinfo:
        await service.frequency_trend("u1", days=days)
    assert excinfo.value.violations[0].field == "days"


@pytest.mark.asyncio
async def test_window_bounds_are_validated(service):
    with pytest.raises(ValidationError):
        await service.daily("u1", days=0)
    with pytest.raises(ValidationError):
        await service.weekly("u1", weeks=53)
    with pytest.raises(ValidationError):
        await service.monthly("u1", months=25)


@pytest.mark.asyncio
async def test_streak_follows_the_clock(service, seeded, clock):
    assert await service.streak("u1") == 2
    clock.advance(days=1)
    assert await service.streak("u1") == 0


@pytest.mark.asyncio
async def test_streak_respects_configured_horizon(repository, record_factory, clock):
    repository.seed(
        *(record_factory("u1", TODAY - timedelta(days=d), 4) for d in range(20))
    )
    service = StatisticsService(repository, build_stats_config("UTC", 7), clock=clock)
    assert await service.streak("u1") == 7
    assert (await service.overview("u1")).streak_days == 7


@pytest.mark.asyncio
async def test_time_zone_changes_day_boundaries(repository, record_factory, clock):
    # 23:30 UTC on the 18th is already the 19th in Tokyo.
    repository.seed(record_factory("u1", datetime(2026, 10, 18, 23, 30, tzinfo=timezone.utc), 5))
    tokyo = StatisticsService(repository, build_stats_config("Asia/Tokyo"), clock=clock)
    utc = StatisticsService(repository, build_stats_config("UTC"), clock=clock)

    assert await tokyo.streak("u1") == 1
    assert await utc.streak("u1") == 0
    assert [b.date for b in (await tokyo.daily("u1", days=2)).buckets] == [date(2026, 10, 19)]


@pytest.mark.asyncio
async def test_comparison_is_owner_scoped(service, seeded):
    result = await service.comparison("u1")
    assert (result.last_7_days, result.last_30_days) == (3, 3)
    assert result.improvement == 43
    assert result.trend is ActivityTrend.UP
