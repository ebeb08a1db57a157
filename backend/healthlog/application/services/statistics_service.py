"""Statistics Service — loads one owner's records and runs the engine on them.

The service never touches storage except through an ``OwnerScopedStore``;
all arithmetic lives in ``healthlog.domain.stats_engine``.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from healthlog.application.interfaces import RecordRepository
from healthlog.application.services.record_store import OwnerScopedStore
from healthlog.domain import stats_engine
from healthlog.domain.entities import (
    ActivityComparison,
    BucketPeriod,
    DailyBucket,
    DailySummary,
    PeriodBucket,
    PeriodSummary,
    QualityDistribution,
    Record,
    TrendPoint,
)
from healthlog.domain.exceptions import FieldViolation, ValidationError
from healthlog.domain.stats_engine import StatsConfig

logger = logging.getLogger(__name__)

# Accepted lookback sizes: (default, maximum).
DAILY_WINDOW = (30, 365)
WEEKLY_WINDOW = (4, 52)
MONTHLY_WINDOW = (6, 24)


@dataclass(frozen=True)
class DailyStats:
    days: int
    buckets: list[DailyBucket]
    summary: DailySummary


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _check_window(name: str, value: int, maximum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= maximum:
        raise ValidationError(
            [FieldViolation(name, "range", f"{name} must be between 1 and {maximum}")]
        )


class StatisticsService:
    """Computes derived views for the authenticated owner."""

    def __init__(
        self,
        repository: RecordRepository,
        config: StatsConfig,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._repository = repository
        self._config = config
        self._clock = clock

    @property
    def config(self) -> StatsConfig:
        return self._config

    async def overview(self, owner_id: str) -> PeriodSummary:
        records = await self._records(owner_id)
        return stats_engine.period_summary(
            records,
            self._clock(),
            self._config.time_zone,
            self._config.streak_horizon_days,
        )

    async def daily(self, owner_id: str, days: int = DAILY_WINDOW[0]) -> DailyStats:
        _check_window("days", days, DAILY_WINDOW[1])
        first, last = stats_engine.trailing_days(self._clock(), self._config.time_zone, days)
        records = await self._records(owner_id, first, last)
        buckets = stats_engine.daily_buckets(records, self._config.time_zone, first, last)
        return DailyStats(
            days=days, buckets=buckets, summary=stats_engine.summarize_daily(buckets)
        )

    async def weekly(self, owner_id: str, weeks: int = WEEKLY_WINDOW[0]) -> list[PeriodBucket]:
        _check_window("weeks", weeks, WEEKLY_WINDOW[1])
        first, last = stats_engine.trailing_weeks(self._clock(), self._config.time_zone, weeks)
        return await self._periods(owner_id, BucketPeriod.WEEK, first, last)

    async def monthly(self, owner_id: str, months: int = MONTHLY_WINDOW[0]) -> list[PeriodBucket]:
        _check_window("months", months, MONTHLY_WINDOW[1])
        first, last = stats_engine.trailing_months(
            self._clock(), self._config.time_zone, months
        )
        return await self._periods(owner_id, BucketPeriod.MONTH, first, last)

    async def quality_distribution(self, owner_id: str) -> QualityDistribution:
        return stats_engine.quality_distribution(await self._records(owner_id))

    async def frequency_trend(self, owner_id: str, days: int = 30) -> list[TrendPoint]:
        if days not in stats_engine.TREND_WINDOWS:
            windows = ", ".join(str(w) for w in stats_engine.TREND_WINDOWS)
            raise ValidationError(
                [FieldViolation("days", "choice", f"days must be one of {windows}")]
            )
        now = self._clock()
        first, last = stats_engine.trailing_days(now, self._config.time_zone, days)
        records = await self._records(owner_id, first, last)
        return stats_engine.frequency_trend(records, now, self._config.time_zone, days)

    async def comparison(self, owner_id: str) -> ActivityComparison:
        now = self._clock()
        first, last = stats_engine.trailing_days(
            now, self._config.time_zone, stats_engine.COMPARISON_LONG_DAYS
        )
        records = await self._records(owner_id, first, last)
        return stats_engine.activity_comparison(records, now, self._config.time_zone)

    async def streak(self, owner_id: str) -> int:
        now = self._clock()
        first, last = stats_engine.trailing_days(
            now, self._config.time_zone, self._config.streak_horizon_days
        )
        records = await self._records(owner_id, first, last)
        return stats_engine.streak_days(
            records, now, self._config.time_zone, self._config.streak_horizon_days
        )

    async def _periods(
        self, owner_id: str, period: BucketPeriod, first: date, last: date
    ) -> list[PeriodBucket]:
        records = await self._records(owner_id, first, last)
        return stats_engine.period_buckets(
            records, self._config.time_zone, period, first, last
        )

    async def _records(
        self, owner_id: str, first: date | None = None, last: date | None = None
    ) -> list[Record]:
        """Owned records whose local date lies in ``[first, last]``."""
        store = OwnerScopedStore(self._repository, owner_id)
        tz = self._config.time_zone
        occurred_from = stats_engine.start_of_day(first, tz) if first else None
        occurred_to = (
            stats_engine.start_of_day(last + timedelta(days=1), tz) if last else None
        )
        records = await store.fetch_all(occurred_from, occurred_to)
        logger.debug(
            "Loaded %d record(s) for owner %s in window %s..%s",
            len(records),
            owner_id,
            first,
            last,
        )
        return records
