"""Derived statistics views — recomputed on demand, never persisted."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class BucketPeriod(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class ActivityTrend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


@dataclass(frozen=True)
class DailyBucket:
    """Aggregate of all records sharing one local calendar day."""

    date: date
    count: int
    avg_quality: float
    min_quality: int
    max_quality: int


@dataclass(frozen=True)
class PeriodBucket:
    """Aggregate of a week (Monday start) or calendar month."""

    period: BucketPeriod
    start_date: date
    end_date: date  # inclusive
    count: int
    active_days: int
    daily_average: float
    avg_quality: float
    min_quality: int
    max_quality: int


@dataclass(frozen=True)
class DailySummary:
    total_days: int
    total_records: int
    avg_daily: float
    max_daily: int
    min_daily: int


@dataclass(frozen=True)
class PeriodSummary:
    total_count: int
    daily_average: float
    most_common_quality: int | None
    streak_days: int
    first_record_at: datetime | None
    last_record_at: datetime | None


@dataclass(frozen=True)
class QualityDistribution:
    """Counts per rating; every rating in the scale is always a key."""

    counts: dict[int, int]
    total_records: int
    most_common: int | None


@dataclass(frozen=True)
class TrendPoint:
    date: date
    count: int
    avg_quality: float | None



@dataclass(frozen=True)
class ActivityComparison:
    """Last 7 local days against the last 30, each ending today."""

    last_7_days: int
    last_30_days: int
    improvement: int  # percent of the expected one record per day, capped at 100
    trend: ActivityTrend
