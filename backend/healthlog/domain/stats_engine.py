"""Statistics engine — pure functions from a record set to derived views.

Every function takes the reference time (``now``) and the time zone as
explicit arguments and never mutates its input, so results are exactly
reproducible and safe to cache by the caller.

Records are bucketed by the *local* calendar date of ``occurred_at`` in the
configured zone. Weeks start on Monday.
"""

import calendar
import math
from collections import Counter, defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from healthlog.domain.entities.record import QUALITY_MAX, QUALITY_MIN, Record
from healthlog.domain.entities.statistics import (
    ActivityComparison,
    ActivityTrend,
    BucketPeriod,
    DailyBucket,
    DailySummary,
    PeriodBucket,
    PeriodSummary,
    QualityDistribution,
    TrendPoint,
)
from healthlog.domain.exceptions import ConfigurationError

DEFAULT_STREAK_HORIZON_DAYS = 365
TREND_WINDOWS = (7, 14, 30)

COMPARISON_SHORT_DAYS = 7
COMPARISON_LONG_DAYS = 30
EXPECTED_DAILY_RECORDS = 1
# Daily-rate ratio (short window over long window) that counts as a change.
TREND_UP_RATIO = 1.2
TREND_DOWN_RATIO = 0.8

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class StatsConfig:
    time_zone: ZoneInfo
    streak_horizon_days: int = DEFAULT_STREAK_HORIZON_DAYS


def build_stats_config(
    time_zone: str, streak_horizon_days: int = DEFAULT_STREAK_HORIZON_DAYS
) -> StatsConfig:
    """Validate raw settings; raises ``ConfigurationError`` on bad values."""
    if not isinstance(time_zone, str) or not time_zone.strip():
        raise ConfigurationError("stats_time_zone", "time zone must not be empty")
    try:
        zone = ZoneInfo(time_zone.strip())
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ConfigurationError(
            "stats_time_zone", f"unknown time zone '{time_zone}'"
        ) from exc
    if (
        isinstance(streak_horizon_days, bool)
        or not isinstance(streak_horizon_days, int)
        or streak_horizon_days <= 0
    ):
        raise ConfigurationError(
            "streak_horizon_days", "streak horizon must be a positive integer"
        )
    return StatsConfig(time_zone=zone, streak_horizon_days=streak_horizon_days)


# ── Calendar helpers ─────────────────────────────────────────────────


def local_date(moment: datetime, tz: ZoneInfo) -> date:
    """Calendar date of ``moment`` in ``tz``; naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=ZoneInfo("UTC"))
    return moment.astimezone(tz).date()


def start_of_day(day: date, tz: ZoneInfo) -> datetime:
    """The aware instant at which ``day`` begins in ``tz``."""
    return datetime.combine(day, time.min, tzinfo=tz)


def bucket_start(day: date, period: BucketPeriod) -> date:
    if period is BucketPeriod.DAY:
        return day
    if period is BucketPeriod.WEEK:
        return day - timedelta(days=day.weekday())
    return day.replace(day=1)


def bucket_end(start: date, period: BucketPeriod) -> date:
    """Last day (inclusive) of the bucket beginning at ``start``."""
    if period is BucketPeriod.DAY:
        return start
    if period is BucketPeriod.WEEK:
        return start + timedelta(days=6)
    return start.replace(day=calendar.monthrange(start.year, start.month)[1])


def shift_months(day: date, months: int) -> date:
    """First day of the month ``months`` away from ``day``'s month."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def _group(
    records: Iterable[Record], tz: ZoneInfo, period: BucketPeriod
) -> dict[date, list[Record]]:
    groups: dict[date, list[Record]] = defaultdict(list)
    for record in records:
        groups[bucket_start(local_date(record.occurred_at, tz), period)].append(record)
    return groups


def _in_window(
    records: Iterable[Record], tz: ZoneInfo, first: date | None, last: date | None
) -> list[Record]:
    selected = []
    for record in records:
        day = local_date(record.occurred_at, tz)
        if first is not None and day < first:
            continue
        if last is not None and day > last:
            continue
        selected.append(record)
    return selected


# ── Aggregates ───────────────────────────────────────────────────────


def daily_buckets(
    records: Iterable[Record],
    tz: ZoneInfo,
    first: date | None = None,
    last: date | None = None,
) -> list[DailyBucket]:
    """Per-day aggregates, ascending, for days in ``[first, last]`` with records."""
    buckets = []
    groups = _group(_in_window(records, tz, first, last), tz, BucketPeriod.DAY)
    for day in sorted(groups):
        ratings = [r.quality_rating for r in groups[day]]
        buckets.append(
            DailyBucket(
                date=day,
                count=len(ratings),
                avg_quality=sum(ratings) / len(ratings),
                min_quality=min(ratings),
                max_quality=max(ratings),
            )
        )
    return buckets


def period_buckets(
    records: Iterable[Record],
    tz: ZoneInfo,
    period: BucketPeriod,
    first: date | None = None,
    last: date | None = None,
) -> list[PeriodBucket]:
    """Per-week or per-month aggregates, ascending, only for periods with records."""
    if period is BucketPeriod.DAY:
        raise ValueError("use daily_buckets() for day buckets")
    buckets = []
    groups = _group(_in_window(records, tz, first, last), tz, period)
    for start in sorted(groups):
        members = groups[start]
        ratings = [r.quality_rating for r in members]
        end = bucket_end(start, period)
        days_in_period = (end - start).days + 1
        buckets.append(
            PeriodBucket(
                period=period,
                start_date=start,
                end_date=end,
                count=len(ratings),
                active_days=len({local_date(r.occurred_at, tz) for r in members}),
                daily_average=len(ratings) / days_in_period,
                avg_quality=sum(ratings) / len(ratings),
                min_quality=min(ratings),
                max_quality=max(ratings),
            )
        )
    return buckets


def summarize_daily(buckets: list[DailyBucket]) -> DailySummary:
    if not buckets:
        return DailySummary(
            total_days=0, total_records=0, avg_daily=0.0, max_daily=0, min_daily=0
        )
    counts = [b.count for b in buckets]
    return DailySummary(
        total_days=len(buckets),
        total_records=sum(counts),
        avg_daily=sum(counts) / len(buckets),
        max_daily=max(counts),
        min_daily=min(counts),
    )


# ── Overall metrics ──────────────────────────────────────────────────


def streak_days(
    records: Iterable[Record],
    now: datetime,
    tz: ZoneInfo,
    horizon: int = DEFAULT_STREAK_HORIZON_DAYS,
) -> int:
    """Consecutive active local days ending today; 0 if today has no record.

    The backward walk stops after ``horizon`` days, so an unbroken run longer
    than the horizon is reported as ``horizon``.
    """
    active = {local_date(r.occurred_at, tz) for r in records}
    day = local_date(now, tz)
    streak = 0
    while streak < horizon and day in active:
        streak += 1
        day -= _ONE_DAY
    return streak


def quality_distribution(records: Iterable[Record]) -> QualityDistribution:
    counts = {rating: 0 for rating in range(QUALITY_MIN, QUALITY_MAX + 1)}
    for record in records:
        counts[record.quality_rating] += 1
    return QualityDistribution(
        counts=counts,
        total_records=sum(counts.values()),
        most_common=most_common_quality(counts),
    )


def most_common_quality(counts: dict[int, int]) -> int | None:
    """Rating with the highest count; the lowest rating wins a tie.

    Returns None when every count is zero.
    """
    best = None
    for rating in sorted(counts):
        if counts[rating] <= 0:
            continue
        if best is None or counts[rating] > counts[best]:
            best = rating
    return best


def daily_average(total: int, first_record_at: datetime | None, now: datetime) -> float:
    """``total / max(1, ceil(days since first record))``; 0.0 for no records."""
    if total == 0 or first_record_at is None:
        return 0.0
    elapsed_days = math.ceil((now - first_record_at) / _ONE_DAY)
    return total / max(1, elapsed_days)


def period_summary(
    records: Iterable[Record],
    now: datetime,
    tz: ZoneInfo,
    horizon: int = DEFAULT_STREAK_HORIZON_DAYS,
) -> PeriodSummary:
    records = list(records)
    if not records:
        return PeriodSummary(
            total_count=0,
            daily_average=0.0,
            most_common_quality=None,
            streak_days=0,
            first_record_at=None,
            last_record_at=None,
        )
    first = min(r.occurred_at for r in records)
    last = max(r.occurred_at for r in records)
    counts = Counter(r.quality_rating for r in records)
    return PeriodSummary(
        total_count=len(records),
        daily_average=daily_average(len(records), first, now),
        most_common_quality=most_common_quality(dict(counts)),
        streak_days=streak_days(records, now, tz, horizon),
        first_record_at=first,
        last_record_at=last,
    )


# ── Windows ──────────────────────────────────────────────────────────


def trailing_days(now: datetime, tz: ZoneInfo, days: int) -> tuple[date, date]:
    """Inclusive ``(first, last)`` local dates of the ``days`` ending today."""
    today = local_date(now, tz)
    return today - timedelta(days=days - 1), today


def trailing_weeks(now: datetime, tz: ZoneInfo, weeks: int) -> tuple[date, date]:
    today = local_date(now, tz)
    current = bucket_start(today, BucketPeriod.WEEK)
    return current - timedelta(weeks=weeks - 1), today


def trailing_months(now: datetime, tz: ZoneInfo, months: int) -> tuple[date, date]:
    today = local_date(now, tz)
    return shift_months(today, -(months - 1)), today


def frequency_trend(
    records: Iterable[Record], now: datetime, tz: ZoneInfo, days: int
) -> list[TrendPoint]:
    """One point per local day of the window, ascending, zero-filled.

    Built on ``daily_buckets`` so the trend always agrees with the daily stats.
    """
    first, last = trailing_days(now, tz, days)
    by_day = {b.date: b for b in daily_buckets(records, tz, first, last)}
    points = []
    day = first
    while day <= last:
        bucket = by_day.get(day)
        points.append(
            TrendPoint(
                date=day,
                count=bucket.count if bucket else 0,
                avg_quality=bucket.avg_quality if bucket else None,
            )
        )
        day += _ONE_DAY
    return points


def activity_comparison(
    records: Iterable[Record], now: datetime, tz: ZoneInfo
) -> ActivityComparison:
    """Compare the last 7 local days with the last 30 by daily record rate.

    ``improvement`` is the short window's count as a percentage of one record
    per day, capped at 100.
    """
    short_first, today = trailing_days(now, tz, COMPARISON_SHORT_DAYS)
    long_first, _ = trailing_days(now, tz, COMPARISON_LONG_DAYS)
    days = [local_date(r.occurred_at, tz) for r in records]
    short_count = sum(1 for d in days if short_first <= d <= today)
    long_count = sum(1 for d in days if long_first <= d <= today)

    expected = EXPECTED_DAILY_RECORDS * COMPARISON_SHORT_DAYS
    improvement = 100 if short_count >= expected else round(short_count / expected * 100)

    short_rate = short_count / COMPARISON_SHORT_DAYS
    long_rate = long_count / COMPARISON_LONG_DAYS
    if short_rate > long_rate * TREND_UP_RATIO:
        trend = ActivityTrend.UP
    elif short_rate < long_rate * TREND_DOWN_RATIO:
        trend = ActivityTrend.DOWN
    else:
        trend = ActivityTrend.STABLE
    return ActivityComparison(
        last_7_days=short_count,
        last_30_days=long_count,
        improvement=improvement,
        trend=trend,
    )
