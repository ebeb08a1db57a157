"""Pydantic response schemas for derived statistics.

Averages are kept unrounded by the engine and rounded here, at the edge.
"""

from datetime import date, datetime

from pydantic import BaseModel, field_serializer

from healthlog.domain.entities import ActivityTrend, BucketPeriod

AVERAGE_DECIMALS = 2


def _round(value: float | None) -> float | None:
    return None if value is None else round(value, AVERAGE_DECIMALS)


class DailyBucketResponse(BaseModel):
    date: date
    count: int
    avg_quality: float
    min_quality: int
    max_quality: int

    model_config = {"from_attributes": True}

    @field_serializer("avg_quality")
    def round_average(self, value: float) -> float:
        return _round(value)


class DailySummaryResponse(BaseModel):
    total_days: int
    total_records: int
    avg_daily: float
    max_daily: int
    min_daily: int

    model_config = {"from_attributes": True}

    @field_serializer("avg_daily")
    def round_average(self, value: float) -> float:
        return _round(value)


class DailyStatsResponse(BaseModel):
    days: int
    daily_stats: list[DailyBucketResponse]
    summary: DailySummaryResponse


class PeriodBucketResponse(BaseModel):
    period: BucketPeriod
    start_date: date
    end_date: date
    count: int
    active_days: int
    daily_average: float
    avg_quality: float
    min_quality: int
    max_quality: int

    model_config = {"from_attributes": True}

    @field_serializer("daily_average", "avg_quality")
    def round_average(self, value: float) -> float:
        return _round(value)


class PeriodStatsResponse(BaseModel):
    period: BucketPeriod
    buckets: list[PeriodBucketResponse]


class OverviewResponse(BaseModel):
    total_records: int
    daily_average: float
    most_common_quality: int | None
    streak_days: int
    first_record_at: datetime | None
    last_record_at: datetime | None

    @field_serializer("daily_average")
    def round_average(self, value: float) -> float:
        return _round(value)


class QualityDistributionResponse(BaseModel):
    distribution: dict[int, int]
    total_records: int
    most_common: int | None


class TrendPointResponse(BaseModel):
    date: date
    count: int
    avg_quality: float | None

    model_config = {"from_attributes": True}

    @field_serializer("avg_quality")
    def round_average(self, value: float | None) -> float | None:
        return _round(value)


class FrequencyTrendResponse(BaseModel):
    days: int
    points: list[TrendPointResponse]


class StreakResponse(BaseModel):
    streak_days: int
    horizon_days: int


class ComparisonResponse(BaseModel):
    last_7_days: int
    last_30_days: int
    improvement: int
    trend: ActivityTrend

    model_config = {"from_attributes": True}
