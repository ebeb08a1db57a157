"""Statistics endpoints — derived views over the caller's own records."""

from fastapi import APIRouter, Depends, Query

from healthlog.application.schemas.stats import (
    ComparisonResponse,
    DailyBucketResponse,
    DailyStatsResponse,
    DailySummaryResponse,
    FrequencyTrendResponse,
    OverviewResponse,
    PeriodBucketResponse,
    PeriodStatsResponse,
    QualityDistributionResponse,
    StreakResponse,
    TrendPointResponse,
)
from healthlog.application.services import StatisticsService
from healthlog.domain.entities import BucketPeriod
from healthlog.infrastructure.dependencies import get_current_owner_id, get_statistics_service

router = APIRouter(prefix="/stats", tags=["Statistics"])


@router.get("/overview", response_model=OverviewResponse)
async def get_overview(
    owner_id: str = Depends(get_current_owner_id),
    service: StatisticsService = Depends(get_statistics_service),
) -> OverviewResponse:
    """Totals, daily average, most common quality and current streak."""
    summary = await service.overview(owner_id)
    return OverviewResponse(
        total_records=summary.total_count,
        daily_average=summary.daily_average,
        most_common_quality=summary.most_common_quality,
        streak_days=summary.streak_days,
        first_record_at=summary.first_record_at,
        last_record_at=summary.last_record_at,
    )


@router.get("/daily", response_model=DailyStatsResponse)
async def get_daily_stats(
    days: int = Query(30, description="Number of local days ending today"),
    owner_id: str = Depends(get_current_owner_id),
    service: StatisticsService = Depends(get_statistics_service),
) -> DailyStatsResponse:
    """Per-day count and quality aggregates for the last ``days`` days."""
    stats = await service.daily(owner_id, days)
    return DailyStatsResponse(
        days=stats.days,
        daily_stats=[
            DailyBucketResponse.model_validate(b, from_attributes=True)
            for b in stats.buckets
        ],
        summary=DailySummaryResponse.model_validate(stats.summary, from_attributes=True),
    )


@router.get("/weekly", response_model=PeriodStatsResponse)
async def get_weekly_stats(
    weeks: int = Query(4, description="Number of Monday-based weeks ending this week"),
    owner_id: str = Depends(get_current_owner_id),
    service: StatisticsService = Depends(get_statistics_service),
) -> PeriodStatsResponse:
    buckets = await service.weekly(owner_id, weeks)
    return PeriodStatsResponse(
        period=BucketPeriod.WEEK,
        buckets=[PeriodBucketResponse.model_validate(b, from_attributes=True) for b in buckets],
    )


@router.get("/monthly", response_model=PeriodStatsResponse)
async def get_monthly_stats(
    months: int = Query(6, description="Number of calendar months ending this month"),
    owner_id: str = Depends(get_current_owner_id),
    service: StatisticsService = Depends(get_statistics_service),
) -> PeriodStatsResponse:
    buckets = await service.monthly(owner_id, months)
    return PeriodStatsResponse(
        period=BucketPeriod.MONTH,
        buckets=[PeriodBucketResponse.model_validate(b, from_attributes=True) for b in buckets],
    )


@router.get("/quality", response_model=QualityDistributionResponse)
async def get_quality_distribution(
    owner_id: str = Depends(get_current_owner_id),
    service: StatisticsService = Depends(get_statistics_service),
) -> QualityDistributionResponse:
    """Count per rating 1–7; every rating is present."""
    distribution = await service.quality_distribution(owner_id)
    return QualityDistributionResponse(
        distribution=distribution.counts,
        total_records=distribution.total_records,
        most_common=distribution.most_common,
    )


@router.get("/frequency", response_model=FrequencyTrendResponse)
async def get_frequency_trend(
    days: int = Query(30, description="Window size: 7, 14 or 30"),
    owner_id: str = Depends(get_current_owner_id),
    service: StatisticsService = Depends(get_statistics_service),
) -> FrequencyTrendResponse:
    """Contiguous daily series for charting, oldest first."""
    points = await service.frequency_trend(owner_id, days)
    return FrequencyTrendResponse(
        days=days,
        points=[TrendPointResponse.model_validate(p, from_attributes=True) for p in points],
    )


@router.get("/streak", response_model=StreakResponse)
async def get_streak(
    owner_id: str = Depends(get_current_owner_id),
    service: StatisticsService = Depends(get_statistics_service),
) -> StreakResponse:
    streak = await service.streak(owner_id)
    return StreakResponse(
        streak_days=streak, horizon_days=service.config.streak_horizon_days
    )


@router.get("/comparison", response_model=ComparisonResponse)
async def get_comparison(
    owner_id: str = Depends(get_current_owner_id),
    service: StatisticsService = Depends(get_statistics_service),
) -> ComparisonResponse:
    """Last 7 days against the last 30: counts, improvement and trend."""
    comparison = await service.comparison(owner_id)
    return ComparisonResponse.model_validate(comparison, from_attributes=True)
