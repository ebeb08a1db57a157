from .record import Record, QUALITY_MIN, QUALITY_MAX, NOTES_MAX_LENGTH
from .record_query import RecordQuery
from .page import Page
from .statistics import (
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

__all__ = [
    "Record",
    "QUALITY_MIN",
    "QUALITY_MAX",
    "NOTES_MAX_LENGTH",
    "RecordQuery",
    "Page",
    "ActivityComparison",
    "ActivityTrend",
    "BucketPeriod",
    "DailyBucket",
    "DailySummary",
    "PeriodBucket",
    "PeriodSummary",
    "QualityDistribution",
    "TrendPoint",
]
