from .record import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    ListParams,
    PaginationResponse,
    PurgeResponse,
    RecordCreate,
    RecordListResponse,
    RecordResponse,
    RecordUpdate,
)
from .stats import (
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

__all__ = [
    "BulkDeleteRequest",
    "BulkDeleteResponse",
    "ListParams",
    "PaginationResponse",
    "PurgeResponse",
    "RecordCreate",
    "RecordListResponse",
    "RecordResponse",
    "RecordUpdate",
    "ComparisonResponse",
    "DailyBucketResponse",
    "DailyStatsResponse",
    "DailySummaryResponse",
    "FrequencyTrendResponse",
    "OverviewResponse",
    "PeriodBucketResponse",
    "PeriodStatsResponse",
    "QualityDistributionResponse",
    "StreakResponse",
    "TrendPointResponse",
]
