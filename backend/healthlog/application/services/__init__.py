from .record_store import OwnerScopedStore
from .record_service import RecordService
from .statistics_service import DailyStats, StatisticsService

__all__ = [
    "OwnerScopedStore",
    "RecordService",
    "DailyStats",
    "StatisticsService",
]
