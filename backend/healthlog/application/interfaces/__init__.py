from .record_repository import RecordRepository, SORT_FIELDS

__all__ = [
    "RecordRepository",
    "SORT_FIELDS",
]
