"""Owner-bound query value object.

Every read, update and delete against record storage is described by a
``RecordQuery``. The owner id is its first, mandatory field, so a storage
predicate cannot be built without the owner filter in place.
"""

from dataclasses import dataclass, replace
from datetime import datetime

from .record import ensure_utc


@dataclass(frozen=True)
class RecordQuery:
    owner_id: str
    record_ids: tuple[str, ...] | None = None
    occurred_from: datetime | None = None  # inclusive
    occurred_to: datetime | None = None  # exclusive

    def __post_init__(self) -> None:
        if not isinstance(self.owner_id, str) or not self.owner_id.strip():
            raise ValueError("RecordQuery requires a non-empty owner_id")
        if self.occurred_from is not None:
            object.__setattr__(self, "occurred_from", ensure_utc(self.occurred_from))
        if self.occurred_to is not None:
            object.__setattr__(self, "occurred_to", ensure_utc(self.occurred_to))

    def with_ids(self, record_ids) -> "RecordQuery":
        """Narrow to the given record ids (duplicates collapsed, order kept)."""
        return replace(self, record_ids=tuple(dict.fromkeys(record_ids)))

    def between(
        self,
        occurred_from: datetime | None = None,
        occurred_to: datetime | None = None,
    ) -> "RecordQuery":
        """Narrow to a half-open ``[occurred_from, occurred_to)`` time range."""
        return replace(self, occurred_from=occurred_from, occurred_to=occurred_to)

    def matches(self, record) -> bool:
        """Evaluate the query against an in-memory record."""
        if record.owner_id != self.owner_id:
            return False
        if self.record_ids is not None and record.id not in self.record_ids:
            return False
        if self.occurred_from is not None and record.occurred_at < self.occurred_from:
            return False
        if self.occurred_to is not None and record.occurred_at >= self.occurred_to:
            return False
        return True
