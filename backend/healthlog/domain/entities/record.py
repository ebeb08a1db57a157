"""Domain entity — a single timestamped, quality-rated health event."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

QUALITY_MIN = 1
QUALITY_MAX = 7
NOTES_MAX_LENGTH = 500

# Fields an owner may change after creation.
MUTABLE_FIELDS = ("occurred_at", "quality_rating", "notes")


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class Record:
    """Core domain entity for one logged event.

    ``owner_id`` and ``id`` are fixed at creation; only the fields listed in
    ``MUTABLE_FIELDS`` can change afterwards.
    """

    owner_id: str
    occurred_at: datetime
    quality_rating: int
    notes: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        self.occurred_at = ensure_utc(self.occurred_at)
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)

    def apply_changes(self, changes: dict, *, now: datetime | None = None) -> None:
        """Apply already-validated field changes and refresh ``updated_at``."""
        frozen = set(changes) - set(MUTABLE_FIELDS)
        if frozen:
            raise ValueError(f"Fields cannot be changed: {', '.join(sorted(frozen))}")
        for name, value in changes.items():
            if name == "occurred_at":
                value = ensure_utc(value)
            setattr(self, name, value)
        self.updated_at = ensure_utc(now) if now else datetime.now(timezone.utc)
