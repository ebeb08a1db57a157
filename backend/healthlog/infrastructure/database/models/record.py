"""SQLAlchemy ORM model for the Record entity."""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from healthlog.infrastructure.database.base import Base


class RecordModel(Base):
    """ORM model — maps to the 'health_records' table."""

    __tablename__ = "health_records"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    quality_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint(
            "quality_rating BETWEEN 1 AND 7", name="ck_health_records_quality_range"
        ),
        CheckConstraint(
            "notes IS NULL OR length(notes) <= 500", name="ck_health_records_notes_length"
        ),
        Index("ix_health_records_owner_occurred", "owner_id", "occurred_at"),
    )

    def __repr__(self) -> str:
        return f"<RecordModel(id={self.id}, owner='{self.owner_id}')>"
