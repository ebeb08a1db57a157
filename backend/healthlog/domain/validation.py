"""Record field rules.

Both entry points collect every violation before returning so callers can
report all problems at once.
"""

from datetime import datetime

from healthlog.domain.entities.record import (
    NOTES_MAX_LENGTH,
    QUALITY_MAX,
    QUALITY_MIN,
    ensure_utc,
)
from healthlog.domain.exceptions import FieldViolation, ValidationError


def parse_timestamp(value):
    """Return ``value`` as a datetime when it is an ISO 8601 string.

    Anything that does not parse is returned unchanged so the field check can
    report it as a ``type`` violation.
    """
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return value
    return value


def _check_occurred_at(value, now: datetime) -> list[FieldViolation]:
    if value is None:
        return [FieldViolation("occurred_at", "required", "occurred_at is required")]
    if not isinstance(value, datetime):
        return [FieldViolation("occurred_at", "type", "occurred_at must be a datetime")]
    if ensure_utc(value) > ensure_utc(now):
        return [
            FieldViolation(
                "occurred_at", "future", "occurred_at cannot be in the future"
            )
        ]
    return []


def _check_quality_rating(value) -> list[FieldViolation]:
    if value is None:
        return [
            FieldViolation("quality_rating", "required", "quality_rating is required")
        ]
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        return [
            FieldViolation("quality_rating", "type", "quality_rating must be an integer")
        ]
    if not QUALITY_MIN <= value <= QUALITY_MAX:
        return [
            FieldViolation(
                "quality_rating",
                "range",
                f"quality_rating must be between {QUALITY_MIN} and {QUALITY_MAX}",
            )
        ]
    return []


def _check_notes(value) -> list[FieldViolation]:
    if value is None:
        return []
    if not isinstance(value, str):
        return [FieldViolation("notes", "type", "notes must be a string")]
    if len(value) > NOTES_MAX_LENGTH:
        return [
            FieldViolation(
                "notes",
                "too_long",
                f"notes must be at most {NOTES_MAX_LENGTH} characters",
            )
        ]
    return []


def validate_new_record(
    *,
    occurred_at,
    quality_rating,
    notes,
    now: datetime,
) -> None:
    """Raise ``ValidationError`` if a new record's fields break any rule."""
    violations = [
        *_check_occurred_at(occurred_at, now),
        *_check_quality_rating(quality_rating),
        *_check_notes(notes),
    ]
    if violations:
        raise ValidationError(violations)


def validate_record_patch(changes: dict, *, now: datetime) -> None:
    """Raise ``ValidationError`` if any field present in ``changes`` is invalid.

    Absent fields are not checked. Unknown field names are violations.
    """
    violations: list[FieldViolation] = []
    for name, value in changes.items():
        if name == "occurred_at":
            violations.extend(_check_occurred_at(value, now))
        elif name == "quality_rating":
            violations.extend(_check_quality_rating(value))
        elif name == "notes":
            violations.extend(_check_notes(value))
        else:
            violations.append(
                FieldViolation(name, "immutable", f"{name} cannot be changed")
            )
    if violations:
        raise ValidationError(violations)
