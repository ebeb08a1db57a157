"""Domain-specific exceptions — framework-independent."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldViolation:
    """A single broken rule on a single input field."""

    field: str
    code: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "code": self.code, "message": self.message}


class ValidationError(Exception):
    """Raised when input breaks one or more record rules.

    Carries every violation found, not only the first one.
    """

    def __init__(self, violations: list[FieldViolation]):
        self.violations = list(violations)
        fields = ", ".join(v.field for v in self.violations)
        super().__init__(f"Validation failed for: {fields}")

    def to_dict(self) -> dict:
        return {
            "message": "Validation failed",
            "errors": [v.to_dict() for v in self.violations],
        }


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist for the caller.

    Raised for absent entities and for entities owned by someone else alike.
    """

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class StorageError(Exception):
    """Raised when the persistence layer fails.

    The message is generic; the underlying driver error is chained as
    ``__cause__`` for logging only.
    """

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Storage operation '{operation}' failed")


class ConfigurationError(Exception):
    """Raised at startup when statistics settings are unusable."""

    def __init__(self, setting: str, message: str):
        self.setting = setting
        self.message = message
        super().__init__(f"Invalid setting '{setting}': {message}")
