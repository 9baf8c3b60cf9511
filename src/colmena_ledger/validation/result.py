"""ValidationResult: collects rule violations before raising them together."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..primitives.exceptions import ValidationError


def default_errors_factory() -> dict[str, list[str]]:
    return {}


@dataclass
class ValidationResult:
    """Collects field-level validation errors.

    Usage::

        result = ValidationResult.success()
        result.add_error("items", "Waste Type plastic cannot be duplicated on request.")
        result.raise_if_invalid()
    """

    errors: dict[str, list[str]] = field(default_factory=default_errors_factory)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    # ── Factory methods ──────────────────────────────────────────

    @classmethod
    def success(cls) -> ValidationResult:
        return cls()

    @classmethod
    def failure(cls, errors: dict[str, list[str]]) -> ValidationResult:
        return cls(errors=errors)

    # ── Merging ──────────────────────────────────────────────────

    def merge(self, other: ValidationResult) -> ValidationResult:
        """Merge another result into this one, combining all errors."""
        merged = {name: list(messages) for name, messages in self.errors.items()}
        for field_name, messages in other.errors.items():
            merged.setdefault(field_name, []).extend(messages)
        return ValidationResult(errors=merged)

    def add_error(self, field_name: str, message: str) -> None:
        """Add a single error for *field_name*."""
        self.errors.setdefault(field_name, []).append(message)

    def raise_if_invalid(self) -> None:
        if not self.is_valid:
            raise ValidationError(self.errors)

    def __bool__(self) -> bool:
        return self.is_valid
