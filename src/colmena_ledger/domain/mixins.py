"""Reusable domain mixins."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditableMixin(BaseModel):
    """Mixin that adds created_at / updated_at timestamps.

    **No soft-delete fields.** Ledger records are either live or hard-deleted
    by compensation; lifecycle is carried by explicit status enums.
    """

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def touch(self) -> None:
        """Update the ``updated_at`` timestamp to *now*."""
        object.__setattr__(self, "updated_at", utcnow())
