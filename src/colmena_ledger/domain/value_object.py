"""Immutable Value Object base class."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Base class for Value Objects.

    Value objects are immutable and compared by value. Actors, auth scopes,
    waste types and recycling centers are value objects: the ledger only
    holds references to records owned by other services.
    """

    model_config = ConfigDict(frozen=True)
