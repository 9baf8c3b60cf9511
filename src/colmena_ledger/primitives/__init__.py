"""Primitives: exceptions, ID generation, lockable resources."""

from __future__ import annotations

from .exceptions import (
    AuthorizationError,
    ColmenaError,
    ConcurrencyError,
    DomainError,
    EntityNotFoundError,
    InfrastructureError,
    InvariantViolationError,
    LockAcquisitionError,
    NotFoundError,
    OptimisticLockingError,
    PersistenceError,
    ValidationError,
    WorkflowError,
)
from .id_generator import IIDGenerator, UUID4Generator
from .locking import ResourceIdentifier

__all__ = [
    "AuthorizationError",
    "ColmenaError",
    "ConcurrencyError",
    "DomainError",
    "EntityNotFoundError",
    "IIDGenerator",
    "InfrastructureError",
    "InvariantViolationError",
    "LockAcquisitionError",
    "NotFoundError",
    "OptimisticLockingError",
    "PersistenceError",
    "ResourceIdentifier",
    "UUID4Generator",
    "ValidationError",
    "WorkflowError",
]
