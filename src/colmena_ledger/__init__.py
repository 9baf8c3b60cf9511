"""colmena-ledger: waste container ledger with compensating workflows."""

from __future__ import annotations

from .config import LedgerConfig
from .domain import (
    Actor,
    AuthScope,
    Container,
    ContainerStatus,
    RecoverItem,
    RecyclingCenter,
    StockCounter,
    Transaction,
    TransactionDetail,
    TransactionType,
    WasteType,
)
from .primitives.exceptions import (
    AuthorizationError,
    ColmenaError,
    ConcurrencyError,
    DomainError,
    EntityNotFoundError,
    InvariantViolationError,
    LockAcquisitionError,
    NotFoundError,
    OptimisticLockingError,
    ValidationError,
    WorkflowError,
)
from .sagas import (
    Collaborators,
    SagaCoordinator,
    WorkflowFailure,
    WorkflowOutcome,
    WorkflowReport,
    WorkflowStatus,
    WorkflowSuccess,
)

__all__ = [
    "Actor",
    "AuthScope",
    "AuthorizationError",
    "Collaborators",
    "ColmenaError",
    "ConcurrencyError",
    "Container",
    "ContainerStatus",
    "DomainError",
    "EntityNotFoundError",
    "InvariantViolationError",
    "LedgerConfig",
    "LockAcquisitionError",
    "NotFoundError",
    "OptimisticLockingError",
    "RecoverItem",
    "RecyclingCenter",
    "SagaCoordinator",
    "StockCounter",
    "Transaction",
    "TransactionDetail",
    "TransactionType",
    "ValidationError",
    "WasteType",
    "WorkflowError",
    "WorkflowFailure",
    "WorkflowOutcome",
    "WorkflowReport",
    "WorkflowStatus",
    "WorkflowSuccess",
]
