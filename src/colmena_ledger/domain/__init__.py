"""Domain layer: records, value objects, statuses and specifications."""

from __future__ import annotations

from .aggregate import AggregateRoot
from .mixins import AuditableMixin
from .models import (
    Actor,
    AuthScope,
    Container,
    RecoverItem,
    RecyclingCenter,
    StockCounter,
    Transaction,
    TransactionDetail,
    WasteType,
)
from .specification import (
    ContainersInBatch,
    DetailsOfContainer,
    DetailsOfTransaction,
    ISpecification,
)
from .status import ContainerStatus, TransactionType
from .value_object import ValueObject

__all__ = [
    "Actor",
    "AggregateRoot",
    "AuditableMixin",
    "AuthScope",
    "Container",
    "ContainerStatus",
    "ContainersInBatch",
    "DetailsOfContainer",
    "DetailsOfTransaction",
    "ISpecification",
    "RecoverItem",
    "RecyclingCenter",
    "StockCounter",
    "Transaction",
    "TransactionDetail",
    "TransactionType",
    "ValueObject",
    "WasteType",
]
