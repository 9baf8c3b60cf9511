"""Specification pattern primitives and the ledger's query specifications."""

from __future__ import annotations

from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from .aggregate import AggregateRoot
from .models import Container, TransactionDetail
from .status import ContainerStatus

T = TypeVar("T", contravariant=True, bound=AggregateRoot[Any])


@runtime_checkable
class ISpecification(Protocol, Generic[T]):
    """
    Protocol for the Specification pattern.
    Used as the ``filter`` argument of store ``find`` calls.
    """

    def is_satisfied_by(self, candidate: T) -> bool:
        """Check the rule against one record (in-memory filtering)."""
        ...

    def to_dict(self) -> dict[str, Any]:
        """Serialisable form of the criteria, for store drivers."""
        ...


class DetailsOfTransaction(ISpecification[TransactionDetail]):
    """Detail rows belonging to one transaction."""

    def __init__(self, transaction_id: str) -> None:
        self.transaction_id = transaction_id

    def is_satisfied_by(self, candidate: TransactionDetail) -> bool:
        return candidate.transaction_id == self.transaction_id

    def to_dict(self) -> dict[str, Any]:
        return {"transaction_id": self.transaction_id}


class DetailsOfContainer(ISpecification[TransactionDetail]):
    """Every detail row that ever touched one container."""

    def __init__(self, container_id: str) -> None:
        self.container_id = container_id

    def is_satisfied_by(self, candidate: TransactionDetail) -> bool:
        return candidate.container_id == self.container_id

    def to_dict(self) -> dict[str, Any]:
        return {"container_id": self.container_id}


class ContainersInBatch(ISpecification[Container]):
    """Containers created by one recover transaction (same batch number)."""

    def __init__(self, batch_number: int, status: ContainerStatus | None = None) -> None:
        self.batch_number = batch_number
        self.status = status

    def is_satisfied_by(self, candidate: Container) -> bool:
        if candidate.batch_number != self.batch_number:
            return False
        return self.status is None or candidate.status == self.status

    def to_dict(self) -> dict[str, Any]:
        criteria: dict[str, Any] = {"batch_number": self.batch_number}
        if self.status is not None:
            criteria["status"] = self.status.value
        return criteria
