"""Ledger records and the value objects they reference."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from ..primitives.exceptions import InvariantViolationError
from .aggregate import AggregateRoot
from .mixins import AuditableMixin, utcnow
from .status import ContainerStatus, TransactionType, is_allowed
from .value_object import ValueObject

# ── Value objects ────────────────────────────────────────────────────


class Actor(ValueObject):
    """The user a workflow acts on behalf of."""

    id: str
    session_token: str | None = None


class AuthScope(ValueObject):
    """Credential a store call is made with: a user session or master."""

    user_id: str | None = None
    session_token: str | None = None
    master: bool = False

    @classmethod
    def for_actor(cls, actor: Actor) -> AuthScope:
        return cls(user_id=actor.id, session_token=actor.session_token)

    @classmethod
    def elevated(cls) -> AuthScope:
        return cls(master=True)

    def can_see(self, *user_ids: str | None) -> bool:
        """True for master, or when the scoped user is one of *user_ids*."""
        return self.master or (self.user_id is not None and self.user_id in user_ids)


class WasteType(ValueObject):
    """A kind of waste, and the quantity/unit a single container holds."""

    id: str
    name: str
    qty: Decimal = Decimal("1")
    unit: str = "kg"


class RecyclingCenter(ValueObject):
    id: str
    name: str


class RecoverItem(ValueObject):
    """One input line of a recover request: N containers of a waste type."""

    type_id: str
    qty: int = Field(gt=0)


# ── Records ──────────────────────────────────────────────────────────


class TransactionDetail(AuditableMixin, AggregateRoot[str]):
    """Line item linking one Transaction to one affected Container."""

    transaction_id: str
    container_id: str
    qty: Decimal
    unit: str
    # Set on TRANSFER_REQUEST rows whose recipient got a new grant on the container.
    grant_issued: bool = False

    @classmethod
    def for_container(cls, transaction: Transaction, container: Container, **kw: object) -> TransactionDetail:
        return cls(
            transaction_id=transaction.id,
            container_id=container.id,
            qty=container.waste_type.qty,
            unit=container.waste_type.unit,
            **kw,
        )


class Transaction(AuditableMixin, AggregateRoot[str]):
    """Immutable ledger entry for one workflow invocation.

    ``details`` is only filled on the value a workflow returns; stores do
    not persist it with the record.
    """

    type: TransactionType
    from_: str | None = Field(default=None, alias="from")
    to: str | None = None
    number: int
    recycling_center: str | None = None
    reason: str | None = None
    related_to: str | None = None
    expired_at: datetime | None = None
    details: list[TransactionDetail] = Field(default_factory=list, exclude=True)

    def expire(self, at: datetime | None = None) -> None:
        if self.expired_at is not None:
            raise InvariantViolationError(
                f"Transaction {self.id} already expired at {self.expired_at}"
            )
        self.expired_at = at or utcnow()
        self.touch()

    def reopen(self) -> None:
        """Clear ``expired_at``; only used to compensate a failed consumer."""
        self.expired_at = None
        self.touch()


class Container(AuditableMixin, AggregateRoot[str]):
    """A physical unit of waste tracked through its status lifecycle."""

    waste_type: WasteType
    status: ContainerStatus = ContainerStatus.RECOVERED
    created_by: str
    batch_number: int

    def transition_to(self, target: ContainerStatus, *, compensating: bool = False) -> ContainerStatus:
        """Move to *target*, returning the previous status.

        Raises:
            InvariantViolationError: If the state machine forbids the edge.
        """
        previous = self.status
        if not is_allowed(previous, target, compensating=compensating):
            raise InvariantViolationError(
                f"Container {self.id} cannot move from {previous.value} to {target.value}"
            )
        self.status = target
        self.touch()
        return previous


class StockCounter(AuditableMixin, AggregateRoot[str]):
    """Per (user, waste type) tally. Never negative."""

    user_id: str
    waste_type_id: str
    amount: int = Field(default=0, ge=0)
