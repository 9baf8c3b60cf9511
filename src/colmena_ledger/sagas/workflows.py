"""The six ledger workflows.

Each workflow is a single-use object: ``prepare`` validates and reads
(no mutation), ``apply`` performs the mutations once the Transaction exists
and returns the detail rows, ``notify`` runs after success. The coordinator
owns the template around them (locks, compensation, reporting).
"""

from __future__ import annotations

import abc
from collections.abc import Sequence
from functools import partial
from typing import TYPE_CHECKING, Any, ClassVar

from ..domain.models import Actor, Container, RecoverItem, Transaction, TransactionDetail
from ..domain.specification import DetailsOfTransaction
from ..domain.status import TransactionType, target_status
from ..primitives.locking import ResourceIdentifier
from ..validation import (
    ensure_pending,
    ensure_transferable,
    ensure_transportable,
    require_containers,
    require_recipient,
    validate_distinct_parties,
    validate_register_input,
    validate_transfer_accept_reject,
    validate_transfer_cancel,
)

if TYPE_CHECKING:
    from ..domain.models import RecyclingCenter, WasteType
    from .context import WorkflowContext


class Workflow(abc.ABC):
    """Base class for a ledger workflow."""

    name: ClassVar[str]
    transaction_type: ClassVar[TransactionType]

    def __init__(self, actor: Actor) -> None:
        self.actor = actor

    def lock_resources(self) -> list[ResourceIdentifier]:
        """Records to lock before ``prepare``; empty means no locking."""
        return []

    @abc.abstractmethod
    async def prepare(self, ctx: WorkflowContext) -> None:
        """Validate input and load everything ``apply`` needs."""

    @abc.abstractmethod
    def transaction_fields(self) -> dict[str, Any]:
        """Fields of the Transaction this workflow records."""

    @abc.abstractmethod
    async def apply(
        self, ctx: WorkflowContext, transaction: Transaction
    ) -> list[TransactionDetail]:
        """Mutate containers, details and side effects. Returns the details."""

    async def notify(self, ctx: WorkflowContext, transaction: Transaction) -> None:  # noqa: B027
        """Best-effort notification after success."""

    async def run(self, ctx: WorkflowContext) -> Transaction:
        await self.prepare(ctx)
        ctx.report.record_step("prepared")
        transaction = await ctx.create_transaction(
            self.transaction_type, **self.transaction_fields()
        )
        transaction.details = await self.apply(ctx, transaction)
        return transaction


# ── Recover ──────────────────────────────────────────────────────────


class RecoverWorkflow(Workflow):
    """Create new containers for the actor and credit their stock."""

    name = "recover"
    transaction_type = TransactionType.RECOVER

    def __init__(self, items: Sequence[RecoverItem], actor: Actor) -> None:
        super().__init__(actor)
        self.items = list(items)
        self.waste_types: dict[str, WasteType] = {}
        self.stock_snapshot: dict[str, int] = {}

    async def prepare(self, ctx: WorkflowContext) -> None:
        validate_register_input(self.items, ctx.config.max_containers_per_request)
        type_ids = [item.type_id for item in self.items]
        self.waste_types, counters = await ctx.gather(
            [
                ctx.ports.waste_types.get_waste_types(type_ids),
                ctx.ports.stock.get_user_stock(self.actor.id),
            ]
        )
        self.stock_snapshot = {
            type_id: counters[type_id].amount if type_id in counters else 0
            for type_id in type_ids
        }

    def transaction_fields(self) -> dict[str, Any]:
        return {"to": self.actor.id}

    async def apply(
        self, ctx: WorkflowContext, transaction: Transaction
    ) -> list[TransactionDetail]:
        containers: list[Container] = await ctx.gather(
            (
                ctx.create_container(self.waste_types[item.type_id], transaction.number)
                for item in self.items
                for _ in range(item.qty)
            ),
            step="containers_created",
        )
        details = await ctx.gather(
            (ctx.create_detail(transaction, container) for container in containers),
            step="details_created",
        )

        stock = ctx.ports.stock
        ctx.plan.push(
            f"restore stock of {self.actor.id}",
            partial(stock.restore_stock, self.actor.id, dict(self.stock_snapshot)),
        )
        await ctx.gather(
            (
                stock.increment_stock(self.waste_types[item.type_id], self.actor.id, item.qty)
                for item in self.items
            ),
            step="stock_incremented",
        )
        return details


# ── Transfer request ─────────────────────────────────────────────────


class TransferRequestWorkflow(Workflow):
    """Offer RECOVERED containers to another user."""

    name = "transfer_request"
    transaction_type = TransactionType.TRANSFER_REQUEST

    def __init__(self, container_ids: Sequence[str], to: str | None, actor: Actor) -> None:
        super().__init__(actor)
        self.container_ids = list(container_ids)
        self.to = to
        self.recipient = ""
        self.containers: list[Container] = []

    def lock_resources(self) -> list[ResourceIdentifier]:
        return ResourceIdentifier.containers(self.container_ids)

    async def prepare(self, ctx: WorkflowContext) -> None:
        to = require_recipient(self.to, "recipient")
        require_containers(self.container_ids)
        validate_distinct_parties(to, self.actor)

        self.recipient = await ctx.ports.users.find_user_by_id(to)
        self.containers = await ctx.gather(
            ctx.ports.containers.get(container_id, ctx.scope)
            for container_id in self.container_ids
        )
        ensure_transferable(self.containers)

    def transaction_fields(self) -> dict[str, Any]:
        return {"from_": self.actor.id, "to": self.recipient}

    async def apply(
        self, ctx: WorkflowContext, transaction: Transaction
    ) -> list[TransactionDetail]:
        await ctx.grant("Transaction", transaction.id, self.recipient)
        issued: list[bool] = await ctx.gather(
            (self._offer(ctx, container) for container in self.containers),
            step="containers_offered",
        )
        return await ctx.gather(
            (
                ctx.create_detail(transaction, container, grant_issued=grant_issued)
                for container, grant_issued in zip(self.containers, issued, strict=True)
            ),
            step="details_created",
        )

    async def _offer(self, ctx: WorkflowContext, container: Container) -> bool:
        grant_issued = await ctx.grant("Container", container.id, self.recipient)
        await ctx.flip(container, target_status(self.transaction_type))
        return grant_issued

    async def notify(self, ctx: WorkflowContext, transaction: Transaction) -> None:
        await ctx.ports.notifier.notify_transfer_request(
            transaction.id, self.actor.id, self.recipient
        )


# ── Accept / reject / cancel ─────────────────────────────────────────


class _RequestResponse(Workflow):
    """Consume a pending TRANSFER_REQUEST and settle its containers."""

    action: ClassVar[str]

    def __init__(self, transaction_id: str, actor: Actor) -> None:
        super().__init__(actor)
        self.transaction_id = transaction_id
        self.request: Transaction | None = None
        self.request_details: list[TransactionDetail] = []
        self.containers: list[Container] = []

    def lock_resources(self) -> list[ResourceIdentifier]:
        return [ResourceIdentifier("Transaction", self.transaction_id)]

    def validate(self, request: Transaction) -> None:
        validate_transfer_accept_reject(request, self.actor)

    async def prepare(self, ctx: WorkflowContext) -> None:
        request = await ctx.ports.ledger.get_transaction(self.transaction_id, ctx.scope)
        self.validate(request)
        self.request_details = await ctx.ports.ledger.find_details(
            DetailsOfTransaction(request.id), ctx.master
        )
        self.containers = await ctx.gather(
            ctx.ports.containers.get(detail.container_id, ctx.master)
            for detail in self.request_details
        )
        ensure_pending(self.containers, self.action)
        self.request = request

    @property
    def pending_request(self) -> Transaction:
        if self.request is None:
            raise RuntimeError(f"{self.name} used before prepare()")
        return self.request

    def transaction_fields(self) -> dict[str, Any]:
        request = self.pending_request
        return {"from_": request.from_, "to": request.to, "related_to": request.id}

    async def apply(
        self, ctx: WorkflowContext, transaction: Transaction
    ) -> list[TransactionDetail]:
        await ctx.expire(self.pending_request)
        await self.settle(ctx)
        return await ctx.gather(
            (ctx.create_detail(transaction, container) for container in self.containers),
            step="details_created",
        )

    async def settle(self, ctx: WorkflowContext) -> None:
        target = target_status(self.transaction_type)
        await ctx.gather(
            (ctx.flip(container, target) for container in self.containers),
            step=f"containers_{target.value.lower()}",
        )


class TransferAcceptWorkflow(_RequestResponse):
    name = "transfer_accept"
    transaction_type = TransactionType.TRANSFER_ACCEPT
    action = "accept"

    async def settle(self, ctx: WorkflowContext) -> None:
        await super().settle(ctx)
        request = self.pending_request
        assert request.from_ is not None and request.to is not None
        await ctx.gather(
            (
                ctx.move_stock(container.waste_type, request.from_, request.to, 1)
                for container in self.containers
            ),
            step="stock_moved",
        )


class TransferRejectWorkflow(_RequestResponse):
    name = "transfer_reject"
    transaction_type = TransactionType.TRANSFER_REJECT
    action = "reject"

    def __init__(self, transaction_id: str, reason: str | None, actor: Actor) -> None:
        super().__init__(transaction_id, actor)
        self.reason = reason

    def transaction_fields(self) -> dict[str, Any]:
        return {**super().transaction_fields(), "reason": self.reason}


class TransferCancelWorkflow(_RequestResponse):
    name = "transfer_cancel"
    transaction_type = TransactionType.TRANSFER_CANCEL
    action = "cancel"

    def validate(self, request: Transaction) -> None:
        validate_transfer_cancel(request, self.actor)

    async def settle(self, ctx: WorkflowContext) -> None:
        request = self.pending_request
        assert request.to is not None
        # Grants the recipient already held before the request stay in place.
        issued = {d.container_id for d in self.request_details if d.grant_issued}
        await ctx.revoke("Transaction", request.id, request.to)
        await ctx.gather(
            (
                self._withdraw(ctx, container, request.to, container.id in issued)
                for container in self.containers
            ),
            step="containers_withdrawn",
        )

    async def _withdraw(
        self, ctx: WorkflowContext, container: Container, recipient: str, revoke: bool
    ) -> None:
        if revoke:
            await ctx.revoke("Container", container.id, recipient)
        await ctx.flip(container, target_status(self.transaction_type))


# ── Transport ────────────────────────────────────────────────────────


class TransportWorkflow(Workflow):
    """Send RECOVERED or TRANSFERRED containers to a recycling center."""

    name = "transport"
    transaction_type = TransactionType.TRANSPORT

    def __init__(self, container_ids: Sequence[str], to: str | None, actor: Actor) -> None:
        super().__init__(actor)
        self.container_ids = list(container_ids)
        self.to = to
        self.center: RecyclingCenter | None = None
        self.containers: list[Container] = []

    def lock_resources(self) -> list[ResourceIdentifier]:
        return ResourceIdentifier.containers(self.container_ids)

    async def prepare(self, ctx: WorkflowContext) -> None:
        to = require_recipient(self.to, "destination")
        require_containers(self.container_ids)

        self.center = await ctx.ports.recycling_centers.find_recycling_center_by_id(to)
        self.containers = await ctx.gather(
            ctx.ports.containers.get(container_id, ctx.scope)
            for container_id in self.container_ids
        )
        ensure_transportable(self.containers)

        authorizer = ctx.ports.transport_authorizer
        await ctx.gather(
            authorizer.can_transport_container(container, self.actor)
            for container in self.containers
        )

    def transaction_fields(self) -> dict[str, Any]:
        assert self.center is not None
        return {"from_": self.actor.id, "to": None, "recycling_center": self.center.id}

    async def apply(
        self, ctx: WorkflowContext, transaction: Transaction
    ) -> list[TransactionDetail]:
        await ctx.gather(
            (
                ctx.flip(container, target_status(self.transaction_type))
                for container in self.containers
            ),
            step="containers_in_transit",
        )
        return await ctx.gather(
            (ctx.create_detail(transaction, container) for container in self.containers),
            step="details_created",
        )

    def owners_to_notify(self) -> list[str]:
        return sorted({c.created_by for c in self.containers} - {self.actor.id})

    async def notify(self, ctx: WorkflowContext, transaction: Transaction) -> None:
        owners = self.owners_to_notify()
        if not owners:
            return
        await ctx.ports.notifier.notify_transport(transaction.id, self.actor.id, owners)
