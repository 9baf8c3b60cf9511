"""Per-run workflow context: collaborators, scopes and compensating mutations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any, TypeVar

from ..domain.models import AuthScope, Container, Transaction, TransactionDetail
from .compensation import CompensationPlan

if TYPE_CHECKING:
    from ..config import LedgerConfig
    from ..domain.models import Actor, WasteType
    from ..domain.status import ContainerStatus, TransactionType
    from ..ports import (
        IContainerRegistry,
        ILedgerStore,
        INotifier,
        IPermissionGrants,
        IRecyclingCenterDirectory,
        ISequenceGenerator,
        IStockLedger,
        ITransportAuthorizer,
        IUserDirectory,
        IWasteTypeCatalog,
    )
    from ..primitives.id_generator import IIDGenerator
    from .state import WorkflowReport

logger = logging.getLogger("colmena.sagas")

T = TypeVar("T")


@dataclass(frozen=True)
class Collaborators:
    """Every external capability a workflow may call."""

    ledger: ILedgerStore
    containers: IContainerRegistry
    stock: IStockLedger
    grants: IPermissionGrants
    notifier: INotifier
    transport_authorizer: ITransportAuthorizer
    sequence: ISequenceGenerator
    waste_types: IWasteTypeCatalog
    users: IUserDirectory
    recycling_centers: IRecyclingCenterDirectory


class WorkflowContext:
    """
    State shared by the stages of one workflow run.

    Every mutating helper performs one store call with the actor's scope and,
    once it succeeded, pushes the matching undo step onto ``plan``. Undo steps
    run with the master scope: by the time they execute, the actor may no
    longer see the records (e.g. a revoked grant).
    """

    def __init__(
        self,
        ports: Collaborators,
        config: LedgerConfig,
        actor: Actor,
        report: WorkflowReport,
        id_generator: IIDGenerator,
    ) -> None:
        self.ports = ports
        self.config = config
        self.actor = actor
        self.report = report
        self.id_generator = id_generator
        self.scope = AuthScope.for_actor(actor)
        self.master = AuthScope.elevated()
        self.plan = CompensationPlan()
        self.transaction: Transaction | None = None

    async def gather(self, aws: Iterable[Awaitable[T]], *, step: str | None = None) -> list[T]:
        """Run *aws* concurrently and wait for all of them to settle.

        The first error is re-raised only after every sibling finished, so the
        plan holds an undo step for each mutation that did go through.
        """
        results: list[Any] = await asyncio.gather(*aws, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        if step is not None:
            self.report.record_step(step, count=len(results))
        return results

    # ── Transactions ─────────────────────────────────────────────────

    async def create_transaction(
        self, transaction_type: TransactionType, **fields: Any
    ) -> Transaction:
        number = await self.ports.sequence.next_sequence_number("Transaction")
        transaction = Transaction(
            id_generator=self.id_generator,
            type=transaction_type,
            number=number,
            **fields,
        )
        await self.ports.ledger.save_transaction(transaction, self.scope)
        self.transaction = transaction
        self.report.transaction_id = transaction.id
        self.plan.push(
            f"destroy Transaction {transaction.id}",
            partial(self.ports.ledger.destroy_transaction, transaction, self.master),
        )
        self.report.record_step("transaction_created", number=number)
        logger.debug("Created %s transaction %s (#%d)", transaction_type.value, transaction.id, number)
        return transaction

    async def expire(self, request: Transaction) -> None:
        """Consume a transfer request."""
        request.expire()
        await self.ports.ledger.save_transaction(request, self.scope)
        self.plan.push(
            f"reopen Transaction {request.id}", partial(self._reopen, request.id)
        )
        self.report.record_step("request_expired", request=request.id)

    async def _reopen(self, transaction_id: str) -> None:
        request = await self.ports.ledger.get_transaction(transaction_id, self.master)
        request.reopen()
        await self.ports.ledger.save_transaction(request, self.master)

    async def create_detail(
        self, transaction: Transaction, container: Container, **fields: Any
    ) -> TransactionDetail:
        detail = TransactionDetail.for_container(
            transaction, container, id_generator=self.id_generator, **fields
        )
        await self.ports.ledger.save_detail(detail, self.scope)
        if self.config.purge_created_records:
            self.plan.push(
                f"destroy TransactionDetail {detail.id}",
                partial(self.ports.ledger.destroy_detail, detail, self.master),
            )
        return detail

    # ── Containers ───────────────────────────────────────────────────

    async def create_container(self, waste_type: WasteType, batch_number: int) -> Container:
        container = Container(
            id_generator=self.id_generator,
            waste_type=waste_type,
            created_by=self.actor.id,
            batch_number=batch_number,
        )
        await self.ports.containers.save(container, self.scope)
        if self.config.purge_created_records:
            self.plan.push(
                f"destroy Container {container.id}",
                partial(self.ports.containers.destroy, container, self.master),
            )
        return container

    async def flip(self, container: Container, target: ContainerStatus) -> Container:
        """Move *container* to *target* and persist it."""
        previous = container.transition_to(target)
        await self.ports.containers.save(container, self.scope)
        self.plan.push(
            f"restore Container {container.id} to {previous.value}",
            partial(self._restore, container.id, previous),
        )
        return container

    async def _restore(self, container_id: str, status: ContainerStatus) -> None:
        container = await self.ports.containers.get(container_id, self.master)
        container.transition_to(status, compensating=True)
        await self.ports.containers.save(container, self.master)

    # ── Grants ───────────────────────────────────────────────────────

    async def grant(self, entity_type: str, entity_id: str, user_id: str) -> bool:
        """Grant read/write unless already held. Returns whether a grant was issued."""
        grants = self.ports.grants
        if await grants.has_read_write(entity_type, entity_id, user_id):
            return False
        await grants.grant_read_write(entity_type, entity_id, user_id)
        self.plan.push(
            f"revoke {user_id} on {entity_type} {entity_id}",
            partial(grants.revoke_read_write, entity_type, entity_id, user_id),
        )
        return True

    async def revoke(self, entity_type: str, entity_id: str, user_id: str) -> None:
        grants = self.ports.grants
        if not await grants.has_read_write(entity_type, entity_id, user_id):
            return
        await grants.revoke_read_write(entity_type, entity_id, user_id)
        self.plan.push(
            f"grant {user_id} on {entity_type} {entity_id}",
            partial(grants.grant_read_write, entity_type, entity_id, user_id),
        )

    # ── Stock ────────────────────────────────────────────────────────

    async def move_stock(
        self, waste_type: WasteType, from_user: str, to_user: str, qty: int
    ) -> None:
        stock = self.ports.stock
        await stock.move_stock(waste_type, from_user, to_user, qty)
        self.plan.push(
            f"move {qty} {waste_type.id} back from {to_user} to {from_user}",
            partial(stock.move_stock, waste_type, to_user, from_user, qty),
        )
