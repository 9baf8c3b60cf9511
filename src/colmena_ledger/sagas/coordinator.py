"""SagaCoordinator: runs ledger workflows with locking, compensation and reporting."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from ..config import LedgerConfig
from ..correlation import generate_correlation_id, get_correlation_id, set_correlation_id
from ..domain.models import AuthScope
from ..domain.specification import DetailsOfTransaction
from ..instrumentation import HookRegistry
from ..primitives.exceptions import LockAcquisitionError
from ..primitives.id_generator import UUID4Generator
from .context import Collaborators, WorkflowContext
from .outcome import WorkflowFailure, WorkflowOutcome, WorkflowSuccess
from .state import WorkflowReport
from .workflows import (
    RecoverWorkflow,
    TransferAcceptWorkflow,
    TransferCancelWorkflow,
    TransferRejectWorkflow,
    TransferRequestWorkflow,
    TransportWorkflow,
    Workflow,
)

if TYPE_CHECKING:
    from ..domain.models import Actor, RecoverItem, Transaction
    from ..ports.locking import ILockStrategy
    from ..primitives.id_generator import IIDGenerator
    from ..primitives.locking import ResourceIdentifier

logger = logging.getLogger("colmena.sagas")


class SagaCoordinator:
    """
    Entry point for every ledger mutation.

    Each ``register_*`` call runs one workflow through the same template:
    lock (optional) -> prepare -> create Transaction -> apply -> notify.
    Errors raised before the Transaction exists propagate unchanged.
    Errors raised afterwards trigger the workflow's compensation plan and
    surface as :class:`~colmena_ledger.primitives.exceptions.WorkflowError`.

    Use :meth:`execute` directly to get a
    :data:`~colmena_ledger.sagas.outcome.WorkflowOutcome` instead of an
    exception.

    Usage::

        coordinator = SagaCoordinator(collaborators, config=LedgerConfig())
        transaction = await coordinator.register_recover(
            [RecoverItem(type_id="plastic", qty=2)], actor
        )
    """

    def __init__(
        self,
        collaborators: Collaborators,
        *,
        config: LedgerConfig | None = None,
        lock_strategy: ILockStrategy | None = None,
        id_generator: IIDGenerator | None = None,
        hooks: HookRegistry | None = None,
    ) -> None:
        self.collaborators = collaborators
        self.config = config or LedgerConfig()
        self.lock_strategy = lock_strategy
        self.id_generator = id_generator or UUID4Generator()
        self.hooks = hooks or HookRegistry()

    # ── Workflows ────────────────────────────────────────────────────

    async def register_recover(self, items: Sequence[RecoverItem], actor: Actor) -> Transaction:
        outcome = await self.execute(RecoverWorkflow(items, actor))
        return outcome.unwrap()

    async def register_transfer_request(
        self, container_ids: Sequence[str], to: str | None, actor: Actor
    ) -> Transaction:
        outcome = await self.execute(TransferRequestWorkflow(container_ids, to, actor))
        return outcome.unwrap()

    async def register_transfer_accept(self, transaction_id: str, actor: Actor) -> Transaction:
        outcome = await self.execute(TransferAcceptWorkflow(transaction_id, actor))
        return outcome.unwrap()

    async def register_transfer_reject(
        self, transaction_id: str, reason: str | None, actor: Actor
    ) -> Transaction:
        outcome = await self.execute(TransferRejectWorkflow(transaction_id, reason, actor))
        return outcome.unwrap()

    async def register_transfer_cancel(self, transaction_id: str, actor: Actor) -> Transaction:
        outcome = await self.execute(TransferCancelWorkflow(transaction_id, actor))
        return outcome.unwrap()

    async def register_transport(
        self, container_ids: Sequence[str], to: str | None, actor: Actor
    ) -> Transaction:
        outcome = await self.execute(TransportWorkflow(container_ids, to, actor))
        return outcome.unwrap()

    # ── Queries ──────────────────────────────────────────────────────

    async def find_transaction_with_details(
        self, transaction_id: str, actor: Actor, *, master: bool = False
    ) -> Transaction:
        """Load a transaction visible to *actor* (or any, with *master*) and its details."""
        scope = AuthScope.elevated() if master else AuthScope.for_actor(actor)
        ledger = self.collaborators.ledger
        transaction = await ledger.get_transaction(transaction_id, scope)
        transaction.details = await ledger.find_details(
            DetailsOfTransaction(transaction.id), scope
        )
        return transaction

    # ── Template ─────────────────────────────────────────────────────

    async def execute(self, workflow: Workflow) -> WorkflowOutcome:
        """Run *workflow* and return its outcome; never raises for workflow errors."""
        inherited = get_correlation_id()
        correlation_id = inherited or generate_correlation_id()

        report = WorkflowReport(
            id_generator=self.id_generator,
            workflow=workflow.name,
            actor_id=workflow.actor.id,
            correlation_id=correlation_id,
        )
        attributes = {
            "workflow": workflow.name,
            "actor_id": workflow.actor.id,
            "correlation_id": correlation_id,
        }

        async def handler() -> WorkflowOutcome:
            return await self._run(workflow, report)

        set_correlation_id(correlation_id)
        try:
            outcome: WorkflowOutcome = await self.hooks.execute_all(
                f"workflow.{workflow.name}", attributes, handler
            )
        finally:
            set_correlation_id(inherited)
        return outcome

    async def _run(self, workflow: Workflow, report: WorkflowReport) -> WorkflowOutcome:
        ctx = WorkflowContext(
            self.collaborators, self.config, workflow.actor, report, self.id_generator
        )
        logger.info("Workflow %s started by %s", workflow.name, workflow.actor.id)

        try:
            async with self._locked(workflow.lock_resources(), report.id):
                try:
                    transaction = await workflow.run(ctx)
                except Exception as exc:  # noqa: BLE001
                    return await self._fail(ctx, exc)
        except LockAcquisitionError as exc:
            report.fail(exc)
            logger.warning("Workflow %s could not lock its records: %s", workflow.name, exc)
            return WorkflowFailure(exc, report)

        report.complete()
        logger.info(
            "Workflow %s completed: transaction %s (#%d, %d details)",
            workflow.name,
            transaction.id,
            transaction.number,
            len(transaction.details),
        )
        await self._notify(workflow, ctx, transaction)
        return WorkflowSuccess(transaction, report)

    async def _fail(self, ctx: WorkflowContext, exc: Exception) -> WorkflowFailure:
        report = ctx.report
        report.fail(exc)
        if not report.transaction_created:
            logger.info("Workflow %s rejected: %s", report.workflow, exc)
            return WorkflowFailure(exc, report)

        await ctx.plan.execute(report)
        if report.failed_compensations:
            logger.error(
                "Workflow %s left %d uncompensated steps for transaction %s",
                report.workflow,
                len(report.failed_compensations),
                report.transaction_id,
            )
        return WorkflowFailure(exc, report)

    async def _notify(
        self, workflow: Workflow, ctx: WorkflowContext, transaction: Transaction
    ) -> None:
        if not self.config.notify:
            return
        try:
            await workflow.notify(ctx, transaction)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Notification for %s %s failed: %s", workflow.name, transaction.id, exc
            )

    @asynccontextmanager
    async def _locked(
        self, resources: Sequence[ResourceIdentifier], session_id: str
    ) -> AsyncIterator[None]:
        """Hold write locks on *resources*, acquired in sorted order."""
        if self.lock_strategy is None or not resources:
            yield
            return

        held: list[tuple[ResourceIdentifier, str]] = []
        try:
            for resource in sorted(resources):
                token = await self.lock_strategy.acquire(
                    resource,
                    timeout=self.config.lock_timeout,
                    ttl=self.config.lock_ttl,
                    session_id=session_id,
                )
                held.append((resource, token))
            yield
        finally:
            for resource, token in reversed(held):
                await self.lock_strategy.release(resource, token)
