"""Workflow report: lifecycle, step history and compensation outcome of one run."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..domain.aggregate import AggregateRoot
from ..domain.mixins import AuditableMixin, utcnow


class WorkflowStatus(str, Enum):
    """Possible lifecycle states for a workflow run."""

    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    COMPENSATING = "COMPENSATING"
    COMPENSATED = "COMPENSATED"
    FAILED = "FAILED"


class StepRecord(BaseModel):
    """Immutable record of a single workflow stage."""

    model_config = ConfigDict(frozen=True)

    step_name: str
    occurred_at: datetime = Field(default_factory=utcnow)
    metadata: dict[str, Any] = Field(default_factory=dict)


class FailedCompensation(BaseModel):
    """A compensation step that raised; kept for manual repair."""

    model_config = ConfigDict(frozen=True)

    description: str
    error: str
    failed_at: datetime = Field(default_factory=utcnow)


class WorkflowReport(AuditableMixin, AggregateRoot[str]):
    """
    What happened during one workflow run.

    Returned inside every :class:`~colmena_ledger.sagas.outcome.WorkflowOutcome`
    and attached to :class:`~colmena_ledger.primitives.exceptions.WorkflowError`.
    A report in ``FAILED`` status after compensation means at least one undo
    step raised and the ledger may hold leftovers listed in
    ``failed_compensations``.
    """

    # ── Identity ────────────────────────────────────────────────────
    workflow: str
    actor_id: str
    status: WorkflowStatus = WorkflowStatus.RUNNING
    transaction_id: str | None = None

    # ── Step Tracking ────────────────────────────────────────────────
    current_step: str = "init"
    step_history: list[StepRecord] = Field(default_factory=list)

    # ── Compensation ─────────────────────────────────────────────────
    compensated_steps: list[str] = Field(default_factory=list)
    failed_compensations: list[FailedCompensation] = Field(default_factory=list)

    # ── Error Tracking ──────────────────────────────────────────────
    error: str | None = None

    completed_at: datetime | None = None
    failed_at: datetime | None = None

    # ── Distributed Tracing ──────────────────────────────────────────
    correlation_id: str | None = None

    # ── Helpers ──────────────────────────────────────────────────────

    def record_step(self, step_name: str, **metadata: Any) -> None:
        """Append a step record and update ``current_step``."""
        self.current_step = step_name
        self.step_history.append(StepRecord(step_name=step_name, metadata=metadata))
        self.touch()

    def complete(self) -> None:
        self.status = WorkflowStatus.COMPLETED
        self.completed_at = utcnow()
        self.touch()

    def fail(self, error: BaseException) -> None:
        """Record the error that stopped the run. Status is left to compensation."""
        self.error = str(error) or type(error).__name__
        self.failed_at = utcnow()
        if not self.transaction_created:
            self.status = WorkflowStatus.FAILED
        self.touch()

    @property
    def transaction_created(self) -> bool:
        return self.transaction_id is not None

    @property
    def is_terminal(self) -> bool:
        """Return *True* if the run has reached a final state."""
        return self.status in (
            WorkflowStatus.COMPLETED,
            WorkflowStatus.FAILED,
            WorkflowStatus.COMPENSATED,
        )
