"""Compensation plan: the undo steps a running workflow has accumulated."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from ..domain.mixins import utcnow
from .state import FailedCompensation, WorkflowReport, WorkflowStatus

logger = logging.getLogger("colmena.sagas")

CompensationAction = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class CompensationStep:
    """One undo action, pushed right after its forward mutation succeeded."""

    description: str
    action: CompensationAction

    async def __call__(self) -> None:
        await self.action()


class CompensationPlan:
    """
    LIFO stack of :class:`CompensationStep`.

    ``execute`` pops and runs every step even when earlier ones raise.
    Failures are logged at ERROR and appended to the report's
    ``failed_compensations``; they never replace the error that triggered
    compensation.
    """

    def __init__(self) -> None:
        self._steps: list[CompensationStep] = []

    def push(self, description: str, action: CompensationAction) -> None:
        """Push a compensating action onto the LIFO stack."""
        self._steps.append(CompensationStep(description, action))

    def __len__(self) -> int:
        return len(self._steps)

    async def execute(self, report: WorkflowReport) -> None:
        """
        Pop and execute compensating steps in LIFO order.

        On completion the report moves to ``COMPENSATED`` if all steps
        succeeded, or ``FAILED`` if any raised.
        """
        report.status = WorkflowStatus.COMPENSATING
        report.touch()
        logger.warning(
            "Compensating %s %s (%d steps): %s",
            report.workflow,
            report.transaction_id,
            len(self._steps),
            report.error,
        )

        has_failures = False
        while self._steps:
            step = self._steps.pop()
            try:
                await step()
            except Exception as exc:  # noqa: BLE001
                has_failures = True
                logger.error(
                    "Failed to execute compensation %r for %s %s: %s",
                    step.description,
                    report.workflow,
                    report.transaction_id,
                    exc,
                )
                report.failed_compensations.append(
                    FailedCompensation(
                        description=step.description,
                        error=str(exc) or type(exc).__name__,
                        failed_at=utcnow(),
                    )
                )
            else:
                report.compensated_steps.append(step.description)

        report.status = WorkflowStatus.FAILED if has_failures else WorkflowStatus.COMPENSATED
        report.touch()
