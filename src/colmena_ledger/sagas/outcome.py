"""Explicit workflow results: success carries the Transaction, failure the cause."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, NoReturn, Union

from ..primitives.exceptions import WorkflowError

if TYPE_CHECKING:
    from ..domain.models import Transaction
    from .state import WorkflowReport


@dataclass(frozen=True)
class WorkflowSuccess:
    transaction: Transaction
    report: WorkflowReport

    ok: ClassVar[bool] = True

    def unwrap(self) -> Transaction:
        return self.transaction


@dataclass(frozen=True)
class WorkflowFailure:
    """
    A run that did not complete.

    ``report.status`` tells whether compensation fully succeeded
    (``COMPENSATED``), partially failed (``FAILED`` with
    ``failed_compensations``), or was never needed (``FAILED`` with no
    transaction id: nothing was written).
    """

    error: Exception
    report: WorkflowReport

    ok: ClassVar[bool] = False

    def unwrap(self) -> NoReturn:
        """Raise the precondition error as-is, or a ``WorkflowError`` after compensation."""
        if not self.report.transaction_created:
            raise self.error
        raise WorkflowError(self.report.workflow, self.error, self.report) from self.error


WorkflowOutcome = Union[WorkflowSuccess, WorkflowFailure]
