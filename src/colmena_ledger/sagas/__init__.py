"""Saga coordinator, workflows and compensation."""

from __future__ import annotations

from .compensation import CompensationPlan, CompensationStep
from .context import Collaborators, WorkflowContext
from .coordinator import SagaCoordinator
from .outcome import WorkflowFailure, WorkflowOutcome, WorkflowSuccess
from .state import FailedCompensation, StepRecord, WorkflowReport, WorkflowStatus
from .workflows import (
    RecoverWorkflow,
    TransferAcceptWorkflow,
    TransferCancelWorkflow,
    TransferRejectWorkflow,
    TransferRequestWorkflow,
    TransportWorkflow,
    Workflow,
)

__all__ = [
    "Collaborators",
    "CompensationPlan",
    "CompensationStep",
    "FailedCompensation",
    "RecoverWorkflow",
    "SagaCoordinator",
    "StepRecord",
    "TransferAcceptWorkflow",
    "TransferCancelWorkflow",
    "TransferRejectWorkflow",
    "TransferRequestWorkflow",
    "TransportWorkflow",
    "Workflow",
    "WorkflowContext",
    "WorkflowFailure",
    "WorkflowOutcome",
    "WorkflowReport",
    "WorkflowStatus",
    "WorkflowSuccess",
]
