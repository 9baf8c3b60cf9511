"""Workflow precondition rules."""

from __future__ import annotations

from .result import ValidationResult
from .rules import (
    ensure_pending,
    ensure_transferable,
    ensure_transportable,
    is_transferable,
    is_transportable,
    require_containers,
    require_recipient,
    validate_distinct_parties,
    validate_register_input,
    validate_transfer_accept_reject,
    validate_transfer_cancel,
)

__all__ = [
    "ValidationResult",
    "ensure_pending",
    "ensure_transferable",
    "ensure_transportable",
    "is_transferable",
    "is_transportable",
    "require_containers",
    "require_recipient",
    "validate_distinct_parties",
    "validate_register_input",
    "validate_transfer_accept_reject",
    "validate_transfer_cancel",
]
