"""Workflow preconditions.

Pure, side-effect-free checks. Each ``validate_*`` / ``ensure_*`` function
raises :class:`ValidationError` on violation; the ``is_*`` predicates only
answer the question.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..domain.models import Actor, Container, RecoverItem, Transaction
from ..domain.status import ContainerStatus, TransactionType, source_statuses
from ..primitives.exceptions import ValidationError
from .result import ValidationResult


def validate_register_input(items: Sequence[RecoverItem], max_per_request: int) -> None:
    """Reject empty requests, duplicated waste types and oversized lines."""
    result = ValidationResult.success()
    if not items:
        result.add_error("items", "At least one waste type is required.")

    seen: set[str] = set()
    for item in items:
        if item.type_id in seen:
            result.add_error(
                "items", f"Waste Type {item.type_id} cannot be duplicated on request."
            )
        seen.add(item.type_id)
        if item.qty > max_per_request:
            result.add_error(
                "items",
                f"Max container quantity per request exceeded for {item.type_id}. "
                f"Current max: {max_per_request}",
            )
    result.raise_if_invalid()


def _check_pending_request(transaction: Transaction) -> ValidationResult:
    result = ValidationResult.success()
    if transaction.type != TransactionType.TRANSFER_REQUEST:
        result.add_error(
            "transaction",
            f"Transaction {transaction.id} is not in "
            f"{TransactionType.TRANSFER_REQUEST.value} status.",
        )
    elif transaction.expired_at is not None:
        result.add_error(
            "transaction",
            f"Transaction {transaction.id} expired at {transaction.expired_at.isoformat()}.",
        )
    return result


def validate_transfer_accept_reject(transaction: Transaction, requester: Actor) -> None:
    """A live TRANSFER_REQUEST addressed to *requester*."""
    result = _check_pending_request(transaction)
    if result and transaction.to != requester.id:
        result.add_error("requester", "You are not allowed to accept/reject this request.")
    result.raise_if_invalid()


def validate_transfer_cancel(transaction: Transaction, requester: Actor) -> None:
    """A live TRANSFER_REQUEST issued by *requester*."""
    result = _check_pending_request(transaction)
    if result and transaction.from_ != requester.id:
        result.add_error("requester", "You are not allowed to cancel this request.")
    result.raise_if_invalid()


def require_recipient(value: str | None, field_name: str) -> str:
    if not value:
        raise ValidationError({field_name: [f"Cannot proceed without a {field_name}."]})
    return value


def validate_distinct_parties(recipient: str, requester: Actor) -> None:
    if recipient == requester.id:
        raise ValidationError({"recipient": ["Cannot transfer containers to yourself."]})


def require_containers(container_ids: Sequence[str]) -> None:
    result = ValidationResult.success()
    if not container_ids:
        result.add_error("containers", "At least one container is required.")
    if len(set(container_ids)) != len(container_ids):
        result.add_error("containers", "Containers cannot be duplicated on request.")
    result.raise_if_invalid()


# ── Eligibility ──────────────────────────────────────────────────────


def is_transferable(container: Container) -> bool:
    return container.status in source_statuses(TransactionType.TRANSFER_REQUEST)


def is_transportable(container: Container) -> bool:
    return container.status in source_statuses(TransactionType.TRANSPORT)


def _ensure_all(
    containers: Iterable[Container],
    allowed: frozenset[ContainerStatus],
    action: str,
) -> None:
    offending = sorted(c.id for c in containers if c.status not in allowed)
    if offending:
        statuses = " or ".join(sorted(status.value for status in allowed))
        ValidationResult.failure(
            {
                "containers": [
                    f"Check containers status. To {action} a container it has to be in "
                    f"{statuses} status: {', '.join(offending)}"
                ]
            }
        ).raise_if_invalid()


def ensure_transferable(containers: Iterable[Container]) -> None:
    _ensure_all(containers, source_statuses(TransactionType.TRANSFER_REQUEST), "transfer")


def ensure_transportable(containers: Iterable[Container]) -> None:
    _ensure_all(containers, source_statuses(TransactionType.TRANSPORT), "transport")


def ensure_pending(containers: Iterable[Container], action: str) -> None:
    """Containers carried by a pending request must still be TRANSFER_PENDING."""
    _ensure_all(containers, source_statuses(TransactionType.TRANSFER_ACCEPT), action)
