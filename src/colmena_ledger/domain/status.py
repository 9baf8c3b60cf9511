"""Container statuses, transaction types and the container state machine."""

from __future__ import annotations

from enum import Enum

from typing_extensions import assert_never


class ContainerStatus(str, Enum):
    """Lifecycle states of a physical container."""

    RECOVERED = "RECOVERED"
    TRANSFER_PENDING = "TRANSFER_PENDING"
    TRANSFERRED = "TRANSFERRED"
    IN_TRANSIT = "IN_TRANSIT"


class TransactionType(str, Enum):
    """One ledger entry type per workflow."""

    RECOVER = "RECOVER"
    TRANSFER_REQUEST = "TRANSFER_REQUEST"
    TRANSFER_ACCEPT = "TRANSFER_ACCEPT"
    TRANSFER_REJECT = "TRANSFER_REJECT"
    TRANSFER_CANCEL = "TRANSFER_CANCEL"
    TRANSPORT = "TRANSPORT"


# Edges a workflow may take going forward.
FORWARD_TRANSITIONS: frozenset[tuple[ContainerStatus, ContainerStatus]] = frozenset(
    {
        (ContainerStatus.RECOVERED, ContainerStatus.TRANSFER_PENDING),
        (ContainerStatus.TRANSFER_PENDING, ContainerStatus.TRANSFERRED),
        (ContainerStatus.TRANSFER_PENDING, ContainerStatus.RECOVERED),
        (ContainerStatus.RECOVERED, ContainerStatus.IN_TRANSIT),
        (ContainerStatus.TRANSFERRED, ContainerStatus.IN_TRANSIT),
    }
)

# Reverse edges, only taken while compensating.
COMPENSATING_TRANSITIONS: frozenset[tuple[ContainerStatus, ContainerStatus]] = (
    frozenset((target, source) for source, target in FORWARD_TRANSITIONS)
)


def source_statuses(transaction_type: TransactionType) -> frozenset[ContainerStatus]:
    """Statuses a container must be in for *transaction_type* to touch it.

    ``RECOVER`` creates its containers, so nothing is a valid source.
    """
    match transaction_type:
        case TransactionType.RECOVER:
            return frozenset()
        case TransactionType.TRANSFER_REQUEST:
            return frozenset({ContainerStatus.RECOVERED})
        case (
            TransactionType.TRANSFER_ACCEPT
            | TransactionType.TRANSFER_REJECT
            | TransactionType.TRANSFER_CANCEL
        ):
            return frozenset({ContainerStatus.TRANSFER_PENDING})
        case TransactionType.TRANSPORT:
            return frozenset({ContainerStatus.RECOVERED, ContainerStatus.TRANSFERRED})
        case _:
            assert_never(transaction_type)


def target_status(transaction_type: TransactionType) -> ContainerStatus:
    """Status every container ends in once *transaction_type* succeeds."""
    match transaction_type:
        case TransactionType.RECOVER:
            return ContainerStatus.RECOVERED
        case TransactionType.TRANSFER_REQUEST:
            return ContainerStatus.TRANSFER_PENDING
        case TransactionType.TRANSFER_ACCEPT:
            return ContainerStatus.TRANSFERRED
        case TransactionType.TRANSFER_REJECT | TransactionType.TRANSFER_CANCEL:
            return ContainerStatus.RECOVERED
        case TransactionType.TRANSPORT:
            return ContainerStatus.IN_TRANSIT
        case _:
            assert_never(transaction_type)


def is_allowed(
    current: ContainerStatus, target: ContainerStatus, *, compensating: bool = False
) -> bool:
    """Return *True* if a container may move from *current* to *target*."""
    if current == target:
        return True
    edges = COMPENSATING_TRANSITIONS if compensating else FORWARD_TRANSITIONS
    return (current, target) in edges
