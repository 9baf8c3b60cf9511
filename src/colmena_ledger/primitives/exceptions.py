"""Domain, workflow and infrastructure exceptions for colmena-ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .locking import ResourceIdentifier


class ColmenaError(Exception):
    """Root exception for the whole ledger package."""


class DomainError(ColmenaError):
    """Base class for all domain-related errors."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist or is not visible."""


class EntityNotFoundError(NotFoundError):
    """Raised when a specific entity cannot be found by ID."""

    def __init__(self, entity_type: str, entity_id: object) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} {entity_id} not found")


class InvariantViolationError(DomainError):
    """Raised when a domain invariant is violated.

    E.g. an illegal container status transition or a stock counter that
    would drop below zero.
    """


class AuthorizationError(DomainError):
    """Raised when the acting user may not perform an operation on a record."""


class ValidationError(ColmenaError):
    """Raised when a workflow precondition is not met.

    Carries structured errors: ``{field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(self._format())

    def _format(self) -> str:
        messages = [
            msg if field == "__root__" else f"{field}: {msg}"
            for field, msgs in self.errors.items()
            for msg in msgs
        ]
        return "; ".join(messages)


class InfrastructureError(ColmenaError):
    """Base class for all infrastructure-related errors."""


class PersistenceError(InfrastructureError):
    """Base class for all persistence-related errors."""


class ConcurrencyError(ColmenaError):
    """Base class for concurrency conflicts (stale reads, lock contention)."""


class OptimisticLockingError(ConcurrencyError, PersistenceError):
    """Raised when a store detects a version mismatch during save.

    Two workflows that read the same container and both try to flip its
    status: the second save carries a stale version and is rejected.
    """

    def __init__(self, entity_type: str, entity_id: object, expected: int, actual: int) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{entity_type} {entity_id} was modified concurrently "
            f"(expected version {expected}, found {actual})"
        )


class LockAcquisitionError(ConcurrencyError):
    """Failed to acquire a resource lock within the timeout."""

    def __init__(
        self,
        resource: ResourceIdentifier,
        timeout: float,
        reason: str | None = None,
    ) -> None:
        self.resource = resource
        self.timeout = timeout
        self.reason = reason

        msg = (
            f"Failed to acquire {resource.lock_mode} lock on "
            f"{resource.resource_type}:{resource.resource_id} "
            f"within {timeout}s"
        )
        if reason:
            msg += f" - {reason}"

        super().__init__(msg)


class WorkflowError(ColmenaError):
    """Raised when a workflow fails after its Transaction was created.

    Compensation has already been attempted when this is raised; the
    attached ``report`` (a ``WorkflowReport``) lists the compensation steps
    that failed, if any.
    """

    def __init__(
        self,
        workflow: str,
        cause: BaseException,
        report: Any = None,
    ) -> None:
        self.workflow = workflow
        self.cause = cause
        self.report = report
        super().__init__(f"workflow could not complete: {cause}")
