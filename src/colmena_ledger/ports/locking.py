"""ILockStrategy: per-record locks held for the duration of one workflow.

Transfer requests and transports lock every container they target, and
accept/reject/cancel lock the request transaction, before reading anything.
Two workflows can then never act on the same record at once inside one
process. Stores still enforce optimistic versions for writers that bypass
the lock.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..primitives.locking import ResourceIdentifier


@runtime_checkable
class ILockStrategy(Protocol):
    async def acquire(
        self,
        resource: ResourceIdentifier,
        *,
        timeout: float = 10.0,
        ttl: float = 30.0,
        session_id: str | None = None,
    ) -> str:
        """
        Acquire a lock for the given resource.

        Args:
            resource: The resource to lock (includes type, ID, and lock mode).
            timeout: Maximum time to wait for the lock.
            ttl: Time-to-live for the lock (seconds), so a crashed worker
                cannot hold a container forever.
            session_id: Identifier of the workflow run; a second acquire
                with the same session is reentrant.

        Returns:
            A token to pass to :meth:`release`.

        Raises:
            LockAcquisitionError: If the lock is not obtained within *timeout*.
        """
        ...

    async def release(self, resource: ResourceIdentifier, token: str) -> None: ...
