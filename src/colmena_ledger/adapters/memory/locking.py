"""InMemoryLockStrategy: single-process implementation of ILockStrategy."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import uuid4

from colmena_ledger.ports.locking import ILockStrategy
from colmena_ledger.primitives.exceptions import LockAcquisitionError

if TYPE_CHECKING:
    from colmena_ledger.primitives.locking import ResourceIdentifier

logger = logging.getLogger("colmena.locking")


@dataclass
class _LockState:
    """State for a single resource lock."""

    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    token: str | None = None
    session_id: str | None = None
    ref_count: int = 0
    waiters: int = 0


class InMemoryLockStrategy(ILockStrategy):
    """
    In-memory implementation of ILockStrategy.

    Features:
    - Reentrancy support via session_id
    - Lock state dropped once released with no waiters
    - Useful for testing and single-process deployments
    """

    def __init__(self) -> None:
        self._locks: dict[tuple[str, str], _LockState] = {}
        self._guard = asyncio.Lock()

    async def acquire(
        self,
        resource: ResourceIdentifier,
        *,
        timeout: float = 10.0,
        ttl: float = 30.0,  # noqa: ARG002
        session_id: str | None = None,
    ) -> str:
        key = (resource.resource_type, resource.resource_id)

        async with self._guard:
            state = self._locks.setdefault(key, _LockState())
            if (
                session_id is not None
                and state.token is not None
                and state.session_id == session_id
            ):
                state.ref_count += 1
                logger.debug("Reentrant lock acquired: %s (count=%d)", resource, state.ref_count)
                return state.token
            state.waiters += 1

        try:
            await asyncio.wait_for(state.lock.acquire(), timeout=timeout)
        except asyncio.TimeoutError as err:
            logger.warning("Lock acquisition on %s timed out after %.1fs", resource, timeout)
            raise LockAcquisitionError(resource, timeout, "held by another workflow") from err
        finally:
            async with self._guard:
                state.waiters -= 1

        async with self._guard:
            state.token = str(uuid4())
            state.session_id = session_id
            state.ref_count = 1

        logger.debug("Lock acquired: %s", resource)
        return state.token

    async def release(self, resource: ResourceIdentifier, token: str) -> None:
        key = (resource.resource_type, resource.resource_id)

        async with self._guard:
            state = self._locks.get(key)
            if state is None or state.token != token:
                logger.warning("Attempted to release invalid or expired lock: %s", resource)
                return

            state.ref_count -= 1
            if state.ref_count > 0:
                return

            state.token = None
            state.session_id = None
            state.lock.release()
            if state.waiters == 0:
                self._locks.pop(key, None)
            logger.debug("Lock released: %s", resource)

    def is_locked(self, resource: ResourceIdentifier) -> bool:
        state = self._locks.get((resource.resource_type, resource.resource_id))
        return state is not None and state.lock.locked()
