"""IContainerRegistry: persistence of Container records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..domain.models import AuthScope, Container
    from ..domain.specification import ISpecification


@runtime_checkable
class IContainerRegistry(Protocol):
    async def get(self, container_id: str, scope: AuthScope) -> Container:
        """Return the container or raise ``EntityNotFoundError``.

        A user scope only sees containers the user created or holds a
        read/write grant on.
        """
        ...

    async def save(self, container: Container, scope: AuthScope) -> Container:
        """Insert or update; raises ``OptimisticLockingError`` on a stale version."""
        ...

    async def destroy(self, container: Container, scope: AuthScope) -> None: ...

    async def find(self, specification: ISpecification[Container]) -> list[Container]: ...
