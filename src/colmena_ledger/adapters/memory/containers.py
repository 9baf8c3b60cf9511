"""InMemoryContainerRegistry: dict-backed fake of the container store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from colmena_ledger.domain.models import AuthScope, Container
from colmena_ledger.ports.containers import IContainerRegistry
from colmena_ledger.primitives.exceptions import AuthorizationError, EntityNotFoundError

from .repository import InMemoryRepository

if TYPE_CHECKING:
    from colmena_ledger.domain.specification import ISpecification
    from colmena_ledger.ports.permissions import IPermissionGrants


class InMemoryContainerRegistry(IContainerRegistry):
    """In-memory implementation of ``IContainerRegistry``.

    A user scope sees containers it created or holds a read/write grant on.
    """

    def __init__(self, grants: IPermissionGrants | None = None) -> None:
        self.grants = grants
        self.containers: InMemoryRepository[Container] = InMemoryRepository("Container")

    async def _can_access(self, container: Container, scope: AuthScope) -> bool:
        if scope.can_see(container.created_by):
            return True
        if self.grants is None or scope.user_id is None:
            return False
        return await self.grants.has_read_write("Container", container.id, scope.user_id)

    async def get(self, container_id: str, scope: AuthScope) -> Container:
        stored = self.containers.peek(container_id)
        if stored is None or not await self._can_access(stored, scope):
            raise EntityNotFoundError("Container", container_id)
        found = self.containers.get(container_id)
        assert found is not None
        return found

    async def save(self, container: Container, scope: AuthScope) -> Container:
        stored = self.containers.peek(container.id)
        if stored is not None and not await self._can_access(stored, scope):
            raise AuthorizationError(f"Not allowed to update Container {container.id}")
        return self.containers.put(container)

    async def destroy(self, container: Container, scope: AuthScope) -> None:
        stored = self.containers.peek(container.id)
        if stored is None:
            return
        if not await self._can_access(stored, scope):
            raise AuthorizationError(f"Not allowed to destroy Container {container.id}")
        self.containers.remove(container.id)

    async def find(self, specification: ISpecification[Container]) -> list[Container]:
        return [
            container.model_copy(deep=True)
            for container in self.containers.values()
            if specification.is_satisfied_by(container)
        ]
