"""ITransportAuthorizer: external capability check for transport."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..domain.models import Actor, Container


@runtime_checkable
class ITransportAuthorizer(Protocol):
    async def can_transport_container(self, container: Container, actor: Actor) -> None:
        """Return normally to allow; raise ``AuthorizationError`` to deny."""
        ...
