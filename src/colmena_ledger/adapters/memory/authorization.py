"""OwnershipTransportAuthorizer: current-holder transport check."""

from __future__ import annotations

from typing import TYPE_CHECKING

from colmena_ledger.domain.models import AuthScope
from colmena_ledger.domain.specification import DetailsOfContainer
from colmena_ledger.domain.status import ContainerStatus, TransactionType
from colmena_ledger.ports.authorization import ITransportAuthorizer
from colmena_ledger.primitives.exceptions import AuthorizationError, EntityNotFoundError

if TYPE_CHECKING:
    from colmena_ledger.domain.models import Actor, Container, Transaction
    from colmena_ledger.ports.ledger import ILedgerStore


class OwnershipTransportAuthorizer(ITransportAuthorizer):
    """Allows only the user currently holding the container.

    A RECOVERED container is held by its creator. A TRANSFERRED one is held
    by the recipient of its latest TRANSFER_ACCEPT. Read/write grants alone
    never authorize a transport: a recipient keeps them after rejecting.
    """

    def __init__(self, ledger: ILedgerStore) -> None:
        self.ledger = ledger
        self._master = AuthScope.elevated()

    async def holder_of(self, container: Container) -> str | None:
        if container.status == ContainerStatus.RECOVERED:
            return container.created_by
        if container.status != ContainerStatus.TRANSFERRED:
            return None
        accept = await self._latest_accept(container)
        return accept.to if accept is not None else None

    async def _latest_accept(self, container: Container) -> Transaction | None:
        details = await self.ledger.find_details(DetailsOfContainer(container.id), self._master)
        latest: Transaction | None = None
        for detail in details:
            try:
                transaction = await self.ledger.get_transaction(
                    detail.transaction_id, self._master
                )
            except EntityNotFoundError:
                continue
            if transaction.type != TransactionType.TRANSFER_ACCEPT:
                continue
            if latest is None or transaction.number > latest.number:
                latest = transaction
        return latest

    async def can_transport_container(self, container: Container, actor: Actor) -> None:
        if await self.holder_of(container) == actor.id:
            return
        raise AuthorizationError(f"User {actor.id} cannot transport container {container.id}")
