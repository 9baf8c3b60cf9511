"""InMemoryLedgerStore: dict-backed fake of the transaction store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from colmena_ledger.domain.models import AuthScope, Transaction, TransactionDetail
from colmena_ledger.ports.ledger import ILedgerStore
from colmena_ledger.primitives.exceptions import AuthorizationError, EntityNotFoundError

from .repository import InMemoryRepository

if TYPE_CHECKING:
    from colmena_ledger.domain.specification import ISpecification
    from colmena_ledger.ports.permissions import IPermissionGrants


class InMemoryLedgerStore(ILedgerStore):
    """In-memory implementation of ``ILedgerStore``.

    A user scope sees a transaction when the user is its ``from`` or ``to``
    party or holds a read/write grant on it; detail rows inherit the
    visibility of their parent transaction.
    """

    def __init__(self, grants: IPermissionGrants | None = None) -> None:
        self.grants = grants
        self.transactions: InMemoryRepository[Transaction] = InMemoryRepository("Transaction")
        self.details: InMemoryRepository[TransactionDetail] = InMemoryRepository(
            "TransactionDetail"
        )

    async def _can_access(self, transaction: Transaction, scope: AuthScope) -> bool:
        if scope.can_see(transaction.from_, transaction.to):
            return True
        if self.grants is None or scope.user_id is None:
            return False
        return await self.grants.has_read_write("Transaction", transaction.id, scope.user_id)

    async def get_transaction(self, transaction_id: str, scope: AuthScope) -> Transaction:
        stored = self.transactions.peek(transaction_id)
        if stored is None or not await self._can_access(stored, scope):
            raise EntityNotFoundError("Transaction", transaction_id)
        found = self.transactions.get(transaction_id)
        assert found is not None
        return found

    async def save_transaction(self, transaction: Transaction, scope: AuthScope) -> Transaction:
        stored = self.transactions.peek(transaction.id)
        if stored is not None and not await self._can_access(stored, scope):
            raise AuthorizationError(f"Not allowed to update Transaction {transaction.id}")
        return self.transactions.put(transaction, update={"details": []})

    async def destroy_transaction(self, transaction: Transaction, scope: AuthScope) -> None:
        stored = self.transactions.peek(transaction.id)
        if stored is None:
            return
        if not await self._can_access(stored, scope):
            raise AuthorizationError(f"Not allowed to destroy Transaction {transaction.id}")
        self.transactions.remove(transaction.id)

    async def save_detail(self, detail: TransactionDetail, scope: AuthScope) -> TransactionDetail:
        parent = self.transactions.peek(detail.transaction_id)
        if parent is None:
            raise EntityNotFoundError("Transaction", detail.transaction_id)
        if not await self._can_access(parent, scope):
            raise AuthorizationError(
                f"Not allowed to add details to Transaction {detail.transaction_id}"
            )
        return self.details.put(detail)

    async def destroy_detail(self, detail: TransactionDetail, scope: AuthScope) -> None:
        parent = self.transactions.peek(detail.transaction_id)
        if parent is not None and not await self._can_access(parent, scope):
            raise AuthorizationError(f"Not allowed to destroy TransactionDetail {detail.id}")
        if parent is None and not scope.master:
            raise AuthorizationError(f"Not allowed to destroy TransactionDetail {detail.id}")
        self.details.remove(detail.id)

    async def find_details(
        self, specification: ISpecification[TransactionDetail], scope: AuthScope
    ) -> list[TransactionDetail]:
        found: list[TransactionDetail] = []
        for detail in self.details.values():
            if not specification.is_satisfied_by(detail):
                continue
            parent = self.transactions.peek(detail.transaction_id)
            visible = scope.master if parent is None else await self._can_access(parent, scope)
            if visible:
                found.append(detail.model_copy(deep=True))
        return sorted(found, key=lambda d: d.created_at)
