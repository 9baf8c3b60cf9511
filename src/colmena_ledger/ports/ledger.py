"""ILedgerStore: persistence of Transaction and TransactionDetail records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..domain.models import AuthScope, Transaction, TransactionDetail
    from ..domain.specification import ISpecification


@runtime_checkable
class ILedgerStore(Protocol):
    """
    Per-record store for ledger entries. There is no multi-record
    transaction: each call succeeds or fails on its own.

    Every call is scoped: a user scope only sees records the user is a party
    to or was granted access to, the master scope sees everything.
    """

    async def get_transaction(self, transaction_id: str, scope: AuthScope) -> Transaction:
        """Return the transaction or raise ``EntityNotFoundError``."""
        ...

    async def save_transaction(self, transaction: Transaction, scope: AuthScope) -> Transaction:
        """Insert or update; raises ``OptimisticLockingError`` on a stale version."""
        ...

    async def destroy_transaction(self, transaction: Transaction, scope: AuthScope) -> None: ...

    async def save_detail(self, detail: TransactionDetail, scope: AuthScope) -> TransactionDetail: ...

    async def destroy_detail(self, detail: TransactionDetail, scope: AuthScope) -> None: ...

    async def find_details(
        self, specification: ISpecification[TransactionDetail], scope: AuthScope
    ) -> list[TransactionDetail]: ...
