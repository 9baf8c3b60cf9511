"""IStockLedger: per-user, per-waste-type counters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..domain.models import StockCounter, WasteType


@runtime_checkable
class IStockLedger(Protocol):
    async def get_user_stock(self, user_id: str) -> dict[str, StockCounter]:
        """Snapshot of the user's counters keyed by waste type id."""
        ...

    async def increment_stock(self, waste_type: WasteType, user_id: str, qty: int) -> StockCounter: ...

    async def move_stock(
        self, waste_type: WasteType, from_user: str, to_user: str, qty: int
    ) -> None:
        """Decrement *from_user* and increment *to_user* by *qty*.

        Raises ``InvariantViolationError`` if the source would go negative.
        """
        ...

    async def restore_stock(self, user_id: str, snapshot: Mapping[str, int]) -> None:
        """Set each listed counter back to the amount in *snapshot*."""
        ...
