"""InMemoryStockLedger: counters keyed by (user, waste type)."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from colmena_ledger.domain.models import StockCounter, WasteType
from colmena_ledger.ports.stock import IStockLedger
from colmena_ledger.primitives.exceptions import InvariantViolationError

logger = logging.getLogger("colmena.adapters.memory")


class InMemoryStockLedger(IStockLedger):
    """In-memory implementation of ``IStockLedger``.

    Each method completes without awaiting, so a single call is atomic with
    respect to other coroutines on the same loop.
    """

    def __init__(self) -> None:
        self._counters: dict[tuple[str, str], StockCounter] = {}

    def _counter(self, user_id: str, waste_type_id: str) -> StockCounter:
        key = (user_id, waste_type_id)
        counter = self._counters.get(key)
        if counter is None:
            counter = StockCounter(
                id=f"{user_id}:{waste_type_id}",
                user_id=user_id,
                waste_type_id=waste_type_id,
            )
            self._counters[key] = counter
        return counter

    def _set(self, counter: StockCounter, amount: int) -> None:
        if amount < 0:
            raise InvariantViolationError(
                f"Stock of {counter.waste_type_id} for {counter.user_id} cannot go "
                f"below zero (requested {amount})"
            )
        counter.amount = amount
        counter.set_version(counter.version + 1)
        counter.touch()

    async def get_user_stock(self, user_id: str) -> dict[str, StockCounter]:
        return {
            waste_type_id: counter.model_copy(deep=True)
            for (owner, waste_type_id), counter in self._counters.items()
            if owner == user_id
        }

    async def increment_stock(self, waste_type: WasteType, user_id: str, qty: int) -> StockCounter:
        counter = self._counter(user_id, waste_type.id)
        self._set(counter, counter.amount + qty)
        logger.debug("Stock %s for %s %+d -> %d", waste_type.id, user_id, qty, counter.amount)
        return counter.model_copy(deep=True)

    async def move_stock(
        self, waste_type: WasteType, from_user: str, to_user: str, qty: int
    ) -> None:
        source = self._counter(from_user, waste_type.id)
        target = self._counter(to_user, waste_type.id)
        # Check both before writing either.
        if source.amount - qty < 0 or target.amount + qty < 0:
            raise InvariantViolationError(
                f"Cannot move {qty} of {waste_type.id} from {from_user} to {to_user}: "
                f"insufficient stock"
            )
        self._set(source, source.amount - qty)
        self._set(target, target.amount + qty)
        logger.debug("Moved %d of %s from %s to %s", qty, waste_type.id, from_user, to_user)

    async def restore_stock(self, user_id: str, snapshot: Mapping[str, int]) -> None:
        for waste_type_id, amount in snapshot.items():
            self._set(self._counter(user_id, waste_type_id), amount)
        logger.debug("Restored stock of %s to %s", user_id, dict(snapshot))

    # ── Test helpers ─────────────────────────────────────────────

    def amount(self, user_id: str, waste_type_id: str) -> int:
        counter = self._counters.get((user_id, waste_type_id))
        return counter.amount if counter is not None else 0
