"""InMemoryRepository: dict-backed versioned table shared by the memory stores."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any, Generic, TypeVar

from colmena_ledger.domain.aggregate import AggregateRoot
from colmena_ledger.primitives.exceptions import OptimisticLockingError

T = TypeVar("T", bound=AggregateRoot[Any])

logger = logging.getLogger("colmena.adapters.memory")


class InMemoryRepository(Generic[T]):
    """Stores deep copies of records keyed by ``id``.

    Callers never share instances with the table, so a record only changes
    when it is explicitly saved, the way a remote object store behaves.
    Every ``put`` compares the caller's version against the stored one and
    bumps it on success.
    """

    def __init__(self, entity_type: str) -> None:
        self.entity_type = entity_type
        self._store: dict[str, T] = {}

    def get(self, entity_id: str) -> T | None:
        stored = self._store.get(entity_id)
        return stored.model_copy(deep=True) if stored is not None else None

    def peek(self, entity_id: str) -> T | None:
        """Return the stored instance itself, for visibility checks."""
        return self._store.get(entity_id)

    def put(self, entity: T, update: dict[str, Any] | None = None) -> T:
        stored = self._store.get(entity.id)
        actual = stored.version if stored is not None else 0
        if entity.version != actual:
            raise OptimisticLockingError(
                self.entity_type, entity.id, expected=entity.version, actual=actual
            )

        new_version = actual + 1
        copy = entity.model_copy(update=update, deep=True)
        copy.set_version(new_version)
        self._store[entity.id] = copy
        entity.set_version(new_version)
        logger.debug("Saved %s %s (version=%d)", self.entity_type, entity.id, new_version)
        return entity

    def remove(self, entity_id: str) -> T | None:
        removed = self._store.pop(entity_id, None)
        if removed is not None:
            logger.debug("Destroyed %s %s", self.entity_type, entity_id)
        return removed

    def values(self) -> Iterator[T]:
        return iter(list(self._store.values()))

    # ── Test helpers ─────────────────────────────────────────────

    def clear(self) -> None:
        self._store.clear()

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._store

    def __len__(self) -> int:
        return len(self._store)
