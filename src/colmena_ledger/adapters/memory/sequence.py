"""InMemorySequenceGenerator: per-entity counters for a single process."""

from __future__ import annotations

from collections import defaultdict

from colmena_ledger.ports.sequence import ISequenceGenerator


class InMemorySequenceGenerator(ISequenceGenerator):
    def __init__(self, start: int = 1) -> None:
        self._next: defaultdict[str, int] = defaultdict(lambda: start)

    async def next_sequence_number(self, entity_name: str) -> int:
        value = self._next[entity_name]
        self._next[entity_name] = value + 1
        return value
