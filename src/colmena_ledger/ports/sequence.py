"""ISequenceGenerator: process-wide monotonic counters."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ISequenceGenerator(Protocol):
    async def next_sequence_number(self, entity_name: str) -> int:
        """Return the next value for *entity_name*; strictly increasing."""
        ...
