"""Lockable resource identifiers used by the saga coordinator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class ResourceIdentifier:
    """
    Identifies a single lockable record.

    Examples:
        >>> ResourceIdentifier("Container", "c-1")
        >>> ResourceIdentifier("Transaction", "t-42", lock_mode="read")
    """

    resource_type: str
    resource_id: str
    lock_mode: Literal["read", "write"] = "write"

    def __lt__(self, other: ResourceIdentifier) -> bool:
        # Deterministic acquisition order prevents deadlocks between workflows.
        return (self.resource_type, self.resource_id) < (
            other.resource_type,
            other.resource_id,
        )

    def __str__(self) -> str:
        mode = f":{self.lock_mode}" if self.lock_mode != "write" else ""
        return f"{self.resource_type}:{self.resource_id}{mode}"

    @classmethod
    def containers(cls, container_ids: list[str]) -> list[ResourceIdentifier]:
        """Return sorted, de-duplicated identifiers for *container_ids*."""
        return sorted({cls("Container", cid) for cid in container_ids})
