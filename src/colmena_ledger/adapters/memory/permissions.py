"""InMemoryPermissionGrants: set-backed ACL grants."""

from __future__ import annotations

import logging

from colmena_ledger.ports.permissions import IPermissionGrants

logger = logging.getLogger("colmena.adapters.memory")

Grant = tuple[str, str, str]


class InMemoryPermissionGrants(IPermissionGrants):
    """Holds ``(entity_type, entity_id, user_id)`` read/write grants."""

    def __init__(self) -> None:
        self._grants: set[Grant] = set()

    async def grant_read_write(self, entity_type: str, entity_id: str, user_id: str) -> None:
        self._grants.add((entity_type, entity_id, user_id))
        logger.debug("Granted read/write on %s:%s to %s", entity_type, entity_id, user_id)

    async def revoke_read_write(self, entity_type: str, entity_id: str, user_id: str) -> None:
        self._grants.discard((entity_type, entity_id, user_id))
        logger.debug("Revoked read/write on %s:%s from %s", entity_type, entity_id, user_id)

    async def has_read_write(self, entity_type: str, entity_id: str, user_id: str) -> bool:
        return (entity_type, entity_id, user_id) in self._grants

    # ── Test helpers ─────────────────────────────────────────────

    def snapshot(self) -> frozenset[Grant]:
        return frozenset(self._grants)

    def grants_for(self, user_id: str) -> set[Grant]:
        return {grant for grant in self._grants if grant[2] == user_id}
