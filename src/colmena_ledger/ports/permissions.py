"""IPermissionGrants: per-record read/write ACL grants."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IPermissionGrants(Protocol):
    async def grant_read_write(self, entity_type: str, entity_id: str, user_id: str) -> None: ...

    async def revoke_read_write(self, entity_type: str, entity_id: str, user_id: str) -> None: ...

    async def has_read_write(self, entity_type: str, entity_id: str, user_id: str) -> bool: ...
