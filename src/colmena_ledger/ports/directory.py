"""Lookups of records owned by other services."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..domain.models import RecyclingCenter, WasteType


@runtime_checkable
class IWasteTypeCatalog(Protocol):
    async def get_waste_types(self, type_ids: Iterable[str]) -> dict[str, WasteType]:
        """Resolve every id or raise ``EntityNotFoundError`` for the first unknown one."""
        ...


@runtime_checkable
class IUserDirectory(Protocol):
    async def find_user_by_id(self, user_id: str) -> str:
        """Return the canonical user id or raise ``EntityNotFoundError``."""
        ...


@runtime_checkable
class IRecyclingCenterDirectory(Protocol):
    async def find_recycling_center_by_id(self, center_id: str) -> RecyclingCenter: ...
