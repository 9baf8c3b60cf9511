"""In-memory lookups for waste types, users and recycling centers."""

from __future__ import annotations

from collections.abc import Iterable

from colmena_ledger.domain.models import RecyclingCenter, WasteType
from colmena_ledger.ports.directory import (
    IRecyclingCenterDirectory,
    IUserDirectory,
    IWasteTypeCatalog,
)
from colmena_ledger.primitives.exceptions import EntityNotFoundError


class InMemoryWasteTypeCatalog(IWasteTypeCatalog):
    def __init__(self, waste_types: Iterable[WasteType] = ()) -> None:
        self._types = {waste_type.id: waste_type for waste_type in waste_types}

    def add(self, waste_type: WasteType) -> None:
        self._types[waste_type.id] = waste_type

    async def get_waste_types(self, type_ids: Iterable[str]) -> dict[str, WasteType]:
        resolved: dict[str, WasteType] = {}
        for type_id in type_ids:
            waste_type = self._types.get(type_id)
            if waste_type is None:
                raise EntityNotFoundError("WasteType", type_id)
            resolved[type_id] = waste_type
        return resolved


class InMemoryUserDirectory(IUserDirectory):
    def __init__(self, user_ids: Iterable[str] = ()) -> None:
        self._users = set(user_ids)

    def add(self, user_id: str) -> None:
        self._users.add(user_id)

    async def find_user_by_id(self, user_id: str) -> str:
        if user_id not in self._users:
            raise EntityNotFoundError("User", user_id)
        return user_id


class InMemoryRecyclingCenterDirectory(IRecyclingCenterDirectory):
    def __init__(self, centers: Iterable[RecyclingCenter] = ()) -> None:
        self._centers = {center.id: center for center in centers}

    async def find_recycling_center_by_id(self, center_id: str) -> RecyclingCenter:
        center = self._centers.get(center_id)
        if center is None:
            raise EntityNotFoundError("RecyclingCenter", center_id)
        return center
