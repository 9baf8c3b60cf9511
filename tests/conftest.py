"""Shared fixtures: in-memory collaborators and a ready coordinator."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from decimal import Decimal
from typing import Any

import pytest

from colmena_ledger.adapters.memory import (
    InMemoryContainerRegistry,
    InMemoryLedgerStore,
    InMemoryNotifier,
    InMemoryPermissionGrants,
    InMemoryRecyclingCenterDirectory,
    InMemorySequenceGenerator,
    InMemoryStockLedger,
    InMemoryUserDirectory,
    InMemoryWasteTypeCatalog,
    OwnershipTransportAuthorizer,
)
from colmena_ledger.config import LedgerConfig
from colmena_ledger.domain import Actor, RecoverItem, RecyclingCenter, WasteType
from colmena_ledger.sagas import Collaborators, SagaCoordinator


@pytest.fixture
def alice() -> Actor:
    return Actor(id="alice", session_token="s-alice")


@pytest.fixture
def bob() -> Actor:
    return Actor(id="bob", session_token="s-bob")


@pytest.fixture
def carol() -> Actor:
    return Actor(id="carol", session_token="s-carol")


@pytest.fixture
def plastic() -> WasteType:
    return WasteType(id="plastic", name="Plastic", qty=Decimal("1"), unit="kg")


@pytest.fixture
def glass() -> WasteType:
    return WasteType(id="glass", name="Glass", qty=Decimal("2.5"), unit="kg")


@pytest.fixture
def center() -> RecyclingCenter:
    return RecyclingCenter(id="rc-north", name="North Plant")


@pytest.fixture
def grants() -> InMemoryPermissionGrants:
    return InMemoryPermissionGrants()


@pytest.fixture
def ledger(grants: InMemoryPermissionGrants) -> InMemoryLedgerStore:
    return InMemoryLedgerStore(grants)


@pytest.fixture
def containers(grants: InMemoryPermissionGrants) -> InMemoryContainerRegistry:
    return InMemoryContainerRegistry(grants)


@pytest.fixture
def stock() -> InMemoryStockLedger:
    return InMemoryStockLedger()


@pytest.fixture
def notifier() -> InMemoryNotifier:
    return InMemoryNotifier()


@pytest.fixture
def build_coordinator(
    grants: InMemoryPermissionGrants,
    ledger: InMemoryLedgerStore,
    containers: InMemoryContainerRegistry,
    stock: InMemoryStockLedger,
    notifier: InMemoryNotifier,
    alice: Actor,
    bob: Actor,
    carol: Actor,
    plastic: WasteType,
    glass: WasteType,
    center: RecyclingCenter,
) -> Callable[..., SagaCoordinator]:
    """Factory: pass collaborator overrides plus coordinator keyword arguments."""

    def build(
        *,
        config: LedgerConfig | None = None,
        lock_strategy: Any = None,
        hooks: Any = None,
        **overrides: Any,
    ) -> SagaCoordinator:
        parts: dict[str, Any] = {
            "ledger": ledger,
            "containers": containers,
            "stock": stock,
            "grants": grants,
            "notifier": notifier,
            "transport_authorizer": OwnershipTransportAuthorizer(ledger),
            "sequence": InMemorySequenceGenerator(),
            "waste_types": InMemoryWasteTypeCatalog([plastic, glass]),
            "users": InMemoryUserDirectory([alice.id, bob.id, carol.id]),
            "recycling_centers": InMemoryRecyclingCenterDirectory([center]),
        }
        parts.update(overrides)
        return SagaCoordinator(
            Collaborators(**parts),
            config=config,
            lock_strategy=lock_strategy,
            hooks=hooks,
        )

    return build


@pytest.fixture
def coordinator(build_coordinator: Callable[..., SagaCoordinator]) -> SagaCoordinator:
    return build_coordinator()


RecoverFn = Callable[..., Awaitable[list[str]]]


@pytest.fixture
def recover(coordinator: SagaCoordinator) -> RecoverFn:
    """Recover containers through *via* (default coordinator) and return their ids."""

    async def _recover(
        actor: Actor,
        qty: int = 1,
        type_id: str = "plastic",
        via: SagaCoordinator | None = None,
    ) -> list[str]:
        runner = via or coordinator
        transaction = await runner.register_recover(
            [RecoverItem(type_id=type_id, qty=qty)], actor
        )
        return [detail.container_id for detail in transaction.details]

    return _recover
