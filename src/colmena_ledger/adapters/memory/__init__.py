"""In-memory adapters: fakes for tests and single-process deployments."""

from .authorization import OwnershipTransportAuthorizer
from .containers import InMemoryContainerRegistry
from .directory import (
    InMemoryRecyclingCenterDirectory,
    InMemoryUserDirectory,
    InMemoryWasteTypeCatalog,
)
from .ledger import InMemoryLedgerStore
from .locking import InMemoryLockStrategy
from .notifications import InMemoryNotifier, SentNotification
from .permissions import InMemoryPermissionGrants
from .repository import InMemoryRepository
from .sequence import InMemorySequenceGenerator
from .stock import InMemoryStockLedger

__all__ = [
    "InMemoryContainerRegistry",
    "InMemoryLedgerStore",
    "InMemoryLockStrategy",
    "InMemoryNotifier",
    "InMemoryPermissionGrants",
    "InMemoryRecyclingCenterDirectory",
    "InMemoryRepository",
    "InMemorySequenceGenerator",
    "InMemoryStockLedger",
    "InMemoryUserDirectory",
    "InMemoryWasteTypeCatalog",
    "OwnershipTransportAuthorizer",
    "SentNotification",
]
