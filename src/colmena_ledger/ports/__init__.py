"""Ports: the collaborator interfaces the saga coordinator depends on."""

from __future__ import annotations

from .authorization import ITransportAuthorizer
from .containers import IContainerRegistry
from .directory import IRecyclingCenterDirectory, IUserDirectory, IWasteTypeCatalog
from .ledger import ILedgerStore
from .locking import ILockStrategy
from .notifications import INotifier
from .permissions import IPermissionGrants
from .sequence import ISequenceGenerator
from .stock import IStockLedger

__all__ = [
    "IContainerRegistry",
    "ILedgerStore",
    "ILockStrategy",
    "INotifier",
    "IPermissionGrants",
    "IRecyclingCenterDirectory",
    "ISequenceGenerator",
    "IStockLedger",
    "ITransportAuthorizer",
    "IUserDirectory",
    "IWasteTypeCatalog",
]
