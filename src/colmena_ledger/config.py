"""Coordinator configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LedgerConfig(BaseModel):
    """Configuration for :class:`~colmena_ledger.sagas.coordinator.SagaCoordinator`."""

    model_config = ConfigDict(frozen=True)

    # Upper bound for ``RecoverItem.qty`` in a single recover request.
    max_containers_per_request: int = Field(default=10, gt=0)

    # Per-container lock acquisition (only used when a lock strategy is injected).
    lock_timeout: float = Field(default=10.0, gt=0)
    lock_ttl: float = Field(default=30.0, gt=0)

    # Destroy containers and detail rows created by a workflow that is being
    # compensated. When False, they are left behind and only the Transaction
    # is destroyed.
    purge_created_records: bool = True

    # Send transfer-request / transport notifications after success.
    notify: bool = True
