"""INotifier: fire-and-forget delivery of workflow notifications.

Failures raised by a notifier are logged by the coordinator; they never
trigger compensation.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class INotifier(Protocol):
    async def notify_transfer_request(self, transaction_id: str, from_user: str, to_user: str) -> None: ...

    async def notify_transport(
        self, transaction_id: str, from_user: str, to_users: Sequence[str]
    ) -> None: ...
