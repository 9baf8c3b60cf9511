"""In-memory notifier for test assertions."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from colmena_ledger.ports.notifications import INotifier

logger = logging.getLogger("colmena.adapters.memory")


@dataclass
class SentNotification:
    """Record of a delivered notification."""

    kind: str
    transaction_id: str
    from_user: str
    to_users: list[str] = field(default_factory=list)


class InMemoryNotifier(INotifier):
    """
    Test double (Fake) that stores notifications in a list for assertions.
    """

    def __init__(self) -> None:
        self.sent: list[SentNotification] = []

    async def notify_transfer_request(self, transaction_id: str, from_user: str, to_user: str) -> None:
        self.sent.append(SentNotification("transfer_request", transaction_id, from_user, [to_user]))
        logger.debug("Transfer request %s: %s -> %s", transaction_id, from_user, to_user)

    async def notify_transport(
        self, transaction_id: str, from_user: str, to_users: Sequence[str]
    ) -> None:
        self.sent.append(SentNotification("transport", transaction_id, from_user, list(to_users)))
        logger.debug("Transport %s by %s notified to %s", transaction_id, from_user, list(to_users))

    def assert_sent(self, kind: str, transaction_id: str, count: int = 1) -> None:
        """Helper for test assertions."""
        matches = [n for n in self.sent if n.kind == kind and n.transaction_id == transaction_id]
        if len(matches) != count:
            raise AssertionError(
                f"Expected {count} {kind} notifications for {transaction_id}, "
                f"but found {len(matches)}."
            )
