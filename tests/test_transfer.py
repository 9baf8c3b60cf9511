"""Tests for transfer request, accept, reject and cancel."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import pytest

from colmena_ledger.adapters.memory import (
    InMemoryContainerRegistry,
    InMemoryLedgerStore,
    InMemoryNotifier,
    InMemoryPermissionGrants,
    InMemoryStockLedger,
)
from colmena_ledger.domain import Actor, AuthScope, ContainerStatus, RecoverItem, TransactionType
from colmena_ledger.primitives import EntityNotFoundError, ValidationError
from colmena_ledger.sagas import SagaCoordinator

MASTER = AuthScope.elevated()

RecoverFn = Callable[..., Awaitable[list[str]]]


async def _statuses(containers: InMemoryContainerRegistry, ids: list[str]) -> list[ContainerStatus]:
    return [(await containers.get(cid, MASTER)).status for cid in ids]


class TestTransferRequest:
    @pytest.mark.asyncio
    async def test_offer_container(
        self,
        coordinator: SagaCoordinator,
        recover: RecoverFn,
        alice: Actor,
        bob: Actor,
        containers: InMemoryContainerRegistry,
        grants: InMemoryPermissionGrants,
        notifier: InMemoryNotifier,
    ) -> None:
        [container_id] = await recover(alice)

        request = await coordinator.register_transfer_request([container_id], bob.id, alice)

        assert request.type == TransactionType.TRANSFER_REQUEST
        assert request.from_ == "alice"
        assert request.to == "bob"
        assert request.expired_at is None
        [detail] = request.details
        assert (detail.container_id, detail.grant_issued) == (container_id, True)
        assert await _statuses(containers, [container_id]) == [ContainerStatus.TRANSFER_PENDING]
        assert await grants.has_read_write("Container", container_id, "bob")
        assert await grants.has_read_write("Transaction", request.id, "bob")
        notifier.assert_sent("transfer_request", request.id)
        assert notifier.sent[-1].to_users == ["bob"]

    @pytest.mark.asyncio
    async def test_recipient_can_now_read_container(
        self,
        coordinator: SagaCoordinator,
        recover: RecoverFn,
        alice: Actor,
        bob: Actor,
        containers: InMemoryContainerRegistry,
    ) -> None:
        [container_id] = await recover(alice)
        with pytest.raises(EntityNotFoundError):
            await containers.get(container_id, AuthScope.for_actor(bob))
        await coordinator.register_transfer_request([container_id], bob.id, alice)
        assert (await containers.get(container_id, AuthScope.for_actor(bob))).id == container_id

    @pytest.mark.asyncio
    async def test_non_recovered_container_is_rejected(
        self,
        coordinator: SagaCoordinator,
        recover: RecoverFn,
        alice: Actor,
        bob: Actor,
        carol: Actor,
        ledger: InMemoryLedgerStore,
        grants: InMemoryPermissionGrants,
    ) -> None:
        ids = await recover(alice, qty=2)
        await coordinator.register_transfer_request([ids[0]], bob.id, alice)
        transactions_before = len(ledger.transactions)
        grants_before = grants.snapshot()

        with pytest.raises(ValidationError, match="has to be in RECOVERED status"):
            await coordinator.register_transfer_request(ids, carol.id, alice)

        assert len(ledger.transactions) == transactions_before
        assert grants.snapshot() == grants_before

    @pytest.mark.asyncio
    async def test_missing_recipient(
        self, coordinator: SagaCoordinator, recover: RecoverFn, alice: Actor
    ) -> None:
        ids = await recover(alice)
        with pytest.raises(ValidationError, match="without a recipient"):
            await coordinator.register_transfer_request(ids, None, alice)

    @pytest.mark.asyncio
    async def test_unknown_recipient(
        self, coordinator: SagaCoordinator, recover: RecoverFn, alice: Actor
    ) -> None:
        ids = await recover(alice)
        with pytest.raises(EntityNotFoundError, match="User mallory"):
            await coordinator.register_transfer_request(ids, "mallory", alice)

    @pytest.mark.asyncio
    async def test_self_transfer(
        self, coordinator: SagaCoordinator, recover: RecoverFn, alice: Actor
    ) -> None:
        ids = await recover(alice)
        with pytest.raises(ValidationError, match="yourself"):
            await coordinator.register_transfer_request(ids, alice.id, alice)

    @pytest.mark.asyncio
    async def test_foreign_container_is_not_found(
        self, coordinator: SagaCoordinator, recover: RecoverFn, alice: Actor, bob: Actor
    ) -> None:
        ids = await recover(alice)
        with pytest.raises(EntityNotFoundError, match="Container"):
            await coordinator.register_transfer_request(ids, alice.id, bob)


class TestTransferAccept:
    @pytest.mark.asyncio
    async def test_accept(
        self,
        coordinator: SagaCoordinator,
        recover: RecoverFn,
        alice: Actor,
        bob: Actor,
        containers: InMemoryContainerRegistry,
        ledger: InMemoryLedgerStore,
        stock: InMemoryStockLedger,
    ) -> None:
        [container_id] = await recover(alice)
        request = await coordinator.register_transfer_request([container_id], bob.id, alice)

        accept = await coordinator.register_transfer_accept(request.id, bob)

        assert accept.type == TransactionType.TRANSFER_ACCEPT
        assert accept.related_to == request.id
        assert (accept.from_, accept.to) == ("alice", "bob")
        assert accept.number > request.number
        assert [d.container_id for d in accept.details] == [container_id]
        assert await _statuses(containers, [container_id]) == [ContainerStatus.TRANSFERRED]
        assert stock.amount("alice", "plastic") == 0
        assert stock.amount("bob", "plastic") == 1
        assert (await ledger.get_transaction(request.id, MASTER)).expired_at is not None

    @pytest.mark.asyncio
    async def test_only_recipient_can_accept(
        self, coordinator: SagaCoordinator, recover: RecoverFn, alice: Actor, bob: Actor
    ) -> None:
        ids = await recover(alice)
        request = await coordinator.register_transfer_request(ids, bob.id, alice)
        with pytest.raises(ValidationError, match="not allowed to accept/reject"):
            await coordinator.register_transfer_accept(request.id, alice)

    @pytest.mark.asyncio
    async def test_stranger_cannot_see_request(
        self,
        coordinator: SagaCoordinator,
        recover: RecoverFn,
        alice: Actor,
        bob: Actor,
        carol: Actor,
    ) -> None:
        ids = await recover(alice)
        request = await coordinator.register_transfer_request(ids, bob.id, alice)
        with pytest.raises(EntityNotFoundError):
            await coordinator.register_transfer_accept(request.id, carol)

    @pytest.mark.asyncio
    async def test_accepting_a_recover_transaction(
        self, coordinator: SagaCoordinator, alice: Actor
    ) -> None:
        recovered = await coordinator.register_recover([RecoverItem(type_id="plastic", qty=1)], alice)
        with pytest.raises(ValidationError, match="is not in TRANSFER_REQUEST status"):
            await coordinator.register_transfer_accept(recovered.id, alice)


class TestTransferReject:
    @pytest.mark.asyncio
    async def test_reject(
        self,
        coordinator: SagaCoordinator,
        recover: RecoverFn,
        alice: Actor,
        bob: Actor,
        containers: InMemoryContainerRegistry,
        stock: InMemoryStockLedger,
    ) -> None:
        ids = await recover(alice, qty=2)
        request = await coordinator.register_transfer_request(ids, bob.id, alice)

        reject = await coordinator.register_transfer_reject(request.id, "wrong batch", bob)

        assert reject.type == TransactionType.TRANSFER_REJECT
        assert reject.reason == "wrong batch"
        assert reject.related_to == request.id
        assert len(reject.details) == 2
        assert await _statuses(containers, ids) == [ContainerStatus.RECOVERED] * 2
        assert stock.amount("alice", "plastic") == 2
        assert stock.amount("bob", "plastic") == 0


class TestTransferCancel:
    @pytest.mark.asyncio
    async def test_round_trip_restores_containers_and_grants(
        self,
        coordinator: SagaCoordinator,
        recover: RecoverFn,
        alice: Actor,
        bob: Actor,
        containers: InMemoryContainerRegistry,
        grants: InMemoryPermissionGrants,
    ) -> None:
        ids = await recover(alice, qty=3)
        grants_before = grants.snapshot()

        request = await coordinator.register_transfer_request(ids, bob.id, alice)
        assert len(grants.grants_for("bob")) == 4
        cancel = await coordinator.register_transfer_cancel(request.id, alice)

        assert cancel.type == TransactionType.TRANSFER_CANCEL
        assert cancel.related_to == request.id
        assert await _statuses(containers, ids) == [ContainerStatus.RECOVERED] * 3
        assert grants.snapshot() == grants_before
        with pytest.raises(EntityNotFoundError):
            await containers.get(ids[0], AuthScope.for_actor(bob))

    @pytest.mark.asyncio
    async def test_cancel_keeps_grants_held_before_the_request(
        self,
        coordinator: SagaCoordinator,
        recover: RecoverFn,
        alice: Actor,
        bob: Actor,
        containers: InMemoryContainerRegistry,
        grants: InMemoryPermissionGrants,
    ) -> None:
        ids = await recover(alice)
        first = await coordinator.register_transfer_request(ids, bob.id, alice)
        await coordinator.register_transfer_reject(first.id, None, bob)
        grants_before = grants.snapshot()

        request = await coordinator.register_transfer_request(ids, bob.id, alice)
        assert [d.grant_issued for d in request.details] == [False]
        await coordinator.register_transfer_cancel(request.id, alice)

        assert grants.snapshot() == grants_before
        assert await grants.has_read_write("Container", ids[0], bob.id)
        assert (await containers.get(ids[0], AuthScope.for_actor(bob))).status == (
            ContainerStatus.RECOVERED
        )

    @pytest.mark.asyncio
    async def test_only_issuer_can_cancel(
        self, coordinator: SagaCoordinator, recover: RecoverFn, alice: Actor, bob: Actor
    ) -> None:
        ids = await recover(alice)
        request = await coordinator.register_transfer_request(ids, bob.id, alice)
        with pytest.raises(ValidationError, match="not allowed to cancel"):
            await coordinator.register_transfer_cancel(request.id, bob)

    @pytest.mark.asyncio
    async def test_containers_can_be_offered_again(
        self,
        coordinator: SagaCoordinator,
        recover: RecoverFn,
        alice: Actor,
        bob: Actor,
        carol: Actor,
    ) -> None:
        ids = await recover(alice)
        request = await coordinator.register_transfer_request(ids, bob.id, alice)
        await coordinator.register_transfer_cancel(request.id, alice)
        second = await coordinator.register_transfer_request(ids, carol.id, alice)
        assert second.to == "carol"


class TestResponsesAreExclusive:
    @pytest.mark.parametrize("first", ["accept", "reject", "cancel"])
    @pytest.mark.parametrize("second", ["accept", "reject", "cancel"])
    @pytest.mark.asyncio
    async def test_second_response_sees_expired_request(
        self,
        coordinator: SagaCoordinator,
        recover: RecoverFn,
        alice: Actor,
        bob: Actor,
        first: str,
        second: str,
    ) -> None:
        ids = await recover(alice)
        request = await coordinator.register_transfer_request(ids, bob.id, alice)

        async def respond(kind: str) -> None:
            if kind == "accept":
                await coordinator.register_transfer_accept(request.id, bob)
            elif kind == "reject":
                await coordinator.register_transfer_reject(request.id, None, bob)
            else:
                await coordinator.register_transfer_cancel(request.id, alice)

        await respond(first)
        with pytest.raises(ValidationError, match="expired"):
            await respond(second)


class TestFindTransactionWithDetails:
    @pytest.mark.asyncio
    async def test_counterparty_and_master_views(
        self,
        coordinator: SagaCoordinator,
        recover: RecoverFn,
        alice: Actor,
        bob: Actor,
        carol: Actor,
    ) -> None:
        ids = await recover(alice, qty=2)
        request = await coordinator.register_transfer_request(ids, bob.id, alice)

        seen_by_bob = await coordinator.find_transaction_with_details(request.id, bob)
        assert {d.container_id for d in seen_by_bob.details} == set(ids)

        with pytest.raises(EntityNotFoundError):
            await coordinator.find_transaction_with_details(request.id, carol)
        as_master = await coordinator.find_transaction_with_details(request.id, carol, master=True)
        assert len(as_master.details) == 2
