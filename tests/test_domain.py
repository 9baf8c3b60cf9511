"""Tests for ledger records, value objects and the container state machine."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from colmena_ledger.domain import (
    Actor,
    AuthScope,
    Container,
    ContainersInBatch,
    ContainerStatus,
    DetailsOfContainer,
    DetailsOfTransaction,
    RecoverItem,
    StockCounter,
    Transaction,
    TransactionDetail,
    TransactionType,
    WasteType,
)
from colmena_ledger.domain.status import (
    COMPENSATING_TRANSITIONS,
    FORWARD_TRANSITIONS,
    is_allowed,
    source_statuses,
    target_status,
)
from colmena_ledger.primitives import InvariantViolationError, UUID4Generator


def _container(status: ContainerStatus = ContainerStatus.RECOVERED, **kw: object) -> Container:
    data: dict[str, object] = {
        "id": "c-1",
        "waste_type": WasteType(id="plastic", name="Plastic"),
        "created_by": "alice",
        "batch_number": 1,
        "status": status,
    }
    data.update(kw)
    return Container(**data)


# ═══════════════════════════════════════════════════════════════════════
# State machine
# ═══════════════════════════════════════════════════════════════════════


class TestStateMachine:
    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (ContainerStatus.RECOVERED, ContainerStatus.TRANSFER_PENDING),
            (ContainerStatus.TRANSFER_PENDING, ContainerStatus.TRANSFERRED),
            (ContainerStatus.TRANSFER_PENDING, ContainerStatus.RECOVERED),
            (ContainerStatus.RECOVERED, ContainerStatus.IN_TRANSIT),
            (ContainerStatus.TRANSFERRED, ContainerStatus.IN_TRANSIT),
        ],
    )
    def test_forward_edges(self, current: ContainerStatus, target: ContainerStatus) -> None:
        assert is_allowed(current, target)

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (ContainerStatus.IN_TRANSIT, ContainerStatus.RECOVERED),
            (ContainerStatus.TRANSFERRED, ContainerStatus.RECOVERED),
            (ContainerStatus.TRANSFERRED, ContainerStatus.TRANSFER_PENDING),
            (ContainerStatus.RECOVERED, ContainerStatus.TRANSFERRED),
            (ContainerStatus.TRANSFER_PENDING, ContainerStatus.IN_TRANSIT),
        ],
    )
    def test_forbidden_forward_edges(
        self, current: ContainerStatus, target: ContainerStatus
    ) -> None:
        assert not is_allowed(current, target)

    def test_compensating_edges_are_reversed_forward_edges(self) -> None:
        assert {(t, s) for s, t in FORWARD_TRANSITIONS} == COMPENSATING_TRANSITIONS
        assert is_allowed(
            ContainerStatus.IN_TRANSIT, ContainerStatus.TRANSFERRED, compensating=True
        )
        assert not is_allowed(ContainerStatus.IN_TRANSIT, ContainerStatus.TRANSFERRED)

    def test_same_status_is_always_allowed(self) -> None:
        for status in ContainerStatus:
            assert is_allowed(status, status)
            assert is_allowed(status, status, compensating=True)

    def test_every_transaction_type_has_source_and_target(self) -> None:
        for transaction_type in TransactionType:
            assert isinstance(source_statuses(transaction_type), frozenset)
            assert isinstance(target_status(transaction_type), ContainerStatus)

    def test_sources(self) -> None:
        assert source_statuses(TransactionType.RECOVER) == frozenset()
        assert source_statuses(TransactionType.TRANSFER_REQUEST) == {ContainerStatus.RECOVERED}
        assert source_statuses(TransactionType.TRANSFER_CANCEL) == {
            ContainerStatus.TRANSFER_PENDING
        }
        assert source_statuses(TransactionType.TRANSPORT) == {
            ContainerStatus.RECOVERED,
            ContainerStatus.TRANSFERRED,
        }

    def test_targets(self) -> None:
        assert target_status(TransactionType.TRANSFER_ACCEPT) == ContainerStatus.TRANSFERRED
        assert target_status(TransactionType.TRANSFER_REJECT) == ContainerStatus.RECOVERED
        assert target_status(TransactionType.TRANSPORT) == ContainerStatus.IN_TRANSIT


# ═══════════════════════════════════════════════════════════════════════
# Records
# ═══════════════════════════════════════════════════════════════════════


class TestContainer:
    def test_transition_returns_previous_status(self) -> None:
        container = _container()
        previous = container.transition_to(ContainerStatus.TRANSFER_PENDING)
        assert previous == ContainerStatus.RECOVERED
        assert container.status == ContainerStatus.TRANSFER_PENDING

    def test_illegal_transition_raises_and_keeps_status(self) -> None:
        container = _container(ContainerStatus.IN_TRANSIT)
        with pytest.raises(InvariantViolationError, match="IN_TRANSIT to RECOVERED"):
            container.transition_to(ContainerStatus.RECOVERED)
        assert container.status == ContainerStatus.IN_TRANSIT

    def test_compensating_transition(self) -> None:
        container = _container(ContainerStatus.IN_TRANSIT)
        container.transition_to(ContainerStatus.RECOVERED, compensating=True)
        assert container.status == ContainerStatus.RECOVERED

    def test_transition_touches_updated_at(self) -> None:
        container = _container()
        before = container.updated_at
        container.transition_to(ContainerStatus.IN_TRANSIT)
        assert container.updated_at >= before


class TestTransaction:
    def test_from_alias(self) -> None:
        transaction = Transaction.model_validate(
            {"id": "t-1", "type": "TRANSFER_REQUEST", "from": "alice", "to": "bob", "number": 7}
        )
        assert transaction.from_ == "alice"
        dumped = transaction.model_dump(by_alias=True)
        assert dumped["from"] == "alice"
        assert "details" not in dumped

    def test_populate_by_field_name(self) -> None:
        transaction = Transaction(id="t-1", type=TransactionType.TRANSPORT, from_="alice", number=1)
        assert transaction.from_ == "alice"
        assert transaction.to is None

    def test_expire_once(self) -> None:
        transaction = Transaction(id="t-1", type=TransactionType.TRANSFER_REQUEST, number=1)
        at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        transaction.expire(at)
        assert transaction.expired_at == at
        with pytest.raises(InvariantViolationError, match="already expired"):
            transaction.expire()

    def test_reopen(self) -> None:
        transaction = Transaction(id="t-1", type=TransactionType.TRANSFER_REQUEST, number=1)
        transaction.expire()
        transaction.reopen()
        assert transaction.expired_at is None


class TestTransactionDetail:
    def test_for_container_copies_waste_type_quantity(self) -> None:
        transaction = Transaction(id="t-1", type=TransactionType.RECOVER, number=1)
        container = _container(waste_type=WasteType(id="glass", name="Glass", qty=Decimal("2.5")))
        detail = TransactionDetail.for_container(transaction, container, id="d-1")
        assert detail.transaction_id == "t-1"
        assert detail.container_id == "c-1"
        assert detail.qty == Decimal("2.5")
        assert detail.unit == "kg"


class TestAggregateRoot:
    def test_id_required_without_generator(self) -> None:
        with pytest.raises(ValueError, match="id_generator"):
            StockCounter(user_id="alice", waste_type_id="plastic")

    def test_id_from_generator(self) -> None:
        counter = StockCounter(
            id_generator=UUID4Generator(), user_id="alice", waste_type_id="plastic"
        )
        assert len(counter.id) == 36
        assert counter.version == 0

    def test_set_version(self) -> None:
        counter = StockCounter(id_generator=UUID4Generator(), user_id="a", waste_type_id="b")
        counter.set_version(3)
        assert counter.version == 3

    def test_stock_counter_never_negative(self) -> None:
        with pytest.raises(PydanticValidationError):
            StockCounter(id="s", user_id="alice", waste_type_id="plastic", amount=-1)


class TestValueObjects:
    def test_auth_scope(self) -> None:
        scope = AuthScope.for_actor(Actor(id="alice", session_token="tok"))
        assert scope.session_token == "tok"
        assert scope.can_see("bob", "alice")
        assert not scope.can_see("bob", None)
        assert AuthScope.elevated().can_see()

    def test_actor_is_frozen(self) -> None:
        actor = Actor(id="alice")
        with pytest.raises(PydanticValidationError):
            actor.id = "mallory"  # type: ignore[misc]

    def test_recover_item_qty_positive(self) -> None:
        with pytest.raises(PydanticValidationError):
            RecoverItem(type_id="plastic", qty=0)


class TestSpecifications:
    def test_details_of_transaction(self) -> None:
        spec = DetailsOfTransaction("t-1")
        detail = TransactionDetail(
            id="d-1", transaction_id="t-1", container_id="c-1", qty=Decimal("1"), unit="kg"
        )
        assert spec.is_satisfied_by(detail)
        assert spec.to_dict() == {"transaction_id": "t-1"}

    def test_details_of_container(self) -> None:
        detail = TransactionDetail(
            id="d-1", transaction_id="t-1", container_id="c-1", qty=Decimal("1"), unit="kg"
        )
        assert DetailsOfContainer("c-1").is_satisfied_by(detail)
        assert not DetailsOfContainer("c-2").is_satisfied_by(detail)
        assert not detail.grant_issued

    def test_containers_in_batch(self) -> None:
        spec = ContainersInBatch(1, ContainerStatus.RECOVERED)
        assert spec.is_satisfied_by(_container())
        assert not spec.is_satisfied_by(_container(ContainerStatus.IN_TRANSIT))
        assert not ContainersInBatch(2).is_satisfied_by(_container())
        assert spec.to_dict() == {"batch_number": 1, "status": "RECOVERED"}
