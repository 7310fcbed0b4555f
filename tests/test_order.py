from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from kungfu import Error, Ok

from cartflow.config import Settings
from cartflow.errors import CheckoutError, ErrorKind
from cartflow.order import (
    OrderAction,
    OrderActions,
    OrderStatus,
    PaymentProof,
    can_transition,
    fetch_order,
    fetch_orders,
    format_invoice_id,
    format_time_left,
)
from tests.fakes import NOW, FakeOrders, jpeg_proof, make_order


def actions_for(orders: FakeOrders, status: OrderStatus, **kwargs: object) -> OrderActions:
    order = make_order(status=status)
    orders.orders[order.id] = order
    return OrderActions(orders, order, clock=lambda: NOW, **kwargs)  # type: ignore[arg-type]


# ═══════════════════════════════════════════════════════════════════════════════
# Status machine
# ═══════════════════════════════════════════════════════════════════════════════


def test_terminal_states() -> None:
    assert OrderStatus.CONFIRMED.is_terminal
    assert OrderStatus.CANCELLED.is_terminal
    assert not OrderStatus.SHIPPED.is_terminal


def test_cancel_only_before_processing() -> None:
    assert can_transition(OrderStatus.PENDING_PAYMENT, OrderStatus.CANCELLED)
    assert can_transition(OrderStatus.PENDING_CONFIRMATION, OrderStatus.CANCELLED)
    assert not can_transition(OrderStatus.PROCESSING, OrderStatus.CANCELLED)
    assert not can_transition(OrderStatus.SHIPPED, OrderStatus.CANCELLED)


def test_status_label() -> None:
    assert OrderStatus.PENDING_PAYMENT.label == "PENDING PAYMENT"


def test_total_amount_is_never_negative() -> None:
    order = make_order()

    assert order.total_amount == 25000 + 20500 - 2500
    assert order.transition(OrderStatus.CANCELLED).value.payment_deadline is None


def test_available_actions_follow_status() -> None:
    assert make_order().available_actions(NOW) == {OrderAction.UPLOAD_PAYMENT_PROOF, OrderAction.CANCEL}
    assert make_order(status=OrderStatus.SHIPPED).available_actions(NOW) == {OrderAction.CONFIRM_RECEIPT}
    assert make_order(status=OrderStatus.PROCESSING).available_actions(NOW) == frozenset()


def test_payment_countdown() -> None:
    order = make_order(deadline=NOW + timedelta(hours=1, seconds=5))

    assert order.payment_time_left(NOW) == timedelta(hours=1, seconds=5)
    assert format_time_left(order.payment_time_left(NOW)) == "01:00:05"
    assert order.payment_time_left(NOW + timedelta(days=1)) == timedelta(0)
    assert OrderAction.UPLOAD_PAYMENT_PROOF not in order.available_actions(NOW + timedelta(days=1))


def test_invoice_id() -> None:
    assert format_invoice_id(42, datetime(2024, 1, 5)) == "INV/20240105/000042"


# ═══════════════════════════════════════════════════════════════════════════════
# Actions
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_cancel_from_pending_payment(orders: FakeOrders) -> None:
    actions = actions_for(orders, OrderStatus.PENDING_PAYMENT)

    result = await actions.cancel("  changed my mind ")

    assert isinstance(result, Ok)
    assert actions.order.status is OrderStatus.CANCELLED
    assert orders.calls[-1] == ("cancel", 42, "changed my mind")


@pytest.mark.asyncio
async def test_cancel_from_processing_is_illegal(orders: FakeOrders) -> None:
    actions = actions_for(orders, OrderStatus.PROCESSING)

    result = await actions.cancel("too slow")

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.ILLEGAL_TRANSITION
    assert actions.order.status is OrderStatus.PROCESSING
    assert orders.calls == []


@pytest.mark.asyncio
async def test_cancel_requires_reason(orders: FakeOrders) -> None:
    actions = actions_for(orders, OrderStatus.PENDING_CONFIRMATION)

    result = await actions.cancel("   ")

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.INVALID_REASON
    assert orders.calls == []


@pytest.mark.asyncio
async def test_upload_when_shipped_is_illegal(orders: FakeOrders) -> None:
    actions = actions_for(orders, OrderStatus.SHIPPED)

    result = await actions.upload_payment_proof(jpeg_proof())

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.ILLEGAL_TRANSITION
    assert actions.order.status is OrderStatus.SHIPPED


@pytest.mark.asyncio
async def test_upload_moves_to_pending_confirmation(orders: FakeOrders) -> None:
    actions = actions_for(orders, OrderStatus.PENDING_PAYMENT)

    result = await actions.upload_payment_proof(jpeg_proof())

    assert isinstance(result, Ok)
    assert actions.order.status is OrderStatus.PENDING_CONFIRMATION
    assert actions.order.payment_deadline is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "proof",
    [
        PaymentProof("receipt.pdf", "application/pdf", b"%PDF"),
        PaymentProof("huge.png", "image/png", b"\x89" * (1024 * 1024 + 1)),
        PaymentProof("empty.png", "image/png", b""),
    ],
)
async def test_invalid_proof_never_uploads(orders: FakeOrders, proof: PaymentProof) -> None:
    actions = actions_for(orders, OrderStatus.PENDING_PAYMENT)

    result = await actions.upload_payment_proof(proof)

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.INVALID_PROOF
    assert orders.calls == []


@pytest.mark.asyncio
async def test_upload_transport_failure_is_retryable(orders: FakeOrders) -> None:
    actions = actions_for(orders, OrderStatus.PENDING_PAYMENT)
    orders.fail = CheckoutError(ErrorKind.TIMEOUT, "timed out")

    failed = await actions.upload_payment_proof(jpeg_proof())
    orders.fail = None
    retried = await actions.upload_payment_proof(jpeg_proof())

    assert isinstance(failed, Error)
    assert failed.error.kind is ErrorKind.UPLOAD_FAILED
    assert failed.error.retryable is True
    assert isinstance(retried, Ok)
    assert actions.order.status is OrderStatus.PENDING_CONFIRMATION


@pytest.mark.asyncio
async def test_upload_after_deadline_is_blocked(orders: FakeOrders) -> None:
    actions = actions_for(orders, OrderStatus.PENDING_PAYMENT)
    late = OrderActions(orders, actions.order, clock=lambda: NOW + timedelta(days=2))

    result = await late.upload_payment_proof(jpeg_proof())

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.PAYMENT_DEADLINE_PASSED
    assert orders.calls == []


@pytest.mark.asyncio
async def test_confirm_receipt_only_when_shipped(orders: FakeOrders) -> None:
    shipped = actions_for(orders, OrderStatus.SHIPPED)

    assert isinstance(await shipped.confirm_receipt(), Ok)
    assert shipped.order.status is OrderStatus.CONFIRMED
    assert isinstance(await shipped.confirm_receipt(), Error)


@pytest.mark.asyncio
async def test_refresh_applies_store_transitions(orders: FakeOrders) -> None:
    actions = actions_for(orders, OrderStatus.PENDING_CONFIRMATION)
    orders.orders[42] = make_order(status=OrderStatus.PROCESSING)

    result = await actions.refresh()

    assert isinstance(result, Ok)
    assert actions.order.status is OrderStatus.PROCESSING


@pytest.mark.asyncio
async def test_fetch_orders_newest_first(orders: FakeOrders) -> None:
    older = make_order(order_id=7, status=OrderStatus.SHIPPED)
    orders.orders[7] = replace(older, created_at=NOW - timedelta(days=3))

    everything = await fetch_orders(orders)
    shipped = await fetch_orders(orders, OrderStatus.SHIPPED)

    assert [o.id for o in everything.value] == [42, 7]
    assert [o.id for o in shipped.value] == [7]


@pytest.mark.asyncio
async def test_fetch_order_wraps_actions(orders: FakeOrders) -> None:
    found = await fetch_order(orders, 42)
    missing = await fetch_order(orders, 99)

    assert isinstance(found, Ok)
    assert found.value.order == orders.orders[42]
    assert isinstance(missing, Error)
    assert missing.error.kind is ErrorKind.NOT_FOUND


@pytest.mark.asyncio
async def test_fetch_order_honours_configured_proof_limit(orders: FakeOrders) -> None:
    orders.orders[42] = make_order(deadline=None)
    settings = Settings(proof_max_bytes=1000)

    actions = (await fetch_order(orders, 42, proof_max_bytes=settings.proof_max_bytes)).value
    result = await actions.upload_payment_proof(jpeg_proof(2048))

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.INVALID_PROOF
    assert ("upload", 42, "receipt.jpg") not in orders.calls


@pytest.mark.parametrize(
    ("name", "content_type", "valid"),
    [
        ("receipt.JPG", "image/jpeg", True),
        ("receipt.png", "image/png", True),
        ("receipt.gif", "application/octet-stream", False),
    ],
)
def test_proof_from_path(tmp_path: Path, name: str, content_type: str, valid: bool) -> None:
    path = tmp_path / name
    path.write_bytes(b"\x89" * 64)

    proof = PaymentProof.from_path(path)

    assert proof.filename == name
    assert proof.content_type == content_type
    assert proof.size == 64
    assert isinstance(proof.validate(), Ok) is valid
