"""
OrderActions — the customer-side transitions of one order.

Each action checks the status machine locally first, so an illegal request
never reaches the backend and never changes the held order. On success the
held order is replaced by what the backend returned.

    actions = OrderActions(orders, order)
    match await actions.cancel("Ordered the wrong size"):
        case Ok(cancelled):
            ...
        case Error(e) if e.kind is ErrorKind.ILLEGAL_TRANSITION:
            ...
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime, timezone

from kungfu import Error, Ok, Result
from combinators import lift as L

from cartflow import command as Cmd
from cartflow.errors import CheckoutError, ErrorCategory, ErrorKind
from cartflow.lift import as_checkout_error
from cartflow.order._proof import MAX_PROOF_BYTES, PaymentProof
from cartflow.order._types import Order, OrderStatus
from cartflow.ports import OrderService

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_upload_failure(exc: Exception) -> CheckoutError:
    error = as_checkout_error(exc)
    if error.category is ErrorCategory.TRANSPORT:
        return CheckoutError(ErrorKind.UPLOAD_FAILED, f"Upload failed, try again: {error.message}", status=error.status)
    return error


class OrderActions:
    def __init__(
        self,
        orders: OrderService,
        order: Order,
        *,
        proof_max_bytes: int = MAX_PROOF_BYTES,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._orders = orders
        self._order = order
        self._proof_max_bytes = proof_max_bytes
        self._clock = clock
        self._gate = Cmd.LoadingGate(f"order {order.id}")

    @property
    def order(self) -> Order:
        return self._order

    @property
    def loading(self) -> bool:
        return self._gate.loading

    # ═══════════════════════════════════════════════════════════════════════════
    # Transitions
    # ═══════════════════════════════════════════════════════════════════════════

    async def upload_payment_proof(self, proof: PaymentProof) -> Result[Order, CheckoutError]:
        """PENDING_PAYMENT -> PENDING_CONFIRMATION. Retry by calling again."""

        async def upload() -> Result[Order, CheckoutError]:
            match self._order.transition(OrderStatus.PENDING_CONFIRMATION):
                case Error(e):
                    return Error(e)
            if not self._order.payment_window_open(self._clock()):
                return Error(CheckoutError(
                    ErrorKind.PAYMENT_DEADLINE_PASSED,
                    f"Payment window for order {self._order.id} has closed",
                ))
            match proof.validate(self._proof_max_bytes):
                case Error(e):
                    return Error(e)

            order_id = self._order.id
            return await self._apply(
                L.catching_async(
                    lambda: self._orders.upload_payment_proof(order_id, proof),
                    on_error=_as_upload_failure,
                ),
                "upload payment proof",
            )

        return await self._gate.guard(upload)

    async def cancel(self, reason: str) -> Result[Order, CheckoutError]:
        """PENDING_PAYMENT / PENDING_CONFIRMATION -> CANCELLED. A reason is required."""

        async def cancel() -> Result[Order, CheckoutError]:
            match self._order.transition(OrderStatus.CANCELLED):
                case Error(e):
                    return Error(e)
            if not reason.strip():
                return Error(CheckoutError(ErrorKind.INVALID_REASON, "Tell us why you are cancelling"))

            order_id = self._order.id
            return await self._apply(
                L.catching_async(
                    lambda: self._orders.cancel(order_id, reason.strip()),
                    on_error=as_checkout_error,
                ),
                "cancel",
            )

        return await self._gate.guard(cancel)

    async def confirm_receipt(self) -> Result[Order, CheckoutError]:
        """SHIPPED -> CONFIRMED."""

        async def confirm() -> Result[Order, CheckoutError]:
            match self._order.transition(OrderStatus.CONFIRMED):
                case Error(e):
                    return Error(e)

            order_id = self._order.id
            return await self._apply(
                L.catching_async(lambda: self._orders.confirm(order_id), on_error=as_checkout_error),
                "confirm receipt",
            )

        return await self._gate.guard(confirm)

    async def refresh(self) -> Result[Order, CheckoutError]:
        """Pick up store-driven transitions (confirmation, shipping)."""

        async def refresh() -> Result[Order, CheckoutError]:
            order_id = self._order.id
            return await self._apply(
                L.catching_async(lambda: self._orders.get(order_id), on_error=as_checkout_error),
                "refresh",
            )

        return await self._gate.guard(refresh)

    async def _apply(
        self,
        request: Awaitable[Result[Order, CheckoutError]],
        action: str,
    ) -> Result[Order, CheckoutError]:
        result = await request
        match result:
            case Ok(order):
                if order.status is not self._order.status:
                    logger.info(
                        "Order %s: %s -> %s",
                        order.id,
                        self._order.status.value,
                        order.status.value,
                    )
                self._order = order
            case Error(e):
                logger.warning("Order %s: %s failed: %s", self._order.id, action, e.message)
        return result


async def fetch_orders(
    orders: OrderService,
    status: OrderStatus | None = None,
) -> Result[list[Order], CheckoutError]:
    """Newest first, optionally narrowed to one status."""

    def select(found: Sequence[Order]) -> list[Order]:
        picked = [o for o in found if status is None or o.status is status]
        return sorted(picked, key=lambda o: o.created_at, reverse=True)

    return await L.catching_async(orders.list, on_error=as_checkout_error).map(select)


async def fetch_order(
    orders: OrderService,
    order_id: int,
    *,
    proof_max_bytes: int = MAX_PROOF_BYTES,
) -> Result[OrderActions, CheckoutError]:
    return await L.catching_async(lambda: orders.get(order_id), on_error=as_checkout_error).map(
        lambda order: OrderActions(orders, order, proof_max_bytes=proof_max_bytes)
    )


__all__ = ("OrderActions", "fetch_orders", "fetch_order", "utcnow")
