"""
Order types and the status machine.

    PENDING_PAYMENT -> PENDING_CONFIRMATION -> PROCESSING -> SHIPPED -> CONFIRMED
           |                   |
           +------> CANCELLED <+

PENDING_CONFIRMATION -> PROCESSING -> SHIPPED are driven by the store and only
show up when the order is refreshed from the backend.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum

from kungfu import Error, Ok, Result

from cartflow._types import AddressId, LineId, Money, OrderId, ProductId, StoreId
from cartflow.errors import CheckoutError, ErrorKind


# ═══════════════════════════════════════════════════════════════════════════════
# Status
# ═══════════════════════════════════════════════════════════════════════════════


class OrderStatus(Enum):
    PENDING_PAYMENT = "PENDING_PAYMENT"
    PENDING_CONFIRMATION = "PENDING_CONFIRMATION"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self]


TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING_PAYMENT: frozenset({OrderStatus.PENDING_CONFIRMATION, OrderStatus.CANCELLED}),
    OrderStatus.PENDING_CONFIRMATION: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.CONFIRMED}),
    OrderStatus.CONFIRMED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(source: OrderStatus, target: OrderStatus) -> bool:
    return target in TRANSITIONS[source]


class OrderAction(Enum):
    """What the customer may do next."""

    UPLOAD_PAYMENT_PROOF = "upload_payment_proof"
    CANCEL = "cancel"
    CONFIRM_RECEIPT = "confirm_receipt"


# ═══════════════════════════════════════════════════════════════════════════════
# Order
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderItem:
    """Snapshot taken at purchase; later catalog changes do not touch it."""

    product_name: str
    price_at_purchase: Money
    quantity: int
    product_id: ProductId | None = None

    @property
    def line_total(self) -> Money:
        return self.price_at_purchase * self.quantity


@dataclass(frozen=True, slots=True)
class Order:
    id: OrderId
    status: OrderStatus
    items: tuple[OrderItem, ...]
    subtotal: Money
    shipping_cost: Money
    discount_amount: Money
    created_at: datetime
    payment_deadline: datetime | None = None
    shipping_service: str | None = None
    cancel_reason: str | None = None
    payment_proof_url: str | None = None

    @property
    def total_amount(self) -> Money:
        return max(0, self.subtotal + self.shipping_cost - self.discount_amount)

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    def payment_time_left(self, now: datetime) -> timedelta | None:
        """Countdown while awaiting payment; ``None`` once not applicable."""
        if self.status is not OrderStatus.PENDING_PAYMENT or self.payment_deadline is None:
            return None
        return max(self.payment_deadline - now, timedelta(0))

    def payment_window_open(self, now: datetime) -> bool:
        if self.status is not OrderStatus.PENDING_PAYMENT:
            return False
        return self.payment_deadline is None or now <= self.payment_deadline

    def available_actions(self, now: datetime) -> frozenset[OrderAction]:
        actions: set[OrderAction] = set()
        if self.payment_window_open(now):
            actions.add(OrderAction.UPLOAD_PAYMENT_PROOF)
        if can_transition(self.status, OrderStatus.CANCELLED):
            actions.add(OrderAction.CANCEL)
        if can_transition(self.status, OrderStatus.CONFIRMED):
            actions.add(OrderAction.CONFIRM_RECEIPT)
        return frozenset(actions)

    def transition(self, target: OrderStatus) -> Result[Order, CheckoutError]:
        if not can_transition(self.status, target):
            return Error(CheckoutError(
                ErrorKind.ILLEGAL_TRANSITION,
                f"Order {self.id} cannot go from {self.status.label} to {target.label}",
            ))
        deadline = self.payment_deadline if target is OrderStatus.PENDING_PAYMENT else None
        return Ok(replace(self, status=target, payment_deadline=deadline))


@dataclass(frozen=True, slots=True)
class OrderDraft:
    """What the backend needs to turn the selected cart lines into an order."""

    address_id: AddressId
    shipping_service: str
    store_id: StoreId
    cart_line_ids: tuple[LineId, ...]
    voucher_code: str | None = None


__all__ = (
    "OrderStatus",
    "TRANSITIONS",
    "can_transition",
    "OrderAction",
    "OrderItem",
    "Order",
    "OrderDraft",
)
