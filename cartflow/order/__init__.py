"""
Order — lifecycle of a placed order.

    from cartflow.order import OrderActions, OrderStatus
"""

from __future__ import annotations

from cartflow.order._types import (
    OrderStatus,
    TRANSITIONS,
    can_transition,
    OrderAction,
    OrderItem,
    Order,
    OrderDraft,
)
from cartflow.order._proof import MAX_PROOF_BYTES, PROOF_CONTENT_TYPES, PaymentProof
from cartflow.order._actions import OrderActions, fetch_orders, fetch_order
from cartflow.order._format import format_invoice_id, format_time_left

__all__ = (
    "OrderStatus",
    "TRANSITIONS",
    "can_transition",
    "OrderAction",
    "OrderItem",
    "Order",
    "OrderDraft",
    "MAX_PROOF_BYTES",
    "PROOF_CONTENT_TYPES",
    "PaymentProof",
    "OrderActions",
    "fetch_orders",
    "fetch_order",
    "format_invoice_id",
    "format_time_left",
)
