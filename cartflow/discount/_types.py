"""
Discount types — store rules, user vouchers and the resolved breakdown.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from cartflow._types import LineId, Money, ProductId, RuleId
from cartflow.errors import CheckoutError


# ═══════════════════════════════════════════════════════════════════════════════
# Store discount rules
# ═══════════════════════════════════════════════════════════════════════════════


class RuleScope(Enum):
    PRODUCT = "PRODUCT"
    CART = "CART"


class RuleKind(Enum):
    BOGO = "BOGO"
    PERCENTAGE = "DIRECT_PERCENTAGE"
    NOMINAL = "DIRECT_NOMINAL"


@dataclass(frozen=True, slots=True)
class DiscountRule:
    """
    Read-only store rule. ``product_id`` set means product scope,
    ``None`` means the rule applies to the whole cart.
    """

    id: RuleId
    kind: RuleKind
    value: int = 0
    product_id: ProductId | None = None
    min_purchase: Money = 0
    max_discount_amount: Money | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    name: str = ""

    @property
    def scope(self) -> RuleScope:
        return RuleScope.CART if self.product_id is None else RuleScope.PRODUCT

    def is_active(self, now: datetime) -> bool:
        """Validity window is inclusive on both ends; a missing bound is open."""
        if self.start_date is not None and now < self.start_date:
            return False
        if self.end_date is not None and now > self.end_date:
            return False
        return True


# ═══════════════════════════════════════════════════════════════════════════════
# Vouchers
# ═══════════════════════════════════════════════════════════════════════════════


class VoucherKind(Enum):
    PERCENTAGE = "PERCENTAGE"
    NOMINAL = "NOMINAL"


class VoucherTarget(Enum):
    TRANSACTION = "TRANSACTION"
    SHIPPING = "SHIPPING"


@dataclass(frozen=True, slots=True)
class Voucher:
    code: str
    kind: VoucherKind
    value: int
    min_purchase_amount: Money = 0
    max_discount_amount: Money | None = None
    expires_at: datetime | None = None
    target: VoucherTarget = VoucherTarget.TRANSACTION
    used_at: datetime | None = None
    id: int | None = None
    description: str = ""

    @property
    def is_used(self) -> bool:
        return self.used_at is not None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now > self.expires_at

    def is_usable(self, now: datetime) -> bool:
        """Display gating only; the backend has the final word."""
        return not self.is_used and not self.is_expired(now)


# ═══════════════════════════════════════════════════════════════════════════════
# Breakdown
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class LineDiscount:
    line_id: LineId
    product_id: ProductId
    rule_id: RuleId
    amount: Money


@dataclass(frozen=True, slots=True)
class CartDiscount:
    rule_id: RuleId
    amount: Money


@dataclass(frozen=True, slots=True)
class DiscountBreakdown:
    """
    Every deduction the cart qualifies for.

    ``total_discount`` covers rule discounts plus a transaction voucher and
    never exceeds the subtotal. A shipping voucher lands in
    ``shipping_deduction`` and is taken off the shipping cost instead.
    """

    subtotal: Money
    line_discounts: tuple[LineDiscount, ...] = ()
    cart_discounts: tuple[CartDiscount, ...] = ()
    voucher_deduction: Money = 0
    shipping_deduction: Money = 0
    voucher_error: CheckoutError | None = field(default=None, compare=False)

    @property
    def product_discount(self) -> Money:
        return sum(d.amount for d in self.line_discounts)

    @property
    def cart_discount(self) -> Money:
        return sum(d.amount for d in self.cart_discounts)

    @property
    def discount_amount(self) -> Money:
        """Store rule discounts only."""
        return self.product_discount + self.cart_discount

    @property
    def total_discount(self) -> Money:
        return self.discount_amount + self.voucher_deduction

    @property
    def net_subtotal(self) -> Money:
        return self.subtotal - self.total_discount


__all__ = (
    "RuleScope",
    "RuleKind",
    "DiscountRule",
    "VoucherKind",
    "VoucherTarget",
    "Voucher",
    "LineDiscount",
    "CartDiscount",
    "DiscountBreakdown",
)
