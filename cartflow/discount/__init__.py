"""
Discount — store rules and vouchers resolved against a cart snapshot.

    from cartflow import discount as D

    breakdown = D.resolve(cart, rules, voucher, now=now, shipping_cost=shipping)
"""

from __future__ import annotations

from cartflow.discount._types import (
    RuleScope,
    RuleKind,
    DiscountRule,
    VoucherKind,
    VoucherTarget,
    Voucher,
    LineDiscount,
    CartDiscount,
    DiscountBreakdown,
)
from cartflow.discount._resolve import (
    eligible_rules,
    apply_product_rules,
    apply_cart_rules,
    check_voucher,
    voucher_amount,
    usable_vouchers,
    resolve,
    apply_voucher,
)

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
    "eligible_rules",
    "apply_product_rules",
    "apply_cart_rules",
    "check_voucher",
    "voucher_amount",
    "usable_vouchers",
    "resolve",
    "apply_voucher",
)
