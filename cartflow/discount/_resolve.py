"""
Resolver — stacks store rules and a voucher over a cart snapshot.

Order of application:
    1. drop rules outside their validity window or above the subtotal floor
    2. product rules, line by line
    3. cart-wide rules against what the product rules left
    4. the voucher, against the remaining subtotal or the shipping cost

Rules stack in ascending id. Each deduction is clamped to what is left, so
the total can never exceed the subtotal.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from kungfu import Error, Ok, Result, is_ok

from cartflow._types import LineId, Money
from cartflow.cart import Cart
from cartflow.discount._types import (
    CartDiscount,
    DiscountBreakdown,
    DiscountRule,
    LineDiscount,
    RuleKind,
    RuleScope,
    Voucher,
    VoucherKind,
    VoucherTarget,
)
from cartflow.errors import CheckoutError, ErrorKind
from cartflow.money import cap, format_price, percent_of


# ═══════════════════════════════════════════════════════════════════════════════
# Rules
# ═══════════════════════════════════════════════════════════════════════════════


def eligible_rules(rules: Iterable[DiscountRule], subtotal: Money, now: datetime) -> list[DiscountRule]:
    return sorted(
        (r for r in rules if r.is_active(now) and r.min_purchase <= subtotal),
        key=lambda r: r.id,
    )


def _rule_amount(rule: DiscountRule, base: Money) -> Money:
    match rule.kind:
        case RuleKind.PERCENTAGE:
            amount = percent_of(base, rule.value)
        case RuleKind.NOMINAL:
            amount = rule.value
        case RuleKind.BOGO:
            amount = 0
    return min(cap(amount, rule.max_discount_amount), base)


def apply_product_rules(cart: Cart, rules: Sequence[DiscountRule]) -> tuple[LineDiscount, ...]:
    remaining: dict[LineId, Money] = {line.id: line.line_total for line in cart.lines}
    applied: list[LineDiscount] = []

    for rule in rules:
        if rule.scope is not RuleScope.PRODUCT:
            continue
        for line in cart.lines:
            if line.product_id != rule.product_id:
                continue
            left = remaining[line.id]
            if rule.kind is RuleKind.BOGO:
                if line.quantity < 2:
                    continue
                free_units = line.quantity // 2
                amount = min(cap(free_units * line.unit_price, rule.max_discount_amount), left)
            else:
                amount = _rule_amount(rule, left)
            if amount <= 0:
                continue
            remaining[line.id] = left - amount
            applied.append(LineDiscount(line.id, line.product_id, rule.id, amount))

    return tuple(applied)


def apply_cart_rules(base: Money, rules: Sequence[DiscountRule]) -> tuple[CartDiscount, ...]:
    """BOGO without a product has nothing to give away and contributes 0."""
    applied: list[CartDiscount] = []
    left = base
    for rule in rules:
        if rule.scope is not RuleScope.CART:
            continue
        amount = _rule_amount(rule, left)
        if amount <= 0:
            continue
        left -= amount
        applied.append(CartDiscount(rule.id, amount))
    return tuple(applied)


# ═══════════════════════════════════════════════════════════════════════════════
# Vouchers
# ═══════════════════════════════════════════════════════════════════════════════


def check_voucher(voucher: Voucher, subtotal: Money, now: datetime) -> Result[Voucher, CheckoutError]:
    if voucher.is_used:
        return Error(CheckoutError(ErrorKind.VOUCHER_ALREADY_USED, f"Voucher {voucher.code} has already been used"))
    if voucher.is_expired(now):
        return Error(CheckoutError(ErrorKind.VOUCHER_EXPIRED, f"Voucher {voucher.code} has expired"))
    if subtotal < voucher.min_purchase_amount:
        return Error(CheckoutError(
            ErrorKind.VOUCHER_INELIGIBLE,
            f"Voucher {voucher.code} needs a minimum purchase of {format_price(voucher.min_purchase_amount)}",
        ))
    return Ok(voucher)


def voucher_amount(voucher: Voucher, base: Money) -> Money:
    """Deduction against ``base``: remaining subtotal or shipping cost."""
    match voucher.kind:
        case VoucherKind.PERCENTAGE:
            computed = percent_of(base, voucher.value)
        case VoucherKind.NOMINAL:
            computed = voucher.value
    return max(0, min(cap(computed, voucher.max_discount_amount), base))


def usable_vouchers(vouchers: Iterable[Voucher], subtotal: Money, now: datetime) -> list[Voucher]:
    return [v for v in vouchers if is_ok(check_voucher(v, subtotal, now))]


# ═══════════════════════════════════════════════════════════════════════════════
# resolve()
# ═══════════════════════════════════════════════════════════════════════════════


def resolve(
    cart: Cart,
    rules: Iterable[DiscountRule],
    voucher: Voucher | None = None,
    *,
    now: datetime,
    shipping_cost: Money = 0,
) -> DiscountBreakdown:
    """
    Compute every deduction for ``cart``.

    Never fails: a voucher that does not apply contributes zero and its reason
    is kept in ``voucher_error``.
    """
    subtotal = cart.subtotal()
    rules_in_order = eligible_rules(rules, subtotal, now)

    line_discounts = apply_product_rules(cart, rules_in_order)
    after_products = subtotal - sum(d.amount for d in line_discounts)
    cart_discounts = apply_cart_rules(after_products, rules_in_order)
    after_rules = after_products - sum(d.amount for d in cart_discounts)

    voucher_deduction = 0
    shipping_deduction = 0
    voucher_error = None
    if voucher is not None:
        match check_voucher(voucher, subtotal, now):
            case Ok(valid) if valid.target is VoucherTarget.SHIPPING:
                shipping_deduction = voucher_amount(valid, shipping_cost)
            case Ok(valid):
                voucher_deduction = voucher_amount(valid, after_rules)
            case Error(e):
                voucher_error = e

    return DiscountBreakdown(
        subtotal=subtotal,
        line_discounts=line_discounts,
        cart_discounts=cart_discounts,
        voucher_deduction=voucher_deduction,
        shipping_deduction=shipping_deduction,
        voucher_error=voucher_error,
    )


def apply_voucher(
    cart: Cart,
    rules: Iterable[DiscountRule],
    voucher: Voucher,
    *,
    now: datetime,
    shipping_cost: Money = 0,
) -> Result[DiscountBreakdown, CheckoutError]:
    """Like ``resolve`` but a voucher that does not apply is an ``Error``."""
    breakdown = resolve(cart, rules, voucher, now=now, shipping_cost=shipping_cost)
    if breakdown.voucher_error is not None:
        return Error(breakdown.voucher_error)
    return Ok(breakdown)


__all__ = (
    "eligible_rules",
    "apply_product_rules",
    "apply_cart_rules",
    "check_voucher",
    "voucher_amount",
    "usable_vouchers",
    "resolve",
    "apply_voucher",
)
