"""
Checkout types — the request that drives a preview and the preview itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from cartflow._types import AddressId, Money
from cartflow.cart import Cart, StockIssue
from cartflow.discount import DiscountBreakdown, Voucher
from cartflow.errors import CheckoutError
from cartflow.shipping import (
    DEFAULT_SHIPPING_OPTIONS,
    Address,
    NearestStore,
    ShippingOption,
    ShippingQuote,
    ShippingRates,
)


@dataclass(frozen=True, slots=True)
class CheckoutRequest:
    """
    Everything the preview depends on. A new request means a new preview.

    ``address_id`` and ``shipping_service`` are the user's choices; when unset
    the default address and the cheapest service are used.
    """

    cart: Cart
    now: datetime
    address_id: AddressId | None = None
    shipping_service: str | None = None
    voucher: Voucher | None = None
    shipping_options: tuple[ShippingOption, ...] = DEFAULT_SHIPPING_OPTIONS
    rates: ShippingRates = ShippingRates()


@dataclass(frozen=True, slots=True)
class CheckoutPreview:
    can_checkout: bool
    requires_address: bool
    subtotal: Money
    total_weight: int
    shipping_options: tuple[ShippingQuote, ...]
    selected_option: ShippingQuote | None
    shipping_cost: Money
    discount_amount: Money
    voucher_deduction: Money
    shipping_deduction: Money
    total_discount: Money
    final_total: Money
    address: Address | None
    addresses: tuple[Address, ...]
    nearest_store: NearestStore | None
    stock_issues: tuple[StockIssue, ...]
    breakdown: DiscountBreakdown
    blockers: tuple[CheckoutError, ...] = field(default=(), compare=False)

    @property
    def distance_km(self) -> float | None:
        return None if self.nearest_store is None else self.nearest_store.distance_km

    @property
    def voucher_error(self) -> CheckoutError | None:
        return self.breakdown.voucher_error


__all__ = ("CheckoutRequest", "CheckoutPreview")
