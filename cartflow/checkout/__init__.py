"""
Checkout — preview, live recomputation and order placement.

    from cartflow import checkout as CO

    builder = CO.PreviewBuilder(catalog, discounts, addresses, locator)
    match await builder.build(CO.CheckoutRequest(cart=session.cart, now=now)):
        case Ok(preview) if preview.can_checkout:
            order = await CO.place_order(orders, session, preview)
        case Ok(preview):
            show(preview.blockers)
        case Error(e):
            show_retry(e)
"""

from __future__ import annotations

from cartflow.checkout._types import CheckoutRequest, CheckoutPreview
from cartflow.checkout._nodes import (
    RequestNode,
    StockNode,
    RulesNode,
    AddressSelection,
    AddressNode,
    ShippingOutcome,
    ShippingNode,
    PreviewNode,
)
from cartflow.checkout._live import (
    PREVIEW_GRAPH,
    PreviewBuilder,
    LatestWins,
    Debouncer,
    PreviewListener,
    LivePreview,
)
from cartflow.checkout._place import draft_order, place_order
from cartflow.checkout._vouchers import usable_vouchers, redeem_voucher

__all__ = (
    "CheckoutRequest",
    "CheckoutPreview",
    "RequestNode",
    "StockNode",
    "RulesNode",
    "AddressSelection",
    "AddressNode",
    "ShippingOutcome",
    "ShippingNode",
    "PreviewNode",
    "PREVIEW_GRAPH",
    "PreviewBuilder",
    "LatestWins",
    "Debouncer",
    "PreviewListener",
    "LivePreview",
    "draft_order",
    "place_order",
    "usable_vouchers",
    "redeem_voucher",
)
