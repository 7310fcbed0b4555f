"""
Order placement — turn a checkable preview into an order.
"""

from __future__ import annotations

import logging

from kungfu import Error, Ok, Result
from combinators import lift as L

from cartflow.cart import CartSession
from cartflow.checkout._types import CheckoutPreview
from cartflow.errors import CheckoutError, ErrorKind
from cartflow.lift import as_checkout_error
from cartflow.order import Order, OrderDraft
from cartflow.ports import OrderService
from cartflow.shipping import Address, ShippingQuote

logger = logging.getLogger(__name__)


def draft_order(
    session: CartSession,
    preview: CheckoutPreview,
    address: Address | None = None,
    option: ShippingQuote | None = None,
    voucher_code: str | None = None,
) -> Result[OrderDraft, CheckoutError]:
    if not preview.can_checkout:
        reason = preview.blockers[0].message if preview.blockers else "Checkout is not available"
        return Error(CheckoutError(ErrorKind.CHECKOUT_BLOCKED, reason))

    address = address or preview.address
    if address is None:
        return Error(CheckoutError(ErrorKind.NO_ADDRESS_SELECTED, "Select a shipping address first"))

    option = option or preview.selected_option
    offered = {q.service_code for q in preview.shipping_options}
    if option is None or option.service_code not in offered:
        return Error(CheckoutError(ErrorKind.NO_SHIPPING_AVAILABLE, "Choose one of the offered shipping services"))

    cart = session.cart
    return Ok(OrderDraft(
        address_id=address.id,
        shipping_service=option.service_code,
        store_id=cart.store_id,
        cart_line_ids=tuple(line.id for line in cart.lines),
        voucher_code=voucher_code,
    ))


async def place_order(
    orders: OrderService,
    session: CartSession,
    preview: CheckoutPreview,
    address: Address | None = None,
    option: ShippingQuote | None = None,
    voucher_code: str | None = None,
) -> Result[Order, CheckoutError]:
    """
    Create the order and clear the local cart.

    The backend empties the server-side cart itself, so only the local copy
    is dropped here.
    """
    match draft_order(session, preview, address, option, voucher_code):
        case Error(e):
            return Error(e)
        case Ok(draft):
            pass

    result = await L.catching_async(lambda: orders.create(draft), on_error=as_checkout_error)
    match result:
        case Ok(order):
            logger.info("Placed order %s for store %s, total %s", order.id, draft.store_id, order.total_amount)
            session.forget()
        case Error(e):
            logger.warning("Placing order for store %s failed: %s", draft.store_id, e.message)
    return result


__all__ = ("draft_order", "place_order")
