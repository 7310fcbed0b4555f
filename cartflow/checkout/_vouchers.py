from __future__ import annotations

from datetime import datetime

from kungfu import Error, Result
from combinators import lift as L

from cartflow import discount as D
from cartflow._types import Money, OrderId
from cartflow.errors import CheckoutError, ErrorKind
from cartflow.lift import as_checkout_error
from cartflow.ports import VoucherService


async def usable_vouchers(
    vouchers: VoucherService,
    subtotal: Money,
    now: datetime,
) -> Result[list[D.Voucher], CheckoutError]:
    """The user's vouchers that could apply to ``subtotal`` right now."""
    return await L.catching_async(vouchers.my_vouchers, on_error=as_checkout_error).map(
        lambda found: D.usable_vouchers(found, subtotal, now)
    )


async def redeem_voucher(
    vouchers: VoucherService,
    code: str,
    order_id: OrderId | None = None,
) -> Result[D.Voucher, CheckoutError]:
    """Look a typed code up with the backend."""
    code = code.strip().upper()
    if not code:
        return Error(CheckoutError(ErrorKind.VOUCHER_CODE_REQUIRED, "Enter a voucher code"))
    return await L.catching_async(lambda: vouchers.apply(code, order_id), on_error=as_checkout_error)


__all__ = ("usable_vouchers", "redeem_voucher")
