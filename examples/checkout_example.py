"""
Checkout walk-through against a running backend.

    CARTFLOW_BASE_API_URL=http://localhost:8000/api CARTFLOW_TOKEN=... \
        python -m examples.checkout_example 12 3 [receipt.jpg]

Adds product 12 to the cart of store 3, previews checkout with the default
address, places the order and prints the payment countdown. With a receipt
path it also uploads the payment proof.
"""

from __future__ import annotations

import asyncio
import os
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path

from kungfu import Error, Ok

from cartflow import Settings, configure_logging, get_logger
from cartflow.cart import CartSession
from cartflow.checkout import CheckoutRequest, LivePreview, PreviewBuilder, place_order
from cartflow.client import Backend
from cartflow.money import format_price
from cartflow.order import OrderActions, PaymentProof, format_invoice_id, format_time_left
from cartflow.shipping import ShippingRates, format_etd


def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


async def main(product_id: int, store_id: int, receipt: Path | None = None) -> None:
    settings = Settings.load()
    configure_logging(uuid.uuid4().hex[:8], settings.log_dir)
    log = get_logger(__name__, "example")

    backend = Backend.connect(settings, token=os.getenv("CARTFLOW_TOKEN"))
    try:
        session = CartSession(backend.carts, backend.catalog, store_id)
        banner("Cart")
        match await session.add(product_id, 1):
            case Ok(change):
                for line in change.cart.lines:
                    print(f"  {line.quantity} x {line.name:<24} {format_price(line.line_total, settings.currency)}")
                if change.clamped:
                    print("  (quantity reduced to available stock)")
            case Error(e):
                print(f"  ✗ {e.message}")
                return

        banner("Preview")
        builder = PreviewBuilder(backend.catalog, backend.discounts, backend.addresses, backend.locator)
        request = CheckoutRequest(
            session.cart,
            datetime.now(timezone.utc),
            rates=ShippingRates(settings.distance_rate, settings.weight_rate),
        )
        live = LivePreview(builder, lambda _: None, debounce_sec=settings.preview_debounce_sec)
        await live.request(request)
        live.close()
        match live.current:
            case Ok(preview):
                for quote in preview.shipping_options:
                    print(f"  {quote.option.service_name:<10} {format_etd(quote.option.etd):<18} {format_price(quote.cost)}")
                print(f"  Discount  {format_price(-preview.total_discount)}")
                print(f"  Total     {format_price(preview.final_total)}")
                for blocker in preview.blockers:
                    print(f"  ✗ {blocker.message}")
            case Error(e):
                log.warning("Preview failed: %s", e.message)
                return
            case None:
                return

        banner("Order")
        match await place_order(backend.orders, session, preview):
            case Ok(order):
                print(f"  {format_invoice_id(order.id, order.created_at)}  {order.status.label}")
                left = order.payment_time_left(datetime.now(timezone.utc))
                if left is not None:
                    print(f"  Pay within {format_time_left(left)}")
            case Error(e):
                print(f"  ✗ {e.message}")
                return

        if receipt is None:
            return
        banner("Payment")
        actions = OrderActions(backend.orders, order, proof_max_bytes=settings.proof_max_bytes)
        match await actions.upload_payment_proof(PaymentProof.from_path(receipt)):
            case Ok(paid):
                print(f"  {paid.status.label}")
            case Error(e):
                print(f"  ✗ {e.message}")
    finally:
        await backend.aclose()


if __name__ == "__main__":
    asyncio.run(main(
        int(sys.argv[1]),
        int(sys.argv[2]),
        Path(sys.argv[3]) if len(sys.argv) > 3 else None,
    ))
