from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from cartflow import discount as D
from cartflow.cart import Cart
from cartflow.client import Backend
from cartflow.config import Settings
from cartflow.errors import CheckoutError, ErrorCategory, ErrorKind
from cartflow.order import OrderDraft, OrderStatus
from tests.fakes import NOW, jpeg_proof

ORDER = {
    "id": 42,
    "status": "PENDING_PAYMENT",
    "items": [{"productId": 10, "productNameSnapshot": "Apples", "priceAtPurchase": 10000, "quantity": 2}],
    "subtotal": 20000,
    "shippingCost": 21250,
    "discountAmount": 0,
    "createdAt": "2024-01-05T10:00:00Z",
    "paymentDeadline": "2024-01-06T10:00:00Z",
    "shippingMethod": "REG",
}


def backend(handler: Callable[[httpx.Request], httpx.Response], **settings: object) -> Backend:
    config = Settings(base_api_url="http://test/api", **settings)  # type: ignore[arg-type]
    return Backend.connect(config, token="secret", transport=httpx.MockTransport(handler))


def data(payload: object, status: int = 200) -> httpx.Response:
    return httpx.Response(status, json={"data": payload})


# ═══════════════════════════════════════════════════════════════════════════════
# Decoding
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_cart_is_decoded_from_envelope() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return data({
            "id": 7,
            "storeId": 1,
            "items": [{
                "id": 101,
                "productId": 10,
                "quantity": 2,
                "stockAvailable": 5,
                "product": {"name": "Apples", "defaultPrice": 10000, "weight": 1000},
            }],
        })

    api = backend(handler)
    cart = await api.carts.fetch(1)
    await api.aclose()

    assert cart.id == 7
    assert cart.subtotal() == 20000
    assert cart.lines[0].available_stock == 5
    assert cart.total_weight == 2000
    assert seen[0].url.path == "/api/cart"
    assert seen[0].url.params["storeId"] == "1"
    assert seen[0].headers["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_discount_rules_are_decoded() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["productIds"] == "10,20"
        return data([{"id": 3, "type": "DIRECT_PERCENTAGE", "value": 10, "minPurchase": 0}])

    api = backend(handler)
    rules = await api.discounts.applicable(1, [10, 20])
    await api.aclose()

    assert [(r.id, r.kind.value, r.value) for r in rules] == [(3, "DIRECT_PERCENTAGE", 10)]


@pytest.mark.asyncio
async def test_zero_cap_means_uncapped(cart: Cart) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/vouchers/apply"):
            return data({"code": "HEMAT", "type": "NOMINAL", "value": 5000, "minPurchase": 20000, "maxDiscount": 0})
        return data([{"id": 1, "type": "DIRECT_PERCENTAGE", "value": 10, "maxDiscountAmount": 0}])

    api = backend(handler)
    voucher = await api.vouchers.apply("HEMAT")
    rules = await api.discounts.applicable(1, [10, 20])
    await api.aclose()

    breakdown = D.resolve(cart, rules, voucher, now=NOW)

    assert voucher.max_discount_amount is None
    assert rules[0].max_discount_amount is None
    assert breakdown.discount_amount == 2500
    assert breakdown.voucher_deduction == 5000


@pytest.mark.asyncio
async def test_create_order_sends_camel_case_body() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return data(ORDER, status=201)

    api = backend(handler)
    order = await api.orders.create(OrderDraft(address_id=1, shipping_service="REG", store_id=1, cart_line_ids=(101,)))
    await api.aclose()

    assert bodies == [{"userAddressId": 1, "shippingMethod": "REG", "storeId": 1, "cartItemIds": [101]}]
    assert order.status is OrderStatus.PENDING_PAYMENT
    assert order.payment_deadline is not None
    assert order.total_amount == 41250


@pytest.mark.asyncio
async def test_payment_proof_is_multipart() -> None:
    uploads: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        uploads.append(request)
        return data({**ORDER, "status": "PENDING_CONFIRMATION", "paymentProof": "/uploads/receipt.jpg"})

    api = backend(handler)
    order = await api.orders.upload_payment_proof(42, jpeg_proof(16))
    await api.aclose()

    request = uploads[0]
    assert request.url.path == "/api/orders/42/payment-proof"
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert b'name="file"; filename="receipt.jpg"' in request.content
    assert order.status is OrderStatus.PENDING_CONFIRMATION
    assert order.payment_deadline is None
    assert order.payment_proof_url == "/uploads/receipt.jpg"


@pytest.mark.asyncio
async def test_empty_response_is_none() -> None:
    api = backend(lambda request: httpx.Response(204))
    await api.carts.clear(1)
    await api.aclose()


# ═══════════════════════════════════════════════════════════════════════════════
# Failures and retry
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_timeout_is_retried_once() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        if len(attempts) == 1:
            raise httpx.ReadTimeout("slow", request=request)
        return data({"id": 10, "name": "Apples", "price": 10000, "stock": 5, "weight": 1000})

    api = backend(handler)
    product = await api.catalog.product(10, 1)
    await api.aclose()

    assert len(attempts) == 2
    assert product.stock == 5


@pytest.mark.asyncio
async def test_network_failure_gives_up_after_two_attempts() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        raise httpx.ConnectError("refused", request=request)

    api = backend(handler)
    with pytest.raises(CheckoutError) as caught:
        await api.addresses.addresses()
    await api.aclose()

    assert len(attempts) == 2
    assert caught.value.kind is ErrorKind.NETWORK
    assert caught.value.retryable is True


@pytest.mark.asyncio
async def test_rejection_is_not_retried() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        return httpx.Response(400, json={"message": "Voucher has expired"})

    api = backend(handler)
    with pytest.raises(CheckoutError) as caught:
        await api.vouchers.apply("LAMA")
    await api.aclose()

    assert len(attempts) == 1
    assert caught.value.kind is ErrorKind.REJECTED
    assert caught.value.message == "Voucher has expired"
    assert caught.value.status == 400


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "kind"),
    [(401, ErrorKind.SESSION_EXPIRED), (404, ErrorKind.NOT_FOUND), (503, ErrorKind.SERVER)],
)
async def test_status_mapping(status: int, kind: ErrorKind) -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        return httpx.Response(status)

    api = backend(handler)
    with pytest.raises(CheckoutError) as caught:
        await api.orders.get(42)
    await api.aclose()

    assert caught.value.kind is kind
    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_session_expiry_is_auth_category() -> None:
    api = backend(lambda request: httpx.Response(401, json={"message": "jwt expired"}))
    with pytest.raises(CheckoutError) as caught:
        await api.orders.list()
    await api.aclose()

    assert caught.value.category is ErrorCategory.AUTH


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"id": 10}),
        httpx.Response(200, content=b"<html>oops</html>"),
        httpx.Response(200, json={"data": {"id": 10}}),
    ],
)
async def test_malformed_payload_is_bad_response(response: httpx.Response) -> None:
    api = backend(lambda request: response)
    with pytest.raises(CheckoutError) as caught:
        await api.catalog.product(10, 1)
    await api.aclose()

    assert caught.value.kind is ErrorKind.BAD_RESPONSE
