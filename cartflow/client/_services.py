"""
HTTP implementations of ``cartflow.ports``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from cartflow._types import LineId, OrderId, ProductId, StoreId
from cartflow.cart import Cart, ProductSnapshot
from cartflow.client._http import BackendClient
from cartflow.client._schemas import (
    AddressOut,
    CancelIn,
    CartItemIn,
    CartOut,
    DiscountOut,
    NearestStoreOut,
    OrderCreateIn,
    OrderOut,
    ProductOut,
    QuantityIn,
    VoucherApplyIn,
    VoucherOut,
)
from cartflow.config import Settings
from cartflow.discount import DiscountRule, Voucher
from cartflow.order import Order, OrderDraft, PaymentProof
from cartflow.shipping import Address, Coordinates, NearestStore


class HttpCatalog:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def product(self, product_id: ProductId, store_id: StoreId) -> ProductSnapshot:
        found = await self._client.fetch(ProductOut, "GET", f"/products/{product_id}", params={"storeId": store_id})
        return found.to_domain()


class HttpCarts:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def fetch(self, store_id: StoreId) -> Cart:
        found = await self._client.fetch(CartOut, "GET", "/cart", params={"storeId": store_id})
        return found.to_domain()

    async def add_item(self, store_id: StoreId, product_id: ProductId, quantity: int) -> Cart:
        body = CartItemIn(store_id=store_id, product_id=product_id, quantity=quantity)
        found = await self._client.fetch(CartOut, "POST", "/cart/items", body=body)
        return found.to_domain()

    async def update_item(self, line_id: LineId, quantity: int) -> None:
        await self._client.request("PATCH", f"/cart/items/{line_id}", body=QuantityIn(quantity=quantity))

    async def remove_item(self, line_id: LineId) -> None:
        await self._client.request("DELETE", f"/cart/items/{line_id}")

    async def clear(self, store_id: StoreId) -> None:
        await self._client.request("DELETE", "/cart", params={"storeId": store_id})


class HttpDiscounts:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def applicable(self, store_id: StoreId, product_ids: Sequence[ProductId]) -> Sequence[DiscountRule]:
        params = {"storeId": store_id, "productIds": ",".join(str(pid) for pid in product_ids)}
        found = await self._client.fetch_many(DiscountOut, "GET", "/discounts/applicable", params=params)
        return [rule.to_domain() for rule in found]


class HttpVouchers:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def my_vouchers(self) -> Sequence[Voucher]:
        found = await self._client.fetch_many(VoucherOut, "GET", "/vouchers/my-vouchers")
        return [voucher.to_domain() for voucher in found]

    async def apply(self, code: str, order_id: OrderId | None = None) -> Voucher:
        body = VoucherApplyIn(code=code, order_id=order_id)
        found = await self._client.fetch(VoucherOut, "POST", "/vouchers/apply", body=body)
        return found.to_domain()


class HttpStoreLocator:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def nearest(self, destination: Coordinates) -> NearestStore:
        params = {"lat": destination.latitude, "lng": destination.longitude}
        found = await self._client.fetch(NearestStoreOut, "GET", "/stores/nearest", params=params)
        return found.to_domain()


class HttpAddressBook:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def addresses(self) -> Sequence[Address]:
        found = await self._client.fetch_many(AddressOut, "GET", "/addresses")
        return [address.to_domain() for address in found]


class HttpOrders:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def create(self, draft: OrderDraft) -> Order:
        found = await self._client.fetch(OrderOut, "POST", "/orders", body=OrderCreateIn.from_domain(draft))
        return found.to_domain()

    async def get(self, order_id: OrderId) -> Order:
        found = await self._client.fetch(OrderOut, "GET", f"/orders/{order_id}")
        return found.to_domain()

    async def list(self) -> Sequence[Order]:
        found = await self._client.fetch_many(OrderOut, "GET", "/orders")
        return [order.to_domain() for order in found]

    async def upload_payment_proof(self, order_id: OrderId, proof: PaymentProof) -> Order:
        files = {"file": (proof.filename, proof.content, proof.content_type)}
        found = await self._client.fetch(OrderOut, "POST", f"/orders/{order_id}/payment-proof", files=files)
        return found.to_domain()

    async def cancel(self, order_id: OrderId, reason: str) -> Order:
        found = await self._client.fetch(OrderOut, "POST", f"/orders/{order_id}/cancel", body=CancelIn(reason=reason))
        return found.to_domain()

    async def confirm(self, order_id: OrderId) -> Order:
        found = await self._client.fetch(OrderOut, "POST", f"/orders/{order_id}/confirm")
        return found.to_domain()


@dataclass(frozen=True, slots=True)
class Backend:
    """Every port over one shared HTTP client."""

    client: BackendClient
    catalog: HttpCatalog
    carts: HttpCarts
    discounts: HttpDiscounts
    vouchers: HttpVouchers
    locator: HttpStoreLocator
    addresses: HttpAddressBook
    orders: HttpOrders

    @classmethod
    def connect(
        cls,
        settings: Settings,
        *,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> Backend:
        client = BackendClient(settings, token=token, transport=transport)
        return cls(
            client=client,
            catalog=HttpCatalog(client),
            carts=HttpCarts(client),
            discounts=HttpDiscounts(client),
            vouchers=HttpVouchers(client),
            locator=HttpStoreLocator(client),
            addresses=HttpAddressBook(client),
            orders=HttpOrders(client),
        )

    async def aclose(self) -> None:
        await self.client.aclose()


__all__ = (
    "HttpCatalog",
    "HttpCarts",
    "HttpDiscounts",
    "HttpVouchers",
    "HttpStoreLocator",
    "HttpAddressBook",
    "HttpOrders",
    "Backend",
)
