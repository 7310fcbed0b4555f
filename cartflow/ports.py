"""
Ports — what cartflow needs from the backend.

Every method raises ``CheckoutError`` on failure. ``cartflow.client`` implements
all of them over HTTP; tests use in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from cartflow._types import LineId, OrderId, ProductId, StoreId
    from cartflow.cart import Cart, ProductSnapshot
    from cartflow.discount import DiscountRule, Voucher
    from cartflow.order import Order, OrderDraft, PaymentProof
    from cartflow.shipping import Address, Coordinates, NearestStore


class CatalogService(Protocol):
    async def product(self, product_id: ProductId, store_id: StoreId) -> ProductSnapshot: ...


class CartService(Protocol):
    async def fetch(self, store_id: StoreId) -> Cart: ...

    async def add_item(self, store_id: StoreId, product_id: ProductId, quantity: int) -> Cart: ...

    async def update_item(self, line_id: LineId, quantity: int) -> None: ...

    async def remove_item(self, line_id: LineId) -> None: ...

    async def clear(self, store_id: StoreId) -> None: ...


class DiscountService(Protocol):
    async def applicable(self, store_id: StoreId, product_ids: Sequence[ProductId]) -> Sequence[DiscountRule]: ...


class VoucherService(Protocol):
    async def my_vouchers(self) -> Sequence[Voucher]: ...

    async def apply(self, code: str, order_id: OrderId | None = None) -> Voucher: ...


class StoreLocator(Protocol):
    async def nearest(self, destination: Coordinates) -> NearestStore: ...


class AddressBook(Protocol):
    async def addresses(self) -> Sequence[Address]: ...


class OrderService(Protocol):
    async def create(self, draft: OrderDraft) -> Order: ...

    async def get(self, order_id: OrderId) -> Order: ...

    async def list(self) -> Sequence[Order]: ...

    async def upload_payment_proof(self, order_id: OrderId, proof: PaymentProof) -> Order: ...

    async def cancel(self, order_id: OrderId, reason: str) -> Order: ...

    async def confirm(self, order_id: OrderId) -> Order: ...


__all__ = (
    "CatalogService",
    "CartService",
    "DiscountService",
    "VoucherService",
    "StoreLocator",
    "AddressBook",
    "OrderService",
)
