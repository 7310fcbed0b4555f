"""
Wire models — the one typed contract with the backend.

Responses arrive as ``{"data": ...}``; the envelope is stripped by the client
and the payload validated into exactly one model per endpoint, which converts
itself with ``to_domain()``. Request bodies are built with ``from_domain()``.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cartflow.cart import Cart, CartLine, ProductSnapshot
from cartflow.discount import DiscountRule, RuleKind, Voucher, VoucherKind, VoucherTarget
from cartflow.order import Order, OrderDraft, OrderItem, OrderStatus
from cartflow.shipping import Address, Coordinates, NearestStore


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def _cap(amount: int | None) -> int | None:
    """The backend sends 0 for no cap."""
    return amount if amount is not None and amount > 0 else None


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog / cart
# ═══════════════════════════════════════════════════════════════════════════════


class ProductOut(WireModel):
    id: int
    name: str = ""
    price: int
    stock: int
    weight: int = 0

    def to_domain(self) -> ProductSnapshot:
        return ProductSnapshot(
            product_id=self.id,
            name=self.name,
            price=self.price,
            stock=self.stock,
            weight_grams=self.weight,
        )


class CartProductOut(WireModel):
    name: str
    default_price: int
    weight: int = 0


class CartItemOut(WireModel):
    id: int
    product_id: int
    quantity: int
    stock_available: int
    product: CartProductOut

    def to_domain(self) -> CartLine:
        return CartLine(
            id=self.id,
            product_id=self.product_id,
            name=self.product.name,
            unit_price=self.product.default_price,
            quantity=self.quantity,
            available_stock=self.stock_available,
            weight_grams=self.product.weight,
        )


class CartOut(WireModel):
    id: int | None = None
    store_id: int
    items: list[CartItemOut] = Field(default_factory=list)

    def to_domain(self) -> Cart:
        return Cart(
            id=self.id,
            store_id=self.store_id,
            lines=tuple(item.to_domain() for item in self.items),
        )


class CartItemIn(WireModel):
    store_id: int
    product_id: int
    quantity: int


class QuantityIn(WireModel):
    quantity: int


# ═══════════════════════════════════════════════════════════════════════════════
# Discounts / vouchers
# ═══════════════════════════════════════════════════════════════════════════════


class DiscountOut(WireModel):
    id: int
    name: str = ""
    type: RuleKind
    value: int = 0
    product_id: int | None = None
    min_purchase: int = 0
    max_discount_amount: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    def to_domain(self) -> DiscountRule:
        return DiscountRule(
            id=self.id,
            kind=self.type,
            value=self.value,
            product_id=self.product_id,
            min_purchase=self.min_purchase,
            max_discount_amount=_cap(self.max_discount_amount),
            start_date=self.start_date,
            end_date=self.end_date,
            name=self.name,
        )


class VoucherOut(WireModel):
    id: int | None = None
    code: str
    description: str = ""
    type: VoucherKind
    value: int
    min_purchase: int = 0
    max_discount: int | None = None
    expires_at: datetime | None = None
    target: VoucherTarget = VoucherTarget.TRANSACTION
    used_at: datetime | None = None

    def to_domain(self) -> Voucher:
        return Voucher(
            id=self.id,
            code=self.code,
            description=self.description,
            kind=self.type,
            value=self.value,
            min_purchase_amount=self.min_purchase,
            max_discount_amount=_cap(self.max_discount),
            expires_at=self.expires_at,
            target=self.target,
            used_at=self.used_at,
        )


class VoucherApplyIn(WireModel):
    code: str
    order_id: int | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Stores / addresses
# ═══════════════════════════════════════════════════════════════════════════════


class NearestStoreOut(WireModel):
    store_id: int
    distance: float
    latitude: float
    longitude: float
    name: str = ""

    def to_domain(self) -> NearestStore:
        return NearestStore(
            store_id=self.store_id,
            distance_km=self.distance,
            location=Coordinates(self.latitude, self.longitude),
            name=self.name,
        )


class AddressOut(WireModel):
    id: int
    label: str = ""
    recipient_name: str = ""
    phone: str = ""
    address_line: str = ""
    city: str = ""
    latitude: float
    longitude: float
    is_default: bool = False

    def to_domain(self) -> Address:
        return Address(
            id=self.id,
            label=self.label,
            recipient=self.recipient_name,
            street=self.address_line,
            city=self.city,
            coordinates=Coordinates(self.latitude, self.longitude),
            phone=self.phone,
            is_default=self.is_default,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════════════════


class OrderItemOut(WireModel):
    product_id: int | None = None
    product_name_snapshot: str
    price_at_purchase: int
    quantity: int

    def to_domain(self) -> OrderItem:
        return OrderItem(
            product_name=self.product_name_snapshot,
            price_at_purchase=self.price_at_purchase,
            quantity=self.quantity,
            product_id=self.product_id,
        )


class OrderOut(WireModel):
    id: int
    status: OrderStatus
    items: list[OrderItemOut] = Field(default_factory=list)
    subtotal: int
    shipping_cost: int = 0
    discount_amount: int = 0
    created_at: datetime
    payment_deadline: datetime | None = None
    shipping_method: str | None = None
    cancel_reason: str | None = None
    payment_proof: str | None = None

    def to_domain(self) -> Order:
        return Order(
            id=self.id,
            status=self.status,
            items=tuple(item.to_domain() for item in self.items),
            subtotal=self.subtotal,
            shipping_cost=self.shipping_cost,
            discount_amount=self.discount_amount,
            created_at=self.created_at,
            payment_deadline=self.payment_deadline if self.status is OrderStatus.PENDING_PAYMENT else None,
            shipping_service=self.shipping_method,
            cancel_reason=self.cancel_reason,
            payment_proof_url=self.payment_proof,
        )


class OrderCreateIn(WireModel):
    user_address_id: int
    shipping_method: str
    store_id: int
    cart_item_ids: list[int]
    voucher_code: str | None = None

    @classmethod
    def from_domain(cls, dom: OrderDraft) -> OrderCreateIn:
        return cls(
            user_address_id=dom.address_id,
            shipping_method=dom.shipping_service,
            store_id=dom.store_id,
            cart_item_ids=list(dom.cart_line_ids),
            voucher_code=dom.voucher_code,
        )


class CancelIn(WireModel):
    reason: str


class ErrorOut(WireModel):
    message: str = ""


__all__ = (
    "WireModel",
    "ProductOut",
    "CartProductOut",
    "CartItemOut",
    "CartOut",
    "CartItemIn",
    "QuantityIn",
    "DiscountOut",
    "VoucherOut",
    "VoucherApplyIn",
    "NearestStoreOut",
    "AddressOut",
    "OrderItemOut",
    "OrderOut",
    "OrderCreateIn",
    "CancelIn",
    "ErrorOut",
)
