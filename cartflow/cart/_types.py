"""
Cart types — lines, snapshots and change reports.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from cartflow._types import LineId, Money, ProductId


@dataclass(frozen=True, slots=True)
class CartLine:
    id: LineId
    product_id: ProductId
    name: str
    unit_price: Money
    quantity: int
    available_stock: int
    weight_grams: int = 0

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity

    @property
    def line_weight(self) -> int:
        return self.weight_grams * self.quantity

    def with_quantity(self, quantity: int) -> CartLine:
        return replace(self, quantity=quantity)


@dataclass(frozen=True, slots=True)
class ProductSnapshot:
    """Catalog view of a product in one store: current price and stock."""

    product_id: ProductId
    name: str
    price: Money
    stock: int
    weight_grams: int = 0


@dataclass(frozen=True, slots=True)
class StockIssue:
    line_id: LineId
    product_id: ProductId
    name: str
    requested: int
    available: int


__all__ = ("CartLine", "ProductSnapshot", "StockIssue")
