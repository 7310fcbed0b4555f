"""
Cart aggregate — immutable, every change returns a new Cart.

    match cart.add_line(product_id=7, name="Milk", unit_price=18000,
                        quantity=2, available_stock=5):
        case Ok(change):
            cart = change.cart
        case Error(e):
            ...  # OUT_OF_STOCK / INVALID_QUANTITY, cart unchanged
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace

from kungfu import Error, Ok, Result

from cartflow._types import LineId, Money, ProductId, StoreId
from cartflow.cart._types import CartLine, StockIssue
from cartflow.errors import CheckoutError, ErrorKind


@dataclass(frozen=True, slots=True)
class QuantityChange:
    """New cart plus whether the requested quantity was reduced to stock."""

    cart: Cart
    line: CartLine
    clamped: bool


@dataclass(frozen=True, slots=True)
class Cart:
    store_id: StoreId
    lines: tuple[CartLine, ...] = ()
    id: int | None = None

    @classmethod
    def empty(cls, store_id: StoreId) -> Cart:
        return cls(store_id=store_id)

    # ═══════════════════════════════════════════════════════════════════════════
    # Queries
    # ═══════════════════════════════════════════════════════════════════════════

    def subtotal(self) -> Money:
        return sum(line.unit_price * line.quantity for line in self.lines)

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def total_weight(self) -> int:
        """Grams."""
        return sum(line.line_weight for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def product_ids(self) -> tuple[ProductId, ...]:
        return tuple(line.product_id for line in self.lines)

    def find(self, line_id: LineId) -> CartLine | None:
        for line in self.lines:
            if line.id == line_id:
                return line
        return None

    def find_product(self, product_id: ProductId) -> CartLine | None:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    def stock_issues(self, stock: Mapping[ProductId, int]) -> tuple[StockIssue, ...]:
        """Lines whose quantity exceeds freshly fetched stock. Missing products count as 0."""
        return tuple(
            StockIssue(
                line_id=line.id,
                product_id=line.product_id,
                name=line.name,
                requested=line.quantity,
                available=stock.get(line.product_id, 0),
            )
            for line in self.lines
            if line.quantity > stock.get(line.product_id, 0)
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # Changes
    # ═══════════════════════════════════════════════════════════════════════════

    def add_line(
        self,
        *,
        product_id: ProductId,
        quantity: int,
        available_stock: int,
        unit_price: Money,
        name: str = "",
        weight_grams: int = 0,
        line_id: LineId | None = None,
    ) -> Result[QuantityChange, CheckoutError]:
        if quantity < 1:
            return Error(CheckoutError(ErrorKind.INVALID_QUANTITY, "Quantity must be at least 1"))
        if available_stock <= 0:
            return Error(CheckoutError(ErrorKind.OUT_OF_STOCK, f"{name or product_id} is out of stock"))
        if quantity > available_stock:
            return Error(CheckoutError(
                ErrorKind.OUT_OF_STOCK,
                f"Only {available_stock} of {name or product_id} left in stock",
            ))

        existing = self.find_product(product_id)
        if existing is not None:
            wanted = existing.quantity + quantity
            merged = replace(
                existing,
                quantity=min(wanted, available_stock),
                available_stock=available_stock,
                unit_price=unit_price,
            )
            lines = tuple(merged if line.id == existing.id else line for line in self.lines)
            return Ok(QuantityChange(replace(self, lines=lines), merged, wanted > available_stock))

        if line_id is None:
            line_id = max((line.id for line in self.lines), default=0) + 1
        line = CartLine(
            id=line_id,
            product_id=product_id,
            name=name,
            unit_price=unit_price,
            quantity=quantity,
            available_stock=available_stock,
            weight_grams=weight_grams,
        )
        return Ok(QuantityChange(replace(self, lines=(*self.lines, line)), line, False))

    def set_quantity(self, line_id: LineId, quantity: int) -> Result[QuantityChange, CheckoutError]:
        if quantity < 1:
            return Error(CheckoutError(ErrorKind.INVALID_QUANTITY, "Quantity must be at least 1"))
        existing = self.find(line_id)
        if existing is None:
            return Error(CheckoutError(ErrorKind.LINE_NOT_FOUND, f"Cart line {line_id} not found"))
        if existing.available_stock <= 0:
            return Error(CheckoutError(ErrorKind.OUT_OF_STOCK, f"{existing.name or existing.product_id} is out of stock"))

        clamped = quantity > existing.available_stock
        updated = existing.with_quantity(min(quantity, existing.available_stock))
        lines = tuple(updated if line.id == line_id else line for line in self.lines)
        return Ok(QuantityChange(replace(self, lines=lines), updated, clamped))

    def remove_line(self, line_id: LineId) -> Cart:
        """Absent line is a no-op."""
        if self.find(line_id) is None:
            return self
        return replace(self, lines=tuple(line for line in self.lines if line.id != line_id))

    def clear(self) -> Cart:
        return replace(self, lines=())


__all__ = ("Cart", "QuantityChange")
