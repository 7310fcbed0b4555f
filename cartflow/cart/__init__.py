"""
Cart — one store's cart, its pure aggregate and the backend-synced session.

    from cartflow.cart import Cart, CartSession
"""

from __future__ import annotations

from cartflow.cart._types import CartLine, ProductSnapshot, StockIssue
from cartflow.cart._aggregate import Cart, QuantityChange
from cartflow.cart._session import CartSession

__all__ = (
    "CartLine",
    "ProductSnapshot",
    "StockIssue",
    "Cart",
    "QuantityChange",
    "CartSession",
)
