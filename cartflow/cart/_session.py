"""
CartSession — the cart as the UI sees it, kept in sync with the backend.

Quantity changes, removals and clears are optimistic: the local cart changes
first and is restored if the backend call fails. Adding needs the server's
line id, so it waits for the response.
"""

from __future__ import annotations

import logging

from kungfu import Error, LazyCoroResult, Ok, Result
from combinators import lift as L

from cartflow import command as Cmd
from cartflow._types import LineId, ProductId, StoreId
from cartflow.cart._aggregate import Cart, QuantityChange
from cartflow.errors import CheckoutError
from cartflow.lift import as_checkout_error
from cartflow.ports import CartService, CatalogService

logger = logging.getLogger(__name__)


class CartSession:
    def __init__(
        self,
        carts: CartService,
        catalog: CatalogService,
        store_id: StoreId,
        cart: Cart | None = None,
    ) -> None:
        self._carts = carts
        self._catalog = catalog
        self._cart = cart if cart is not None else Cart.empty(store_id)
        self._gate = Cmd.LoadingGate("cart")

    @property
    def cart(self) -> Cart:
        return self._cart

    @property
    def store_id(self) -> StoreId:
        return self._cart.store_id

    @property
    def loading(self) -> bool:
        return self._gate.loading

    def _set(self, cart: Cart) -> None:
        self._cart = cart

    def _get(self) -> Cart:
        return self._cart

    # ═══════════════════════════════════════════════════════════════════════════
    # Loading
    # ═══════════════════════════════════════════════════════════════════════════

    async def refresh(self) -> Result[Cart, CheckoutError]:
        return await self._gate.guard(self._refresh)

    async def _refresh(self) -> Result[Cart, CheckoutError]:
        store_id = self.store_id
        result = await L.catching_async(lambda: self._carts.fetch(store_id), on_error=as_checkout_error)
        match result:
            case Ok(cart):
                self._cart = cart
                return Ok(cart)
            case Error(e):
                logger.warning("Cart refresh for store %s failed: %s", store_id, e.message)
                return Error(e)

    async def switch_store(self, store_id: StoreId) -> Result[Cart, CheckoutError]:
        """Drop the current store's cart and load the one for ``store_id``."""

        async def switch() -> Result[Cart, CheckoutError]:
            if store_id != self.store_id:
                self._cart = Cart.empty(store_id)
            return await self._refresh()

        return await self._gate.guard(switch)

    def forget(self) -> None:
        """Clear locally after the backend emptied the cart (order placed)."""
        self._cart = self._cart.clear()

    # ═══════════════════════════════════════════════════════════════════════════
    # Changes
    # ═══════════════════════════════════════════════════════════════════════════

    async def add(self, product_id: ProductId, quantity: int = 1) -> Result[QuantityChange, CheckoutError]:
        async def add() -> Result[QuantityChange, CheckoutError]:
            store_id = self.store_id
            fetched = await L.catching_async(
                lambda: self._catalog.product(product_id, store_id),
                on_error=as_checkout_error,
            )
            match fetched:
                case Error(e):
                    return Error(e)
                case Ok(product):
                    pass

            local = self._cart.add_line(
                product_id=product_id,
                quantity=quantity,
                available_stock=product.stock,
                unit_price=product.price,
                name=product.name,
                weight_grams=product.weight_grams,
            )
            match local:
                case Error(e):
                    return Error(e)
                case Ok(change):
                    pass

            added = change.line.quantity - _held(self._cart, product_id)
            if added == 0:
                return Ok(QuantityChange(self._cart, change.line, change.clamped))

            synced = await L.catching_async(
                lambda: self._carts.add_item(store_id, product_id, added),
                on_error=as_checkout_error,
            )
            match synced:
                case Ok(cart):
                    self._cart = cart
                    line = cart.find_product(product_id) or change.line
                    return Ok(QuantityChange(cart, line, change.clamped))
                case Error(e):
                    return Error(e)

        return await self._gate.guard(add)

    async def set_quantity(self, line_id: LineId, quantity: int) -> Result[QuantityChange, CheckoutError]:
        async def update() -> Result[QuantityChange, CheckoutError]:
            match self._cart.set_quantity(line_id, quantity):
                case Error(e):
                    return Error(e)
                case Ok(change):
                    pass
            push = L.catching_async(
                lambda: self._carts.update_item(line_id, change.line.quantity),
                on_error=as_checkout_error,
            )
            return (await self._sync(change.cart, push)).map(lambda _: change)

        return await self._gate.guard(update)

    async def remove(self, line_id: LineId) -> Result[Cart, CheckoutError]:
        async def remove() -> Result[Cart, CheckoutError]:
            if self._cart.find(line_id) is None:
                return Ok(self._cart)
            push = L.catching_async(lambda: self._carts.remove_item(line_id), on_error=as_checkout_error)
            return await self._sync(self._cart.remove_line(line_id), push)

        return await self._gate.guard(remove)

    async def clear(self) -> Result[Cart, CheckoutError]:
        async def clear() -> Result[Cart, CheckoutError]:
            store_id = self.store_id
            push = L.catching_async(lambda: self._carts.clear(store_id), on_error=as_checkout_error)
            return await self._sync(self._cart.clear(), push)

        return await self._gate.guard(clear)

    async def _sync(self, updated: Cart, push: LazyCoroResult[None, CheckoutError]) -> Result[Cart, CheckoutError]:
        result = await Cmd.run(Cmd.optimistic(self._get, self._set, updated, push))
        match result:
            case Ok(_):
                return Ok(self._cart)
            case Error(failure):
                logger.warning(
                    "Cart sync failed (%s), local cart %s",
                    failure.error.message,
                    "restored" if failure.rollback_complete else "may be stale",
                )
                return Error(failure.error)


def _held(cart: Cart, product_id: ProductId) -> int:
    line = cart.find_product(product_id)
    return 0 if line is None else line.quantity


__all__ = ("CartSession",)
