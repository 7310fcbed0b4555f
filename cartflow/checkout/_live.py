"""
Live preview — recompute on every input change, newest input wins.

Inputs arriving in quick succession are debounced; a computation that is
overtaken by a newer one still finishes but its result is dropped.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from kungfu import Nothing, Option, Result, Some

from cartflow import graph as G
from cartflow.checkout._nodes import PreviewNode
from cartflow.checkout._types import CheckoutPreview, CheckoutRequest
from cartflow.errors import CheckoutError
from cartflow.ports import AddressBook, CatalogService, DiscountService, StoreLocator

logger = logging.getLogger(__name__)

PREVIEW_GRAPH = G.graph(PreviewNode)


# ═══════════════════════════════════════════════════════════════════════════════
# PreviewBuilder
# ═══════════════════════════════════════════════════════════════════════════════


class PreviewBuilder:
    def __init__(
        self,
        catalog: CatalogService,
        discounts: DiscountService,
        addresses: AddressBook,
        locator: StoreLocator,
    ) -> None:
        self._catalog = catalog
        self._discounts = discounts
        self._addresses = addresses
        self._locator = locator

    async def build(self, request: CheckoutRequest) -> Result[CheckoutPreview, CheckoutError]:
        result = await (
            PREVIEW_GRAPH.run()
            .inject(request)
            .inject_as(CatalogService, self._catalog)
            .inject_as(DiscountService, self._discounts)
            .inject_as(AddressBook, self._addresses)
            .inject_as(StoreLocator, self._locator)
            .result()
        )
        return result.map(lambda node: node.data)


# ═══════════════════════════════════════════════════════════════════════════════
# Last write wins
# ═══════════════════════════════════════════════════════════════════════════════


class LatestWins[T]:
    """
    Ticket counter. Only the most recently started run may publish.

        match await latest.run(lambda: builder.build(request)):
            case Some(result):
                show(result)
            case Nothing():
                pass  # superseded
    """

    __slots__ = ("_generation",)

    def __init__(self) -> None:
        self._generation = 0

    def begin(self) -> int:
        self._generation += 1
        return self._generation

    def is_current(self, ticket: int) -> bool:
        return ticket == self._generation

    def invalidate(self) -> None:
        self._generation += 1

    async def run(self, operation: Callable[[], Awaitable[T]]) -> Option[T]:
        ticket = self.begin()
        value = await operation()
        if not self.is_current(ticket):
            return Nothing()
        return Some(value)


# ═══════════════════════════════════════════════════════════════════════════════
# Debouncer
# ═══════════════════════════════════════════════════════════════════════════════


class Debouncer:
    """
    Cancellable timer. Each ``call`` restarts the wait; only the last call
    within ``delay`` seconds fires. A call that has already fired runs to the end.
    """

    def __init__(self, delay: float) -> None:
        self._delay = delay
        self._timer: asyncio.Task[None] | None = None
        self._waiting = False

    @property
    def pending(self) -> bool:
        return self._timer is not None and self._waiting

    def call(self, fn: Callable[[], Awaitable[object]]) -> asyncio.Task[None]:
        self.cancel()
        self._waiting = True
        self._timer = asyncio.get_running_loop().create_task(self._fire(fn))
        return self._timer

    def cancel(self) -> None:
        if self._timer is not None and self._waiting and not self._timer.done():
            self._timer.cancel()
        self._waiting = False

    async def _fire(self, fn: Callable[[], Awaitable[object]]) -> None:
        await asyncio.sleep(self._delay)
        self._waiting = False
        await fn()


# ═══════════════════════════════════════════════════════════════════════════════
# LivePreview
# ═══════════════════════════════════════════════════════════════════════════════

type PreviewListener = Callable[[Result[CheckoutPreview, CheckoutError]], object]


class LivePreview:
    def __init__(
        self,
        builder: PreviewBuilder,
        on_update: PreviewListener,
        *,
        debounce_sec: float = 0.3,
    ) -> None:
        self._builder = builder
        self._on_update = on_update
        self._latest: LatestWins[Result[CheckoutPreview, CheckoutError]] = LatestWins()
        self._debouncer = Debouncer(debounce_sec)
        self._current: Result[CheckoutPreview, CheckoutError] | None = None

    @property
    def current(self) -> Result[CheckoutPreview, CheckoutError] | None:
        return self._current

    def request(self, request: CheckoutRequest) -> asyncio.Task[None]:
        """Debounced recompute, e.g. while the user edits quantities."""
        return self._debouncer.call(lambda: self.refresh(request))

    async def refresh(self, request: CheckoutRequest) -> Option[Result[CheckoutPreview, CheckoutError]]:
        """Recompute now. Returns ``Nothing`` if a newer request overtook this one."""
        outcome = await self._latest.run(lambda: self._builder.build(request))
        match outcome:
            case Some(result):
                self._current = result
                self._on_update(result)
            case _:
                logger.debug("Dropped superseded preview for cart %s", request.cart.id)
        return outcome

    def close(self) -> None:
        self._debouncer.cancel()
        self._latest.invalidate()


__all__ = (
    "PREVIEW_GRAPH",
    "PreviewBuilder",
    "LatestWins",
    "Debouncer",
    "PreviewListener",
    "LivePreview",
)
