"""
Preview graph.

    RequestNode ──┬── StockNode ──────────────┐
                  ├── RulesNode ──────────────┤
                  └── AddressNode ── ShippingNode ── PreviewNode

Stock, rules and addresses are fetched concurrently. A transport failure in any
node fails the whole preview; business blockers (no address, no service,
short stock) are collected into the preview instead.
"""

from dataclasses import dataclass

from kungfu import Error, LazyCoroResult, Ok, Result
import combinators as C

from cartflow import graph as G
from cartflow import shipping as S
from cartflow import discount as D
from cartflow.cart import ProductSnapshot, StockIssue
from cartflow.checkout._types import CheckoutPreview, CheckoutRequest
from cartflow.errors import CheckoutError, ErrorKind
from cartflow.lift import as_checkout_error
from cartflow.ports import AddressBook, CatalogService, DiscountService, StoreLocator


@G.node
class RequestNode:
    """Entry point: wraps the CheckoutRequest input."""

    def __init__(self, data: CheckoutRequest) -> None:
        self.data = data

    @classmethod
    def __compose__(cls, request: CheckoutRequest) -> "RequestNode":
        return cls(request)


@G.node
class StockNode:
    """Fresh stock for every line, one catalog call per product, all in parallel."""

    def __init__(self, stock: dict[int, int]) -> None:
        self.stock = stock

    @classmethod
    async def __compose__(cls, request: RequestNode, catalog: CatalogService) -> "StockNode":
        cart = request.data.cart
        if cart.is_empty:
            return cls({})

        fetches = [_fetch_product(catalog, line.product_id, cart.store_id) for line in cart.lines]
        match await C.parallel(*fetches):
            case Ok(products):
                return cls({p.product_id: p.stock for p in products if p is not None})
            case Error(e):
                raise e


def _fetch_product(
    catalog: CatalogService,
    product_id: int,
    store_id: int,
) -> LazyCoroResult[ProductSnapshot | None, CheckoutError]:
    """A product the store no longer carries comes back as ``None`` and counts as zero stock."""

    async def fetch() -> Result[ProductSnapshot | None, CheckoutError]:
        match await C.catching_async(lambda: catalog.product(product_id, store_id), on_error=as_checkout_error):
            case Ok(product):
                return Ok(product)
            case Error(e) if e.kind is ErrorKind.NOT_FOUND:
                return Ok(None)
            case Error(e):
                return Error(e)

    return LazyCoroResult(fetch)


@G.node
class RulesNode:
    def __init__(self, rules: tuple[D.DiscountRule, ...]) -> None:
        self.rules = rules

    @classmethod
    async def __compose__(cls, request: RequestNode, discounts: DiscountService) -> "RulesNode":
        cart = request.data.cart
        if cart.is_empty:
            return cls(())
        fetch = C.catching_async(
            lambda: discounts.applicable(cart.store_id, cart.product_ids),
            on_error=as_checkout_error,
        )
        match await fetch:
            case Ok(rules):
                return cls(tuple(rules))
            case Error(e):
                raise e


@dataclass(frozen=True, slots=True)
class AddressSelection:
    addresses: tuple[S.Address, ...]
    selected: S.Address | None


@G.node
class AddressNode:
    """Chosen address, else the default one."""

    def __init__(self, data: AddressSelection) -> None:
        self.data = data

    @classmethod
    async def __compose__(cls, request: RequestNode, book: AddressBook) -> "AddressNode":
        match await C.catching_async(book.addresses, on_error=as_checkout_error):
            case Ok(found):
                addresses = tuple(found)
            case Error(e):
                raise e

        wanted = request.data.address_id
        selected = next((a for a in addresses if a.id == wanted), None) if wanted is not None else None
        if selected is None:
            selected = next((a for a in addresses if a.is_default), None)
        return cls(AddressSelection(addresses, selected))


@dataclass(frozen=True, slots=True)
class ShippingOutcome:
    estimate: S.ShippingEstimate | None
    blocker: CheckoutError | None


@G.node
class ShippingNode:
    def __init__(self, data: ShippingOutcome) -> None:
        self.data = data

    @classmethod
    async def __compose__(
        cls,
        request: RequestNode,
        address: AddressNode,
        locator: StoreLocator,
    ) -> "ShippingNode":
        selected = address.data.selected
        result = await S.estimate(
            selected.coordinates if selected is not None else None,
            request.data.cart.total_weight,
            locator,
            request.data.shipping_options,
            request.data.rates,
        )
        match result:
            case Ok(estimate):
                return cls(ShippingOutcome(estimate, None))
            case Error(e) if e.kind in (ErrorKind.NO_ADDRESS_SELECTED, ErrorKind.NO_SHIPPING_AVAILABLE):
                return cls(ShippingOutcome(None, e))
            case Error(e):
                raise e


@G.node
class PreviewNode:
    def __init__(self, data: CheckoutPreview) -> None:
        self.data = data

    @classmethod
    async def __compose__(
        cls,
        request: RequestNode,
        stock: StockNode,
        rules: RulesNode,
        address: AddressNode,
        shipping: ShippingNode,
    ) -> "PreviewNode":
        req = request.data
        cart = req.cart
        estimate = shipping.data.estimate

        selected = estimate.quote_for(req.shipping_service) if estimate is not None else None
        shipping_cost = selected.cost if selected is not None else 0

        breakdown = D.resolve(cart, rules.rules, req.voucher, now=req.now, shipping_cost=shipping_cost)
        issues = cart.stock_issues(stock.stock)

        blockers: list[CheckoutError] = []
        if cart.is_empty:
            blockers.append(CheckoutError(ErrorKind.CHECKOUT_BLOCKED, "Your cart is empty"))
        blockers.extend(CheckoutError(ErrorKind.OUT_OF_STOCK, _stock_message(issue)) for issue in issues)
        if shipping.data.blocker is not None:
            blockers.append(shipping.data.blocker)

        preview = CheckoutPreview(
            can_checkout=not blockers,
            requires_address=not address.data.addresses,
            subtotal=breakdown.subtotal,
            total_weight=cart.total_weight,
            shipping_options=estimate.quotes if estimate is not None else (),
            selected_option=selected,
            shipping_cost=shipping_cost,
            discount_amount=breakdown.discount_amount,
            voucher_deduction=breakdown.voucher_deduction,
            shipping_deduction=breakdown.shipping_deduction,
            total_discount=breakdown.total_discount,
            final_total=breakdown.net_subtotal + shipping_cost - breakdown.shipping_deduction,
            address=address.data.selected,
            addresses=address.data.addresses,
            nearest_store=estimate.nearest_store if estimate is not None else None,
            stock_issues=issues,
            breakdown=breakdown,
            blockers=tuple(blockers),
        )
        return cls(preview)



def _stock_message(issue: StockIssue) -> str:
    name = issue.name or issue.product_id
    if issue.available <= 0:
        return f"{name} is no longer available"
    return f"Only {issue.available} of {name} left"

__all__ = (
    "RequestNode",
    "StockNode",
    "RulesNode",
    "AddressSelection",
    "AddressNode",
    "ShippingOutcome",
    "ShippingNode",
    "PreviewNode",
)
