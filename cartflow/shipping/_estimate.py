"""
Estimator — cost per service from distance and weight.

    cost = base + distance_km * distance_rate + weight_kg * weight_rate

rounded half up to a whole unit.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from kungfu import Error, LazyCoroResult, Ok, Result
from combinators import lift as L

from cartflow._types import Money
from cartflow.errors import CheckoutError, ErrorKind
from cartflow.lift import as_checkout_error
from cartflow.money import round_half_up
from cartflow.ports import StoreLocator
from cartflow.shipping._types import (
    Coordinates,
    NearestStore,
    ShippingEstimate,
    ShippingOption,
    ShippingQuote,
    ShippingRates,
)

DEFAULT_SHIPPING_OPTIONS: tuple[ShippingOption, ...] = (
    ShippingOption("REG", "Regular", 15000, "2-3", max_distance=100),
    ShippingOption("EXP", "Express", 30000, "1-2", max_distance=50),
    ShippingOption("SDS", "Same Day", 50000, "0", max_distance=25),
)


def cost(option: ShippingOption, distance_km: float, weight_grams: int, rates: ShippingRates = ShippingRates()) -> Money:
    raw = (
        Decimal(option.base_cost)
        + Decimal(str(distance_km)) * rates.distance_rate
        + Decimal(weight_grams) / 1000 * rates.weight_rate
    )
    return round_half_up(raw)


def quote(
    options: Iterable[ShippingOption],
    distance_km: float,
    weight_grams: int,
    rates: ShippingRates = ShippingRates(),
) -> Result[tuple[ShippingQuote, ...], CheckoutError]:
    """Cost every option that reaches ``distance_km``, cheapest first."""
    quotes = sorted(
        (
            ShippingQuote(option, cost(option, distance_km, weight_grams, rates))
            for option in options
            if option.reaches(distance_km)
        ),
        key=lambda q: q.cost,
    )
    if not quotes:
        return Error(CheckoutError(
            ErrorKind.NO_SHIPPING_AVAILABLE,
            f"No shipping service reaches {distance_km:g} km",
        ))
    return Ok(tuple(quotes))


def estimate(
    destination: Coordinates | None,
    weight_grams: int,
    locator: StoreLocator,
    options: Iterable[ShippingOption] = DEFAULT_SHIPPING_OPTIONS,
    rates: ShippingRates = ShippingRates(),
) -> LazyCoroResult[ShippingEstimate, CheckoutError]:
    """
    Resolve the nearest store for ``destination`` and quote every option.

    No destination fails before any network call.
    """
    if destination is None:
        return L.fail(CheckoutError(ErrorKind.NO_ADDRESS_SELECTED, "Select a shipping address first"))

    options = tuple(options)

    def priced(store: NearestStore) -> LazyCoroResult[ShippingEstimate, CheckoutError]:
        return L.from_result(quote(options, store.distance_km, weight_grams, rates)).map(
            lambda quotes: ShippingEstimate(store, weight_grams, quotes)
        )

    return L.catching_async(lambda: locator.nearest(destination), on_error=as_checkout_error).then(priced)


def format_etd(etd: str) -> str:
    """
    ``"2-3"`` -> ``"2-3 business days"``, ``"0"`` -> ``"Same day"``.
    """
    etd = etd.strip()
    if etd in ("", "0"):
        return "Same day"
    if etd == "1":
        return "1 business day"
    return f"{etd} business days"


__all__ = (
    "DEFAULT_SHIPPING_OPTIONS",
    "cost",
    "quote",
    "estimate",
    "format_etd",
)
