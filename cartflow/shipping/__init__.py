"""
Shipping — nearest store, per-service cost, reachable services only.

    from cartflow import shipping as S

    match await S.estimate(address.coordinates, cart.total_weight, locator):
        case Ok(estimate):
            cheapest = estimate.quotes[0]
        case Error(e):
            ...  # NO_ADDRESS_SELECTED / NO_SHIPPING_AVAILABLE / transport
"""

from __future__ import annotations

from cartflow.shipping._types import (
    Coordinates,
    Address,
    NearestStore,
    ShippingOption,
    ShippingRates,
    ShippingQuote,
    ShippingEstimate,
)
from cartflow.shipping._estimate import (
    DEFAULT_SHIPPING_OPTIONS,
    cost,
    quote,
    estimate,
    format_etd,
)

__all__ = (
    "Coordinates",
    "Address",
    "NearestStore",
    "ShippingOption",
    "ShippingRates",
    "ShippingQuote",
    "ShippingEstimate",
    "DEFAULT_SHIPPING_OPTIONS",
    "cost",
    "quote",
    "estimate",
    "format_etd",
)
