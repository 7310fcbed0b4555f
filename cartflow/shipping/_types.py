"""
Shipping types.
"""

from __future__ import annotations

from dataclasses import dataclass

from cartflow._types import AddressId, Money, StoreId


@dataclass(frozen=True, slots=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Address:
    id: AddressId
    label: str
    recipient: str
    street: str
    city: str
    coordinates: Coordinates
    phone: str = ""
    is_default: bool = False


@dataclass(frozen=True, slots=True)
class NearestStore:
    """Server-resolved store closest to a destination, with road distance in km."""

    store_id: StoreId
    distance_km: float
    location: Coordinates
    name: str = ""


@dataclass(frozen=True, slots=True)
class ShippingOption:
    service_code: str
    service_name: str
    base_cost: Money
    etd: str
    max_distance: float | None = None

    def reaches(self, distance_km: float) -> bool:
        return self.max_distance is None or distance_km <= self.max_distance


@dataclass(frozen=True, slots=True)
class ShippingRates:
    distance_rate: Money = 1000
    """Per km."""
    weight_rate: Money = 500
    """Per kg."""


@dataclass(frozen=True, slots=True)
class ShippingQuote:
    option: ShippingOption
    cost: Money

    @property
    def service_code(self) -> str:
        return self.option.service_code


@dataclass(frozen=True, slots=True)
class ShippingEstimate:
    nearest_store: NearestStore
    total_weight: int
    quotes: tuple[ShippingQuote, ...]

    @property
    def distance_km(self) -> float:
        return self.nearest_store.distance_km

    def quote_for(self, service_code: str | None) -> ShippingQuote:
        """Chosen service if still offered, otherwise the first one."""
        for quote in self.quotes:
            if quote.service_code == service_code:
                return quote
        return self.quotes[0]


__all__ = (
    "Coordinates",
    "Address",
    "NearestStore",
    "ShippingOption",
    "ShippingRates",
    "ShippingQuote",
    "ShippingEstimate",
)
