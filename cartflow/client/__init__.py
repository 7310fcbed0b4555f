"""
Client — the backend over HTTP.

    backend = Backend.connect(Settings.load(), token=session_token)
    builder = PreviewBuilder(backend.catalog, backend.discounts, backend.addresses, backend.locator)
"""

from __future__ import annotations

from cartflow.client._http import BackendClient, RETRYABLE
from cartflow.client._services import (
    HttpCatalog,
    HttpCarts,
    HttpDiscounts,
    HttpVouchers,
    HttpStoreLocator,
    HttpAddressBook,
    HttpOrders,
    Backend,
)

__all__ = (
    "BackendClient",
    "RETRYABLE",
    "HttpCatalog",
    "HttpCarts",
    "HttpDiscounts",
    "HttpVouchers",
    "HttpStoreLocator",
    "HttpAddressBook",
    "HttpOrders",
    "Backend",
)
