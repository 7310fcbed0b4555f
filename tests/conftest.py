from __future__ import annotations

from datetime import datetime

import pytest

from cartflow.cart import Cart
from tests.fakes import (
    APPLES,
    BREAD,
    NOW,
    FakeAddressBook,
    FakeCarts,
    FakeCatalog,
    FakeDiscounts,
    FakeLocator,
    FakeOrders,
    make_address,
    make_cart,
    make_line,
    make_order,
)

# ═══════════════════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def cart() -> Cart:
    """Apples 10000 x 2 + Bread 5000 x 1 = 25000."""
    return make_cart(make_line(1, APPLES, 2), make_line(2, BREAD, 1))


@pytest.fixture()
def catalog() -> FakeCatalog:
    return FakeCatalog(APPLES, BREAD)


@pytest.fixture()
def carts(catalog: FakeCatalog) -> FakeCarts:
    return FakeCarts(catalog)


@pytest.fixture()
def locator() -> FakeLocator:
    return FakeLocator()


@pytest.fixture()
def address_book() -> FakeAddressBook:
    return FakeAddressBook(make_address())


@pytest.fixture()
def discounts() -> FakeDiscounts:
    return FakeDiscounts()


@pytest.fixture()
def orders() -> FakeOrders:
    return FakeOrders(make_order())
