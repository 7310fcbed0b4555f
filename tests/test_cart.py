from __future__ import annotations

from kungfu import Error, Ok

from cartflow.cart import Cart
from cartflow.errors import ErrorCategory, ErrorKind
from tests.fakes import APPLES, BREAD, make_cart, make_line


def test_subtotal_is_exact_sum(cart: Cart) -> None:
    assert cart.subtotal() == 10000 * 2 + 5000 * 1 == 25000
    assert cart.total_items == 3
    assert cart.total_weight == 2500


def test_add_line_appends_in_insertion_order() -> None:
    cart = Cart.empty(1)
    match cart.add_line(product_id=20, quantity=1, available_stock=3, unit_price=5000, name="Bread"):
        case Ok(change):
            cart = change.cart
    match cart.add_line(product_id=10, quantity=2, available_stock=5, unit_price=10000, name="Apples"):
        case Ok(change):
            cart = change.cart
    assert [line.product_id for line in cart.lines] == [20, 10]
    assert cart.subtotal() == 25000


def test_add_line_merges_same_product_and_clamps(cart: Cart) -> None:
    result = cart.add_line(product_id=APPLES.product_id, quantity=4, available_stock=5, unit_price=10000)

    assert isinstance(result, Ok)
    change = result.value
    assert len(change.cart.lines) == 2
    assert change.line.quantity == 5
    assert change.clamped is True


def test_add_line_rejects_more_than_stock() -> None:
    result = Cart.empty(1).add_line(product_id=1, quantity=6, available_stock=5, unit_price=100)

    assert isinstance(result, Error)
    assert result.error.kind is ErrorKind.OUT_OF_STOCK
    assert result.error.category is ErrorCategory.INELIGIBLE


def test_add_line_rejects_sold_out_and_zero_quantity() -> None:
    sold_out = Cart.empty(1).add_line(product_id=1, quantity=1, available_stock=0, unit_price=100)
    zero = Cart.empty(1).add_line(product_id=1, quantity=0, available_stock=5, unit_price=100)

    assert isinstance(sold_out, Error) and sold_out.error.kind is ErrorKind.OUT_OF_STOCK
    assert isinstance(zero, Error) and zero.error.kind is ErrorKind.INVALID_QUANTITY


def test_set_quantity_clamps_to_stock(cart: Cart) -> None:
    result = cart.set_quantity(2, 10)

    assert isinstance(result, Ok)
    assert result.value.line.quantity == BREAD.stock
    assert result.value.clamped is True
    assert cart.find(2).quantity == 1  # original untouched


def test_set_quantity_validation(cart: Cart) -> None:
    too_low = cart.set_quantity(1, 0)
    missing = cart.set_quantity(99, 1)

    assert isinstance(too_low, Error) and too_low.error.kind is ErrorKind.INVALID_QUANTITY
    assert isinstance(missing, Error) and missing.error.kind is ErrorKind.LINE_NOT_FOUND
    assert missing.error.category is ErrorCategory.VALIDATION


def test_remove_absent_line_is_noop(cart: Cart) -> None:
    assert cart.remove_line(99) is cart
    assert cart.remove_line(1).subtotal() == 5000


def test_clear_keeps_store(cart: Cart) -> None:
    cleared = cart.clear()
    assert cleared.is_empty
    assert cleared.store_id == cart.store_id


def test_stock_issues_against_fresh_stock() -> None:
    cart = make_cart(make_line(1, APPLES, 4), make_line(2, BREAD, 1))

    issues = cart.stock_issues({APPLES.product_id: 3, BREAD.product_id: 3})

    assert [(i.line_id, i.requested, i.available) for i in issues] == [(1, 4, 3)]
