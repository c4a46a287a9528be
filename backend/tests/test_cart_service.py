"""
Cart engine tests.

Pure in-memory: no app or database needed.
"""

import json

from tailpos.services.cart_service import Cart, CartItem, serialize_items, deserialize_items


KOPI = {"id": 1, "name": "Kopi Susu", "price": 15000, "image": "img/kopi.png", "option": "Iced"}
TEH = {"id": 2, "name": "Es Teh", "price": 5000}


def test_add_appends_new_line_with_qty_one():
    cart = Cart()
    item = cart.add(KOPI)

    assert len(cart) == 1
    assert item.product_id == 1
    assert item.qty == 1
    assert item.option == "Iced"


def test_add_same_product_increments_instead_of_duplicating():
    cart = Cart()
    cart.add(KOPI)
    cart.add(TEH)
    cart.add(KOPI)

    assert len(cart) == 2
    assert cart.get(1).qty == 2
    assert cart.get(2).qty == 1
    assert cart.total_price() == 2 * 15000 + 5000
    assert cart.item_count() == 3


def test_add_keeps_insertion_order():
    cart = Cart()
    cart.add(TEH)
    cart.add(KOPI)
    cart.add(TEH)

    assert [item.product_id for item in cart] == [2, 1]


def test_change_qty_returns_new_quantity():
    cart = Cart()
    cart.add(KOPI)

    assert cart.change_qty(1, 2) == 3
    assert cart.get(1).qty == 3


def test_change_qty_to_zero_removes_line():
    cart = Cart()
    cart.add(KOPI)
    cart.add(TEH)

    assert cart.change_qty(1, -1) == 0
    assert cart.get(1) is None
    assert len(cart) == 1


def test_change_qty_below_zero_removes_line():
    cart = Cart()
    cart.add(KOPI)

    assert cart.change_qty(1, -5) == 0
    assert len(cart) == 0
    assert cart.total_price() == 0


def test_change_qty_unknown_product_is_noop():
    cart = Cart()
    cart.add(KOPI)

    assert cart.change_qty(99, 1) is None
    assert cart.get(1).qty == 1


def test_empty_cart_totals():
    cart = Cart()
    assert cart.total_price() == 0
    assert cart.item_count() == 0
    assert cart.to_list() == []


def test_clear_empties_cart():
    cart = Cart()
    cart.add(KOPI)
    cart.clear()
    assert len(cart) == 0


def test_line_total():
    item = CartItem(product_id=1, name="Kopi", price=15000, qty=3)
    assert item.line_total == 45000


def test_serialized_items_are_a_json_list():
    cart = Cart()
    cart.add(KOPI)
    cart.add(KOPI)

    payload = serialize_items(cart)
    rows = json.loads(payload)

    assert rows == [{
        "product_id": 1,
        "name": "Kopi Susu",
        "price": 15000,
        "qty": 2,
        "image": "img/kopi.png",
        "option": "Iced",
    }]
    assert deserialize_items(payload) == list(cart)
