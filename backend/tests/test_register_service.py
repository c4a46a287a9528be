"""
Till session tests: cart mutations, cash tendering and the change invariant.
"""

import pytest

from tailpos.services import register_service
from tailpos.services.presentation import BEEP_SOUND, CLEAR_SOUND
from tailpos.services.register_service import (
    MENU_POS,
    MENU_SALES,
    SALE_IDLE,
    PendingReceipt,
    SALE_RECEIPT_PENDING,
    can_submit,
    RegisterError,
)
from tailpos.validation import ValidationError


NASI = {"id": 10, "name": "Nasi Goreng", "price": 10000}
TEH = {"id": 11, "name": "Es Teh", "price": 5000}


def assert_change_invariant(session):
    assert session.change == session.cash - session.cart.total_price()


def test_new_session_defaults(pos_session):
    assert pos_session.logged_in is False
    assert pos_session.active_menu == MENU_POS
    assert pos_session.cash == 0
    assert pos_session.change == 0
    assert pos_session.sale_state == SALE_IDLE
    assert can_submit(pos_session) is False


def test_cash_and_change_walkthrough(pos_session):
    register_service.add_to_cart(pos_session, NASI)
    register_service.add_to_cart(pos_session, NASI)
    register_service.set_cash_from_text(pos_session, "25000")

    assert pos_session.cart.total_price() == 20000
    assert pos_session.change == 5000
    assert can_submit(pos_session) is True

    assert register_service.change_qty(pos_session, NASI["id"], 1) == 3
    assert pos_session.cart.total_price() == 30000
    assert pos_session.change == -5000
    assert can_submit(pos_session) is False

    assert register_service.change_qty(pos_session, NASI["id"], -3) == 0
    assert len(pos_session.cart) == 0
    assert pos_session.change == 25000
    assert can_submit(pos_session) is False


def test_change_invariant_holds_after_every_mutation(pos_session):
    steps = [
        lambda s: register_service.add_to_cart(s, NASI),
        lambda s: register_service.add_cash(s, 5000),
        lambda s: register_service.add_to_cart(s, TEH),
        lambda s: register_service.change_qty(s, TEH["id"], 2),
        lambda s: register_service.set_cash_from_text(s, "Rp. 50.000"),
        lambda s: register_service.change_qty(s, NASI["id"], -1),
        lambda s: register_service.clear_sale(s),
    ]
    for step in steps:
        step(pos_session)
        assert_change_invariant(pos_session)


def test_add_to_cart_beeps(pos_session, presentation):
    register_service.add_to_cart(pos_session, NASI)
    assert presentation.sounds == [BEEP_SOUND]


def test_removing_a_line_plays_clear_sound(pos_session, presentation):
    register_service.add_to_cart(pos_session, NASI)
    register_service.change_qty(pos_session, NASI["id"], 1)
    register_service.change_qty(pos_session, NASI["id"], -2)

    assert presentation.sounds == [BEEP_SOUND, BEEP_SOUND, CLEAR_SOUND]


def test_change_qty_for_product_not_in_cart_is_silent(pos_session, presentation):
    assert register_service.change_qty(pos_session, 999, 1) is None
    assert presentation.sounds == []


def test_change_qty_rejects_non_integer_delta(pos_session):
    register_service.add_to_cart(pos_session, NASI)
    with pytest.raises(ValidationError):
        register_service.change_qty(pos_session, NASI["id"], "1")
    with pytest.raises(ValidationError):
        register_service.change_qty(pos_session, NASI["id"], None)


def test_add_cash_accumulates(pos_session):
    register_service.add_cash(pos_session, 20000)
    register_service.add_cash(pos_session, 5000)
    assert pos_session.cash == 25000


def test_add_cash_rejects_negative_amount(pos_session):
    with pytest.raises(ValidationError):
        register_service.add_cash(pos_session, -1000)
    assert pos_session.cash == 0


@pytest.mark.parametrize("text, expected", [
    ("25000", 25000),
    ("Rp. 25.000", 25000),
    ("1,500", 1500),
    ("abc", 0),
    ("", 0),
    (None, 0),
])
def test_parse_cash_text(text, expected):
    assert register_service.parse_cash_text(text) == expected


def test_set_cash_from_text_replaces_previous_cash(pos_session):
    register_service.add_cash(pos_session, 50000)
    register_service.set_cash_from_text(pos_session, "10000")
    assert pos_session.cash == 10000


def test_cash_presets_come_from_config(app, pos_session):
    assert register_service.cash_presets() == list(app.config["CASH_PRESETS"])


def test_clear_sale_resets_everything(pos_session, presentation):
    register_service.add_to_cart(pos_session, NASI)
    register_service.add_cash(pos_session, 20000)
    pos_session.receipt = PendingReceipt("TWPOS-KS-1", "01/01/26 10.00")
    pos_session.sale_state = SALE_RECEIPT_PENDING

    register_service.clear_sale(pos_session)

    assert len(pos_session.cart) == 0
    assert pos_session.cash == 0
    assert pos_session.change == 0
    assert pos_session.receipt is None
    assert pos_session.sale_state == SALE_IDLE
    assert presentation.sounds[-1] == CLEAR_SOUND


def test_set_active_menu(pos_session):
    register_service.set_active_menu(pos_session, MENU_SALES)
    assert pos_session.active_menu == MENU_SALES

    with pytest.raises(ValidationError):
        register_service.set_active_menu(pos_session, "reports")
    assert pos_session.active_menu == MENU_SALES


def test_session_to_dict_exposes_derived_values(pos_session):
    register_service.add_to_cart(pos_session, NASI)
    register_service.add_cash(pos_session, 15000)

    state = pos_session.to_dict()
    assert state["total"] == 10000
    assert state["item_count"] == 1
    assert state["change"] == 5000
    assert state["submitable"] is True
    assert state["receipt_no"] is None


def test_sale_is_frozen_while_receipt_pending(pos_session):
    register_service.add_to_cart(pos_session, NASI)
    register_service.add_cash(pos_session, 20000)
    pos_session.receipt = PendingReceipt("TWPOS-KS-1792306620", "18/10/26 06.57")
    pos_session.sale_state = SALE_RECEIPT_PENDING

    with pytest.raises(RegisterError):
        register_service.add_to_cart(pos_session, TEH)
    with pytest.raises(RegisterError):
        register_service.change_qty(pos_session, NASI["id"], 1)
    with pytest.raises(RegisterError):
        register_service.add_cash(pos_session, 5000)
    with pytest.raises(RegisterError):
        register_service.set_cash_from_text(pos_session, "1")
    with pytest.raises(RegisterError):
        register_service.clear_cart(pos_session)

    assert pos_session.cart.item_count() == 1
    assert pos_session.cash == 20000
    assert pos_session.receipt is not None


def test_clear_cart_when_idle(pos_session):
    register_service.add_to_cart(pos_session, NASI)
    register_service.clear_cart(pos_session)
    assert len(pos_session.cart) == 0
