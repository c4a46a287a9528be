"""
Sale recorder tests: submit, confirm, cancel and the sales list.
"""

from datetime import datetime, timezone

import pytest

from tailpos.services import register_service, sales_service, store_service
from tailpos.services.register_service import (
    MENU_SALES,
    SALE_IDLE,
    SALE_RECEIPT_PENDING,
)
from tailpos.services.sales_service import SaleError
from tailpos.services.store_service import StorageError


def ready_to_submit(session, product, qty=2, cash=50000):
    for _ in range(qty):
        register_service.add_to_cart(session, product)
    register_service.set_cash_from_text(session, str(cash))


def test_generate_receipt_no():
    now = datetime(2026, 10, 18, 6, 57, 0, 900000, tzinfo=timezone.utc)
    assert sales_service.generate_receipt_no("TWPOS-KS", now) == f"TWPOS-KS-{int(now.timestamp())}"
    assert sales_service.generate_receipt_no("TWPOS-KS", now).endswith("-1792306620")


def test_receipts_in_different_seconds_differ(pos_session, products):
    first = datetime(2026, 10, 18, 6, 57, 0)
    second = datetime(2026, 10, 18, 6, 57, 1)

    ready_to_submit(pos_session, products[0])
    no_a = sales_service.submit(pos_session, now=first).receipt_no
    sales_service.confirm_and_record(pos_session)

    ready_to_submit(pos_session, products[0])
    no_b = sales_service.submit(pos_session, now=second).receipt_no
    sales_service.confirm_and_record(pos_session)

    assert no_a != no_b
    assert {s["receipt_no"] for s in sales_service.list_sales()} == {no_a, no_b}
    for receipt_no in (no_a, no_b):
        prefix, _, stamp = receipt_no.rpartition("-")
        assert prefix == "TWPOS-KS"
        assert stamp.isdigit()


def test_submit_opens_receipt(pos_session, products):
    ready_to_submit(pos_session, products[0])
    now = datetime(2026, 10, 18, 6, 57)

    receipt = sales_service.submit(pos_session, now=now)

    assert pos_session.sale_state == SALE_RECEIPT_PENDING
    assert pos_session.is_showing_receipt is True
    assert receipt.receipt_no == f"TWPOS-KS-{int(now.timestamp())}"
    assert receipt.receipt_date == "18/10/26 06.57"
    # Nothing stored until confirmation
    assert store_service.get_all(store_service.SALES) == []


def test_submit_empty_cart_fails(pos_session):
    register_service.add_cash(pos_session, 10000)
    with pytest.raises(SaleError):
        sales_service.submit(pos_session)
    assert pos_session.sale_state == SALE_IDLE


def test_submit_with_insufficient_cash_fails(pos_session, products):
    ready_to_submit(pos_session, products[0], qty=2, cash=20000)
    with pytest.raises(SaleError) as exc_info:
        sales_service.submit(pos_session)
    assert exc_info.value.details["change"] == -10000


def test_submit_twice_fails(pos_session, products):
    ready_to_submit(pos_session, products[0])
    sales_service.submit(pos_session)
    with pytest.raises(SaleError):
        sales_service.submit(pos_session)


def test_cancel_keeps_cart(pos_session, products):
    ready_to_submit(pos_session, products[0])
    sales_service.submit(pos_session)

    sales_service.cancel_receipt(pos_session)

    assert pos_session.sale_state == SALE_IDLE
    assert pos_session.receipt is None
    assert pos_session.cart.item_count() == 2
    assert pos_session.cash == 50000


def test_confirm_records_sale_and_resets_till(pos_session, products, presentation):
    kopi, teh = products[0], products[1]
    register_service.add_to_cart(pos_session, kopi)
    register_service.add_to_cart(pos_session, kopi)
    register_service.add_to_cart(pos_session, teh)
    register_service.add_cash(pos_session, 50000)
    receipt = sales_service.submit(pos_session)

    sale = sales_service.confirm_and_record(pos_session)

    assert sale["receipt_no"] == receipt.receipt_no
    assert sale["total"] == 35000
    assert [(i["product_id"], i["qty"]) for i in sale["items"]] == [(kopi["id"], 2), (teh["id"], 1)]

    assert len(presentation.printed) == 1
    title, html = presentation.printed[0]
    assert title == receipt.receipt_no
    assert "Rp. 35.000" in html

    assert pos_session.sale_state == SALE_IDLE
    assert len(pos_session.cart) == 0
    assert pos_session.cash == 0
    assert pos_session.change == 0


def test_recorded_items_round_trip(pos_session, products):
    ready_to_submit(pos_session, products[0], qty=3)
    sales_service.submit(pos_session)
    sales_service.confirm_and_record(pos_session)

    [stored] = sales_service.list_sales()
    assert stored["items"] == [{
        "product_id": products[0]["id"],
        "name": "Kopi Susu",
        "price": 15000,
        "qty": 3,
        "image": "img/kopi-susu.png",
        "option": "Iced",
    }]
    assert stored["total"] == 45000


def test_confirm_without_pending_receipt_fails(pos_session, products):
    ready_to_submit(pos_session, products[0])
    with pytest.raises(SaleError):
        sales_service.confirm_and_record(pos_session)


def test_storage_failure_keeps_receipt_pending(pos_session, products, monkeypatch):
    ready_to_submit(pos_session, products[0])
    sales_service.submit(pos_session)

    def broken_add(collection, record):
        raise StorageError("disk full")

    monkeypatch.setattr(store_service, "add", broken_add)

    with pytest.raises(StorageError):
        sales_service.confirm_and_record(pos_session)

    assert pos_session.sale_state == SALE_RECEIPT_PENDING
    assert pos_session.cart.item_count() == 2


def test_list_sales_newest_first(pos_session, products):
    for qty in (1, 2):
        ready_to_submit(pos_session, products[1], qty=qty, cash=10000)
        sales_service.submit(pos_session)
        sales_service.confirm_and_record(pos_session)

    sales = sales_service.list_sales()
    assert [s["total"] for s in sales] == [10000, 5000]


def test_open_sales_switches_menu(pos_session):
    assert sales_service.open_sales(pos_session) == []
    assert pos_session.active_menu == MENU_SALES
