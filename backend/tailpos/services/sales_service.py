"""
Sale recorder.

WHY: Checkout is two-step. submit() freezes a receipt number and date and
shows the receipt preview; nothing is stored yet. confirm_and_record()
prints the receipt, appends the sale, then resets the till. Closing the
preview instead (cancel_receipt) drops the receipt and keeps the cart.

STATES: IDLE -> RECEIPT_PENDING -> RECORDED -> IDLE
        RECEIPT_PENDING -> IDLE (cancel)
"""

from __future__ import annotations

import logging

from flask import current_app

from . import store_service
from .cart_service import serialize_items, deserialize_items
from .receipt_service import render_receipt
from .register_service import (
    PosSession,
    PendingReceipt,
    SALE_IDLE,
    SALE_RECEIPT_PENDING,
    SALE_RECORDED,
    can_submit,
    clear_sale,
    set_active_menu,
    MENU_SALES,
)
from tailpos.time_utils import epoch_seconds, format_receipt_date, localnow

logger = logging.getLogger(__name__)


class SaleError(Exception):
    """Raised for sale operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


def generate_receipt_no(prefix: str, now=None) -> str:
    """Receipt number "<prefix>-<unix seconds>"."""
    return f"{prefix}-{epoch_seconds(now)}"


def _require_submitable(session: PosSession) -> None:
    if not can_submit(session):
        raise SaleError(
            "Sale cannot be submitted",
            details={
                "items": len(session.cart),
                "total": session.cart.total_price(),
                "cash": session.cash,
                "change": session.change,
            },
        )


def submit(session: PosSession, now=None) -> PendingReceipt:
    """Open the receipt preview for the current cart."""
    if session.sale_state != SALE_IDLE:
        raise SaleError("A receipt is already pending", details={"receipt_no": session.receipt.receipt_no})
    _require_submitable(session)

    now = now or localnow()
    session.receipt = PendingReceipt(
        receipt_no=generate_receipt_no(current_app.config["RECEIPT_PREFIX"], now),
        receipt_date=format_receipt_date(now),
    )
    session.sale_state = SALE_RECEIPT_PENDING
    return session.receipt


def cancel_receipt(session: PosSession) -> None:
    """Close the preview without recording; the cart is left as it was."""
    if session.sale_state != SALE_RECEIPT_PENDING:
        return
    session.receipt = None
    session.sale_state = SALE_IDLE


def confirm_and_record(session: PosSession) -> dict:
    """
    Print the pending receipt, persist the sale and reset the till.

    A StorageError leaves the session in RECEIPT_PENDING with its cart, so
    the operator can confirm again.
    """
    if session.sale_state != SALE_RECEIPT_PENDING or session.receipt is None:
        raise SaleError("No receipt is pending")
    _require_submitable(session)

    receipt = session.receipt
    html = render_receipt(session)
    session.presentation.print_receipt(receipt.receipt_no, html)

    record = {
        "receipt_no": receipt.receipt_no,
        "date": receipt.receipt_date,
        "items": serialize_items(session.cart),
        "total": session.cart.total_price(),
    }
    sale_id = store_service.add(store_service.SALES, record)

    session.sale_state = SALE_RECORDED
    logger.info("Recorded sale %s id=%s total=%s", receipt.receipt_no, sale_id, record["total"])

    clear_sale(session)
    return {"id": sale_id, **record, "items": [item.to_dict() for item in deserialize_items(record["items"])]}


def list_sales() -> list[dict]:
    """All sales, newest first, with items deserialized."""
    sales = store_service.get_all(store_service.SALES)
    sales.sort(key=lambda s: (s["created_at"] or "", s["id"]), reverse=True)
    for sale in sales:
        sale["items"] = [item.to_dict() for item in deserialize_items(sale["items"])]
    return sales


def open_sales(session: PosSession) -> list[dict]:
    """Reload the sales list and switch the till to the sales view."""
    sales = list_sales()
    set_active_menu(session, MENU_SALES)
    return sales
