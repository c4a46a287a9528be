# Overview: Money formatting and the printable receipt view.

from __future__ import annotations

import re

from flask import current_app, has_app_context, render_template

from .register_service import PosSession

_LEADING_ZERO_OR_DOT = re.compile(r"^0|\.")
_THOUSANDS = re.compile(r"(\d)(?=(\d{3})+(?!\d))")


def number_format(number) -> str:
    """
    Group thousands with dots: 1500000 -> "1.500.000".

    Zero and None format as the empty string.
    """
    if not number:
        return ""
    digits = _LEADING_ZERO_OR_DOT.sub("", str(number))
    return _THOUSANDS.sub(r"\1.", digits)


def price_format(number, label: str | None = None) -> str:
    if label is None:
        label = current_app.config["CURRENCY_LABEL"] if has_app_context() else "Rp."
    return f"{label} {number_format(number)}" if number else f"{label} 0"


def build_receipt_context(session: PosSession) -> dict:
    """Everything the receipt template needs, taken from the pending sale."""
    if session.receipt is None:
        raise ValueError("No receipt is pending")
    return {
        "receipt_no": session.receipt.receipt_no,
        "receipt_date": session.receipt.receipt_date,
        "items": session.cart.to_list(),
        "item_count": session.cart.item_count(),
        "total": session.cart.total_price(),
        "cash": session.cash,
        "change": session.change,
        "cashier": session.username,
    }


def render_receipt(session: PosSession) -> str:
    return render_template("receipt.html", **build_receipt_context(session))
