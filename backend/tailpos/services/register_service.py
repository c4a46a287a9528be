# Overview: Till session state plus the cash/change calculator.

"""
Register (till) session.

WHY: One explicit state object per running till replaces ambient globals.
Routes fetch it with get_pos_session() and pass it to every service call.
It is transient: nothing here is persisted, and a restart starts with an
empty cart.

CHANGE INVARIANT: after every cart or cash mutation
    change == cash - cart.total_price()
Each mutator below recomputes change before returning rather than leaving
it to be computed lazily.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping

from flask import current_app

from ..validation import ValidationError
from .cart_service import Cart, CartItem
from .presentation import Presentation, LoggingPresentation

MENU_POS = "pos"
MENU_SALES = "sales"
VALID_MENUS = (MENU_POS, MENU_SALES)

# Sale recorder states
SALE_IDLE = "IDLE"
SALE_RECEIPT_PENDING = "RECEIPT_PENDING"
SALE_RECORDED = "RECORDED"

EXTENSION_KEY = "tailpos"

_NON_DIGITS = re.compile(r"[^0-9]+")


class RegisterError(Exception):
    """Raised when the till cannot be changed in its current state."""


@dataclass
class PendingReceipt:
    receipt_no: str
    receipt_date: str


@dataclass
class PosSession:
    presentation: Presentation = field(default_factory=LoggingPresentation)
    first_time: bool | None = None
    logged_in: bool = False
    username: str | None = None
    active_menu: str = MENU_POS
    keyword: str = ""
    cart: Cart = field(default_factory=Cart)
    cash: int = 0
    change: int = 0
    sale_state: str = SALE_IDLE
    receipt: PendingReceipt | None = None

    @property
    def is_showing_receipt(self) -> bool:
        return self.sale_state == SALE_RECEIPT_PENDING

    def to_dict(self) -> dict:
        return {
            "logged_in": self.logged_in,
            "username": self.username,
            "active_menu": self.active_menu,
            "keyword": self.keyword,
            "items": self.cart.to_list(),
            "item_count": self.cart.item_count(),
            "total": self.cart.total_price(),
            "cash": self.cash,
            "change": self.change,
            "submitable": can_submit(self),
            "sale_state": self.sale_state,
            "receipt_no": self.receipt.receipt_no if self.receipt else None,
            "receipt_date": self.receipt.receipt_date if self.receipt else None,
        }


def get_pos_session() -> PosSession:
    """Return the till session owned by the current Flask app."""
    return current_app.extensions[EXTENSION_KEY]


def update_change(session: PosSession) -> int:
    session.change = (session.cash or 0) - session.cart.total_price()
    return session.change


def can_submit(session: PosSession) -> bool:
    """Checkout is allowed only with a non-empty cart and enough cash."""
    return session.change >= 0 and len(session.cart) > 0


# =============================================================================
# CART MUTATIONS
# =============================================================================

def _require_editable(session: PosSession) -> None:
    # The pending receipt freezes the cart and the tendered cash
    if session.sale_state == SALE_RECEIPT_PENDING:
        raise RegisterError("Close the pending receipt before changing the sale")


def add_to_cart(session: PosSession, product: Mapping) -> CartItem:
    _require_editable(session)
    item = session.cart.add(product)
    session.presentation.beep()
    update_change(session)
    return item


def change_qty(session: PosSession, product_id: int, delta: int) -> int | None:
    """
    Apply a quantity delta to a cart line.

    Returns the new quantity (0 if the line was removed) or None if the
    product is not in the cart, in which case nothing changes.
    """
    if isinstance(delta, bool) or not isinstance(delta, int):
        raise ValidationError("delta must be an integer")
    _require_editable(session)

    after = session.cart.change_qty(product_id, delta)
    if after is None:
        return None

    if after == 0:
        session.presentation.clear_sound()
    else:
        session.presentation.beep()
    update_change(session)
    return after


# =============================================================================
# CASH
# =============================================================================

def add_cash(session: PosSession, amount: int) -> int:
    """Accumulate a tendered amount (quick-tender buttons)."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError("amount must be an integer")
    if amount < 0:
        raise ValidationError("amount must be >= 0")
    _require_editable(session)

    session.cash = (session.cash or 0) + amount
    update_change(session)
    session.presentation.beep()
    return session.cash


def parse_cash_text(text: str | None) -> int:
    """
    Keep only the digits of free-form input ("Rp. 25.000" -> 25000).

    Input without any digit parses as 0.
    """
    digits = _NON_DIGITS.sub("", text or "")
    return int(digits) if digits else 0


def set_cash_from_text(session: PosSession, text: str | None) -> int:
    """Replace (not add to) the tendered cash with the parsed text."""
    _require_editable(session)
    session.cash = parse_cash_text(text)
    update_change(session)
    return session.cash


def cash_presets() -> list[int]:
    return list(current_app.config["CASH_PRESETS"])


# =============================================================================
# RESET
# =============================================================================

def clear_sale(session: PosSession) -> None:
    """Empty the cart, zero the cash and drop any receipt."""
    session.cash = 0
    session.cart.clear()
    session.receipt = None
    session.sale_state = SALE_IDLE
    update_change(session)
    session.presentation.clear_sound()


def clear_cart(session: PosSession) -> None:
    """Operator-initiated reset; refused while a receipt is pending."""
    _require_editable(session)
    clear_sale(session)


def set_active_menu(session: PosSession, menu: str) -> str:
    if menu not in VALID_MENUS:
        raise ValidationError(f"menu must be one of: {', '.join(VALID_MENUS)}")
    session.active_menu = menu
    return menu
