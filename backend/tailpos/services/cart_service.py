# Overview: In-memory shopping cart; line items keyed by product id.

"""
Cart engine for the till.

INVARIANTS:
- At most one CartItem per product_id (add-or-increment, never duplicate)
- Every item has qty >= 1; an item whose qty would drop to zero or below
  is removed instead of retained
- total_price() is always sum(qty * price) over the current items

Items are snapshots of the product at the time it was first added, so a
later catalog edit does not reprice a cart in progress.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict, field
from typing import Iterable, Mapping


@dataclass
class CartItem:
    """A line in the cart."""
    product_id: int
    name: str
    price: int
    qty: int = 1
    image: str | None = None
    option: str | None = None

    @property
    def line_total(self) -> int:
        return self.qty * self.price

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping) -> "CartItem":
        return cls(
            product_id=data["product_id"],
            name=data["name"],
            price=data["price"],
            qty=data.get("qty", 1),
            image=data.get("image"),
            option=data.get("option"),
        )


@dataclass
class Cart:
    items: list[CartItem] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def find_index(self, product_id: int) -> int:
        for index, item in enumerate(self.items):
            if item.product_id == product_id:
                return index
        return -1

    def get(self, product_id: int) -> CartItem | None:
        index = self.find_index(product_id)
        return self.items[index] if index != -1 else None

    def add(self, product: Mapping) -> CartItem:
        """
        Add one unit of a product.

        A product already in the cart has its quantity incremented; otherwise
        a new line is appended with qty=1.
        """
        index = self.find_index(product["id"])
        if index == -1:
            item = CartItem(
                product_id=product["id"],
                name=product["name"],
                price=product["price"],
                qty=1,
                image=product.get("image"),
                option=product.get("option"),
            )
            self.items.append(item)
            return item

        item = self.items[index]
        item.qty += 1
        return item

    def change_qty(self, product_id: int, delta: int) -> int | None:
        """
        Apply a quantity delta to the line for product_id.

        Returns the resulting quantity (0 when the line was removed), or None
        when the product is not in the cart.
        """
        index = self.find_index(product_id)
        if index == -1:
            return None

        after = self.items[index].qty + delta
        if after <= 0:
            del self.items[index]
            return 0

        self.items[index].qty = after
        return after

    def total_price(self) -> int:
        return sum(item.qty * item.price for item in self.items)

    def item_count(self) -> int:
        return sum(item.qty for item in self.items)

    def clear(self) -> None:
        self.items.clear()

    def to_list(self) -> list[dict]:
        return [item.to_dict() for item in self.items]


def serialize_items(items: Iterable[CartItem]) -> str:
    """Serialize cart items for storage on a sale record."""
    return json.dumps([item.to_dict() for item in items])


def deserialize_items(payload: str) -> list[CartItem]:
    """Inverse of serialize_items."""
    return [CartItem.from_dict(row) for row in json.loads(payload)]
