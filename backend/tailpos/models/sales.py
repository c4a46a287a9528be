from __future__ import annotations

from ..extensions import db
from tailpos.time_utils import to_utc_z

class Sale(db.Model):
    """
    Finalized sale.

    WHY: A sale is a snapshot of the cart at the moment the receipt was
    confirmed. Lines are not normalized into their own table: `items` holds
    the serialized cart so later catalog edits never rewrite history.

    IMMUTABLE: Records are appended, never updated.
    """
    __tablename__ = "sales"
    __table_args__ = (
        db.Index("ix_sales_receipt_no", "receipt_no"),
        db.Index("ix_sales_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    # Human-readable receipt number (e.g., "TWPOS-KS-1792306620")
    receipt_no = db.Column(db.String(64), nullable=False)

    # Date as printed on the receipt; created_at is the sortable instant
    date = db.Column(db.String(32), nullable=False)

    # JSON list of cart items
    items = db.Column(db.Text, nullable=False)
    total = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "receipt_no": self.receipt_no,
            "date": self.date,
            "items": self.items,
            "total": self.total,
            "created_at": to_utc_z(self.created_at),
        }
