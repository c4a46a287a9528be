from __future__ import annotations

from ..extensions import db
from tailpos.time_utils import to_utc_z


class LocalSetting(db.Model):
    """
    Key-value settings local to this till.

    Holds markers such as "first_time"; presence of the key is what callers
    test, the value is informational.
    """
    __tablename__ = "local_settings"
    __table_args__ = (
        db.UniqueConstraint("key", name="uq_local_settings_key"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    key = db.Column(db.String(128), nullable=False)
    value = db.Column(db.Text, nullable=True)

    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "key": self.key,
            "value": self.value,
            "updated_at": to_utc_z(self.updated_at),
        }
