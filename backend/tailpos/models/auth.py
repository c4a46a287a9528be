from __future__ import annotations

from ..extensions import db
from tailpos.time_utils import to_utc_z

class User(db.Model):
    """
    Till operator account.

    Passwords are bcrypt hashed; the hash never leaves the model
    (to_dict omits it).
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("username", name="uq_users_username"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    username = db.Column(db.String(64), nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    # Profile fields
    name = db.Column(db.String(120), nullable=True)
    role = db.Column(db.String(32), nullable=True, default="cashier")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    last_login_at = db.Column(db.DateTime(timezone=True), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "role": self.role,
            "created_at": to_utc_z(self.created_at),
            "last_login_at": to_utc_z(self.last_login_at) if self.last_login_at else None,
        }
