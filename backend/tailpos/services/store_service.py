# Overview: Key-value store adapter over the embedded database.

"""
Store adapter: three flat collections keyed by integer id.

COLLECTIONS:
- products: catalog entries
- sales: finalized sale snapshots (append-only by convention)
- users: till operators

CONTRACT:
- get_all(collection) -> list of record dicts, ordered by id
- add(collection, record) -> new id
- get(collection, id) -> record, or None if absent
- update(collection, id, record) -> replaced record, or None if absent
- delete(collection, id) -> True if a record was removed
- find_user_by_credentials(username, password) -> user record or None

ID ASSIGNMENT: ids are assigned here, on add, from each table's SQLite
AUTOINCREMENT sequence. They are monotonic and never reused after a
delete. An "id" key supplied inside a record is ignored.

APPEND-ONLY: sales are never updated or deleted; both raise ConflictError.

FAILURES: any database error rolls back the session and is raised as
StorageError. Nothing is retried and no partial write survives.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Product, Sale, User
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_product,
    enforce_rules_sale,
    enforce_rules_user,
    ValidationError,
    ConflictError,
)
from tailpos.time_utils import utcnow

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the embedded database rejects a read or write."""


@dataclass(frozen=True)
class Collection:
    name: str
    model: type
    policy: ModelValidationPolicy
    rules: Callable[[dict], None]
    append_only: bool = False


PRODUCTS = "products"
SALES = "sales"
USERS = "users"

COLLECTIONS = {
    PRODUCTS: Collection(
        name=PRODUCTS,
        model=Product,
        policy=ModelValidationPolicy(
            writable_fields={"name", "price", "image", "option"},
            required_on_create={"name", "price"},
        ),
        rules=enforce_rules_product,
    ),
    SALES: Collection(
        name=SALES,
        model=Sale,
        policy=ModelValidationPolicy(
            writable_fields={"receipt_no", "date", "items", "total"},
            required_on_create={"receipt_no", "date", "items", "total"},
        ),
        rules=enforce_rules_sale,
        append_only=True,
    ),
    USERS: Collection(
        name=USERS,
        model=User,
        policy=ModelValidationPolicy(
            writable_fields={"username", "password_hash", "name", "role"},
            required_on_create={"username", "password_hash"},
        ),
        rules=enforce_rules_user,
    ),
}


def _collection(name: str) -> Collection:
    try:
        return COLLECTIONS[name]
    except KeyError:
        raise ValueError(f"Unknown collection: {name}") from None


def _prepare_record(collection: Collection, record: dict) -> dict:
    """Drop caller-supplied ids and hash plaintext passwords."""
    if not isinstance(record, dict):
        raise ValidationError("Record must be an object")

    record = {k: v for k, v in record.items() if k != "id"}

    if collection.name == USERS:
        if "password" not in record and "password_hash" not in record:
            raise ValidationError("Missing required fields: password")
        if "password" in record:
            from .auth_service import hash_password

            password = record.pop("password")
            if not password:
                raise ValidationError("password cannot be blank")
            record["password_hash"] = hash_password(str(password))

    return record


def _validated(collection: Collection, record: dict) -> dict:
    patch = validate_payload(
        model=collection.model,
        payload=_prepare_record(collection, record),
        policy=collection.policy,
        partial=False,
    )
    collection.rules(patch)
    return patch


def _ensure_unique_username(username: str, exclude_id: int | None = None) -> None:
    query = db.session.query(User.id).filter(User.username == username)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    if query.first():
        raise ConflictError("Username already exists.")


def _ensure_mutable(coll: Collection) -> None:
    if coll.append_only:
        raise ConflictError(f"{coll.name} records are append-only")


def get_all(collection: str) -> list[dict]:
    coll = _collection(collection)
    try:
        rows = db.session.query(coll.model).order_by(coll.model.id.asc()).all()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError(f"Failed to read {collection}") from exc
    return [row.to_dict() for row in rows]


def get(collection: str, record_id: int) -> dict | None:
    coll = _collection(collection)
    try:
        obj = db.session.get(coll.model, record_id)
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError(f"Failed to read {collection} id={record_id}") from exc
    return obj.to_dict() if obj is not None else None


def add(collection: str, record: dict, commit: bool = True) -> int:
    """
    Validate and insert a record; returns the id assigned to it.

    commit=False only flushes, leaving the caller to commit or roll back a
    batch of adds as one transaction.
    """
    coll = _collection(collection)
    patch = _validated(coll, record)

    try:
        if coll.name == USERS:
            _ensure_unique_username(patch["username"])

        obj = coll.model(**patch)
        db.session.add(obj)
        db.session.flush()  # assigns obj.id from the AUTOINCREMENT sequence
        new_id = obj.id
        if commit:
            db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError(f"Failed to add to {collection}") from exc

    logger.debug("added %s id=%s", collection, new_id)
    return new_id


def update(collection: str, record_id: int, record: dict) -> dict | None:
    """
    Replace the record stored under record_id.

    Replace, not merge: writable fields missing from the record are reset
    to NULL (and required ones must be present).
    """
    coll = _collection(collection)
    _ensure_mutable(coll)
    patch = _validated(coll, record)

    try:
        obj = db.session.get(coll.model, record_id)
        if obj is None:
            return None

        if coll.name == USERS:
            _ensure_unique_username(patch["username"], exclude_id=record_id)

        for field_name in coll.policy.writable_fields:
            setattr(obj, field_name, patch.get(field_name))
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError(f"Failed to update {collection} id={record_id}") from exc

    return obj.to_dict()


def delete(collection: str, record_id: int) -> bool:
    coll = _collection(collection)
    _ensure_mutable(coll)
    try:
        obj = db.session.get(coll.model, record_id)
        if obj is None:
            return False
        db.session.delete(obj)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError(f"Failed to delete {collection} id={record_id}") from exc
    return True


def find_user_by_credentials(username: str, password: str) -> dict | None:
    """
    Look up the user whose username matches exactly and whose password
    verifies against the stored hash.
    """
    from .auth_service import verify_password

    try:
        user = db.session.query(User).filter(User.username == username).first()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError("Failed to read users") from exc

    if user is None or not verify_password(password, user.password_hash):
        return None
    return user.to_dict()


def record_login(user_id: int) -> None:
    """Stamp last_login_at on a user after a successful login."""
    try:
        user = db.session.get(User, user_id)
        if user is not None:
            user.last_login_at = utcnow()
            db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError(f"Failed to update users id={user_id}") from exc
