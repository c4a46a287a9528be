# Overview: Local key-value settings (first-run marker and friends).

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import LocalSetting
from .store_service import StorageError

FIRST_TIME_KEY = "first_time"


def get_setting(key: str) -> str | None:
    try:
        row = db.session.query(LocalSetting).filter_by(key=key).first()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError(f"Failed to read setting {key}") from exc
    return row.value if row else None


def has_setting(key: str) -> bool:
    try:
        row = db.session.query(LocalSetting.id).filter_by(key=key).first()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError(f"Failed to read setting {key}") from exc
    return row is not None


def set_setting(key: str, value: str | None) -> None:
    try:
        row = db.session.query(LocalSetting).filter_by(key=key).first()
        if row is None:
            db.session.add(LocalSetting(key=key, value=value))
        else:
            row.value = value
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError(f"Failed to write setting {key}") from exc


def delete_setting(key: str) -> bool:
    try:
        deleted = db.session.query(LocalSetting).filter_by(key=key).delete()
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError(f"Failed to delete setting {key}") from exc
    return deleted > 0
