# Overview: First-run loader; seeds the catalog from the bundled sample file.

"""
First-run bootstrap.

On the very first launch the operator chooses between the bundled sample
catalog and an empty one. Either choice writes the "first_time" marker, so
the prompt never returns. Once the marker exists every entry point here is
a no-op. The sample load is a single transaction: a bad record
leaves neither rows nor the marker behind.

SAMPLE FILE FORMAT (JSON):
    {"products": [{"name", "price", "image", "option"}, ...],
     "users":    [{"username", "password", "name", "role"}, ...]}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from flask import current_app

from ..extensions import db
from ..validation import ValidationError
from . import store_service
from .register_service import PosSession
from .settings_service import FIRST_TIME_KEY, has_setting, set_setting, delete_setting
from tailpos.time_utils import epoch_millis

logger = logging.getLogger(__name__)


def is_first_run() -> bool:
    return not has_setting(FIRST_TIME_KEY)


def refresh_first_time(session: PosSession) -> bool:
    session.first_time = is_first_run()
    return session.first_time


def set_first_time(session: PosSession, first_time: bool) -> None:
    if first_time:
        delete_setting(FIRST_TIME_KEY)
    else:
        set_setting(FIRST_TIME_KEY, str(epoch_millis()))
    session.first_time = first_time


def read_sample_data(path: str | Path) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValidationError("Sample data must be a JSON object")
    for key in ("products", "users"):
        if not isinstance(data.get(key, []), list):
            raise ValidationError(f"Sample data field '{key}' must be a list")
    return data


def load_sample_data(data: dict) -> dict:
    """
    Stage every product and user in the sample data in the current
    transaction. Nothing is committed here.
    """
    products = data.get("products", [])
    users = data.get("users", [])

    for product in products:
        store_service.add(store_service.PRODUCTS, product, commit=False)
    for user in users:
        store_service.add(store_service.USERS, user, commit=False)

    return {"products": len(products), "users": len(users)}


def start_with_sample_data(session: PosSession, path: str | Path | None = None) -> dict:
    """
    Seed the store from the sample file and clear the first-run marker.

    Returns counts of loaded records; {"skipped": True} when first run is
    already over.
    """
    if not is_first_run():
        session.first_time = False
        return {"products": 0, "users": 0, "skipped": True}

    path = path or current_app.config["SAMPLE_DATA_PATH"]
    data = read_sample_data(path)
    try:
        counts = load_sample_data(data)
        # Commits the staged rows together with the marker
        set_first_time(session, False)
    except Exception:
        db.session.rollback()
        logger.warning("Sample data load from %s rolled back", path)
        raise

    logger.info("Loaded sample data from %s: %s", path, counts)
    return {**counts, "skipped": False}


def start_blank(session: PosSession) -> dict:
    if not is_first_run():
        session.first_time = False
        return {"products": 0, "users": 0, "skipped": True}

    set_first_time(session, False)
    return {"products": 0, "users": 0, "skipped": False}
