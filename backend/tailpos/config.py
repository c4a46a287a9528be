# backend/tailpos/config.py
from __future__ import annotations
import os
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parent


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Relative SQLite paths resolve inside the Flask instance folder
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///tailpos.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Receipt numbers are "<prefix>-<unix seconds>"
    RECEIPT_PREFIX = os.environ.get("TAILPOS_RECEIPT_PREFIX", "TWPOS-KS")

    # Bundled sample catalog offered on first run
    SAMPLE_DATA_PATH = os.environ.get(
        "TAILPOS_SAMPLE_DATA",
        str(PACKAGE_DIR / "data" / "sample.json"),
    )

    # Quick-tender buttons on the cash panel
    CASH_PRESETS = (2000, 5000, 10000, 20000, 50000, 100000)
    CURRENCY_LABEL = os.environ.get("TAILPOS_CURRENCY", "Rp.")

    BCRYPT_ROUNDS = int(os.environ.get("TAILPOS_BCRYPT_ROUNDS", "12"))
