from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def localnow() -> datetime:
    """Wall-clock 'now' of the till, used for printed receipts."""
    return datetime.now()


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc).replace(microsecond=0)
    return dt_utc.isoformat().replace("+00:00", "Z")


def epoch_seconds(dt: Optional[datetime] = None) -> int:
    """Whole seconds since the epoch, rounded down."""
    dt = dt or datetime.now(timezone.utc)
    return int(dt.timestamp())


def epoch_millis(dt: Optional[datetime] = None) -> int:
    dt = dt or datetime.now(timezone.utc)
    return int(dt.timestamp() * 1000)


def format_receipt_date(dt: datetime) -> str:
    """
    Short Indonesian date/time as printed on receipts.

    Matches the id-ID "short" style: day/month/two-digit year, then the
    time with a dot separator, e.g. "18/10/26 06.57".
    """
    return dt.strftime("%d/%m/%y %H.%M")
