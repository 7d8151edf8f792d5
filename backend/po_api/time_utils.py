from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a calendar date in ISO-8601 form (YYYY-MM-DD).

    - None / "" -> None
    - a full datetime string is rejected; purchase orders carry dates only
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    if len(s) != 10:
        raise ValueError(f"Invalid ISO date: {value!r}")
    return datetime.strptime(s, "%Y-%m-%d").date()


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
