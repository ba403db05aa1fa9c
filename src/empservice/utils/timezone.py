# src/empservice/utils/timezone.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

import pytz

UTC = pytz.utc


def to_naive_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Convert a timestamp to naive UTC for storage.

    Naive inputs are taken to be UTC already. Not every backend keeps the
    offset (SQLite drops it), so the table always holds naive UTC values.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(UTC).replace(tzinfo=None)


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Attach UTC to a naive timestamp read back from the table.
    Aware values are returned unchanged.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return UTC.localize(dt)
    return dt
