"""Timezone utilities for US/Eastern market time."""

from datetime import datetime

import pytz

EASTERN_TZ = pytz.timezone("US/Eastern")


def now_eastern() -> datetime:
    """Return current time in US/Eastern timezone."""
    return datetime.now(EASTERN_TZ)


def to_eastern(dt: datetime) -> datetime:
    """Convert a datetime to US/Eastern timezone."""
    if dt.tzinfo is None:
        # SQLite drops tzinfo; stored values are Eastern wall-clock times
        return EASTERN_TZ.localize(dt)
    return dt.astimezone(EASTERN_TZ)


def to_naive_eastern(dt: datetime) -> datetime:
    """Return the Eastern wall-clock time without tzinfo, as stored in the database."""
    return to_eastern(dt).replace(tzinfo=None)
