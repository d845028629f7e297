"""
Helper functions shared by the decoder modules.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def julian_to_datetime(julian_day: int, milliseconds: int) -> Optional[datetime]:
    """
    Convert a modified Julian day and milliseconds of day to UTC.

    Day 1 is 1970-01-01. A Julian day of 0 means "no time" and gives None.
    """
    if julian_day <= 0:
        return None
    return EPOCH + timedelta(days=julian_day - 1, milliseconds=milliseconds)


def strip_padding(text: str) -> str:
    """Remove NUL padding and surrounding blanks from a fixed-width field."""
    return text.replace("\x00", "").strip()
