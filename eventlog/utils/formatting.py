"""
Date and duration formatting helpers
"""

from datetime import date, datetime
from typing import Optional, Union


def to_stored_date(value: Union[datetime, date]) -> str:
    """Truncate a draft date-time to the stored YYYY-MM-DD form.

    Aware values are first converted to the device's local time zone, so
    the stored day is the calendar day the user saw. Naive values are
    taken as local wall time.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date().isoformat()
    return value.isoformat()


def parse_draft_date(value: str) -> datetime:
    """Parse an ISO date or date-time from a navigation payload"""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def format_audio_duration(millis: Optional[int]) -> Optional[str]:
    """Format a duration as m:ss"""
    if millis is None:
        return None
    total_seconds = int(millis) // 1000
    return f"{total_seconds // 60}:{total_seconds % 60:02d}"


def format_record_time(millis: int) -> str:
    """Format a recording position as HH:MM:SS.mmm"""
    millis = int(millis)
    hours, rest = divmod(millis, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, ms = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{ms:03d}"
