"""Time helpers for the reference timezone (fixed UTC+1)."""
import re
from datetime import datetime, timedelta
from typing import Optional, Tuple

import pytz

# FOSDEM publishes all times in Brussels winter time
REFERENCE_TZ = pytz.FixedOffset(60)

DURATION_PATTERN = re.compile(r'(\d+):(\d+)')


def utcnow() -> datetime:
    """Return the current instant as an aware UTC datetime."""
    return datetime.now(pytz.utc)


def parse_duration_minutes(value: Optional[str]) -> int:
    """
    Parse an ``H+:MM`` duration into minutes.

    Args:
        value: Duration text (e.g. "00:50", "1:30", "100:05")

    Returns:
        Total minutes, or 0 if the value does not contain a duration
    """
    match = DURATION_PATTERN.search(value or '')
    if not match:
        return 0
    hours, minutes = int(match.group(1)), int(match.group(2))
    return hours * 60 + minutes


def local_instant(date_str: str, time_str: str, seconds: int = 0) -> datetime:
    """
    Build a UTC instant from a reference-timezone date and ``HH:MM`` time.

    Args:
        date_str: Calendar date (YYYY-MM-DD)
        time_str: Wall-clock time (HH:MM)
        seconds: Optional seconds component

    Returns:
        Aware datetime normalized to UTC

    Raises:
        ValueError: If the date or time cannot be parsed
    """
    naive = datetime.strptime(f"{date_str.strip()} {time_str.strip()}", '%Y-%m-%d %H:%M')
    naive = naive.replace(second=seconds)
    return REFERENCE_TZ.localize(naive).astimezone(pytz.utc)


def event_times(
    date_str: str,
    start_time: Optional[str],
    duration: Optional[str],
    now: Optional[datetime] = None
) -> Tuple[datetime, datetime]:
    """
    Compute absolute start and end instants of an event.

    A missing start time falls back to ``now``; a malformed duration is
    treated as zero minutes.

    Args:
        date_str: Calendar date of the event's day (YYYY-MM-DD)
        start_time: Start time (HH:MM) or None
        duration: Duration (H+:MM) or None
        now: Instant used when the start time is absent

    Returns:
        Tuple of (start, end) as aware UTC datetimes
    """
    if start_time:
        start = local_instant(date_str, start_time)
    else:
        start = now if now is not None else utcnow()
    end = start + timedelta(minutes=parse_duration_minutes(duration))
    return start, end


def reference_date(instant: datetime) -> str:
    """Return the reference-timezone calendar date of ``instant`` as YYYY-MM-DD."""
    return instant.astimezone(REFERENCE_TZ).strftime('%Y-%m-%d')


def end_of_day(date_str: str) -> datetime:
    """Return 23:59:59 of ``date_str`` in the reference timezone, as UTC."""
    return local_instant(date_str, '23:59', seconds=59)


def to_iso(instant: datetime) -> str:
    return instant.astimezone(pytz.utc).isoformat()
