"""Selection of the event list to display for the current day."""
import logging
from typing import List, Mapping, Optional, Sequence, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


def calendar_key(date_str: str) -> Tuple[int, ...]:
    """
    Sort key for a YYYY-M-D date string, padded or not.

    Strings that are not dates map to an empty tuple, which sorts before
    every date.
    """
    parts = date_str.strip().split('-')
    if len(parts) != 3:
        return ()
    try:
        return tuple(int(part) for part in parts)
    except ValueError:
        return ()


def select_events(
    events_by_date: Mapping[str, Sequence[T]],
    today: Optional[str]
) -> List[T]:
    """
    Return the events to show for ``today``.

    Outside the conference the first or last day is shown instead, so the
    display is never empty before or after the event.

    Args:
        events_by_date: Events grouped by calendar date
        today: Current date string, or None if not yet known

    Returns:
        List of events for the selected day (possibly empty)
    """
    today = today or ''
    if today in events_by_date:
        return list(events_by_date[today])

    days = sorted(events_by_date, key=calendar_key)
    if not days:
        return []

    today_key = calendar_key(today)
    for day in days:
        if today_key and calendar_key(day) == today_key:
            return list(events_by_date[day])

    if today_key <calendar_key(days[0]):
        return list(events_by_date[days[0]])
    if today_key > calendar_key(days[-1]):
        return list(events_by_date[days[-1]])

    logger.warning(
        f"No schedule for {today!r} although it lies between "
        f"{days[0]} and {days[-1]}; showing no events"
    )
    return []
