"""Builder turning a FOSDEM schedule XML document into a Schedule."""
import logging
from datetime import datetime
from typing import Callable, Iterable, Iterator, List, Optional
from xml.etree.ElementTree import Element, ParseError

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from processor.models import ConferenceRange, Event, Schedule
from processor.timeparse import end_of_day, event_times, local_instant, utcnow

logger = logging.getLogger(__name__)


class ScheduleParseError(ValueError):
    """Raised when the schedule document is not well-formed XML."""


def text_or_none(node: Element, child_name: str) -> Optional[str]:
    """
    Read the text of a direct child element.

    Returns:
        None if the child is missing, "" if it is present but empty
    """
    child = node.find(child_name)
    if child is None:
        return None
    if child.text is None:
        return ''
    return child.text


def extract_events(
    nodes: Iterable[Element],
    date_str: str,
    now: Optional[datetime] = None
) -> List[Event]:
    """
    Extract events from the ``event`` elements of one day.

    Args:
        nodes: Event elements, in document order
        date_str: Calendar date of the day (YYYY-MM-DD)
        now: Instant used for events without a start time

    Returns:
        List of Event objects, one per node, order preserved
    """
    events = []
    for node in nodes:
        start, end = event_times(
            date_str,
            text_or_none(node, 'start'),
            text_or_none(node, 'duration'),
            now=now
        )
        events.append(Event(
            id=node.get('id', ''),
            start=start,
            end=end,
            slug=text_or_none(node, 'slug'),
            title=text_or_none(node, 'title'),
            subtitle=text_or_none(node, 'subtitle'),
            room=text_or_none(node, 'room'),
        ))
    return events


def resolve_conference_range(
    start_date: Optional[str],
    end_date: Optional[str],
    now: datetime
) -> ConferenceRange:
    """
    Derive the conference boundaries and the instant to treat as current.

    The current instant is pinned to the opening before the conference and
    to the closing after it. Missing dates fall back to ``now``.

    Args:
        start_date: Declared first day (YYYY-MM-DD) or None
        end_date: Declared last day (YYYY-MM-DD) or None
        now: Invocation instant

    Returns:
        ConferenceRange with start, end and current instants
    """
    start = local_instant(start_date, '00:00') if start_date else now
    end = end_of_day(end_date) if end_date else now

    if now <= start:
        return ConferenceRange(start=start, end=end, current=start)
    if now >= end:
        return ConferenceRange(start=start, end=end, current=end)
    return ConferenceRange(start=start, end=end, current=now)


class ScheduleBuilder:
    """Builds Schedule objects from raw schedule XML."""

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        """
        Initialize the builder.

        Args:
            clock: Callable returning the current instant (aware datetime)
        """
        self.clock = clock

    def build(self, xml_text: str, room_name: str = '') -> Schedule:
        """
        Parse a schedule document and group its events by day.

        Args:
            xml_text: Raw schedule XML
            room_name: Only extract events from this room (empty: all rooms)

        Returns:
            Schedule with the date map and the conference boundaries

        Raises:
            ScheduleParseError: If the document is not well-formed
        """
        try:
            root = ET.fromstring(xml_text)
        except (ParseError, DefusedXmlException) as e:
            raise ScheduleParseError(str(e)) from e

        now = self.clock()
        conference = root if root.tag == 'conference' else root.find('.//conference')
        conference_start = conference_end = None
        if conference is not None:
            conference_start = conference.findtext('start') or None
            conference_end = conference.findtext('end') or None
        conference_range = resolve_conference_range(conference_start, conference_end, now)

        events = {}
        for day in root.iter('day'):
            date_str = day.get('date')
            if date_str is None:
                logger.warning("Skipping day element without date attribute")
                continue
            events[date_str] = extract_events(
                self._room_events(day, room_name), date_str, now=now
            )

        schedule = Schedule(
            events=events,
            start=conference_range.start,
            end=conference_range.end
        )
        logger.info(
            f"Built schedule with {schedule.event_count} events over "
            f"{len(events)} days" + (f" for room '{room_name}'" if room_name else "")
        )
        return schedule

    def _room_events(self, day: Element, room_name: str) -> Iterator[Element]:
        """Yield event elements nested under matching rooms, each once."""
        seen = set()
        for room in day.iter('room'):
            if room_name and room.get('name') != room_name:
                continue
            for event in room.iter('event'):
                if id(event) in seen:
                    continue
                seen.add(id(event))
                yield event
