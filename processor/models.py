"""Data models for schedule processing."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from processor.timeparse import REFERENCE_TZ, to_iso

DETAIL_URL_TEMPLATE = "https://fosdem.org/{year}/schedule/event/{slug}"


@dataclass(frozen=True)
class Event:
    """Single talk extracted from the schedule document."""
    id: str
    start: datetime
    end: datetime
    slug: Optional[str]
    title: Optional[str]
    subtitle: Optional[str] = None
    room: Optional[str] = None

    def detail_url(self, year: Optional[int] = None) -> Optional[str]:
        """
        Build the canonical fosdem.org detail page URL.

        Args:
            year: Conference year (default: year of the event start)

        Returns:
            URL string, or None if the event has no slug
        """
        if not self.slug:
            return None
        if year is None:
            year = self.start.astimezone(REFERENCE_TZ).year
        return DETAIL_URL_TEMPLATE.format(year=year, slug=self.slug)

    def share_payload(self, year: Optional[int] = None) -> Dict[str, Optional[str]]:
        return {
            'title': self.title,
            'text': self.subtitle,
            'url': self.detail_url(year),
        }

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            'id': self.id,
            'start': to_iso(self.start),
            'end': to_iso(self.end),
            'slug': self.slug,
            'title': self.title,
            'subtitle': self.subtitle,
            'room': self.room,
        }


@dataclass(frozen=True)
class ConferenceRange:
    """Declared conference boundaries clamped against the current instant."""
    start: datetime
    end: datetime
    current: datetime


@dataclass
class Schedule:
    """Events of one parsed document, grouped by calendar date."""
    events: Dict[str, List[Event]] = field(default_factory=dict)
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Serialize for publishing to the schedule state."""
        return {
            'events': {
                date: [event.to_dict() for event in day_events]
                for date, day_events in self.events.items()
            },
            'start': to_iso(self.start) if self.start else None,
            'end': to_iso(self.end) if self.end else None,
        }

    @property
    def event_count(self) -> int:
        return sum(len(day_events) for day_events in self.events.values())
