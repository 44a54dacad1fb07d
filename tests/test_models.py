"""Unit tests for schedule data models."""
import dataclasses
from datetime import datetime

import pytest
import pytz

from processor.models import Event


@pytest.fixture
def event():
    return Event(
        id="301",
        start=datetime(2026, 2, 1, 16, 0, tzinfo=pytz.utc),
        end=datetime(2026, 2, 1, 16, 30, tzinfo=pytz.utc),
        slug="closing",
        title="Closing FOSDEM 2026",
        subtitle="See you next year",
        room="Janson",
    )


class TestEvent:
    """Test cases for Event."""

    def test_detail_url_uses_start_year(self, event):
        assert event.detail_url() == "https://fosdem.org/2026/schedule/event/closing"

    def test_detail_url_explicit_year(self, event):
        assert event.detail_url(2027) == "https://fosdem.org/2027/schedule/event/closing"

    def test_detail_url_year_in_reference_timezone(self):
        # 23:30 UTC on new year's eve is already next year at UTC+1
        event = Event(
            id="1",
            start=datetime(2025, 12, 31, 23, 30, tzinfo=pytz.utc),
            end=datetime(2025, 12, 31, 23, 30, tzinfo=pytz.utc),
            slug="midnight",
            title="Midnight",
        )

        assert event.detail_url() == "https://fosdem.org/2026/schedule/event/midnight"

    def test_detail_url_without_slug(self, event):
        assert dataclasses.replace(event, slug=None).detail_url() is None

    def test_share_payload(self, event):
        assert event.share_payload() == {
            'title': "Closing FOSDEM 2026",
            'text': "See you next year",
            'url': "https://fosdem.org/2026/schedule/event/closing",
        }

    def test_to_dict(self, event):
        assert event.to_dict() == {
            'id': "301",
            'start': "2026-02-01T16:00:00+00:00",
            'end': "2026-02-01T16:30:00+00:00",
            'slug': "closing",
            'title': "Closing FOSDEM 2026",
            'subtitle': "See you next year",
            'room': "Janson",
        }

    def test_event_is_immutable(self, event):
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.title = "Changed"
