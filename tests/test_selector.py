"""Unit tests for today's event selection."""
import logging

from processor.selector import calendar_key, select_events


DAY_ONE = ["opening", "keynote"]
DAY_TWO = ["closing"]


class TestSelectEvents:
    """Test cases for select_events."""

    def setup_method(self):
        self.events = {"2026-2-1": DAY_ONE, "2026-2-2": DAY_TWO}

    def test_today_present_returns_that_day(self):
        assert select_events(self.events, "2026-2-1") == DAY_ONE

    def test_before_conference_returns_first_day(self):
        assert select_events(self.events, "2025-12-31") == DAY_ONE

    def test_after_conference_returns_last_day(self):
        assert select_events(self.events, "2026-3-1") == DAY_TWO

    def test_no_days_returns_empty_list(self):
        assert select_events({}, "") == []

    def test_unknown_today_shows_first_day(self):
        assert select_events(self.events, None) == DAY_ONE
        assert select_events(self.events, "") == DAY_ONE

    def test_padded_today_matches_unpadded_key(self):
        assert select_events(self.events, "2026-02-02") == DAY_TWO

    def test_compares_calendar_values_not_strings(self):
        """Test that 2026-10-1 sorts after 2026-9-30."""
        events = {"2026-9-30": DAY_ONE, "2026-10-1": DAY_TWO}

        assert select_events(events, "2026-10-5") == DAY_TWO
        assert select_events(events, "2026-9-1") == DAY_ONE

    def test_gap_inside_range_returns_empty_and_warns(self, caplog):
        events = {"2026-2-1": DAY_ONE, "2026-2-3": DAY_TWO}

        with caplog.at_level(logging.WARNING):
            result = select_events(events, "2026-2-2")

        assert result == []
        assert "showing no events" in caplog.text

    def test_returns_a_copy(self):
        result = select_events(self.events, "2026-2-1")
        result.append("extra")

        assert self.events["2026-2-1"] == ["opening", "keynote"]


class TestCalendarKey:
    """Test cases for calendar_key."""

    def test_parses_padded_and_unpadded(self):
        assert calendar_key("2026-2-1") == (2026, 2, 1)
        assert calendar_key("2026-02-01") == (2026, 2, 1)

    def test_non_dates_sort_first(self):
        assert calendar_key("") == ()
        assert calendar_key("tomorrow") == ()
        assert calendar_key("2026-xx-01") < calendar_key("1999-1-1")
