"""Tests for event search."""

from datetime import date, time

import pytest

from agenda.core.events import Event
from agenda.core.search import matches_term, search_events, view_range


@pytest.fixture
def events():
    def _event(title: str, day: date, description: str = "", location: str = "") -> Event:
        return Event(
            title=title,
            date=day,
            start_time=time(10),
            end_time=time(11),
            description=description,
            location=location,
        )

    return [
        _event("Team Meeting", date(2025, 11, 25), location="Room A"),
        _event("Lunch", date(2025, 11, 25), description="with the team"),
        _event("Project kickoff meeting", date(2025, 11, 3)),
        _event("December meeting", date(2025, 12, 25)),
        _event("Dentist", date(2025, 11, 27), location="Downtown clinic"),
    ]


class TestMatchesTerm:
    def test_empty_term_matches(self, events):
        assert matches_term(events[0], "") is True

    def test_case_insensitive(self, events):
        assert matches_term(events[0], "team meeting") is True
        assert matches_term(events[0], "TEAM") is True

    def test_searches_description_and_location(self, events):
        assert matches_term(events[1], "team") is True
        assert matches_term(events[4], "clinic") is True

    def test_partial_term(self, events):
        assert matches_term(events[2], "kick") is True


class TestSearchEvents:
    def test_month_view_limits_to_month(self, events):
        found = search_events(events, "meeting", date(2025, 11, 10), "month")
        assert [e.title for e in found] == ["Team Meeting", "Project kickoff meeting"]

    def test_week_view_limits_to_week(self, events):
        found = search_events(events, "meeting", date(2025, 11, 25), "week")
        assert [e.title for e in found] == ["Team Meeting"]

    def test_empty_term_returns_everything_in_view(self, events):
        found = search_events(events, "", date(2025, 11, 25), "week")
        assert [e.title for e in found] == ["Team Meeting", "Lunch", "Dentist"]

    def test_whitespace_term_is_empty(self, events):
        assert len(search_events(events, "   ", date(2025, 11, 1), "month")) == 4

    def test_no_results(self, events):
        assert search_events(events, "yoga", date(2025, 11, 25), "month") == []

    def test_unknown_view(self, events):
        with pytest.raises(ValueError):
            search_events(events, "", date(2025, 11, 25), "year")


class TestViewRange:
    def test_week(self):
        assert view_range(date(2025, 11, 25), "week") == (date(2025, 11, 23), date(2025, 11, 29))

    def test_month(self):
        assert view_range(date(2025, 11, 25), "month") == (date(2025, 11, 1), date(2025, 11, 30))
