"""Tests for recurrence expansion."""

from datetime import date, time

import pytest

from agenda.core.events import Category, Event, RepeatRule, RepeatType, ValidationError
from agenda.core.recurrence import DEFAULT_CEILING, expand, occurrence_dates


@pytest.fixture
def make_template():
    """Factory for repeating drafts."""
    def _make(
        start: date,
        repeat_type: RepeatType,
        interval: int = 1,
        end_date: date | None = None,
    ) -> Event:
        return Event(
            title="Standup",
            date=start,
            start_time=time(9, 0),
            end_time=time(9, 15),
            description="Daily sync",
            location="Room B",
            category=Category.WORK,
            repeat=RepeatRule(repeat_type, interval, end_date),
            notification_time=1,
        )
    return _make


def _dates(events: list[Event]) -> list[date]:
    return [e.date for e in events]


class TestDaily:
    def test_daily_until_end_date(self, make_template):
        template = make_template(date(2025, 11, 25), RepeatType.DAILY, end_date=date(2025, 11, 30))
        assert _dates(expand(template)) == [date(2025, 11, d) for d in range(25, 31)]

    def test_daily_interval(self, make_template):
        template = make_template(date(2025, 11, 1), RepeatType.DAILY, 3, date(2025, 11, 10))
        assert _dates(expand(template)) == [date(2025, 11, 1), date(2025, 11, 4), date(2025, 11, 7), date(2025, 11, 10)]

    def test_daily_without_end_stops_at_ceiling(self, make_template):
        template = make_template(date(2025, 12, 29), RepeatType.DAILY)
        assert _dates(expand(template)) == [date(2025, 12, 29), date(2025, 12, 30), date(2025, 12, 31)]


class TestWeekly:
    def test_biweekly(self, make_template):
        template = make_template(date(2025, 11, 3), RepeatType.WEEKLY, 2, date(2025, 12, 1))
        assert _dates(expand(template)) == [date(2025, 11, 3), date(2025, 11, 17), date(2025, 12, 1)]


class TestMonthly:
    def test_monthly_same_day(self, make_template):
        template = make_template(date(2025, 11, 25), RepeatType.MONTHLY, end_date=date(2026, 2, 25))
        result = expand(template, ceiling=date(2026, 12, 31))
        assert _dates(result) == [date(2025, 11, 25), date(2025, 12, 25), date(2026, 1, 25), date(2026, 2, 25)]

    def test_monthly_end_date_beyond_default_ceiling(self, make_template):
        template = make_template(date(2025, 11, 25), RepeatType.MONTHLY, end_date=date(2026, 2, 25))
        assert _dates(expand(template)) == [date(2025, 11, 25), date(2025, 12, 25)]

    def test_skips_months_without_the_31st(self, make_template):
        template = make_template(date(2025, 1, 31), RepeatType.MONTHLY)
        assert _dates(expand(template)) == [
            date(2025, 1, 31),
            date(2025, 3, 31),
            date(2025, 5, 31),
            date(2025, 7, 31),
            date(2025, 8, 31),
            date(2025, 10, 31),
            date(2025, 12, 31),
        ]

    def test_skip_across_year_boundary(self, make_template):
        template = make_template(date(2025, 10, 31), RepeatType.MONTHLY, end_date=date(2026, 3, 31))
        result = expand(template, ceiling=date(2026, 12, 31))
        assert _dates(result) == [date(2025, 10, 31), date(2025, 12, 31), date(2026, 1, 31), date(2026, 3, 31)]

    def test_never_clamps_or_rolls_over(self, make_template):
        template = make_template(date(2025, 1, 30), RepeatType.MONTHLY, end_date=date(2025, 4, 30))
        result = _dates(expand(template))
        assert date(2025, 2, 28) not in result
        assert date(2025, 3, 2) not in result
        assert result == [date(2025, 1, 30), date(2025, 3, 30), date(2025, 4, 30)]


class TestYearly:
    def test_yearly(self):
        assert occurrence_dates(date(2023, 6, 15), RepeatType.YEARLY, 1, date(2025, 12, 31)) == [
            date(2023, 6, 15),
            date(2024, 6, 15),
            date(2025, 6, 15),
        ]

    def test_leap_day_only_in_leap_years(self, make_template):
        template = make_template(date(2024, 2, 29), RepeatType.YEARLY)
        result = expand(template, ceiling=date(2032, 12, 31))
        assert _dates(result) == [date(2024, 2, 29), date(2028, 2, 29), date(2032, 2, 29)]


class TestExpand:
    def test_occurrences_copy_template_fields(self, make_template):
        template = make_template(date(2025, 11, 25), RepeatType.DAILY, end_date=date(2025, 11, 27))
        template.id = "should-not-survive"
        for occurrence in expand(template):
            assert occurrence.id is None
            assert occurrence.title == "Standup"
            assert occurrence.start_time == time(9, 0)
            assert occurrence.end_time == time(9, 15)
            assert occurrence.location == "Room B"
            assert occurrence.notification_time == 1
            assert occurrence.repeat == template.repeat

    def test_template_not_modified(self, make_template):
        template = make_template(date(2025, 11, 25), RepeatType.DAILY, end_date=date(2025, 11, 27))
        expand(template)
        assert template.date == date(2025, 11, 25)

    def test_deterministic(self, make_template):
        template = make_template(date(2025, 1, 31), RepeatType.MONTHLY, end_date=date(2025, 12, 31))
        assert expand(template) == expand(template)

    def test_start_after_end_date_gives_single_occurrence(self, make_template):
        template = make_template(date(2025, 12, 10), RepeatType.DAILY, end_date=date(2025, 12, 5))
        assert _dates(expand(template)) == [date(2025, 12, 10)]

    def test_start_after_ceiling_gives_single_occurrence(self, make_template):
        template = make_template(date(2026, 3, 1), RepeatType.WEEKLY)
        assert _dates(expand(template)) == [date(2026, 3, 1)]

    def test_end_date_equal_to_start(self, make_template):
        template = make_template(date(2025, 11, 25), RepeatType.DAILY, end_date=date(2025, 11, 25))
        assert _dates(expand(template)) == [date(2025, 11, 25)]

    def test_custom_ceiling_before_end_date(self, make_template):
        template = make_template(date(2025, 11, 25), RepeatType.DAILY, end_date=date(2025, 11, 30))
        assert _dates(expand(template, ceiling=date(2025, 11, 26))) == [date(2025, 11, 25), date(2025, 11, 26)]

    def test_default_ceiling(self):
        assert DEFAULT_CEILING == date(2025, 12, 31)

    def test_rejects_non_repeating(self, make_template):
        template = make_template(date(2025, 11, 25), RepeatType.NONE, interval=0)
        with pytest.raises(ValidationError):
            expand(template)

    def test_rejects_zero_interval(self, make_template):
        template = make_template(date(2025, 11, 25), RepeatType.DAILY, interval=0)
        with pytest.raises(ValidationError):
            expand(template)
