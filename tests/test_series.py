"""Tests for recurring-series grouping."""

from datetime import date, time

import pytest

from agenda.core.events import Event, RepeatRule, RepeatType
from agenda.core.series import (
    apply_to_series,
    detach,
    find_series_members,
    is_recurring,
    move_series,
    move_single,
    same_series,
)

DAILY = RepeatRule(RepeatType.DAILY, 1, date(2025, 11, 27))


@pytest.fixture
def make_event():
    def _make(event_id: str, day: int, title: str = "Swim", repeat: RepeatRule = DAILY, start: int = 7) -> Event:
        return Event(
            id=event_id,
            title=title,
            date=date(2025, 11, day),
            start_time=time(start, 0),
            end_time=time(start + 1, 0),
            repeat=repeat,
        )
    return _make


@pytest.fixture
def series(make_event):
    return [make_event("s1", 25), make_event("s2", 26), make_event("s3", 27)]


class TestMembership:
    def test_is_recurring(self, make_event):
        assert is_recurring(make_event("1", 25)) is True
        assert is_recurring(make_event("1", 25, repeat=RepeatRule())) is False

    def test_finds_all_members(self, series, make_event):
        others = [make_event("x", 25, title="Run"), make_event("y", 26, repeat=RepeatRule())]
        members = find_series_members(series[1], series + others)
        assert [m.id for m in members] == ["s1", "s2", "s3"]

    @pytest.mark.parametrize(
        "changes",
        [
            {"title": "Swim!"},
            {"start": 8},
            {"repeat": RepeatRule(RepeatType.DAILY, 2, date(2025, 11, 27))},
            {"repeat": RepeatRule(RepeatType.WEEKLY, 1, date(2025, 11, 27))},
            {"repeat": RepeatRule(RepeatType.DAILY, 1, date(2025, 11, 28))},
            {"repeat": RepeatRule(RepeatType.DAILY, 1)},
        ],
    )
    def test_any_differing_field_excludes(self, make_event, changes):
        reference = make_event("a", 25)
        other = make_event("b", 25, **changes)
        assert same_series(reference, other) is False
        assert find_series_members(reference, [reference, other]) == [reference]

    def test_other_fields_do_not_matter(self, make_event):
        reference = make_event("a", 25)
        other = make_event("b", 26)
        other.location = "Pool 2"
        other.description = "different"
        assert same_series(reference, other) is True


class TestSingleOperations:
    def test_detach_demotes_repeat(self, series):
        detached = detach(series[1])
        assert detached.repeat.type is RepeatType.NONE
        assert detached.repeat.interval == 0
        assert detached.id == "s2"
        assert series[1].repeat == DAILY

    def test_detached_record_leaves_series(self, series):
        edited = detach(series[1])
        events = [series[0], edited, series[2]]
        assert [m.id for m in find_series_members(series[0], events)] == ["s1", "s3"]
        assert find_series_members(edited, events) == [edited]

    def test_move_single(self, series):
        moved = move_single(series[0], date(2025, 11, 30))
        assert moved.date == date(2025, 11, 30)
        assert moved.repeat.type is RepeatType.NONE
        assert series[0].date == date(2025, 11, 25)


class TestSeriesOperations:
    def test_apply_to_series(self, series, make_event):
        unrelated = make_event("x", 25, title="Run")
        updated = apply_to_series(series[0], {"title": "Swim (all)"}, series + [unrelated])
        assert [e.title for e in updated] == ["Swim (all)"] * 3
        assert [e.id for e in updated] == ["s1", "s2", "s3"]
        assert [e.date.day for e in updated] == [25, 26, 27]
        assert series[0].title == "Swim"

    def test_apply_rejects_unknown_fields(self, series):
        with pytest.raises(ValueError):
            apply_to_series(series[0], {"colour": "red"}, series)

    def test_apply_rejects_id_change(self, series):
        with pytest.raises(ValueError):
            apply_to_series(series[0], {"id": "new"}, series)

    def test_move_series_applies_same_offset(self, series):
        moved = move_series(series[1], date(2025, 11, 28), series)
        assert [e.date for e in moved] == [date(2025, 11, 27), date(2025, 11, 28), date(2025, 11, 29)]
        assert all(e.repeat == DAILY for e in moved)

    def test_move_series_backwards_across_month(self, series):
        moved = move_series(series[0], date(2025, 10, 30), series)
        assert [e.date for e in moved] == [date(2025, 10, 30), date(2025, 10, 31), date(2025, 11, 1)]
