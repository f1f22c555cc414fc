"""Recurrence expansion - pure, no I/O.

Expands a repeating draft into the flat list of concrete occurrences that get
stored as independent records.
"""

from dataclasses import replace
from datetime import date, datetime

from dateutil.rrule import DAILY, MONTHLY, WEEKLY, YEARLY, rrule

from .events import Event, RepeatType, ValidationError

# Upper bound on generated dates when a series has no end date
DEFAULT_CEILING = date(2025, 12, 31)

_FREQUENCIES = {
    RepeatType.DAILY: DAILY,
    RepeatType.WEEKLY: WEEKLY,
    RepeatType.MONTHLY: MONTHLY,
    RepeatType.YEARLY: YEARLY,
}


def occurrence_dates(
    start: date,
    repeat_type: RepeatType,
    interval: int,
    until: date,
) -> list[date]:
    """
    Dates from `start` through `until` (inclusive), stepping `interval` units.

    Monthly and yearly steps keep the original day (and month). Periods where
    that day does not exist, such as the 31st in a 30-day month or Feb 29 in
    a common year, are skipped rather than clamped.
    """
    rule = rrule(
        _FREQUENCIES[repeat_type],
        interval=interval,
        dtstart=datetime.combine(start, datetime.min.time()),
        until=datetime.combine(until, datetime.min.time()),
    )
    return [dt.date() for dt in rule]


def expand(template: Event, ceiling: date = DEFAULT_CEILING) -> list[Event]:
    """
    Expand a repeating draft into its occurrences.

    Generation stops at the repeat end date or `ceiling`, whichever is
    earlier. If the template's own date is already past that limit, the
    result is the template's single occurrence.

    Each occurrence copies every template field except `date`, keeps the
    template's repeat rule, and has no id.
    """
    rule = template.repeat
    if rule.type is RepeatType.NONE:
        raise ValidationError("Cannot expand an event that does not repeat")
    if rule.interval < 1:
        raise ValidationError("Repeat interval must be at least 1")

    until = min(rule.end_date, ceiling) if rule.end_date else ceiling

    if template.date > until:
        return [replace(template, id=None)]

    return [
        replace(template, id=None, date=d)
        for d in occurrence_dates(template.date, rule.type, rule.interval, until)
    ]
