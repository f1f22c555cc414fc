"""Agenda CLI - calendar event scheduling."""

import json
import logging
import sys
import time as time_module
from dataclasses import replace
from datetime import date

import click

from .config import load_config
from .core.dates import (
    format_month,
    format_week,
    month_bounds,
    parse_time,
    week_dates,
    weeks_at_month,
)
from .core.events import NOTIFICATION_OPTIONS, Category, Event, RepeatRule, RepeatType, ValidationError
from .core.notifications import Notification
from .core.search import VIEWS, search_events
from .core.series import is_recurring
from .notifier import Notifier
from .ports.event_store import BatchPersistenceError, EventStore, PersistenceError
from .workflows import (
    SaveResult,
    delete_occurrence,
    edit_occurrence,
    get_store,
    move_occurrence,
    save_event,
)

DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])
CATEGORY_CHOICE = click.Choice([c.value for c in Category])
REPEAT_CHOICE = click.Choice([t.value for t in RepeatType if t is not RepeatType.NONE])
NOTIFY_CHOICE = click.Choice([str(m) for m in NOTIFICATION_OPTIONS])


def _to_date(ctx, param, value):
    return value.date() if value is not None else None


def _to_time(ctx, param, value):
    if value is None:
        return None
    try:
        return parse_time(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _sorted(events: list[Event]) -> list[Event]:
    return sorted(events, key=lambda e: (e.date, e.start_time))


def _find_event(store: EventStore, event_id: str) -> Event:
    for event in store.list_events():
        if event.id == event_id:
            return event
    _fail(f"No event with id {event_id}")


def _show_events(events: list[Event], as_json: bool, empty_msg: str = "No events.") -> None:
    """Shared event display logic."""
    if as_json:
        click.echo(json.dumps([e.to_dict() for e in events], indent=2, ensure_ascii=False))
        return

    if not events:
        click.echo(empty_msg)
        return

    current_date = None
    for event in _sorted(events):
        if event.date != current_date:
            if current_date is not None:
                click.echo()
            click.echo(f"### {event.date.strftime('%A, %B %d %Y')}")
            current_date = event.date

        loc = f" @ {event.location}" if event.location else ""
        repeat = f" [{event.repeat.describe()}]" if is_recurring(event) else ""
        click.echo(f"  {event.format_time():11} {event.title}{loc}{repeat}  ({event.id})")


def _show_overlaps(overlaps: list[Event]) -> None:
    click.echo("Overlaps with:", err=True)
    for e in overlaps:
        click.echo(f"  - {e.title} ({e.date} {e.format_time()})", err=True)


def _resolve_overlaps(result: SaveResult, retry) -> SaveResult:
    """Ask whether to save anyway when a save was blocked by overlaps."""
    if not result.blocked:
        return result
    _show_overlaps(result.overlaps)
    if not click.confirm("Save anyway?", default=False):
        click.echo("Not saved.")
        sys.exit(1)
    return retry()


def _run(action):
    """Run a store action, reporting core and store errors the same way."""
    try:
        return action()
    except ValidationError as e:
        _fail(str(e))
    except BatchPersistenceError as e:
        _fail(f"{e}. Run 'agenda list' to see the current state.")
    except PersistenceError as e:
        _fail(str(e))


@click.group()
@click.version_option(package_name="agenda")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, debug: bool):
    """Agenda - calendar events, recurrence and reminders."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )
    ctx.ensure_object(dict)


def _store(ctx) -> EventStore:
    if "store" not in ctx.obj:
        ctx.obj["config"] = load_config()
        ctx.obj["store"] = get_store(ctx.obj["config"])
    return ctx.obj["store"]


@main.command("list")
@click.option("--date", "-d", "target_date", type=DATE_TYPE, callback=_to_date, default=None,
              help="Only events on this date (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_cmd(ctx, target_date: date | None, as_json: bool):
    """List stored events."""
    events = _run(lambda: _store(ctx).list_events())
    if target_date:
        events = [e for e in events if e.date == target_date]
    _show_events(events, as_json)


@main.command()
@click.argument("title")
@click.argument("event_date", metavar="DATE", type=DATE_TYPE, callback=_to_date)
@click.argument("start", callback=_to_time)
@click.argument("end", callback=_to_time)
@click.option("--description", default="", help="Free-text description")
@click.option("--location", default="", help="Where the event takes place")
@click.option("--category", type=CATEGORY_CHOICE, default=None, help="Event category")
@click.option("--notify", type=NOTIFY_CHOICE, default=None, help="Minutes before start to notify")
@click.option("--repeat", "repeat_type", type=REPEAT_CHOICE, default=None, help="Repeat unit")
@click.option("--interval", type=click.IntRange(min=1), default=1, help="Repeat every N units")
@click.option("--until", type=DATE_TYPE, callback=_to_date, default=None, help="Last repeat date")
@click.option("--force", is_flag=True, help="Save even if it overlaps other events")
@click.pass_context
def add(ctx, title, event_date, start, end, description, location, category, notify,
        repeat_type, interval, until, force):
    """Add an event (expanded into a series with --repeat)."""
    store = _store(ctx)
    config = ctx.obj["config"]

    repeat = RepeatRule()
    if repeat_type:
        repeat = RepeatRule(type=RepeatType(repeat_type), interval=interval, end_date=until)

    draft = Event(
        title=title,
        date=event_date,
        start_time=start,
        end_time=end,
        description=description,
        location=location,
        category=Category(category) if category else config.default_category,
        repeat=repeat,
        notification_time=int(notify) if notify else config.default_notification_time,
    )

    def _save(force_save: bool) -> SaveResult:
        return save_event(store, draft, force=force_save, ceiling=config.recurrence_ceiling)

    result = _run(lambda: _save(force))
    result = _resolve_overlaps(result, lambda: _run(lambda: _save(True)))

    if len(result.saved) == 1:
        click.echo(f"Added {result.saved[0].title} ({result.saved[0].id})")
    else:
        click.echo(f"Added {len(result.saved)} occurrences of {draft.title}")


@main.command()
@click.argument("event_id")
@click.option("--title", default=None)
@click.option("--date", "-d", "new_date", type=DATE_TYPE, callback=_to_date, default=None)
@click.option("--start", callback=_to_time, default=None)
@click.option("--end", callback=_to_time, default=None)
@click.option("--description", default=None)
@click.option("--location", default=None)
@click.option("--category", type=CATEGORY_CHOICE, default=None)
@click.option("--notify", type=NOTIFY_CHOICE, default=None)
@click.option("--all", "edit_all", is_flag=True, help="Apply to every occurrence in the series")
@click.option("--force", is_flag=True, help="Save even if it overlaps other events")
@click.pass_context
def edit(ctx, event_id, title, new_date, start, end, description, location, category, notify,
         edit_all, force):
    """Edit an event, one occurrence or (--all) its whole series."""
    store = _store(ctx)
    original = _run(lambda: _find_event(store, event_id))

    changes = {
        "title": title,
        "date": new_date,
        "start_time": start,
        "end_time": end,
        "description": description,
        "location": location,
        "category": Category(category) if category else None,
        "notification_time": int(notify) if notify else None,
    }
    updated = replace(original, **{k: v for k, v in changes.items() if v is not None})

    def _save(force_save: bool) -> SaveResult:
        return edit_occurrence(store, original, updated, edit_all=edit_all, force=force_save)

    result = _run(lambda: _save(force))
    result = _resolve_overlaps(result, lambda: _run(lambda: _save(True)))
    click.echo(f"Updated {len(result.saved)} event(s)")


@main.command()
@click.argument("event_id")
@click.option("--all", "delete_all", is_flag=True, help="Delete every occurrence in the series")
@click.pass_context
def delete(ctx, event_id, delete_all):
    """Delete an event, one occurrence or (--all) its whole series."""
    store = _store(ctx)
    event = _run(lambda: _find_event(store, event_id))
    deleted = _run(lambda: delete_occurrence(store, event, delete_all=delete_all))
    click.echo(f"Deleted {len(deleted)} event(s)")


@main.command()
@click.argument("event_id")
@click.argument("target_date", type=DATE_TYPE, callback=_to_date)
@click.option("--all", "move_all", is_flag=True, help="Shift every occurrence in the series")
@click.pass_context
def move(ctx, event_id, target_date, move_all):
    """Move an event to another date."""
    store = _store(ctx)
    event = _run(lambda: _find_event(store, event_id))
    moved = _run(lambda: move_occurrence(store, event, target_date, move_all=move_all))
    click.echo(f"Moved {len(moved)} event(s)")


@main.command()
@click.argument("term", default="")
@click.option("--view", type=click.Choice(VIEWS), default="month", help="Search within this week or month")
@click.option("--date", "-d", "current_date", type=DATE_TYPE, callback=_to_date, default=None,
              help="Date whose week/month to search (default today)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def search(ctx, term, view, current_date, as_json):
    """Search titles, descriptions and locations."""
    events = _run(lambda: _store(ctx).list_events())
    found = search_events(events, term, current_date or date.today(), view)
    _show_events(found, as_json, "No results.")


@main.group(invoke_without_command=True)
@click.pass_context
def calendar(ctx):
    """Show a week or month grid."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(calendar_week)


@calendar.command("week")
@click.option("--date", "-d", "current_date", type=DATE_TYPE, callback=_to_date, default=None)
@click.pass_context
def calendar_week(ctx, current_date: date | None = None):
    """Show the week containing a date."""
    current_date = current_date or date.today()
    events = _run(lambda: _store(ctx).list_events())

    click.echo(format_week(current_date))
    for day in week_dates(current_date):
        day_events = _sorted([e for e in events if e.date == day])
        titles = ", ".join(f"{e.title}" for e in day_events) or "-"
        click.echo(f"  {day.strftime('%a %m/%d')}  {titles}")


@calendar.command("month")
@click.option("--date", "-d", "current_date", type=DATE_TYPE, callback=_to_date, default=None)
@click.pass_context
def calendar_month(ctx, current_date: date | None = None):
    """Show the month containing a date, with event counts per day."""
    current_date = current_date or date.today()
    first, last = month_bounds(current_date)
    events = [e for e in _run(lambda: _store(ctx).list_events()) if first <= e.date <= last]

    counts: dict[int, int] = {}
    for e in events:
        counts[e.date.day] = counts.get(e.date.day, 0) + 1

    click.echo(format_month(current_date))
    click.echo("  " + " ".join(f"{d:>5}" for d in ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")))
    for week in weeks_at_month(current_date):
        cells = []
        for day in week:
            if day is None:
                cells.append(" " * 5)
            else:
                mark = f"*{counts[day]}" if day in counts else ""
                cells.append(f"{day:>3}{mark:<2}")
        click.echo("  " + " ".join(cells))


@main.command()
@click.pass_context
def watch(ctx):
    """Watch for upcoming events and print reminders."""
    store = _store(ctx)
    config = ctx.obj["config"]

    def _print(notification: Notification) -> None:
        click.echo(f"[{notification.event_id}] {notification.message}")

    notifier = Notifier(store, on_notify=_print)
    notifier.tick()
    notifier.start(config.check_interval_seconds)
    click.echo("Watching for reminders. Press Ctrl+C to stop")
    try:
        while True:
            time_module.sleep(1)
    except KeyboardInterrupt:
        click.echo("\nStopped.")
    finally:
        notifier.stop()


if __name__ == "__main__":
    main()
