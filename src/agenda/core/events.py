"""Pure event domain model - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum

from .dates import format_time, parse_time


class ValidationError(ValueError):
    """Raised when an event is missing required fields or is inconsistent."""

    pass


class RepeatType(Enum):
    """How often a recurring event repeats."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Category(Enum):
    """Fixed set of event categories."""

    WORK = "Work"
    PERSONAL = "Personal"
    FAMILY = "Family"
    OTHER = "Other"


# Minutes before start -> human-readable label
NOTIFICATION_OPTIONS: dict[int, str] = {
    1: "1 minute",
    10: "10 minutes",
    60: "1 hour",
    120: "2 hours",
    1440: "1 day",
}

DEFAULT_NOTIFICATION_TIME = 10


@dataclass(frozen=True)
class RepeatRule:
    """Fixed-interval recurrence descriptor."""

    type: RepeatType = RepeatType.NONE
    interval: int = 0
    end_date: date | None = None

    @property
    def is_repeating(self) -> bool:
        return self.type is not RepeatType.NONE and self.interval > 0

    def describe(self) -> str:
        """Short description, e.g. 'every 2 weeks (until 2025-12-05)'."""
        if self.type is RepeatType.NONE:
            return ""
        unit = {
            RepeatType.DAILY: "day",
            RepeatType.WEEKLY: "week",
            RepeatType.MONTHLY: "month",
            RepeatType.YEARLY: "year",
        }[self.type]
        text = f"every {unit}" if self.interval == 1 else f"every {self.interval} {unit}s"
        if self.end_date:
            text += f" (until {self.end_date.isoformat()})"
        return text

    @classmethod
    def from_dict(cls, data: dict | None) -> "RepeatRule":
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ValidationError(f"Invalid repeat rule: {data!r}")
        try:
            repeat_type = RepeatType(data.get("type", "none") or "none")
        except ValueError:
            raise ValidationError(f"Unknown repeat type: {data.get('type')!r}")
        end = data.get("endDate")
        try:
            end_date = date.fromisoformat(end) if end else None
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid repeat end date: {end!r}")
        try:
            interval = int(data.get("interval", 0) or 0)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid repeat interval: {data.get('interval')!r}")
        return cls(type=repeat_type, interval=interval, end_date=end_date)

    def to_dict(self) -> dict:
        data: dict = {"type": self.type.value, "interval": self.interval}
        if self.end_date:
            data["endDate"] = self.end_date.isoformat()
        return data


NO_REPEAT = RepeatRule()


@dataclass
class Event:
    """A single calendar occurrence. `id` is None for drafts not yet stored."""

    title: str
    date: date
    start_time: time
    end_time: time
    description: str = ""
    location: str = ""
    category: Category = Category.WORK
    repeat: RepeatRule = field(default_factory=RepeatRule)
    notification_time: int = DEFAULT_NOTIFICATION_TIME
    id: str | None = None

    @property
    def is_draft(self) -> bool:
        return self.id is None

    def format_time(self) -> str:
        """Format the event's time range for display."""
        return f"{format_time(self.start_time)}-{format_time(self.end_time)}"

    def duration_minutes(self) -> int:
        start = self.start_time.hour * 60 + self.start_time.minute
        end = self.end_time.hour * 60 + self.end_time.minute
        return end - start

    def notification_label(self) -> str:
        label = NOTIFICATION_OPTIONS.get(self.notification_time, f"{self.notification_time} minutes")
        return f"{label} before"

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        """Create Event from its JSON wire representation."""
        if not isinstance(data, dict):
            raise ValidationError(f"Event record must be an object, got {type(data).__name__}")
        missing = [k for k in ("title", "date", "startTime", "endTime") if not data.get(k)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        try:
            category = Category(data.get("category") or Category.WORK.value)
        except ValueError:
            raise ValidationError(f"Unknown category: {data.get('category')!r}")
        try:
            event_date = date.fromisoformat(data["date"])
            start_time = parse_time(data["startTime"])
            end_time = parse_time(data["endTime"])
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid date or time: {e}")
        try:
            notification_time = int(data.get("notificationTime", DEFAULT_NOTIFICATION_TIME))
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid notification time: {data.get('notificationTime')!r}")
        return cls(
            id=data.get("id"),
            title=data["title"],
            date=event_date,
            start_time=start_time,
            end_time=end_time,
            description=data.get("description", "") or "",
            location=data.get("location", "") or "",
            category=category,
            repeat=RepeatRule.from_dict(data.get("repeat")),
            notification_time=notification_time,
        )

    def to_dict(self) -> dict:
        """Serialize to the JSON wire representation (id omitted for drafts)."""
        data = {
            "title": self.title,
            "date": self.date.isoformat(),
            "startTime": format_time(self.start_time),
            "endTime": format_time(self.end_time),
            "description": self.description,
            "location": self.location,
            "category": self.category.value,
            "repeat": self.repeat.to_dict(),
            "notificationTime": self.notification_time,
        }
        if self.id is not None:
            data = {"id": self.id, **data}
        return data


def validate_event(event: Event) -> None:
    """
    Check required fields and time ordering.

    Raises ValidationError. Must run before overlap checks or persistence.
    """
    missing = []
    if not event.title or not event.title.strip():
        missing.append("title")
    if event.date is None:
        missing.append("date")
    if event.start_time is None:
        missing.append("start time")
    if event.end_time is None:
        missing.append("end time")
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    if event.start_time >= event.end_time:
        raise ValidationError("Start time must be before end time")

    if event.repeat.type is not RepeatType.NONE and event.repeat.interval < 1:
        raise ValidationError("Repeat interval must be at least 1")

    if event.notification_time not in NOTIFICATION_OPTIONS:
        raise ValidationError(f"Unsupported notification time: {event.notification_time}")
