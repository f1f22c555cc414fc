"""Configuration management for Agenda."""

import logging
import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from .core.events import NOTIFICATION_OPTIONS, Category
from .core.recurrence import DEFAULT_CEILING

logger = logging.getLogger(__name__)

AGENDA_HOME = Path(os.environ.get("AGENDA_HOME", Path.home() / "agenda"))
CONFIG_FILE = AGENDA_HOME / "config" / "agenda.conf"
DATA_DIR = AGENDA_HOME / "data"

STORE_KINDS = ("file", "http")


@dataclass
class Config:
    """Agenda configuration."""

    store: str = "file"
    events_file: str = ""
    api_base_url: str = "http://localhost:3000"
    recurrence_ceiling: date = DEFAULT_CEILING
    check_interval_seconds: int = 1
    default_notification_time: int = 10
    default_category: Category = Category.WORK

    @property
    def events_path(self) -> Path:
        if self.events_file:
            return Path(self.events_file).expanduser()
        return DATA_DIR / "events.json"


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment on unquoted values."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from agenda.conf (KEY=value lines)."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "store":
                if value in STORE_KINDS:
                    config.store = value
                else:
                    logger.warning(f"Unknown STORE {value!r}, using {config.store!r}")
            case "events_file":
                config.events_file = value
            case "api_base_url":
                config.api_base_url = value
            case "recurrence_ceiling":
                try:
                    config.recurrence_ceiling = date.fromisoformat(value)
                except ValueError:
                    logger.warning(f"Invalid RECURRENCE_CEILING {value!r}, expected YYYY-MM-DD")
            case "check_interval_seconds":
                try:
                    config.check_interval_seconds = max(1, int(value))
                except ValueError:
                    logger.warning(f"Invalid CHECK_INTERVAL_SECONDS {value!r}")
            case "default_notification_time":
                if value.isdigit() and int(value) in NOTIFICATION_OPTIONS:
                    config.default_notification_time = int(value)
                else:
                    logger.warning(f"Unsupported DEFAULT_NOTIFICATION_TIME {value!r}")
            case "default_category":
                try:
                    config.default_category = Category(value)
                except ValueError:
                    logger.warning(f"Unknown DEFAULT_CATEGORY {value!r}")

    return config
