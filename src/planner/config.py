"""Configuration management for Planner."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

PLANNER_HOME = Path(os.environ.get("PLANNER_HOME", Path.home() / "planner"))
CONFIG_FILE = PLANNER_HOME / "config" / "planner.conf"
DATA_DIR = PLANNER_HOME / "data"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class Config:
    """Planner configuration."""

    tasks_file: str = field(default_factory=lambda: str(DATA_DIR / "tasks.json"))
    # Empty means the machine's local time.
    timezone: str = ""
    show_completed: bool = False
    history_days: int = 14
    reminder_lead_minutes: int = 0
    refresh_seconds: int = 60

    def tzinfo(self) -> ZoneInfo | None:
        if not self.timezone:
            return None
        try:
            return ZoneInfo(self.timezone)
        except ZoneInfoNotFoundError:
            logger.warning(f"Unknown timezone {self.timezone!r}, using local time")
            return None


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key.upper()}: {value!r}")
        return default


def _parse_bool(key: str, value: str, default: bool) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    logger.warning(f"Invalid boolean for {key.upper()}: {value!r}")
    return default


def _strip_value(value: str) -> str:
    # Handle quoted values with inline comments: "value" # comment
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config() -> Config:
    """Load configuration from planner.conf file."""
    config = Config()

    if not CONFIG_FILE.exists():
        return config

    for line in CONFIG_FILE.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _strip_value(value.strip())

        match key:
            case "tasks_file":
                config.tasks_file = value
            case "timezone":
                config.timezone = value
            case "show_completed":
                config.show_completed = _parse_bool(key, value, config.show_completed)
            case "history_days":
                config.history_days = _parse_int(key, value, config.history_days)
            case "reminder_lead_minutes":
                config.reminder_lead_minutes = _parse_int(key, value, config.reminder_lead_minutes)
            case "refresh_seconds":
                config.refresh_seconds = _parse_int(key, value, config.refresh_seconds)
            case _:
                logger.debug(f"Ignoring unknown config key {key.upper()}")

    return config
