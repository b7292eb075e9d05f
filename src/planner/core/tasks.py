"""Pure task domain logic - no I/O dependencies."""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from .dates import is_same_calendar_day, to_local_date

logger = logging.getLogger(__name__)

# Record keys modelled by Task; anything else is carried through untouched.
_KNOWN_KEYS = frozenset(
    {
        "id",
        "title",
        "date",
        "startTime",
        "repeat",
        "isCompleted",
        "completedExceptions",
        "endTime",
        "notes",
        "type",
        "reminderLeadMinutes",
        "alarmMode",
    }
)


class Repeat(Enum):
    """Recurrence rule of a task."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


def parse_repeat(value: str | None) -> Repeat:
    """Map a stored repeat value to a rule; unknown values behave like NONE."""
    if not value:
        return Repeat.NONE
    try:
        return Repeat(value)
    except ValueError:
        logger.warning(f"Unknown repeat rule {value!r}, treating as one-off")
        return Repeat.NONE


@dataclass(frozen=True)
class Task:
    """A planner task, optionally recurring from its base date."""

    id: str
    title: str
    date: str
    start_time: str | None = None
    repeat: str = "none"
    is_completed: bool = False
    completed_exceptions: tuple[str, ...] = field(default_factory=tuple)
    end_time: str | None = None
    notes: str = ""
    kind: str = "task"
    reminder_lead_minutes: int = 0
    alarm_mode: str = "sound"
    # Unmodelled keys from the stored record (createdAt, link, notificationId...)
    extra: dict = field(default_factory=dict, compare=False, repr=False)

    @property
    def rule(self) -> Repeat:
        return parse_repeat(self.repeat)

    @property
    def is_recurring(self) -> bool:
        return self.rule is not Repeat.NONE

    @property
    def base_date(self) -> date:
        """Base occurrence day. Raises InvalidDateFormat for corrupt records."""
        return to_local_date(self.date)

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from a stored planner record (camelCase keys)."""
        return cls(
            id=str(data["id"]),
            title=data["title"],
            date=data["date"],
            start_time=data.get("startTime") or None,
            repeat=data.get("repeat") or "none",
            is_completed=bool(data.get("isCompleted", False)),
            completed_exceptions=tuple(dict.fromkeys(data.get("completedExceptions") or [])),
            end_time=data.get("endTime") or None,
            notes=data.get("notes", "") or "",
            kind=data.get("type", "task") or "task",
            reminder_lead_minutes=int(data.get("reminderLeadMinutes") or 0),
            alarm_mode=data.get("alarmMode", "sound") or "sound",
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def to_dict(self) -> dict:
        """Render back to the stored record shape."""
        data = dict(self.extra)
        data.update(
            {
                "id": self.id,
                "title": self.title,
                "date": self.date,
                "repeat": self.repeat,
                "isCompleted": self.is_completed,
                "completedExceptions": list(self.completed_exceptions),
                "type": self.kind,
                "reminderLeadMinutes": self.reminder_lead_minutes,
                "alarmMode": self.alarm_mode,
            }
        )
        if self.start_time:
            data["startTime"] = self.start_time
        if self.end_time:
            data["endTime"] = self.end_time
        if self.notes:
            data["notes"] = self.notes
        return data


def occurs_on(task: Task, target: str | date) -> bool:
    """
    Does the task have an occurrence on the target calendar day?

    Monthly tasks based on the 29th-31st skip months without that day, and
    yearly tasks based on Feb 29 only occur in leap years. Neither is clamped.

    Pure function - no I/O, never reads the clock.
    Raises InvalidDateFormat if either date is malformed.
    """
    base = to_local_date(task.date)
    current = to_local_date(target)
    rule = task.rule

    if rule is Repeat.NONE:
        return is_same_calendar_day(base, current)

    if current < base:
        return False

    match rule:
        case Repeat.DAILY:
            return True
        case Repeat.WEEKLY:
            return current.weekday() == base.weekday()
        case Repeat.MONTHLY:
            return current.day == base.day
        case Repeat.YEARLY:
            return current.day == base.day and current.month == base.month
    return False


def find_task(tasks: list[Task], task_id: str) -> Task | None:
    """Look up a task by id."""
    for t in tasks:
        if t.id == task_id:
            return t
    return None
