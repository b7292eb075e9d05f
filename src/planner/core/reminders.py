"""Reminder trigger data for an external notification scheduler.

Nothing here schedules anything. It computes when a reminder should fire
using the same occurrence rules as the task list, so a reminder never fires
on a day the task does not occur.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from .dates import add_days, format_ymd, parse_hhmm, to_local_date
from .errors import InvalidDateFormat, InvalidTimeFormat
from .ledger import is_occurrence_complete
from .tasks import Task, occurs_on

logger = logging.getLogger(__name__)

DEFAULT_REMINDER_TIME = "09:00"
SNOOZE_MINUTES = 5
ALLOWED_LEAD_MINUTES = (0, 5, 30)
# Long enough to reach the next Feb 29 from any day.
DEFAULT_HORIZON_DAYS = 3000


@dataclass(frozen=True)
class Reminder:
    """A reminder an external scheduler should fire."""

    task_id: str
    title: str
    occurrence: str
    trigger_at: datetime
    lead_minutes: int
    body: str

    @property
    def heading(self) -> str:
        return f"Upcoming: {self.title}"


def occurrence_start(task: Task, day: str | date) -> datetime:
    """Naive local start of an occurrence; untimed tasks start at 09:00."""
    d = to_local_date(day)
    minutes = parse_hhmm(DEFAULT_REMINDER_TIME)
    if task.start_time:
        try:
            minutes = parse_hhmm(task.start_time)
        except InvalidTimeFormat:
            logger.warning(f"Task {task.id!r} has invalid start time {task.start_time!r}")
    return datetime.combine(d, time(minutes // 60, minutes % 60))


def next_occurrence(
    task: Task,
    after: str | date,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> date | None:
    """First open occurrence on or after ``after``, within the horizon."""
    day = max(to_local_date(after), task.base_date)
    if not task.is_recurring:
        if occurs_on(task, day) and not is_occurrence_complete(task, day):
            return day
        return None
    if task.is_completed:
        return None

    for _ in range(horizon_days):
        if occurs_on(task, day) and not is_occurrence_complete(task, day):
            return day
        day = add_days(day, 1)
    return None


def _body(lead_minutes: int) -> str:
    if lead_minutes == 5:
        return "Tap to stop or snooze"
    return f"Starts in {lead_minutes} minutes"


def reminder_for(task: Task, now: datetime, lead_minutes: int | None = None) -> Reminder | None:
    """
    The next reminder for a task, or None if nothing should fire.

    ``now`` is a naive local datetime. Only timed tasks get reminders.
    """
    lead = task.reminder_lead_minutes if lead_minutes is None else lead_minutes
    if lead <= 0 or not task.start_time:
        return None

    day = next_occurrence(task, now.date())
    # Today's trigger may already be behind us; try the following occurrence.
    for _ in range(2):
        if day is None:
            return None
        trigger = occurrence_start(task, day) - timedelta(minutes=lead)
        if trigger > now:
            return Reminder(
                task_id=task.id,
                title=task.title,
                occurrence=format_ymd(day),
                trigger_at=trigger,
                lead_minutes=lead,
                body=_body(lead),
            )
        day = next_occurrence(task, add_days(day, 1))
    return None


def pending_reminders(
    tasks: list[Task],
    now: datetime,
    lead_minutes: int | None = None,
) -> list[Reminder]:
    """Next reminder for every task that has one, soonest first."""
    reminders = []
    for t in tasks:
        try:
            reminder = reminder_for(t, now, lead_minutes)
        except InvalidDateFormat as e:
            logger.warning(f"Skipping reminder for task {t.id!r}: {e}")
            continue
        if reminder:
            reminders.append(reminder)
    return sorted(reminders, key=lambda r: r.trigger_at)


def snooze_until(now: datetime, minutes: int = SNOOZE_MINUTES) -> datetime:
    return now + timedelta(minutes=minutes)
