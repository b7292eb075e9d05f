"""Today's task list - pure selection logic, no I/O."""

import logging
from datetime import datetime, tzinfo

from .dates import format_ymd, local_day, local_time_minutes, parse_hhmm
from .errors import InvalidDateFormat, InvalidTimeFormat
from .ledger import is_occurrence_complete
from .tasks import Task, occurs_on

logger = logging.getLogger(__name__)

# Untimed tasks sort after everything else in the day.
NO_TIME_SENTINEL = "23:59"


def _start_minutes(task: Task) -> int | None:
    if not task.start_time:
        return None
    try:
        return parse_hhmm(task.start_time)
    except InvalidTimeFormat:
        logger.warning(f"Task {task.id!r} has invalid start time {task.start_time!r}, treating as all-day")
        return None


def sort_by_start_time(tasks: list[Task]) -> list[Task]:
    """Stable sort by start time, untimed tasks last."""
    sentinel = parse_hhmm(NO_TIME_SENTINEL)

    def sort_key(t: Task) -> int:
        minutes = _start_minutes(t)
        return sentinel if minutes is None else minutes

    return sorted(tasks, key=sort_key)


def select_for_today(
    tasks: list[Task],
    now: datetime,
    show_completed: bool = False,
    tz: tzinfo | str | None = None,
) -> list[Task]:
    """
    Tasks to show on today's list.

    Unless ``show_completed``, completed occurrences and timed tasks whose
    start already passed today are hidden. Tasks with corrupt dates are
    logged and skipped.

    Pure function - recomputed from scratch on every call.
    """
    today = format_ymd(local_day(now, tz))
    now_minutes = local_time_minutes(now, tz)

    selected = []
    for task in tasks:
        try:
            if not occurs_on(task, today):
                continue
        except InvalidDateFormat as e:
            logger.warning(f"Skipping task {task.id!r}: {e}")
            continue

        if not show_completed:
            if is_occurrence_complete(task, today):
                continue
            start = _start_minutes(task)
            if start is not None and start < now_minutes:
                continue

        selected.append(task)

    return sort_by_start_time(selected)


def next_up(
    tasks: list[Task],
    now: datetime,
    tz: tzinfo | str | None = None,
) -> Task | None:
    """The first still-open task on today's list, if any."""
    upcoming = select_for_today(tasks, now, show_completed=False, tz=tz)
    return upcoming[0] if upcoming else None
