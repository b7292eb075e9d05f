"""Day/week/month planner views - pure functions, no I/O."""

import logging
from datetime import date
from enum import Enum

from .dates import add_days, days_in_month, to_local_date, week_start
from .errors import InvalidDateFormat
from .tasks import Task, occurs_on

logger = logging.getLogger(__name__)


class ViewMode(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def view_dates(selected: str | date, mode: ViewMode | str) -> list[date]:
    """Calendar days covered by a view; weeks run Sunday to Saturday."""
    day = to_local_date(selected)
    mode = mode if isinstance(mode, ViewMode) else ViewMode(mode)

    match mode:
        case ViewMode.DAY:
            return [day]
        case ViewMode.WEEK:
            start = week_start(day)
            return [add_days(start, i) for i in range(7)]
        case ViewMode.MONTH:
            total = days_in_month(day.year, day.month)
            return [date(day.year, day.month, d) for d in range(1, total + 1)]


def _occurs_safely(task: Task, day: date) -> bool:
    try:
        return occurs_on(task, day)
    except InvalidDateFormat as e:
        logger.warning(f"Skipping task {task.id!r}: {e}")
        return False


def tasks_for_view(
    tasks: list[Task],
    selected: str | date,
    mode: ViewMode | str = ViewMode.DAY,
) -> list[Task]:
    """
    Tasks with at least one occurrence inside the view.

    Day view keeps input order. Week and month views list each task once,
    ordered by base date.
    """
    days = view_dates(selected, mode)
    if len(days) == 1:
        return [t for t in tasks if _occurs_safely(t, days[0])]

    found: dict[str, Task] = {}
    skipped: set[str] = set()
    for day in days:
        for t in tasks:
            if t.id in found or t.id in skipped:
                continue
            try:
                if occurs_on(t, day):
                    found[t.id] = t
            except InvalidDateFormat as e:
                logger.warning(f"Skipping task {t.id!r}: {e}")
                skipped.add(t.id)

    return sorted(found.values(), key=lambda t: t.date)


def has_tasks_on(tasks: list[Task], day: str | date) -> bool:
    """Whether any task occurs on ``day`` (calendar dot indicator)."""
    return any(_occurs_safely(t, day) for t in tasks)
