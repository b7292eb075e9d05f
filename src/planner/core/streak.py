"""Activity heatmap and streak - pure aggregation, no I/O."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo

from .dates import add_days, format_ymd, local_day
from .errors import InvalidDateFormat
from .ledger import is_occurrence_complete
from .tasks import Task, occurs_on

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 14

# Heatmap colour per intensity bucket, lightest to darkest.
HEATMAP_COLORS = ("#E2E8F0", "#86EFAC", "#4ADE80", "#22C55E", "#166534")


@dataclass(frozen=True)
class StreakDay:
    """Completed occurrences on one calendar day."""

    date: str
    count: int
    intensity: int


@dataclass
class ActivityHistory:
    """Heatmap days (oldest first) and the current streak."""

    history: list[StreakDay] = field(default_factory=list)
    current_streak: int = 0

    def __iter__(self):
        # Allows ``history, streak = compute_history(...)``
        return iter((self.history, self.current_streak))


def intensity_for(count: int) -> int:
    """Bucket a day's completion count: 0, 1-2, 3-4, 5-6, 7+."""
    if count <= 0:
        return 0
    if count <= 2:
        return 1
    if count <= 4:
        return 2
    if count <= 6:
        return 3
    return 4


def completed_count(tasks: list[Task], day: date) -> int:
    """Number of tasks with a completed occurrence on ``day``."""
    return sum(1 for t in tasks if occurs_on(t, day) and is_occurrence_complete(t, day))


def current_streak(history: list[StreakDay]) -> int:
    """
    Consecutive active days counting back from the last entry.

    An empty last entry (today, nothing done yet) is skipped rather than
    breaking the streak; any earlier empty day ends it.
    """
    streak = 0
    last = len(history) - 1
    for i in range(last, -1, -1):
        if history[i].count > 0:
            streak += 1
        elif i != last:
            break
    return streak


def _valid_tasks(tasks: list[Task]) -> list[Task]:
    valid = []
    for t in tasks:
        try:
            t.base_date
        except InvalidDateFormat as e:
            logger.warning(f"Skipping task {t.id!r} in history: {e}")
            continue
        valid.append(t)
    return valid


def compute_history(
    tasks: list[Task],
    window_days: int = DEFAULT_WINDOW_DAYS,
    anchor: datetime | date | None = None,
    tz: tzinfo | str | None = None,
) -> ActivityHistory:
    """
    Build the heatmap for the ``window_days`` days ending on ``anchor``.

    Pure function - ``anchor`` defaults to now only for convenience at the
    edges; tests and the refresh job always pass it.
    """
    if window_days < 0:
        raise ValueError(f"window_days must be >= 0, got {window_days}")

    if anchor is None:
        anchor = datetime.now()
    end = local_day(anchor, tz) if isinstance(anchor, datetime) else anchor

    valid = _valid_tasks(tasks)
    history = []
    for i in range(window_days - 1, -1, -1):
        day = add_days(end, -i)
        count = completed_count(valid, day)
        history.append(StreakDay(date=format_ymd(day), count=count, intensity=intensity_for(count)))

    return ActivityHistory(history=history, current_streak=current_streak(history))
