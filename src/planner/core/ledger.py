"""Per-occurrence completion tracking for tasks.

Recurring tasks record completed occurrences by date in
``completed_exceptions`` and never touch their recurrence template. Every
operation returns a new Task; callers replace the stored record wholesale.
"""

from dataclasses import replace
from datetime import date
from enum import Enum

from .dates import add_days, add_months, add_years, format_ymd, to_local_date
from .errors import MixedCompletionStrategy
from .tasks import Repeat, Task, parse_repeat


class CompletionScope(Enum):
    """Which occurrences a completion applies to."""

    THIS = "this"
    ALL = "all"


def _scope(value: CompletionScope | str) -> CompletionScope:
    return value if isinstance(value, CompletionScope) else CompletionScope(value)


def is_occurrence_complete(task: Task, day: str | date) -> bool:
    """
    Is the task's occurrence on ``day`` done?

    One-off tasks use ``is_completed`` directly. For recurring tasks,
    ``is_completed`` means the whole series is finished and wins over any date.
    """
    ymd = format_ymd(to_local_date(day))
    if not task.is_recurring:
        return task.is_completed
    return task.is_completed or ymd in task.completed_exceptions


def complete_occurrence(
    task: Task,
    day: str | date,
    scope: CompletionScope | str = CompletionScope.THIS,
) -> Task:
    """Mark one occurrence (or the whole series) complete."""
    ymd = format_ymd(to_local_date(day))
    scope = _scope(scope)

    if not task.is_recurring or scope is CompletionScope.ALL:
        return replace(task, is_completed=True)

    if ymd in task.completed_exceptions:
        return task
    return replace(task, completed_exceptions=task.completed_exceptions + (ymd,))


def reopen_occurrence(
    task: Task,
    day: str | date,
    scope: CompletionScope | str = CompletionScope.THIS,
) -> Task:
    """Undo a completion made with complete_occurrence."""
    ymd = format_ymd(to_local_date(day))
    scope = _scope(scope)

    if not task.is_recurring or scope is CompletionScope.ALL:
        return replace(task, is_completed=False)

    return replace(
        task,
        completed_exceptions=tuple(d for d in task.completed_exceptions if d != ymd),
    )


def next_occurrence_date(from_day: str | date, repeat: Repeat | str) -> date:
    """Advance one recurrence step by calendar arithmetic."""
    start = to_local_date(from_day)
    rule = repeat if isinstance(repeat, Repeat) else parse_repeat(repeat)

    match rule:
        case Repeat.DAILY:
            return add_days(start, 1)
        case Repeat.WEEKLY:
            return add_days(start, 7)
        case Repeat.MONTHLY:
            return add_months(start, 1)
        case Repeat.YEARLY:
            return add_years(start, 1)
    raise ValueError(f"Cannot advance a non-recurring rule: {repeat!r}")


def reschedule_occurrence(
    task: Task,
    from_day: str | date,
    repeat: Repeat | str | None = None,
) -> Task:
    """
    Legacy completion: move the base date to the next occurrence.

    Kept for records created by older clients. Exception tracking is the
    canonical strategy and the two must not be mixed on one task, so this
    refuses tasks that already carry completed exceptions.
    """
    if task.completed_exceptions:
        raise MixedCompletionStrategy(
            f"Task {task.id!r} tracks completed occurrences; "
            "use complete_occurrence instead of rescheduling"
        )
    nxt = next_occurrence_date(from_day, repeat if repeat is not None else task.repeat)
    return replace(task, date=format_ymd(nxt))
