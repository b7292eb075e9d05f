"""Functional core - pure business logic with no I/O."""

from .errors import InvalidDateFormat, InvalidTimeFormat, MixedCompletionStrategy, PlannerError
from .dates import format_ymd, is_same_calendar_day, to_local_date
from .tasks import Repeat, Task, occurs_on
from .ledger import (
    CompletionScope,
    complete_occurrence,
    is_occurrence_complete,
    reopen_occurrence,
    reschedule_occurrence,
)
from .daily import next_up, select_for_today
from .streak import ActivityHistory, StreakDay, compute_history
from .views import ViewMode, has_tasks_on, tasks_for_view
from .reminders import Reminder, pending_reminders, reminder_for

__all__ = [
    # Errors
    "PlannerError",
    "InvalidDateFormat",
    "InvalidTimeFormat",
    "MixedCompletionStrategy",
    # Dates
    "to_local_date",
    "is_same_calendar_day",
    "format_ymd",
    # Tasks
    "Repeat",
    "Task",
    "occurs_on",
    # Ledger
    "CompletionScope",
    "is_occurrence_complete",
    "complete_occurrence",
    "reopen_occurrence",
    "reschedule_occurrence",
    # Daily list
    "select_for_today",
    "next_up",
    # Streak
    "StreakDay",
    "ActivityHistory",
    "compute_history",
    # Views
    "ViewMode",
    "tasks_for_view",
    "has_tasks_on",
    # Reminders
    "Reminder",
    "reminder_for",
    "pending_reminders",
]
