"""Planner error taxonomy."""


class PlannerError(Exception):
    """Base class for planner errors."""


class InvalidDateFormat(PlannerError, ValueError):
    """A calendar date did not match YYYY-MM-DD or is not a real date."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid date {value!r}, expected YYYY-MM-DD")


class InvalidTimeFormat(PlannerError, ValueError):
    """A time of day did not match HH:MM."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid time {value!r}, expected HH:MM")


class MixedCompletionStrategy(PlannerError):
    """Base-date rescheduling requested on a task that tracks exceptions."""


class TaskNotFound(PlannerError, KeyError):
    """No task with the requested id."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"No task with id {task_id!r}")

    def __str__(self) -> str:
        return self.args[0]
