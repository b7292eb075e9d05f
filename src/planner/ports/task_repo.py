"""Task repository interface."""

from typing import Protocol

from planner.core.tasks import Task


class TaskRepository(Protocol):
    """Interface for loading and storing the planner's task list."""

    def load_all(self) -> list[Task]:
        """Load all tasks, in stored order."""
        ...

    def save_all(self, tasks: list[Task]) -> None:
        """Replace the stored task list."""
        ...
