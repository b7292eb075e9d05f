"""JSON file task storage adapter."""

import json
import logging
from pathlib import Path

from planner.core.errors import TaskNotFound
from planner.core.tasks import Task, find_task

logger = logging.getLogger(__name__)


class JsonTaskStore:
    """
    Task list stored as a JSON array of planner records.

    Implements TaskRepository protocol.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load_all(self) -> list[Task]:
        """Load tasks. A missing file is an empty list; bad records are skipped."""
        if not self.path.exists():
            return []

        data = json.loads(self.path.read_text())
        if not isinstance(data, list):
            logger.warning(f"Expected a list of tasks in {self.path}, got {type(data).__name__}")
            return []

        tasks = []
        for i, record in enumerate(data):
            try:
                tasks.append(Task.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed task record #{i} in {self.path}: {e!r}")
        return tasks

    def save_all(self, tasks: list[Task]) -> None:
        """Write the whole list, replacing the file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps([t.to_dict() for t in tasks], indent=2))

    def get(self, task_id: str) -> Task:
        task = find_task(self.load_all(), task_id)
        if task is None:
            raise TaskNotFound(task_id)
        return task

    def update(self, task: Task) -> None:
        """
        Replace the stored record with the same id.

        Works on the raw records so that entries load_all() skips, and keys
        Task does not model, are written back untouched.
        """
        records = json.loads(self.path.read_text()) if self.path.exists() else []
        if not isinstance(records, list):
            raise TaskNotFound(task.id)

        for i, record in enumerate(records):
            if isinstance(record, dict) and str(record.get("id")) == task.id:
                break
        else:
            raise TaskNotFound(task.id)

        rendered = task.to_dict()
        merged = {**record, **rendered}
        # Optional keys to_dict() leaves out were cleared on the task
        for key in ("startTime", "endTime", "notes"):
            if key not in rendered:
                merged.pop(key, None)
        records[i] = merged

        self.path.write_text(json.dumps(records, indent=2))
        logger.debug(f"Updated task {task.id} in {self.path}")
