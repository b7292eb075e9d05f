"""Periodic recomputation of the dashboard data."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .adapters.json_store import JsonTaskStore
from .config import Config, load_config
from .core.daily import next_up, select_for_today
from .core.dates import format_ymd, local_day
from .core.streak import ActivityHistory, compute_history
from .core.tasks import Task
from .ports.task_repo import TaskRepository

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    """Everything the dashboard shows, computed for one instant."""

    as_of: datetime
    today: list[Task]
    activity: ActivityHistory
    up_next: Task | None


def current_time(config: Config) -> datetime:
    """Now, in the configured zone when there is one."""
    tz = config.tzinfo()
    return datetime.now(tz) if tz else datetime.now()


def refresh_snapshot(
    repo: TaskRepository,
    config: Config,
    now: datetime | None = None,
) -> Snapshot:
    """Load tasks and recompute today's list, the heatmap and the up-next card."""
    now = now or current_time(config)
    tz = config.tzinfo()
    tasks = repo.load_all()

    return Snapshot(
        as_of=now,
        today=select_for_today(tasks, now, show_completed=config.show_completed, tz=tz),
        activity=compute_history(tasks, config.history_days, anchor=now, tz=tz),
        up_next=next_up(tasks, now, tz=tz),
    )


def build_scheduler(config: Config, callback: Callable[[], None]) -> BlockingScheduler:
    """Scheduler that calls ``callback`` every ``refresh_seconds``."""
    scheduler = BlockingScheduler(timezone=config.tzinfo())
    seconds = config.refresh_seconds if config.refresh_seconds > 0 else 60
    scheduler.add_job(
        callback,
        IntervalTrigger(seconds=seconds),
        id="refresh",
        replace_existing=True,
    )
    logger.info(f"Scheduled dashboard refresh every {seconds}s")
    return scheduler


def log_snapshot(snapshot: Snapshot) -> None:
    day = format_ymd(local_day(snapshot.as_of))
    up_next = snapshot.up_next.title if snapshot.up_next else "nothing"
    logger.info(
        f"{day}: {len(snapshot.today)} task(s) today, "
        f"streak {snapshot.activity.current_streak}, up next: {up_next}"
    )


def run_refresh(config: Config | None = None) -> None:
    """Recompute the dashboard on a fixed cadence until interrupted."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    if config is None:
        config = load_config()
    repo = JsonTaskStore(config.tasks_file)

    def job() -> None:
        log_snapshot(refresh_snapshot(repo, config))

    scheduler = build_scheduler(config, job)
    job()
    logger.info("Starting Planner refresh loop...")
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Refresh loop stopped")
