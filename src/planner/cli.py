"""Planner CLI - recurring tasks, today's list and streaks."""

import json
import logging
import sys
from datetime import datetime

import click

from .adapters.json_store import JsonTaskStore
from .config import Config, load_config
from .core.daily import select_for_today
from .core.dates import format_ymd, local_day, to_local
from .core.errors import PlannerError
from .core.ledger import complete_occurrence, is_occurrence_complete, reopen_occurrence
from .core.reminders import ALLOWED_LEAD_MINUTES, pending_reminders
from .core.streak import HEATMAP_COLORS, compute_history
from .core.tasks import Task, occurs_on
from .core.views import ViewMode, tasks_for_view
from .refresh import current_time

_AT_FORMATS = ["%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M", "%Y-%m-%d"]
# Unicode shade per heatmap intensity.
_SHADES = " ░▒▓█"


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _now(config: Config, at: datetime | None) -> datetime:
    if at is None:
        return current_time(config)
    tz = config.tzinfo()
    return at.replace(tzinfo=tz) if tz else at


def _task_line(t: Task, day: str) -> str:
    mark = "x" if is_occurrence_complete(t, day) else " "
    time_str = t.start_time or "all day"
    repeat = f" ({t.repeat})" if t.is_recurring else ""
    return f"[{mark}] {time_str:8} {t.title}{repeat}"


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Planner - recurring tasks, today's list and streaks."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@click.option("--all", "show_all", is_flag=True, help="Include completed and already-passed tasks")
@click.option("--at", type=click.DateTime(_AT_FORMATS), default=None, help="Evaluate as of this local time")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def today(show_all: bool, at: datetime | None, as_json: bool):
    """List today's tasks."""
    config = load_config()
    now = _now(config, at)
    try:
        tasks = JsonTaskStore(config.tasks_file).load_all()
    except (OSError, ValueError) as e:
        _fail(e)

    selected = select_for_today(
        tasks,
        now,
        show_completed=show_all or config.show_completed,
        tz=config.tzinfo(),
    )
    day = format_ymd(local_day(now, config.tzinfo()))

    if as_json:
        click.echo(json.dumps([t.to_dict() for t in selected], indent=2))
        return

    if not selected:
        click.echo("Nothing left for today.")
        return

    for t in selected:
        click.echo(_task_line(t, day))


@main.command()
@click.option("--days", type=int, default=None, help="Lookback window (default from config)")
@click.option("--at", type=click.DateTime(_AT_FORMATS), default=None, help="Evaluate as of this local time")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def streak(days: int | None, at: datetime | None, as_json: bool):
    """Show the activity heatmap and current streak."""
    config = load_config()
    now = _now(config, at)
    try:
        tasks = JsonTaskStore(config.tasks_file).load_all()
        activity = compute_history(
            tasks,
            days if days is not None else config.history_days,
            anchor=now,
            tz=config.tzinfo(),
        )
    except (OSError, ValueError) as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "current_streak": activity.current_streak,
                    "history": [
                        {
                            "date": d.date,
                            "count": d.count,
                            "intensity": d.intensity,
                            "color": HEATMAP_COLORS[d.intensity],
                        }
                        for d in activity.history
                    ],
                },
                indent=2,
            )
        )
        return

    click.echo("".join(_SHADES[d.intensity] for d in activity.history))
    click.echo(f"{activity.current_streak} day streak")


@main.command()
@click.option(
    "--mode",
    type=click.Choice([m.value for m in ViewMode]),
    default=ViewMode.DAY.value,
    help="Range to list",
)
@click.option("--date", "-d", "target_date", default=None, help="Day inside the view (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def view(mode: str, target_date: str | None, as_json: bool):
    """List tasks occurring in a day, week or month."""
    config = load_config()
    target = target_date or format_ymd(local_day(current_time(config)))
    try:
        tasks = JsonTaskStore(config.tasks_file).load_all()
        listed = tasks_for_view(tasks, target, mode)
    except (OSError, ValueError) as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([t.to_dict() for t in listed], indent=2))
        return

    if not listed:
        click.echo(f"No tasks this {mode}.")
        return

    for t in listed:
        repeat = f" ({t.repeat})" if t.is_recurring else ""
        time_str = f" {t.start_time}" if t.start_time else ""
        click.echo(f"{t.date}{time_str}  {t.title}{repeat}")


@main.command()
@click.argument("task_id")
@click.argument("day")
def occurs(task_id: str, day: str):
    """Check whether a task occurs on DAY, and if that occurrence is done."""
    config = load_config()
    try:
        task = JsonTaskStore(config.tasks_file).get(task_id)
        happens = occurs_on(task, day)
        done = happens and is_occurrence_complete(task, day)
    except (PlannerError, OSError, ValueError) as e:
        _fail(e)

    if not happens:
        click.echo(f"{task.title}: no occurrence on {day}")
    else:
        state = "done" if done else "open"
        click.echo(f"{task.title}: occurs on {day} ({state})")


def _update_occurrence(task_id: str, day: str | None, all_occurrences: bool, action) -> Task:
    config = load_config()
    store = JsonTaskStore(config.tasks_file)
    target = day or format_ymd(local_day(current_time(config)))
    scope = "all" if all_occurrences else "this"

    task = store.get(task_id)
    if not all_occurrences and not occurs_on(task, target):
        raise PlannerError(f"Task {task_id!r} does not occur on {target}")
    updated = action(task, target, scope)
    store.update(updated)
    return updated


@main.command()
@click.argument("task_id")
@click.option("--date", "-d", "day", default=None, help="Occurrence to complete (default today)")
@click.option("--all-occurrences", is_flag=True, help="End the whole series")
def complete(task_id: str, day: str | None, all_occurrences: bool):
    """Mark a task occurrence complete."""
    try:
        task = _update_occurrence(task_id, day, all_occurrences, complete_occurrence)
    except (PlannerError, OSError, ValueError) as e:
        _fail(e)
    click.echo(f"Completed: {task.title}")


@main.command()
@click.argument("task_id")
@click.option("--date", "-d", "day", default=None, help="Occurrence to reopen (default today)")
@click.option("--all-occurrences", is_flag=True, help="Reopen the whole series")
def reopen(task_id: str, day: str | None, all_occurrences: bool):
    """Undo a completion."""
    try:
        task = _update_occurrence(task_id, day, all_occurrences, reopen_occurrence)
    except (PlannerError, OSError, ValueError) as e:
        _fail(e)
    click.echo(f"Reopened: {task.title}")


@main.command()
@click.option(
    "--lead",
    type=click.Choice([str(m) for m in ALLOWED_LEAD_MINUTES]),
    default=None,
    help="Minutes before start (default per task, or from config)",
)
@click.option("--at", type=click.DateTime(_AT_FORMATS), default=None, help="Evaluate as of this local time")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def reminders(lead: str | None, at: datetime | None, as_json: bool):
    """List upcoming reminder triggers for a notification scheduler."""
    config = load_config()
    now = to_local(_now(config, at), config.tzinfo()).replace(tzinfo=None)
    lead_minutes = int(lead) if lead is not None else (config.reminder_lead_minutes or None)
    try:
        tasks = JsonTaskStore(config.tasks_file).load_all()
    except (OSError, ValueError) as e:
        _fail(e)

    pending = pending_reminders(tasks, now, lead_minutes)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "task_id": r.task_id,
                        "title": r.heading,
                        "body": r.body,
                        "occurrence": r.occurrence,
                        "trigger_at": r.trigger_at.isoformat(),
                        "lead_minutes": r.lead_minutes,
                    }
                    for r in pending
                ],
                indent=2,
            )
        )
        return

    if not pending:
        click.echo("No reminders pending.")
        return

    for r in pending:
        click.echo(f"{r.trigger_at:%Y-%m-%d %H:%M}  {r.heading} ({r.body})")


@main.command()
def watch():
    """Recompute today's list and streak on a timer."""
    from .refresh import run_refresh

    click.echo("Starting Planner refresh loop...")
    click.echo("Press Ctrl+C to stop")
    run_refresh()


if __name__ == "__main__":
    main()
