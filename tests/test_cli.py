"""Tests for the planner CLI."""

import json
import logging
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from planner.cli import main
from planner.config import Config


@pytest.fixture
def tasks_file(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(
        json.dumps(
            [
                {"id": "sync", "title": "Team sync", "date": "2024-03-10", "startTime": "09:00", "repeat": "weekly"},
                {"id": "walk", "title": "Walk", "date": "2024-03-01", "repeat": "daily",
                 "completedExceptions": ["2024-03-15", "2024-03-16"], "createdAt": "2024-02-28T18:00:00Z"},
                {"id": "dentist", "title": "Dentist", "date": "2024-03-17", "startTime": "08:00",
                 "reminderLeadMinutes": 30},
            ]
        )
    )
    return path


@pytest.fixture
def runner(tasks_file):
    config = Config(tasks_file=str(tasks_file))
    with patch("planner.cli.load_config", return_value=config):
        yield CliRunner()


class TestToday:
    def test_lists_upcoming(self, runner):
        result = runner.invoke(main, ["today", "--at", "2024-03-17T08:30"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert "Team sync" in lines[0]
        assert "Walk" in lines[1]
        assert "Dentist" not in result.output

    def test_all_includes_passed(self, runner):
        result = runner.invoke(main, ["today", "--all", "--at", "2024-03-17T08:30"])
        assert "Dentist" in result.output

    def test_json(self, runner):
        result = runner.invoke(main, ["today", "--json", "--at", "2024-03-17T07:00"])
        data = json.loads(result.output)
        assert [t["id"] for t in data] == ["dentist", "sync", "walk"]
        assert data[2]["createdAt"] == "2024-02-28T18:00:00Z"
        assert data[2]["completedExceptions"] == ["2024-03-15", "2024-03-16"]

    def test_empty(self, runner):
        result = runner.invoke(main, ["today", "--at", "2024-02-01T07:00"])
        assert "Nothing left for today." in result.output


class TestStreak:
    def test_json(self, runner):
        result = runner.invoke(main, ["streak", "--json", "--days", "3", "--at", "2024-03-17T12:00"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["current_streak"] == 2
        assert [d["count"] for d in data["history"]] == [1, 1, 0]
        assert data["history"][0]["color"] == "#86EFAC"

    def test_text(self, runner):
        result = runner.invoke(main, ["streak", "--days", "3", "--at", "2024-03-17T12:00"])
        assert "2 day streak" in result.output


class TestOccurs:
    def test_occurs(self, runner):
        result = runner.invoke(main, ["occurs", "walk", "2024-03-15"])
        assert "occurs on 2024-03-15 (done)" in result.output

    def test_no_occurrence(self, runner):
        result = runner.invoke(main, ["occurs", "sync", "2024-03-18"])
        assert "no occurrence" in result.output

    def test_bad_date(self, runner):
        result = runner.invoke(main, ["occurs", "sync", "18-03-2024"])
        assert result.exit_code == 1
        assert "Invalid date" in result.output

    def test_unknown_task(self, runner):
        result = runner.invoke(main, ["occurs", "ghost", "2024-03-18"])
        assert result.exit_code == 1
        assert "ghost" in result.output


class TestComplete:
    def test_complete_single_occurrence(self, runner, tasks_file):
        result = runner.invoke(main, ["complete", "sync", "--date", "2024-03-17"])
        assert result.exit_code == 0
        stored = {t["id"]: t for t in json.loads(tasks_file.read_text())}
        assert stored["sync"]["completedExceptions"] == ["2024-03-17"]
        assert stored["sync"]["isCompleted"] is False
        assert stored["sync"]["date"] == "2024-03-10"

    def test_complete_all(self, runner, tasks_file):
        runner.invoke(main, ["complete", "sync", "--all-occurrences"])
        stored = {t["id"]: t for t in json.loads(tasks_file.read_text())}
        assert stored["sync"]["isCompleted"] is True

    def test_refuses_non_occurrence(self, runner, tasks_file):
        result = runner.invoke(main, ["complete", "sync", "--date", "2024-03-18"])
        assert result.exit_code == 1
        assert "does not occur" in result.output

    def test_reopen(self, runner, tasks_file):
        runner.invoke(main, ["reopen", "walk", "--date", "2024-03-15"])
        stored = {t["id"]: t for t in json.loads(tasks_file.read_text())}
        assert stored["walk"]["completedExceptions"] == ["2024-03-16"]


class TestViewAndReminders:
    def test_week_view(self, runner):
        result = runner.invoke(main, ["view", "--mode", "week", "--date", "2024-03-20", "--json"])
        assert [t["id"] for t in json.loads(result.output)] == ["walk", "sync", "dentist"]

    def test_reminders(self, runner):
        result = runner.invoke(main, ["reminders", "--json", "--at", "2024-03-17T07:00"])
        data = json.loads(result.output)
        assert [r["task_id"] for r in data] == ["dentist"]
        assert data[0]["trigger_at"] == "2024-03-17T07:30:00"

    def test_reminders_lead_override(self, runner):
        result = runner.invoke(main, ["reminders", "--json", "--lead", "5", "--at", "2024-03-17T07:00"])
        data = json.loads(result.output)
        assert [r["task_id"] for r in data] == ["dentist", "sync"]


class TestWatch:
    def test_debug_is_a_group_option(self, runner):
        with patch("planner.refresh.run_refresh") as run, patch("planner.cli.logging.basicConfig") as basic:
            result = runner.invoke(main, ["--debug", "watch"])
        assert result.exit_code == 0
        run.assert_called_once_with()
        assert basic.call_args.kwargs["level"] == logging.DEBUG

    def test_debug_after_watch_rejected(self, runner):
        with patch("planner.refresh.run_refresh") as run:
            result = runner.invoke(main, ["watch", "--debug"])
        assert result.exit_code == 2
        run.assert_not_called()
