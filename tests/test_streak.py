"""Tests for the activity heatmap and streak."""

import logging
from datetime import date, datetime

import pytest

from planner.core.ledger import complete_occurrence
from planner.core.streak import (
    HEATMAP_COLORS,
    StreakDay,
    compute_history,
    current_streak,
    intensity_for,
)
from planner.core.tasks import Task


@pytest.fixture
def anchor():
    return datetime(2024, 3, 17, 12, 0)


def days(*counts: int) -> list[StreakDay]:
    return [StreakDay(date=f"2024-03-{i + 1:02d}", count=c, intensity=intensity_for(c)) for i, c in enumerate(counts)]


def daily_done_on(*ymds: str, task_id: str = "d") -> Task:
    task = Task(id=task_id, title="Habit", date="2024-01-01", repeat="daily")
    for ymd in ymds:
        task = complete_occurrence(task, ymd)
    return task


class TestIntensity:
    @pytest.mark.parametrize(
        "count, expected",
        [(0, 0), (1, 1), (2, 1), (3, 2), (4, 2), (5, 3), (6, 3), (7, 4), (50, 4)],
    )
    def test_buckets(self, count, expected):
        assert intensity_for(count) == expected

    def test_one_colour_per_bucket(self):
        assert len(HEATMAP_COLORS) == 5


class TestCurrentStreak:
    def test_zero_today_does_not_break(self):
        assert current_streak(days(1, 1, 1, 0)) == 3

    def test_zero_before_today_breaks(self):
        assert current_streak(days(1, 1, 0, 1)) == 1

    def test_all_active(self):
        assert current_streak(days(2, 1, 3)) == 3

    def test_two_trailing_zeros(self):
        assert current_streak(days(1, 1, 0, 0)) == 0

    def test_empty(self):
        assert current_streak([]) == 0

    def test_single_zero(self):
        assert current_streak(days(0)) == 0


class TestComputeHistory:
    def test_window_is_chronological(self, anchor):
        activity = compute_history([], 14, anchor)
        assert len(activity.history) == 14
        assert activity.history[0].date == "2024-03-04"
        assert activity.history[-1].date == "2024-03-17"

    def test_counts_completed_occurrences(self, anchor):
        tasks = [
            daily_done_on("2024-03-15", "2024-03-16", task_id="a"),
            daily_done_on("2024-03-16", task_id="b"),
        ]
        history, streak = compute_history(tasks, 3, anchor)
        assert [(d.date, d.count) for d in history] == [
            ("2024-03-15", 1),
            ("2024-03-16", 2),
            ("2024-03-17", 0),
        ]
        assert streak == 2

    def test_exception_outside_occurrence_not_counted(self, anchor):
        weekly = Task(
            id="w",
            title="Weekly",
            date="2024-03-10",
            repeat="weekly",
            completed_exceptions=("2024-03-16",),
        )
        history, _ = compute_history([weekly], 2, anchor)
        assert [d.count for d in history] == [0, 0]

    def test_one_off_counts_on_its_date_only(self, anchor):
        done = complete_occurrence(Task(id="o", title="Once", date="2024-03-16"), "2024-03-16")
        history, streak = compute_history([done], 3, anchor)
        assert [d.count for d in history] == [0, 1, 0]
        assert streak == 1

    def test_series_ended_counts_every_occurrence(self, anchor):
        ended = complete_occurrence(Task(id="e", title="Ended", date="2024-03-15", repeat="daily"), "2024-03-17", "all")
        history, streak = compute_history([ended], 5, anchor)
        assert [d.count for d in history] == [0, 0, 1, 1, 1]
        assert streak == 3

    def test_streak_survives_empty_today(self, anchor):
        task = daily_done_on("2024-03-14", "2024-03-15", "2024-03-16")
        assert compute_history([task], 14, anchor).current_streak == 3

    def test_intensity_from_count(self, anchor):
        tasks = [daily_done_on("2024-03-17", task_id=str(i)) for i in range(7)]
        history, _ = compute_history(tasks, 1, anchor)
        assert history[0] == StreakDay(date="2024-03-17", count=7, intensity=4)

    def test_anchor_as_date(self):
        history, _ = compute_history([], 2, date(2024, 3, 1))
        assert [d.date for d in history] == ["2024-02-29", "2024-03-01"]

    def test_zero_window(self, anchor):
        activity = compute_history([daily_done_on("2024-03-17")], 0, anchor)
        assert activity.history == []
        assert activity.current_streak == 0

    def test_negative_window(self, anchor):
        with pytest.raises(ValueError):
            compute_history([], -1, anchor)

    def test_malformed_task_skipped(self, anchor, caplog):
        bad = Task(id="bad", title="Corrupt", date="2024-3-1", repeat="daily", is_completed=True)
        good = daily_done_on("2024-03-17")
        with caplog.at_level(logging.WARNING):
            history, _ = compute_history([bad, good], 1, anchor)
        assert history[0].count == 1
        assert "bad" in caplog.text

    def test_deterministic(self, anchor):
        tasks = [daily_done_on("2024-03-16", "2024-03-17")]
        assert compute_history(tasks, 14, anchor) == compute_history(tasks, 14, anchor)
