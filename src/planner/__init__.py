"""Planner - recurring task occurrences, daily lists and streaks."""

__version__ = "0.1.0"
