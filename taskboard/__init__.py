"""Taskboard: a single-table task manager exposed as remote procedures."""

__version__ = "1.0.0"
