"""Daybook: calendar, task and board sync cache with reminders and booking checks."""

from __future__ import annotations

__version__ = "0.1.0"
