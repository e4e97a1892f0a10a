"""Configuration models and helpers."""

from __future__ import annotations

from .settings import AppSettings, CacheSettings, LoggingSettings, SchedulerSettings, get_settings, load_settings

__all__ = [
    "AppSettings",
    "CacheSettings",
    "LoggingSettings",
    "SchedulerSettings",
    "get_settings",
    "load_settings",
]
