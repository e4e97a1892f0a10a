from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

from ..core.config import LOG_DIR, SNAPSHOT_FILE

load_dotenv()


@dataclass(frozen=True)
class SchedulerSettings:
    recipients: Tuple[str, ...] = ()
    timezone: str = "America/Sao_Paulo"
    morning_hour: int = 8
    afternoon_hour: int = 14
    refresh_cron: str = "0 * * * *"
    scan_cron: str = "* * * * *"
    reminder_window_start: float = 14.0
    reminder_window_end: float = 15.5
    reminder_minutes: int = 15
    max_tasks_in_summary: int = 10
    max_cards_in_summary: int = 10

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def morning_cron(self) -> str:
        return f"0 {self.morning_hour} * * *"

    @property
    def afternoon_cron(self) -> str:
        return f"0 {self.afternoon_hour} * * *"


@dataclass(frozen=True)
class CacheSettings:
    snapshot_file: Path = SNAPSHOT_FILE
    staleness_threshold: timedelta = timedelta(hours=2)
    lookahead: timedelta = timedelta(hours=12)


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"
    directory: Path = LOG_DIR


@dataclass(frozen=True)
class AppSettings:
    scheduler: SchedulerSettings = field(default_factory=SchedulerSettings)
    cache: CacheSettings = field(default_factory=CacheSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    collaborators: Optional[str] = None


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _recipients_from_env(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def load_settings() -> AppSettings:
    scheduler = SchedulerSettings(
        recipients=_recipients_from_env("DAYBOOK_RECIPIENTS"),
        timezone=os.getenv("DAYBOOK_TIMEZONE", "America/Sao_Paulo"),
        morning_hour=_int_from_env("DAYBOOK_MORNING_HOUR", 8),
        afternoon_hour=_int_from_env("DAYBOOK_AFTERNOON_HOUR", 14),
        refresh_cron=os.getenv("DAYBOOK_REFRESH_CRON", "0 * * * *"),
        scan_cron=os.getenv("DAYBOOK_SCAN_CRON", "* * * * *"),
        reminder_window_start=_float_from_env("DAYBOOK_REMINDER_WINDOW_START", 14.0),
        reminder_window_end=_float_from_env("DAYBOOK_REMINDER_WINDOW_END", 15.5),
        reminder_minutes=_int_from_env("DAYBOOK_REMINDER_MINUTES", 15),
        max_tasks_in_summary=_int_from_env("DAYBOOK_MAX_TASKS_IN_SUMMARY", 10),
        max_cards_in_summary=_int_from_env("DAYBOOK_MAX_CARDS_IN_SUMMARY", 10),
    )

    cache = CacheSettings(
        snapshot_file=Path(os.getenv("DAYBOOK_SNAPSHOT_FILE") or SNAPSHOT_FILE),
        staleness_threshold=timedelta(hours=_float_from_env("DAYBOOK_STALENESS_HOURS", 2.0)),
        lookahead=timedelta(hours=_float_from_env("DAYBOOK_LOOKAHEAD_HOURS", 12.0)),
    )

    logging = LoggingSettings(
        level=os.getenv("DAYBOOK_LOG_LEVEL", "INFO").upper(),
        directory=Path(os.getenv("DAYBOOK_LOG_DIR") or LOG_DIR),
    )

    return AppSettings(
        scheduler=scheduler,
        cache=cache,
        logging=logging,
        collaborators=os.getenv("DAYBOOK_COLLABORATORS") or None,
    )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return load_settings()
