from datetime import timedelta
from pathlib import Path

import pytest

from daybook.config import load_settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "DAYBOOK_RECIPIENTS",
        "DAYBOOK_TIMEZONE",
        "DAYBOOK_MORNING_HOUR",
        "DAYBOOK_AFTERNOON_HOUR",
        "DAYBOOK_REMINDER_WINDOW_START",
        "DAYBOOK_SNAPSHOT_FILE",
        "DAYBOOK_STALENESS_HOURS",
        "DAYBOOK_LOG_LEVEL",
        "DAYBOOK_COLLABORATORS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = load_settings()

    assert settings.scheduler.recipients == ()
    assert settings.scheduler.timezone == "America/Sao_Paulo"
    assert settings.scheduler.morning_cron == "0 8 * * *"
    assert settings.scheduler.afternoon_cron == "0 14 * * *"
    assert settings.cache.staleness_threshold == timedelta(hours=2)
    assert settings.cache.lookahead == timedelta(hours=12)
    assert settings.collaborators is None


def test_environment_overrides(clean_env, tmp_path):
    clean_env.setenv("DAYBOOK_RECIPIENTS", " 100, 200 ,,300 ")
    clean_env.setenv("DAYBOOK_MORNING_HOUR", "7")
    clean_env.setenv("DAYBOOK_AFTERNOON_HOUR", "15")
    clean_env.setenv("DAYBOOK_SNAPSHOT_FILE", str(tmp_path / "cache.json"))
    clean_env.setenv("DAYBOOK_STALENESS_HOURS", "0.5")
    clean_env.setenv("DAYBOOK_LOG_LEVEL", "debug")
    clean_env.setenv("DAYBOOK_COLLABORATORS", "my_bot.wiring:build")

    settings = load_settings()

    assert settings.scheduler.recipients == ("100", "200", "300")
    assert settings.scheduler.morning_cron == "0 7 * * *"
    assert settings.scheduler.afternoon_cron == "0 15 * * *"
    assert settings.cache.snapshot_file == Path(tmp_path / "cache.json")
    assert settings.cache.staleness_threshold == timedelta(minutes=30)
    assert settings.logging.level == "DEBUG"
    assert settings.collaborators == "my_bot.wiring:build"


def test_malformed_numbers_fall_back_to_defaults(clean_env):
    clean_env.setenv("DAYBOOK_MORNING_HOUR", "eight")
    clean_env.setenv("DAYBOOK_REMINDER_WINDOW_START", "soon")

    settings = load_settings()

    assert settings.scheduler.morning_hour == 8
    assert settings.scheduler.reminder_window_start == 14.0
