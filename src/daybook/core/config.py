from __future__ import annotations

from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "Daybook"
APP_AUTHOR = "Daybook"
DATA_DIR = Path(user_data_dir(APP_NAME, APP_AUTHOR))
SNAPSHOT_FILE = DATA_DIR / "scheduler_cache.json"
LOG_DIR = DATA_DIR / "logs"
