"""Application-wide paths."""

from .config import APP_NAME, DATA_DIR, LOG_DIR, SNAPSHOT_FILE

__all__ = ["APP_NAME", "DATA_DIR", "LOG_DIR", "SNAPSHOT_FILE"]
