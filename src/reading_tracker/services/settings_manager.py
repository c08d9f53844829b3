"""Settings Manager - Handles storage locations and logging configuration."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_DATA_DIR = Path.home() / ".reading_tracker"


class SettingsManager:
    """
    Manages application settings.

    Values come from the process environment, seeded from a .env file in the
    project root:

    READING_TRACKER_DATA_DIR       managed storage root (database + covers/)
    READING_TRACKER_DB_NAME        database file name inside the data dir
    READING_TRACKER_EXPORT_DIR     where snapshot files are written
    READING_TRACKER_EXPORT_PREFIX  snapshot file name prefix
    READING_TRACKER_LOG_LEVEL      loguru level name
    """

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        self._project_root = Path(project_root)
        load_dotenv(dotenv_path=self._project_root / ".env")

    @property
    def data_dir(self) -> Path:
        value = self._get("READING_TRACKER_DATA_DIR")
        return Path(value).expanduser() if value else DEFAULT_DATA_DIR

    @property
    def db_path(self) -> Path:
        return self.data_dir / (self._get("READING_TRACKER_DB_NAME") or "reading_tracker.db")

    @property
    def export_dir(self) -> Path:
        value = self._get("READING_TRACKER_EXPORT_DIR")
        return Path(value).expanduser() if value else self.data_dir

    @property
    def export_prefix(self) -> str:
        return self._get("READING_TRACKER_EXPORT_PREFIX") or "reading_backup"

    @property
    def log_level(self) -> str:
        return (self._get("READING_TRACKER_LOG_LEVEL") or "INFO").upper()

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        load_dotenv(dotenv_path=self._project_root / ".env", override=True)

    @staticmethod
    def _get(name: str) -> Optional[str]:
        value = os.getenv(name)
        return value.strip() if value and value.strip() else None
