"""
Persistent key-value storage for the application state.

Each top-level collection is stored as a whole JSON snapshot in its own
file inside the data directory:

    data/courses.json
    data/schedule.json
    data/logs.json
    ...

Design rationale:
- one file per key keeps writes small and independent
- no incremental updates: a save always replaces the whole snapshot
- reads never crash the application; a missing or broken file simply
  yields the caller's fallback
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from culiplan.config import data_dir

logger = logging.getLogger(__name__)

KEY_COURSES = "courses"
KEY_SCHEDULE = "schedule"
KEY_LOGS = "logs"
KEY_EVENTS = "calendarEvents"
KEY_EXAMS = "exams"
KEY_SCHOOL = "schoolInfo"
KEY_TEACHER = "teacherInfo"
KEY_TASKS = "notebookTasks"
KEY_LOCKED = "calendarLocked"
KEY_LEGEND = "legendItems"

ALL_KEYS = (
    KEY_COURSES,
    KEY_SCHEDULE,
    KEY_LOGS,
    KEY_EVENTS,
    KEY_EXAMS,
    KEY_SCHOOL,
    KEY_TEACHER,
    KEY_TASKS,
    KEY_LOCKED,
    KEY_LEGEND,
)


class JsonStore:
    """
    Directory of JSON files, one per key.

    The directory is resolved lazily from culiplan.config.data_dir() unless
    one is given (mainly for tests).
    """

    def __init__(self, directory: str | Path | None = None) -> None:
        self.directory = Path(directory) if directory is not None else data_dir()

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str, fallback: Any = None) -> Any:
        """
        Load the snapshot stored under `key`.

        Returns `fallback` if the file does not exist or is invalid.
        """
        path = self.path_for(key)

        # First run: nothing stored yet
        if not path.exists():
            return fallback

        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Ignoring unreadable %s: %s", path, exc)
            return fallback

    def save(self, key: str, value: Any) -> None:
        """
        Replace the snapshot stored under `key`.

        Creates the data directory if needed.
        """
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(value, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.debug("Saved %s", path)

    def clear(self) -> None:
        for key in ALL_KEYS:
            path = self.path_for(key)
            if path.exists():
                path.unlink()
