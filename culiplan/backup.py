"""
Backup export / import.

A backup is one JSON document:

    {
      "timestamp": "2026-01-31T10:00:00+00:00",
      "courses": [...],
      "schedule": [...],
      ...
    }

`timestamp` marks the file as a backup. Import replaces every collection
present in the file and leaves the others untouched; a file that fails
validation imports nothing at all.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from culiplan.state import (
    LIST_FIELDS,
    OBJECT_FIELDS,
    AppState,
    merge_snapshots,
    parse_list,
    parse_object,
    to_snapshots,
)
from culiplan.storage import (
    KEY_COURSES,
    KEY_EVENTS,
    KEY_EXAMS,
    KEY_LEGEND,
    KEY_LOGS,
    KEY_SCHEDULE,
    KEY_SCHOOL,
    KEY_TASKS,
    KEY_TEACHER,
)

logger = logging.getLogger(__name__)

SECTIONS: dict[str, tuple[str, ...]] = {
    "courses": (KEY_COURSES,),
    "schedule": (KEY_SCHEDULE,),
    "logs": (KEY_LOGS, KEY_EXAMS),
    "calendar": (KEY_EVENTS, KEY_LEGEND),
    "tasks": (KEY_TASKS,),
    "settings": (KEY_SCHOOL, KEY_TEACHER),
}


class BackupError(ValueError):
    """The file is not a usable backup."""


def build_backup(
    state: AppState, sections: Optional[Iterable[str]] = None, now: Optional[datetime] = None
) -> dict[str, Any]:
    """
    Backup document for the selected sections (all of them by default).
    """
    chosen = list(SECTIONS) if sections is None else list(sections)
    unknown = [s for s in chosen if s not in SECTIONS]
    if unknown:
        raise ValueError(f"Unknown backup section(s): {', '.join(unknown)}")

    now = now or datetime.now(timezone.utc)
    snapshots = to_snapshots(state)
    doc: dict[str, Any] = {"timestamp": now.isoformat()}
    for section in chosen:
        for key in SECTIONS[section]:
            doc[key] = snapshots[key]
    return doc


def write_backup(doc: dict[str, Any], out_path: str | Path) -> Path:
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(doc, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Backup written to %s", out)
    return out


def read_backup(path: str | Path) -> dict[str, Any]:
    """
    Read and validate a backup file. Raises BackupError.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise BackupError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise BackupError(f"{path} is not valid JSON") from exc
    validate_backup(data)
    return data


def validate_backup(data: Any) -> None:
    if not isinstance(data, dict) or not data.get("timestamp"):
        raise BackupError("The file does not look like a CuliPlan backup (no timestamp)")

    for key, (_, from_dict) in LIST_FIELDS.items():
        if data.get(key) is not None and parse_list(data[key], from_dict) is None:
            raise BackupError(f"Backup section '{key}' is malformed")
    for key, (_, from_dict) in OBJECT_FIELDS.items():
        if data.get(key) is not None and parse_object(data[key], from_dict) is None:
            raise BackupError(f"Backup section '{key}' is malformed")


def apply_backup(state: AppState, data: dict[str, Any]) -> AppState:
    """
    Restore a validated backup on top of `state`.
    """
    validate_backup(data)
    restored = merge_snapshots(state, data)
    logger.info("Restored backup from %s", data.get("timestamp"))
    return restored
