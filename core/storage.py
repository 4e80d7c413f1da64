"""
storage.py — Load/save the weekly schedule as JSON.

Layout
------
  %LOCALAPPDATA%\\WeeklyShutdown\\config.json

  {
      "schedule": {
          "Monday": ["21:30"],
          "Tuesday": [""],
          ...
      }
  }

Only the first element of each list is used. A bare string is accepted too.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

from core.schedule import Schedule

logger = logging.getLogger(__name__)

# ── Storage location ───────────────────────────────────────────────────────
_APP_DIR     = Path(os.environ.get("LOCALAPPDATA", os.path.expanduser("~"))) / "WeeklyShutdown"
_CONFIG_FILE = _APP_DIR / "config.json"


def config_path() -> Path:
    return _CONFIG_FILE


# ── Public API ─────────────────────────────────────────────────────────────
def load_schedule(path: Optional[Path] = None) -> Schedule:
    """Read the schedule; missing or broken files give an all-inactive one."""
    path = Path(path) if path is not None else _CONFIG_FILE
    if not path.exists():
        logger.info("No schedule at %s, starting empty", path)
        return Schedule.empty()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Schedule(_entries_from_json(data))
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
        logger.warning("Could not read schedule from %s (%s), starting empty", path, exc)
        return Schedule.empty()


def save_schedule(schedule: Schedule, path: Optional[Path] = None) -> None:
    """Write *schedule* through a temp file so a crash never leaves half a file."""
    path = Path(path) if path is not None else _CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"schedule": {day: [text] for day, text in schedule.items()}}
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp.write_text(json.dumps(payload, indent=4), encoding="utf-8")
        os.replace(tmp, path)
    finally:
        tmp.unlink(missing_ok=True)
    logger.info("Schedule saved to %s", path)


# ── Internal helpers ───────────────────────────────────────────────────────
def _entries_from_json(data: object) -> Dict[str, str]:
    schedule = data["schedule"]  # type: ignore[index]
    entries: Dict[str, str] = {}
    for day, value in schedule.items():
        if isinstance(value, list):
            value = value[0] if value else ""
        if value is not None and not isinstance(value, str):
            raise TypeError(f"{day}: expected a time string, got {type(value).__name__}")
        entries[str(day)] = value or ""
    return entries


# ── Test-friendly path overrides ───────────────────────────────────────────
def _override_paths(app_dir: Path, config_file: Path) -> None:  # pragma: no cover – test helper
    """Redirect storage to a temp directory during unit tests."""
    global _APP_DIR, _CONFIG_FILE
    _APP_DIR     = app_dir
    _CONFIG_FILE = config_file
