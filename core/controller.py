"""
controller.py — Glue between the window/tray and the scheduler.

Every handler returns the status text the UI shows; nothing here touches
Tkinter, so the whole flow can be tested headless.
"""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from core import storage
from core.schedule import Schedule
from core.scheduler import Scheduler
from core.timecalc import ParseError

logger = logging.getLogger(__name__)


class ShutdownController:
    def __init__(self, scheduler: Scheduler, config: Optional[Path] = None) -> None:
        self.scheduler = scheduler
        self.config    = config
        self.schedule  = storage.load_schedule(config)

    def activate(self, now: Optional[datetime] = None) -> str:
        started = self.scheduler.activate(self.schedule, now)
        status = f"Weekly shutdowns activated ({len(started)} day(s))."
        if self.scheduler.diagnostics:
            status += " Skipped: " + "; ".join(self.scheduler.diagnostics)
        return status

    def schedule_manual(self, time_text: str, now: Optional[datetime] = None) -> str:
        try:
            task = self.scheduler.schedule_manual(time_text, now)
        except ParseError as exc:
            logger.warning("Manual shutdown rejected: %s", exc)
            return str(exc)
        return f"Shutdown at {time_text.strip()} in {task.delay} seconds."

    def save(self, rows: Mapping[str, Tuple[bool, str]], now: Optional[datetime] = None) -> Tuple[bool, str]:
        """Replace the schedule with the editor's rows, persist, re-activate.

        If the file cannot be written, the schedule in memory and the armed
        countdowns stay as they were.
        """
        schedule, problems = Schedule.from_form(rows)
        try:
            storage.save_schedule(schedule, self.config)
        except OSError as exc:
            logger.error("Could not save schedule: %s", exc)
            return False, f"Could not save schedule: {exc}"
        self.schedule = schedule
        status = self.activate(now)
        if problems:
            return False, "Invalid time left empty: " + "; ".join(problems) + ". " + status
        return True, "Schedule saved. " + status

    def reload(self, now: Optional[datetime] = None) -> Tuple[Schedule, str]:
        self.schedule = storage.load_schedule(self.config)
        return self.schedule, self.activate(now)

    def overview(self) -> List[str]:
        lines = [record.describe() for record in self.scheduler.registry.list()]
        return lines or ["Nothing scheduled yet."]
