"""
registry.py — Append-only overview of every countdown that was scheduled.

Countdown threads and the UI read/write it concurrently, so every access
goes through one lock.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from core.countdown import CountdownTask
from core.timecalc import Weekday


@dataclass(frozen=True)
class TaskRecord:
    """What was scheduled, for display only."""
    time_text: str
    delay:     int
    weekday:   Optional[Weekday] = None
    recurring: bool = False
    recorded_at: datetime = field(default_factory=datetime.now)

    @property
    def is_manual(self) -> bool:
        return self.weekday is None

    def describe(self) -> str:
        when = self.weekday.label if self.weekday is not None else "Once"
        return f"{when} {self.time_text} (in {self.delay} s at {self.recorded_at:%H:%M:%S})"


class TaskRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: List[TaskRecord] = []
        self._handles: List[CountdownTask] = []

    def record(self, descriptor: TaskRecord) -> None:
        with self._lock:
            self._records.append(descriptor)

    def list(self) -> List[TaskRecord]:
        """All records, oldest first."""
        with self._lock:
            return list(self._records)

    def track(self, handle: CountdownTask) -> None:
        with self._lock:
            self._handles.append(handle)

    def handles(self) -> List[CountdownTask]:
        with self._lock:
            return list(self._handles)

    def active(self) -> List[CountdownTask]:
        return [h for h in self.handles() if h.is_active and not h.cancelled]

    def recurring_handles(self) -> List[CountdownTask]:
        return [h for h in self.handles() if h.recurring and not h.cancelled]
