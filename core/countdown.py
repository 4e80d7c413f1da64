"""
countdown.py — One countdown per scheduled shutdown, run on its own thread.

Uses a threading.Event for both waits so a task can be cancelled instantly
with no busy-loop.
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from core.timecalc import WEEK_SECONDS, Weekday

logger = logging.getLogger(__name__)

WARNING_LEAD_SECONDS = 300

# wait(timeout) -> True if the task was cancelled while waiting
WaitFn = Callable[[float], bool]


class CountdownTask:
    """Waits out *delay* seconds, warns, then calls *on_shutdown*.

    With ``delay > warning_lead`` the warning fires ``warning_lead`` seconds
    before shutdown; otherwise only the shutdown fires. A recurring task
    re-arms for seven days after each shutdown and never ends on its own.

    Usage::

        t = CountdownTask(600, on_warning=warn, on_shutdown=power_off).start()
        # … later, if needed …
        t.cancel()

    The object returned by :meth:`start` is the task's handle.
    """

    def __init__(
        self,
        delay:        float,
        on_warning:   Callable[[], None],
        on_shutdown:  Callable[[], None],
        recurring:    bool = False,
        weekday:      Optional[Weekday] = None,
        warning_lead: float = WARNING_LEAD_SECONDS,
        wait:         Optional[WaitFn] = None,
    ) -> None:
        if delay < 0:
            raise ValueError("delay must not be negative")
        self.delay        = delay
        self.recurring    = recurring
        self.weekday      = weekday
        self.warning_lead = warning_lead
        self._on_warning  = on_warning
        self._on_shutdown = on_shutdown
        self._cancel_event = threading.Event()
        self._wait: WaitFn = wait or self._cancel_event.wait
        self._thread: Optional[threading.Thread] = None
        self._fire_at: Optional[datetime] = None
        self.cycles = 0

    # ── Public API ─────────────────────────────────────────────────────────
    def start(self) -> "CountdownTask":
        """Run the countdown on a daemon thread and return ``self``."""
        if self.is_active:
            raise RuntimeError("Countdown is already running")
        self._thread = threading.Thread(target=self.run, daemon=True, name=self._thread_name())
        self._thread.start()
        return self

    def cancel(self) -> None:
        """Stop at the next wait. Safe to call more than once."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def is_active(self) -> bool:
        """True while the background thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def time_remaining(self) -> Optional[timedelta]:
        """Time until the next shutdown, None before start, timedelta(0) if overdue."""
        if self._fire_at is None:
            return None
        delta = self._fire_at - datetime.now()
        return delta if delta.total_seconds() > 0 else timedelta(0)

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    # ── Cycle ──────────────────────────────────────────────────────────────
    def run(self) -> None:
        """Run cycles until a one-shot fires once or the task is cancelled."""
        delay = self.delay
        while not self.cancelled:
            self._fire_at = datetime.now() + timedelta(seconds=delay)
            if not self._run_cycle(delay):
                logger.debug("%s cancelled", self._thread_name())
                return
            self.cycles += 1
            if not self.recurring:
                return
            delay = WEEK_SECONDS

    def _run_cycle(self, delay: float) -> bool:
        """One warning/shutdown cycle. Returns False if cancelled mid-way."""
        if delay > self.warning_lead:
            if self._wait(delay - self.warning_lead):
                return False
            logger.info("Shutdown in %d seconds, warning user", self.warning_lead)
            self._on_warning()
            if self._wait(self.warning_lead):
                return False
        elif self._wait(delay):
            return False
        logger.info("Countdown elapsed, shutting down")
        self._on_shutdown()
        return True

    def _thread_name(self) -> str:
        if self.weekday is not None:
            return f"shutdown-{self.weekday.label.lower()}"
        return "shutdown-manual"
