"""
scheduler.py — Turn a weekly schedule or a typed HH:MM into running countdowns.

The scheduler knows nothing about how a warning is shown or how the machine
is powered off; both are passed in as plain callables.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from core.countdown import WARNING_LEAD_SECONDS, CountdownTask, WaitFn
from core.registry import TaskRecord, TaskRegistry
from core.schedule import Schedule
from core.timecalc import (
    ParseError,
    UnknownWeekday,
    Weekday,
    delay_until,
    delay_until_weekday,
    parse_time,
)

logger = logging.getLogger(__name__)

WARNING_MESSAGE = "The computer will shut down in 5 minutes!\nPlease save your work."


class Scheduler:
    """Spawns one countdown per active weekday and per manual request.

    Args:
        notify:           Called with the warning text before each shutdown.
        shutdown:         Called with no arguments when a countdown elapses.
        registry:         Overview of scheduled tasks; a fresh one if omitted.
        replace_existing: When True (the default), :meth:`activate` cancels
                          the recurring countdowns of the previous activation
                          before starting new ones. This deliberately departs
                          from the original tool, where re-activating only
                          added another set; pass False to keep that
                          behaviour and let duplicates coexist.
        wait:             Wait function handed to each countdown (tests only).
    """

    def __init__(
        self,
        notify:   Callable[[str], None],
        shutdown: Callable[[], None],
        registry: Optional[TaskRegistry] = None,
        warning_lead:     float = WARNING_LEAD_SECONDS,
        warning_message:  str = WARNING_MESSAGE,
        replace_existing: bool = True,
        wait:     Optional[WaitFn] = None,
    ) -> None:
        self._notify   = notify
        self._shutdown = shutdown
        self.registry  = registry if registry is not None else TaskRegistry()
        self.warning_lead     = warning_lead
        self.warning_message  = warning_message
        self.replace_existing = replace_existing
        self._wait = wait
        self.diagnostics: List[str] = []

    # ── Public API ─────────────────────────────────────────────────────────
    def activate(self, schedule: Schedule, now: Optional[datetime] = None) -> List[CountdownTask]:
        """Start a recurring countdown for every active weekday in *schedule*.

        Entries with an unknown weekday or bad time text are skipped; the
        reasons end up in :attr:`diagnostics`. Returns the started tasks.
        """
        now = now or datetime.now()
        self.diagnostics = []

        planned = []
        for day_name, text in schedule.active_entries():
            try:
                weekday = Weekday.from_name(day_name)
                delay = delay_until_weekday(text, weekday, now)
            except (UnknownWeekday, ParseError) as exc:
                logger.warning("Skipping schedule entry %s=%r: %s", day_name, text, exc)
                self.diagnostics.append(f"{day_name}: {exc}")
                continue
            planned.append((weekday, text, delay))

        if self.replace_existing:
            stale = self.registry.recurring_handles()
            for handle in stale:
                handle.cancel()
            if stale:
                logger.info("Cancelled %d previously armed weekly shutdown(s)", len(stale))

        started = []
        for weekday, text, delay in planned:
            logger.info("Scheduled shutdown: %s at %s in %d seconds", weekday.label, text, delay)
            self.registry.record(TaskRecord(text, delay, weekday=weekday, recurring=True))
            started.append(self._spawn(delay, recurring=True, weekday=weekday))
        return started

    def schedule_manual(self, time_text: str, now: Optional[datetime] = None) -> CountdownTask:
        """Start a one-shot countdown to the next *time_text* (``HH:MM``).

        Raises:
            ParseError: if *time_text* is invalid; nothing is scheduled.
        """
        t = parse_time(time_text)
        delay = delay_until(t, now)
        logger.info("Manual shutdown at %s in %d seconds", t, delay)
        self.registry.record(TaskRecord(str(t), delay))
        return self._spawn(delay, recurring=False)

    def status_line(self) -> str:
        active = self.registry.active()
        if not active:
            return "No shutdown scheduled"
        weekly = sum(1 for h in active if h.recurring)
        return f"{weekly} weekly, {len(active) - weekly} one-time shutdown(s) armed"

    # ── Internal ───────────────────────────────────────────────────────────
    def _warn(self) -> None:
        self._notify(self.warning_message)

    def _spawn(self, delay: int, recurring: bool, weekday: Optional[Weekday] = None) -> CountdownTask:
        task = CountdownTask(
            delay,
            on_warning=self._warn,
            on_shutdown=self._shutdown,
            recurring=recurring,
            weekday=weekday,
            warning_lead=self.warning_lead,
            wait=self._wait,
        )
        self.registry.track(task)
        return task.start()
