"""
test_countdown.py — Unit tests for core/countdown.py.

Cycle logic is driven through an injected wait function so no real time
passes; a couple of tests use real threads with sub-second delays.
"""
from __future__ import annotations

import threading
from typing import List

import pytest

from core.countdown import WARNING_LEAD_SECONDS, CountdownTask
from core.timecalc import WEEK_SECONDS, Weekday


# ── Helpers ────────────────────────────────────────────────────────────────
class _Timeline:
    """Records waits and callbacks in order; cancels after *max_waits* waits."""

    def __init__(self, max_waits: int = 100) -> None:
        self.events: List[object] = []
        self.max_waits = max_waits
        self.waits = 0

    def wait(self, timeout: float) -> bool:
        self.waits += 1
        if self.waits > self.max_waits:
            return True
        self.events.append(("wait", timeout))
        return False

    def warn(self) -> None:
        self.events.append("warning")

    def shutdown(self) -> None:
        self.events.append("shutdown")


class _Flag:
    def __init__(self) -> None:
        self.count = 0
        self.event = threading.Event()

    def trigger(self) -> None:
        self.count += 1
        self.event.set()

    def wait(self, timeout: float = 2.0) -> bool:
        return self.event.wait(timeout)


def _task(delay: float, tl: _Timeline, **kw) -> CountdownTask:
    return CountdownTask(delay, on_warning=tl.warn, on_shutdown=tl.shutdown, wait=tl.wait, **kw)


# ── Cycle logic ────────────────────────────────────────────────────────────
class TestOneShot:
    def test_warning_then_shutdown(self) -> None:
        tl = _Timeline()
        task = _task(301, tl)
        task.run()
        assert tl.events == [("wait", 1), "warning", ("wait", 300), "shutdown"]
        assert task.cycles == 1

    def test_short_delay_skips_warning(self) -> None:
        tl = _Timeline()
        _task(200, tl).run()
        assert tl.events == [("wait", 200), "shutdown"]

    def test_delay_equal_to_lead_skips_warning(self) -> None:
        tl = _Timeline()
        _task(WARNING_LEAD_SECONDS, tl).run()
        assert tl.events == [("wait", WARNING_LEAD_SECONDS), "shutdown"]

    def test_zero_delay(self) -> None:
        tl = _Timeline()
        _task(0, tl).run()
        assert tl.events == [("wait", 0), "shutdown"]

    def test_custom_lead(self) -> None:
        tl = _Timeline()
        _task(100, tl, warning_lead=30).run()
        assert tl.events == [("wait", 70), "warning", ("wait", 30), "shutdown"]

    def test_rejects_negative_delay(self) -> None:
        with pytest.raises(ValueError):
            CountdownTask(-1, on_warning=lambda: None, on_shutdown=lambda: None)


class TestRecurring:
    def test_rearms_for_a_week(self) -> None:
        tl = _Timeline(max_waits=4)
        task = _task(301, tl, recurring=True, weekday=Weekday.MONDAY)
        task.run()
        assert tl.events == [
            ("wait", 1), "warning", ("wait", 300), "shutdown",
            ("wait", WEEK_SECONDS - 300), "warning", ("wait", 300), "shutdown",
        ]
        assert task.cycles == 2

    def test_short_first_delay_then_full_week(self) -> None:
        tl = _Timeline(max_waits=3)
        _task(200, tl, recurring=True).run()
        assert tl.events == [
            ("wait", 200), "shutdown",
            ("wait", WEEK_SECONDS - 300), "warning", ("wait", 300), "shutdown",
        ]

    def test_cancel_mid_cycle_skips_shutdown(self) -> None:
        tl = _Timeline(max_waits=1)
        task = _task(301, tl, recurring=True)
        task.run()
        assert tl.events == [("wait", 1), "warning"]
        assert task.cycles == 0

    def test_callback_errors_propagate(self) -> None:
        def boom() -> None:
            raise RuntimeError("notifier failed")

        task = CountdownTask(301, on_warning=boom, on_shutdown=lambda: None,
                             wait=lambda _t: False)
        with pytest.raises(RuntimeError):
            task.run()


# ── Threads ────────────────────────────────────────────────────────────────
class TestThreaded:
    def test_fires_on_background_thread(self) -> None:
        flag = _Flag()
        task = CountdownTask(0.2, on_warning=lambda: None, on_shutdown=flag.trigger).start()
        assert flag.wait(timeout=2.0), "Shutdown was not called within timeout"
        task.join(timeout=1.0)
        assert not task.is_active
        assert flag.count == 1

    def test_start_returns_handle(self) -> None:
        task = CountdownTask(60, on_warning=lambda: None, on_shutdown=lambda: None)
        assert task.start() is task
        assert task.is_active
        task.cancel()

    def test_cancel_stops_thread(self) -> None:
        flag = _Flag()
        task = CountdownTask(60, on_warning=flag.trigger, on_shutdown=flag.trigger).start()
        task.cancel()
        task.join(timeout=1.0)
        assert not task.is_active
        assert flag.count == 0

    def test_cancel_is_idempotent(self) -> None:
        task = CountdownTask(60, on_warning=lambda: None, on_shutdown=lambda: None).start()
        task.cancel()
        task.cancel()   # should not raise
        assert task.cancelled

    def test_rejects_double_start(self) -> None:
        task = CountdownTask(60, on_warning=lambda: None, on_shutdown=lambda: None).start()
        with pytest.raises(RuntimeError):
            task.start()
        task.cancel()

    def test_time_remaining(self) -> None:
        task = CountdownTask(600, on_warning=lambda: None, on_shutdown=lambda: None)
        assert task.time_remaining() is None
        task.start()
        try:
            for _ in range(50):
                if task.time_remaining() is not None:
                    break
                threading.Event().wait(0.01)
            rem = task.time_remaining()
            assert rem is not None
            assert 0 < rem.total_seconds() <= 600
        finally:
            task.cancel()

    def test_thread_name_mentions_weekday(self) -> None:
        task = CountdownTask(60, on_warning=lambda: None, on_shutdown=lambda: None,
                             recurring=True, weekday=Weekday.FRIDAY).start()
        try:
            assert task._thread is not None
            assert task._thread.name == "shutdown-friday"
        finally:
            task.cancel()
