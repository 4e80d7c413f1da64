"""
timecalc.py — Parse HH:MM text and compute delays to the next occurrence.

Everything here is pure: callers pass ``now`` explicitly (or let it default
to the local clock) so the arithmetic can be tested with fixed datetimes.
"""
from __future__ import annotations

import math
import re
from datetime import datetime, timedelta
from enum import IntEnum
from typing import NamedTuple, Optional, Union

SECONDS_PER_DAY = 24 * 3600
WEEK_SECONDS    = 7 * SECONDS_PER_DAY

_TIME_RE = re.compile(r"([0-9]{2}):([0-9]{2})")


# ── Errors ─────────────────────────────────────────────────────────────────
class ParseError(ValueError):
    """Time text is not ``HH:MM`` or hour/minute is out of range."""


class UnknownWeekday(ValueError):
    """A weekday label is not one of the seven canonical names."""


# ── Types ──────────────────────────────────────────────────────────────────
class Weekday(IntEnum):
    MONDAY    = 0
    TUESDAY   = 1
    WEDNESDAY = 2
    THURSDAY  = 3
    FRIDAY    = 4
    SATURDAY  = 5
    SUNDAY    = 6

    @property
    def label(self) -> str:
        """Storage key, e.g. ``"Monday"``."""
        return self.name.capitalize()

    @classmethod
    def from_name(cls, name: str) -> "Weekday":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise UnknownWeekday(f"Unknown weekday: {name!r}") from None

    @classmethod
    def of(cls, moment: datetime) -> "Weekday":
        return cls(moment.weekday())


class TimeOfDay(NamedTuple):
    hour:   int
    minute: int

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def on(self, moment: datetime) -> datetime:
        """This time of day on *moment*'s calendar date."""
        return moment.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)


TimeLike    = Union[str, TimeOfDay]
WeekdayLike = Union[str, Weekday]


# ── Parsing ────────────────────────────────────────────────────────────────
def parse_time(text: str) -> TimeOfDay:
    """Parse ``HH:MM`` (24h). Leading/trailing whitespace is ignored.

    Raises:
        ParseError: if the shape is wrong or hour/minute are out of range.
    """
    if not isinstance(text, str):
        raise ParseError(f"Expected HH:MM text, got {type(text).__name__}")
    m = _TIME_RE.fullmatch(text.strip())
    if m is None:
        raise ParseError(f'Invalid time "{text}". Use HH:MM (24h format).')
    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        raise ParseError(f'Time out of range: "{text}"')
    return TimeOfDay(hour, minute)


def _as_time(value: TimeLike) -> TimeOfDay:
    if isinstance(value, TimeOfDay):
        return value
    return parse_time(value)


def _as_weekday(value: WeekdayLike) -> Weekday:
    if isinstance(value, Weekday):
        return value
    return Weekday.from_name(value)


# ── Delays ─────────────────────────────────────────────────────────────────
def _seconds(delta: timedelta) -> int:
    # floor, so being a fraction of a second past the target never rounds back onto it
    return math.floor(delta.total_seconds())


def delay_until(time_of_day: TimeLike, now: Optional[datetime] = None) -> int:
    """Seconds from *now* until the next *time_of_day*.

    Today if the time is still ahead, otherwise the same time tomorrow.
    Never negative.
    """
    t = _as_time(time_of_day)
    now = now or datetime.now()
    target = t.on(now)
    if target <= now:
        target += timedelta(days=1)
    return _seconds(target - now)


def delay_until_weekday(
    time_of_day: TimeLike,
    weekday:     WeekdayLike,
    now:         Optional[datetime] = None,
) -> int:
    """Seconds from *now* until the next *weekday* at *time_of_day*.

    A target on today's weekday whose time has already passed resolves to
    one week from now, not tomorrow; one that is exactly now resolves to 0.
    For any other weekday the day distance alone decides, whether or not the
    time-of-day is behind ``now``.
    """
    t = _as_time(time_of_day)
    day = _as_weekday(weekday)
    now = now or datetime.now()

    days_to_wait = (day - Weekday.of(now)) % 7
    target = t.on(now)
    base = _seconds(target - now)

    if days_to_wait == 0 and target < now:
        return base + WEEK_SECONDS

    total = base + days_to_wait * SECONDS_PER_DAY
    if total < 0:
        total += SECONDS_PER_DAY
    return total
