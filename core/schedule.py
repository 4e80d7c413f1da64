"""
schedule.py — The weekly schedule: one ``HH:MM`` (or nothing) per weekday.
"""
from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from core.timecalc import ParseError, Weekday, parse_time

WEEKDAY_LABELS: Tuple[str, ...] = tuple(day.label for day in Weekday)


class Schedule:
    """Mapping of weekday label → time text; ``""`` means inactive.

    All seven weekdays are always present. Labels outside the canonical
    seven are kept as-is so activation can report them.
    """

    def __init__(self, entries: Optional[Mapping[str, Optional[str]]] = None) -> None:
        self._entries: Dict[str, str] = {label: "" for label in WEEKDAY_LABELS}
        for day, text in (entries or {}).items():
            self._entries[_canonical(day)] = (text or "").strip()

    @classmethod
    def empty(cls) -> "Schedule":
        return cls()

    @classmethod
    def from_form(cls, rows: Mapping[str, Tuple[bool, str]]) -> Tuple["Schedule", List[str]]:
        """Build a replacement schedule from editor rows ``day → (active, text)``.

        Inactive rows become empty. Active rows with invalid text also become
        empty and produce one message each in the returned list.
        """
        entries: Dict[str, str] = {}
        problems: List[str] = []
        for day, (active, text) in rows.items():
            entries[day] = ""
            if not active:
                continue
            try:
                entries[day] = str(parse_time(text))
            except ParseError as exc:
                problems.append(f"{day}: {exc}")
        return cls(entries), problems

    # ── Mapping-ish access ─────────────────────────────────────────────────
    def __getitem__(self, day: str) -> str:
        return self._entries[_canonical(day)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schedule):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"Schedule({self._entries!r})"

    def items(self) -> List[Tuple[str, str]]:
        return list(self._entries.items())

    def active_entries(self) -> List[Tuple[str, str]]:
        """Entries with non-empty time text, Monday first."""
        return [(day, text) for day, text in self._entries.items() if text]

    def is_active(self, day: str) -> bool:
        return bool(self[day])

    def to_dict(self) -> Dict[str, str]:
        return dict(self._entries)


def _canonical(day: str) -> str:
    """Normalise known weekday spellings; leave unknown labels untouched."""
    key = day.strip()
    for label in WEEKDAY_LABELS:
        if key.lower() == label.lower():
            return label
    return key
