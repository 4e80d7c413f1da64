"""
test_schedule_window.py — Checks on gui/schedule_window.py that need no display.

Only the module-level style tables are inspected; no Tk root is created.
"""
from __future__ import annotations

import pytest

pytest.importorskip("tkinter")

import gui.schedule_window as win  # noqa: E402


class TestStyleTables:
    def test_state_styles_have_base_styles(self) -> None:
        assert set(win._STATE_STYLES) <= set(win._STYLES)

    def test_run_button_is_bold_accent(self) -> None:
        run = win._STYLES["Run.TButton"]
        assert run["background"] == win._ACCENT
        assert run["font"] == ("Segoe UI", 10, "bold")

    def test_root_style_sets_palette(self) -> None:
        root = win._STYLES["."]
        assert (root["background"], root["foreground"]) == (win._BG, win._FG)
