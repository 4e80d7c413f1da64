"""
schedule_window.py — Tkinter window for planning shutdowns.

Three tabs in a ttk.Notebook:
  Tab 1 – "Once"      : shut down at HH:MM (today or tomorrow)
  Tab 2 – "Weekly"    : per-weekday checkbox + HH:MM, save & activate
  Tab 3 – "Overview"  : every shutdown planned since the app started

The window stays open after each action; closing it leaves the armed
countdowns running in the tray.
"""
from __future__ import annotations

import tkinter as tk
from tkinter import messagebox, ttk
from datetime import datetime
from typing import Any, Callable, Dict, List, Tuple

from core.schedule import WEEKDAY_LABELS, Schedule
from core.timecalc import ParseError, parse_time


# ── Look ───────────────────────────────────────────────────────────────────
_BG     = "#1e1e2e"
_FG     = "#cdd6f4"
_ACCENT = "#89b4fa"
_ENTRY  = "#313244"
_TAB    = "#45475a"
_RED    = "#f38ba8"
_GREEN  = "#a6e3a1"
_FONT   = ("Segoe UI", 10)

# ttk style name → configure() options
_STYLES: Dict[str, Dict[str, Any]] = {
    ".":             {"background": _BG, "foreground": _FG, "font": _FONT},
    "TNotebook":     {"background": _BG, "borderwidth": 0},
    "TNotebook.Tab": {"background": _TAB, "foreground": _FG, "padding": [14, 4]},
    "TFrame":        {"background": _BG},
    "TLabel":        {"background": _BG, "foreground": _FG},
    "TCheckbutton":  {"background": _BG, "foreground": _FG},
    "TEntry":        {"fieldbackground": _ENTRY, "foreground": _FG, "insertcolor": _FG},
    "Run.TButton":   {"background": _ACCENT, "foreground": _BG,
                      "font": _FONT + ("bold",), "padding": [10, 5]},
}
# ttk style name → map() options, per widget state
_STATE_STYLES: Dict[str, Dict[str, Any]] = {
    "TNotebook.Tab": {"background": [("selected", _ACCENT)], "foreground": [("selected", _BG)]},
    "Run.TButton":   {"background": [("active", "#74c7ec"), ("pressed", "#74c7ec")]},
}

FormRows = Dict[str, Tuple[bool, str]]


class ScheduleWindow:
    """Main window.

    Args:
        schedule:   Schedule shown in the weekly tab on open.
        on_manual:  Called with the typed ``HH:MM``; returns a status line.
        on_save:    Called with ``day → (active, text)`` rows; returns
                    ``(all rows valid, status line)``.
        on_reload:  Reloads from storage and re-activates; returns
                    ``(schedule, status line)``.
        overview:   Returns the lines shown in the overview tab.
    """

    def __init__(
        self,
        schedule:  Schedule,
        on_manual: Callable[[str], str],
        on_save:   Callable[[FormRows], Tuple[bool, str]],
        on_reload: Callable[[], Tuple[Schedule, str]],
        overview:  Callable[[], List[str]],
    ) -> None:
        self._on_manual = on_manual
        self._on_save   = on_save
        self._on_reload = on_reload
        self._overview  = overview

        self._root = tk.Tk()
        self._root.title("Weekly Shutdown")
        self._root.resizable(False, False)
        self._root.configure(bg=_BG)
        self._root.protocol("WM_DELETE_WINDOW", self._on_close)

        # Centre on screen
        self._root.update_idletasks()
        w, h = 420, 440
        sw = self._root.winfo_screenwidth()
        sh = self._root.winfo_screenheight()
        self._root.geometry(f"{w}x{h}+{(sw-w)//2}+{(sh-h)//2}")

        self._build_styles()
        self._build_ui()
        self._fill_weekly(schedule)

    # ── Styles ─────────────────────────────────────────────────────────────
    def _build_styles(self) -> None:
        style = ttk.Style(self._root)
        style.theme_use("clam")
        for name, options in _STYLES.items():
            style.configure(name, **options)
        for name, states in _STATE_STYLES.items():
            style.map(name, **states)

    # ── UI construction ────────────────────────────────────────────────────
    def _build_ui(self) -> None:
        tk.Label(
            self._root, text="⏻  Weekly Shutdown",
            font=("Segoe UI", 14, "bold"),
            bg=_BG, fg=_ACCENT,
        ).pack(pady=(18, 4))

        nb = ttk.Notebook(self._root)
        nb.pack(fill="both", expand=True, padx=16, pady=(6, 16))

        self._tab_once(nb)
        self._tab_weekly(nb)
        self._tab_overview(nb)
        nb.bind("<<NotebookTabChanged>>", lambda _e: self._refresh_overview())

    def _tab_once(self, nb: ttk.Notebook) -> None:
        f = ttk.Frame(nb)
        nb.add(f, text="  Once  ")
        inner = ttk.Frame(f)
        inner.pack(pady=(24, 8))
        ttk.Label(inner, text="Shut down at").pack(side="left", padx=(0, 6))
        self._time_var = tk.StringVar(value=datetime.now().strftime("%H:%M"))
        ttk.Entry(inner, textvariable=self._time_var, width=7,
                  font=("Segoe UI", 11), justify="center").pack(side="left")
        ttk.Label(inner, text="(HH:MM, 24h)").pack(side="left", padx=(6, 0))

        ttk.Button(
            f, text="Schedule  ▶",
            style="Run.TButton",
            command=self._on_manual_click,
        ).pack(pady=8)
        self._manual_status = tk.Label(f, text="No manual shutdown scheduled.",
                                       bg=_BG, fg=_FG, wraplength=340)
        self._manual_status.pack(pady=8)

    def _tab_weekly(self, nb: ttk.Notebook) -> None:
        f = ttk.Frame(nb)
        nb.add(f, text="  Weekly  ")
        grid = ttk.Frame(f)
        grid.pack(pady=(12, 4))

        self._rows: Dict[str, Tuple[tk.BooleanVar, tk.StringVar]] = {}
        for i, day in enumerate(WEEKDAY_LABELS):
            active = tk.BooleanVar(value=False)
            text   = tk.StringVar(value="")
            ttk.Label(grid, text=f"{day}:").grid(row=i, column=0, sticky="w", padx=(0, 8), pady=2)
            ttk.Checkbutton(grid, variable=active).grid(row=i, column=1, pady=2)
            ttk.Entry(grid, textvariable=text, width=7, justify="center").grid(
                row=i, column=2, padx=(8, 0), pady=2)
            self._rows[day] = (active, text)

        btns = ttk.Frame(f)
        btns.pack(pady=6)
        ttk.Button(btns, text="Reload & activate",
                   command=self._on_reload_click).pack(side="left", padx=4)
        ttk.Button(btns, text="Save & activate",
                   style="Run.TButton",
                   command=self._on_save_click).pack(side="left", padx=4)
        self._weekly_status = tk.Label(f, text="", bg=_BG, fg=_FG, wraplength=340)
        self._weekly_status.pack(pady=4)

    def _tab_overview(self, nb: ttk.Notebook) -> None:
        f = ttk.Frame(nb)
        nb.add(f, text="  Overview  ")
        self._overview_list = tk.Listbox(
            f, bg=_ENTRY, fg=_FG, relief="flat", bd=4,
            font=_FONT, activestyle="none",
        )
        self._overview_list.pack(fill="both", expand=True, padx=8, pady=8)

    def _fill_weekly(self, schedule: Schedule) -> None:
        for day, (active, text) in self._rows.items():
            value = schedule[day]
            active.set(bool(value))
            text.set(value)

    def _refresh_overview(self) -> None:
        self._overview_list.delete(0, "end")
        for line in self._overview():
            self._overview_list.insert("end", line)

    # ── Button handlers ────────────────────────────────────────────────────
    def _on_manual_click(self) -> None:
        raw = self._time_var.get().strip()
        try:
            parse_time(raw)
        except ParseError:
            messagebox.showerror("Invalid time",
                                 f'Could not parse "{raw}".\nUse HH:MM (24h format).',
                                 parent=self._root)
            return
        self._manual_status.configure(text=self._on_manual(raw), fg=_GREEN)

    def _on_save_click(self) -> None:
        rows = self.form_rows()
        ok, status = self._on_save(rows)
        self._weekly_status.configure(text=status, fg=_GREEN if ok else _RED)

    def _on_reload_click(self) -> None:
        schedule, status = self._on_reload()
        self._fill_weekly(schedule)
        self._weekly_status.configure(text=status, fg=_GREEN)

    def form_rows(self) -> FormRows:
        return {day: (active.get(), text.get()) for day, (active, text) in self._rows.items()}

    def _on_close(self) -> None:
        """Window X button — close the window, countdowns keep running."""
        self._root.destroy()

    # ── Run ────────────────────────────────────────────────────────────────
    def run(self) -> None:
        """Enter the Tkinter event loop (blocks until window is destroyed)."""
        self._root.mainloop()

