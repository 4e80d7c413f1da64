"""
main.py — Entry point for weekly-shutdown.

Flow
----
1. Load the weekly schedule from storage (empty if missing or broken).
2. Start the tray icon; it shows warnings and keeps the process alive.
3. Activate one recurring countdown per active weekday.
4. Unless ``--headless``: show the ScheduleWindow, where the user can
     – plan a one-time shutdown at HH:MM,
     – edit, save and re-activate the weekly schedule,
     – reload the schedule from disk and re-activate it,
     – browse every shutdown planned so far.
5. After the window closes, wait in the tray until "Quit" is picked.
   Countdowns run on daemon threads and power the machine off when due.
"""
from __future__ import annotations

import argparse
import ctypes
import logging
import os
import sys
import threading
from pathlib import Path
from typing import List, Optional

from core import shutdown, storage
from core.controller import ShutdownController
from core.scheduler import Scheduler
from gui.schedule_window import ScheduleWindow
from gui.tray import ShutdownTray

logger = logging.getLogger("weekly_shutdown")


# ── Admin elevation ────────────────────────────────────────────────────────
def _pythonw_exe() -> str:
    """Return path to pythonw.exe next to the current python.exe."""
    return os.path.join(os.path.dirname(sys.executable), "pythonw.exe")


def _ensure_admin(argv: List[str]) -> None:
    """On Windows, re-launch elevated (no console) and exit if not elevated."""
    if sys.platform != "win32":
        return
    try:
        is_admin = ctypes.windll.shell32.IsUserAnAdmin()
    except (AttributeError, OSError):
        is_admin = False

    if not is_admin:
        passthrough = " ".join(f'"{a}"' for a in argv)
        if getattr(sys, "frozen", False):
            exe  = sys.executable
            args = passthrough
        else:
            # Use pythonw.exe so the elevated copy has NO console window
            exe  = _pythonw_exe()
            args = f'"{os.path.abspath(__file__)}" {passthrough}'.strip()
        ctypes.windll.shell32.ShellExecuteW(None, "runas", exe, args, None, 1)
        sys.exit(0)


# ── CLI ────────────────────────────────────────────────────────────────────
def _parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="weekly-shutdown",
        description="Schedule one-time and weekly power-offs for this machine.",
    )
    parser.add_argument("--config", type=Path, default=None,
                        help=f"schedule file (default: {storage.config_path()})")
    parser.add_argument("--headless", action="store_true",
                        help="activate the stored schedule without opening the window")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(threadName)s %(name)s: %(message)s",
    )


# ══════════════════════════════════════════════════════════════════════════
# Entry
# ══════════════════════════════════════════════════════════════════════════
def main(argv: Optional[List[str]] = None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    args = _parse_args(argv)
    _setup_logging(args.verbose)
    # Powering off needs elevation on Windows
    _ensure_admin(argv)

    quit_event = threading.Event()
    sched: Optional[Scheduler] = None

    def status() -> str:
        return sched.status_line() if sched is not None else "Starting…"

    tray = ShutdownTray(status=status, on_quit=quit_event.set)
    sched = Scheduler(notify=tray.notify, shutdown=shutdown.execute_shutdown)
    controller = ShutdownController(sched, config=args.config)

    tray.start()
    logger.info(controller.activate())
    tray.refresh()

    if not args.headless:
        def on_manual(text: str) -> str:
            msg = controller.schedule_manual(text)
            tray.refresh()
            return msg

        def on_save(rows):
            result = controller.save(rows)
            tray.refresh()
            return result

        def on_reload():
            result = controller.reload()
            tray.refresh()
            return result

        win = ScheduleWindow(
            schedule=controller.schedule,
            on_manual=on_manual,
            on_save=on_save,
            on_reload=on_reload,
            overview=controller.overview,
        )
        win.run()   # blocks until the window is closed

    if not sched.registry.active():
        logger.info("No shutdown armed, exiting")
        tray.stop()
        return

    logger.info("Running in the tray until Quit")
    quit_event.wait()


if __name__ == "__main__":
    main()
