"""
tray.py — System-tray icon that keeps the app alive while shutdowns are armed.

The icon is a minimal power symbol drawn with Pillow (no external asset
files needed). The tray also doubles as the warning notifier: ``notify``
shows a balloon, or a message box when the platform has no balloons.
"""
from __future__ import annotations

import ctypes
import logging
import sys
import threading
from typing import Callable, Optional

import pystray
from PIL import Image, ImageDraw

logger = logging.getLogger(__name__)

WARNING_TITLE = "Shutdown Warning"

_MB_OK          = 0x00000000
_MB_ICONWARNING = 0x00000030
_MB_TOPMOST     = 0x00040000


# ── Icon drawing ───────────────────────────────────────────────────────────
def _make_icon_image(size: int = 64) -> Image.Image:
    """Draw a power symbol as a PIL Image."""
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)

    cx, cy, r = size // 2, size // 2, size // 2 - 2
    draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=(40, 40, 60), outline=(180, 180, 220), width=2)
    ring = r * 0.55
    # Open ring with the gap at the top
    draw.arc([cx - ring, cy - ring, cx + ring, cy + ring], start=-60, end=240, fill=(243, 139, 168), width=4)
    top = cy - ring - 2
    draw.line([(cx, top), (cx, cy)], fill=(243, 139, 168), width=4)
    return img


def _message_box(message: str) -> None:
    ctypes.windll.user32.MessageBoxW(
        None, message, WARNING_TITLE, _MB_OK | _MB_ICONWARNING | _MB_TOPMOST,
    )


# ── Tray class ─────────────────────────────────────────────────────────────
class ShutdownTray:
    """Manages the system-tray icon.

    Args:
        status:  Returns the text shown as the greyed-out menu header.
        on_quit: Called when the user picks "Quit" from the menu.
    """

    def __init__(
        self,
        status:  Callable[[], str],
        on_quit: Optional[Callable[[], None]] = None,
    ) -> None:
        self._status  = status
        self._on_quit = on_quit
        self._icon: Optional[pystray.Icon] = None
        self._thread: Optional[threading.Thread] = None

    # ── Public API ─────────────────────────────────────────────────────────
    def start(self) -> None:
        """Start the tray icon in a daemon thread."""
        menu = pystray.Menu(
            pystray.MenuItem(lambda _item: self._status(), None, enabled=False),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Quit", self._quit_clicked),
        )
        self._icon = pystray.Icon(
            name="weekly-shutdown",
            icon=_make_icon_image(),
            title="Weekly Shutdown",
            menu=menu,
        )
        self._thread = threading.Thread(
            target=self._icon.run,
            daemon=True,
            name="tray-icon",
        )
        self._thread.start()

    def stop(self) -> None:
        """Remove the tray icon."""
        if self._icon is not None:
            self._icon.stop()
            self._icon = None

    def refresh(self) -> None:
        """Re-read the status text (menu header and tooltip)."""
        if self._icon is not None:
            self._icon.title = self._status()
            self._icon.update_menu()

    def notify(self, message: str) -> None:
        """Show *message* to the user without blocking the caller."""
        logger.warning(message.replace("\n", " "))
        if self._icon is not None and self._icon.HAS_NOTIFICATION:
            self._icon.notify(message, WARNING_TITLE)
        elif sys.platform == "win32":
            threading.Thread(
                target=_message_box, args=(message,), daemon=True, name="warning-box",
            ).start()

    # ── Menu handlers ──────────────────────────────────────────────────────
    def _quit_clicked(self, _icon: pystray.Icon, _item: pystray.MenuItem) -> None:
        self.stop()
        if self._on_quit is not None:
            self._on_quit()
