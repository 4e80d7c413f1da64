"""
shutdown.py — Forced power-off of the local machine.

Windows goes through ExitWindowsEx; everything else runs ``shutdown -h now``.
The public surface is intentionally minimal so tests can inject a mock
callback instead of ever touching the real OS.
"""
from __future__ import annotations

import ctypes
import logging
import subprocess
import sys
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# ── Windows constants ──────────────────────────────────────────────────────
EWX_POWEROFF            = 0x00000008
EWX_FORCE               = 0x00000004
SE_PRIVILEGE_ENABLED    = 0x00000002
TOKEN_ADJUST_PRIVILEGES = 0x00000020
TOKEN_QUERY             = 0x00000008
SHTDN_REASON_FLAG_PLANNED = 0x80000000

POSIX_COMMAND = ["shutdown", "-h", "now"]

# DWORD / LONG / HANDLE, spelled without ctypes.wintypes so the module
# imports on every platform.
_DWORD  = ctypes.c_ulong
_LONG   = ctypes.c_long
_HANDLE = ctypes.c_void_p


# ── Internal structures ────────────────────────────────────────────────────
class _LUID(ctypes.Structure):
    _fields_ = [("LowPart", _DWORD), ("HighPart", _LONG)]


class _LUID_AND_ATTRIBUTES(ctypes.Structure):
    _fields_ = [("Luid", _LUID), ("Attributes", _DWORD)]


class _TOKEN_PRIVILEGES(ctypes.Structure):
    _fields_ = [
        ("PrivilegeCount", _DWORD),
        ("Privileges", _LUID_AND_ATTRIBUTES * 1),
    ]


# ── Privilege helper ───────────────────────────────────────────────────────
def request_shutdown_privilege() -> None:
    """Enable SeShutdownPrivilege for the current process token.

    Required before calling ExitWindowsEx. The privilege usually exists in
    the token already but must be *enabled* explicitly.
    """
    advapi32 = ctypes.windll.advapi32
    kernel32 = ctypes.windll.kernel32

    h_token = _HANDLE()
    advapi32.OpenProcessToken(
        kernel32.GetCurrentProcess(),
        TOKEN_ADJUST_PRIVILEGES | TOKEN_QUERY,
        ctypes.byref(h_token),
    )

    luid = _LUID()
    advapi32.LookupPrivilegeValueW(None, "SeShutdownPrivilege", ctypes.byref(luid))

    tp = _TOKEN_PRIVILEGES()
    tp.PrivilegeCount = 1
    tp.Privileges[0].Luid = luid
    tp.Privileges[0].Attributes = SE_PRIVILEGE_ENABLED

    advapi32.AdjustTokenPrivileges(h_token, False, ctypes.byref(tp), 0, None, None)
    kernel32.CloseHandle(h_token)


# ── Public API ─────────────────────────────────────────────────────────────
def execute_shutdown(_override: Optional[Callable[[], None]] = None) -> None:
    """Power the machine off now.

    Args:
        _override: If provided, call this instead of the real OS call.
                   Used exclusively in unit tests — never pass this in
                   production code.
    """
    if _override is not None:
        _override()
        return

    logger.warning("Powering off (%s)", sys.platform)
    if sys.platform == "win32":
        request_shutdown_privilege()
        ctypes.windll.user32.ExitWindowsEx(
            EWX_POWEROFF | EWX_FORCE,
            SHTDN_REASON_FLAG_PLANNED,
        )
    else:
        result = subprocess.run(POSIX_COMMAND, check=False)
        if result.returncode != 0:
            logger.warning("%s exited with %d (root required?)", " ".join(POSIX_COMMAND), result.returncode)
