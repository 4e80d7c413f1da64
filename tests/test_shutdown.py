"""
test_shutdown.py — Unit tests for core/shutdown.py.

The real ExitWindowsEx / shutdown command is NEVER invoked.
We only test:
  1. That execute_shutdown calls the _override if provided.
  2. That the Windows path enables the privilege and calls ExitWindowsEx
     (ctypes.windll replaced by mocks, so this runs on any OS).
  3. That other platforms run ``shutdown -h now`` (subprocess.run mocked).
"""
from __future__ import annotations

import ctypes
import logging
import subprocess
from unittest.mock import MagicMock

import pytest

import core.shutdown as sd


@pytest.fixture
def fake_windll(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    windll = MagicMock()
    windll.kernel32.GetCurrentProcess.return_value = 0xDEAD
    monkeypatch.setattr(ctypes, "windll", windll, raising=False)
    return windll


class TestExecuteShutdown:
    def test_calls_override_if_provided(self) -> None:
        called = []
        sd.execute_shutdown(_override=lambda: called.append(True))
        assert called == [True]

    def test_override_receives_no_arguments(self) -> None:
        mock_fn = MagicMock()
        sd.execute_shutdown(_override=mock_fn)
        mock_fn.assert_called_once_with()

    def test_windows_path(self, monkeypatch: pytest.MonkeyPatch, fake_windll: MagicMock) -> None:
        monkeypatch.setattr(sd.sys, "platform", "win32")
        sd.execute_shutdown()   # must NOT raise

        fake_windll.user32.ExitWindowsEx.assert_called_once_with(
            sd.EWX_POWEROFF | sd.EWX_FORCE,
            sd.SHTDN_REASON_FLAG_PLANNED,
        )
        assert fake_windll.advapi32.AdjustTokenPrivileges.called

    def test_posix_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        run = MagicMock(return_value=subprocess.CompletedProcess(sd.POSIX_COMMAND, 0))
        monkeypatch.setattr(sd.sys, "platform", "linux")
        monkeypatch.setattr(sd.subprocess, "run", run)
        sd.execute_shutdown()
        run.assert_called_once_with(["shutdown", "-h", "now"], check=False)

    def test_posix_failure_is_logged(self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
        run = MagicMock(return_value=subprocess.CompletedProcess(sd.POSIX_COMMAND, 1))
        monkeypatch.setattr(sd.sys, "platform", "linux")
        monkeypatch.setattr(sd.subprocess, "run", run)
        with caplog.at_level(logging.WARNING, logger="core.shutdown"):
            sd.execute_shutdown()   # must NOT raise
        assert any("exited with 1" in r.getMessage() for r in caplog.records)


class TestRequestShutdownPrivilege:
    def test_runs_without_error_when_mocked(self, fake_windll: MagicMock) -> None:
        """Exercise the privilege-adjustment code path with mocked Win32 calls."""
        sd.request_shutdown_privilege()   # must NOT raise

        assert fake_windll.advapi32.OpenProcessToken.called
        assert fake_windll.advapi32.LookupPrivilegeValueW.called
        assert fake_windll.advapi32.AdjustTokenPrivileges.called
        fake_windll.kernel32.CloseHandle.assert_called_once()

