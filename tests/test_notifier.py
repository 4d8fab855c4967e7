"""Tests for the notification module."""

import os
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from hoarder_sync.core.notifier import get_notify_command, notify, notify_sync_result


@pytest.fixture
def fake_notify(tmp_path):
    """Executable stand-in for the notify command."""
    script = tmp_path / "notify"
    script.write_text("#!/bin/sh\nexit 0\n")
    script.chmod(0o755)
    with patch.dict(os.environ, {"HOARDER_NOTIFY_CMD": str(script)}):
        yield script


class TestGetNotifyCommand:
    """Tests for get_notify_command."""

    def test_returns_default_path(self):
        with patch.dict(os.environ, {}, clear=True):
            assert get_notify_command().endswith(os.path.join(".local", "bin", "notify"))

    def test_returns_env_var_when_set(self):
        with patch.dict(os.environ, {"HOARDER_NOTIFY_CMD": "/custom/notify"}):
            assert get_notify_command() == "/custom/notify"


class TestNotify:
    """Tests for notify function."""

    def test_notify_calls_command(self, fake_notify):
        with patch("hoarder_sync.core.notifier.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)

            assert notify("Test message", "info") is True

        args = mock_run.call_args[0][0]
        assert args == [str(fake_notify), "Test message", "info"]

    def test_notify_handles_missing_command(self, tmp_path):
        with patch.dict(os.environ, {"HOARDER_NOTIFY_CMD": str(tmp_path / "missing")}):
            with patch("hoarder_sync.core.notifier.subprocess.run") as mock_run:
                assert notify("x") is False

        mock_run.assert_not_called()

    def test_notify_handles_nonzero_exit(self, fake_notify):
        with patch("hoarder_sync.core.notifier.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=1, stderr="failed")

            assert notify("x") is False

    def test_notify_handles_timeout(self, fake_notify):
        with patch("hoarder_sync.core.notifier.subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired(cmd="notify", timeout=10)

            assert notify("x") is False

    def test_notify_handles_os_error(self, fake_notify):
        with patch("hoarder_sync.core.notifier.subprocess.run") as mock_run:
            mock_run.side_effect = PermissionError("denied")

            assert notify("x") is False

    def test_runs_real_command(self, fake_notify):
        assert notify("Real run", "done") is True


class TestNotifySyncResult:
    def test_success_uses_done(self, fake_notify):
        with patch("hoarder_sync.core.notifier.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)

            notify_sync_result(True, "Successfully synced 1 bookmark")

        assert mock_run.call_args[0][0][1:] == ["Successfully synced 1 bookmark", "done"]

    def test_failure_uses_error(self, fake_notify):
        with patch("hoarder_sync.core.notifier.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)

            notify_sync_result(False, "Error syncing: boom")

        assert mock_run.call_args[0][0][2] == "error"
