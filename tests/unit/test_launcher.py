"""
Unit tests for ProcessLauncher.
"""

import logging

import pytest
from unittest.mock import Mock, patch

from rdesktop_plugin.exceptions import SpawnError
from rdesktop_plugin.launcher import ProcessLauncher


class TestProcessLauncher:
    """Test cases for ProcessLauncher.spawn."""

    @patch('rdesktop_plugin.launcher.subprocess.Popen')
    def test_spawn_success(self, mock_popen):
        """Test a successful spawn returns the process handle."""
        process = Mock()
        process.pid = 4321
        mock_popen.return_value = process

        result = ProcessLauncher().spawn(["rdesktop", "-g", "1024x768", "srv"])

        assert result.process is process
        assert result.pid == 4321
        assert result.argv == ["rdesktop", "-g", "1024x768", "srv"]
        mock_popen.assert_called_once_with(["rdesktop", "-g", "1024x768", "srv"], shell=False)
        process.wait.assert_not_called()

    @patch('rdesktop_plugin.launcher.subprocess.Popen')
    def test_spawn_logs_actual_pid(self, mock_popen, caplog):
        """Test the pid value is what gets logged."""
        mock_popen.return_value = Mock(pid=9876)

        with caplog.at_level(logging.INFO, logger="rdesktop_plugin"):
            ProcessLauncher().spawn(["rdesktop", "srv"])

        assert any("pid 9876" in record.getMessage() for record in caplog.records)

    @patch('rdesktop_plugin.launcher.subprocess.Popen')
    def test_password_redacted_in_log(self, mock_popen, caplog):
        """Test the password never reaches the log by default."""
        mock_popen.return_value = Mock(pid=1)

        with caplog.at_level(logging.INFO, logger="rdesktop_plugin"):
            ProcessLauncher().spawn(["rdesktop", "-p", "hunter2", "srv"])

        logged = [getattr(record, 'argv', None) for record in caplog.records]
        assert ["rdesktop", "-p", "********", "srv"] in logged
        assert all("hunter2" not in record.getMessage() for record in caplog.records)
        # The process itself still gets the real password
        assert mock_popen.call_args[0][0] == ["rdesktop", "-p", "hunter2", "srv"]

    def test_spawn_missing_binary(self):
        """Test a nonexistent binary raises SpawnError with the OS text."""
        with pytest.raises(SpawnError) as exc_info:
            ProcessLauncher().spawn(["rdesktop-missing-binary-19c2", "srv"])

        error = exc_info.value
        assert error.error_code == "SPAWN_FAILED"
        assert "rdesktop-missing-binary-19c2" in error.os_error
        assert error.details["executable"] == "rdesktop-missing-binary-19c2"
        assert isinstance(error.__cause__, OSError)

    @patch('rdesktop_plugin.launcher.subprocess.Popen')
    def test_spawn_permission_denied(self, mock_popen):
        """Test other OS errors are wrapped too."""
        mock_popen.side_effect = PermissionError(13, "Permission denied")

        with pytest.raises(SpawnError) as exc_info:
            ProcessLauncher().spawn(["rdesktop", "srv"])

        assert "Permission denied" in exc_info.value.os_error

    def test_spawn_empty_command(self):
        """Test an empty vector is rejected."""
        with pytest.raises(SpawnError):
            ProcessLauncher().spawn([])

    @patch('rdesktop_plugin.launcher.subprocess.Popen')
    def test_spawn_rejected_argument(self, mock_popen):
        """Test an argument the OS cannot take is wrapped as SpawnError."""
        mock_popen.side_effect = ValueError("embedded null byte")

        with pytest.raises(SpawnError) as exc_info:
            ProcessLauncher().spawn(["rdesktop", "-T", "a\x00b", "srv"])

        assert exc_info.value.os_error == 'Failed to execute child process "rdesktop" (embedded null byte)'
        assert isinstance(exc_info.value.__cause__, ValueError)
