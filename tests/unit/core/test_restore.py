"""Unit tests for restore point creation."""

import subprocess
from unittest.mock import patch

import pytest
from wupctl.core.restore import RestorePointError, create_restore_point
from wupctl.utils.shell import CommandResult


class TestCreateRestorePoint:
    """Tests for create_restore_point."""

    def test_success(self) -> None:
        """A successful Checkpoint-Computer call returns normally."""
        with (
            patch("wupctl.core.restore.command_exists", return_value=True),
            patch("wupctl.core.restore.run_powershell") as mock_ps,
        ):
            mock_ps.return_value = CommandResult(stdout="", stderr="", returncode=0)

            create_restore_point("before updates")

        script = mock_ps.call_args[0][0]
        assert "Checkpoint-Computer" in script
        assert "'before updates'" in script

    def test_description_quotes_are_escaped(self) -> None:
        """Single quotes cannot break out of the PowerShell string."""
        with (
            patch("wupctl.core.restore.command_exists", return_value=True),
            patch("wupctl.core.restore.run_powershell") as mock_ps,
        ):
            mock_ps.return_value = CommandResult(stdout="", stderr="", returncode=0)

            create_restore_point("it's fine")

        assert "'it''s fine'" in mock_ps.call_args[0][0]

    def test_missing_powershell(self) -> None:
        """Without PowerShell no restore point can be created."""
        with (
            patch("wupctl.core.restore.command_exists", return_value=False),
            pytest.raises(RestorePointError, match="PowerShell"),
        ):
            create_restore_point("x")

    def test_failure_raises(self) -> None:
        """A failing checkpoint raises with the captured output."""
        with (
            patch("wupctl.core.restore.command_exists", return_value=True),
            patch("wupctl.core.restore.run_powershell") as mock_ps,
        ):
            mock_ps.return_value = CommandResult(
                stdout="", stderr="Access is denied", returncode=1
            )

            with pytest.raises(RestorePointError, match="Access is denied"):
                create_restore_point("x")

    def test_timeout_raises(self) -> None:
        """A hanging checkpoint raises RestorePointError."""
        with (
            patch("wupctl.core.restore.command_exists", return_value=True),
            patch(
                "wupctl.core.restore.run_powershell",
                side_effect=subprocess.TimeoutExpired(cmd="powershell", timeout=900),
            ),
            pytest.raises(RestorePointError, match="timed out"),
        ):
            create_restore_point("x")
