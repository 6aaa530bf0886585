"""Unit tests for undo command.

Tests for the CLI undo command implementation.
"""

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner
from wupctl.cli.main import app
from wupctl.models.history import HistoryActionType, HistoryEntry
from wupctl.models.outcome import UpgradeOutcome
from wupctl.models.package import PackageSource
from wupctl.scanners.base import SourceUnavailableError

runner = CliRunner()


@pytest.fixture
def reversible_entry() -> HistoryEntry:
    """A successful, reversible Winget upgrade."""
    return HistoryEntry(
        id="abc123456789",
        timestamp="2026-10-19T08:30:00+00:00",
        action_type=HistoryActionType.UPGRADE,
        source=PackageSource.WINGET,
        package_id="Git.Git",
        from_version="2.45.1",
        to_version="2.46.0",
        success=True,
        exit_code=0,
        reversible=True,
    )


def _outcome(success: bool) -> UpgradeOutcome:
    return UpgradeOutcome(
        package_id="Git.Git",
        from_version="2.46.0",
        to_version="2.45.1",
        success=success,
        exit_code=0 if success else 1,
        duration_seconds=8.0,
        source=PackageSource.WINGET,
        error_output=None if success else "Installer hash does not match",
    )


class TestUndoCommand:
    """Tests for the undo command."""

    def test_undo_help(self) -> None:
        """Undo command shows help."""
        result = runner.invoke(app, ["undo", "--help"])

        assert result.exit_code == 0
        assert "--dry-run" in result.stdout
        assert "--id" in result.stdout

    def test_undo_nothing_reversible(self) -> None:
        """Undo reports when nothing can be rolled back."""
        with patch("wupctl.cli.commands.undo.StateManager") as mock_state:
            mock_state.return_value.get_last_reversible.return_value = None

            result = runner.invoke(app, ["undo"])

        assert result.exit_code == 0
        assert "No reversible upgrades" in result.stdout

    def test_undo_dry_run(self, reversible_entry: HistoryEntry) -> None:
        """Dry-run previews without executing."""
        with (
            patch("wupctl.cli.commands.undo.StateManager") as mock_state,
            patch("wupctl.cli.commands.undo.get_operator") as mock_get_operator,
        ):
            mock_state.return_value.get_last_reversible.return_value = reversible_entry

            result = runner.invoke(app, ["undo", "--dry-run"])

        assert result.exit_code == 0
        assert "Git.Git" in result.stdout
        assert "2.46.0 -> 2.45.1" in result.stdout
        assert "No changes made" in result.stdout
        mock_get_operator.assert_not_called()
        mock_state.return_value.record_rollback.assert_not_called()

    def test_undo_cancelled(self, reversible_entry: HistoryEntry) -> None:
        """Declining the prompt does nothing."""
        with (
            patch("wupctl.cli.commands.undo.StateManager") as mock_state,
            patch("wupctl.cli.commands.undo.get_operator") as mock_get_operator,
        ):
            mock_state.return_value.get_last_reversible.return_value = reversible_entry

            result = runner.invoke(app, ["undo"], input="n\n")

        assert result.exit_code == 0
        assert "Cancelled" in result.stdout
        mock_get_operator.assert_not_called()

    def test_undo_success(self, reversible_entry: HistoryEntry) -> None:
        """A successful rollback installs from_version and is recorded."""
        with (
            patch("wupctl.cli.commands.undo.StateManager") as mock_state,
            patch("wupctl.cli.commands.undo.get_operator") as mock_get_operator,
        ):
            mock_state.return_value.get_last_reversible.return_value = reversible_entry
            operator = MagicMock()
            operator.install_version.return_value = _outcome(success=True)
            mock_get_operator.return_value = operator

            result = runner.invoke(app, ["undo", "--yes"])

        assert result.exit_code == 0
        assert "Rolled back Git.Git to 2.45.1" in result.stdout
        mock_get_operator.assert_called_once_with(PackageSource.WINGET)
        operator.install_version.assert_called_once_with(
            "Git.Git", "2.45.1", current_version="2.46.0"
        )
        mock_state.return_value.record_rollback.assert_called_once()

    def test_undo_failure_is_recorded(self, reversible_entry: HistoryEntry) -> None:
        """A failed rollback is recorded and exits 1."""
        with (
            patch("wupctl.cli.commands.undo.StateManager") as mock_state,
            patch("wupctl.cli.commands.undo.get_operator") as mock_get_operator,
        ):
            mock_state.return_value.get_last_reversible.return_value = reversible_entry
            mock_get_operator.return_value.install_version.return_value = _outcome(success=False)

            result = runner.invoke(app, ["undo", "-y"])

        assert result.exit_code == 1
        assert "Installer hash does not match" in result.stdout
        mock_state.return_value.record_rollback.assert_called_once()

    def test_undo_source_unavailable(self, reversible_entry: HistoryEntry) -> None:
        """A missing package manager exits 1 without recording."""
        with (
            patch("wupctl.cli.commands.undo.StateManager") as mock_state,
            patch("wupctl.cli.commands.undo.get_operator") as mock_get_operator,
        ):
            mock_state.return_value.get_last_reversible.return_value = reversible_entry
            mock_get_operator.return_value.install_version.side_effect = SourceUnavailableError(
                "Winget is not available on this system"
            )

            result = runner.invoke(app, ["undo", "-y"])

        assert result.exit_code == 1
        assert "not available" in result.output
        mock_state.return_value.record_rollback.assert_not_called()

    def test_undo_by_id(self, reversible_entry: HistoryEntry) -> None:
        """--id selects a specific entry."""
        with patch("wupctl.cli.commands.undo.StateManager") as mock_state:
            mock_state.return_value.get_entry_by_id.return_value = reversible_entry
            mock_state.return_value.get_reversed_entry_ids.return_value = set()

            result = runner.invoke(app, ["undo", "--id", "abc123", "--dry-run"])

        assert result.exit_code == 0
        mock_state.return_value.get_entry_by_id.assert_called_once_with("abc123")

    def test_undo_by_id_already_reversed(self, reversible_entry: HistoryEntry) -> None:
        """Entries rolled back before cannot be rolled back again."""
        with patch("wupctl.cli.commands.undo.StateManager") as mock_state:
            mock_state.return_value.get_entry_by_id.return_value = reversible_entry
            mock_state.return_value.get_reversed_entry_ids.return_value = {"abc123456789"}

            result = runner.invoke(app, ["undo", "--id", "abc123"])

        assert result.exit_code == 1
        assert "cannot be rolled back" in result.output

    def test_undo_by_unknown_id(self) -> None:
        """An unknown id exits 1."""
        with patch("wupctl.cli.commands.undo.StateManager") as mock_state:
            mock_state.return_value.get_entry_by_id.return_value = None

            result = runner.invoke(app, ["undo", "--id", "zzz"])

        assert result.exit_code == 1
        assert "No unique history entry" in result.output
