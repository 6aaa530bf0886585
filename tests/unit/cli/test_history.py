"""Unit tests for history command.

Tests for the CLI history command implementation.
"""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner
from wupctl.cli.main import app
from wupctl.models.history import HistoryActionType, HistoryEntry
from wupctl.models.package import PackageSource

runner = CliRunner()


def _entry(
    entry_id: str,
    timestamp: str,
    package_id: str,
    success: bool = True,
    action_type: HistoryActionType = HistoryActionType.UPGRADE,
) -> HistoryEntry:
    return HistoryEntry(
        id=entry_id,
        timestamp=timestamp,
        action_type=action_type,
        source=PackageSource.WINGET,
        package_id=package_id,
        from_version="1.0",
        to_version="2.0",
        success=success,
        exit_code=0 if success else 1603,
        reversible=success and action_type == HistoryActionType.UPGRADE,
    )


@pytest.fixture
def entries() -> list[HistoryEntry]:
    """History entries, newest first."""
    return [
        _entry("ccc111111111", "2026-10-19T09:00:00+00:00", "Zoom.Zoom", success=False),
        _entry("bbb111111111", "2026-10-18T09:00:00+00:00", "Git.Git"),
        _entry("aaa111111111", "2026-09-01T09:00:00+00:00", "Mozilla.Firefox"),
    ]


class TestHistoryCommand:
    """Tests for the history command."""

    def test_history_empty(self) -> None:
        """History reports when nothing was recorded."""
        with patch("wupctl.cli.commands.history.StateManager") as mock_state:
            mock_state.return_value.get_history.return_value = []

            result = runner.invoke(app, ["history"])

        assert result.exit_code == 0
        assert "No history entries found" in result.stdout

    def test_history_table(self, entries: list[HistoryEntry]) -> None:
        """History shows entries with results."""
        with patch("wupctl.cli.commands.history.StateManager") as mock_state:
            mock_state.return_value.get_history.return_value = entries

            result = runner.invoke(app, ["history"])

        assert result.exit_code == 0
        assert "FAIL" in result.stdout
        assert "Zoom.Zoom" in result.stdout
        assert "Update History" in result.stdout

    def test_history_failed_only(self, entries: list[HistoryEntry]) -> None:
        """--failed shows failed attempts only."""
        with patch("wupctl.cli.commands.history.StateManager") as mock_state:
            mock_state.return_value.get_history.return_value = entries

            result = runner.invoke(app, ["history", "--failed", "--json"])

        data = json.loads(result.stdout)
        assert [e["package_id"] for e in data] == ["Zoom.Zoom"]

    def test_history_since(self, entries: list[HistoryEntry]) -> None:
        """--since drops older entries."""
        with patch("wupctl.cli.commands.history.StateManager") as mock_state:
            mock_state.return_value.get_history.return_value = entries

            result = runner.invoke(app, ["history", "--since", "2026-10-01", "--json"])

        data = json.loads(result.stdout)
        assert [e["id"] for e in data] == ["ccc111111111", "bbb111111111"]

    def test_history_limit(self, entries: list[HistoryEntry]) -> None:
        """--limit caps the number of entries."""
        with patch("wupctl.cli.commands.history.StateManager") as mock_state:
            mock_state.return_value.get_history.return_value = entries

            result = runner.invoke(app, ["history", "-n", "1", "--json"])

        assert len(json.loads(result.stdout)) == 1

    def test_history_invalid_since(self) -> None:
        """An invalid date exits with an error."""
        with patch("wupctl.cli.commands.history.StateManager") as mock_state:
            mock_state.return_value.get_history.return_value = []

            result = runner.invoke(app, ["history", "--since", "yesterday"])

        assert result.exit_code == 1
        assert "Invalid date format" in result.output
