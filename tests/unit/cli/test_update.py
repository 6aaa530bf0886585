"""Unit tests for update command.

Tests for the CLI update command implementation. The pipeline is mocked,
so no package manager commands run.
"""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner
from wupctl.cli.main import app
from wupctl.core.report import ReportFormat
from wupctl.core.restore import RestorePointError
from wupctl.models.outcome import SourceStatus, SourceSummary, UpgradeOutcome
from wupctl.models.package import PackageRecord, PackageSource
from wupctl.models.run_result import RunMetadata, RunResult, SourceRun

runner = CliRunner()

METADATA = RunMetadata(
    timestamp="2026-10-19T08:30:00+00:00", hostname="WS-01", wupctl_version="0.1.0"
)
RECORDS = (
    PackageRecord("Git", "Git.Git", "2.45.1", "2.46.0", PackageSource.WINGET),
    PackageRecord("Zoom", "Zoom.Zoom", "6.0.0", "6.1.5", PackageSource.WINGET),
)


@pytest.fixture
def listing() -> RunResult:
    """Enumeration result with two pending Winget upgrades."""
    return RunResult(
        metadata=METADATA,
        runs=[
            SourceRun(
                SourceSummary.terminal(PackageSource.WINGET, SourceStatus.NOT_RUN),
                records=RECORDS,
            ),
            SourceRun(SourceSummary.terminal(PackageSource.CHOCOLATEY, SourceStatus.NO_UPDATES)),
        ],
    )


@pytest.fixture
def upgraded() -> RunResult:
    """Upgrade result with one success and one failure."""
    outcomes = (
        UpgradeOutcome("Git.Git", "2.45.1", "2.46.0", True, 0, 10.0, PackageSource.WINGET),
        UpgradeOutcome(
            "Zoom.Zoom",
            "6.0.0",
            "6.1.5",
            False,
            1603,
            4.0,
            PackageSource.WINGET,
            error_output="Installer failed with exit code: 1603",
        ),
    )
    return RunResult(
        metadata=METADATA,
        runs=[
            SourceRun(
                SourceSummary.from_outcomes(PackageSource.WINGET, outcomes),
                records=RECORDS,
                outcomes=outcomes,
            ),
            SourceRun(SourceSummary.terminal(PackageSource.CHOCOLATEY, SourceStatus.NO_UPDATES)),
        ],
    )


@pytest.fixture
def mock_pipeline(listing: RunResult, upgraded: RunResult) -> Iterator[MagicMock]:
    """Patch UpdatePipeline in the update command."""
    with patch("wupctl.cli.commands.update.UpdatePipeline") as mock_cls:
        mock_cls.return_value.enumerate.return_value = listing
        mock_cls.return_value.upgrade.return_value = upgraded
        yield mock_cls


@pytest.fixture
def mock_history() -> Iterator[MagicMock]:
    """Patch history recording."""
    with patch(
        "wupctl.cli.commands.update.record_outcomes_to_history", return_value=2
    ) as mock_record:
        yield mock_record


class TestUpdateHelp:
    """Tests for update command help."""

    def test_update_help(self) -> None:
        """Update command shows its options."""
        result = runner.invoke(app, ["update", "--help"])

        assert result.exit_code == 0
        assert "--list-only" in result.stdout
        assert "--yes" in result.stdout
        assert "--restore-point" in result.stdout


class TestUpdateRun:
    """Tests for the update flow."""

    def test_update_with_yes(self, mock_pipeline: MagicMock, mock_history: MagicMock) -> None:
        """--yes upgrades, records history and shows failures."""
        result = runner.invoke(app, ["update", "--yes"])

        assert result.exit_code == 0
        mock_pipeline.return_value.upgrade.assert_called_once()
        mock_history.assert_called_once()
        assert len(mock_history.call_args[0][0]) == 2
        assert "Zoom.Zoom" in result.stdout
        assert "exit code 1603" in result.stdout
        assert "Installer failed" in result.stdout
        assert "1 updated" in result.stdout

    def test_update_declined(self, mock_pipeline: MagicMock, mock_history: MagicMock) -> None:
        """Declining the prompt upgrades nothing."""
        result = runner.invoke(app, ["update"], input="n\n")

        assert result.exit_code == 0
        assert "Aborted" in result.stdout
        mock_pipeline.return_value.upgrade.assert_not_called()
        mock_history.assert_not_called()

    def test_update_list_only(self, mock_pipeline: MagicMock, mock_history: MagicMock) -> None:
        """--list-only enumerates and stops."""
        result = runner.invoke(app, ["update", "--list-only"])

        assert result.exit_code == 0
        assert "Git.Git" in result.stdout
        assert mock_pipeline.call_args.kwargs["list_only"] is True
        mock_pipeline.return_value.upgrade.assert_not_called()

    def test_update_nothing_pending(self, mock_history: MagicMock) -> None:
        """Without pending sources no prompt is shown."""
        empty = RunResult(
            metadata=METADATA,
            runs=[SourceRun(SourceSummary.terminal(PackageSource.WINGET, SourceStatus.NO_UPDATES))],
        )
        with patch("wupctl.cli.commands.update.UpdatePipeline") as mock_cls:
            mock_cls.return_value.enumerate.return_value = empty

            result = runner.invoke(app, ["update"])

        assert result.exit_code == 0
        assert "Everything is up to date" in result.stdout
        mock_cls.return_value.upgrade.assert_not_called()

    def test_update_source_launch_failure_keeps_history(
        self, listing: RunResult, mock_history: MagicMock, tmp_path: Path
    ) -> None:
        """Completed upgrades are recorded and reported when another tool cannot launch."""
        git = UpgradeOutcome("Git.Git", "2.45.1", "2.46.0", True, 0, 10.0, PackageSource.WINGET)
        result_with_error = RunResult(
            metadata=METADATA,
            runs=[
                SourceRun(
                    SourceSummary.from_outcomes(PackageSource.WINGET, [git]),
                    records=RECORDS[:1],
                    outcomes=(git,),
                ),
                SourceRun(
                    SourceSummary.terminal(
                        PackageSource.CHOCOLATEY,
                        SourceStatus.ERROR,
                        errors=["Cannot execute choco: Access is denied"],
                    )
                ),
            ],
        )
        with (
            patch("wupctl.cli.commands.update.UpdatePipeline") as mock_cls,
            patch(
                "wupctl.cli.commands.update.write_report", return_value=tmp_path / "r.json"
            ) as mock_write,
        ):
            mock_cls.return_value.enumerate.return_value = listing
            mock_cls.return_value.upgrade.return_value = result_with_error

            result = runner.invoke(app, ["update", "-y", "--report"])

        assert result.exit_code == 0
        mock_history.assert_called_once_with([git])
        mock_write.assert_called_once()
        assert mock_write.call_args[0][0] is result_with_error

    def test_update_all_sources_disabled(self) -> None:
        """Disabling every source is an error."""
        result = runner.invoke(app, ["update", "--no-winget", "--no-chocolatey", "--no-store"])

        assert result.exit_code == 1
        assert "All sources are disabled" in result.output


class TestRestorePoint:
    """Tests for the pre-update restore point."""

    def test_restore_point_created(
        self, mock_pipeline: MagicMock, mock_history: MagicMock
    ) -> None:
        """--restore-point creates a checkpoint before upgrading."""
        with patch("wupctl.cli.commands.update.create_restore_point") as mock_restore:
            result = runner.invoke(app, ["update", "-y", "--restore-point"])

        assert result.exit_code == 0
        mock_restore.assert_called_once_with("wupctl pre-update checkpoint")
        mock_pipeline.return_value.upgrade.assert_called_once()

    def test_optional_restore_point_failure_continues(
        self, mock_pipeline: MagicMock, mock_history: MagicMock
    ) -> None:
        """A failing optional restore point is a warning."""
        with patch(
            "wupctl.cli.commands.update.create_restore_point",
            side_effect=RestorePointError("Access is denied"),
        ):
            result = runner.invoke(app, ["update", "-y", "--restore-point"])

        assert result.exit_code == 0
        assert "without restore point" in result.output
        mock_pipeline.return_value.upgrade.assert_called_once()

    def test_required_restore_point_failure_aborts(
        self, tmp_path: Path, mock_pipeline: MagicMock, mock_history: MagicMock
    ) -> None:
        """A failing required restore point aborts before any upgrade."""
        config = tmp_path / "config.toml"
        config.write_text("[restore_point]\nenabled = true\nrequired = true\n")

        with patch(
            "wupctl.cli.commands.update.create_restore_point",
            side_effect=RestorePointError("Access is denied"),
        ):
            result = runner.invoke(app, ["update", "-y", "--config", str(config)])

        assert result.exit_code == 1
        assert "Restore point required" in result.output
        mock_pipeline.return_value.upgrade.assert_not_called()


class TestReport:
    """Tests for report writing."""

    def test_report_written(
        self, tmp_path: Path, mock_pipeline: MagicMock, mock_history: MagicMock
    ) -> None:
        """--report writes a report in the requested format."""
        with patch(
            "wupctl.cli.commands.update.write_report", return_value=tmp_path / "r.csv"
        ) as mock_write:
            result = runner.invoke(app, ["update", "-y", "--report", "--report-format", "csv"])

        assert result.exit_code == 0
        assert mock_write.call_args[0][1] == ReportFormat.CSV
        assert "Report written" in result.stdout

    def test_no_report_by_default(
        self, mock_pipeline: MagicMock, mock_history: MagicMock
    ) -> None:
        """Reports are off unless enabled."""
        with patch("wupctl.cli.commands.update.write_report") as mock_write:
            runner.invoke(app, ["update", "-y"])

        mock_write.assert_not_called()
