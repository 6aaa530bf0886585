"""Unit tests for scanner/operator factories and history recording."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from wupctl.core.executor import (
    SOURCE_ORDER,
    get_operator,
    get_scanner,
    record_outcomes_to_history,
)
from wupctl.core.state import StateManager
from wupctl.models.outcome import UpgradeOutcome
from wupctl.models.package import PackageSource
from wupctl.operators.chocolatey import ChocolateyOperator
from wupctl.scanners.store import StoreScanner


def _outcome(package_id: str, success: bool = True) -> UpgradeOutcome:
    return UpgradeOutcome(
        package_id=package_id,
        from_version="1.0",
        to_version="2.0",
        success=success,
        exit_code=0 if success else 1,
        duration_seconds=1.0,
        source=PackageSource.CHOCOLATEY,
    )


class TestFactories:
    """Tests for get_scanner and get_operator."""

    def test_source_order(self) -> None:
        """Sources run Winget, Chocolatey, Store."""
        assert SOURCE_ORDER == (
            PackageSource.WINGET,
            PackageSource.CHOCOLATEY,
            PackageSource.STORE,
        )

    def test_every_source_has_scanner_and_operator(self) -> None:
        """Factories cover every source and report matching sources."""
        for source in PackageSource:
            assert get_scanner(source).source == source
            assert get_operator(source).source == source

    def test_specific_types(self) -> None:
        """The Store scanner and Chocolatey operator are returned as expected."""
        assert isinstance(get_scanner(PackageSource.STORE), StoreScanner)
        assert isinstance(get_operator(PackageSource.CHOCOLATEY), ChocolateyOperator)

    def test_operator_timeout(self) -> None:
        """The timeout is passed to the operator."""
        assert get_operator(PackageSource.WINGET, timeout=600).timeout == 600


class TestRecordOutcomesToHistory:
    """Tests for record_outcomes_to_history."""

    def test_records_every_outcome(self, tmp_path: Path) -> None:
        """Successes and failures are both recorded."""
        state = StateManager(state_dir=tmp_path)

        written = record_outcomes_to_history(
            [_outcome("git"), _outcome("7zip", success=False)], state=state
        )

        assert written == 2
        entries = state.get_history()
        assert [e.package_id for e in entries] == ["7zip", "git"]
        assert entries[0].metadata["command"] == "wupctl update"

    def test_write_failure_does_not_raise(self) -> None:
        """History errors become a warning, not an exception."""
        state = MagicMock(spec=StateManager)
        state.record_action.side_effect = OSError("disk full")

        with patch("wupctl.core.executor.print_warning") as mock_warn:
            written = record_outcomes_to_history([_outcome("git")], state=state)

        assert written == 0
        mock_warn.assert_called_once()
        assert "disk full" in mock_warn.call_args[0][0]
