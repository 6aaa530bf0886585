"""Unit tests for WingetOperator and StoreOperator.

Tests for exact-match, unattended winget command lines.
"""

from unittest.mock import patch

import pytest
from wupctl.models.package import PackageSource
from wupctl.operators.store import StoreOperator
from wupctl.operators.winget import WingetOperator
from wupctl.utils.shell import CommandResult


class TestWingetOperator:
    """Tests for WingetOperator class."""

    @pytest.fixture
    def operator(self) -> WingetOperator:
        """Create WingetOperator instance."""
        return WingetOperator()

    def test_source_is_winget(self, operator: WingetOperator) -> None:
        """Operator returns WINGET as source."""
        assert operator.source == PackageSource.WINGET

    def test_is_available_when_winget_exists(self, operator: WingetOperator) -> None:
        """is_available returns True when winget exists."""
        with patch("wupctl.operators.winget.command_exists", return_value=True):
            assert operator.is_available() is True

    def test_upgrade_uses_exact_id(self, operator: WingetOperator) -> None:
        """upgrade_one targets the package by exact id."""
        with patch("wupctl.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)
            operator.upgrade_one("Mozilla.Firefox")

        args = mock_run.call_args[0][0]
        assert args[:2] == ["winget", "upgrade"]
        assert args[args.index("--id") + 1] == "Mozilla.Firefox"
        assert "--exact" in args
        assert args[args.index("--source") + 1] == "winget"

    def test_upgrade_is_unattended(self, operator: WingetOperator) -> None:
        """upgrade_one never prompts."""
        with patch("wupctl.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)
            operator.upgrade_one("Git.Git")

        args = mock_run.call_args[0][0]
        assert "--silent" in args
        assert "--accept-package-agreements" in args
        assert "--accept-source-agreements" in args
        assert "--disable-interactivity" in args

    def test_install_version_command(self, operator: WingetOperator) -> None:
        """install_version pins --version and forces reinstall."""
        with (
            patch("wupctl.operators.winget.command_exists", return_value=True),
            patch("wupctl.operators.base.run_command") as mock_run,
        ):
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)
            operator.install_version("Git.Git", "2.45.1")

        args = mock_run.call_args[0][0]
        assert args[:2] == ["winget", "install"]
        assert args[args.index("--version") + 1] == "2.45.1"
        assert "--exact" in args
        assert "--force" in args


class TestStoreOperator:
    """Tests for StoreOperator class."""

    def test_source_is_store(self) -> None:
        """Operator returns STORE as source."""
        assert StoreOperator().source == PackageSource.STORE

    def test_upgrade_targets_msstore(self) -> None:
        """Store upgrades go through winget's msstore source."""
        with patch("wupctl.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)
            StoreOperator().upgrade_one("9NBLGGH4NNS1")

        args = mock_run.call_args[0][0]
        assert args[0] == "winget"
        assert args[args.index("--source") + 1] == "msstore"
        assert args[args.index("--id") + 1] == "9NBLGGH4NNS1"
