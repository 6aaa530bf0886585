"""Abstract base class for package operators.

This module defines the Operator interface that every package source must
implement to upgrade packages one at a time with per-package accounting.
"""

import logging
import subprocess
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import UTC, datetime

from wupctl.core.logs import log_success
from wupctl.models.outcome import TIMEOUT_EXIT_CODE, SourceStatus, SourceSummary, UpgradeOutcome
from wupctl.models.package import PackageRecord, PackageSource
from wupctl.scanners.base import SourceUnavailableError
from wupctl.utils.shell import CommandResult, run_command

logger = logging.getLogger(__name__)


class OperatorError(Exception):
    """Base exception for package operator errors."""


class ProcessExecutionError(OperatorError):
    """Raised when the host cannot start package manager processes at all."""


class Operator(ABC):
    """Abstract base class for all package operators.

    Operators run the single-package upgrade command of a package manager.
    Packages are always upgraded one after another: package managers lock
    their local state and concurrent runs of the same tool deadlock or
    corrupt it.

    Attributes:
        timeout: Optional per-package limit in seconds. None waits for the
            package manager to exit however long it takes.

    Example:
        >>> operator = ChocolateyOperator()
        >>> if operator.is_available():
        ...     summary, outcomes = operator.upgrade_all(records)
        ...     print(summary.status.value, summary.updated_count)
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize the operator.

        Args:
            timeout: Optional per-package upgrade timeout in seconds.
        """
        self._timeout = timeout

    @property
    def timeout(self) -> float | None:
        """Per-package upgrade timeout in seconds, if any."""
        return self._timeout

    @property
    @abstractmethod
    def source(self) -> PackageSource:
        """Return the package source this operator handles."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system.

        Returns:
            True if the package manager can be used, False otherwise.
        """

    @abstractmethod
    def _upgrade_command(self, package_id: str) -> list[str]:
        """Return the silent, exact-match upgrade command for one package."""

    @abstractmethod
    def _install_version_command(self, package_id: str, version: str) -> list[str]:
        """Return the command that installs a specific version of a package."""

    def upgrade_one(self, package_id: str) -> CommandResult:
        """Upgrade a single package by exact identifier.

        Blocks until the package manager exits and its output has been read
        completely.

        Args:
            package_id: Exact package identifier.

        Returns:
            CommandResult with the exit code and captured output. A timeout
            yields exit code TIMEOUT_EXIT_CODE.

        Raises:
            ProcessExecutionError: If the process cannot be started.
        """
        return self._run(self._upgrade_command(package_id))

    def upgrade_all(
        self, records: Sequence[PackageRecord]
    ) -> tuple[SourceSummary, list[UpgradeOutcome]]:
        """Upgrade every record in order and classify the batch.

        Pinned records are skipped without running a command. Each failed
        upgrade is recorded as an outcome and processing continues with
        the next record. When the package manager itself cannot be
        launched the batch stops and the outcomes gathered so far are
        kept.

        Args:
            records: Upgradeable records, already filtered by exclusions.

        Returns:
            Tuple of (summary, outcomes). With no records the summary is
            NO_UPDATES and nothing is executed.

        Raises:
            SourceUnavailableError: If the package manager is not available.
        """
        if not records:
            return SourceSummary.terminal(self.source, SourceStatus.NO_UPDATES), []

        if not self.is_available():
            msg = f"{self.source.label} is not available on this system"
            raise SourceUnavailableError(msg)

        outcomes: list[UpgradeOutcome] = []
        skipped = [record.id for record in records if record.pinned]
        pending = [record for record in records if not record.pinned]

        for package_id in skipped:
            logger.info("Skipping pinned package %s", package_id)

        for index, record in enumerate(pending, start=1):
            logger.info(
                "[%d/%d] Upgrading %s %s -> %s",
                index,
                len(pending),
                record.id,
                record.current_version,
                record.available_version,
            )
            try:
                outcome = self._timed(
                    self._upgrade_command(record.id),
                    record=record,
                    from_version=record.current_version,
                    to_version=record.available_version,
                )
            except ProcessExecutionError as e:
                logger.error("%s; stopping %s upgrades", e, self.source.label)
                summary = SourceSummary.from_outcomes(
                    self.source, outcomes, skipped, aborted=str(e)
                )
                return summary, outcomes
            outcomes.append(outcome)

            if outcome.success:
                log_success(logger, "Upgraded %s to %s", record.id, record.available_version)
            else:
                logger.error("%s", outcome.error_line)

        return SourceSummary.from_outcomes(self.source, outcomes, skipped), outcomes

    def install_version(
        self,
        package_id: str,
        version: str,
        current_version: str = "",
    ) -> UpgradeOutcome:
        """Install a specific version of a package, downgrading if needed.

        Used to roll back an upgrade recorded in history.

        Args:
            package_id: Exact package identifier.
            version: Version to install.
            current_version: Version installed now, recorded as from_version.

        Returns:
            UpgradeOutcome of the install command.

        Raises:
            SourceUnavailableError: If the package manager is not available.
            ProcessExecutionError: If the process cannot be started.
        """
        if not self.is_available():
            msg = f"{self.source.label} is not available on this system"
            raise SourceUnavailableError(msg)

        logger.info("Installing %s version %s", package_id, version)
        return self._timed(
            self._install_version_command(package_id, version),
            package_id=package_id,
            from_version=current_version,
            to_version=version,
        )

    def _timed(
        self,
        args: list[str],
        *,
        from_version: str,
        to_version: str,
        record: PackageRecord | None = None,
        package_id: str | None = None,
    ) -> UpgradeOutcome:
        """Run a command and wrap its result in an UpgradeOutcome.

        Args:
            args: Command to run.
            from_version: Version before the command.
            to_version: Version the command targets.
            record: Record being upgraded, if any.
            package_id: Package identifier when no record is given.

        Returns:
            UpgradeOutcome with exit code, duration and error output.
        """
        target_id = record.id if record is not None else (package_id or "")
        started_at = datetime.now(UTC).isoformat()
        start = time.monotonic()

        result = self._run(args)

        duration = time.monotonic() - start
        return UpgradeOutcome(
            package_id=target_id,
            from_version=from_version,
            to_version=to_version,
            success=result.success,
            exit_code=result.returncode,
            duration_seconds=duration,
            source=self.source,
            name=record.name if record is not None else target_id,
            started_at=started_at,
            error_output=None if result.success else result.output,
        )

    def _run(self, args: list[str]) -> CommandResult:
        """Run a package manager command with the operator timeout.

        Args:
            args: Command to run.

        Returns:
            CommandResult; a timeout is reported as TIMEOUT_EXIT_CODE.

        Raises:
            ProcessExecutionError: If the process cannot be started.
        """
        logger.debug("Executing: %s", " ".join(args))
        try:
            return run_command(args, timeout=self._timeout)
        except subprocess.TimeoutExpired as e:
            logger.warning("Command timed out after %ss: %s", self._timeout, " ".join(args))
            partial = _decode(e.stdout) + _decode(e.stderr)
            return CommandResult(
                stdout=partial,
                stderr=f"Timed out after {self._timeout} seconds",
                returncode=TIMEOUT_EXIT_CODE,
            )
        except OSError as e:
            msg = f"Cannot execute {args[0]}: {e}"
            raise ProcessExecutionError(msg) from e


def _decode(data: bytes | str | None) -> str:
    """Normalize partial output captured by TimeoutExpired."""
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
