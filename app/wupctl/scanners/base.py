"""Abstract base class for update scanners.

This module defines the Scanner interface that every package source
must implement to enumerate upgradeable packages.
"""

import logging
import subprocess
from abc import ABC, abstractmethod

from wupctl.models.package import ExclusionSet, PackageRecord, PackageSource
from wupctl.utils.shell import run_command

logger = logging.getLogger(__name__)


class ScannerError(Exception):
    """Base exception for update enumeration errors."""


class SourceUnavailableError(ScannerError):
    """Raised when a package manager is not installed on this host."""


class EnumerationError(ScannerError):
    """Raised when the list command could not be run or captured."""


class Scanner(ABC):
    """Abstract base class for all update scanners.

    Scanners run the "what is outdated" command of a package manager,
    parse its text output into PackageRecord instances and filter them
    against the configured exclusions. Parsing is tolerant: lines that do
    not look like a package row are skipped, never raised.

    Example:
        >>> scanner = WingetScanner()
        >>> if scanner.is_available():
        ...     for record in scanner.scan(exclusions=frozenset()):
        ...         print(f"{record.id}: {record.available_version}")
    """

    # Listing is read-only and quick; a hung tool should not stall the run
    _LIST_TIMEOUT: float = 300.0

    @property
    @abstractmethod
    def source(self) -> PackageSource:
        """Return the package source this scanner handles."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system.

        Returns:
            True if the package manager can be used, False otherwise.
        """

    @abstractmethod
    def _list_command(self) -> list[str]:
        """Return the argument vector of the list-outdated command."""

    @abstractmethod
    def parse(self, raw: str) -> list[PackageRecord]:
        """Parse raw list output into records, in output order.

        Args:
            raw: Complete text output of the list command.

        Returns:
            Records for every recognized row.
        """

    def list_outdated(self) -> str:
        """Run the list-outdated command and return its raw output.

        A non-zero exit code is not treated as an error: the tools use
        non-zero codes to report that updates exist.

        Returns:
            Captured stdout of the command.

        Raises:
            EnumerationError: If the command cannot be run or captured.
        """
        args = self._list_command()
        logger.debug("Listing outdated %s packages: %s", self.source.value, " ".join(args))

        try:
            result = run_command(args, timeout=self._LIST_TIMEOUT)
        except subprocess.TimeoutExpired as e:
            msg = f"{self.source.label} listing timed out after {self._LIST_TIMEOUT:.0f}s"
            raise EnumerationError(msg) from e
        except (OSError, ValueError) as e:
            msg = f"{self.source.label} listing failed: {e}"
            raise EnumerationError(msg) from e

        if not result.success:
            logger.debug(
                "%s list command exited with %d", self.source.label, result.returncode
            )
        return result.stdout

    def scan(self, exclusions: ExclusionSet = frozenset()) -> list[PackageRecord]:
        """Enumerate upgradeable packages not covered by exclusions.

        Args:
            exclusions: Case-folded package identifiers to leave out.

        Returns:
            Records in the order the tool printed them. An empty list means
            the source is up to date.

        Raises:
            SourceUnavailableError: If the package manager is not installed.
            EnumerationError: If the list command cannot be run or parsed.
        """
        if not self.is_available():
            msg = f"{self.source.label} is not available on this system"
            raise SourceUnavailableError(msg)

        raw = self.list_outdated()

        try:
            records = self.parse(raw)
        except (ValueError, IndexError) as e:
            msg = f"{self.source.label} output could not be processed: {e}"
            raise EnumerationError(msg) from e

        return filter_excluded(records, exclusions)


def filter_excluded(records: list[PackageRecord], exclusions: ExclusionSet) -> list[PackageRecord]:
    """Remove records whose id matches an exclusion, case-insensitively.

    Args:
        records: Parsed records in output order.
        exclusions: Case-folded identifiers to remove.

    Returns:
        Remaining records, order preserved.
    """
    kept: list[PackageRecord] = []
    for record in records:
        if record.key in exclusions:
            logger.info("Excluding %s (%s) by configuration", record.id, record.source.value)
            continue
        kept.append(record)
    return kept
