"""Chocolatey update scanner implementation.

Enumerates outdated packages from ``choco outdated --limit-output``.
"""

import logging

from wupctl.models.package import PackageRecord, PackageSource
from wupctl.scanners.base import Scanner
from wupctl.utils.shell import command_exists

logger = logging.getLogger(__name__)


class ChocolateyScanner(Scanner):
    """Scanner for Chocolatey packages.

    With ``--limit-output`` each package is printed on one line as
    ``name|current|available|pinned``. Chocolatey has no separate display
    name, so the package name doubles as its id.
    """

    @property
    def source(self) -> PackageSource:
        """Return CHOCOLATEY as the package source."""
        return PackageSource.CHOCOLATEY

    def is_available(self) -> bool:
        """Check if the choco CLI is available."""
        return command_exists("choco")

    def _list_command(self) -> list[str]:
        return ["choco", "outdated", "--limit-output"]

    def parse(self, raw: str) -> list[PackageRecord]:
        """Parse pipe-delimited ``choco outdated`` output.

        Args:
            raw: Complete output of ``choco outdated --limit-output``.

        Returns:
            Records in output order.
        """
        records: list[PackageRecord] = []
        for line in raw.splitlines():
            record = self._parse_line(line)
            if record is not None:
                records.append(record)
        return records

    def _parse_line(self, line: str) -> PackageRecord | None:
        """Parse a single pipe-delimited line.

        Args:
            line: One line of choco output.

        Returns:
            PackageRecord if parsing succeeds, None otherwise.
        """
        parts = line.split("|")
        if len(parts) < 3:
            if line.strip():
                logger.debug("Skipping malformed choco line (parts=%d): %r", len(parts), line[:100])
            return None

        name = parts[0].strip()
        if not name:
            logger.debug("Skipping choco line with empty name: %r", line[:100])
            return None

        pinned = len(parts) >= 4 and parts[3].strip().casefold() == "true"

        return PackageRecord(
            name=name,
            id=name,
            current_version=parts[1].strip(),
            available_version=parts[2].strip(),
            source=PackageSource.CHOCOLATEY,
            pinned=pinned,
        )
