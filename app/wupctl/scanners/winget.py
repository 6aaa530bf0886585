"""Winget update scanner implementation.

Enumerates upgradeable packages from ``winget upgrade`` table output.
"""

import logging
import re

from wupctl.models.package import PackageRecord, PackageSource
from wupctl.scanners.base import Scanner
from wupctl.utils.shell import command_exists

logger = logging.getLogger(__name__)


class WingetScanner(Scanner):
    """Scanner for the Windows Package Manager.

    ``winget upgrade`` prints a space-aligned table without a stable
    column contract, so rows are recognized by shape: a display name
    (may contain spaces), an id, the installed version and an available
    version starting with a digit, optionally followed by the source name.
    """

    # Name may contain spaces; id has none; installed version may read
    # "Unknown" or "< 1.2.3"; available version starts with a digit.
    _ROW_PATTERN = re.compile(
        r"^(?P<name>\S.*?)\s+"
        r"(?P<id>\S+)\s+"
        r"(?P<current>(?:[<>]\s*)?\S+)\s+"
        r"(?P<available>\d\S*)"
        r"(?:\s+(?P<origin>[A-Za-z][\w.-]*))?\s*$"
    )

    _SEPARATOR_PATTERN = re.compile(r"^\s*-{3,}\s*$")

    # Banner of the table listing pinned packages
    _EXPLICIT_TARGETING_PATTERN = re.compile(r"require explicit targeting", re.IGNORECASE)

    # Leading tokens of column header rows
    _HEADER_TOKENS = frozenset({"Name", "Id"})

    # winget source queried by this scanner
    _WINGET_SOURCE = "winget"

    @property
    def source(self) -> PackageSource:
        """Return WINGET as the package source."""
        return PackageSource.WINGET

    def is_available(self) -> bool:
        """Check if the winget CLI is available."""
        return command_exists("winget")

    def _list_command(self) -> list[str]:
        return [
            "winget",
            "upgrade",
            "--source",
            self._WINGET_SOURCE,
            "--accept-source-agreements",
            "--disable-interactivity",
        ]

    def parse(self, raw: str) -> list[PackageRecord]:
        """Parse ``winget upgrade`` output.

        Only the first table is read. When a dashed separator exists, rows
        start after it and end at the first line that is not a package
        row, which keeps download progress printed before the table and
        the footer after it out of the result. The second table winget
        prints for pinned packages that require explicit targeting is
        never read.

        Args:
            raw: Complete output of ``winget upgrade``.

        Returns:
            Records in table order.
        """
        lines = raw.splitlines()
        in_table = False
        for index, line in enumerate(lines):
            if self._SEPARATOR_PATTERN.match(line):
                lines = lines[index + 1 :]
                in_table = True
                break

        records: list[PackageRecord] = []
        for line in lines:
            if self._EXPLICIT_TARGETING_PATTERN.search(line):
                break
            record = self._parse_row(line)
            if record is not None:
                records.append(record)
            elif in_table:
                break
        return records

    def _parse_row(self, line: str) -> PackageRecord | None:
        """Parse a single table row.

        Args:
            line: One line of winget output.

        Returns:
            PackageRecord if the line is a package row, None otherwise.
        """
        stripped = line.strip()
        if not stripped:
            return None

        leading = stripped.split(maxsplit=1)[0]
        if leading in self._HEADER_TOKENS:
            return None

        match = self._ROW_PATTERN.match(stripped)
        if match is None:
            logger.debug("Skipping unrecognized winget line: %r", stripped[:100])
            return None

        package_id = match.group("id").strip()
        if not package_id:
            return None

        return PackageRecord(
            name=match.group("name").strip(),
            id=package_id,
            current_version=match.group("current").strip(),
            available_version=match.group("available").strip(),
            source=self.source,
        )
