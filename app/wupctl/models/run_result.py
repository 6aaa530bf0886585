"""Run result model for JSON export and reports.

This module defines the data structure capturing one pipeline run across
all package sources, with the metadata needed for reports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from wupctl.models.outcome import SourceSummary, UpgradeOutcome
from wupctl.models.package import PackageRecord


@dataclass(frozen=True, slots=True)
class RunMetadata:
    """Metadata for a pipeline run.

    Attributes:
        timestamp: ISO format timestamp when the run started.
        hostname: Name of the machine that was updated.
        wupctl_version: Version of wupctl that performed the run.
        list_only: Whether upgrades were skipped (enumeration only).
    """

    timestamp: str
    hostname: str
    wupctl_version: str
    list_only: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "timestamp": self.timestamp,
            "hostname": self.hostname,
            "wupctl_version": self.wupctl_version,
            "list_only": self.list_only,
        }

    @classmethod
    def create(cls, list_only: bool = False) -> RunMetadata:
        """Create metadata for a run starting now."""
        import socket

        from wupctl import __version__

        return cls(
            timestamp=datetime.now(UTC).isoformat(),
            hostname=socket.gethostname(),
            wupctl_version=__version__,
            list_only=list_only,
        )


@dataclass(frozen=True, slots=True)
class SourceRun:
    """Everything one source produced in a run.

    Attributes:
        summary: Classified summary for the source.
        records: Upgradeable packages after exclusion filtering.
        outcomes: Outcomes of every attempted upgrade.
    """

    summary: SourceSummary
    records: tuple[PackageRecord, ...] = ()
    outcomes: tuple[UpgradeOutcome, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "summary": self.summary.to_dict(),
            "records": [_record_to_dict(record) for record in self.records],
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }


@dataclass(frozen=True, slots=True)
class RunResult:
    """Complete result of a pipeline run.

    Attributes:
        metadata: Run metadata including timestamp and hostname.
        runs: Per-source results in processing order.
    """

    metadata: RunMetadata
    runs: list[SourceRun] = field(default_factory=lambda: [])

    @property
    def summaries(self) -> list[SourceSummary]:
        """Summaries of every source in processing order."""
        return [run.summary for run in self.runs]

    @property
    def outcomes(self) -> list[UpgradeOutcome]:
        """All upgrade outcomes across sources."""
        return [outcome for run in self.runs for outcome in run.outcomes]

    @property
    def records(self) -> list[PackageRecord]:
        """All upgradeable records across sources."""
        return [record for run in self.runs for record in run.records]

    @property
    def updated_count(self) -> int:
        """Total number of successful upgrades."""
        return sum(run.summary.updated_count for run in self.runs)

    @property
    def has_failures(self) -> bool:
        """Check if any source ended in ERROR or PARTIAL."""
        return any(run.summary.failed for run in self.runs)

    def counts_by_status(self) -> dict[str, int]:
        """Count sources per status value."""
        counts: dict[str, int] = {}
        for run in self.runs:
            key = run.summary.status.value
            counts[key] = counts.get(key, 0) + 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "metadata": self.metadata.to_dict(),
            "sources": [run.to_dict() for run in self.runs],
            "totals": {
                "updated": self.updated_count,
                "failed": sum(1 for o in self.outcomes if o.failed),
                "upgradeable": len(self.records),
                "statuses": self.counts_by_status(),
            },
        }


def _record_to_dict(record: PackageRecord) -> dict[str, Any]:
    """Convert a PackageRecord to a dictionary.

    Args:
        record: The record to convert.

    Returns:
        Dictionary representation of the record.
    """
    return {
        "name": record.name,
        "id": record.id,
        "source": record.source.value,
        "current_version": record.current_version,
        "available_version": record.available_version,
        "pinned": record.pinned,
    }
