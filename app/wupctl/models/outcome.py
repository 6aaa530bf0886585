"""Upgrade outcome and per-source summary models.

An UpgradeOutcome is produced for every package upgrade that was actually
attempted. A SourceSummary aggregates the outcomes of one source in one run
and carries its classified status.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from wupctl.models.package import PackageSource

# Exit code recorded when an upgrade hit the configured timeout
TIMEOUT_EXIT_CODE = -1


class SourceStatus(str, Enum):
    """Classified result of one source in one run.

    Attributes:
        NOT_RUN: Enumerated only (list-only mode); no upgrade attempted.
        DISABLED: Source disabled by configuration or CLI toggle.
        UNAVAILABLE: Package manager not installed on this host.
        NO_UPDATES: Enumeration found nothing to upgrade.
        SUCCESS: Every attempted upgrade succeeded (or none were attempted).
        PARTIAL: Some upgrades succeeded and some failed.
        ERROR: Every attempted upgrade failed, or enumeration failed.
    """

    NOT_RUN = "not_run"
    DISABLED = "disabled"
    UNAVAILABLE = "unavailable"
    NO_UPDATES = "no_updates"
    SUCCESS = "success"
    PARTIAL = "partial"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class UpgradeOutcome:
    """Result of a single package upgrade attempt.

    Attributes:
        package_id: Identifier passed to the upgrade command.
        from_version: Version installed before the attempt.
        to_version: Version the attempt targeted.
        success: Whether the command exited with code 0.
        exit_code: Exit code of the upgrade command.
        duration_seconds: Wall-clock duration of the command.
        source: Package manager that performed the upgrade.
        name: Display name of the package.
        started_at: ISO 8601 timestamp of the command start.
        error_output: Captured command output when the upgrade failed.
    """

    package_id: str
    from_version: str
    to_version: str
    success: bool
    exit_code: int
    duration_seconds: float
    source: PackageSource
    name: str = ""
    started_at: str = ""
    error_output: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the upgrade failed."""
        return not self.success

    @property
    def error_line(self) -> str:
        """One-line error description used in summaries."""
        return f"{self.package_id} failed (exit code {self.exit_code})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON output."""
        return {
            "package_id": self.package_id,
            "name": self.name,
            "source": self.source.value,
            "from_version": self.from_version,
            "to_version": self.to_version,
            "success": self.success,
            "exit_code": self.exit_code,
            "duration_seconds": round(self.duration_seconds, 3),
            "started_at": self.started_at,
            "error_output": self.error_output,
        }


def classify_status(outcomes: Sequence[UpgradeOutcome]) -> SourceStatus:
    """Classify a finished batch of upgrade outcomes.

    No failures (including no outcomes at all) is SUCCESS, a mix is
    PARTIAL, and failures only is ERROR.

    Args:
        outcomes: Outcomes of every attempted upgrade.

    Returns:
        One of SUCCESS, PARTIAL or ERROR.
    """
    success_count = sum(1 for o in outcomes if o.success)
    fail_count = len(outcomes) - success_count

    if fail_count == 0:
        return SourceStatus.SUCCESS
    if success_count > 0:
        return SourceStatus.PARTIAL
    return SourceStatus.ERROR


@dataclass(frozen=True, slots=True)
class SourceSummary:
    """Aggregate result for one package source in one run.

    Attributes:
        source: Package source this summary describes.
        status: Classified status.
        updated_count: Number of successful upgrades.
        errors: One message per failure, in processing order.
        skipped: Identifiers of pinned packages that were skipped.
        message: Optional free-form note (e.g., degraded Store scan).
    """

    source: PackageSource
    status: SourceStatus
    updated_count: int = 0
    errors: tuple[str, ...] = ()
    skipped: tuple[str, ...] = ()
    message: str | None = None

    @classmethod
    def from_outcomes(
        cls,
        source: PackageSource,
        outcomes: Sequence[UpgradeOutcome],
        skipped: Sequence[str] = (),
        aborted: str | None = None,
    ) -> SourceSummary:
        """Derive the summary of an upgrade batch.

        Args:
            source: Package source of the batch.
            outcomes: Outcomes of every attempted upgrade.
            skipped: Identifiers of records skipped because they were pinned.
            aborted: Reason the batch stopped early, if it did.

        Returns:
            SourceSummary with status, counts and error lines. An aborted
            batch is PARTIAL when something was upgraded, else ERROR.
        """
        updated_count = sum(1 for o in outcomes if o.success)
        errors = [o.error_line for o in outcomes if o.failed]
        status = classify_status(outcomes)
        if aborted is not None:
            errors.append(aborted)
            status = SourceStatus.PARTIAL if updated_count else SourceStatus.ERROR
        return cls(
            source=source,
            status=status,
            updated_count=updated_count,
            errors=tuple(errors),
            skipped=tuple(skipped),
        )

    @classmethod
    def terminal(
        cls,
        source: PackageSource,
        status: SourceStatus,
        message: str | None = None,
        errors: Sequence[str] = (),
    ) -> SourceSummary:
        """Create a summary for a source that never reached the upgrade loop."""
        return cls(source=source, status=status, errors=tuple(errors), message=message)

    @property
    def failed(self) -> bool:
        """Check if the source ended in ERROR or PARTIAL."""
        return self.status in (SourceStatus.ERROR, SourceStatus.PARTIAL)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON output."""
        return {
            "source": self.source.value,
            "status": self.status.value,
            "updated_count": self.updated_count,
            "errors": list(self.errors),
            "skipped": list(self.skipped),
            "message": self.message,
        }
