"""History entry model for tracking upgrades.

This module defines the record appended to the update history file for
every attempted upgrade or rollback, enabling the undo command.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from wupctl.models.outcome import UpgradeOutcome
from wupctl.models.package import PackageSource

# Version strings winget prints when it cannot determine the installed version
_UNKNOWN_VERSIONS = frozenset({"", "unknown"})


class HistoryActionType(str, Enum):
    """Type of action recorded in history.

    Attributes:
        UPGRADE: Package upgraded by the update pipeline.
        ROLLBACK: Previous version reinstalled by undo.
    """

    UPGRADE = "upgrade"
    ROLLBACK = "rollback"


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Record of a single upgrade attempt in history.

    Attributes:
        id: Unique identifier (12-character hex string from UUID).
        timestamp: When the action occurred (ISO 8601 format with timezone).
        action_type: Upgrade or rollback.
        source: Package manager that performed the action.
        package_id: Identifier of the affected package.
        from_version: Version before the action.
        to_version: Version targeted by the action.
        success: Whether the action completed successfully.
        exit_code: Exit code of the package manager command.
        duration_seconds: Duration of the command.
        reversible: Whether undo can restore from_version.
        metadata: Additional context (command, reversed entry, etc.).
    """

    id: str
    timestamp: str
    action_type: HistoryActionType
    source: PackageSource
    package_id: str
    from_version: str
    to_version: str
    success: bool
    exit_code: int
    duration_seconds: float = 0.0
    reversible: bool = False
    metadata: dict[str, Any] = field(default_factory=lambda: {})

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.id:
            msg = "History entry ID cannot be empty"
            raise ValueError(msg)
        if not self.timestamp:
            msg = "Timestamp cannot be empty"
            raise ValueError(msg)
        if not self.package_id:
            msg = "Package id cannot be empty"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage.

        Returns:
            Dictionary representation of the history entry.
        """
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "action_type": self.action_type.value,
            "source": self.source.value,
            "package_id": self.package_id,
            "from_version": self.from_version,
            "to_version": self.to_version,
            "success": self.success,
            "exit_code": self.exit_code,
            "duration_seconds": self.duration_seconds,
            "reversible": self.reversible,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryEntry:
        """Deserialize from dictionary.

        Args:
            data: Dictionary containing entry data.

        Returns:
            HistoryEntry instance.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If action_type, source or other data is invalid.
        """
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            action_type=HistoryActionType(data["action_type"]),
            source=PackageSource(data["source"]),
            package_id=data["package_id"],
            from_version=data.get("from_version", ""),
            to_version=data.get("to_version", ""),
            success=data.get("success", True),
            exit_code=int(data.get("exit_code", 0)),
            duration_seconds=float(data.get("duration_seconds", 0.0)),
            reversible=data.get("reversible", False),
            metadata=data.get("metadata", {}),
        )

    def to_json_line(self) -> str:
        """Serialize to JSON line for JSONL storage.

        Returns:
            Single JSON line (no trailing newline).
        """
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> HistoryEntry:
        """Deserialize from JSON line.

        Args:
            line: Single JSON line (with or without trailing whitespace).

        Returns:
            HistoryEntry instance.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        data = json.loads(line.strip())
        return cls.from_dict(data)


def is_concrete_version(version: str) -> bool:
    """Check whether a version string can be reinstalled.

    Winget reports undeterminable versions as 'Unknown' or with a '<'
    prefix (e.g., '< 1.2.0'); neither can be passed to --version.
    """
    stripped = version.strip()
    return stripped.casefold() not in _UNKNOWN_VERSIONS and not stripped.startswith(("<", ">"))


def create_history_entry(
    outcome: UpgradeOutcome,
    action_type: HistoryActionType = HistoryActionType.UPGRADE,
    metadata: dict[str, Any] | None = None,
) -> HistoryEntry:
    """Factory function to create a HistoryEntry from an outcome.

    Automatically generates a unique ID. The outcome start time is used as
    timestamp when present. Successful upgrades from a concrete version are
    reversible; rollbacks and failures are not.

    Args:
        outcome: The upgrade or rollback outcome to record.
        action_type: Type of action being recorded.
        metadata: Optional additional context.

    Returns:
        New HistoryEntry with auto-generated ID.
    """
    reversible = (
        action_type == HistoryActionType.UPGRADE
        and outcome.success
        and is_concrete_version(outcome.from_version)
    )
    return HistoryEntry(
        id=uuid.uuid4().hex[:12],
        timestamp=outcome.started_at or datetime.now(UTC).isoformat(),
        action_type=action_type,
        source=outcome.source,
        package_id=outcome.package_id,
        from_version=outcome.from_version,
        to_version=outcome.to_version,
        success=outcome.success,
        exit_code=outcome.exit_code,
        duration_seconds=round(outcome.duration_seconds, 3),
        reversible=reversible,
        metadata=metadata or {},
    )
