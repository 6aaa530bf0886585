"""Data models for wupctl.

This module exports the core data structures used throughout the application.
"""

from wupctl.models.history import (
    HistoryActionType,
    HistoryEntry,
    create_history_entry,
)
from wupctl.models.outcome import (
    SourceStatus,
    SourceSummary,
    UpgradeOutcome,
    classify_status,
)
from wupctl.models.package import (
    ExclusionSet,
    PackageRecord,
    PackageSource,
    make_exclusion_set,
)
from wupctl.models.run_result import RunMetadata, RunResult, SourceRun

__all__ = [
    "ExclusionSet",
    "HistoryActionType",
    "HistoryEntry",
    "PackageRecord",
    "PackageSource",
    "RunMetadata",
    "RunResult",
    "SourceRun",
    "SourceStatus",
    "SourceSummary",
    "UpgradeOutcome",
    "classify_status",
    "create_history_entry",
    "make_exclusion_set",
]
