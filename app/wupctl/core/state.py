"""State management for update history.

This module provides the StateManager class for persisting and querying
history entries in a JSONL file format.
"""

import json
import logging
from pathlib import Path

from wupctl.core.paths import ensure_state_dir, get_state_dir
from wupctl.models.history import (
    HistoryActionType,
    HistoryEntry,
    create_history_entry,
)
from wupctl.models.outcome import UpgradeOutcome

logger = logging.getLogger(__name__)


class StateManager:
    """Manages update history in a JSONL file.

    Storage location: <state dir>/history.jsonl

    Each line is a complete JSON object representing one HistoryEntry,
    i.e. one upgrade or rollback attempt. The file is append-only.

    Attributes:
        state_dir: Directory containing the history file.
    """

    HISTORY_FILENAME = "history.jsonl"

    def __init__(self, state_dir: Path | None = None) -> None:
        """Initialize StateManager.

        Args:
            state_dir: Optional override for state directory.
        """
        self._state_dir = state_dir if state_dir is not None else get_state_dir()

    @property
    def history_path(self) -> Path:
        """Path to the history.jsonl file."""
        return self._state_dir / self.HISTORY_FILENAME

    def record_action(self, entry: HistoryEntry) -> None:
        """Append an entry to the history file.

        Creates file and parent directories if they don't exist.

        Args:
            entry: The history entry to record.

        Raises:
            RuntimeError: If the state directory cannot be created.
            OSError: If the file cannot be written.
        """
        if self._state_dir == get_state_dir():
            ensure_state_dir()
        else:
            self._state_dir.mkdir(parents=True, exist_ok=True)

        line = entry.to_json_line()

        with self.history_path.open(mode="a", encoding="utf-8") as f:
            f.write(line + "\n")
            f.flush()

    def get_history(self, limit: int | None = None) -> list[HistoryEntry]:
        """Read history entries, newest first.

        Corrupt lines are logged and skipped.

        Args:
            limit: Maximum number of entries to return.
                  If None, returns all entries.

        Returns:
            List of HistoryEntry, newest first.
            Returns empty list if file doesn't exist.
        """
        if not self.history_path.exists():
            return []

        entries: list[HistoryEntry] = []

        with self.history_path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue

                try:
                    entries.append(HistoryEntry.from_json_line(line))
                except (json.JSONDecodeError, KeyError, ValueError) as e:
                    logger.warning("Skipping corrupt history line %d: %s", line_num, str(e))

        entries.reverse()

        if limit is not None:
            return entries[:limit]

        return entries

    def get_last_reversible(self) -> HistoryEntry | None:
        """Get the most recent upgrade that can still be rolled back.

        Returns:
            Most recent reversible HistoryEntry not yet reversed, or None.
        """
        history = self.get_history()
        reversed_ids = self.get_reversed_entry_ids(history)

        for entry in history:
            if entry.reversible and entry.id not in reversed_ids:
                return entry

        return None

    def get_reversed_entry_ids(self, history: list[HistoryEntry] | None = None) -> set[str]:
        """Collect IDs of entries referenced by a successful rollback."""
        if history is None:
            history = self.get_history()
        return {
            entry.metadata["reversed_entry_id"]
            for entry in history
            if entry.action_type == HistoryActionType.ROLLBACK
            and entry.success
            and entry.metadata.get("reversed_entry_id")
        }

    def get_entry_by_id(self, entry_id: str) -> HistoryEntry | None:
        """Find an entry by ID (full ID or unique prefix).

        Args:
            entry_id: The entry ID or prefix to find.

        Returns:
            HistoryEntry if exactly one entry matches, None otherwise.
        """
        matches = [entry for entry in self.get_history() if entry.id.startswith(entry_id)]
        return matches[0] if len(matches) == 1 else None

    def record_rollback(self, original: HistoryEntry, outcome: UpgradeOutcome) -> HistoryEntry:
        """Record a rollback attempt of an earlier upgrade.

        A successful rollback marks the original entry as reversed. The
        original line is never modified.

        Args:
            original: The upgrade entry that was rolled back.
            outcome: Outcome of the reinstall command.

        Returns:
            The recorded rollback entry.
        """
        entry = create_history_entry(
            outcome,
            action_type=HistoryActionType.ROLLBACK,
            metadata={"reversed_entry_id": original.id, "command": "wupctl undo"},
        )
        self.record_action(entry)
        return entry
