"""Scanner/operator factories and history recording.

Provides the mapping from package sources to their scanner and operator
implementations, and records upgrade outcomes to history. These functions
are shared between the pipeline and the `update` and `undo` CLI commands.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wupctl.core.state import StateManager
from wupctl.models.history import create_history_entry
from wupctl.models.package import PackageSource
from wupctl.operators.base import Operator
from wupctl.operators.chocolatey import ChocolateyOperator
from wupctl.operators.store import StoreOperator
from wupctl.operators.winget import WingetOperator
from wupctl.scanners.base import Scanner
from wupctl.scanners.chocolatey import ChocolateyScanner
from wupctl.scanners.store import StoreScanner
from wupctl.scanners.winget import WingetScanner
from wupctl.utils.formatting import print_warning

if TYPE_CHECKING:
    from collections.abc import Sequence

    from wupctl.models.outcome import UpgradeOutcome

logger = logging.getLogger(__name__)

# Order in which sources are processed in a run
SOURCE_ORDER: tuple[PackageSource, ...] = (
    PackageSource.WINGET,
    PackageSource.CHOCOLATEY,
    PackageSource.STORE,
)

_SCANNERS: dict[PackageSource, type[Scanner]] = {
    PackageSource.WINGET: WingetScanner,
    PackageSource.CHOCOLATEY: ChocolateyScanner,
    PackageSource.STORE: StoreScanner,
}

_OPERATORS: dict[PackageSource, type[Operator]] = {
    PackageSource.WINGET: WingetOperator,
    PackageSource.CHOCOLATEY: ChocolateyOperator,
    PackageSource.STORE: StoreOperator,
}


def get_scanner(source: PackageSource) -> Scanner:
    """Create the scanner for a package source."""
    return _SCANNERS[source]()


def get_operator(source: PackageSource, timeout: float | None = None) -> Operator:
    """Create the operator for a package source.

    Args:
        source: Package source.
        timeout: Optional per-package upgrade timeout in seconds.

    Returns:
        Operator instance for the source.
    """
    return _OPERATORS[source](timeout=timeout)


def record_outcomes_to_history(
    outcomes: Sequence[UpgradeOutcome],
    command: str = "wupctl update",
    state: StateManager | None = None,
) -> int:
    """Append one history entry per upgrade outcome.

    Failed upgrades are recorded too. Errors during history recording are
    logged but do **not** interrupt the calling command's flow.

    Args:
        outcomes: Outcomes of a run, in processing order.
        command: Command string stored in the entry metadata.
        state: StateManager to write to. Defaults to the user state dir.

    Returns:
        Number of entries written.
    """
    written = 0
    try:
        manager = state or StateManager()
        for outcome in outcomes:
            manager.record_action(create_history_entry(outcome, metadata={"command": command}))
            written += 1
    except (OSError, RuntimeError) as e:
        logger.warning("Failed to record outcomes to history: %s", str(e))
        print_warning(f"Could not record update history: {e}")
        return written

    logger.debug("Recorded %d outcome(s) to history", written)
    return written
