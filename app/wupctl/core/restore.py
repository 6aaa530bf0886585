"""System restore point creation.

Creates a Windows System Restore checkpoint before upgrades so that a bad
batch can be rolled back from outside wupctl.
"""

import logging
import subprocess

from wupctl.core.logs import log_success
from wupctl.utils.shell import command_exists, run_powershell

logger = logging.getLogger(__name__)

# Checkpoint-Computer can take several minutes on busy disks
_CHECKPOINT_TIMEOUT: float = 900.0


class RestorePointError(Exception):
    """Raised when a restore point cannot be created."""


def create_restore_point(description: str) -> None:
    """Create a system restore point with Checkpoint-Computer.

    Requires an elevated session and System Protection enabled on the
    system drive. Windows also refuses a second checkpoint within 24 hours
    by default, which surfaces here as a failure.

    Args:
        description: Description shown in System Restore.

    Raises:
        RestorePointError: If PowerShell is missing or the checkpoint fails.
    """
    if not command_exists("powershell"):
        raise RestorePointError("PowerShell is not available on this system")

    quoted = description.replace("'", "''")
    script = (
        f"Checkpoint-Computer -Description '{quoted}' "
        "-RestorePointType MODIFY_SETTINGS -ErrorAction Stop"
    )

    logger.info("Creating restore point: %s", description)
    try:
        result = run_powershell(script, timeout=_CHECKPOINT_TIMEOUT)
    except subprocess.TimeoutExpired as e:
        raise RestorePointError("Checkpoint-Computer timed out") from e
    except OSError as e:
        raise RestorePointError(f"Cannot run PowerShell: {e}") from e

    if not result.success:
        detail = result.output or f"exit code {result.returncode}"
        raise RestorePointError(f"Checkpoint-Computer failed: {detail}")

    log_success(logger, "Restore point created")
