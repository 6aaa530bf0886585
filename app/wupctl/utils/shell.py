"""Shell execution utilities.

Provides subprocess execution with captured output for the package
manager adapters.
"""

import shutil
import subprocess
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, stripped."""
        parts = [part.strip() for part in (self.stdout, self.stderr) if part and part.strip()]
        return "\n".join(parts)


def run_command(
    args: list[str],
    *,
    timeout: float | None = 60.0,
) -> CommandResult:
    """Execute a command and return the result.

    Output is decoded as UTF-8 with replacement so that console code page
    artifacts from Windows tools never abort a run.

    Args:
        args: Command and arguments to execute.
        timeout: Maximum time in seconds to wait for command. None waits
            until the command exits.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        check=False,
        timeout=timeout,
    )
    return CommandResult(
        stdout=result.stdout or "",
        stderr=result.stderr or "",
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


def run_powershell(script: str, *, timeout: float | None = 120.0) -> CommandResult:
    """Run a PowerShell snippet non-interactively.

    Args:
        script: PowerShell command text.
        timeout: Maximum time in seconds to wait.

    Returns:
        CommandResult of the powershell process.

    Raises:
        subprocess.TimeoutExpired: If the script exceeds timeout.
        FileNotFoundError: If powershell is not found.
    """
    return run_command(
        [
            "powershell",
            "-NoProfile",
            "-NonInteractive",
            "-ExecutionPolicy",
            "Bypass",
            "-Command",
            script,
        ],
        timeout=timeout,
    )
