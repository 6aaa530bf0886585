"""Microsoft Store update scanner implementation.

The Store has no per-package listing of its own. When winget is present
its ``msstore`` source is queried like any other winget source; otherwise
the Store can only be asked to run its update scan through the MDM
management namespace, which reports no per-package result.
"""

import logging
import subprocess

from wupctl.models.package import PackageSource
from wupctl.scanners.winget import WingetScanner
from wupctl.utils.shell import CommandResult, command_exists, run_powershell

logger = logging.getLogger(__name__)

MDM_NAMESPACE = r"root\cimv2\mdm\dmmap"
MDM_CLASS = "MDM_EnterpriseModernAppManagement_AppManagement01"


class StoreScanner(WingetScanner):
    """Scanner for Microsoft Store apps.

    Available when winget is installed (full enumeration through the
    ``msstore`` source) or when the MDM app management class resolves
    (scan trigger only).
    """

    _WINGET_SOURCE = "msstore"

    _PROBE_TIMEOUT: float = 30.0
    _SCAN_TIMEOUT: float = 300.0

    @property
    def source(self) -> PackageSource:
        """Return STORE as the package source."""
        return PackageSource.STORE

    def is_available(self) -> bool:
        """Check if the Store can be reached through winget or MDM."""
        return self.supports_enumeration() or self._management_namespace_available()

    def supports_enumeration(self) -> bool:
        """Check if per-package enumeration is possible (winget present)."""
        return command_exists("winget")

    def _management_namespace_available(self) -> bool:
        """Probe the MDM app management class without raising."""
        if not command_exists("powershell"):
            return False

        script = (
            f"Get-CimClass -Namespace '{MDM_NAMESPACE}' -ClassName '{MDM_CLASS}' "
            "-ErrorAction Stop | Out-Null"
        )
        try:
            result = run_powershell(script, timeout=self._PROBE_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug("Store management namespace probe failed: %s", e)
            return False
        return result.success

    def trigger_update_scan(self) -> CommandResult:
        """Ask the Store to scan for and install app updates.

        The call returns as soon as the scan is queued; there is no
        structured result beyond the exit code.

        Returns:
            CommandResult of the PowerShell invocation.

        Raises:
            OSError: If powershell cannot be started.
            subprocess.TimeoutExpired: If the trigger does not return in time.
        """
        script = (
            f"Get-CimInstance -Namespace '{MDM_NAMESPACE}' -ClassName '{MDM_CLASS}' "
            "-ErrorAction Stop | Invoke-CimMethod -MethodName UpdateScanMethod -ErrorAction Stop"
        )
        logger.info("Triggering Microsoft Store update scan")
        return run_powershell(script, timeout=self._SCAN_TIMEOUT)
