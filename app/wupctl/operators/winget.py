"""Winget package operator implementation.

Upgrades and installs packages with ``winget`` using exact id matching.
"""

from wupctl.models.package import PackageSource
from wupctl.operators.base import Operator
from wupctl.utils.shell import command_exists


class WingetOperator(Operator):
    """Operator for the Windows Package Manager.

    Every command targets ``--id <id> --exact`` so that winget never
    resolves a partial match to a different package.
    """

    # winget source the commands are restricted to
    _WINGET_SOURCE = "winget"

    # Silent, non-interactive flags shared by upgrade and install
    _UNATTENDED_FLAGS: tuple[str, ...] = (
        "--silent",
        "--accept-package-agreements",
        "--accept-source-agreements",
        "--disable-interactivity",
    )

    @property
    def source(self) -> PackageSource:
        """Return WINGET as the package source."""
        return PackageSource.WINGET

    def is_available(self) -> bool:
        """Check if the winget CLI is available."""
        return command_exists("winget")

    def _upgrade_command(self, package_id: str) -> list[str]:
        return [
            "winget",
            "upgrade",
            "--id",
            package_id,
            "--exact",
            "--source",
            self._WINGET_SOURCE,
            *self._UNATTENDED_FLAGS,
        ]

    def _install_version_command(self, package_id: str, version: str) -> list[str]:
        return [
            "winget",
            "install",
            "--id",
            package_id,
            "--exact",
            "--version",
            version,
            "--source",
            self._WINGET_SOURCE,
            "--force",
            *self._UNATTENDED_FLAGS,
        ]
