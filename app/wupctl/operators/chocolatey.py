"""Chocolatey package operator implementation.

Upgrades and installs packages with ``choco``.
"""

from wupctl.models.package import PackageSource
from wupctl.operators.base import Operator
from wupctl.utils.shell import command_exists


class ChocolateyOperator(Operator):
    """Operator for Chocolatey packages.

    Chocolatey resolves package names exactly, so the id is passed as is.
    ``-y`` confirms all prompts and ``--no-progress`` keeps the captured
    output readable.
    """

    _UNATTENDED_FLAGS: tuple[str, ...] = ("-y", "--no-progress", "--limit-output")

    @property
    def source(self) -> PackageSource:
        """Return CHOCOLATEY as the package source."""
        return PackageSource.CHOCOLATEY

    def is_available(self) -> bool:
        """Check if the choco CLI is available."""
        return command_exists("choco")

    def _upgrade_command(self, package_id: str) -> list[str]:
        return ["choco", "upgrade", package_id, *self._UNATTENDED_FLAGS]

    def _install_version_command(self, package_id: str, version: str) -> list[str]:
        return [
            "choco",
            "install",
            package_id,
            "--version",
            version,
            "--allow-downgrade",
            "--force",
            *self._UNATTENDED_FLAGS,
        ]
