"""Microsoft Store package operator implementation.

Store apps are upgraded through winget's ``msstore`` source.
"""

from wupctl.models.package import PackageSource
from wupctl.operators.winget import WingetOperator


class StoreOperator(WingetOperator):
    """Operator for Microsoft Store apps, backed by winget."""

    _WINGET_SOURCE = "msstore"

    @property
    def source(self) -> PackageSource:
        """Return STORE as the package source."""
        return PackageSource.STORE
