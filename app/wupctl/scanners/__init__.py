"""Update scanners for different package managers.

This module exports the scanner classes for enumerating upgradeable packages.
"""

from wupctl.scanners.base import (
    EnumerationError,
    Scanner,
    ScannerError,
    SourceUnavailableError,
    filter_excluded,
)
from wupctl.scanners.chocolatey import ChocolateyScanner
from wupctl.scanners.store import StoreScanner
from wupctl.scanners.winget import WingetScanner

__all__ = [
    "ChocolateyScanner",
    "EnumerationError",
    "Scanner",
    "ScannerError",
    "SourceUnavailableError",
    "StoreScanner",
    "WingetScanner",
    "filter_excluded",
]
