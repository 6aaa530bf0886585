"""Package models for update enumeration.

This module defines the core data structures for representing
upgradeable packages reported by Winget, Chocolatey and the Store.
"""

from dataclasses import dataclass
from enum import Enum


class PackageSource(str, Enum):
    """Enumeration of supported package sources."""

    WINGET = "winget"
    CHOCOLATEY = "chocolatey"
    STORE = "store"

    @property
    def label(self) -> str:
        """Human-readable source name."""
        return _SOURCE_LABELS[self]


_SOURCE_LABELS: dict[PackageSource, str] = {
    PackageSource.WINGET: "Winget",
    PackageSource.CHOCOLATEY: "Chocolatey",
    PackageSource.STORE: "Microsoft Store",
}


@dataclass(frozen=True, slots=True)
class PackageRecord:
    """A package with an update available from one source.

    Versions are kept as the tool prints them; they are never compared.

    Attributes:
        name: Display name (e.g., 'Mozilla Firefox').
        id: Source-specific identifier (e.g., 'Mozilla.Firefox'). For
            Chocolatey the identifier equals the name.
        current_version: Installed version string.
        available_version: Version the source would upgrade to.
        source: Package manager that reported the update.
        pinned: Whether the package is pinned and must not be upgraded
            (Chocolatey only).
    """

    name: str
    id: str
    current_version: str
    available_version: str
    source: PackageSource
    pinned: bool = False

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.id.strip():
            msg = "Package id cannot be empty"
            raise ValueError(msg)

    @property
    def key(self) -> str:
        """Case-insensitive identity used for exclusion matching."""
        return self.id.casefold()


ExclusionSet = frozenset[str]


def make_exclusion_set(identifiers: list[str] | tuple[str, ...] | set[str]) -> ExclusionSet:
    """Build a case-insensitive exclusion set.

    Args:
        identifiers: Package identifiers as written in configuration.

    Returns:
        Frozen set of case-folded, stripped identifiers (blanks dropped).
    """
    return frozenset(item.strip().casefold() for item in identifiers if item.strip())
