"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest


@pytest.fixture
def winget_upgrade_output() -> str:
    """Sample `winget upgrade` output with progress noise and footer."""
    return """   -
   \\
   ██████████████████████████████  1.50 MB / 1.50 MB
Name                           Id                         Version      Available    Source
---------------------------------------------------------------------------------------------
Mozilla Firefox (x64 en-US)    Mozilla.Firefox            128.0        129.0.1      winget
Git                            Git.Git                    2.45.1       2.46.0       winget
Microsoft Visual C++ 2015 x64  Microsoft.VCRedist.2015+.x64 14.0.24215 14.40.33810.0 winget
Zoom Workplace                 Zoom.Zoom                  < 6.1.0      6.1.5.43215  winget
3 upgrades available.
1 package(s) have version numbers that cannot be determined. Use --include-unknown to see all results.
"""


@pytest.fixture
def winget_no_updates_output() -> str:
    """`winget upgrade` output when nothing is outdated."""
    return "No installed package found matching input criteria.\n"


@pytest.fixture
def winget_explicit_targeting_output() -> str:
    """`winget upgrade` output with a second table of pinned packages."""
    return """Name  Id       Version Available Source
-----------------------------------------
Git   Git.Git  2.45.1  2.46.0    winget
1 upgrades available.

The following packages have an upgrade available, but require explicit targeting for upgrade:
Name           Id             Version Available Source
-------------------------------------------------------
Pinned Tool    Vendor.Pinned  1.0     2.0       winget
"""


@pytest.fixture
def choco_outdated_output() -> str:
    """Sample `choco outdated --limit-output` output."""
    return """7zip|23.1.0|24.8.0|false
googlechrome|126.0.6478.127|127.0.6533.89|true
nodejs-lts|20.15.0|20.16.0|false"""


@pytest.fixture
def mock_empty_output() -> str:
    """Empty output for testing edge cases."""
    return ""


@pytest.fixture(autouse=True)
def reset_wupctl_logger() -> Iterator[None]:
    """Undo logging configuration done by CLI invocations."""
    yield
    logger = logging.getLogger("wupctl")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point config and state directories at a temporary location."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
