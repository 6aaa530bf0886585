"""wupctl - Update control for Windows package managers.

Lists and installs updates from Winget, Chocolatey and the Microsoft Store
with per-package accounting, history and reports.
"""

__version__ = "0.1.0"
