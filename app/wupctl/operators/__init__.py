"""Package operators for upgrading packages.

This module provides the abstract operator and the concrete
implementations for Winget, Chocolatey and the Microsoft Store.
"""

from wupctl.operators.base import Operator, OperatorError, ProcessExecutionError
from wupctl.operators.chocolatey import ChocolateyOperator
from wupctl.operators.store import StoreOperator
from wupctl.operators.winget import WingetOperator

__all__ = [
    "ChocolateyOperator",
    "Operator",
    "OperatorError",
    "ProcessExecutionError",
    "StoreOperator",
    "WingetOperator",
]
