"""Adapters — bindings to external tools.

Public re-exports for convenient access.
"""

from envhub.adapters.mock import MockCommandAdapter
from envhub.adapters.shell.command import CommandReceipt, ShellCommandAdapter

__all__ = [
    "CommandReceipt",
    "MockCommandAdapter",
    "ShellCommandAdapter",
]
