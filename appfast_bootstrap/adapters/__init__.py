"""Adapters — bindings for the external tools the installer drives.

Public re-exports for convenient access.
"""

from appfast_bootstrap.adapters.archive.unzip import UnzipAdapter
from appfast_bootstrap.adapters.base import Adapter, ExecutionContext
from appfast_bootstrap.adapters.mock import MockAdapter
from appfast_bootstrap.adapters.network.download import DownloadAdapter
from appfast_bootstrap.adapters.registry import AdapterRegistry
from appfast_bootstrap.adapters.shell.command import ShellCommandAdapter
from appfast_bootstrap.adapters.vcs.git import GitAdapter

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "DownloadAdapter",
    "ExecutionContext",
    "GitAdapter",
    "MockAdapter",
    "ShellCommandAdapter",
    "UnzipAdapter",
]
