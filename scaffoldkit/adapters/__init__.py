"""Adapters — filesystem and process effects used by the engine.

Public re-exports for convenient access.
"""

from scaffoldkit.adapters.base import FileSystem, ProcessResult, ProcessRunner
from scaffoldkit.adapters.mock import FakeProcessRunner, MemoryFileSystem
from scaffoldkit.adapters.shell.command import SubprocessRunner
from scaffoldkit.adapters.shell.filesystem import LocalFileSystem

__all__ = [
    "FakeProcessRunner",
    "FileSystem",
    "LocalFileSystem",
    "MemoryFileSystem",
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
]
