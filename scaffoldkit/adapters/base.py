"""
Adapter base — the effects contract between engine and the outside world.

Handlers never touch the disk or spawn processes directly; they go
through a FileSystem and a ProcessRunner. The local implementations
live in ``adapters.shell``; ``adapters.mock`` provides in-memory
doubles for tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel


class ProcessResult(BaseModel):
    """Outcome of one external command."""

    command: str
    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.timed_out


class FileSystem(ABC):
    """File operations used by the handlers and the orchestrator."""

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Whether anything exists at ``path``."""

    @abstractmethod
    def is_file(self, path: Path) -> bool:
        """Whether ``path`` is a regular file."""

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        """Whether ``path`` is a directory."""

    @abstractmethod
    def read_text(self, path: Path) -> str:
        """Read a file as text.

        UTF-8 first; undecodable content is re-read as Latin-1.
        """

    @abstractmethod
    def write_text(self, path: Path, text: str) -> None:
        """Write ``text`` to ``path``, creating parent directories."""

    @abstractmethod
    def replace_atomic(self, path: Path, text: str) -> None:
        """Replace an existing file's content through a temporary sibling.

        The temporary file is removed whether or not the swap succeeds.
        """

    @abstractmethod
    def delete(self, path: Path) -> None:
        """Remove the file at ``path``."""

    @abstractmethod
    def list_files(self, directory: Path) -> list[Path]:
        """All regular, non-hidden files below ``directory``, sorted."""

    @abstractmethod
    def list_dirs(self, directory: Path) -> list[Path]:
        """Direct, non-hidden subdirectories of ``directory``, sorted."""


class ProcessRunner(ABC):
    """Runs shell commands on behalf of the exec handler."""

    @abstractmethod
    def run(
        self,
        command: str,
        cwd: Path,
        stdin: str | None = None,
        stdout_to: Path | None = None,
        stderr_to: Path | None = None,
        timeout: float = 300,
    ) -> ProcessResult:
        """Run ``command`` through the shell and wait for it.

        When ``stdout_to``/``stderr_to`` are set the stream goes to that
        file instead of being captured. A timeout is reported through
        ``ProcessResult.timed_out``, never raised.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
