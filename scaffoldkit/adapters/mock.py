"""
Mock adapters — in-memory test doubles for the effects interface.

``MemoryFileSystem`` keeps files in a dict keyed by absolute path and
records every write. ``FakeProcessRunner`` returns scripted results
and logs every command it receives.
"""

from __future__ import annotations

from pathlib import Path

from scaffoldkit.adapters.base import FileSystem, ProcessResult, ProcessRunner


class MemoryFileSystem(FileSystem):
    """Dict-backed filesystem.

    Directories exist implicitly as parents of stored files, or
    explicitly through ``mkdir``.
    """

    def __init__(self, files: dict[str | Path, str] | None = None):
        self._files: dict[Path, str] = {}
        self._dirs: set[Path] = set()
        self._write_log: list[Path] = []
        for path, text in (files or {}).items():
            self._store(Path(path), text)

    @property
    def files(self) -> dict[Path, str]:
        return self._files

    @property
    def write_log(self) -> list[Path]:
        """Every path written, in order."""
        return self._write_log

    @property
    def write_count(self) -> int:
        return len(self._write_log)

    def mkdir(self, path: Path) -> None:
        self._dirs.add(Path(path))

    def _store(self, path: Path, text: str) -> None:
        self._files[path] = text
        for parent in path.parents:
            self._dirs.add(parent)

    def exists(self, path: Path) -> bool:
        return self.is_file(path) or self.is_dir(path)

    def is_file(self, path: Path) -> bool:
        return Path(path) in self._files

    def is_dir(self, path: Path) -> bool:
        return Path(path) in self._dirs

    def read_text(self, path: Path) -> str:
        try:
            return self._files[Path(path)]
        except KeyError:
            raise FileNotFoundError(str(path)) from None

    def write_text(self, path: Path, text: str) -> None:
        path = Path(path)
        if path in self._dirs:
            raise IsADirectoryError(str(path))
        self._store(path, text)
        self._write_log.append(path)

    def replace_atomic(self, path: Path, text: str) -> None:
        self.write_text(path, text)

    def delete(self, path: Path) -> None:
        try:
            del self._files[Path(path)]
        except KeyError:
            raise FileNotFoundError(str(path)) from None

    def list_files(self, directory: Path) -> list[Path]:
        directory = Path(directory)
        found = []
        for path in self._files:
            try:
                rel = path.relative_to(directory)
            except ValueError:
                continue
            if not any(part.startswith(".") for part in rel.parts):
                found.append(path)
        return sorted(found, key=lambda p: p.relative_to(directory).as_posix())

    def list_dirs(self, directory: Path) -> list[Path]:
        directory = Path(directory)
        return sorted(
            d for d in self._dirs if d.parent == directory and not d.name.startswith(".")
        )


class FakeProcessRunner(ProcessRunner):
    """Scripted ProcessRunner.

    Responses are matched by exact command first, then by the first
    registered substring found in the command. Unmatched commands
    succeed with empty output.
    """

    def __init__(self):
        self._responses: dict[str, ProcessResult] = {}
        self._call_log: list[dict] = []

    @property
    def call_log(self) -> list[dict]:
        """Keyword arguments of every ``run`` call."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def commands(self) -> list[str]:
        return [call["command"] for call in self._call_log]

    def set_result(self, match: str, stdout: str = "", stderr: str = "", exit_code: int = 0) -> None:
        """Script the result for commands containing ``match``."""
        self._responses[match] = ProcessResult(
            command=match, exit_code=exit_code, stdout=stdout, stderr=stderr
        )

    def set_failure(self, match: str, stderr: str = "Mock failure", exit_code: int = 1) -> None:
        self.set_result(match, stderr=stderr, exit_code=exit_code)

    def set_timeout(self, match: str) -> None:
        self._responses[match] = ProcessResult(command=match, exit_code=-1, timed_out=True)

    def run(
        self,
        command: str,
        cwd: Path,
        stdin: str | None = None,
        stdout_to: Path | None = None,
        stderr_to: Path | None = None,
        timeout: float = 300,
    ) -> ProcessResult:
        self._call_log.append(
            {
                "command": command,
                "cwd": cwd,
                "stdin": stdin,
                "stdout_to": stdout_to,
                "stderr_to": stderr_to,
                "timeout": timeout,
            }
        )
        scripted = self._responses.get(command)
        if scripted is None:
            for match, result in self._responses.items():
                if match in command:
                    scripted = result
                    break
        if scripted is None:
            return ProcessResult(command=command)
        return scripted.model_copy(update={"command": command})
