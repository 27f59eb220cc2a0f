"""
Filesystem adapter — local disk operations for the handlers.

Text is read and written without newline translation so a file's own
line endings survive an inject round trip.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from scaffoldkit.adapters.base import FileSystem

logger = logging.getLogger(__name__)

FALLBACK_ENCODING = "latin-1"


class LocalFileSystem(FileSystem):
    """FileSystem backed by the real disk."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def read_text(self, path: Path) -> str:
        try:
            with open(path, encoding="utf-8", newline="") as fh:
                return fh.read()
        except UnicodeDecodeError:
            logger.debug("%s is not valid UTF-8, reading as %s", path, FALLBACK_ENCODING)
            with open(path, encoding=FALLBACK_ENCODING, newline="") as fh:
                return fh.read()

    def write_text(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as fh:
            fh.write(text)

    def replace_atomic(self, path: Path, text: str) -> None:
        tmp = path.with_name(path.name + ".new")
        try:
            with open(tmp, "w", encoding="utf-8", newline="") as fh:
                fh.write(text)
            shutil.copy2(tmp, path)
            logger.debug("Replaced %s", path)
        finally:
            tmp.unlink(missing_ok=True)

    def delete(self, path: Path) -> None:
        path.unlink()

    def list_files(self, directory: Path) -> list[Path]:
        if not directory.is_dir():
            return []
        files = []
        for candidate in directory.rglob("*"):
            rel = candidate.relative_to(directory)
            if any(part.startswith(".") for part in rel.parts):
                continue
            if candidate.is_file():
                files.append(candidate)
        return sorted(files, key=lambda p: p.relative_to(directory).as_posix())

    def list_dirs(self, directory: Path) -> list[Path]:
        if not directory.is_dir():
            return []
        return sorted(
            p for p in directory.iterdir() if p.is_dir() and not p.name.startswith(".")
        )
