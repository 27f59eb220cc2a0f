"""
Role store — persisted key/value variables per role.

Roles live in ``.spring/roles/vars/``: ``vars.yml`` for the default
role (empty name) and ``vars-<role>.yml`` for named roles. Within one
command run each role file is read at most once and written at most
once: updates stay in memory until ``flush``. All file access goes
through a FileSystem, so an in-memory run leaves the disk alone.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from scaffoldkit.adapters.base import FileSystem
from scaffoldkit.adapters.shell.filesystem import LocalFileSystem
from scaffoldkit.core.errors import ConfigError

logger = logging.getLogger(__name__)

ROLES_DIR = Path(".spring") / "roles" / "vars"
DEFAULT_ROLE = ""

_ROLE_FILE = re.compile(r"vars-(.*?)\.(yml|yaml)")
_INT = re.compile(r"[-+]?\d+")
_FLOAT = re.compile(r"[-+]?(\d+\.\d*|\.\d+|\d+)([eE][-+]?\d+)?")


def infer_type(value: Any) -> Any:
    """Convert numeric and boolean strings to their typed value.

    ``"30"`` → 30, ``"1.5"`` → 1.5, ``"true"`` → True. Anything else is
    returned unchanged.
    """
    if not isinstance(value, str):
        return value
    text = value.strip()
    if text.lower() in ("true", "false"):
        return text.lower() == "true"
    if _INT.fullmatch(text):
        return int(text)
    if _FLOAT.fullmatch(text):
        return float(text)
    return value


def role_file_name(role: str) -> str:
    return f"vars-{role}.yml" if role else "vars.yml"


class RoleStore:
    """Reads and writes role variable files under a project root."""

    def __init__(self, project_root: Path, fs: FileSystem | None = None):
        self._root = project_root
        self._fs = fs or LocalFileSystem()
        self._cache: dict[str, dict[str, Any]] = {}
        self._dirty: set[str] = set()

    @property
    def directory(self) -> Path:
        return self._root / ROLES_DIR

    def path(self, role: str = DEFAULT_ROLE) -> Path:
        return self.directory / role_file_name(role)

    def exists(self, role: str = DEFAULT_ROLE) -> bool:
        return self._fs.is_file(self.path(role))

    # ── Reading ─────────────────────────────────────────────────────

    def load(self, role: str = DEFAULT_ROLE) -> dict[str, Any]:
        """Variables of ``role``; a missing file is an empty role."""
        if role not in self._cache:
            self._cache[role] = self._read(self.path(role))
        return dict(self._cache[role])

    def get(self, key: str, role: str = DEFAULT_ROLE) -> Any:
        return self.load(role).get(key)

    def _read(self, path: Path) -> dict[str, Any]:
        if not self._fs.is_file(path):
            return {}
        try:
            data = yaml.safe_load(self._fs.read_text(path))
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in role file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read role file {path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
        logger.debug("Loaded %d variables from %s", len(data), path)
        return data

    def role_names(self) -> list[str]:
        """Named roles that have a file (the default role is not listed)."""
        names = []
        for entry in self._fs.list_files(self.directory):
            match = _ROLE_FILE.fullmatch(entry.name)
            if entry.parent == self.directory and match:
                names.append(match.group(1))
        return names

    # ── Writing ─────────────────────────────────────────────────────

    def update(self, key: str, value: Any, role: str = DEFAULT_ROLE) -> None:
        """Set one variable; written on the next ``flush``."""
        self.update_many({key: value}, role)

    def update_many(self, values: dict[str, Any], role: str = DEFAULT_ROLE) -> None:
        self.load(role)
        for key, value in values.items():
            self._cache[role][key] = infer_type(value)
        self._dirty.add(role)

    def flush(self) -> list[Path]:
        """Write every modified role file. Returns the paths written."""
        written = []
        for role in sorted(self._dirty):
            path = self.path(role)
            save_yaml(self._cache[role], path, self._fs)
            written.append(path)
        self._dirty.clear()
        return written

    def create(self, role: str) -> bool:
        """Create an empty role file. False if it already exists."""
        path = self.path(role)
        if self._fs.exists(path):
            return False
        self._fs.write_text(path, "")
        self._cache.pop(role, None)
        return True

    def remove(self, role: str) -> bool:
        """Delete a role file. False if there was none."""
        path = self.path(role)
        if not self._fs.is_file(path):
            return False
        self._fs.delete(path)
        self._cache.pop(role, None)
        self._dirty.discard(role)
        return True


def save_yaml(data: dict[str, Any], path: Path, fs: FileSystem | None = None) -> None:
    """Write ``data`` as block-style YAML with platform line endings.

    An existing file is swapped through ``replace_atomic``.
    """
    fs = fs or LocalFileSystem()
    content = yaml.safe_dump(
        data,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        line_break=os.linesep,
    )
    if fs.is_file(path):
        fs.replace_atomic(path, content)
    else:
        fs.write_text(path, content)
    logger.debug("Role variables saved to %s", path)
