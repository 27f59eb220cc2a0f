"""
Configuration loader — locates the project root and reads engine settings.

The project root is the nearest directory (walking up from the start
directory) that contains a ``.spring`` directory. Settings come from
the optional ``.spring/engine.yml``; ``SCAFFOLDKIT_EXEC_TIMEOUT``
overrides the exec timeout.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from scaffoldkit.core.errors import ConfigError
from scaffoldkit.core.models.settings import EngineSettings

logger = logging.getLogger(__name__)

PROJECT_MARKER = ".spring"
SETTINGS_FILE = "engine.yml"
ENV_EXEC_TIMEOUT = "SCAFFOLDKIT_EXEC_TIMEOUT"


def find_project_root(start_dir: Path | None = None) -> Path:
    """Search for a ``.spring`` directory starting from ``start_dir``, walking up.

    Falls back to the start directory itself when no marker is found,
    so commands can still run against an unmarked directory.
    """
    start = (start_dir or Path.cwd()).resolve()
    current = start

    for _ in range(20):  # safety limit
        if (current / PROJECT_MARKER).is_dir():
            return current
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return start


def load_settings(project_root: Path) -> EngineSettings:
    """Load and validate engine settings for a project.

    Raises:
        ConfigError: If the settings file is unreadable or invalid.
    """
    path = project_root / PROJECT_MARKER / SETTINGS_FILE
    data: dict = {}

    if path.is_file():
        logger.debug("Loading engine settings from %s", path)
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e
        if raw is not None and not isinstance(raw, dict):
            raise ConfigError(f"Expected a YAML mapping in {path}, got {type(raw).__name__}")
        data = dict(raw or {})

    timeout = os.environ.get(ENV_EXEC_TIMEOUT)
    if timeout:
        data["exec-timeout"] = timeout

    try:
        return EngineSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid engine settings: {e}") from e
