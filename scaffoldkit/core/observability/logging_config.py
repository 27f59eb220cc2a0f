"""
Logging setup for the CLI.

Called once per invocation by main.py; modules log through
``logging.getLogger(__name__)``.

Console level: ``--debug``/``--verbose``/``--quiet``, else
SCAFFOLDKIT_LOG_LEVEL, else WARNING. SCAFFOLDKIT_LOG_FILE adds a file
handler at SCAFFOLDKIT_LOG_FILE_LEVEL (default: the console level).
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LOG_LEVEL = "SCAFFOLDKIT_LOG_LEVEL"
ENV_LOG_FILE = "SCAFFOLDKIT_LOG_FILE"
ENV_LOG_FILE_LEVEL = "SCAFFOLDKIT_LOG_FILE_LEVEL"

# Template rendering logs a lot at DEBUG
_LIBRARY_LOGGERS = ("jinja2", "markupsafe")

_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d - %(message)s"


def resolve_level(verbose: bool = False, quiet: bool = False, debug: bool = False) -> str:
    """Console level name from the global CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LOG_LEVEL, "WARNING")


def _console_formatter(level: int) -> logging.Formatter:
    if level <= logging.DEBUG:
        return logging.Formatter(_DETAILED, datefmt="%H:%M:%S")
    if level <= logging.INFO:
        return logging.Formatter("%(asctime)s %(message)s", datefmt="%H:%M:%S")
    return logging.Formatter("%(message)s")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root handlers with a stderr handler and an optional log file."""
    console_level = _parse_level(level)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))

    root = logging.getLogger()
    root.handlers[:] = [console]
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level or level)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_DETAILED, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)

    if console_level > logging.DEBUG:
        for name in _LIBRARY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown names mean WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
