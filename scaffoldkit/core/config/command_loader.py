"""
Command loader — scans ``.spring/commands`` for nouns and verbs.

Layout::

    .spring/commands/<noun>/command.yaml          optional noun manifest
    .spring/commands/<noun>/<verb>/command.yaml   optional verb manifest
    .spring/commands/<noun>/<verb>/*              action files

Directory names are the default command names and ``<dir> commands``
the default description. Hidden directories are ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from scaffoldkit.adapters.base import FileSystem
from scaffoldkit.adapters.shell.filesystem import LocalFileSystem
from scaffoldkit.core.errors import ConfigError, ResolveError
from scaffoldkit.core.models.command import Command, NounEntry, VerbEntry

logger = logging.getLogger(__name__)

MANIFEST_NAMES = ("command.yaml", "command.yml")


def is_manifest(path: Path) -> bool:
    return path.name in MANIFEST_NAMES


def load_manifest(directory: Path) -> Command:
    """Read the command manifest of a noun or verb directory.

    Raises:
        ConfigError: The manifest exists but is not valid.
    """
    data: dict = {}
    for name in MANIFEST_NAMES:
        path = directory / name
        if not path.is_file():
            continue
        logger.debug("Found %s in %s", name, directory)
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if raw is None:
            break
        if not isinstance(raw, dict):
            raise ConfigError(f"Expected a YAML mapping in {path}, got {type(raw).__name__}")
        # The manifest may wrap everything under a "command" key or be flat
        data = raw.get("command", raw) if isinstance(raw.get("command"), dict) else raw
        break

    try:
        command = Command.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid command manifest in {directory}: {e}") from e

    if not command.name:
        command.name = directory.name
    if not command.description:
        command.description = f"{directory.name} commands"
    return command


def _subdirs(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_dir() and not p.name.startswith("."))


def scan_commands(commands_dir: Path) -> list[NounEntry]:
    """Every noun under ``commands_dir`` with its verbs, sorted by name."""
    nouns = []
    for noun_dir in _subdirs(commands_dir):
        noun = NounEntry(command=load_manifest(noun_dir), path=str(noun_dir))
        for verb_dir in _subdirs(noun_dir):
            noun.verbs.append(VerbEntry(command=load_manifest(verb_dir), path=str(verb_dir)))
        nouns.append(noun)
    logger.debug("Scanned %d command group(s) in %s", len(nouns), commands_dir)
    return nouns


def resolve_command_dir(
    commands_dir: Path,
    noun: str,
    verb: str,
    fs: FileSystem | None = None,
) -> Path:
    """Directory holding the action files of ``noun verb``.

    Raises:
        ResolveError: No such noun or verb directory.
    """
    fs = fs or LocalFileSystem()
    noun_dir = commands_dir / noun
    if not fs.is_dir(noun_dir):
        available = ", ".join(p.name for p in fs.list_dirs(commands_dir)) or "none"
        raise ResolveError(f"No command '{noun}' in {commands_dir} (available: {available})")
    verb_dir = noun_dir / verb
    if not fs.is_dir(verb_dir):
        available = ", ".join(p.name for p in fs.list_dirs(noun_dir)) or "none"
        raise ResolveError(f"No subcommand '{verb}' for '{noun}' (available: {available})")
    return verb_dir
