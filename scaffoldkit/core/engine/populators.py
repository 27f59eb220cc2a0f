"""
Model populators — seed the model from the project and environment.

The model is built once per command run: user arguments first, then
each populator in registration order. Every writer uses set-if-absent,
so the first one to provide a key wins.
"""

from __future__ import annotations

import getpass
import logging
import os
import platform
import re
import tempfile
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any

from scaffoldkit.core.errors import ConfigError

logger = logging.getLogger(__name__)

ARTIFACT_ID = "artifact-id"
ARTIFACT_VERSION = "artifact-version"
ARTIFACT_PATH = "artifact-path"
MAVEN_MODEL = "maven-model"
MAVEN_PROPERTIES = "maven-properties"
PROJECT_NAME = "project-name"
PROJECT_DESCRIPTION = "project-description"
JAVA_VERSION = "java-version"
ROOT_PACKAGE = "root-package"
ROOT_PACKAGE_DIR = "root-package-dir"


def set_if_absent(model: dict[str, Any], key: str, value: Any) -> bool:
    """Store ``value`` unless the key is already set. ``None`` is never stored."""
    if value is None or key in model:
        return False
    model[key] = value
    return True


class ModelPopulator(ABC):
    """Contributes values to the model before any action runs."""

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    def contribute_to_model(self, project_root: Path, model: dict[str, Any]) -> None:
        """Add entries to ``model`` with set-if-absent semantics."""


# ── Maven ───────────────────────────────────────────────────────────


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child_text(element: ET.Element | None, name: str) -> str | None:
    if element is None:
        return None
    for child in element:
        if _local(child.tag) == name:
            return (child.text or "").strip()
    return None


def _child(element: ET.Element, name: str) -> ET.Element | None:
    for child in element:
        if _local(child.tag) == name:
            return child
    return None


def java_version(value: str) -> str:
    """Normalize ``1.8`` style versions to ``8``."""
    value = value.strip()
    if value.startswith("1."):
        return value[2:]
    return value


class MavenModelPopulator(ModelPopulator):
    """Reads coordinates and properties from ``pom.xml``."""

    def contribute_to_model(self, project_root: Path, model: dict[str, Any]) -> None:
        pom = project_root / "pom.xml"
        if not pom.is_file():
            return

        try:
            root = ET.parse(pom).getroot()
        except (ET.ParseError, OSError) as e:
            raise ConfigError(f"Cannot parse {pom}: {e}") from e

        parent = _child(root, "parent")
        artifact_id = _child_text(root, "artifactId")
        group_id = _child_text(root, "groupId") or _child_text(parent, "groupId")
        version = _child_text(root, "version") or _child_text(parent, "version")
        packaging = _child_text(root, "packaging") or "jar"

        properties: dict[str, str] = {}
        props = _child(root, "properties")
        if props is not None:
            for prop in props:
                # dots cannot appear in template names
                properties[_local(prop.tag).replace(".", "-")] = (prop.text or "").strip()

        set_if_absent(
            model,
            MAVEN_MODEL,
            {
                "group-id": group_id,
                "artifact-id": artifact_id,
                "version": version,
                "packaging": packaging,
                "name": _child_text(root, "name"),
                "description": _child_text(root, "description"),
            },
        )
        set_if_absent(model, ARTIFACT_ID, artifact_id)
        set_if_absent(model, ARTIFACT_VERSION, version)
        if artifact_id and version:
            artifact = project_root / "target" / f"{artifact_id}-{version}.{packaging}"
            set_if_absent(model, ARTIFACT_PATH, str(artifact.resolve()))
        set_if_absent(model, MAVEN_PROPERTIES, properties)
        set_if_absent(model, PROJECT_NAME, _child_text(root, "name"))
        set_if_absent(model, PROJECT_DESCRIPTION, _child_text(root, "description"))
        if "java-version" in properties:
            set_if_absent(model, JAVA_VERSION, java_version(properties["java-version"]))

        logger.debug("Read maven coordinates %s:%s:%s", group_id, artifact_id, version)


# ── Root package ────────────────────────────────────────────────────

_BOOT_ANNOTATION = "@SpringBootApplication"
_PACKAGE_DECL = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)
_SKIP_DIRS = {"target", "build", "node_modules"}


def find_root_package(project_root: Path) -> str | None:
    """Package of the ``@SpringBootApplication`` class, if there is one."""
    for source in sorted(project_root.rglob("*.java")):
        rel = source.relative_to(project_root)
        if any(part.startswith(".") or part in _SKIP_DIRS for part in rel.parts):
            continue
        try:
            text = source.read_text(encoding="utf-8", errors="replace")
        except OSError:
            continue
        if _BOOT_ANNOTATION not in text:
            continue

        parts = rel.parts
        for index in range(len(parts) - 2):
            if parts[index : index + 3] == ("src", "main", "java"):
                package_parts = parts[index + 3 : -1]
                if package_parts:
                    return ".".join(package_parts)
        declared = _PACKAGE_DECL.search(text)
        if declared:
            return declared.group(1)
    return None


class RootPackageModelPopulator(ModelPopulator):
    """Finds the application's root Java package."""

    def contribute_to_model(self, project_root: Path, model: dict[str, Any]) -> None:
        package = find_root_package(project_root)
        if package is None:
            return
        set_if_absent(model, ROOT_PACKAGE, package)
        set_if_absent(model, ROOT_PACKAGE_DIR, package.replace(".", os.sep))


# ── System ──────────────────────────────────────────────────────────


def _user_name() -> str | None:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return None


class SystemModelPopulator(ModelPopulator):
    """Time, OS and environment values."""

    def contribute_to_model(self, project_root: Path, model: dict[str, Any]) -> None:
        set_if_absent(model, "now", datetime.now().astimezone().strftime("%a %b %d %H:%M:%S %Z %Y"))
        set_if_absent(model, "system-environment", dict(os.environ))
        set_if_absent(model, "tmp-dir", tempfile.gettempdir())
        set_if_absent(model, "file-separator", os.sep)
        set_if_absent(model, "os-name", platform.system())
        set_if_absent(model, "user-name", _user_name())


def default_populators() -> list[ModelPopulator]:
    return [MavenModelPopulator(), RootPackageModelPopulator(), SystemModelPopulator()]


def build_model(
    project_root: Path,
    arguments: dict[str, Any] | None = None,
    populators: list[ModelPopulator] | None = None,
) -> dict[str, Any]:
    """Seed the model with ``arguments`` and run every populator over it."""
    model: dict[str, Any] = {}
    for key, value in (arguments or {}).items():
        set_if_absent(model, key, value)

    for populator in default_populators() if populators is None else populators:
        logger.debug("Running model populator %s", populator.name)
        populator.contribute_to_model(project_root, model)

    return model
