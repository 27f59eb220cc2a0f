"""
Roles use case — add, remove, set, get and list role variable files.

The default role (empty name) maps to ``vars.yml``; it always exists
implicitly and cannot be added or removed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from scaffoldkit.core.config.loader import find_project_root
from scaffoldkit.core.errors import ScaffoldError
from scaffoldkit.core.persistence.role_store import DEFAULT_ROLE, RoleStore

logger = logging.getLogger(__name__)


@dataclass
class RoleResult:
    """Outcome of a role operation."""

    role: str = DEFAULT_ROLE
    path: Path | None = None
    changed: bool = False
    variables: dict[str, Any] = field(default_factory=dict)
    roles: list[str] = field(default_factory=list)
    message: str = ""
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result
        result["role"] = self.role
        result["path"] = str(self.path) if self.path else None
        result["changed"] = self.changed
        result["variables"] = self.variables
        result["roles"] = self.roles
        if self.message:
            result["message"] = self.message
        return result


def _store(project_dir: Path | None) -> RoleStore:
    return RoleStore(find_project_root(project_dir))


def add_role(role: str, project_dir: Path | None = None) -> RoleResult:
    result = RoleResult(role=role)
    if not role:
        result.error = "Role name must not be empty"
        return result
    store = _store(project_dir)
    result.path = store.path(role)
    result.changed = store.create(role)
    if result.changed:
        result.message = f"Role '{role}' created"
        logger.info("Created role file %s", result.path)
    else:
        result.error = f"Role '{role}' already exists"
    return result


def remove_role(role: str, project_dir: Path | None = None) -> RoleResult:
    result = RoleResult(role=role)
    if not role:
        result.error = "The default role cannot be removed"
        return result
    store = _store(project_dir)
    result.path = store.path(role)
    result.changed = store.remove(role)
    if result.changed:
        result.message = f"Role '{role}' removed"
        logger.info("Removed role file %s", result.path)
    else:
        result.error = f"Role '{role}' does not exist"
    return result


def set_variable(
    key: str,
    value: str,
    role: str = DEFAULT_ROLE,
    project_dir: Path | None = None,
) -> RoleResult:
    """Set ``key`` in ``role``; the value is type-inferred like vars actions."""
    result = RoleResult(role=role)
    store = _store(project_dir)
    result.path = store.path(role)
    if role and not store.exists(role):
        result.error = f"Role '{role}' does not exist"
        return result
    try:
        store.update(key, value, role)
        store.flush()
        result.variables = {key: store.get(key, role)}
    except ScaffoldError as e:
        result.error = str(e)
        return result
    result.changed = True
    return result


def get_variables(
    role: str = DEFAULT_ROLE,
    key: str | None = None,
    project_dir: Path | None = None,
) -> RoleResult:
    """All variables of ``role``, or just ``key``."""
    result = RoleResult(role=role)
    store = _store(project_dir)
    result.path = store.path(role)
    try:
        variables = store.load(role)
    except ScaffoldError as e:
        result.error = str(e)
        return result

    if key is None:
        result.variables = variables
    elif key in variables:
        result.variables = {key: variables[key]}
    else:
        result.error = f"Variable '{key}' is not defined in {result.path.name}"
    return result


def list_roles(project_dir: Path | None = None) -> RoleResult:
    store = _store(project_dir)
    return RoleResult(path=store.directory, roles=store.role_names())
