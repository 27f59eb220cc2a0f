"""
Command options — turn ``--name value`` arguments into model seed values.

Declared options are checked against their manifest (required,
choices, data type) and defaults are filled in. Every key is
kebab-cased (``featureName`` and ``feature_name`` become
``feature-name``). Undeclared options pass through as strings.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from scaffoldkit.core.errors import ResolveError
from scaffoldkit.core.models.command import Command, CommandOption

logger = logging.getLogger(__name__)

_CAMEL = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


def to_kebab(name: str) -> str:
    return _CAMEL.sub("-", name).replace("_", "-").lower()


def parse_option_args(args: list[str]) -> dict[str, str]:
    """Parse ``--key value``, ``--key=value`` and bare ``--flag`` arguments.

    Raises:
        ResolveError: An argument that is not an option.
    """
    parsed: dict[str, str] = {}
    index = 0
    while index < len(args):
        arg = args[index]
        if not arg.startswith("--") or arg == "--":
            raise ResolveError(f"Unexpected argument '{arg}'; options look like --name value")
        key = arg[2:]
        if "=" in key:
            key, value = key.split("=", 1)
        elif index + 1 < len(args) and not args[index + 1].startswith("--"):
            index += 1
            value = args[index]
        else:
            value = "true"
        parsed[key] = value
        index += 1
    return parsed


def _convert(option: CommandOption, value: Any) -> Any:
    data_type = option.data_type.lower()
    if not isinstance(value, str):
        return value
    try:
        if data_type in ("int", "integer"):
            return int(value)
        if data_type == "float":
            return float(value)
    except ValueError:
        raise ResolveError(
            f"Option '--{option.name}' expects a {data_type}, got '{value}'"
        ) from None
    if data_type in ("bool", "boolean"):
        lowered = value.lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ResolveError(f"Option '--{option.name}' expects a boolean, got '{value}'")
    return value


def resolve_arguments(command: Command | None, raw: dict[str, Any]) -> dict[str, Any]:
    """Validate raw option values against ``command`` and kebab-case the keys.

    Raises:
        ResolveError: A required option is missing or a value is invalid.
    """
    given = {to_kebab(k): v for k, v in raw.items()}
    resolved: dict[str, Any] = {}

    for option in command.options if command else []:
        key = to_kebab(option.name)
        if key in given:
            value = given.pop(key)
        elif option.default_value is not None:
            value = option.default_value
        elif option.required:
            raise ResolveError(f"Missing required option '--{key}'")
        else:
            continue

        value = _convert(option, value)
        if option.choices and str(value) not in option.choices:
            allowed = ", ".join(option.choices)
            raise ResolveError(f"Option '--{key}' must be one of: {allowed}")
        resolved[key] = value

    for key, value in given.items():
        logger.debug("Passing undeclared option --%s through", key)
        resolved[key] = value

    return resolved
