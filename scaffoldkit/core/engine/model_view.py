"""
Model view — exposes kebab-case model keys to Jinja2 expressions.

Model keys are kebab-case (``artifact-id``), which Jinja2 would parse
as a subtraction. Before compiling, unspaced kebab names used inside
``{{ }}`` or ``{% %}`` are rewritten to their snake_case spelling, and
the render context answers to both spellings. Write ``a - b`` for
subtraction of two names.
"""

from __future__ import annotations

import re
from typing import Any

_TAG = re.compile(r"(\{\{.*?\}\}|\{%.*?%\})", re.DOTALL)
_STRING = re.compile(r"""('(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")""")
_KEBAB = re.compile(r"(?<![\w-])[A-Za-z_][A-Za-z0-9_]*(?:-[A-Za-z0-9_]+)+")


def snake(name: str) -> str:
    return name.replace("-", "_")


class KebabDict(dict):
    """A dict that resolves ``snake_name`` to the ``snake-name`` key."""

    def __missing__(self, key: Any) -> Any:
        if isinstance(key, str) and "_" in key:
            kebab = key.replace("_", "-")
            if dict.__contains__(self, kebab):
                return self[kebab]
        raise KeyError(key)


def wrap(value: Any) -> Any:
    """Recursively wrap mappings as KebabDict."""
    if isinstance(value, dict):
        return KebabDict((k, wrap(v)) for k, v in value.items())
    if isinstance(value, list):
        return [wrap(v) for v in value]
    return value


def template_context(model: dict[str, Any] | None) -> dict[str, Any]:
    """Build a render context with snake_case aliases for top-level keys."""
    context = wrap(dict(model or {}))
    for key in list(context):
        if isinstance(key, str) and "-" in key:
            context.setdefault(snake(key), context[key])
    return context


def kebab_names(model: dict[str, Any] | None) -> set[str]:
    """All kebab-case keys in the model, at any depth."""
    names: set[str] = set()

    def collect(value: Any) -> None:
        if isinstance(value, dict):
            for k, v in value.items():
                if isinstance(k, str) and "-" in k:
                    names.add(k)
                collect(v)
        elif isinstance(value, list):
            for item in value:
                collect(item)

    collect(model or {})
    return names


def plain_names(model: dict[str, Any] | None) -> set[str]:
    """Top-level model keys without a hyphen."""
    return {k for k in (model or {}) if isinstance(k, str) and "-" not in k}


def _is_subtraction(token: str, plain: set[str]) -> bool:
    first, *rest = token.split("-")
    return first in plain or any(part.isdigit() for part in rest)


def rewrite_expression(
    expression: str,
    names: set[str],
    plain: set[str] | None = None,
) -> str:
    """Rewrite unspaced kebab names in a bare expression, outside string literals.

    Known kebab keys are always rewritten. An unknown ``a-b`` token is
    read as a name too (and renders empty when missing) unless it starts
    with a plain model key or has a numeric part, which keeps ``a-b``
    and ``count-1`` as subtraction.
    """
    plain = plain or set()

    def replace(match: re.Match) -> str:
        token = match.group(0)
        if token in names or not _is_subtraction(token, plain):
            return snake(token)
        return token

    parts = _STRING.split(expression)
    # odd indexes are string literals
    for index in range(0, len(parts), 2):
        parts[index] = _KEBAB.sub(replace, parts[index])
    return "".join(parts)


def rewrite_template(source: str, names: set[str], plain: set[str] | None = None) -> str:
    """Rewrite kebab names inside template tags only."""
    return _TAG.sub(lambda m: rewrite_expression(m.group(0), names, plain), source)
