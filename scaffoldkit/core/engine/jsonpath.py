"""
JSON path — the subset of JSONPath used by exec actions.

Supported steps::

    $              the document root (optional)
    .key  ['key']  object member
    [0]   [-1]     list index
    [*]   .*       every element / member value

A path with a wildcard returns a list; a definite path returns the
single value. A path that matches nothing is an error.
"""

from __future__ import annotations

import re
from typing import Any

from scaffoldkit.core.errors import HandlerError

_TOKEN = re.compile(
    r"""
    \.\s*(?P<dot>[A-Za-z_][\w-]*)
  | \.\s*(?P<dotstar>\*)
  | \[\s*(?P<star>\*)\s*\]
  | \[\s*(?P<index>-?\d+)\s*\]
  | \[\s*(?P<quote>['"])(?P<key>.*?)(?P=quote)\s*\]
    """,
    re.VERBOSE,
)

_WILDCARD = object()


def _parse(path: str) -> list[Any]:
    text = path.strip()
    if text.startswith("$"):
        text = text[1:]
    elif text and not text.startswith((".", "[")):
        text = "." + text

    steps: list[Any] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN.match(text, pos)
        if match is None:
            raise HandlerError(f"Invalid JSON path '{path}' at position {pos + 1}", json_path=path)
        if match.group("dot") is not None:
            steps.append(match.group("dot"))
        elif match.group("dotstar") or match.group("star"):
            steps.append(_WILDCARD)
        elif match.group("index") is not None:
            steps.append(int(match.group("index")))
        else:
            steps.append(match.group("key"))
        pos = match.end()
    return steps


def _step(values: list[Any], step: Any) -> list[Any]:
    out: list[Any] = []
    for value in values:
        if step is _WILDCARD:
            if isinstance(value, list):
                out.extend(value)
            elif isinstance(value, dict):
                out.extend(value.values())
        elif isinstance(step, int):
            if isinstance(value, list) and -len(value) <= step < len(value):
                out.append(value[step])
        elif isinstance(value, dict) and step in value:
            out.append(value[step])
    return out


def extract(document: Any, path: str) -> Any:
    """Evaluate ``path`` against a decoded JSON document.

    Raises:
        HandlerError: The path is malformed or matches nothing.
    """
    steps = _parse(path)
    values = [document]
    for step in steps:
        values = _step(values, step)
        if not values:
            raise HandlerError(f"JSON path '{path}' matched nothing", json_path=path)

    if any(step is _WILDCARD for step in steps):
        return values
    return values[0]
