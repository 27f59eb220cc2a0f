"""
Front matter reader — splits an action file into header and body.

The header is YAML between two delimiter lines of three or more ``-``
characters (``~`` as a fallback); everything after the closing line is
the template body. Parsing never raises for content problems; callers
get one of three results:

    ActionFile        the header parsed into a FrontMatter
    NoFrontMatter     not an action file (empty, no delimiter, unclosed)
    FrontMatterError  an action file whose header is broken, with hints
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

import yaml
from pydantic import ValidationError

from scaffoldkit.adapters.base import FileSystem
from scaffoldkit.core.errors import ActionParseError
from scaffoldkit.core.models.action_file import ActionFile, FrontMatter

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = "-"
FALLBACK_DELIMITER = "~"

# ── Hints ───────────────────────────────────────────────────────────

HINT_ACTION_COLON = "You may have forgot to put a colon after the field 'action'."
HINT_LIST_MARKER = (
    "You may have forgot to add a '-' in front of '{key}' since a YAML list is needed."
)
HINT_QUOTE_TEMPLATE = (
    "A value starting with '{{' is read as a YAML mapping; "
    "quote template expressions, e.g. to: \"{{ name }}.txt\"."
)
HINT_QUESTION_FIELDS = (
    "You may have forgot to define 'name' or 'label' as fields "
    "directly under the '-question:' field."
)
HINT_VARS_DATA = "'vars.data' must be a mapping of key: value pairs."

_UNQUOTED_TEMPLATE = re.compile(r":\s+\{\{")


@dataclass(frozen=True)
class NoFrontMatter:
    """The text is not an action file."""

    reason: str = ""


@dataclass(frozen=True)
class FrontMatterError:
    """The header exists but could not be parsed."""

    message: str
    line: int | None = None
    column: int | None = None
    hints: list[str] = field(default_factory=list)

    def to_exception(self) -> ActionParseError:
        return ActionParseError(self.message, line=self.line, column=self.column, hints=self.hints)


ParseResult = Union[ActionFile, NoFrontMatter, FrontMatterError]


def _is_delimiter(line: str, delimiter: str) -> bool:
    return re.fullmatch(f"[{re.escape(delimiter)}]{{3,}}", line.rstrip()) is not None


def parse_front_matter(
    text: str,
    delimiter: str = DEFAULT_DELIMITER,
    path: str = "",
) -> ParseResult:
    """Parse raw action file text.

    Args:
        text: The whole file content.
        delimiter: The delimiter character (``-`` or ``~``).
        path: Source path recorded on the resulting ActionFile.
    """
    if not text:
        return NoFrontMatter("empty")

    lines = text.splitlines()
    if not _is_delimiter(lines[0], delimiter):
        return NoFrontMatter("no front matter delimiter on the first line")

    closing = None
    for index in range(1, len(lines)):
        if _is_delimiter(lines[index], delimiter):
            closing = index
            break
    if closing is None:
        return NoFrontMatter("front matter is not closed")

    header_lines = lines[1:closing]
    body_lines = lines[closing + 1 :]

    try:
        data = yaml.safe_load("\n".join(header_lines))
    except yaml.YAMLError as e:
        line = column = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            # +2: the opening delimiter is line 1
            line = mark.line + 2
            column = mark.column + 1
        return FrontMatterError(
            message=f"Invalid YAML in front matter: {getattr(e, 'problem', None) or e}",
            line=line,
            column=column,
            hints=_hints(header_lines),
        )

    if not isinstance(data, dict):
        return FrontMatterError(
            message=f"Front matter must be a YAML mapping, got {type(data).__name__}",
            line=2,
            hints=_hints(header_lines),
        )

    try:
        front_matter = FrontMatter.model_validate(data)
    except ValidationError as e:
        return FrontMatterError(
            message=f"Invalid front matter: {_describe(e)}",
            hints=_hints(header_lines, e),
        )

    return ActionFile(
        path=path,
        front_matter=front_matter,
        text="\n".join(body_lines) if body_lines else None,
    )


def read_action_file(path: Path, fs: FileSystem) -> ParseResult:
    """Read and parse an action file.

    Anything that is not an action file with ``-`` is retried once with
    the ``~`` delimiter; if that does not yield an action file the first
    result is returned.
    """
    text = fs.read_text(path)
    result = parse_front_matter(text, DEFAULT_DELIMITER, path=str(path))
    if not isinstance(result, ActionFile):
        retry = parse_front_matter(text, FALLBACK_DELIMITER, path=str(path))
        if isinstance(retry, ActionFile):
            logger.debug("Parsed %s with the '%s' delimiter", path, FALLBACK_DELIMITER)
            return retry
    return result


def _describe(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        loc = ".".join(str(p) for p in detail["loc"])
        parts.append(f"{loc}: {detail['msg']}" if loc else detail["msg"])
    return "; ".join(parts)


def _hints(header_lines: list[str], error: ValidationError | None = None) -> list[str]:
    """Heuristic hints for common front matter mistakes."""
    hints: list[str] = []
    stripped = [line.strip() for line in header_lines]

    for line in stripped:
        if line.startswith("action") and ":" not in line:
            hints.append(HINT_ACTION_COLON)
            break

    if any(line.startswith("actions:") for line in stripped):
        for key in ("generate", "exec"):
            if any(line.startswith(f"{key}:") for line in stripped):
                hints.append(HINT_LIST_MARKER.format(key=key))

    if any(_UNQUOTED_TEMPLATE.search(line) for line in header_lines):
        hints.append(HINT_QUOTE_TEMPLATE)

    if error is not None:
        for detail in error.errors():
            loc = [str(p) for p in detail["loc"]]
            if "questions" in loc and loc[-1] in ("name", "label"):
                if HINT_QUESTION_FIELDS not in hints:
                    hints.append(HINT_QUESTION_FIELDS)
            elif "data" in loc and HINT_VARS_DATA not in hints:
                hints.append(HINT_VARS_DATA)

    return hints
