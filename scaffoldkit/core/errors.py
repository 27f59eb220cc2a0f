"""
Error types raised by the scaffolding engine.

Every engine failure derives from ``ScaffoldError`` so callers can
catch one type. The orchestrator turns these into an ``ActionFailure``
on the report; the use-case layer turns them into result ``error``
strings for the CLI.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from scaffoldkit.core.engine.executor import ActionFailure


class ScaffoldError(Exception):
    """Base class for all engine errors."""


class ConfigError(ScaffoldError):
    """Raised when engine settings or a command manifest are invalid."""


class ResolveError(ScaffoldError):
    """Raised when a noun/verb pair cannot be resolved to action files."""


class ActionParseError(ScaffoldError):
    """Raised when an action file's front matter cannot be parsed."""

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        hints: list[str] | None = None,
    ):
        self.message = message
        self.line = line
        self.column = column
        self.hints = hints or []
        super().__init__(self._format())

    def _format(self) -> str:
        text = self.message
        if self.line is not None:
            text += f" (line {self.line}"
            if self.column is not None:
                text += f", column {self.column}"
            text += ")"
        for hint in self.hints:
            text += f"\n  hint: {hint}"
        return text


class ConditionError(ScaffoldError):
    """Raised when a guard expression fails or is not boolean."""


class TemplateError(ScaffoldError):
    """Raised when a template cannot be compiled or rendered."""


class HandlerError(ScaffoldError):
    """Raised by an action handler when its effect cannot be applied."""

    def __init__(self, message: str, **details: Any):
        self.details = details
        super().__init__(message)


class ActionExecutionError(ScaffoldError):
    """Raised when a command run aborted on one of its action files."""

    def __init__(self, failure: ActionFailure):
        self.failure = failure
        super().__init__(str(failure))
