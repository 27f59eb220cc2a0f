"""
Inject handler — inserts text around marker lines of an existing file.

``before`` is applied first: the text goes in front of the first line
containing the marker. ``after`` is then looked up in the updated
lines and the text goes right below the first matching line. A file
that already contains the ``skip`` string is left alone.
"""

from __future__ import annotations

import logging

from scaffoldkit.core.engine.handlers.base import ActionHandler, HandlerContext, RenderedAction
from scaffoldkit.core.errors import HandlerError
from scaffoldkit.core.models.action import Inject, Receipt

logger = logging.getLogger(__name__)


def _split(content: str) -> tuple[list[str], str, bool]:
    """Lines, the file's line separator, and whether it ends with one."""
    newline = "\r\n" if "\r\n" in content else "\n"
    trailing = content.endswith(newline)
    if trailing:
        content = content[: -len(newline)]
    lines = content.split(newline) if content else []
    return lines, newline, trailing


def _find(lines: list[str], marker: str) -> int | None:
    for index, line in enumerate(lines):
        if marker in line:
            return index
    return None


def inject_lines(
    lines: list[str],
    text_lines: list[str],
    before: str | None,
    after: str | None,
) -> tuple[list[str], list[str]]:
    """Apply the before/after insertions. Returns (lines, warnings)."""
    lines = list(lines)
    warnings = []

    if before:
        index = _find(lines, before)
        if index is None:
            warnings.append(f"Marker for 'before' not found: {before!r}")
        else:
            lines[index:index] = text_lines

    if after:
        index = _find(lines, after)
        if index is None:
            warnings.append(f"Marker for 'after' not found: {after!r}")
        else:
            lines[index + 1 : index + 1] = text_lines

    return lines, warnings


class InjectHandler(ActionHandler[Inject]):
    @property
    def kind(self) -> str:
        return "inject"

    def handle(self, rendered: RenderedAction[Inject], ctx: HandlerContext) -> Receipt:
        action = rendered.action
        if not action.to or not action.to.strip():
            raise HandlerError("Inject action requires a non-empty 'to' field")

        dest = ctx.resolve(action.to.strip())
        if not ctx.fs.exists(dest):
            raise HandlerError(f"File to inject into does not exist: {dest}", path=str(dest))
        if not ctx.fs.is_file(dest):
            raise HandlerError(f"File to inject into is a directory: {dest}", path=str(dest))

        content = ctx.fs.read_text(dest)
        if action.skip and action.skip in content:
            logger.info("Skipping injection into %s, found %r", dest, action.skip)
            return Receipt.skip(
                self.kind,
                f"Skipped injection into {dest}: found {action.skip!r}",
                outputs={"path": str(dest)},
            )

        if not action.before and not action.after:
            raise HandlerError("Inject action requires a 'before' or 'after' marker", path=str(dest))
        if action.text is None:
            raise HandlerError(f"Nothing to inject into {dest}: no 'text' or template body", path=str(dest))

        lines, newline, trailing = _split(content)
        updated, warnings = inject_lines(
            lines, action.text.splitlines(), action.before, action.after
        )
        for warning in warnings:
            logger.warning("%s in %s", warning, dest)

        if updated == lines:
            return Receipt.success(
                self.kind,
                output=f"Nothing injected into {dest}",
                warnings=warnings,
                outputs={"path": str(dest), "changed": False},
            )

        new_content = newline.join(updated) + (newline if trailing else "")
        try:
            ctx.fs.replace_atomic(dest, new_content)
        except OSError as e:
            raise HandlerError(f"Cannot write {dest}: {e}", path=str(dest)) from e

        logger.info("Injected into %s", dest)
        return Receipt.success(
            self.kind,
            output=f"Injected into {dest}",
            warnings=warnings,
            outputs={"path": str(dest), "changed": True},
        )
