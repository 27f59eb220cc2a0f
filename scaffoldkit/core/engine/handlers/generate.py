"""
Generate handler — writes rendered template text to a new file.
"""

from __future__ import annotations

import logging

from scaffoldkit.core.engine.handlers.base import ActionHandler, HandlerContext, RenderedAction
from scaffoldkit.core.errors import HandlerError
from scaffoldkit.core.models.action import Generate, Receipt

logger = logging.getLogger(__name__)


class GenerateHandler(ActionHandler[Generate]):
    """Creates ``to`` from the rendered text unless it exists.

    An existing destination is left untouched unless ``overwrite`` is
    set, which makes re-running a command safe.
    """

    @property
    def kind(self) -> str:
        return "generate"

    def handle(self, rendered: RenderedAction[Generate], ctx: HandlerContext) -> Receipt:
        action = rendered.action
        if not action.to or not action.to.strip():
            raise HandlerError("Generate action requires a non-empty 'to' field")

        dest = ctx.resolve(action.to.strip())
        if ctx.fs.is_dir(dest):
            raise HandlerError(f"Cannot generate {dest}: it is a directory", path=str(dest))

        if ctx.fs.exists(dest) and not action.overwrite:
            logger.info("Skipping generation of %s, file exists and overwrite is false", dest)
            return Receipt.skip(
                self.kind,
                f"Skipped generation of {dest}: file exists and 'overwrite' is false",
                outputs={"path": str(dest)},
            )

        if action.text is None:
            raise HandlerError(
                f"Nothing to generate for {dest}: no 'text', 'from' or template body",
                path=str(dest),
            )

        try:
            ctx.fs.write_text(dest, action.text)
        except OSError as e:
            raise HandlerError(f"Cannot write {dest}: {e}", path=str(dest)) from e

        logger.info("Generated %s", dest)
        return Receipt.success(
            self.kind,
            output=f"Generated {dest}",
            outputs={"path": str(dest), "bytes": len(action.text.encode("utf-8"))},
        )
