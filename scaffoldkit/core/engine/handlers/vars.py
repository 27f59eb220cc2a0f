"""
Vars handler — defines model variables and persists them to a role.

Questions are asked first (in order), then literal ``data`` entries are
applied. Values are type-inferred (``"30"`` → 30, ``"true"`` → True),
written into the model and saved to the role store; the role file is
written once, when the run finishes.
"""

from __future__ import annotations

import logging
from typing import Any

from scaffoldkit.core.engine.handlers.base import ActionHandler, HandlerContext, RenderedAction
from scaffoldkit.core.engine.handlers.exec import ExecHandler
from scaffoldkit.core.errors import HandlerError
from scaffoldkit.core.models.action import Question, Receipt, Vars
from scaffoldkit.core.persistence.role_store import infer_type

logger = logging.getLogger(__name__)

QUESTION_TYPES = ("input", "dropdown", "path")


def choices_from(value: Any) -> dict[str, Any]:
    """Dropdown choices from a list, a mapping, or a single scalar."""
    if isinstance(value, dict):
        return {str(k): v for k, v in value.items()}
    if isinstance(value, list):
        return {str(item): item for item in value}
    if isinstance(value, (str, int, float, bool)):
        return {str(value): value}
    raise HandlerError(f"Cannot turn {type(value).__name__} into dropdown choices: {value!r}")


class VarsHandler(ActionHandler[Vars]):
    def __init__(self, exec_handler: ExecHandler | None = None):
        self._exec = exec_handler or ExecHandler()

    @property
    def kind(self) -> str:
        return "vars"

    def _choices(self, question: Question, ctx: HandlerContext) -> dict[str, Any]:
        options = question.options
        if options is None or (options.choices is None and options.exec is None):
            raise HandlerError(f"Dropdown question '{question.name}' has no options")
        if options.choices is not None:
            return choices_from(options.choices)
        assert options.exec is not None
        return choices_from(self._exec.json_output(options.exec, ctx))

    def handle(self, rendered: RenderedAction[Vars], ctx: HandlerContext) -> Receipt:
        action = rendered.action

        for question in action.questions:
            if question.type not in QUESTION_TYPES:
                raise HandlerError(
                    f"Invalid type '{question.type}' for question with label '{question.label}'. "
                    f"Valid types: {', '.join(QUESTION_TYPES)}"
                )

        values: dict[str, Any] = {}
        for question in action.questions:
            choices = self._choices(question, ctx) if question.type == "dropdown" else None
            answer = ctx.prompter.ask(question, choices)
            values[question.name] = infer_type(answer)

        for key, value in action.data.items():
            values[key] = infer_type(value)

        if not values:
            return Receipt.skip(self.kind, "No questions or data to define")

        role = action.role if action.role is not None else ctx.settings.default_role
        ctx.model.update(values)
        ctx.role_store.update_many(values, role)

        logger.info("Defined %s", ", ".join(values))
        return Receipt.success(
            self.kind,
            output=f"Defined {', '.join(values)}",
            outputs=values,
            metadata={"role": role},
        )
