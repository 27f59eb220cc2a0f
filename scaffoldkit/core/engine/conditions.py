"""
Condition evaluator — decides whether an action file runs.

Guard expressions are Jinja2 expressions compiled in a sandbox, with
a few conveniences for expressions written in the ``#{ ... }`` style::

    #{ ['artifact-id'] == 'demo' }      root index into the model
    #{ #name != 'x' && !#skip }         named variables, && || !
    artifact-id == 'demo'               bare kebab-case model keys
    maven-properties.java-version == '17'

The model is visible both as root-level names and as ``model``.
Helper functions: ``run(command)``, ``run_file(path)`` and
``var_not_defined(name)`` (camelCase aliases ``runFile`` and
``varNotDefined`` are kept for older action files).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any

import jinja2
from jinja2.sandbox import SandboxedEnvironment

from scaffoldkit.core.engine.model_view import (
    kebab_names,
    plain_names,
    rewrite_expression,
    template_context,
    wrap,
)
from scaffoldkit.core.errors import ConditionError
from scaffoldkit.core.models.action_file import Conditional

logger = logging.getLogger(__name__)

_WRAPPED = re.compile(r"^\s*#\{(.*)\}\s*$", re.DOTALL)
_STRING = re.compile(r"""('(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")""")
_NAMED_VAR = re.compile(r"#([A-Za-z_][\w-]*)")
_NOT = re.compile(r"!(?!=)")


def _is_root_index(preceding: str) -> bool:
    """A ``[`` opens a root index when nothing it could subscript precedes it."""
    preceding = preceding.rstrip()
    if not preceding or preceding[-1] in "(!=<>&|,":
        return True
    last_word = preceding.rsplit(None, 1)[-1]
    return last_word in ("and", "or", "not")


def _translate(expression: str) -> str:
    """Map ``#{ }`` style syntax onto a Jinja2 expression."""
    match = _WRAPPED.match(expression)
    if match:
        expression = match.group(1)

    parts = _STRING.split(expression)
    for index in range(0, len(parts), 2):
        part = parts[index]
        part = _NAMED_VAR.sub(r"\1", part)
        done = "".join(parts[:index])
        chunks = part.split("[")
        part = chunks[0]
        for chunk in chunks[1:]:
            part += "model[" if _is_root_index(done + part) else "["
            part += chunk
        part = part.replace("&&", " and ").replace("||", " or ")
        part = _NOT.sub(" not ", part)
        part = re.sub(r"\bnull\b", "none", part)
        parts[index] = part
    return "".join(parts).strip()


class ConditionEvaluator:
    """Evaluates guard expressions against the model.

    ``run_command`` and ``run_command_file`` back the ``run`` and
    ``run_file`` helpers; ``defined_names`` backs ``var_not_defined``
    and returns the keys currently stored for the default role.
    """

    def __init__(
        self,
        run_command: Callable[[str], str] | None = None,
        run_command_file: Callable[[str], str] | None = None,
        defined_names: Callable[[], set[str]] | None = None,
    ):
        self._env = SandboxedEnvironment()
        self._run_command = run_command
        self._run_command_file = run_command_file
        self._defined_names = defined_names

    # ── Helper functions ────────────────────────────────────────────

    def _run(self, command: str) -> str:
        if self._run_command is None:
            raise ConditionError("run() is not available in this context")
        return self._run_command(command)

    def _run_file(self, path: str) -> str:
        if self._run_command_file is None:
            raise ConditionError("run_file() is not available in this context")
        return self._run_command_file(path)

    def _var_not_defined(self, name: str) -> bool:
        if not name:
            return False
        defined = self._defined_names() if self._defined_names else set()
        return name not in defined

    def _helpers(self) -> dict[str, Any]:
        return {
            "run": self._run,
            "run_file": self._run_file,
            "runFile": self._run_file,
            "var_not_defined": self._var_not_defined,
            "varNotDefined": self._var_not_defined,
        }

    # ── Evaluation ──────────────────────────────────────────────────

    def evaluate(self, expression: str, model: dict[str, Any] | None) -> bool:
        """Evaluate one expression; it must produce a boolean.

        Raises:
            ConditionError: The expression does not compile, fails, or
                returns anything other than True/False.
        """
        model = model or {}
        source = rewrite_expression(
            _translate(expression), kebab_names(model), plain_names(model)
        )
        context = template_context(model)
        context.update(self._helpers())
        context["model"] = wrap(model)

        try:
            compiled = self._env.compile_expression(source, undefined_to_none=True)
            result = compiled(**context)
        except ConditionError:
            raise
        except jinja2.TemplateSyntaxError as e:
            raise ConditionError(f"'if' expression: '{expression}' is invalid: {e.message}") from e
        except Exception as e:
            raise ConditionError(f"'if' expression: '{expression}' failed: {e}") from e

        if not isinstance(result, bool):
            kind = "nothing" if result is None else type(result).__name__
            raise ConditionError(
                f"'if' expression: '{expression}' should return boolean but returned {kind}"
            )
        logger.debug("Condition %r → %s", expression, result)
        return result

    def evaluate_conditional(self, conditional: Conditional | None, model: dict[str, Any]) -> bool:
        """Whether every declared part of ``conditional`` holds.

        Parts are checked in order (``artifact-id``, ``fields``, ``if``)
        and evaluation stops at the first one that does not hold.
        """
        if conditional is None or conditional.is_empty:
            return True

        if conditional.artifact_id is not None:
            if model.get("artifact-id") != conditional.artifact_id:
                logger.debug(
                    "artifact-id %r does not match %r",
                    model.get("artifact-id"),
                    conditional.artifact_id,
                )
                return False

        for key, expected in conditional.fields.items():
            if model.get(key) != expected:
                logger.debug("Field %r is %r, expected %r", key, model.get(key), expected)
                return False

        if conditional.if_:
            return self.evaluate(conditional.if_, model)

        return True
