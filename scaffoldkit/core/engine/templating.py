"""
Template renderer — Jinja2 rendering of paths, commands and bodies.

One renderer instance is built per run and passed to whoever needs it;
it keeps no per-render state. Missing variables render as empty text.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import jinja2

from scaffoldkit.core.engine.model_view import (
    kebab_names,
    plain_names,
    rewrite_template,
    template_context,
)
from scaffoldkit.core.errors import TemplateError

logger = logging.getLogger(__name__)

_WORD_BOUNDARY = re.compile(r"[\s_\-.]+|(?<=[a-z0-9])(?=[A-Z])")


# ── Helpers ─────────────────────────────────────────────────────────


def _words(value: Any) -> list[str]:
    return [w for w in _WORD_BOUNDARY.split(str(value)) if w]


def capitalize_first(value: Any) -> str:
    """Upper-case the first character, leave the rest alone."""
    text = str(value)
    return text[:1].upper() + text[1:]


def camel_case(value: Any) -> str:
    words = _words(value)
    if not words:
        return ""
    return words[0].lower() + "".join(w.capitalize() for w in words[1:])


def pascal_case(value: Any) -> str:
    return "".join(w.capitalize() for w in _words(value))


def kebab_case(value: Any) -> str:
    return "-".join(w.lower() for w in _words(value))


def snake_case(value: Any) -> str:
    return "_".join(w.lower() for w in _words(value))


def package_to_path(value: Any) -> str:
    """``com.example.demo`` → ``com/example/demo``."""
    return str(value).replace(".", "/")


HELPERS = {
    "capitalize_first": capitalize_first,
    "camel_case": camel_case,
    "pascal_case": pascal_case,
    "kebab_case": kebab_case,
    "snake_case": snake_case,
    "package_to_path": package_to_path,
}


class TemplateRenderer:
    """Renders template text against the model."""

    def __init__(self, environment: jinja2.Environment | None = None):
        self._env = environment or jinja2.Environment(
            autoescape=False,
            keep_trailing_newline=True,
        )
        self._env.filters.update(HELPERS)
        self._env.globals.update(HELPERS)

    def render(self, template_text: str | None, model: dict[str, Any] | None) -> str:
        """Render ``template_text`` with the model's values.

        Raises:
            TemplateError: The template does not compile or fails to render.
        """
        if not template_text:
            return ""
        model = model or {}
        source = rewrite_template(template_text, kebab_names(model), plain_names(model))
        try:
            template = self._env.from_string(source)
            return template.render(template_context(model))
        except jinja2.TemplateSyntaxError as e:
            raise TemplateError(f"Template syntax error at line {e.lineno}: {e.message}") from e
        except jinja2.TemplateError as e:
            raise TemplateError(f"Template rendering failed: {e}") from e
        except Exception as e:
            raise TemplateError(f"Template rendering failed: {type(e).__name__}: {e}") from e
