"""
Prompts — how ``vars`` questions get their answers.

The vars handler talks to a Prompter. ``ClickPrompter`` asks on the
terminal with ``click.prompt``; tests pass a scripted prompter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import click

from scaffoldkit.core.models.action import Question


class Prompter(ABC):
    """Answers one question. ``choices`` maps display label → value."""

    @abstractmethod
    def ask(self, question: Question, choices: dict[str, Any] | None = None) -> Any:
        """Block until the question is answered and return the answer."""


class ClickPrompter(Prompter):
    """Terminal prompts through click."""

    def ask(self, question: Question, choices: dict[str, Any] | None = None) -> Any:
        attrs = question.attributes

        if question.type == "dropdown" and choices:
            labels = sorted(choices)
            if attrs.multiple:
                raw = click.prompt(
                    f"{question.label} (comma separated: {', '.join(labels)})",
                    default=attrs.default_value,
                )
                picked = [part.strip() for part in str(raw).split(",") if part.strip()]
                unknown = [p for p in picked if p not in choices]
                if unknown:
                    raise click.BadParameter(f"Unknown choice(s): {', '.join(unknown)}")
                return [choices[p] for p in picked]
            label = click.prompt(
                question.label,
                type=click.Choice(labels),
                default=attrs.default_value,
            )
            return choices[label]

        if question.type == "path":
            return click.prompt(
                question.label,
                type=click.Path(),
                default=attrs.default_value,
            )

        return click.prompt(
            question.label,
            default=attrs.default_value,
            hide_input=attrs.mask_character is not None,
            confirmation_prompt=attrs.confirmation or False,
        )
