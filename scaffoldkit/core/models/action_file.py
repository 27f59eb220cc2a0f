"""
Action file models — parsed front matter plus template body.

An action file is YAML front matter between ``---`` lines followed by
a free-form body::

    ---
    action:
      generate:
        to: src/{{ name }}.txt
    conditional:
      artifact-id: demo
    ---
    Hello {{ name }}
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from scaffoldkit.core.models.action import ACTION_KINDS, Action, _kebab

DEFAULT_ENGINE = "jinja"


class Conditional(BaseModel):
    """Guard deciding whether an action file runs.

    Every declared part must hold: the ``if`` expression must be true,
    ``artifact-id`` must equal the model's ``artifact-id`` and every
    entry of ``fields`` must equal the model value under that key.
    """

    model_config = ConfigDict(
        alias_generator=_kebab, populate_by_name=True, extra="ignore", frozen=True
    )

    if_: str | None = Field(default=None, alias="if")
    artifact_id: str | None = None
    fields: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.if_ and self.artifact_id is None and not self.fields


class FrontMatter(BaseModel):
    """The YAML header of an action file."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    engine: str = DEFAULT_ENGINE
    action: Action
    conditional: Conditional | None = None

    @model_validator(mode="before")
    @classmethod
    def _tag_action(cls, data: Any) -> Any:
        """Turn ``action: {generate: {...}}`` into the tagged variant."""
        if not isinstance(data, dict):
            return data
        if data.get("engine") is None:
            data = {**data, "engine": DEFAULT_ENGINE}

        action = data.get("action")
        if action is None:
            raise ValueError("missing required field 'action'")
        if not isinstance(action, dict):
            raise ValueError(
                f"'action' must be a mapping with one action type, got {type(action).__name__}"
            )
        if "kind" in action:
            return data

        kinds = [key for key in action if key in ACTION_KINDS]
        if len(kinds) != 1:
            known = ", ".join(sorted(set(ACTION_KINDS)))
            found = ", ".join(kinds) if kinds else "none"
            raise ValueError(
                f"'action' must declare exactly one action type (found: {found}; known: {known})"
            )

        key = kinds[0]
        body = action[key] or {}
        if not isinstance(body, dict):
            raise ValueError(f"'{key}' must be a mapping, got {type(body).__name__}")
        return {**data, "action": {**body, "kind": ACTION_KINDS[key]}}


class ActionFile(BaseModel):
    """A parsed action file: where it came from, its header and its body."""

    model_config = ConfigDict(frozen=True)

    path: str = ""
    front_matter: FrontMatter
    text: str | None = None

    @property
    def action(self) -> Action:
        return self.front_matter.action
