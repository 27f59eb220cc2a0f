"""
Rendering stage — renders an action's templated fields against the model.

Runs right before dispatch, so values defined by earlier action files
(vars, exec define) are visible. Returns a copy of the action; the
parsed ActionFile is never modified.
"""

from __future__ import annotations

from typing import Any, assert_never

from scaffoldkit.core.engine.handlers.base import HandlerContext, RenderedAction
from scaffoldkit.core.errors import HandlerError
from scaffoldkit.core.models.action import (
    MAVEN_ACTIONS,
    Action,
    Exec,
    Generate,
    Inject,
    Vars,
)
from scaffoldkit.core.models.action_file import ActionFile


def _render_fields(action: Any, names: tuple[str, ...], ctx: HandlerContext) -> dict[str, Any]:
    update = {}
    for name in names:
        value = getattr(action, name)
        if isinstance(value, str):
            update[name] = ctx.renderer.render(value, ctx.model)
    return update


def _generate_source(action: Generate, body: str | None, ctx: HandlerContext) -> str | None:
    """Template text for a generate action: inline text, then ``from``, then the body."""
    if action.text is not None:
        return action.text
    if action.from_:
        source = ctx.resolve_input(ctx.renderer.render(action.from_, ctx.model))
        if not ctx.fs.is_file(source):
            raise HandlerError(f"Template file for 'from' not found: {source}", path=str(source))
        return ctx.fs.read_text(source)
    return body


def render_exec(action: Exec, ctx: HandlerContext) -> Exec:
    update = _render_fields(action, ("command", "command_file", "to", "errto", "dir"), ctx)
    return action.model_copy(update=update)


def render_action(action_file: ActionFile, ctx: HandlerContext) -> RenderedAction[Action]:
    """Render ``action_file``'s action and body against ``ctx.model``."""
    action = action_file.action
    model = ctx.model
    body = action_file.text

    if isinstance(action, Generate):
        source = _generate_source(action, body, ctx)
        update = _render_fields(action, ("to",), ctx)
        update["text"] = ctx.renderer.render(source, model) if source is not None else None
        return RenderedAction(action.model_copy(update=update), body=update["text"])

    elif isinstance(action, Inject):
        source = action.text if action.text is not None else body
        update = _render_fields(action, ("to", "skip", "before", "after"), ctx)
        update["text"] = ctx.renderer.render(source, model) if source is not None else None
        return RenderedAction(action.model_copy(update=update), body=update["text"])

    elif isinstance(action, Exec):
        rendered_body = ctx.renderer.render(body, model) if action.stdin else None
        return RenderedAction(render_exec(action, ctx), body=rendered_body)

    elif isinstance(action, Vars):
        data = {}
        for key, value in action.data.items():
            key = ctx.renderer.render(str(key), model)
            data[key] = ctx.renderer.render(value, model) if isinstance(value, str) else value
        return RenderedAction(action.model_copy(update={"data": data}))

    elif isinstance(action, MAVEN_ACTIONS):
        source = action.text if action.text is not None else body
        names = tuple(
            name for name in type(action).model_fields if name not in ("kind", "text")
        )
        update = _render_fields(action, names, ctx)
        update["text"] = ctx.renderer.render(source, model) if source is not None else None
        return RenderedAction(action.model_copy(update=update), body=update["text"])

    else:
        assert_never(action)
