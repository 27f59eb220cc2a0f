"""
Maven handlers — build file changes delegated to a BuildFileEditor.

The engine does not rewrite POM files itself. These actions resolve
their target and text, then hand the change to the configured editor.
"""

from __future__ import annotations

import logging

from scaffoldkit.core.engine.handlers.base import ActionHandler, HandlerContext, RenderedAction
from scaffoldkit.core.errors import HandlerError
from scaffoldkit.core.models.action import (
    InjectMavenBuildPlugin,
    InjectMavenDependency,
    InjectMavenDependencyManagement,
    InjectMavenRepository,
    Receipt,
)

logger = logging.getLogger(__name__)

MavenAction = (
    InjectMavenDependency
    | InjectMavenDependencyManagement
    | InjectMavenRepository
    | InjectMavenBuildPlugin
)


def _repository_text(action: InjectMavenRepository) -> str | None:
    if action.text:
        return action.text
    if not action.id or not action.url:
        return None
    name = f"\n    <name>{action.name}</name>" if action.name else ""
    return f"<repository>\n    <id>{action.id}</id>{name}\n    <url>{action.url}</url>\n</repository>"


def _plugin_text(action: InjectMavenBuildPlugin) -> str | None:
    if action.text:
        return action.text
    if not action.group_id or not action.artifact_id:
        return None
    version = f"\n    <version>{action.version}</version>" if action.version else ""
    return (
        f"<plugin>\n    <groupId>{action.group_id}</groupId>\n"
        f"    <artifactId>{action.artifact_id}</artifactId>{version}\n</plugin>"
    )


class MavenHandler(ActionHandler[MavenAction]):
    """Applies every inject-maven-* action kind."""

    @property
    def kind(self) -> str:
        return "inject-maven"

    def handle(self, rendered: RenderedAction[MavenAction], ctx: HandlerContext) -> Receipt:
        action = rendered.action
        editor = ctx.build_file_editor
        if editor is None:
            raise HandlerError(f"No build file editor is configured for '{action.kind}'")

        pom = ctx.resolve(action.to)
        if not ctx.fs.is_file(pom):
            raise HandlerError(f"Build file does not exist: {pom}", path=str(pom))

        if isinstance(action, InjectMavenRepository):
            text, apply = _repository_text(action), editor.add_repository
        elif isinstance(action, InjectMavenBuildPlugin):
            text, apply = _plugin_text(action), editor.add_build_plugin
        elif isinstance(action, InjectMavenDependencyManagement):
            text, apply = action.text, editor.add_managed_dependency
        else:
            text, apply = action.text, editor.add_dependency

        if not text:
            raise HandlerError(f"Nothing to inject for '{action.kind}': no text", path=str(pom))

        apply(pom, text)
        logger.info("Applied %s to %s", action.kind, pom)
        return Receipt.success(action.kind, output=f"Updated {pom}", outputs={"path": str(pom)})
