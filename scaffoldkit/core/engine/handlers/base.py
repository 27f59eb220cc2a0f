"""
Handler base — the contract between the orchestrator and action handlers.

A handler applies one rendered action and returns a Receipt. Problems
that must stop the run are raised as ``HandlerError``; soft problems
(a missing inject marker) go on the receipt as warnings.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Generic, TypeVar

from scaffoldkit.adapters.base import FileSystem, ProcessRunner
from scaffoldkit.core.engine.prompts import Prompter
from scaffoldkit.core.engine.templating import TemplateRenderer
from scaffoldkit.core.models.action import Receipt
from scaffoldkit.core.models.settings import EngineSettings
from scaffoldkit.core.persistence.role_store import RoleStore

A = TypeVar("A")


class BuildFileEditor(ABC):
    """Applies Maven build file changes on behalf of the maven handlers."""

    @abstractmethod
    def add_dependency(self, pom: Path, text: str) -> None: ...

    @abstractmethod
    def add_managed_dependency(self, pom: Path, text: str) -> None: ...

    @abstractmethod
    def add_repository(self, pom: Path, text: str) -> None: ...

    @abstractmethod
    def add_build_plugin(self, pom: Path, text: str) -> None: ...


@dataclass
class HandlerContext:
    """Everything a handler may read or touch during one command run."""

    project_root: Path
    command_dir: Path
    model: dict[str, Any]
    fs: FileSystem
    runner: ProcessRunner
    renderer: TemplateRenderer
    role_store: RoleStore
    prompter: Prompter
    settings: EngineSettings = field(default_factory=EngineSettings)
    build_file_editor: BuildFileEditor | None = None

    def resolve(self, relative: str) -> Path:
        """A path relative to the project root."""
        return self.project_root / relative

    def resolve_input(self, relative: str) -> Path:
        """A path relative to the command directory, else the project root."""
        candidate = self.command_dir / relative
        if self.fs.is_file(candidate):
            return candidate
        return self.project_root / relative


@dataclass(frozen=True)
class RenderedAction(Generic[A]):
    """An action with its templated fields rendered, plus the rendered body."""

    action: A
    body: str | None = None


class ActionHandler(ABC, Generic[A]):
    """Applies one kind of action."""

    @property
    @abstractmethod
    def kind(self) -> str:
        """The action kind this handler applies (e.g. 'generate')."""

    @abstractmethod
    def handle(self, rendered: RenderedAction[A], ctx: HandlerContext) -> Receipt:
        """Apply the action and return a receipt.

        Raises:
            HandlerError: The effect could not be applied.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} kind={self.kind!r}>"
