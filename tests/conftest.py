"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any

import pytest

from scaffoldkit.adapters.mock import FakeProcessRunner, MemoryFileSystem
from scaffoldkit.core.engine.handlers.base import BuildFileEditor, HandlerContext
from scaffoldkit.core.engine.prompts import Prompter
from scaffoldkit.core.engine.templating import TemplateRenderer
from scaffoldkit.core.models.action import Question
from scaffoldkit.core.models.settings import EngineSettings
from scaffoldkit.core.persistence.role_store import RoleStore


class ScriptedPrompter(Prompter):
    """Answers questions from a name → answer mapping and records them."""

    def __init__(self, answers: dict[str, Any] | None = None):
        self.answers = answers or {}
        self.asked: list[tuple[Question, dict[str, Any] | None]] = []

    def ask(self, question: Question, choices: dict[str, Any] | None = None) -> Any:
        self.asked.append((question, choices))
        return self.answers[question.name]


class RecordingEditor(BuildFileEditor):
    """BuildFileEditor that records the calls it receives."""

    def __init__(self):
        self.calls: list[tuple[str, Path, str]] = []

    def add_dependency(self, pom: Path, text: str) -> None:
        self.calls.append(("dependency", pom, text))

    def add_managed_dependency(self, pom: Path, text: str) -> None:
        self.calls.append(("managed-dependency", pom, text))

    def add_repository(self, pom: Path, text: str) -> None:
        self.calls.append(("repository", pom, text))

    def add_build_plugin(self, pom: Path, text: str) -> None:
        self.calls.append(("build-plugin", pom, text))


def write_action(directory: Path, name: str, content: str) -> Path:
    """Write a dedented action file below ``directory``."""
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    return MemoryFileSystem()


@pytest.fixture
def fake_runner() -> FakeProcessRunner:
    return FakeProcessRunner()


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def make_ctx(tmp_path: Path, memory_fs: MemoryFileSystem, fake_runner: FakeProcessRunner, prompter):
    """Factory for a HandlerContext over an in-memory project at ``tmp_path``."""

    def _make(model: dict[str, Any] | None = None, **overrides: Any) -> HandlerContext:
        memory_fs.mkdir(tmp_path)
        command_dir = tmp_path / ".spring" / "commands" / "noun" / "verb"
        memory_fs.mkdir(command_dir)
        values: dict[str, Any] = {
            "project_root": tmp_path,
            "command_dir": command_dir,
            "model": dict(model or {}),
            "fs": memory_fs,
            "runner": fake_runner,
            "renderer": TemplateRenderer(),
            "role_store": RoleStore(tmp_path, memory_fs),
            "prompter": prompter,
            "settings": EngineSettings(),
        }
        values.update(overrides)
        return HandlerContext(**values)

    return _make


@pytest.fixture
def spring_project(tmp_path: Path) -> Path:
    """An empty project with a ``.spring/commands`` directory."""
    (tmp_path / ".spring" / "commands").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def editor() -> RecordingEditor:
    return RecordingEditor()


@pytest.fixture
def action_writer():
    """The ``write_action`` helper, for tests that lay out command directories."""
    return write_action
