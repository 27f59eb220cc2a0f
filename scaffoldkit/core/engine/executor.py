"""
Engine executor — the central orchestration loop.

Takes a noun/verb pair, finds its action files, builds the model, and
runs every action file in order through its handler.

Flow per run:
    scan → build model → for each file: parse → guard → render → dispatch

The run is fail-fast: the first error stops it, and the report names
the file, the stage and the cause. Role variables collected along the
way are written once at the end, also when the run aborts.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, assert_never

from scaffoldkit.adapters.base import FileSystem, ProcessRunner
from scaffoldkit.adapters.shell.command import SubprocessRunner
from scaffoldkit.adapters.shell.filesystem import LocalFileSystem
from scaffoldkit.core.config.command_loader import is_manifest, resolve_command_dir
from scaffoldkit.core.engine.conditions import ConditionEvaluator
from scaffoldkit.core.engine.front_matter import FrontMatterError, NoFrontMatter, read_action_file
from scaffoldkit.core.engine.handlers.base import BuildFileEditor, HandlerContext, RenderedAction
from scaffoldkit.core.engine.handlers.exec import ExecHandler
from scaffoldkit.core.engine.handlers.generate import GenerateHandler
from scaffoldkit.core.engine.handlers.inject import InjectHandler
from scaffoldkit.core.engine.handlers.maven import MavenHandler
from scaffoldkit.core.engine.handlers.vars import VarsHandler
from scaffoldkit.core.engine.populators import ModelPopulator, build_model
from scaffoldkit.core.engine.prompts import ClickPrompter, Prompter
from scaffoldkit.core.engine.rendering import render_action
from scaffoldkit.core.engine.templating import TemplateRenderer
from scaffoldkit.core.errors import HandlerError, ResolveError, ScaffoldError
from scaffoldkit.core.models.action import (
    MAVEN_ACTIONS,
    Action,
    Exec,
    Generate,
    Inject,
    Receipt,
    Vars,
    now_iso,
)
from scaffoldkit.core.models.settings import EngineSettings
from scaffoldkit.core.persistence.role_store import DEFAULT_ROLE, RoleStore

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    """Where a run is, or where it stopped."""

    SCANNING = "scanning"
    MODEL_BUILDING = "model_building"
    PARSING = "parsing"
    GUARDING = "guarding"
    RENDERING = "rendering"
    DISPATCHING = "dispatching"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class ActionFailure:
    """The error that aborted a run."""

    action_file: str
    stage: Stage
    cause: str
    action: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        where = self.action_file or "<command>"
        kind = f" ({self.action})" if self.action else ""
        return f"{where}{kind} failed during {self.stage.value}: {self.cause}"

    def to_dict(self) -> dict:
        return {
            "action_file": self.action_file,
            "stage": self.stage.value,
            "action": self.action,
            "cause": self.cause,
            "details": self.details,
        }


@dataclass
class ExecutionReport:
    """Result of running one command."""

    command: str = ""
    project_root: str = ""
    stage: Stage = Stage.SCANNING
    receipts: list[Receipt] = field(default_factory=list)
    failure: ActionFailure | None = None
    model_keys: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.skipped)

    @property
    def all_ok(self) -> bool:
        return self.failure is None

    @property
    def status(self) -> str:
        return "ok" if self.failure is None else "failed"

    def to_dict(self) -> dict:
        return {
            "command": self.command,
            "project_root": self.project_root,
            "status": self.status,
            "stage": self.stage.value,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "failure": self.failure.to_dict() if self.failure else None,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


class _StageError(Exception):
    """Carries a ScaffoldError with the stage and action it happened in."""

    def __init__(
        self,
        stage: Stage,
        error: ScaffoldError,
        action_file: str,
        action: str | None = None,
    ):
        self.stage = stage
        self.error = error
        self.action_file = action_file
        self.action = action
        super().__init__(str(error))


class CommandExecutor:
    """Runs noun/verb commands against a project directory.

    All collaborators are injectable; defaults touch the real disk,
    spawn real processes and prompt on the terminal.
    """

    def __init__(
        self,
        fs: FileSystem | None = None,
        runner: ProcessRunner | None = None,
        renderer: TemplateRenderer | None = None,
        prompter: Prompter | None = None,
        populators: list[ModelPopulator] | None = None,
        settings: EngineSettings | None = None,
        build_file_editor: BuildFileEditor | None = None,
    ):
        self.fs = fs or LocalFileSystem()
        self.runner = runner or SubprocessRunner()
        self.renderer = renderer or TemplateRenderer()
        self.prompter = prompter or ClickPrompter()
        self.populators = populators
        self.settings = settings or EngineSettings()
        self.build_file_editor = build_file_editor

        self._exec = ExecHandler()
        self._generate = GenerateHandler()
        self._inject = InjectHandler()
        self._vars = VarsHandler(self._exec)
        self._maven = MavenHandler()

    # ── Scanning ────────────────────────────────────────────────────

    def action_files(self, command_dir: Path) -> list[Path]:
        """Action files of a verb directory, in execution order."""
        return [p for p in self.fs.list_files(command_dir) if not is_manifest(p)]

    # ── Execution ───────────────────────────────────────────────────

    def execute(
        self,
        project_root: Path,
        noun: str,
        verb: str,
        arguments: dict[str, Any] | None = None,
    ) -> ExecutionReport:
        """Run ``noun verb`` and report what happened. Never raises ScaffoldError."""
        report = ExecutionReport(command=f"{noun} {verb}", project_root=str(project_root))
        role_store = RoleStore(project_root, self.fs)

        try:
            report.stage = Stage.SCANNING
            commands_dir = project_root / self.settings.commands_dir
            command_dir = resolve_command_dir(commands_dir, noun, verb, self.fs)
            files = self.action_files(command_dir)
            if not files:
                raise ResolveError(f"No action files found in {command_dir}")
            logger.debug("Found %d action file(s) in %s", len(files), command_dir)

            report.stage = Stage.MODEL_BUILDING
            model = build_model(project_root, arguments, self.populators)

            ctx = HandlerContext(
                project_root=project_root,
                command_dir=command_dir,
                model=model,
                fs=self.fs,
                runner=self.runner,
                renderer=self.renderer,
                role_store=role_store,
                prompter=self.prompter,
                settings=self.settings,
                build_file_editor=self.build_file_editor,
            )
            evaluator = ConditionEvaluator(
                run_command=lambda command: self._exec.run_command(command, ctx),
                run_command_file=lambda path: self._exec.run_command_file(path, ctx),
                defined_names=lambda: set(role_store.load(DEFAULT_ROLE)),
            )

            for path in files:
                receipt = self._run_file(path, command_dir, ctx, evaluator, report)
                report.receipts.append(receipt)

            report.stage = Stage.DONE
            report.model_keys = sorted(model)

        except _StageError as e:
            report.failure = ActionFailure(
                action_file=e.action_file,
                stage=e.stage,
                action=e.action,
                cause=str(e.error),
                details=getattr(e.error, "details", {}),
            )
            report.receipts.append(
                Receipt.failure(e.action or "none", str(e.error), action_file=e.action_file)
            )
        except ScaffoldError as e:
            report.failure = ActionFailure(action_file="", stage=report.stage, cause=str(e))
        finally:
            role_store.flush()

        if report.failure is not None:
            logger.error("%s", report.failure)
            report.stage = Stage.ABORTED
        return report

    def _run_file(
        self,
        path: Path,
        command_dir: Path,
        ctx: HandlerContext,
        evaluator: ConditionEvaluator,
        report: ExecutionReport,
    ) -> Receipt:
        rel = path.relative_to(command_dir).as_posix()
        start = time.monotonic()
        started_at = now_iso()
        kind: str | None = None

        try:
            report.stage = Stage.PARSING
            parsed = read_action_file(path, self.fs)
            if isinstance(parsed, NoFrontMatter):
                logger.debug("Skipping %s: %s", rel, parsed.reason)
                return Receipt.skip("none", f"Not an action file: {parsed.reason}", action_file=rel)
            if isinstance(parsed, FrontMatterError):
                raise parsed.to_exception()
            kind = parsed.action.kind

            report.stage = Stage.GUARDING
            if not evaluator.evaluate_conditional(parsed.front_matter.conditional, ctx.model):
                logger.info("Skipping %s, condition not met", rel)
                return Receipt.skip(kind, "Condition not met", action_file=rel)

            report.stage = Stage.RENDERING
            rendered = render_action(parsed, ctx)

            report.stage = Stage.DISPATCHING
            receipt = self._dispatch(rendered, ctx)

        except ScaffoldError as e:
            raise _StageError(report.stage, e, rel, kind) from e
        except OSError as e:
            raise _StageError(report.stage, HandlerError(f"I/O error: {e}"), rel, kind) from e
        except Exception as e:
            error = HandlerError(f"{type(e).__name__}: {e}")
            raise _StageError(report.stage, error, rel, kind) from e

        receipt.action_file = rel
        receipt.started_at = started_at
        receipt.ended_at = now_iso()
        receipt.duration_ms = int((time.monotonic() - start) * 1000)
        return receipt

    def _dispatch(self, rendered: RenderedAction[Action], ctx: HandlerContext) -> Receipt:
        action = rendered.action
        if isinstance(action, Generate):
            return self._generate.handle(rendered, ctx)  # type: ignore[arg-type]
        elif isinstance(action, Inject):
            return self._inject.handle(rendered, ctx)  # type: ignore[arg-type]
        elif isinstance(action, Exec):
            return self._exec.handle(rendered, ctx)  # type: ignore[arg-type]
        elif isinstance(action, Vars):
            return self._vars.handle(rendered, ctx)  # type: ignore[arg-type]
        elif isinstance(action, MAVEN_ACTIONS):
            return self._maven.handle(rendered, ctx)  # type: ignore[arg-type]
        else:
            assert_never(action)
