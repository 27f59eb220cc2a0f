"""
Run use case — execute one noun/verb command against a project.

Resolves the project root and settings, validates the command options
against the verb manifest, then hands over to the executor. The full
slice from ``scaffoldkit run controller new --feature x`` to a report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from scaffoldkit.core.config.command_loader import load_manifest, resolve_command_dir
from scaffoldkit.core.config.loader import find_project_root, load_settings
from scaffoldkit.core.engine.executor import CommandExecutor, ExecutionReport
from scaffoldkit.core.engine.options import resolve_arguments
from scaffoldkit.core.errors import ActionExecutionError, ScaffoldError

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Result of running a command."""

    command: str = ""
    project_root: Path | None = None
    arguments: dict[str, Any] | None = None
    report: ExecutionReport | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and (self.report is None or self.report.all_ok)

    def to_dict(self) -> dict:
        result: dict = {"command": self.command}
        if self.error:
            result["error"] = self.error
            return result

        result["project_root"] = str(self.project_root)
        result["arguments"] = self.arguments or {}
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def run_command(
    noun: str,
    verb: str,
    options: dict[str, Any] | None = None,
    project_dir: Path | None = None,
    executor: CommandExecutor | None = None,
    raise_on_failure: bool = False,
) -> RunResult:
    """Run ``noun verb`` with the given raw option values.

    Args:
        noun: Command group (first directory level under the commands dir).
        verb: Subcommand (second directory level).
        options: Raw ``--name value`` options; validated against the
            verb's ``command.yaml``.
        project_dir: Directory to start the project root search from.
        executor: Optional pre-configured executor (tests inject fakes).
        raise_on_failure: Raise ``ActionExecutionError`` when an action
            file aborts the run instead of returning the failed report.

    Returns:
        RunResult with the execution report, or an ``error`` when the
        command could not be started.
    """
    result = RunResult(command=f"{noun} {verb}")

    try:
        project_root = find_project_root(project_dir)
        result.project_root = project_root
        settings = load_settings(project_root)

        command_dir = resolve_command_dir(project_root / settings.commands_dir, noun, verb)
        manifest = load_manifest(command_dir)
        arguments = resolve_arguments(manifest, options or {})
        result.arguments = arguments
    except ScaffoldError as e:
        result.error = str(e)
        return result

    if executor is None:
        executor = CommandExecutor(settings=settings)

    logger.info("Running '%s %s' in %s", noun, verb, project_root)
    report = executor.execute(project_root, noun, verb, arguments)
    result.report = report

    if report.failure is not None and raise_on_failure:
        raise ActionExecutionError(report.failure)

    return result
