"""
Exec handler — runs a shell command and publishes its output.

Captured output is published in the model for later action files:

    exec-stdout             stdout (line endings normalized, no trailing newline)
    exec-stderr             stderr
    exec-exit-code          the exit code
    exec-stdout-json-path   the json-path result when no define name is given

A redirected stream (``to`` / ``errto``) is not captured. A non-zero
exit aborts the run unless ``continue-on-error`` is set.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from scaffoldkit.adapters.base import ProcessResult
from scaffoldkit.core.engine.handlers.base import ActionHandler, HandlerContext, RenderedAction
from scaffoldkit.core.engine.jsonpath import extract
from scaffoldkit.core.engine.rendering import render_exec
from scaffoldkit.core.errors import HandlerError
from scaffoldkit.core.models.action import Exec, Receipt

logger = logging.getLogger(__name__)

OUTPUT_STDOUT = "exec-stdout"
OUTPUT_STDERR = "exec-stderr"
OUTPUT_EXIT_CODE = "exec-exit-code"
OUTPUT_STDOUT_JSON_PATH = "exec-stdout-json-path"


def _normalize(text: str) -> str:
    return "\n".join(text.splitlines())


class ExecHandler(ActionHandler[Exec]):
    @property
    def kind(self) -> str:
        return "exec"

    # ── Running ─────────────────────────────────────────────────────

    def _command(self, action: Exec, ctx: HandlerContext) -> str:
        if action.command and action.command.strip():
            return action.command
        if action.command_file and action.command_file.strip():
            path = ctx.resolve_input(action.command_file.strip())
            if not ctx.fs.is_file(path):
                raise HandlerError(f"Can not read from command file: {path}", path=str(path))
            return ctx.renderer.render(ctx.fs.read_text(path), ctx.model)
        raise HandlerError("No text found for 'command' or 'command-file' in exec action")

    def run(self, action: Exec, ctx: HandlerContext, stdin: str | None = None) -> ProcessResult:
        """Run an already rendered exec action and return the raw result.

        Raises:
            HandlerError: Nothing to run, bad working directory, or timeout.
        """
        command = self._command(action, ctx)
        cwd = ctx.resolve(action.dir) if action.dir else ctx.project_root
        if not ctx.fs.is_dir(cwd):
            raise HandlerError(f"Exec working directory does not exist: {cwd}", dir=str(cwd))

        timeout = action.timeout or ctx.settings.exec_timeout
        logger.info("Executing: %s", command)
        result = ctx.runner.run(
            command,
            cwd=cwd,
            stdin=stdin,
            stdout_to=ctx.resolve(action.to) if action.to else None,
            stderr_to=ctx.resolve(action.errto) if action.errto else None,
            timeout=timeout,
        )
        if result.timed_out:
            raise HandlerError(
                f"Command '{command}' timed out after {timeout}s", command=command, timeout=timeout
            )
        return result

    def run_command(self, command: str, ctx: HandlerContext) -> str:
        """Run a literal command for guard helpers; returns normalized stdout."""
        return self._capture(Exec(command=command), ctx)

    def run_command_file(self, path: str, ctx: HandlerContext) -> str:
        return self._capture(Exec(command_file=path), ctx)

    def _capture(self, action: Exec, ctx: HandlerContext) -> str:
        result = self.run(render_exec(action, ctx), ctx)
        if not result.ok:
            raise HandlerError(
                f"Command '{result.command}' exited with code {result.exit_code}",
                exit_code=result.exit_code,
                stderr=result.stderr,
            )
        return _normalize(result.stdout)

    def json_output(self, action: Exec, ctx: HandlerContext) -> Any:
        """Run ``action`` and return its json-path result."""
        rendered = render_exec(action, ctx)
        result = self.run(rendered, ctx)
        if not result.ok:
            raise HandlerError(
                f"Command '{result.command}' exited with code {result.exit_code}",
                exit_code=result.exit_code,
                stderr=result.stderr,
            )
        path = self._json_path(rendered) or "$"
        return self._extract(result.stdout, path)

    # ── JSON ────────────────────────────────────────────────────────

    @staticmethod
    def _json_path(action: Exec) -> str | None:
        if action.define is not None and action.define.json_path:
            return action.define.json_path
        return action.json_path

    @staticmethod
    def _extract(stdout: str, path: str) -> Any:
        try:
            document = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise HandlerError(
                f"Command output is not valid JSON ({e.msg} at line {e.lineno}), "
                f"cannot apply json-path '{path}'",
                json_path=path,
            ) from e
        return extract(document, path)

    # ── Action ──────────────────────────────────────────────────────

    def handle(self, rendered: RenderedAction[Exec], ctx: HandlerContext) -> Receipt:
        action = rendered.action
        result = self.run(action, ctx, stdin=rendered.body)

        outputs: dict[str, Any] = {OUTPUT_EXIT_CODE: result.exit_code}
        if action.to is None:
            outputs[OUTPUT_STDOUT] = _normalize(result.stdout)
        if action.errto is None:
            outputs[OUTPUT_STDERR] = _normalize(result.stderr)

        for key in (OUTPUT_STDOUT, OUTPUT_STDERR, OUTPUT_STDOUT_JSON_PATH):
            ctx.model.pop(key, None)
        ctx.model.update(outputs)

        if result.exit_code != 0:
            message = f"Command '{result.command}' exited with code {result.exit_code}"
            stderr = outputs.get(OUTPUT_STDERR)
            if action.continue_on_error:
                logger.warning("%s (continuing)", message)
                return Receipt.success(
                    self.kind,
                    output=outputs.get(OUTPUT_STDOUT, ""),
                    outcome="failed",
                    error=message,
                    warnings=[message],
                    outputs=outputs,
                )
            if stderr:
                message += f": {stderr}"
            raise HandlerError(message, exit_code=result.exit_code, stderr=stderr)

        json_path = self._json_path(action)
        value: Any = outputs.get(OUTPUT_STDOUT)
        if json_path:
            if action.to is not None:
                raise HandlerError(
                    f"json-path '{json_path}' needs captured stdout, but stdout is redirected to {action.to}"
                )
            value = self._extract(result.stdout, json_path)
            outputs[OUTPUT_STDOUT_JSON_PATH] = value

        if action.define is not None:
            ctx.model[action.define.name] = value
            outputs[action.define.name] = value
            logger.debug("Defined %s from command output", action.define.name)
        elif json_path:
            ctx.model[OUTPUT_STDOUT_JSON_PATH] = value

        logger.info("Command '%s' executed successfully", result.command)
        return Receipt.success(
            self.kind,
            output=outputs.get(OUTPUT_STDOUT, ""),
            outputs=outputs,
        )
