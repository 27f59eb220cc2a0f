"""
scaffoldkit — CLI entrypoint.

Usage:
    scaffoldkit --help
    scaffoldkit commands list
    scaffoldkit run controller new --feature person
    scaffoldkit role get
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from scaffoldkit import __version__
from scaffoldkit.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="scaffoldkit")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--dir",
    "-d",
    "project_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Project directory (default: search upwards from the current directory).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    project_dir: str | None,
) -> None:
    """scaffoldkit — run project scaffolding commands."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["project_dir"] = Path(project_dir) if project_dir else None

    setup_logging(
        level=resolve_level(verbose=verbose, quiet=quiet, debug=debug),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
    )


_STATUS_STYLE = {
    "ok": ("✓", "green"),
    "skipped": ("⊘", "yellow"),
    "failed": ("✗", "red"),
}


@cli.command(context_settings={"ignore_unknown_options": True, "allow_extra_args": True})
@click.argument("noun")
@click.argument("verb")
@click.argument("options", nargs=-1, type=click.UNPROCESSED)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def run(
    ctx: click.Context,
    noun: str,
    verb: str,
    options: tuple[str, ...],
    as_json: bool,
) -> None:
    """Run the action files of NOUN VERB.

    Command options are passed as ``--name value``.

    Examples:

        scaffoldkit run controller new --feature person

        scaffoldkit run boot new --name demo --json
    """
    from scaffoldkit.core.engine.options import parse_option_args
    from scaffoldkit.core.errors import ResolveError
    from scaffoldkit.core.use_cases.run import run_command

    try:
        raw = parse_option_args(list(options) + list(ctx.args))
    except ResolveError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    result = run_command(noun, verb, options=raw, project_dir=ctx.obj.get("project_dir"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
        if not result.ok:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    report = result.report
    assert report is not None

    if not ctx.obj.get("quiet"):
        click.secho(f"\n⚡ {result.command}", fg="cyan", bold=True)
        click.echo(f"   Project: {result.project_root}")
        click.echo()

    for receipt in report.receipts:
        icon, color = _STATUS_STYLE.get(receipt.status, ("?", "white"))
        timing = f" ({receipt.duration_ms}ms)" if receipt.duration_ms else ""
        click.secho(f"   {icon} {receipt.action_file} ", fg=color, nl=False)
        click.echo(f"[{receipt.action}]{timing}")
        if receipt.skipped and receipt.output:
            click.echo(f"     │ {receipt.output}")
        elif ctx.obj.get("verbose") and receipt.output:
            for line in receipt.output.split("\n")[:10]:
                click.echo(f"     │ {line}")
        for warning in receipt.warnings:
            click.secho(f"     ⚠️  {warning}", fg="yellow")

    click.echo()
    if report.failure is not None:
        click.secho(f"❌ {report.failure}", fg="red", bold=True)
        click.echo()
        sys.exit(1)

    click.secho(
        f"   Result: {report.succeeded} ok, {report.skipped} skipped",
        fg="green",
        bold=True,
    )
    click.echo()


# ── Register sub-command groups from scaffoldkit/ui/cli/ ──────────

from scaffoldkit.ui.cli.commands import commands  # noqa: E402
from scaffoldkit.ui.cli.role import role  # noqa: E402

cli.add_command(commands)
cli.add_command(role)


if __name__ == "__main__":
    cli()
