"""
CLI commands for browsing the project's command tree.

Thin wrapper over ``scaffoldkit.core.use_cases.commands``.
"""

from __future__ import annotations

import json
import sys

import click


@click.group()
def commands() -> None:
    """Commands — the nouns and verbs defined under .spring/commands."""


@commands.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_(ctx: click.Context, as_json: bool) -> None:
    """List every noun, its verbs and their options."""
    from scaffoldkit.core.use_cases.commands import list_commands

    result = list_commands(ctx.obj.get("project_dir"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if not result.nouns:
        click.secho(f"No commands found in {result.commands_dir}", fg="yellow")
        return

    click.secho(f"\n📂 {result.commands_dir}", fg="cyan", bold=True)
    click.echo(f"   Commands: {len(result.nouns)} | Subcommands: {result.verb_count}")
    click.echo()

    for noun in result.nouns:
        click.secho(f"   {noun.command.name}", fg="white", bold=True, nl=False)
        click.echo(f"  {noun.command.description}")
        for verb in noun.verbs:
            click.secho(f"     • {verb.command.name}", fg="green", nl=False)
            click.echo(f"  {verb.command.description}")
            for option in verb.command.options:
                required = " (required)" if option.required else ""
                default = (
                    f" [default: {option.default_value}]"
                    if option.default_value is not None
                    else ""
                )
                click.echo(f"         --{option.name}  {option.description}{required}{default}")
    click.echo()
