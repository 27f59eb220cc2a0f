"""
CLI commands for role variable files.

Thin wrappers over ``scaffoldkit.core.use_cases.roles``.
"""

from __future__ import annotations

import json
import sys

import click
import yaml


def _finish(result, as_json: bool) -> None:
    """Shared output for role commands; exits 1 on error."""
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if result.message:
        click.secho(f"✅ {result.message}", fg="green")


def _role_option(f):
    return click.option(
        "--role",
        "-r",
        "role_name",
        default="",
        help="Role name (default role when omitted).",
    )(f)


_json_option = click.option(
    "--json-output", "--json", "as_json", is_flag=True, help="Output as JSON."
)


@click.group()
def role() -> None:
    """Roles — variables saved by vars actions, one file per role."""


@role.command("add")
@click.argument("name")
@_json_option
@click.pass_context
def add(ctx: click.Context, name: str, as_json: bool) -> None:
    """Create an empty role NAME."""
    from scaffoldkit.core.use_cases.roles import add_role

    _finish(add_role(name, ctx.obj.get("project_dir")), as_json)


@role.command("remove")
@click.argument("name")
@_json_option
@click.pass_context
def remove(ctx: click.Context, name: str, as_json: bool) -> None:
    """Delete role NAME and its variables."""
    from scaffoldkit.core.use_cases.roles import remove_role

    _finish(remove_role(name, ctx.obj.get("project_dir")), as_json)


@role.command("set")
@click.argument("key")
@click.argument("value")
@_role_option
@_json_option
@click.pass_context
def set_(ctx: click.Context, key: str, value: str, role_name: str, as_json: bool) -> None:
    """Set variable KEY to VALUE."""
    from scaffoldkit.core.use_cases.roles import set_variable

    result = set_variable(key, value, role_name, ctx.obj.get("project_dir"))
    _finish(result, as_json)
    if not as_json:
        click.secho(f"✅ {key} = {result.variables.get(key)!r}", fg="green")


@role.command("get")
@click.argument("key", required=False)
@_role_option
@_json_option
@click.pass_context
def get(ctx: click.Context, key: str | None, role_name: str, as_json: bool) -> None:
    """Show variable KEY, or every variable of the role."""
    from scaffoldkit.core.use_cases.roles import get_variables

    result = get_variables(role_name, key, ctx.obj.get("project_dir"))
    _finish(result, as_json)
    if as_json:
        return

    if key is not None:
        click.echo(result.variables[key])
        return
    if not result.variables:
        click.secho(f"No variables in {result.path}", fg="yellow")
        return
    click.echo(yaml.safe_dump(result.variables, default_flow_style=False, sort_keys=False), nl=False)


@role.command("list")
@_json_option
@click.pass_context
def list_(ctx: click.Context, as_json: bool) -> None:
    """List named roles."""
    from scaffoldkit.core.use_cases.roles import list_roles

    result = list_roles(ctx.obj.get("project_dir"))
    _finish(result, as_json)
    if as_json:
        return

    if not result.roles:
        click.secho("No named roles (only the default role)", fg="yellow")
        return
    for name in result.roles:
        click.echo(f"   • {name}")
