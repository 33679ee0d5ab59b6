"""Group management commands."""

import click
from financy.domain.entities import TransactionType
from financy.domain.errors import DomainError
from financy.domain.group import GroupService
from financy.cli.error_handling import handle_domain_error, wait_for
from financy.cli.session import require_user

TIPO_CHOICE = click.Choice([t.value for t in TransactionType])


@click.group()
def group_group():
    """Manage income and expense groups."""
    pass


@group_group.command("create")
@click.argument("name")
@click.option("--type", "tipo", type=TIPO_CHOICE, required=True, help="Transaction type the group holds")
@click.pass_context
def create_group(ctx, name: str, tipo: str):
    """Create a group.

    Examples:
        financy group create Casa --type despesa
        financy group create Trabalho --type receita
    """
    user = require_user(ctx)
    service = GroupService(ctx.obj["db"], ctx.obj["gateway"])

    try:
        future = service.create_group(user.uid, name, TransactionType(tipo))
    except DomainError as e:
        handle_domain_error(ctx, e)

    group_id = wait_for(ctx, future)
    click.echo(f"Created {tipo} group '{name.strip()}' (ID: {group_id})")


@group_group.command("list")
@click.option("--type", "tipo", type=TIPO_CHOICE, help="Only groups of this type")
@click.pass_context
def list_groups(ctx, tipo: str | None):
    """List groups."""
    user = require_user(ctx)
    service = GroupService(ctx.obj["db"], ctx.obj["gateway"])

    groups = service.list_groups(user.uid, TransactionType(tipo) if tipo else None)
    if not groups:
        click.echo("No groups found.")
        return

    click.echo(f"{'ID':<34} {'Type':<8} Name")
    click.echo("-" * 70)
    for g in groups:
        click.echo(f"{g.id:<34} {g.tipo.value:<8} {g.name}")


@group_group.command("delete")
@click.argument("group_id")
@click.pass_context
def delete_group(ctx, group_id: str):
    """Delete a group. Its transactions are kept."""
    user = require_user(ctx)
    service = GroupService(ctx.obj["db"], ctx.obj["gateway"])

    try:
        future = service.delete_group(user.uid, group_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    wait_for(ctx, future)
    click.echo(f"Deleted group {group_id}")


def register_commands(cli: click.Group) -> None:
    """Register group commands with main CLI."""
    cli.add_command(group_group, name="group")
