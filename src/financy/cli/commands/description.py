"""Predefined description commands."""

import click
from financy.domain.description import DescriptionService
from financy.domain.entities import TransactionType
from financy.domain.errors import DomainError
from financy.cli.error_handling import handle_domain_error, wait_for
from financy.cli.session import require_user

TIPO_CHOICE = click.Choice([t.value for t in TransactionType])


@click.group()
def description_group():
    """Manage suggested transaction descriptions."""
    pass


@description_group.command("create")
@click.argument("name")
@click.option("--type", "tipo", type=TIPO_CHOICE, required=True, help="Transaction type it applies to")
@click.pass_context
def create_description(ctx, name: str, tipo: str):
    """Save a description to suggest when adding transactions."""
    user = require_user(ctx)
    service = DescriptionService(ctx.obj["db"], ctx.obj["gateway"])

    try:
        future = service.create_description(user.uid, name, TransactionType(tipo))
    except DomainError as e:
        handle_domain_error(ctx, e)

    description_id = wait_for(ctx, future)
    click.echo(f"Created {tipo} description '{name.strip()}' (ID: {description_id})")


@description_group.command("list")
@click.option("--type", "tipo", type=TIPO_CHOICE, help="Only descriptions of this type")
@click.option("--search", help="Only descriptions containing this text")
@click.pass_context
def list_descriptions(ctx, tipo: str | None, search: str | None):
    """List saved descriptions."""
    user = require_user(ctx)
    service = DescriptionService(ctx.obj["db"], ctx.obj["gateway"])

    descriptions = service.search_descriptions(
        user.uid, TransactionType(tipo) if tipo else None, search
    )

    if not descriptions:
        click.echo("No descriptions found.")
        return

    click.echo(f"{'ID':<34} {'Type':<8} Name")
    click.echo("-" * 70)
    for d in descriptions:
        click.echo(f"{d.id:<34} {d.tipo.value:<8} {d.name}")


@description_group.command("suggest")
@click.argument("tipo", type=TIPO_CHOICE)
@click.argument("text", required=False, default="")
@click.pass_context
def suggest_descriptions(ctx, tipo: str, text: str):
    """Print saved descriptions of a type matching TEXT, one per line.

    Examples:
        financy description suggest despesa merc
    """
    user = require_user(ctx)
    service = DescriptionService(ctx.obj["db"], ctx.obj["gateway"])

    for name in service.suggest(user.uid, TransactionType(tipo), text):
        click.echo(name)


@description_group.command("delete")
@click.argument("description_id")
@click.pass_context
def delete_description(ctx, description_id: str):
    """Delete a saved description."""
    user = require_user(ctx)
    service = DescriptionService(ctx.obj["db"], ctx.obj["gateway"])

    try:
        future = service.delete_description(user.uid, description_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    wait_for(ctx, future)
    click.echo(f"Deleted description {description_id}")


def register_commands(cli: click.Group) -> None:
    """Register description commands with main CLI."""
    cli.add_command(description_group, name="description")
