"""Account and session commands."""

import click
from financy.domain.auth import AuthService
from financy.domain.errors import AuthError
from financy.cli.error_handling import handle_domain_error


@click.command("signup")
@click.argument("email")
@click.option(
    "--password", prompt=True, hide_input=True, confirmation_prompt=True,
    help="Password (at least 6 characters)",
)
@click.pass_context
def signup(ctx, email: str, password: str):
    """Create an account and sign in.

    Examples:
        financy signup ana@example.com
    """
    service = AuthService(ctx.obj["db"])
    try:
        user = service.sign_up(email, password)
    except AuthError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account for {user.email}")
    click.echo(f"  User ID: {user.uid}")


@click.command("login")
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True, help="Password")
@click.pass_context
def login(ctx, email: str, password: str):
    """Sign in with e-mail and password."""
    service = AuthService(ctx.obj["db"])
    try:
        user = service.sign_in(email, password)
    except AuthError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Signed in as {user.email}")


@click.command("logout")
@click.pass_context
def logout(ctx):
    """Sign out."""
    AuthService(ctx.obj["db"]).sign_out()
    click.echo("Signed out.")


@click.command("whoami")
@click.pass_context
def whoami(ctx):
    """Show the signed-in user."""
    user = AuthService(ctx.obj["db"]).current_user
    if user is None:
        click.echo("Not signed in.")
        return
    click.echo(f"{user.email} (ID: {user.uid})")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(signup)
    cli.add_command(login)
    cli.add_command(logout)
    cli.add_command(whoami)
