"""CLI helpers for the signed-in user."""

from __future__ import annotations

import click

from financy.domain.auth import AuthService
from financy.domain.entities import User


def require_user(ctx: click.Context) -> User:
    """Return the signed-in user, or exit with a CLI error.

    This keeps the error message and exit behavior consistent across commands.
    """
    user = AuthService(ctx.obj["db"]).current_user
    if user is None:
        click.echo("Error: Not signed in. Run 'financy login' first.", err=True)
        ctx.exit(1)
    return user
