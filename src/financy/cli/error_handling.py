"""CLI error handling helpers."""

from concurrent.futures import Future
from typing import Any

import click

from financy.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def wait_for(ctx: click.Context, future: Future) -> Any:
    """Block on a queued mutation, rendering its failure as a CLI error."""
    try:
        return future.result()
    except DomainError as e:
        handle_domain_error(ctx, e)
