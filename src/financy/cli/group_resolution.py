"""CLI helpers for group resolution."""

from __future__ import annotations

from typing import Optional

import click

from financy.domain.entities import TransactionType
from financy.domain.group import GroupService
from financy.utils.group_resolver import resolve_group


def resolve_group_or_exit(
    ctx: click.Context,
    group_service: GroupService,
    user_id: str,
    group: Optional[str],
    tipo: Optional[TransactionType] = None,
) -> Optional[str]:
    """Resolve a group name or ID, or exit with a CLI error. None passes through."""
    if group is None:
        return None
    try:
        return resolve_group(group_service, user_id, group, tipo)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
