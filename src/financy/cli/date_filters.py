"""CLI helpers for report period resolution."""

from datetime import date
from typing import Optional

import click

from financy.domain.filters import PeriodMode


def resolve_report_period(
    ctx,
    *,
    period: Optional[str],
    month: Optional[int],
    year: Optional[int],
    today: Optional[date] = None,
) -> tuple[PeriodMode, Optional[tuple[int, int]]]:
    """Resolve CLI report period from --period or --month/--year."""
    explicit = month is not None or year is not None

    if period is not None and explicit:
        click.echo(
            "Error: --period cannot be combined with --month or --year.",
            err=True,
        )
        ctx.exit(1)

    if explicit:
        if today is None:
            today = date.today()
        if month is not None and not 1 <= month <= 12:
            click.echo(f"Error: Invalid month: {month}", err=True)
            ctx.exit(1)
        reference = (
            month if month is not None else today.month,
            year if year is not None else today.year,
        )
        return PeriodMode.MONTH_YEAR, reference

    return PeriodMode(period or PeriodMode.ALL.value), None
