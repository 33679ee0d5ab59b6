"""Balance, monthly and filtered report commands."""

import click
from financy.domain.dashboard import Dashboard
from financy.domain.entities import TransactionType
from financy.domain.filters import ALL, PeriodMode, ReportFilter, next_month, previous_month
from financy.domain.group import GroupService
from financy.cli.date_filters import resolve_report_period
from financy.cli.formatting import format_currency, format_date, format_month, signed_amount
from financy.cli.group_resolution import resolve_group_or_exit
from financy.cli.session import require_user


@click.command("balance")
@click.option("--recent", default=5, show_default=True, type=click.IntRange(min=0), help="Number of recent transactions to show")
@click.pass_context
def balance(ctx, recent: int):
    """Show the balance, settled totals and latest transactions.

    Pending transactions (e.g. unpaid installments) are not counted.
    """
    user = require_user(ctx)

    with Dashboard(ctx.obj["db"], user.uid, recent_limit=recent) as dashboard:
        state = dashboard.state

    click.echo(f"{'Balance:':<16} {format_currency(state.balance):>18}")
    click.echo(f"{'Income:':<16} {format_currency(state.totals.total_receitas):>18}")
    click.echo(f"{'Expenses:':<16} {format_currency(state.totals.total_despesas):>18}")

    if not state.recent:
        click.echo("\nNo transactions yet.")
        return

    click.echo("\nRecent transactions:")
    click.echo("-" * 80)
    for txn in state.recent:
        description = txn.descricao
        name = state.group_name(txn.group_id)
        if name:
            description = f"{description} [{name}]"
        click.echo(f"{format_date(txn.data):<11} {signed_amount(txn):>18}  {txn.status.value:<9} {description}")


@click.command("monthly")
@click.option("--months", type=click.IntRange(min=1), help="Only show the N most recent months")
@click.option("--details", is_flag=True, help="List the transactions of each month")
@click.pass_context
def monthly(ctx, months: int | None, details: bool):
    """Show settled income and expenses per month, most recent first."""
    user = require_user(ctx)

    with Dashboard(ctx.obj["db"], user.uid) as dashboard:
        state = dashboard.state

    buckets = state.months[:months] if months is not None else state.months
    if not buckets:
        click.echo("No settled transactions found.")
        return

    click.echo(f"{'Month':<8} {'Income':>18} {'Expenses':>18} {'Balance':>18}")
    click.echo("-" * 65)
    for bucket in buckets:
        click.echo(
            f"{format_month(bucket.year, bucket.month):<8} "
            f"{format_currency(bucket.total_receitas):>18} "
            f"{format_currency(bucket.total_despesas):>18} "
            f"{format_currency(bucket.saldo):>18}"
        )
        if details:
            for txn in bucket.transactions:
                click.echo(f"    {format_date(txn.data):<11} {signed_amount(txn):>18}  {txn.descricao}")


@click.command("report")
@click.option("--type", "tipo", type=click.Choice([t.value for t in TransactionType]), help="Only income or only expenses")
@click.option("--search", help="Only descriptions containing this text (case-insensitive)")
@click.option(
    "--period",
    type=click.Choice([m.value for m in PeriodMode if m != PeriodMode.MONTH_YEAR]),
    help="Relative period (default: all)",
)
@click.option("--month", type=int, help="Calendar month (1-12); defaults to the current one when only --year is given")
@click.option("--year", type=int, help="Calendar year; defaults to the current one when only --month is given")
@click.option("--group", help="Group name or ID")
@click.option("--name", help="Base description, e.g. 'Notebook' also matches 'Notebook (3/12)'")
@click.pass_context
def report(
    ctx,
    tipo: str | None,
    search: str | None,
    period: str | None,
    month: int | None,
    year: int | None,
    group: str | None,
    name: str | None,
):
    """Show transactions matching filters with their total.

    Totals sum amounts regardless of status. Without --type, income and
    expenses are shown separately along with their net.

    Examples:
        financy report --type despesa --period month
        financy report --month 3 --year 2024 --group Casa
        financy report --name Notebook
    """
    user = require_user(ctx)
    db = ctx.obj["db"]
    txn_type = TransactionType(tipo) if tipo else None

    mode, reference = resolve_report_period(ctx, period=period, month=month, year=year)
    group_id = resolve_group_or_exit(ctx, GroupService(db, ctx.obj["gateway"]), user.uid, group, txn_type)

    report_filter = ReportFilter(
        tipo=txn_type,
        search_term=search,
        period=mode,
        reference=reference,
        group_id=group_id if group_id is not None else ALL,
        name_prefix=name if name is not None else ALL,
    )

    with Dashboard(db, user.uid) as dashboard:
        result = dashboard.report(report_filter)
        state = dashboard.state

    if not result.items:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(result)} transaction(s):")
    click.echo("-" * 100)
    for txn in result.items:
        description = txn.descricao
        group_label = state.group_name(txn.group_id)
        if group_label:
            description = f"{description} [{group_label}]"
        click.echo(f"{format_date(txn.data):<11} {signed_amount(txn):>18}  {txn.status.value:<9} {description}")
    click.echo("-" * 100)
    if txn_type is None:
        click.echo(f"{'Income:':<11} {format_currency(result.total_receitas):>18}")
        click.echo(f"{'Expenses:':<11} {format_currency(result.total_despesas):>18}")
        click.echo(f"{'Net:':<11} {format_currency(result.total):>18}")
    else:
        click.echo(f"{'Total:':<11} {format_currency(result.total):>18}")

    if reference is not None:
        prev_month, prev_year = previous_month(*reference)
        next_m, next_year = next_month(*reference)
        click.echo(
            f"\nPrevious: --month {prev_month} --year {prev_year}   "
            f"Next: --month {next_m} --year {next_year}"
        )


def register_commands(cli: click.Group) -> None:
    """Register report commands with main CLI."""
    cli.add_command(balance)
    cli.add_command(monthly)
    cli.add_command(report)
