"""Add transaction command."""

import click
from financy.domain.entities import TransactionStatus, TransactionType
from financy.domain.errors import DomainError
from financy.domain.group import GroupService
from financy.domain.transaction import TransactionService
from financy.cli.error_handling import handle_domain_error, wait_for
from financy.cli.formatting import format_currency, format_date
from financy.cli.group_resolution import resolve_group_or_exit
from financy.cli.session import require_user
from financy.utils.date_parser import parse_date
from financy.utils.amount_parser import parse_amount


@click.command("add")
@click.argument("tipo", type=click.Choice([t.value for t in TransactionType]))
@click.option("--description", required=True, help="Transaction description")
@click.option("--amount", required=True, help="Amount (e.g., 123.45 or 1.234,56)")
@click.option(
    "--date",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD, DD/MM/YYYY or relative like 'today', 'yesterday')",
)
@click.option("--group", help="Group name or ID (must match the transaction type)")
@click.option("--notes", help="Notes")
@click.option("--pending", is_flag=True, help="Record as outstanding (does not affect the balance)")
@click.pass_context
def add_transaction(
    ctx,
    tipo: str,
    description: str,
    amount: str,
    date: str,
    group: str | None,
    notes: str | None,
    pending: bool,
):
    """Add an income (receita) or expense (despesa).

    Examples:
        financy add receita --description "Salário" --amount 5000
        financy add despesa --description "Aluguel" --amount 1.500,00 --date 05/01/2024 --group Casa
    """
    user = require_user(ctx)
    db = ctx.obj["db"]
    gateway = ctx.obj["gateway"]
    transaction_service = TransactionService(db, gateway)
    txn_type = TransactionType(tipo)

    # Parse date
    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    # Parse amount
    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    group_id = resolve_group_or_exit(ctx, GroupService(db, gateway), user.uid, group, txn_type)
    status = TransactionStatus.PENDENTE if pending else TransactionStatus.PAGO

    try:
        future = transaction_service.create_transaction(
            user_id=user.uid,
            descricao=description,
            valor=txn_amount,
            tipo=txn_type,
            data=txn_date,
            group_id=group_id,
            observacao=notes,
            status=status,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    transaction_id = wait_for(ctx, future)
    click.echo(f"Created {txn_type.value} {transaction_id}")
    click.echo(f"  Description: {description.strip()}")
    click.echo(f"  Date: {format_date(txn_date)}")
    click.echo(f"  Amount: {format_currency(txn_amount)}")
    click.echo(f"  Status: {status.value}")
    if group:
        click.echo(f"  Group: {group}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
