"""Transaction management commands."""

import click
from financy.domain.aggregation import group_name
from financy.domain.errors import DomainError
from financy.domain.group import GroupService
from financy.domain.transaction import TransactionService
from financy.cli.error_handling import handle_domain_error, wait_for
from financy.cli.formatting import format_currency, format_date, signed_amount
from financy.cli.group_resolution import resolve_group_or_exit
from financy.cli.session import require_user
from financy.utils.date_parser import parse_date
from financy.utils.amount_parser import parse_amount


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--limit", type=int, help="Show only the N most recent transactions")
@click.option("--verbose", "-v", is_flag=True, help="Show all fields including notes and installment data")
@click.pass_context
def list_transactions(ctx, limit: int | None, verbose: bool):
    """List transactions, most recent first."""
    user = require_user(ctx)
    db = ctx.obj["db"]
    service = TransactionService(db, ctx.obj["gateway"])

    transactions = service.list_transactions(user.uid)
    if limit is not None:
        transactions = transactions[:limit]

    if not transactions:
        click.echo("No transactions found.")
        return

    groups = db.list_groups(user.uid)

    if verbose:
        click.echo(f"\nFound {len(transactions)} transaction(s):")
        click.echo("=" * 100)

        for txn in transactions:
            click.echo(f"\nTransaction ID: {txn.id}")
            click.echo(f"  Type: {txn.tipo.value}")
            click.echo(f"  Description: {txn.descricao}")
            click.echo(f"  Date: {format_date(txn.data)}")
            click.echo(f"  Amount: {format_currency(txn.valor)}")
            click.echo(f"  Status: {txn.status.value}")
            name = group_name(groups, txn.group_id)
            if name:
                click.echo(f"  Group: {name}")
            if txn.observacao:
                click.echo(f"  Notes: {txn.observacao}")
            if txn.installment is not None:
                click.echo(
                    f"  Installment: {txn.installment.parcela_atual}/{txn.installment.total_parcelas} "
                    f"(group {txn.installment.parcela_id})"
                )
            click.echo("-" * 100)
    else:
        click.echo(f"\nFound {len(transactions)} transaction(s):")
        click.echo("-" * 100)
        click.echo(
            f"{'ID':<34} {'Date':<11} {'Amount':<18} {'Status':<9} {'Description':<30}"
        )
        click.echo("-" * 100)

        for txn in transactions:
            description = txn.descricao[:30]
            name = group_name(groups, txn.group_id)
            if name:
                description = f"{description} [{name}]"
            click.echo(
                f"{txn.id:<34} {format_date(txn.data):<11} {signed_amount(txn):<18} "
                f"{txn.status.value:<9} {description}"
            )


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--date", help="Transaction date (YYYY-MM-DD, DD/MM/YYYY or relative like 'today')")
@click.option("--amount", help="Transaction amount (e.g., 123.45 or 1.234,56)")
@click.option("--description", help="Transaction description")
@click.option("--group", help="Group name or ID")
@click.option("--clear-group", is_flag=True, help="Remove the transaction from its group")
@click.option("--notes", help="Notes")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    date: str | None,
    amount: str | None,
    description: str | None,
    group: str | None,
    clear_group: bool,
    notes: str | None,
) -> None:
    """Update a transaction.

    Fields not given keep their current value. Installments cannot be edited
    one by one; delete the installment group instead.

    Examples:
        financy transaction update 3f2a... --amount 75,00
        financy transaction update 3f2a... --clear-group
    """
    user = require_user(ctx)
    db = ctx.obj["db"]
    gateway = ctx.obj["gateway"]
    service = TransactionService(db, gateway)

    if group is not None and clear_group:
        click.echo("Error: --group cannot be combined with --clear-group", err=True)
        ctx.exit(1)

    try:
        txn = service.require_transaction(user.uid, transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    txn_date = txn.data
    if date is not None:
        try:
            txn_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    txn_amount = txn.valor
    if amount is not None:
        try:
            txn_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    group_id = txn.group_id
    if clear_group:
        group_id = None
    elif group is not None:
        group_id = resolve_group_or_exit(ctx, GroupService(db, gateway), user.uid, group, txn.tipo)

    try:
        future = service.update_transaction(
            user_id=user.uid,
            transaction_id=transaction_id,
            descricao=description if description is not None else txn.descricao,
            valor=txn_amount,
            data=txn_date,
            group_id=group_id,
            observacao=notes if notes is not None else txn.observacao,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    wait_for(ctx, future)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("pay")
@click.argument("transaction_id")
@click.pass_context
def pay_transaction(ctx, transaction_id: str) -> None:
    """Mark a transaction as paid (settled)."""
    user = require_user(ctx)
    service = TransactionService(ctx.obj["db"], ctx.obj["gateway"])

    try:
        future = service.mark_paid(user.uid, transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    wait_for(ctx, future)
    click.echo(f"Marked transaction {transaction_id} as paid")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Delete a transaction.

    Examples:
        financy transaction delete 3f2a...
    """
    user = require_user(ctx)
    service = TransactionService(ctx.obj["db"], ctx.obj["gateway"])

    txn = service.get_transaction(user.uid, transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Delete '{txn.descricao}' ({format_currency(txn.valor)})? This cannot be undone"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        future = service.delete_transaction(user.uid, transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    wait_for(ctx, future)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
