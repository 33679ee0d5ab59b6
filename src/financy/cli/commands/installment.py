"""Installment (parcela) commands."""

import click
from financy.domain.errors import DomainError, NothingToDeleteError
from financy.domain.entities import TransactionType
from financy.domain.group import GroupService
from financy.domain.installments import InstallmentService
from financy.cli.error_handling import handle_domain_error, wait_for
from financy.cli.formatting import format_currency, format_date
from financy.cli.group_resolution import resolve_group_or_exit
from financy.cli.session import require_user
from financy.utils.date_parser import parse_date
from financy.utils.amount_parser import parse_amount


@click.group()
def installment_group():
    """Manage purchases split into monthly installments."""
    pass


@installment_group.command("create")
@click.option("--description", required=True, help="Purchase description")
@click.option("--total", required=True, help="Total purchase amount (e.g., 1200 or 1.200,00)")
@click.option("--count", required=True, type=click.IntRange(min=1), help="Number of installments")
@click.option(
    "--first-date",
    default="today",
    show_default=True,
    help="Due date of the first installment",
)
@click.option("--group", help="Expense group name or ID")
@click.pass_context
def create_installments(
    ctx,
    description: str,
    total: str,
    count: int,
    first_date: str,
    group: str | None,
):
    """Split a purchase into monthly pending expenses.

    Each installment gets the total divided by the count, rounded to cents.

    Examples:
        financy installment create --description Notebook --total 1200 --count 12 --first-date 2024-01-15
    """
    user = require_user(ctx)
    db = ctx.obj["db"]
    gateway = ctx.obj["gateway"]
    service = InstallmentService(db, gateway)

    try:
        start = parse_date(first_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        valor_total = parse_amount(total)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    group_id = resolve_group_or_exit(
        ctx, GroupService(db, gateway), user.uid, group, TransactionType.DESPESA
    )

    try:
        submission = service.create_installments(
            user_id=user.uid,
            descricao=description,
            valor_total=valor_total,
            count=count,
            first_date=start,
            group_id=group_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    wait_for(ctx, submission.future)
    click.echo(f"Created {len(submission.drafts)} installment(s) in group {submission.parcela_id}")
    for draft in submission.drafts:
        click.echo(f"  {format_date(draft.data)}  {format_currency(draft.valor):>14}  {draft.descricao}")


@installment_group.command("list")
@click.argument("parcela_id")
@click.pass_context
def list_installments(ctx, parcela_id: str):
    """List the installments of one purchase."""
    user = require_user(ctx)
    service = InstallmentService(ctx.obj["db"], ctx.obj["gateway"])

    members = service.list_installments(user.uid, parcela_id)
    if not members:
        click.echo(f"No installments found for group {parcela_id}.")
        return

    click.echo(f"\nInstallment group {parcela_id}:")
    click.echo("-" * 100)
    click.echo(f"{'#':<7} {'ID':<34} {'Due':<11} {'Amount':<14} {'Status':<9} Description")
    click.echo("-" * 100)
    for txn in members:
        number = f"{txn.installment.parcela_atual}/{txn.installment.total_parcelas}"
        click.echo(
            f"{number:<7} {txn.id:<34} {format_date(txn.data):<11} "
            f"{format_currency(txn.valor):<14} {txn.status.value:<9} {txn.descricao}"
        )


@installment_group.command("pay")
@click.argument("transaction_id")
@click.pass_context
def pay_installment(ctx, transaction_id: str):
    """Mark one installment as paid."""
    user = require_user(ctx)
    service = InstallmentService(ctx.obj["db"], ctx.obj["gateway"])

    try:
        future = service.mark_installment_paid(user.uid, transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    wait_for(ctx, future)
    click.echo(f"Marked installment {transaction_id} as paid")


@installment_group.command("delete")
@click.argument("parcela_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_installments(ctx, parcela_id: str, yes: bool):
    """Delete every installment of a purchase, paid or not."""
    user = require_user(ctx)
    service = InstallmentService(ctx.obj["db"], ctx.obj["gateway"])

    if not yes and not click.confirm(
        f"Delete all installments of group {parcela_id}? This cannot be undone"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        future = service.delete_installment_group(user.uid, parcela_id)
    except NothingToDeleteError as e:
        click.echo(str(e))
        return
    except DomainError as e:
        handle_domain_error(ctx, e)

    deleted = wait_for(ctx, future)
    click.echo(f"Deleted {len(deleted)} installment(s) of group {parcela_id}")


def register_commands(cli: click.Group) -> None:
    """Register installment commands with main CLI."""
    cli.add_command(installment_group, name="installment")
