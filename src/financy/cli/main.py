"""Main CLI entry point."""

import click
from financy.database.factories import create_sqlite_database
from financy.database.gateway import MutationGateway
from financy.logging_config import configure_logging

# Import and register all commands at module level
from financy.cli.commands import (
    auth,
    add,
    transaction,
    installment,
    group,
    description,
    report,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINANCY_DB_PATH environment variable)",
    envvar="FINANCY_DB_PATH",
)
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for diagnostics written to stderr",
    envvar="FINANCY_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Financy - Personal finance tracking.

    Record income and expenses, split purchases into monthly installments,
    and follow your balance with monthly and filtered reports.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        gateway = MutationGateway(db)
        ctx.obj["db"] = db
        ctx.obj["gateway"] = gateway

        def shutdown() -> None:
            gateway.close()
            db.disconnect()

        ctx.call_on_close(shutdown)


# Register all commands
auth.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
installment.register_commands(cli)
group.register_commands(cli)
description.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
