"""Main CLI entry point."""

import logging

import click
from famfin.cli.error_handling import report_corrupt_document
from famfin.config import get_settings
from famfin.database.factories import create_sqlite_store
from famfin.database.repository import LedgerRepository
from famfin.domain.errors import CorruptDocumentError

# Import and register all commands at module level
from famfin.cli.commands import (
    account,
    backup,
    bill,
    category,
    closing_day,
    method,
    summary,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FAMFIN_DB_PATH environment variable)",
    envvar="FAMFIN_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (overrides FAMFIN_LOG_LEVEL environment variable)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """famfin - Family finance tracker.

    Record income and expenses across bank accounts and payment methods,
    follow credit-card invoices per billing month and keep recurring bills
    up to date.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=(log_level or get_settings().log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Open the store only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = create_sqlite_store(database_path=db_path)
        store.connect()
        store.initialize_schema()
        ctx.obj["store"] = store
        ctx.obj["repo"] = LedgerRepository(store)
        ctx.obj["locale"] = get_settings().locale
        ctx.call_on_close(store.disconnect)


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
method.register_commands(cli)
transaction.register_commands(cli)
closing_day.register_commands(cli)
bill.register_commands(cli)
summary.register_commands(cli)
backup.register_commands(cli)


def main():
    """Main entry point for CLI."""
    try:
        cli()
    except CorruptDocumentError as e:
        report_corrupt_document(e)


if __name__ == "__main__":
    main()
