"""Main CLI entry point."""

import logging

import click
from bookkeep.database.factories import create_sqlite_database
from bookkeep.domain.errors import ValidationError
from bookkeep.domain.mapping import default_mapping_rules, load_mapping_rules

# Import and register all commands at module level
from bookkeep.cli.commands import (
    init,
    business,
    account,
    category,
    chart,
    add,
    transaction,
    invoice,
    ledger,
    report,
    summary,
    tax,
    import_cmd,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BOOKKEEP_DB_PATH environment variable)",
    envvar="BOOKKEEP_DB_PATH",
)
@click.option(
    "--mapping",
    "mapping_path",
    type=click.Path(),
    help="JSON file overriding the account mapping rules",
    envvar="BOOKKEEP_MAPPING_PATH",
)
@click.option("-v", "--verbose", count=True, help="Log posting activity (-vv for debug output)")
@click.pass_context
def cli(ctx, db_path: str | None, mapping_path: str | None, verbose: int):
    """Bookkeep - double-entry bookkeeping for small businesses.

    Record income, expenses, transfers and invoices; every one is posted to
    the journal as a balanced entry. Ledgers, statements, payment account
    balances and IGV summaries are built from those entries.
    """
    ctx.ensure_object(dict)
    _configure_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            rules = load_mapping_rules(mapping_path) if mapping_path else default_mapping_rules()
        except (FileNotFoundError, ValidationError) as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["rules"] = rules
        ctx.call_on_close(db.disconnect)


# Register all commands
init.register_commands(cli)
business.register_commands(cli)
account.register_commands(cli)
category.register_commands(cli)
chart.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
invoice.register_commands(cli)
ledger.register_commands(cli)
report.register_commands(cli)
summary.register_commands(cli)
tax.register_commands(cli)
import_cmd.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
