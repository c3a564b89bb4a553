"""Journal and general ledger commands."""

import click
from bookkeep.cli.commands.add import echo_entry
from bookkeep.cli.resolution import PERIOD_HELP, resolve_business_or_exit, resolve_period_or_exit
from bookkeep.domain.ledger import LedgerService


@click.command("entries")
@click.option("--business", help="Business name or ID (default: all businesses)")
@click.option("--period", default="all", show_default=True, help=PERIOD_HELP)
@click.pass_context
def list_entries(ctx, business: str | None, period: str):
    """List journal entries with their lines."""
    db = ctx.obj["db"]
    business_id = resolve_business_or_exit(ctx, db, business)
    resolve_period_or_exit(ctx, period)

    entries = LedgerService(db).list_journal_entries(business_id=business_id, period=period)
    if not entries:
        click.echo("No journal entries found.")
        return

    for entry in entries:
        click.echo(f"\n{entry.date}")
        echo_entry(entry)
        click.echo(f"    {'Totals':43s} {entry.total_debit:>12,.2f} {entry.total_credit:>12,.2f}")


@click.command("ledger")
@click.option("--business", help="Business name or ID (default: all businesses)")
@click.option("--period", default="all", show_default=True, help=PERIOD_HELP)
@click.option("--account", "account_code", help="Only this account code, e.g. 1041")
@click.pass_context
def general_ledger(ctx, business: str | None, period: str, account_code: str | None):
    """Show the general ledger with running balances.

    Examples:
        bookkeep ledger --period current-month
        bookkeep ledger --account 1041 --business "Negocio Principal"
    """
    db = ctx.obj["db"]
    business_id = resolve_business_or_exit(ctx, db, business)
    resolve_period_or_exit(ctx, period)

    ledgers = LedgerService(db).get_general_ledger(
        business_id=business_id, period=period, account_code=account_code
    )
    if not ledgers:
        click.echo("No ledger activity found.")
        return

    for account in ledgers:
        click.echo(f"\n{account.code} - {account.name}")
        click.echo("-" * 90)
        for row in account.entries:
            debit = f"{row.debit:,.2f}" if row.debit else ""
            credit = f"{row.credit:,.2f}" if row.credit else ""
            click.echo(
                f"{row.date} | {row.description[:36]:36s} | {debit:>12s} | {credit:>12s} | {row.balance:>12,.2f}"
            )
        click.echo(
            f"{'Totals':49s} | {account.total_debit:>12,.2f} | {account.total_credit:>12,.2f} | "
            f"{account.final_balance:>12,.2f}"
        )


def register_commands(cli):
    """Register journal and ledger commands with main CLI."""
    cli.add_command(list_entries)
    cli.add_command(general_ledger)
