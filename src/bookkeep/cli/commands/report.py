"""Financial statement commands."""

import click
from bookkeep.cli.resolution import PERIOD_HELP, resolve_business_or_exit, resolve_period_or_exit
from bookkeep.domain.ledger import LedgerService


def _echo_section(title: str, balances, total) -> None:
    click.echo(f"\n{title}")
    click.echo("-" * 60)
    for b in balances:
        click.echo(f"  {b.code:6s} {b.name[:36]:36s} {b.balance:>14,.2f}")
    click.echo(f"  {'Total ' + title.lower():43s} {total:>14,.2f}")


@click.group()
def report_group():
    """Financial statements."""
    pass


@report_group.command("income-statement")
@click.option("--business", help="Business name or ID (default: all businesses)")
@click.option("--period", default="current-month", show_default=True, help=PERIOD_HELP)
@click.pass_context
def income_statement(ctx, business: str | None, period: str):
    """Income and expenses for a period."""
    db = ctx.obj["db"]
    business_id = resolve_business_or_exit(ctx, db, business)
    resolve_period_or_exit(ctx, period)

    statement = LedgerService(db).get_income_statement(business_id=business_id, period=period)
    click.echo(f"Income statement ({period})")
    _echo_section("Income", statement.income_accounts, statement.total_income)
    _echo_section("Expenses", statement.expense_accounts, statement.total_expenses)
    click.echo(f"\n{'Net income':45s} {statement.net_income:>14,.2f}")


@report_group.command("balance-sheet")
@click.option("--business", help="Business name or ID (default: all businesses)")
@click.option("--period", default="all", show_default=True, help=PERIOD_HELP)
@click.pass_context
def balance_sheet(ctx, business: str | None, period: str):
    """Assets, liabilities and equity as of the end of a period."""
    db = ctx.obj["db"]
    business_id = resolve_business_or_exit(ctx, db, business)
    resolve_period_or_exit(ctx, period)

    sheet = LedgerService(db).get_balance_sheet(business_id=business_id, period=period)
    click.echo(f"Balance sheet ({period})")
    _echo_section("Assets", sheet.asset_accounts, sheet.total_assets)
    _echo_section("Liabilities", sheet.liability_accounts, sheet.total_liabilities)
    _echo_section("Equity", sheet.equity_accounts, sheet.total_equity)
    click.echo(
        f"\n{'Liabilities + equity':45s} {sheet.total_liabilities + sheet.total_equity:>14,.2f}"
    )
    if not sheet.is_balanced:
        click.echo(f"(UNBALANCED: difference {sheet.difference:,.2f})")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
