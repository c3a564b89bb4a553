"""Payment account commands."""

import click
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.cli.resolution import (
    PERIOD_HELP,
    format_amount,
    resolve_business_or_exit,
    resolve_period_or_exit,
)
from bookkeep.domain.entities import PaymentAccountType
from bookkeep.domain.payment_account import PaymentAccountService


@click.group()
def account_group():
    """Manage payment accounts (banks, wallets, cash boxes)."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in PaymentAccountType]),
    default=PaymentAccountType.BANK.value,
    show_default=True,
    help="Kind of account",
)
@click.option("--currency", default="PEN", show_default=True, help="Account currency")
@click.pass_context
def create_account(ctx, name: str, account_type: str, currency: str):
    """Create a new payment account.

    The name is what transactions use in --from-account / --to-account.

    Examples:
        bookkeep account create "BCP"
        bookkeep account create "Yape" --type wallet
        bookkeep account create "BCP Dólares" --currency USD
    """
    service = PaymentAccountService(ctx.obj["db"])
    try:
        account_id = service.create_payment_account(
            name=name, type=account_type, currency=currency
        )
        click.echo(f"Created payment account '{name}' (ID: {account_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include deactivated accounts")
@click.pass_context
def list_accounts(ctx, include_inactive: bool):
    """List payment accounts."""
    service = PaymentAccountService(ctx.obj["db"])

    accounts = service.list_payment_accounts(include_inactive=include_inactive)
    if not accounts:
        click.echo("No payment accounts found.")
        return

    click.echo("\nPayment accounts:")
    click.echo("-" * 60)
    for acc in accounts:
        status = "" if acc.is_active else " (inactive)"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.type.value:6s} | {acc.currency}{status}"
        )


@account_group.command("deactivate")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.pass_context
def deactivate_account(ctx, name: str):
    """Deactivate a payment account. Its transactions are kept."""
    service = PaymentAccountService(ctx.obj["db"])
    try:
        service.deactivate_payment_account(name)
        click.echo(f"Deactivated payment account '{name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("balances")
@click.option("--business", help="Business name or ID (default: all businesses)")
@click.option("--period", default="all", show_default=True, help=PERIOD_HELP)
@click.option("--movements", is_flag=True, help="Show each movement with its running balance")
@click.pass_context
def account_balances(ctx, business: str | None, period: str, movements: bool):
    """Show balances of payment accounts replayed from transactions.

    Examples:
        bookkeep account balances
        bookkeep account balances --business "Negocio Principal" --period 2024-03 --movements
    """
    db = ctx.obj["db"]
    business_id = resolve_business_or_exit(ctx, db, business)
    resolve_period_or_exit(ctx, period)

    balances = PaymentAccountService(db).get_payment_account_balances(
        business_id=business_id, period=period
    )
    if not balances:
        click.echo("No active payment accounts.")
        return

    for balance in balances:
        currency = balance.account_currency
        click.echo(f"\n{balance.account_name} ({balance.account_type.value}, {currency})")
        click.echo(f"  Income:  {format_amount(balance.total_income, currency):>20s}")
        click.echo(f"  Expense: {format_amount(balance.total_expense, currency):>20s}")
        click.echo(f"  Balance: {format_amount(balance.net_balance, currency):>20s}")
        if movements:
            for m in balance.movements:
                sign = "+" if m.type.value in ("income", "transfer_in") else "-"
                click.echo(
                    f"    {m.date} | {m.description[:30]:30s} | {sign}{m.amount:>12,.2f} "
                    f"| {m.balance:>12,.2f} | {m.business_name}"
                )


def register_commands(cli):
    """Register payment account commands with main CLI."""
    cli.add_command(account_group, name="account")
