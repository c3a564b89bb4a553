"""Transaction management commands."""

import click
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.cli.commands.add import echo_entry
from bookkeep.cli.resolution import (
    PERIOD_HELP,
    format_amount,
    resolve_business_or_exit,
    resolve_period_or_exit,
)
from bookkeep.domain.posting import PostingService
from bookkeep.domain.transaction import TransactionService
from bookkeep.utils.date_parser import parse_date
from bookkeep.utils.amount_parser import parse_amount


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--business", help="Business name or ID (default: all businesses)")
@click.option("--period", default="all", show_default=True, help=PERIOD_HELP)
@click.option("--type", "txn_type", type=click.Choice(["income", "expense", "transfer"]))
@click.pass_context
def list_transactions(ctx, business: str | None, period: str, txn_type: str | None):
    """List transactions."""
    db = ctx.obj["db"]
    business_id = resolve_business_or_exit(ctx, db, business)
    resolve_period_or_exit(ctx, period)

    transactions = TransactionService(db).list_transactions(
        business_id=business_id, period=period, type=txn_type
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'ID':>4s} | {'Date':10s} | {'Type':8s} | {'Amount':>14s} | Accounts | Description")
    click.echo("-" * 90)
    for txn in transactions:
        accounts = " -> ".join(a for a in (txn.from_account, txn.to_account) if a)
        invoiced = " [F]" if txn.is_invoiced else ""
        click.echo(
            f"{txn.id:4d} | {txn.date} | {txn.type.value:8s} | "
            f"{format_amount(txn.amount, txn.currency):>14s} | {accounts} | "
            f"{txn.description}{invoiced}"
        )


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--amount", help="Transaction amount (e.g., 118.00)")
@click.option("--type", "txn_type", type=click.Choice(["income", "expense", "transfer"]))
@click.option("--category", "category_id", type=int, help="Category ID")
@click.option("--from-account", help="Paying payment account")
@click.option("--to-account", help="Receiving payment account")
@click.option("--description", help="Transaction description")
@click.option("--reference", help="Reference number")
@click.option("--currency", help="Currency code")
@click.option("--invoice-number", help="Invoice number (invoiced transactions only)")
@click.option("--client", help="Client or supplier (invoiced transactions only)")
@click.option("--ruc", help="Client or supplier RUC (invoiced transactions only)")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    date: str | None,
    amount: str | None,
    txn_type: str | None,
    category_id: int | None,
    from_account: str | None,
    to_account: str | None,
    description: str | None,
    reference: str | None,
    currency: str | None,
    invoice_number: str | None,
    client: str | None,
    ruc: str | None,
) -> None:
    """Update a transaction and regenerate its journal entry.

    Updates only the fields that are provided.

    Examples:
        bookkeep transaction update 1 --amount 236.00
        bookkeep transaction update 1 --category 9 --description "Luz marzo"
    """
    db = ctx.obj["db"]
    changes = {}

    if date is not None:
        try:
            changes["date"] = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    if amount is not None:
        try:
            changes["amount"] = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    options = {
        "type": txn_type,
        "category_id": category_id,
        "from_account": from_account,
        "to_account": to_account,
        "description": description,
        "reference": reference,
        "currency": currency,
        "invoice_number": invoice_number,
        "client_supplier": client,
        "ruc": ruc,
    }
    changes.update({k: v for k, v in options.items() if v is not None})

    if not changes:
        click.echo("No changes given.")
        return

    try:
        posted = PostingService(db, rules=ctx.obj["rules"]).update_transaction(
            transaction_id, **changes
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated transaction {transaction_id}")
    echo_entry(posted.entry)


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction with its journal entry and invoice."""
    db = ctx.obj["db"]

    try:
        txn = TransactionService(db).require_transaction(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not yes:
        prompt = f"Are you sure you want to delete transaction {transaction_id}"
        if txn.is_invoiced:
            prompt += f" and its invoice {txn.invoice_id}"
        if not click.confirm(prompt + "?"):
            click.echo("Deletion cancelled.")
            return

    try:
        PostingService(db, rules=ctx.obj["rules"]).delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
