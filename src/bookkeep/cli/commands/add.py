"""Add transaction command."""

import click
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.cli.resolution import format_amount, resolve_business_or_exit
from bookkeep.domain.posting import PostingService
from bookkeep.domain.requests import build_transaction_request
from bookkeep.utils.date_parser import parse_date
from bookkeep.utils.amount_parser import parse_amount


def echo_entry(entry) -> None:
    """Print a journal entry with its lines."""
    click.echo(f"  Entry {entry.id}: {entry.description}")
    for line in entry.lines:
        debit = f"{line.debit:,.2f}" if line.debit else ""
        credit = f"{line.credit:,.2f}" if line.credit else ""
        click.echo(f"    {line.account_code:6s} {line.account_name[:36]:36s} {debit:>12s} {credit:>12s}")


@click.command("add")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice(["income", "expense", "transfer"]),
    required=True,
    help="Transaction type",
)
@click.option("--business", required=True, help="Business name or ID")
@click.option(
    "--date",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--amount", required=True, help="Transaction amount (e.g., 118.00)")
@click.option("--category", "category_id", type=int, help="Category ID (income and expense)")
@click.option("--from-account", help="Paying payment account (expense and transfer)")
@click.option("--to-account", help="Receiving payment account (income and transfer)")
@click.option("--description", help="Transaction description")
@click.option("--reference", help="Reference number")
@click.option("--currency", default="PEN", show_default=True, help="Currency code")
@click.option("--invoiced", is_flag=True, help="Raise an invoice for this transaction")
@click.option("--invoice-number", help="Invoice number (implies --invoiced)")
@click.option("--client", help="Client or supplier name on the invoice")
@click.option("--ruc", help="Client or supplier RUC")
@click.option("--idempotency-key", help="Key that makes retries of this posting safe")
@click.pass_context
def add_transaction(
    ctx,
    txn_type: str,
    business: str,
    date: str,
    amount: str,
    category_id: int | None,
    from_account: str | None,
    to_account: str | None,
    description: str | None,
    reference: str | None,
    currency: str,
    invoiced: bool,
    invoice_number: str | None,
    client: str | None,
    ruc: str | None,
    idempotency_key: str | None,
):
    """Post a transaction and its journal entry.

    Invoiced income raises a sale invoice and invoiced expenses a purchase
    invoice; the amount is taken as IGV inclusive.

    Examples:
        bookkeep add --type income --business 1 --date today --amount 500 --category 1 --to-account BCP
        bookkeep add --type expense --business 1 --date 2024-03-05 --amount 118 --category 8 --from-account BCP --invoice-number F001-12 --client "Proveedor SAC"
        bookkeep add --type transfer --business 1 --date today --amount 200 --from-account BCP --to-account Yape
    """
    db = ctx.obj["db"]
    business_id = resolve_business_or_exit(ctx, db, business)

    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        request = build_transaction_request(
            txn_type,
            date=txn_date,
            business_id=business_id,
            amount=txn_amount,
            category_id=category_id,
            from_account=from_account,
            to_account=to_account,
            description=description,
            reference=reference,
            currency=currency,
            idempotency_key=idempotency_key,
            is_invoiced=invoiced,
            invoice_number=invoice_number,
            client_supplier=client,
            ruc=ruc,
        )
        posted = PostingService(db, rules=ctx.obj["rules"]).post_invoiced_transaction(request)
    except ValueError as e:
        handle_domain_error(ctx, e)

    txn = posted.transaction
    click.echo(f"Posted {txn.type.value} transaction {txn.id}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Amount: {format_amount(txn.amount, txn.currency)}")
    if txn.description:
        click.echo(f"  Description: {txn.description}")
    if posted.invoice is not None:
        inv = posted.invoice
        click.echo(
            f"  Invoice {inv.id}: {inv.type.value} {inv.invoice_number} "
            f"(subtotal {inv.subtotal:,.2f}, IGV {inv.igv:,.2f})"
        )
    echo_entry(posted.entry)


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
