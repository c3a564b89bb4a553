"""Invoice commands."""

import click
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.cli.commands.add import echo_entry
from bookkeep.cli.resolution import (
    PERIOD_HELP,
    format_amount,
    resolve_business_or_exit,
    resolve_period_or_exit,
)
from bookkeep.domain.invoice import InvoiceService
from bookkeep.domain.posting import PostingService
from bookkeep.domain.requests import InvoiceItemRequest, InvoiceRequest
from bookkeep.utils.date_parser import parse_date
from bookkeep.utils.amount_parser import parse_amount


def parse_item(value: str) -> InvoiceItemRequest:
    """Parse an ``DESCRIPTION:QUANTITY:UNIT_PRICE`` item option.

    The description may itself contain colons; the last two fields are the
    numbers.

    Raises:
        ValueError: If the value does not have three parts or a number is invalid
    """
    parts = value.rsplit(":", 2)
    if len(parts) != 3:
        raise ValueError(f"Invalid item '{value}'. Expected DESCRIPTION:QUANTITY:UNIT_PRICE")
    description, quantity, unit_price = parts
    return InvoiceItemRequest(
        description=description,
        quantity=quantity.strip(),
        unit_price=parse_amount(unit_price),
    )


@click.group()
def invoice_group():
    """Manage invoices."""
    pass


@invoice_group.command("create")
@click.option("--type", "invoice_type", type=click.Choice(["sale", "purchase"]), required=True)
@click.option("--business", required=True, help="Business name or ID")
@click.option("--date", required=True, help="Invoice date (YYYY-MM-DD or 'today')")
@click.option("--client", required=True, help="Client (sale) or supplier (purchase)")
@click.option("--number", "invoice_number", required=True, help="Invoice number, e.g. F001-123")
@click.option("--ruc", help="Client or supplier RUC")
@click.option(
    "--item",
    "items",
    multiple=True,
    required=True,
    help="Item as DESCRIPTION:QUANTITY:UNIT_PRICE (repeatable)",
)
@click.option("--subtotal", help="Subtotal (derived from the items if omitted)")
@click.option("--igv", help="IGV (derived from the subtotal if omitted)")
@click.option("--total", help="Total (must equal subtotal + IGV)")
@click.option("--currency", default="PEN", show_default=True, help="Currency code")
@click.option("--idempotency-key", help="Key that makes retries of this posting safe")
@click.pass_context
def create_invoice(
    ctx,
    invoice_type: str,
    business: str,
    date: str,
    client: str,
    invoice_number: str,
    ruc: str | None,
    items: tuple[str, ...],
    subtotal: str | None,
    igv: str | None,
    total: str | None,
    currency: str,
    idempotency_key: str | None,
):
    """Create an invoice and post its journal entry.

    Examples:
        bookkeep invoice create --type sale --business 1 --date today --client "Cliente SAC" --number F001-1 --item "Servicio:1:100"
        bookkeep invoice create --type purchase --business 1 --date 2024-03-01 --client "Proveedor" --number E001-9 --item "Papel:10:5.50" --subtotal 55 --igv 9.90
    """
    db = ctx.obj["db"]
    business_id = resolve_business_or_exit(ctx, db, business)

    try:
        request = InvoiceRequest(
            type=invoice_type,
            date=parse_date(date),
            business_id=business_id,
            client_supplier=client,
            invoice_number=invoice_number,
            ruc=ruc,
            items=[parse_item(item) for item in items],
            subtotal=parse_amount(subtotal) if subtotal else None,
            igv=parse_amount(igv) if igv else None,
            total=parse_amount(total) if total else None,
            currency=currency,
            idempotency_key=idempotency_key,
        )
        posted = PostingService(db, rules=ctx.obj["rules"]).post_standalone_invoice(request)
    except ValueError as e:
        handle_domain_error(ctx, e)

    inv = posted.invoice
    click.echo(f"Created {inv.type.value} invoice {inv.invoice_number} (ID: {inv.id})")
    click.echo(f"  Subtotal: {format_amount(inv.subtotal, inv.currency)}")
    click.echo(f"  IGV:      {format_amount(inv.igv, inv.currency)}")
    click.echo(f"  Total:    {format_amount(inv.total, inv.currency)}")
    echo_entry(posted.entry)


@invoice_group.command("list")
@click.option("--business", help="Business name or ID (default: all businesses)")
@click.option("--period", default="all", show_default=True, help=PERIOD_HELP)
@click.option("--type", "invoice_type", type=click.Choice(["sale", "purchase"]))
@click.pass_context
def list_invoices(ctx, business: str | None, period: str, invoice_type: str | None):
    """List invoices."""
    db = ctx.obj["db"]
    business_id = resolve_business_or_exit(ctx, db, business)
    resolve_period_or_exit(ctx, period)

    invoices = InvoiceService(db).list_invoices(
        business_id=business_id, period=period, type=invoice_type
    )
    if not invoices:
        click.echo("No invoices found.")
        return

    click.echo(f"\n{'ID':>4s} | {'Date':10s} | {'Type':8s} | {'Number':12s} | {'Total':>14s} | Client/Supplier")
    click.echo("-" * 90)
    for inv in invoices:
        click.echo(
            f"{inv.id:4d} | {inv.date} | {inv.type.value:8s} | {inv.invoice_number:12s} | "
            f"{format_amount(inv.total, inv.currency):>14s} | {inv.client_supplier}"
        )


@invoice_group.command("show")
@click.argument("invoice_id", type=int)
@click.pass_context
def show_invoice(ctx, invoice_id: int):
    """Show an invoice with its items."""
    try:
        inv = InvoiceService(ctx.obj["db"]).get_invoice(invoice_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nInvoice {inv.invoice_number} (ID: {inv.id})")
    click.echo(f"Type: {inv.type.value}")
    click.echo(f"Date: {inv.date}")
    click.echo(f"Client/Supplier: {inv.client_supplier}")
    if inv.ruc:
        click.echo(f"RUC: {inv.ruc}")
    click.echo("Items:")
    for item in inv.items:
        click.echo(
            f"  {item.description[:40]:40s} {item.quantity:>8} x {item.unit_price:>10,.2f} = {item.total:>12,.2f}"
        )
    click.echo(f"Subtotal: {format_amount(inv.subtotal, inv.currency)}")
    click.echo(f"IGV:      {format_amount(inv.igv, inv.currency)}")
    click.echo(f"Total:    {format_amount(inv.total, inv.currency)}")


@invoice_group.command("delete")
@click.argument("invoice_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_invoice(ctx, invoice_id: int, yes: bool):
    """Delete an invoice, its entry and any transaction linked to it."""
    db = ctx.obj["db"]
    if not yes and not click.confirm(
        f"Are you sure you want to delete invoice {invoice_id} and its linked transactions?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        PostingService(db, rules=ctx.obj["rules"]).delete_invoice(invoice_id)
        click.echo(f"Deleted invoice {invoice_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group, name="invoice")
