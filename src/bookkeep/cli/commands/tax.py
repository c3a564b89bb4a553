"""IGV summary command."""

import click
from bookkeep.cli.resolution import (
    PERIOD_HELP,
    format_amount,
    resolve_business_or_exit,
    resolve_period_or_exit,
)
from bookkeep.domain.tax import TaxService


@click.command("tax")
@click.option("--business", help="Business name or ID (default: all businesses)")
@click.option("--period", default="current-month", show_default=True, help=PERIOD_HELP)
@click.option("--currency", default="PEN", show_default=True, help="Currency to summarize")
@click.pass_context
def tax_summary(ctx, business: str | None, period: str, currency: str):
    """Show IGV charged on sales against IGV paid on purchases."""
    db = ctx.obj["db"]
    business_id = resolve_business_or_exit(ctx, db, business)
    resolve_period_or_exit(ctx, period)

    summary = TaxService(db).get_tax_summary(
        business_id=business_id, period=period, currency=currency
    )
    cur = summary.currency
    click.echo(f"IGV summary ({period})")
    click.echo(f"  Sales IGV:        {format_amount(summary.sales_tax, cur):>16s}")
    click.echo(f"  Purchase credit:  {format_amount(summary.purchase_tax_credit, cur):>16s}")
    label = "IGV payable" if summary.is_payable else "Credit carried forward"
    click.echo(f"  {label + ':':17s} {format_amount(abs(summary.net_tax_position), cur):>16s}")


def register_commands(cli):
    """Register tax command with main CLI."""
    cli.add_command(tax_summary)
