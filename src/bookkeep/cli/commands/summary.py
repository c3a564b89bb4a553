"""Summary command."""

import click
from bookkeep.cli.resolution import (
    PERIOD_HELP,
    format_amount,
    resolve_business_or_exit,
    resolve_period_or_exit,
)
from bookkeep.domain.summary import TREND_MONTHS, SummaryService


@click.command("summary")
@click.option("--business", help="Business name or ID (default: all businesses)")
@click.option("--period", default="current-month", show_default=True, help=PERIOD_HELP)
@click.option(
    "--months",
    type=click.IntRange(min=1),
    default=TREND_MONTHS,
    show_default=True,
    help="Months shown in the income/expense trend",
)
@click.pass_context
def summary(ctx, business: str | None, period: str, months: int):
    """Show income, expenses, profit, IGV and the monthly trend.

    \b
    Examples:
        bookkeep summary
        bookkeep summary --business "Bodega Central" --period 2024-03
        bookkeep summary --period current-year --months 12
    """
    db = ctx.obj["db"]
    business_id = resolve_business_or_exit(ctx, db, business)
    resolve_period_or_exit(ctx, period)

    report = SummaryService(db).get_summary(
        business_id=business_id, period=period, trend_months=months
    )

    click.echo(f"Summary ({period})")
    click.echo(f"  Income:        {format_amount(report.total_income):>16s}")
    click.echo(f"  Expenses:      {format_amount(report.total_expense):>16s}")
    click.echo(f"  Net profit:    {format_amount(report.net_profit):>16s}")
    click.echo(f"  Profit margin: {report.profit_margin:>15.2f}%")
    click.echo()
    click.echo(f"  Sales IGV:     {format_amount(report.tax.sales_tax):>16s}")
    click.echo(f"  Purchase IGV:  {format_amount(report.tax.purchase_tax_credit):>16s}")
    click.echo(f"  Net IGV:       {format_amount(report.tax.net_tax_position):>16s}")
    click.echo()
    click.echo(f"  {'Month':10s} {'Income':>14s} {'Expenses':>14s}")
    for month in report.monthly_trend:
        label = f"{month.label} {month.month.year}"
        click.echo(f"  {label:10s} {month.income:>14,.2f} {month.expense:>14,.2f}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
