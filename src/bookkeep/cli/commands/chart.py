"""Chart of accounts commands."""

import click
from bookkeep.domain.chart import ChartOfAccountsService
from bookkeep.domain.entities import AccountType


@click.group()
def chart_group():
    """Inspect the chart of accounts."""
    pass


@chart_group.command("list")
@click.option(
    "--type",
    "account_types",
    type=click.Choice([t.value for t in AccountType]),
    multiple=True,
    help="Only show accounts of this type (repeatable)",
)
@click.pass_context
def list_chart(ctx, account_types: tuple[str, ...]):
    """List chart of accounts entries."""
    service = ChartOfAccountsService(ctx.obj["db"])

    accounts = service.list_accounts(
        account_types=[AccountType(t) for t in account_types] or None
    )
    if not accounts:
        click.echo("Chart of accounts is empty. Run 'bookkeep init' first.")
        return

    click.echo(f"\n{'Code':6s} {'Type':10s} {'Normal':7s} Name")
    click.echo("-" * 70)
    for acc in accounts:
        click.echo(
            f"{acc.code:6s} {acc.account_type.value:10s} {acc.normal_balance.value:7s} {acc.name}"
        )


def register_commands(cli):
    """Register chart commands with main CLI."""
    cli.add_command(chart_group, name="chart")
