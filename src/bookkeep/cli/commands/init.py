"""Initialize reference data command."""

import click
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.domain.business import BusinessService
from bookkeep.domain.category import CategoryService
from bookkeep.domain.chart import ChartOfAccountsService
from bookkeep.domain.payment_account import PaymentAccountService


@click.command("init")
@click.option("--business", "business_name", help="Also create a business with this name")
@click.pass_context
def init(ctx, business_name: str | None):
    """Seed the chart of accounts, categories and payment accounts.

    Safe to run more than once: existing rows are left as they are.

    Examples:
        bookkeep init
        bookkeep init --business "Negocio Principal"
    """
    db = ctx.obj["db"]

    accounts = ChartOfAccountsService(db).seed_defaults()
    categories = CategoryService(db).seed_defaults()
    payment_accounts = PaymentAccountService(db).seed_defaults()
    click.echo(f"Chart of accounts: {accounts} account(s) added")
    click.echo(f"Categories: {categories} category(ies) added")
    click.echo(f"Payment accounts: {payment_accounts} account(s) added")

    if business_name:
        service = BusinessService(db)
        if service.get_business_by_name(business_name) is None:
            try:
                business_id = service.create_business(name=business_name)
            except ValueError as e:
                handle_domain_error(ctx, e)
            click.echo(f"Created business '{business_name}' (ID: {business_id})")


def register_commands(cli):
    """Register init command with main CLI."""
    cli.add_command(init)
