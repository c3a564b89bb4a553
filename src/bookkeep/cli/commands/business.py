"""Business management commands."""

import click
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.domain.business import BusinessService


@click.group()
def business_group():
    """Manage businesses."""
    pass


@business_group.command("create")
@click.argument("name", metavar="BUSINESS_NAME")
@click.option("--color", help="Display color tag")
@click.pass_context
def create_business(ctx, name: str, color: str | None):
    """Create a new business.

    Examples:
        bookkeep business create "Negocio Principal"
        bookkeep business create "Sucursal Norte" --color teal
    """
    service = BusinessService(ctx.obj["db"])
    try:
        business_id = service.create_business(name=name, color=color)
        click.echo(f"Created business '{name}' (ID: {business_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@business_group.command("list")
@click.pass_context
def list_businesses(ctx):
    """List all businesses."""
    service = BusinessService(ctx.obj["db"])

    businesses = service.list_businesses()
    if not businesses:
        click.echo("No businesses found.")
        return

    click.echo("\nBusinesses:")
    click.echo("-" * 60)
    for b in businesses:
        color = f" | Color: {b.color}" if b.color else ""
        click.echo(f"ID: {b.id:3d} | {b.name}{color}")


def register_commands(cli):
    """Register business commands with main CLI."""
    cli.add_command(business_group, name="business")
