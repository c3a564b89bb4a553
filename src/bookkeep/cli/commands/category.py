"""Category management commands."""

import click
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.domain.category import CategoryService


@click.group()
def category_group():
    """Manage income and expense categories."""
    pass


@category_group.command("create")
@click.argument("name", metavar="CATEGORY_NAME")
@click.option(
    "--type",
    "category_type",
    type=click.Choice(["income", "expense"]),
    required=True,
    help="Category type",
)
@click.option("--id", "category_id", type=int, help="Explicit category ID")
@click.pass_context
def create_category(ctx, name: str, category_type: str, category_id: int | None):
    """Create a new category.

    Mapping rules are keyed by category ID, so pass --id to line a new
    category up with a mapping entry.

    Examples:
        bookkeep category create "Alquiler de equipos" --type income
        bookkeep category create "Fletes" --type expense --id 30
    """
    service = CategoryService(ctx.obj["db"])
    try:
        new_id = service.create_category(name=name, type=category_type, category_id=category_id)
        click.echo(f"Created category '{name}' (ID: {new_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@category_group.command("list")
@click.option("--type", "category_type", type=click.Choice(["income", "expense"]))
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List categories."""
    service = CategoryService(ctx.obj["db"])

    categories = service.list_categories(type=category_type)
    if not categories:
        click.echo("No categories found. Run 'bookkeep init' to create the defaults.")
        return

    click.echo("\nCategories:")
    click.echo("-" * 60)
    for cat in categories:
        click.echo(f"ID: {cat.id:3d} | {cat.type.value:7s} | {cat.name}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
