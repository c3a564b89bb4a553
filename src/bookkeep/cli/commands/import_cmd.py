"""CSV import command."""

import click
from bookkeep.cli.resolution import resolve_business_or_exit
from bookkeep.domain.csv_import import CSVImportService


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.option("--business", required=True, help="Business name or ID the rows belong to")
@click.pass_context
def import_csv(ctx, csv_file: str, business: str):
    """Import and post transactions from a CSV file.

    \b
    Expected header (date, type and amount are required):
    date,type,category_id,amount,currency,from_account,to_account,
    description,reference,invoice_number,client_supplier,ruc,import_id

    Rows with an invoice number are posted with their invoice. Rows already
    imported for the business (same import_id, or same content) are skipped.
    """
    db = ctx.obj["db"]
    business_id = resolve_business_or_exit(ctx, db, business)
    service = CSVImportService(db, rules=ctx.obj["rules"])

    try:
        result = service.import_csv(csv_file_path=csv_file, business_id=business_id)
        click.echo("\nImport complete:")
        click.echo(f"  Imported: {result['imported']} transactions")
        click.echo(f"  Skipped: {result['skipped']} already imported")
        if result["errors"]:
            click.echo(f"  Errors: {len(result['errors'])}")
            for error in result["errors"]:
                click.echo(f"    {error}", err=True)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
