"""End-to-end tests for the command line interface."""

import json

import pytest

from bookkeep.cli.main import cli


@pytest.fixture
def invoke(cli_runner, temp_db):
    """Run a CLI command against the temporary database."""

    def _invoke(*args, input=None):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], input=input)

    return _invoke


@pytest.fixture
def initialized(invoke):
    """Seed reference data and create the sample business."""
    result = invoke("init", "--business", "Bodega Central")
    assert result.exit_code == 0
    return result


def test_init(invoke):
    """Init seeds reference data once and creates the business."""
    result = invoke("init", "--business", "Bodega Central")

    assert result.exit_code == 0
    assert "Chart of accounts: 31 account(s) added" in result.output
    assert "Categories: 24 category(ies) added" in result.output
    assert "Payment accounts: 4 account(s) added" in result.output
    assert "Created business 'Bodega Central' (ID: 1)" in result.output

    again = invoke("init", "--business", "Bodega Central")
    assert again.exit_code == 0
    assert "Chart of accounts: 0 account(s) added" in again.output
    assert "Created business" not in again.output


def test_full_workflow(invoke, initialized):
    """Post, report, edit and delete through the CLI."""
    result = invoke(
        "add", "--type", "income", "--business", "Bodega Central", "--date", "2024-01-05",
        "--amount", "1000", "--category", "1", "--to-account", "BCP", "--description", "Venta",
    )
    assert result.exit_code == 0
    assert "Posted income transaction 1" in result.output
    assert "Amount: S/ 1,000.00" in result.output
    assert "1041" in result.output and "7011" in result.output

    result = invoke(
        "add", "--type", "expense", "--business", "1", "--date", "2024-01-06",
        "--amount", "118", "--category", "8", "--from-account", "BCP",
        "--invoice-number", "E001-1", "--client", "Proveedor SAC",
    )
    assert result.exit_code == 0
    assert "Invoice 1: purchase E001-1 (subtotal 100.00, IGV 18.00)" in result.output
    assert "Factura compra E001-1 - Proveedor SAC" in result.output

    result = invoke(
        "add", "--type", "transfer", "--business", "1", "--date", "2024-01-07",
        "--amount", "200", "--from-account", "BCP", "--to-account", "Yape",
    )
    assert result.exit_code == 0

    result = invoke("account", "balances", "--period", "2024-01", "--movements")
    assert result.exit_code == 0
    assert "Transferencia a Yape" in result.output
    assert "Transferencia desde BCP" in result.output

    result = invoke("report", "income-statement", "--period", "2024-01")
    assert result.exit_code == 0
    assert "Net income" in result.output
    assert "1,000.00" in result.output

    result = invoke("tax", "--period", "2024-01")
    assert result.exit_code == 0
    assert "Purchase credit:" in result.output
    assert "Credit carried forward:" in result.output
    assert "S/ 18.00" in result.output

    result = invoke("ledger", "--account", "1041")
    assert result.exit_code == 0
    assert "1041 - Cuentas corrientes operativas" in result.output

    result = invoke("entries", "--business", "Bodega Central")
    assert result.exit_code == 0
    assert "Entry 3: Transferencia de BCP a Yape" in result.output

    result = invoke("transaction", "update", "1", "--amount", "250")
    assert result.exit_code == 0
    assert "Updated transaction 1" in result.output
    assert "250.00" in result.output

    result = invoke("transaction", "list", "--type", "expense")
    assert result.exit_code == 0
    assert "[F]" in result.output

    result = invoke("transaction", "delete", "2", "--yes")
    assert result.exit_code == 0
    assert "Deleted transaction 2" in result.output

    result = invoke("invoice", "list")
    assert "No invoices found." in result.output


def test_invoice_commands(invoke, initialized):
    """Invoices can be created, shown and deleted."""
    result = invoke(
        "invoice", "create", "--type", "sale", "--business", "1", "--date", "2024-02-01",
        "--client", "ACME", "--number", "F001-7", "--ruc", "20123456789",
        "--item", "Servicio: consultoría:2:50", "--item", "Viáticos:1:100",
    )
    assert result.exit_code == 0
    assert "Created sale invoice F001-7 (ID: 1)" in result.output
    assert "Total:    S/ 236.00" in result.output

    result = invoke("invoice", "show", "1")
    assert result.exit_code == 0
    assert "Servicio: consultoría" in result.output
    assert "RUC: 20123456789" in result.output

    result = invoke("tax", "--period", "2024-02")
    assert "IGV payable:" in result.output
    assert "S/ 36.00" in result.output

    result = invoke("invoice", "delete", "1", input="n\n")
    assert "Deletion cancelled." in result.output

    result = invoke("invoice", "delete", "1", "--yes")
    assert result.exit_code == 0
    assert "Deleted invoice 1" in result.output


def test_invoice_bad_item(invoke, initialized):
    """Malformed items are reported."""
    result = invoke(
        "invoice", "create", "--type", "sale", "--business", "1", "--date", "2024-02-01",
        "--client", "ACME", "--number", "F001-8", "--item", "Servicio",
    )

    assert result.exit_code == 1
    assert "DESCRIPTION:QUANTITY:UNIT_PRICE" in result.output


def test_add_errors(invoke, initialized):
    """Invalid input exits with an error message."""
    result = invoke(
        "add", "--type", "income", "--business", "Panadería", "--date", "today",
        "--amount", "10", "--category", "1", "--to-account", "BCP",
    )
    assert result.exit_code == 1
    assert "Business 'Panadería' not found" in result.output

    result = invoke(
        "add", "--type", "income", "--business", "1", "--date", "today",
        "--amount", "10", "--category", "1",
    )
    assert result.exit_code == 1
    assert "to_account is required" in result.output

    result = invoke(
        "add", "--type", "transfer", "--business", "1", "--date", "today",
        "--amount", "abc", "--from-account", "BCP", "--to-account", "Yape",
    )
    assert result.exit_code == 1
    assert "Invalid amount format" in result.output


def test_unknown_period(invoke, initialized):
    """Unknown periods are rejected."""
    result = invoke("report", "balance-sheet", "--period", "someday")

    assert result.exit_code == 1
    assert "Unknown period" in result.output


def test_payment_account_commands(invoke, initialized):
    """Payment accounts can be created, listed and deactivated."""
    result = invoke("account", "create", "BBVA", "--currency", "USD")
    assert result.exit_code == 0
    assert "Created payment account 'BBVA' (ID: 5)" in result.output

    result = invoke("account", "create", "BBVA")
    assert result.exit_code == 1
    assert "already exists" in result.output

    result = invoke("account", "deactivate", "Yape")
    assert result.exit_code == 0

    result = invoke("account", "list")
    assert "Yape" not in result.output
    result = invoke("account", "list", "--all")
    assert "Yape" in result.output and "(inactive)" in result.output


def test_reference_data_commands(invoke, initialized):
    """Businesses, categories and the chart can be listed."""
    result = invoke("business", "create", "Sucursal Norte", "--color", "teal")
    assert "Created business 'Sucursal Norte' (ID: 2)" in result.output

    result = invoke("business", "list")
    assert "Sucursal Norte | Color: teal" in result.output

    result = invoke("category", "create", "Fletes", "--type", "expense", "--id", "30")
    assert "Created category 'Fletes' (ID: 30)" in result.output

    result = invoke("category", "list", "--type", "income")
    assert "Venta de productos" in result.output
    assert "Fletes" not in result.output

    result = invoke("chart", "list", "--type", "liability")
    assert "4011" in result.output
    assert "7011" not in result.output


def test_import_command(invoke, initialized, fixtures_dir):
    """CSV rows are imported once."""
    path = str(fixtures_dir / "sample_transactions.csv")

    result = invoke("import", path, "--business", "Bodega Central")
    assert result.exit_code == 0
    assert "Imported: 4 transactions" in result.output

    result = invoke("import", path, "--business", "Bodega Central")
    assert "Skipped: 4 already imported" in result.output


def test_mapping_option(invoke, initialized, tmp_path):
    """A mapping file changes the posted accounts; a missing one is an error."""
    mapping = tmp_path / "mapping.json"
    mapping.write_text(json.dumps({"payment_accounts": {"BCP": "1011"}}))

    result = invoke(
        "--mapping", str(mapping), "add", "--type", "income", "--business", "1",
        "--date", "2024-01-05", "--amount", "10", "--category", "1", "--to-account", "BCP",
    )
    assert result.exit_code == 0
    assert "1011" in result.output

    result = invoke("--mapping", str(tmp_path / "missing.json"), "business", "list")
    assert result.exit_code == 1
    assert "Mapping file not found" in result.output


def test_summary_command(invoke, initialized):
    """The summary shows period totals, IGV and the trend."""
    invoke(
        "add", "--type", "income", "--business", "1", "--date", "2024-03-05",
        "--amount", "1000", "--category", "1", "--to-account", "BCP",
    )
    invoke(
        "add", "--type", "expense", "--business", "1", "--date", "2024-03-06",
        "--amount", "118", "--category", "8", "--invoice-number", "E001-2",
    )

    result = invoke("summary", "--business", "Bodega Central", "--period", "2024-03", "--months", "3")

    assert result.exit_code == 0
    assert "Summary (2024-03)" in result.output
    assert "S/ 1,000.00" in result.output
    assert "S/ 882.00" in result.output
    assert "88.20%" in result.output
    assert "S/ -18.00" in result.output
    assert "Ene 2024" in result.output
    assert "Mar 2024" in result.output
    assert "Dic 2023" not in result.output

    result = invoke("summary", "--period", "someday")
    assert result.exit_code == 1
    assert "Unknown period" in result.output
