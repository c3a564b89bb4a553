"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import inspect

from bookkeep.database.factories import create_sqlite_database
from bookkeep.domain import entities
from bookkeep.domain.errors import NotFoundError, PersistenceError


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_business_returns_domain_model(self, temp_db):
        """Test that get_business returns a domain Business entity."""
        business_id = temp_db.create_business(name="Bodega Central", color="#00ff00")

        business = temp_db.get_business(business_id)

        assert isinstance(business, entities.Business)
        assert business.id == business_id
        assert business.name == "Bodega Central"
        assert isinstance(business.created_at, datetime)

    def test_get_transaction_returns_domain_model(self, temp_db):
        """Test that get_transaction returns a domain Transaction entity."""
        business_id = temp_db.create_business(name="Bodega Central")
        transaction_id = temp_db.create_transaction(
            type="income",
            date=date(2024, 1, 15),
            business_id=business_id,
            amount=Decimal("150.50"),
            currency="PEN",
            category_id=1,
            from_account=None,
            to_account="BCP",
            description="Venta",
            reference=None,
            is_invoiced=False,
            invoice_id=None,
        )

        transaction = temp_db.get_transaction(transaction_id)

        assert isinstance(transaction, entities.Transaction)
        assert transaction.type == entities.TransactionType.INCOME
        assert transaction.amount == Decimal("150.50")
        assert isinstance(transaction.amount, Decimal)
        assert transaction.to_account == "BCP"

    def test_update_transaction_rejects_unknown_columns(self, temp_db):
        """Only transaction columns can be updated."""
        business_id = temp_db.create_business(name="Bodega Central")
        transaction_id = temp_db.create_transaction(
            type="transfer",
            date=date(2024, 1, 15),
            business_id=business_id,
            amount=Decimal("10"),
            currency="PEN",
            category_id=None,
            from_account="BCP",
            to_account="Yape",
            description="",
            reference=None,
            is_invoiced=False,
            invoice_id=None,
        )

        temp_db.update_transaction(transaction_id, description="Caja")
        assert temp_db.get_transaction(transaction_id).description == "Caja"

        with pytest.raises(ValueError):
            temp_db.update_transaction(transaction_id, colour="red")
        with pytest.raises(NotFoundError):
            temp_db.update_transaction(999, description="x")

    def test_invoice_items_round_trip(self, temp_db):
        """Invoices come back with their items in order."""
        business_id = temp_db.create_business(name="Bodega Central")
        invoice_id = temp_db.create_invoice(
            type="sale",
            date=date(2024, 1, 15),
            business_id=business_id,
            client_supplier="ACME",
            invoice_number="F001-1",
            subtotal=Decimal("150.00"),
            igv=Decimal("27.00"),
            total=Decimal("177.00"),
            items=[
                entities.InvoiceItem("Producto A", Decimal("2"), Decimal("50"), Decimal("100")),
                entities.InvoiceItem("Producto B", Decimal("1"), Decimal("50"), Decimal("50")),
            ],
            ruc="20123456789",
            currency="PEN",
        )

        invoice = temp_db.get_invoice(invoice_id)

        assert isinstance(invoice, entities.Invoice)
        assert invoice.type == entities.InvoiceType.SALE
        assert [item.description for item in invoice.items] == ["Producto A", "Producto B"]
        assert invoice.items[0].quantity == Decimal("2")

    def test_journal_entry_lines_keep_order(self, temp_db):
        """Lines come back in the order they were posted."""
        business_id = temp_db.create_business(name="Bodega Central")
        entry_id = temp_db.create_journal_entry(
            date=date(2024, 1, 15),
            business_id=business_id,
            description="Factura venta F001-1 - ACME",
            lines=[
                entities.JournalEntryLine("1212", "Facturas por cobrar", Decimal("118"), Decimal("0")),
                entities.JournalEntryLine("7011", "Ventas", Decimal("0"), Decimal("100")),
                entities.JournalEntryLine("4011", "IGV", Decimal("0"), Decimal("18")),
            ],
            idempotency_key="key-1",
        )

        entry = temp_db.get_journal_entry(entry_id)

        assert isinstance(entry, entities.JournalEntry)
        assert [line.account_code for line in entry.lines] == ["1212", "7011", "4011"]
        assert [line.position for line in entry.lines] == [0, 1, 2]
        assert entry.is_balanced
        assert temp_db.get_journal_entry_by_idempotency_key("key-1").id == entry_id

    def test_journal_entry_requires_business(self, temp_db):
        """Entries cannot be written for a missing business."""
        with pytest.raises(NotFoundError):
            temp_db.create_journal_entry(
                date=date(2024, 1, 15),
                business_id=42,
                description="Huérfano",
                lines=[],
            )

    def test_duplicate_idempotency_key_rolls_back(self, temp_db):
        """A second entry with the same key is rejected by the store."""
        business_id = temp_db.create_business(name="Bodega Central")
        temp_db.create_journal_entry(
            date=date(2024, 1, 15),
            business_id=business_id,
            description="Primero",
            lines=[],
            idempotency_key="dup",
        )

        with pytest.raises(PersistenceError):
            temp_db.create_journal_entry(
                date=date(2024, 1, 16),
                business_id=business_id,
                description="Segundo",
                lines=[],
                idempotency_key="dup",
            )

        assert len(temp_db.list_journal_entries()) == 1

    def test_atomic_rolls_back_nested_writes(self, temp_db):
        """Writes inside a failed atomic block are all discarded."""
        with pytest.raises(RuntimeError):
            with temp_db.atomic("seed"):
                temp_db.create_business(name="Uno")
                temp_db.create_business(name="Dos")
                raise RuntimeError("boom")

        assert temp_db.list_businesses() == []

    def test_delete_journal_entries_needs_a_filter(self, temp_db):
        """Deleting every entry at once is not allowed."""
        with pytest.raises(ValueError):
            temp_db.delete_journal_entries()

    def test_payment_accounts_filter_inactive(self, temp_db):
        """Inactive payment accounts are listed only on request."""
        bcp = temp_db.create_payment_account(name="BCP", type="bank")
        temp_db.create_payment_account(name="Yape", type="wallet")
        temp_db.set_payment_account_active(bcp, False)

        assert [a.name for a in temp_db.list_payment_accounts()] == ["Yape"]
        assert len(temp_db.list_payment_accounts(include_inactive=True)) == 2
        assert all(
            isinstance(a, entities.PaymentAccount)
            for a in temp_db.list_payment_accounts(include_inactive=True)
        )

    def test_initialize_schema_creates_tables(self, tmp_path):
        """Tables exist only once the schema is initialized, and re-running is safe."""
        db = create_sqlite_database(database_path=str(tmp_path / "fresh.db"))
        db.connect()
        engine = db.session_factory.kw["bind"]
        assert inspect(engine).get_table_names() == []

        db.initialize_schema()
        db.initialize_schema()

        tables = set(inspect(engine).get_table_names())
        assert {"journal_entries", "journal_entry_lines", "transactions", "invoices"} <= tables
        db.disconnect()
