"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from bookkeep.database.models import (
    Account as ORMAccount,
    PaymentAccount as ORMPaymentAccount,
    Transaction as ORMTransaction,
    Invoice as ORMInvoice,
    InvoiceItem as ORMInvoiceItem,
    JournalEntry as ORMJournalEntry,
    JournalEntryLine as ORMJournalEntryLine,
)
from bookkeep.database.mappers import (
    account_to_domain,
    payment_account_to_domain,
    transaction_to_domain,
    invoice_to_domain,
    journal_entry_to_domain,
)
from bookkeep.domain.entities import (
    Account,
    AccountType,
    BalanceSide,
    InvoiceType,
    PaymentAccountType,
    TransactionType,
)


class TestAccountMapper:
    """Tests for chart Account mapper."""

    def test_account_to_domain(self):
        """Test converting ORM Account to domain Account."""
        orm_account = ORMAccount(
            code="4011",
            name="IGV - Cuenta propia",
            account_type="liability",
            category="Tributos por pagar",
            normal_balance="credit",
            parent_code="40",
        )
        domain_account = account_to_domain(orm_account)

        assert isinstance(domain_account, Account)
        assert domain_account.account_type == AccountType.LIABILITY
        assert domain_account.normal_balance == BalanceSide.CREDIT
        assert domain_account.parent_code == "40"


class TestPaymentAccountMapper:
    """Tests for PaymentAccount mapper."""

    def test_payment_account_to_domain(self):
        """Test converting ORM PaymentAccount to domain PaymentAccount."""
        orm_account = ORMPaymentAccount(id=3, name="Yape", type="wallet", currency="PEN", is_active=False)

        account = payment_account_to_domain(orm_account)

        assert account.type == PaymentAccountType.WALLET
        assert account.is_active is False


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_domain_with_none_fields(self):
        """Missing descriptions become empty strings; float amounts become Decimal."""
        orm_transaction = ORMTransaction(
            id=1,
            date=date(2024, 1, 15),
            type="transfer",
            business_id=1,
            category_id=None,
            amount=12.5,
            currency="PEN",
            from_account="BCP",
            to_account="Yape",
            description=None,
            reference=None,
            is_invoiced=False,
            invoice_id=None,
            created_at=datetime.now(UTC),
        )

        transaction = transaction_to_domain(orm_transaction)

        assert transaction.type == TransactionType.TRANSFER
        assert transaction.amount == Decimal("12.5")
        assert isinstance(transaction.amount, Decimal)
        assert transaction.description == ""


class TestInvoiceMapper:
    """Tests for Invoice mapper."""

    def _invoice(self):
        orm_invoice = ORMInvoice(
            id=5,
            type="purchase",
            date=date(2024, 1, 15),
            business_id=1,
            client_supplier="Proveedor SAC",
            ruc=None,
            invoice_number="E001-1",
            subtotal=Decimal("100.00"),
            igv=Decimal("18.00"),
            total=Decimal("118.00"),
            currency="PEN",
            created_at=datetime.now(UTC),
        )
        orm_invoice.items = [
            ORMInvoiceItem(
                id=1,
                description="Insumos",
                quantity=Decimal("1"),
                unit_price=Decimal("100.00"),
                total=Decimal("100.00"),
            )
        ]
        return orm_invoice

    def test_invoice_to_domain(self):
        """Test converting ORM Invoice to domain Invoice with items."""
        invoice = invoice_to_domain(self._invoice())

        assert invoice.type == InvoiceType.PURCHASE
        assert invoice.total == Decimal("118.00")
        assert len(invoice.items) == 1
        assert invoice.items[0].description == "Insumos"

    def test_invoice_to_domain_without_items(self):
        """Items can be left out for listings."""
        invoice = invoice_to_domain(self._invoice(), include_items=False)

        assert invoice.items == ()


class TestJournalEntryMapper:
    """Tests for JournalEntry mapper."""

    def test_journal_entry_to_domain(self):
        """Test converting ORM JournalEntry to domain JournalEntry with lines."""
        orm_entry = ORMJournalEntry(
            id=9,
            date=date(2024, 1, 15),
            business_id=1,
            description="Venta de productos",
            transaction_id=4,
            invoice_id=None,
            idempotency_key=None,
            created_at=datetime.now(UTC),
        )
        orm_entry.lines = [
            ORMJournalEntryLine(
                position=0, account_code="1041", account_name="BCP", debit=Decimal("50"), credit=Decimal("0")
            ),
            ORMJournalEntryLine(
                position=1, account_code="7011", account_name="Ventas", debit=Decimal("0"), credit=Decimal("50")
            ),
        ]

        entry = journal_entry_to_domain(orm_entry)

        assert entry.transaction_id == 4
        assert [line.account_code for line in entry.lines] == ["1041", "7011"]
        assert entry.total_debit == entry.total_credit == Decimal("50")
