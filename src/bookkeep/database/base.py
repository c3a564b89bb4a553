"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Any, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from bookkeep.domain.entities import (
    Account,
    AccountType,
    Business,
    TransactionCategory,
    PaymentAccount,
    Transaction,
    Invoice,
    InvoiceItem,
    JournalEntry,
    JournalEntryLine,
)


class Database(ABC):
    """Abstract database interface for bookkeep.

    Every write method runs inside ``atomic``. Called on its own it commits
    immediately; called inside an enclosing ``atomic`` block it joins that
    unit and is committed or rolled back together with it.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self, operation: str = "write") -> AbstractContextManager[Any]:
        """Run a block of writes as one all-or-nothing unit.

        Args:
            operation: Name of the operation, reported when the unit fails

        Raises:
            PersistenceError: If the store rejects a write. Everything written
                in the unit is rolled back.
        """
        pass

    # Chart of accounts operations
    @abstractmethod
    def save_account(self, account: Account) -> None:
        """Insert or replace a chart of accounts entry."""
        pass

    @abstractmethod
    def get_account(self, code: str) -> Optional[Account]:
        """Get chart account by code."""
        pass

    @abstractmethod
    def list_accounts(self, account_types: Optional[Sequence[AccountType]] = None) -> list[Account]:
        """List chart accounts ordered by code, optionally filtered by type."""
        pass

    # Business operations
    @abstractmethod
    def create_business(self, name: str, color: Optional[str] = None) -> int:
        """Create a business. Returns business ID."""
        pass

    @abstractmethod
    def get_business(self, business_id: int) -> Optional[Business]:
        """Get business by ID."""
        pass

    @abstractmethod
    def get_business_by_name(self, name: str) -> Optional[Business]:
        """Get business by name."""
        pass

    @abstractmethod
    def list_businesses(self) -> list[Business]:
        """List all businesses ordered by name."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, name: str, type: str, category_id: Optional[int] = None) -> int:
        """Create a transaction category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[TransactionCategory]:
        """Get category by ID."""
        pass

    @abstractmethod
    def list_categories(self, type: Optional[str] = None) -> list[TransactionCategory]:
        """List categories ordered by ID, optionally filtered by type."""
        pass

    # Payment account operations
    @abstractmethod
    def create_payment_account(self, name: str, type: str, currency: str = "PEN") -> int:
        """Create a payment account. Returns payment account ID."""
        pass

    @abstractmethod
    def get_payment_account(self, account_id: int) -> Optional[PaymentAccount]:
        """Get payment account by ID."""
        pass

    @abstractmethod
    def get_payment_account_by_name(self, name: str) -> Optional[PaymentAccount]:
        """Get payment account by name."""
        pass

    @abstractmethod
    def list_payment_accounts(self, include_inactive: bool = False) -> list[PaymentAccount]:
        """List payment accounts ordered by name."""
        pass

    @abstractmethod
    def set_payment_account_active(self, account_id: int, is_active: bool) -> None:
        """Activate or deactivate a payment account."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        type: str,
        date: date,
        business_id: int,
        amount: Decimal,
        currency: str = "PEN",
        category_id: Optional[int] = None,
        from_account: Optional[str] = None,
        to_account: Optional[str] = None,
        description: str = "",
        reference: Optional[str] = None,
        is_invoiced: bool = False,
        invoice_id: Optional[int] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        business_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[str] = None,
        invoice_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, ordered by date then ID."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, **fields: Any) -> None:
        """Update transaction columns by name."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction row (journal entries must be removed first)."""
        pass

    # Invoice operations
    @abstractmethod
    def create_invoice(
        self,
        type: str,
        date: date,
        business_id: int,
        client_supplier: str,
        invoice_number: str,
        subtotal: Decimal,
        igv: Decimal,
        total: Decimal,
        items: Sequence[InvoiceItem],
        ruc: Optional[str] = None,
        currency: str = "PEN",
    ) -> int:
        """Create an invoice with its items. Returns invoice ID."""
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID, items included."""
        pass

    @abstractmethod
    def list_invoices(
        self,
        business_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> list[Invoice]:
        """List invoices with optional filters, ordered by date then ID."""
        pass

    @abstractmethod
    def update_invoice(
        self,
        invoice_id: int,
        items: Optional[Sequence[InvoiceItem]] = None,
        **fields: Any,
    ) -> None:
        """Update invoice columns by name, replacing items when given."""
        pass

    @abstractmethod
    def delete_invoice(self, invoice_id: int) -> None:
        """Delete an invoice and its items (transactions and entries must be removed first)."""
        pass

    # Journal operations
    @abstractmethod
    def create_journal_entry(
        self,
        date: date,
        business_id: int,
        description: str,
        lines: Sequence[JournalEntryLine],
        transaction_id: Optional[int] = None,
        invoice_id: Optional[int] = None,
        idempotency_key: Optional[str] = None,
    ) -> int:
        """Create a journal entry with its lines. Returns entry ID."""
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry by ID, lines included."""
        pass

    @abstractmethod
    def get_journal_entry_by_idempotency_key(self, key: str) -> Optional[JournalEntry]:
        """Get the journal entry posted under an idempotency key."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        business_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        transaction_id: Optional[int] = None,
        invoice_id: Optional[int] = None,
    ) -> list[JournalEntry]:
        """List journal entries with lines, ordered by date then ID."""
        pass

    @abstractmethod
    def delete_journal_entries(
        self, transaction_id: Optional[int] = None, invoice_id: Optional[int] = None
    ) -> int:
        """Delete entries (and their lines) linked to a transaction or invoice.

        Returns:
            Number of entries deleted
        """
        pass
