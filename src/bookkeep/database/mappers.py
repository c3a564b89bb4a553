"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic so the domain entities stay stable
when the schema changes.
"""

from decimal import Decimal

from bookkeep.domain import entities as domain
from bookkeep.database.models import (
    Account as ORMAccount,
    Business as ORMBusiness,
    TransactionCategory as ORMTransactionCategory,
    PaymentAccount as ORMPaymentAccount,
    Transaction as ORMTransaction,
    Invoice as ORMInvoice,
    InvoiceItem as ORMInvoiceItem,
    JournalEntry as ORMJournalEntry,
    JournalEntryLine as ORMJournalEntryLine,
)


def _decimal(value) -> Decimal:
    """Normalize numeric column values (SQLite may hand back floats)."""
    if value is None:
        return Decimal("0.00")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        code=orm_account.code,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        category=orm_account.category,
        normal_balance=domain.BalanceSide(orm_account.normal_balance),
        parent_code=orm_account.parent_code,
    )


def business_to_domain(orm_business: ORMBusiness) -> domain.Business:
    """Convert SQLAlchemy Business model to domain Business entity."""
    return domain.Business(
        id=orm_business.id,
        name=orm_business.name,
        color=orm_business.color,
        created_at=orm_business.created_at,
    )


def category_to_domain(orm_category: ORMTransactionCategory) -> domain.TransactionCategory:
    """Convert SQLAlchemy TransactionCategory model to domain entity."""
    return domain.TransactionCategory(
        id=orm_category.id,
        name=orm_category.name,
        type=domain.TransactionType(orm_category.type),
    )


def payment_account_to_domain(orm_account: ORMPaymentAccount) -> domain.PaymentAccount:
    """Convert SQLAlchemy PaymentAccount model to domain entity."""
    return domain.PaymentAccount(
        id=orm_account.id,
        name=orm_account.name,
        type=domain.PaymentAccountType(orm_account.type),
        currency=orm_account.currency,
        is_active=orm_account.is_active,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        type=domain.TransactionType(orm_transaction.type),
        business_id=orm_transaction.business_id,
        category_id=orm_transaction.category_id,
        amount=_decimal(orm_transaction.amount),
        currency=orm_transaction.currency,
        from_account=orm_transaction.from_account,
        to_account=orm_transaction.to_account,
        description=orm_transaction.description or "",
        reference=orm_transaction.reference,
        is_invoiced=orm_transaction.is_invoiced,
        invoice_id=orm_transaction.invoice_id,
        created_at=orm_transaction.created_at,
    )


def invoice_item_to_domain(orm_item: ORMInvoiceItem) -> domain.InvoiceItem:
    """Convert SQLAlchemy InvoiceItem model to domain entity."""
    return domain.InvoiceItem(
        id=orm_item.id,
        description=orm_item.description,
        quantity=_decimal(orm_item.quantity),
        unit_price=_decimal(orm_item.unit_price),
        total=_decimal(orm_item.total),
    )


def invoice_to_domain(orm_invoice: ORMInvoice, include_items: bool = True) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model to domain Invoice entity."""
    items = ()
    if include_items:
        items = tuple(invoice_item_to_domain(item) for item in orm_invoice.items)
    return domain.Invoice(
        id=orm_invoice.id,
        type=domain.InvoiceType(orm_invoice.type),
        date=orm_invoice.date,
        business_id=orm_invoice.business_id,
        client_supplier=orm_invoice.client_supplier,
        ruc=orm_invoice.ruc,
        invoice_number=orm_invoice.invoice_number,
        subtotal=_decimal(orm_invoice.subtotal),
        igv=_decimal(orm_invoice.igv),
        total=_decimal(orm_invoice.total),
        currency=orm_invoice.currency,
        created_at=orm_invoice.created_at,
        items=items,
    )


def journal_line_to_domain(orm_line: ORMJournalEntryLine) -> domain.JournalEntryLine:
    """Convert SQLAlchemy JournalEntryLine model to domain entity."""
    return domain.JournalEntryLine(
        account_code=orm_line.account_code,
        account_name=orm_line.account_name,
        debit=_decimal(orm_line.debit),
        credit=_decimal(orm_line.credit),
        position=orm_line.position,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model to domain entity with its lines."""
    return domain.JournalEntry(
        id=orm_entry.id,
        date=orm_entry.date,
        business_id=orm_entry.business_id,
        description=orm_entry.description,
        transaction_id=orm_entry.transaction_id,
        invoice_id=orm_entry.invoice_id,
        idempotency_key=orm_entry.idempotency_key,
        created_at=orm_entry.created_at,
        lines=tuple(journal_line_to_domain(line) for line in orm_entry.lines),
    )
