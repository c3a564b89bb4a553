"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class PersistenceError(DomainError):
    """The store rejected a write; the whole operation was rolled back."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class UnbalancedEntryError(DomainError):
    """A journal entry whose debit and credit sums differ."""


def business_not_found(business_id: int) -> str:
    """Return message for missing business."""
    return f"Business {business_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def invoice_not_found(invoice_id: int) -> str:
    """Return message for missing invoice."""
    return f"Invoice {invoice_id} not found"


def journal_entry_not_found(entry_id: int) -> str:
    """Return message for missing journal entry."""
    return f"Journal entry {entry_id} not found"


def payment_account_not_found(name: str) -> str:
    """Return message for missing payment account."""
    return f"Payment account '{name}' not found"


def duplicate_name(kind: str, name: str) -> str:
    """Return message for a uniqueness violation on a name."""
    return f"{kind} with name '{name}' already exists"


def unbalanced_entry(total_debit, total_credit) -> str:
    """Return message when an entry's sides do not match."""
    return (
        f"Journal entry does not balance: debits {total_debit} "
        f"!= credits {total_credit}"
    )


def write_failed(operation: str, error: Exception) -> str:
    """Return message for a rolled back write."""
    return f"{operation} failed and was rolled back: {error}"
