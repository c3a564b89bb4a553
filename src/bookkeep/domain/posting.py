"""Posting engine.

Turns business events (cash transactions and invoices) into balanced journal
entries and writes each event together with its entry as one atomic unit.
Deletes and edits go through here too so an event never outlives its entry
or the other way round.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

from bookkeep.database.base import Database
from bookkeep.domain.chart import ChartOfAccountsService
from bookkeep.domain.entities import (
    InvoiceItem,
    InvoiceType,
    JournalEntry,
    JournalEntryLine,
    PostedInvoice,
    PostedInvoicedTransaction,
    PostedTransaction,
    TransactionType,
)
from bookkeep.domain.errors import (
    ConflictError,
    NotFoundError,
    UnbalancedEntryError,
    ValidationError,
    business_not_found,
    invoice_not_found,
    transaction_not_found,
    unbalanced_entry,
)
from bookkeep.domain.mapping import AccountMappingRules, default_mapping_rules
from bookkeep.domain.requests import (
    DEFAULT_CLIENT,
    AnyTransactionRequest,
    InvoiceRequest,
    TransferRequest,
    build_transaction_request,
)
from bookkeep.domain.tax import IGV_RATE, split_tax_inclusive
from bookkeep.utils.amount_parser import money

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")

_UPDATABLE_FIELDS = {
    "date",
    "type",
    "business_id",
    "amount",
    "category_id",
    "from_account",
    "to_account",
    "description",
    "reference",
    "currency",
    "invoice_number",
    "client_supplier",
    "ruc",
}

_INVOICE_FIELDS = {"invoice_number", "client_supplier", "ruc"}


def entry_description(narrative: str, description: str) -> str:
    """Journal entry description for a plain transaction."""
    if not description:
        return narrative
    return f"{narrative} - {description}"


def invoice_entry_description(invoice_type: InvoiceType, invoice_number: str, client: str) -> str:
    """Journal entry description for an invoice."""
    kind = "venta" if invoice_type == InvoiceType.SALE else "compra"
    return f"Factura {kind} {invoice_number} - {client}"


class PostingService:
    """Service that posts transactions and invoices to the journal."""

    def __init__(
        self,
        db: Database,
        rules: Optional[AccountMappingRules] = None,
        tax_rate: Decimal = IGV_RATE,
    ):
        """Initialize posting service.

        Args:
            db: Database instance
            rules: Account mapping rules (stock table if None)
            tax_rate: Tax rate used to split invoiced amounts
        """
        self.db = db
        self.rules = rules or default_mapping_rules()
        self.tax_rate = tax_rate
        self.chart = ChartOfAccountsService(db)

    # Posting

    def post_transaction(self, request: AnyTransactionRequest) -> PostedTransaction:
        """Post a cash transaction with a two-line journal entry.

        Invoice fields on the request are ignored here; use
        ``post_invoiced_transaction`` to record the invoice too.

        Args:
            request: Income, expense or transfer request

        Returns:
            PostedTransaction holding the stored transaction and entry

        Raises:
            NotFoundError: If the business does not exist
            ValidationError: If strict mapping rules reject a reference
            PersistenceError: If a write fails (nothing is kept)
        """
        replayed = self._replay(request.idempotency_key)
        if replayed is not None:
            return self._as_posted_transaction(replayed)

        self._require_business(request.business_id)
        resolved = self.rules.resolve(request)
        lines = [
            self._line(resolved.debit_code, debit=request.amount),
            self._line(resolved.credit_code, credit=request.amount),
        ]

        with self.db.atomic("post transaction"):
            transaction_id = self.db.create_transaction(
                **self._transaction_columns(request),
                is_invoiced=False,
                invoice_id=None,
            )
            entry_id = self._write_entry(
                request.date,
                request.business_id,
                entry_description(resolved.narrative, request.description),
                lines,
                transaction_id=transaction_id,
                idempotency_key=request.idempotency_key,
            )

        logger.info(
            "Posted %s transaction %s as entry %s", request.type.value, transaction_id, entry_id
        )
        return PostedTransaction(
            transaction=self.db.get_transaction(transaction_id),
            entry=self.db.get_journal_entry(entry_id),
        )

    def post_invoiced_transaction(
        self, request: AnyTransactionRequest
    ) -> PostedInvoicedTransaction:
        """Post a transaction and, when it carries invoice fields, its invoice.

        The amount is treated as tax inclusive and split into subtotal and
        IGV. A sale invoice is raised for income and a purchase invoice for
        an expense, and the entry has three lines (receivable or payable,
        revenue or purchases, and tax). Transfers and requests without
        invoice fields are posted as plain transactions.

        Args:
            request: Income, expense or transfer request

        Returns:
            PostedInvoicedTransaction (``invoice`` is None when no invoice was raised)

        Raises:
            NotFoundError: If the business does not exist
            PersistenceError: If a write fails (nothing is kept)
        """
        if isinstance(request, TransferRequest) or request.invoice is None:
            posted = self.post_transaction(request)
            return PostedInvoicedTransaction(
                transaction=posted.transaction,
                invoice=self._linked_invoice(posted.transaction.invoice_id),
                entry=posted.entry,
            )

        replayed = self._replay(request.idempotency_key)
        if replayed is not None:
            posted = self._as_posted_transaction(replayed)
            return PostedInvoicedTransaction(
                transaction=posted.transaction,
                invoice=self._linked_invoice(posted.transaction.invoice_id),
                entry=posted.entry,
            )

        self._require_business(request.business_id)
        invoice_type = _invoice_type_for(request.type)
        fields = request.invoice
        client = fields.client_supplier or DEFAULT_CLIENT
        subtotal, igv = split_tax_inclusive(request.amount, self.tax_rate)
        lines = self._invoice_lines(invoice_type, subtotal, igv, request.amount)

        with self.db.atomic("post invoiced transaction"):
            invoice_id = self.db.create_invoice(
                type=invoice_type.value,
                date=request.date,
                business_id=request.business_id,
                client_supplier=client,
                invoice_number=fields.invoice_number,
                subtotal=subtotal,
                igv=igv,
                total=request.amount,
                items=[_single_item(request.description, subtotal)],
                ruc=fields.ruc,
                currency=request.currency,
            )
            columns = self._transaction_columns(request)
            columns["reference"] = fields.invoice_number or request.reference
            transaction_id = self.db.create_transaction(
                **columns, is_invoiced=True, invoice_id=invoice_id
            )
            entry_id = self._write_entry(
                request.date,
                request.business_id,
                invoice_entry_description(invoice_type, fields.invoice_number, client),
                lines,
                transaction_id=transaction_id,
                invoice_id=invoice_id,
                idempotency_key=request.idempotency_key,
            )

        logger.info(
            "Posted invoiced %s transaction %s with invoice %s as entry %s",
            request.type.value,
            transaction_id,
            invoice_id,
            entry_id,
        )
        return PostedInvoicedTransaction(
            transaction=self.db.get_transaction(transaction_id),
            invoice=self.db.get_invoice(invoice_id),
            entry=self.db.get_journal_entry(entry_id),
        )

    def post_standalone_invoice(self, request: InvoiceRequest) -> PostedInvoice:
        """Post an invoice entered directly, with no cash transaction.

        Args:
            request: Validated invoice request

        Returns:
            PostedInvoice holding the stored invoice and entry

        Raises:
            NotFoundError: If the business does not exist
            PersistenceError: If a write fails (nothing is kept)
        """
        replayed = self._replay(request.idempotency_key)
        if replayed is not None:
            if replayed.invoice_id is None or replayed.transaction_id is not None:
                raise ConflictError(
                    f"Idempotency key '{request.idempotency_key}' was used for a transaction"
                )
            return PostedInvoice(invoice=self.db.get_invoice(replayed.invoice_id), entry=replayed)

        self._require_business(request.business_id)
        lines = self._invoice_lines(request.type, request.subtotal, request.igv, request.total)
        items = [
            InvoiceItem(
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total=item.total,
            )
            for item in request.items
        ]

        with self.db.atomic("post invoice"):
            invoice_id = self.db.create_invoice(
                type=request.type.value,
                date=request.date,
                business_id=request.business_id,
                client_supplier=request.client_supplier,
                invoice_number=request.invoice_number,
                subtotal=request.subtotal,
                igv=request.igv,
                total=request.total,
                items=items,
                ruc=request.ruc,
                currency=request.currency,
            )
            entry_id = self._write_entry(
                request.date,
                request.business_id,
                invoice_entry_description(
                    request.type, request.invoice_number, request.client_supplier
                ),
                lines,
                invoice_id=invoice_id,
                idempotency_key=request.idempotency_key,
            )

        logger.info("Posted %s invoice %s as entry %s", request.type.value, invoice_id, entry_id)
        return PostedInvoice(
            invoice=self.db.get_invoice(invoice_id),
            entry=self.db.get_journal_entry(entry_id),
        )

    # Deletes and edits

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction, its entry and lines, and its invoice if any.

        Raises:
            NotFoundError: If the transaction does not exist
            PersistenceError: If a write fails (nothing is deleted)
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        with self.db.atomic("delete transaction"):
            self.db.delete_journal_entries(transaction_id=transaction_id)
            self.db.delete_transaction(transaction_id)
            if transaction.invoice_id is not None:
                self._delete_invoice_rows(transaction.invoice_id)

        logger.info("Deleted transaction %s", transaction_id)

    def delete_invoice(self, invoice_id: int) -> None:
        """Delete an invoice with everything that hangs off it.

        Transactions referencing the invoice go too, together with their
        entries and lines, as do the invoice's own entry, lines and items.

        Raises:
            NotFoundError: If the invoice does not exist
            PersistenceError: If a write fails (nothing is deleted)
        """
        if self.db.get_invoice(invoice_id) is None:
            raise NotFoundError(invoice_not_found(invoice_id))

        with self.db.atomic("delete invoice"):
            for transaction in self.db.list_transactions(invoice_id=invoice_id):
                self.db.delete_journal_entries(transaction_id=transaction.id)
                self.db.delete_transaction(transaction.id)
            self._delete_invoice_rows(invoice_id)

        logger.info("Deleted invoice %s", invoice_id)

    def update_transaction(self, transaction_id: int, **changes: Any) -> PostedInvoicedTransaction:
        """Edit a transaction and regenerate its postings.

        The old entry is removed and a new one posted from the edited
        transaction in the same unit of work. For an invoiced transaction the
        invoice amounts and its single item are recomputed from the new
        amount; its type cannot change.

        Args:
            transaction_id: Transaction to edit
            **changes: New values for date, type, business_id, amount,
                category_id, from_account, to_account, description, reference,
                currency and, on invoiced transactions, invoice_number,
                client_supplier and ruc

        Returns:
            PostedInvoicedTransaction with the updated rows

        Raises:
            NotFoundError: If the transaction or new business does not exist
            ValidationError: If a change is unknown or invalid
        """
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Cannot update fields: {', '.join(sorted(unknown))}", field=sorted(unknown)[0]
            )
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        try:
            new_type = TransactionType(changes.get("type") or transaction.type)
        except ValueError:
            raise ValidationError(f"Unknown transaction type '{changes['type']}'", field="type")
        invoice = self._linked_invoice(transaction.invoice_id)
        if transaction.is_invoiced and new_type != transaction.type:
            raise ValidationError(
                "Cannot change the type of an invoiced transaction", field="type"
            )
        if not transaction.is_invoiced and _INVOICE_FIELDS & set(changes):
            raise ValidationError(
                "Invoice fields only apply to invoiced transactions", field="invoice_number"
            )

        old_entries = self.db.list_journal_entries(transaction_id=transaction_id)
        idempotency_key = next(
            (e.idempotency_key for e in old_entries if e.idempotency_key), None
        )

        def merged(name: str, current: Any) -> Any:
            return changes[name] if name in changes else current

        request = build_transaction_request(
            new_type,
            date=merged("date", transaction.date),
            business_id=merged("business_id", transaction.business_id),
            amount=merged("amount", transaction.amount),
            category_id=merged("category_id", transaction.category_id),
            from_account=merged("from_account", transaction.from_account),
            to_account=merged("to_account", transaction.to_account),
            description=merged("description", transaction.description),
            reference=merged("reference", transaction.reference),
            currency=merged("currency", transaction.currency),
            is_invoiced=transaction.is_invoiced,
            invoice_number=merged("invoice_number", invoice.invoice_number if invoice else None),
            client_supplier=merged("client_supplier", invoice.client_supplier if invoice else None),
            ruc=merged("ruc", invoice.ruc if invoice else None),
        )
        self._require_business(request.business_id)

        with self.db.atomic("update transaction"):
            self.db.delete_journal_entries(transaction_id=transaction_id)
            columns = self._transaction_columns(request)

            if invoice is not None:
                self.db.delete_journal_entries(invoice_id=invoice.id)
                fields = request.invoice
                client = fields.client_supplier or DEFAULT_CLIENT
                subtotal, igv = split_tax_inclusive(request.amount, self.tax_rate)
                self.db.update_invoice(
                    invoice.id,
                    items=[_single_item(request.description, subtotal)],
                    date=request.date,
                    business_id=request.business_id,
                    client_supplier=client,
                    ruc=fields.ruc,
                    invoice_number=fields.invoice_number,
                    subtotal=subtotal,
                    igv=igv,
                    total=request.amount,
                    currency=request.currency,
                )
                columns["reference"] = fields.invoice_number or request.reference
                self.db.update_transaction(transaction_id, **columns)
                self._write_entry(
                    request.date,
                    request.business_id,
                    invoice_entry_description(invoice.type, fields.invoice_number, client),
                    self._invoice_lines(invoice.type, subtotal, igv, request.amount),
                    transaction_id=transaction_id,
                    invoice_id=invoice.id,
                    idempotency_key=idempotency_key,
                )
            else:
                resolved = self.rules.resolve(request)
                self.db.update_transaction(transaction_id, **columns)
                self._write_entry(
                    request.date,
                    request.business_id,
                    entry_description(resolved.narrative, request.description),
                    [
                        self._line(resolved.debit_code, debit=request.amount),
                        self._line(resolved.credit_code, credit=request.amount),
                    ],
                    transaction_id=transaction_id,
                    idempotency_key=idempotency_key,
                )

        logger.info("Updated transaction %s and regenerated its entry", transaction_id)
        entries = self.db.list_journal_entries(transaction_id=transaction_id)
        updated = self.db.get_transaction(transaction_id)
        return PostedInvoicedTransaction(
            transaction=updated,
            invoice=self._linked_invoice(updated.invoice_id),
            entry=entries[-1],
        )

    # Helpers

    def _require_business(self, business_id: int) -> None:
        if self.db.get_business(business_id) is None:
            raise NotFoundError(business_not_found(business_id))

    def _replay(self, idempotency_key: Optional[str]) -> Optional[JournalEntry]:
        if not idempotency_key:
            return None
        entry = self.db.get_journal_entry_by_idempotency_key(idempotency_key)
        if entry is not None:
            logger.info("Idempotency key '%s' already posted as entry %s", idempotency_key, entry.id)
        return entry

    def _as_posted_transaction(self, entry: JournalEntry) -> PostedTransaction:
        if entry.transaction_id is None:
            raise ConflictError(
                f"Idempotency key '{entry.idempotency_key}' was used for an invoice"
            )
        return PostedTransaction(
            transaction=self.db.get_transaction(entry.transaction_id), entry=entry
        )

    def _linked_invoice(self, invoice_id: Optional[int]):
        if invoice_id is None:
            return None
        return self.db.get_invoice(invoice_id)

    def _delete_invoice_rows(self, invoice_id: int) -> None:
        self.db.delete_journal_entries(invoice_id=invoice_id)
        self.db.delete_invoice(invoice_id)

    @staticmethod
    def _transaction_columns(request: AnyTransactionRequest) -> dict[str, Any]:
        return {
            "type": request.type.value,
            "date": request.date,
            "business_id": request.business_id,
            "amount": request.amount,
            "currency": request.currency,
            "category_id": getattr(request, "category_id", None),
            "from_account": getattr(request, "from_account", None),
            "to_account": getattr(request, "to_account", None),
            "description": request.description,
            "reference": request.reference,
        }

    def _line(self, code: str, debit: Decimal = ZERO, credit: Decimal = ZERO) -> JournalEntryLine:
        return JournalEntryLine(
            account_code=code,
            account_name=self.chart.account_name(code),
            debit=money(debit),
            credit=money(credit),
        )

    def _invoice_lines(
        self, invoice_type: InvoiceType, subtotal: Decimal, igv: Decimal, total: Decimal
    ) -> list[JournalEntryLine]:
        accounts = self.rules.invoice_accounts
        if invoice_type == InvoiceType.SALE:
            return [
                self._line(accounts.receivable, debit=total),
                self._line(accounts.sales, credit=subtotal),
                self._line(accounts.output_tax, credit=igv),
            ]
        return [
            self._line(accounts.purchases, debit=subtotal),
            self._line(accounts.input_tax, debit=igv),
            self._line(accounts.payable, credit=total),
        ]

    def _write_entry(
        self,
        entry_date: date,
        business_id: int,
        description: str,
        lines: Sequence[JournalEntryLine],
        transaction_id: Optional[int] = None,
        invoice_id: Optional[int] = None,
        idempotency_key: Optional[str] = None,
    ) -> int:
        """Check an entry balances and write it.

        Raises:
            UnbalancedEntryError: If debits and credits differ or a line is negative
        """
        total_debit = sum((line.debit for line in lines), ZERO)
        total_credit = sum((line.credit for line in lines), ZERO)
        if any(line.debit < 0 or line.credit < 0 for line in lines):
            raise UnbalancedEntryError("Journal entry lines cannot be negative")
        if total_debit != total_credit:
            raise UnbalancedEntryError(unbalanced_entry(total_debit, total_credit))
        return self.db.create_journal_entry(
            date=entry_date,
            business_id=business_id,
            description=description,
            lines=lines,
            transaction_id=transaction_id,
            invoice_id=invoice_id,
            idempotency_key=idempotency_key,
        )


def _invoice_type_for(transaction_type: TransactionType) -> InvoiceType:
    if transaction_type == TransactionType.INCOME:
        return InvoiceType.SALE
    return InvoiceType.PURCHASE


def _single_item(description: str, subtotal: Decimal) -> InvoiceItem:
    return InvoiceItem(
        description=description or "",
        quantity=Decimal("1"),
        unit_price=subtotal,
        total=subtotal,
    )
