"""Invoice domain service (read side)."""

from typing import Optional

from bookkeep.database.base import Database
from bookkeep.domain.entities import Invoice, InvoiceType
from bookkeep.domain.errors import NotFoundError, invoice_not_found
from bookkeep.utils.date_parser import get_period_range


class InvoiceService:
    """Service for reading invoices. Invoices are written by the posting engine."""

    def __init__(self, db: Database):
        """Initialize invoice service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_invoice(self, invoice_id: int) -> Invoice:
        """Get an invoice with its items.

        Raises:
            NotFoundError: If the invoice does not exist
        """
        invoice = self.db.get_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        return invoice

    def list_invoices(
        self,
        business_id: Optional[int] = None,
        period: Optional[str] = "all",
        type: Optional[str | InvoiceType] = None,
    ) -> list[Invoice]:
        """List invoices with optional filters, ordered by date then ID."""
        start_date, end_date = get_period_range(period)
        return self.db.list_invoices(
            business_id=business_id,
            start_date=start_date,
            end_date=end_date,
            type=InvoiceType(type).value if type else None,
        )
