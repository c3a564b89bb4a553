"""IGV arithmetic and the tax summary service."""

from decimal import Decimal
from typing import Optional

from bookkeep.database.base import Database
from bookkeep.domain.entities import InvoiceType, TaxSummary
from bookkeep.utils.amount_parser import money
from bookkeep.utils.date_parser import get_period_range

IGV_RATE = Decimal("0.18")

# IGV is levied in soles only
TAX_CURRENCY = "PEN"


def calculate_tax(subtotal: Decimal, rate: Decimal = IGV_RATE) -> Decimal:
    """Tax due on a tax-exclusive subtotal, rounded to cents."""
    return money(Decimal(subtotal) * rate)


def split_tax_inclusive(
    amount: Decimal, rate: Decimal = IGV_RATE
) -> tuple[Decimal, Decimal]:
    """Split a tax-inclusive amount into (subtotal, tax).

    The subtotal is rounded half-up to cents first and the tax is the
    remainder, so ``subtotal + tax`` always equals the rounded amount.

    Args:
        amount: Tax-inclusive amount
        rate: Tax rate (0.18 for IGV)

    Returns:
        Tuple of (subtotal, tax)
    """
    total = money(amount)
    subtotal = money(total / (Decimal("1") + rate))
    return subtotal, total - subtotal


class TaxService:
    """Service for summarizing invoice tax over a period."""

    def __init__(self, db: Database):
        """Initialize tax service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_tax_summary(
        self,
        business_id: Optional[int] = None,
        period: Optional[str] = "all",
        currency: Optional[str] = None,
    ) -> TaxSummary:
        """Get output tax, input tax credit and net position.

        Args:
            business_id: Optional business filter (None for all businesses)
            period: Period preset or YYYY-MM token
            currency: Optional currency filter. Only PEN invoices carry IGV,
                so any other currency reports zero figures.

        Returns:
            TaxSummary for the period
        """
        currency = (currency or TAX_CURRENCY).upper()
        zero = Decimal("0.00")
        if currency != TAX_CURRENCY:
            return TaxSummary(zero, zero, zero, currency=currency)

        start_date, end_date = get_period_range(period)
        invoices = self.db.list_invoices(
            business_id=business_id,
            start_date=start_date,
            end_date=end_date,
            currency=TAX_CURRENCY,
        )

        sales_tax = money(
            sum((inv.igv for inv in invoices if inv.type == InvoiceType.SALE), zero)
        )
        purchase_tax_credit = money(
            sum((inv.igv for inv in invoices if inv.type == InvoiceType.PURCHASE), zero)
        )
        return TaxSummary(
            sales_tax=sales_tax,
            purchase_tax_credit=purchase_tax_credit,
            net_tax_position=sales_tax - purchase_tax_credit,
            currency=currency,
        )
