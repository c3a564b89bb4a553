"""Business summary domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from dateutil.relativedelta import relativedelta

from bookkeep.database.base import Database
from bookkeep.domain.entities import (
    BusinessSummary,
    MonthlyTotals,
    Transaction,
    TransactionType,
)
from bookkeep.domain.tax import TaxService
from bookkeep.utils.amount_parser import money
from bookkeep.utils.date_parser import get_period_range

ZERO = Decimal("0.00")

TREND_MONTHS = 5


def _income_and_expense(transactions: Sequence[Transaction]) -> tuple[Decimal, Decimal]:
    income = sum((t.amount for t in transactions if t.type == TransactionType.INCOME), ZERO)
    expense = sum((t.amount for t in transactions if t.type == TransactionType.EXPENSE), ZERO)
    return money(income), money(expense)


class SummaryService:
    """Service for building the per-period business summary."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db
        self.tax_service = TaxService(db)

    def get_summary(
        self,
        business_id: Optional[int] = None,
        period: Optional[str] = "current-month",
        trend_months: int = TREND_MONTHS,
        as_of: Optional[date] = None,
    ) -> BusinessSummary:
        """Build income, expense, profit, IGV and trend figures.

        Args:
            business_id: Optional business filter (None for all businesses)
            period: Period preset or YYYY-MM token
            trend_months: Number of months in the trend, oldest first
            as_of: Month the trend ends in. Defaults to the month the period
                ends in, or the current month for unbounded periods.

        Returns:
            BusinessSummary for the period

        Raises:
            ValueError: If the period is unknown or trend_months is not positive
        """
        if trend_months < 1:
            raise ValueError("trend_months must be at least 1")
        start_date, end_date = get_period_range(period)
        transactions = self.db.list_transactions(
            business_id=business_id, start_date=start_date, end_date=end_date
        )
        total_income, total_expense = _income_and_expense(transactions)
        net_profit = total_income - total_expense
        profit_margin = money(net_profit / total_income * 100) if total_income > 0 else ZERO

        return BusinessSummary(
            start_date=start_date,
            end_date=end_date,
            total_income=total_income,
            total_expense=total_expense,
            net_profit=net_profit,
            profit_margin=profit_margin,
            tax=self.tax_service.get_tax_summary(business_id=business_id, period=period),
            monthly_trend=tuple(
                self.get_monthly_trend(
                    business_id=business_id,
                    months=trend_months,
                    as_of=as_of or end_date or date.today(),
                )
            ),
        )

    def get_monthly_trend(
        self,
        business_id: Optional[int] = None,
        months: int = TREND_MONTHS,
        as_of: Optional[date] = None,
    ) -> list[MonthlyTotals]:
        """Income and expense per calendar month, ending with the month of ``as_of``.

        Months without activity are reported with zero totals.
        """
        last_month = (as_of or date.today()).replace(day=1)
        first_month = last_month - relativedelta(months=months - 1)
        transactions = self.db.list_transactions(
            business_id=business_id,
            start_date=first_month,
            end_date=last_month + relativedelta(months=1, days=-1),
        )
        grouped = self.group_transactions_by_month(transactions)

        trend = []
        for offset in range(months):
            month = first_month + relativedelta(months=offset)
            income, expense = _income_and_expense(grouped.get(month, []))
            trend.append(MonthlyTotals(month=month, income=income, expense=expense))
        return trend

    @staticmethod
    def group_transactions_by_month(
        transactions: Sequence[Transaction],
    ) -> dict[date, list[Transaction]]:
        """Group transactions under the first day of their month."""
        grouped: dict[date, list[Transaction]] = {}
        for transaction in transactions:
            grouped.setdefault(transaction.date.replace(day=1), []).append(transaction)
        return grouped
