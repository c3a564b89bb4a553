"""Ledger aggregation service.

Builds the general ledger, account balances, income statement and balance
sheet from the posted journal lines. Nothing here writes.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Optional

from bookkeep.database.base import Database
from bookkeep.domain.entities import (
    AccountBalance,
    AccountLedger,
    AccountType,
    BalanceSheet,
    IncomeStatement,
    JournalEntry,
    LedgerEntry,
    StatementKind,
)
from bookkeep.domain.errors import NotFoundError, journal_entry_not_found
from bookkeep.utils.date_parser import get_period_range

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")

# Sheets within a cent of balancing are reported as balanced
BALANCE_TOLERANCE = Decimal("0.01")

_STATEMENT_TYPES = {
    StatementKind.INCOME_STATEMENT: (AccountType.INCOME, AccountType.EXPENSE),
    StatementKind.BALANCE_SHEET: (AccountType.ASSET, AccountType.LIABILITY, AccountType.EQUITY),
}

# Credit-normal types are shown with the sign flipped
_NEGATED_TYPES = {AccountType.LIABILITY, AccountType.EQUITY, AccountType.INCOME}


class LedgerService:
    """Service for reading the journal back as ledgers and statements."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_journal_entries(
        self, business_id: Optional[int] = None, period: Optional[str] = "all"
    ) -> list[JournalEntry]:
        """List journal entries with their lines.

        Args:
            business_id: Optional business filter (None for all businesses)
            period: Period preset or YYYY-MM token

        Returns:
            Entries ordered by date, then ID
        """
        start_date, end_date = get_period_range(period)
        return self.db.list_journal_entries(
            business_id=business_id, start_date=start_date, end_date=end_date
        )

    def get_journal_entry(self, entry_id: int) -> JournalEntry:
        """Get a journal entry with its lines.

        Raises:
            NotFoundError: If the entry does not exist
        """
        entry = self.db.get_journal_entry(entry_id)
        if entry is None:
            raise NotFoundError(journal_entry_not_found(entry_id))
        return entry

    def get_general_ledger(
        self,
        business_id: Optional[int] = None,
        period: Optional[str] = "all",
        account_code: Optional[str] = None,
    ) -> list[AccountLedger]:
        """Build per-account ledgers with running balances.

        Args:
            business_id: Optional business filter (None for all businesses)
            period: Period preset or YYYY-MM token
            account_code: Optional single account to report

        Returns:
            One AccountLedger per account with activity, ordered by code. The
            running balance starts at zero and adds ``debit - credit`` line by
            line in date order.
        """
        entries = self.list_journal_entries(business_id=business_id, period=period)

        # Entries arrive ordered by (date, id); lines keep their position
        grouped: dict[str, list[LedgerEntry]] = defaultdict(list)
        names: dict[str, str] = {}
        for entry in entries:
            for line in entry.lines:
                if account_code is not None and line.account_code != account_code:
                    continue
                names.setdefault(line.account_code, line.account_name)
                grouped[line.account_code].append(
                    LedgerEntry(
                        date=entry.date,
                        entry_id=entry.id,
                        description=entry.description,
                        debit=line.debit,
                        credit=line.credit,
                        balance=ZERO,
                    )
                )

        ledgers = []
        for code in sorted(grouped):
            running = ZERO
            rows = []
            for row in grouped[code]:
                running += row.debit - row.credit
                rows.append(
                    LedgerEntry(
                        date=row.date,
                        entry_id=row.entry_id,
                        description=row.description,
                        debit=row.debit,
                        credit=row.credit,
                        balance=running,
                    )
                )
            total_debit = sum((r.debit for r in rows), ZERO)
            total_credit = sum((r.credit for r in rows), ZERO)
            ledgers.append(
                AccountLedger(
                    code=code,
                    name=names[code],
                    entries=tuple(rows),
                    total_debit=total_debit,
                    total_credit=total_credit,
                    final_balance=total_debit - total_credit,
                )
            )
        return ledgers

    def get_account_balances(
        self,
        statement_kind: StatementKind | str,
        business_id: Optional[int] = None,
        period: Optional[str] = "all",
    ) -> list[AccountBalance]:
        """Compute displayed balances for the accounts of one statement.

        Income statement balances cover entries dated within the period.
        Balance sheet balances are cumulative up to the end of the period.

        Args:
            statement_kind: Income statement or balance sheet
            business_id: Optional business filter (None for all businesses)
            period: Period preset or YYYY-MM token

        Returns:
            Non-zero balances ordered by code. Assets and expenses are shown
            as debit minus credit; liabilities, equity and income the other
            way round.
        """
        kind = StatementKind(statement_kind)
        start_date, end_date = get_period_range(period)
        if kind == StatementKind.BALANCE_SHEET:
            start_date = None

        chart = {account.code: account for account in self.db.list_accounts()}
        wanted = _STATEMENT_TYPES[kind]

        sums: dict[str, Decimal] = defaultdict(lambda: ZERO)
        entries = self.db.list_journal_entries(
            business_id=business_id, start_date=start_date, end_date=end_date
        )
        for entry in entries:
            for line in entry.lines:
                sums[line.account_code] += line.debit - line.credit

        balances = []
        for code in sorted(sums):
            account = chart.get(code)
            if account is None:
                logger.debug("Account %s is not in the chart; left out of %s", code, kind.value)
                continue
            if account.account_type not in wanted:
                continue
            balance = sums[code]
            if account.account_type in _NEGATED_TYPES:
                balance = -balance
            if balance == 0:
                continue
            balances.append(
                AccountBalance(
                    code=code,
                    name=account.name,
                    account_type=account.account_type,
                    category=account.category,
                    balance=balance,
                )
            )
        return balances

    def get_income_statement(
        self, business_id: Optional[int] = None, period: Optional[str] = "all"
    ) -> IncomeStatement:
        """Income and expenses for a period and the resulting net income."""
        balances = self.get_account_balances(
            StatementKind.INCOME_STATEMENT, business_id=business_id, period=period
        )
        income = tuple(b for b in balances if b.account_type == AccountType.INCOME)
        expenses = tuple(b for b in balances if b.account_type == AccountType.EXPENSE)
        total_income = sum((b.balance for b in income), ZERO)
        total_expenses = sum((b.balance for b in expenses), ZERO)
        return IncomeStatement(
            income_accounts=income,
            expense_accounts=expenses,
            total_income=total_income,
            total_expenses=total_expenses,
            net_income=total_income - total_expenses,
        )

    def get_balance_sheet(
        self, business_id: Optional[int] = None, period: Optional[str] = "all"
    ) -> BalanceSheet:
        """Assets, liabilities and equity as of the end of a period.

        Income and expense balances are not closed into equity, so a sheet
        with unclosed results will not balance. That is reported on the
        result and logged, not corrected.
        """
        balances = self.get_account_balances(
            StatementKind.BALANCE_SHEET, business_id=business_id, period=period
        )
        assets = tuple(b for b in balances if b.account_type == AccountType.ASSET)
        liabilities = tuple(b for b in balances if b.account_type == AccountType.LIABILITY)
        equity = tuple(b for b in balances if b.account_type == AccountType.EQUITY)
        total_assets = sum((b.balance for b in assets), ZERO)
        total_liabilities = sum((b.balance for b in liabilities), ZERO)
        total_equity = sum((b.balance for b in equity), ZERO)
        difference = total_assets - (total_liabilities + total_equity)
        is_balanced = abs(difference) < BALANCE_TOLERANCE
        if not is_balanced:
            logger.warning(
                "Balance sheet does not balance: assets %s, liabilities + equity %s (difference %s)",
                total_assets,
                total_liabilities + total_equity,
                difference,
            )
        return BalanceSheet(
            asset_accounts=assets,
            liability_accounts=liabilities,
            equity_accounts=equity,
            total_assets=total_assets,
            total_liabilities=total_liabilities,
            total_equity=total_equity,
            difference=difference,
            is_balanced=is_balanced,
        )
