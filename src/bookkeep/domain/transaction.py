"""Transaction domain service (read side).

Transactions are written only through the posting engine so every row has
its journal entry; this service looks them up.
"""

from typing import Optional

from bookkeep.database.base import Database
from bookkeep.domain.entities import Transaction, TransactionType
from bookkeep.domain.errors import NotFoundError, transaction_not_found
from bookkeep.utils.date_parser import get_period_range


class TransactionService:
    """Service for reading transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> Transaction:
        """Get transaction by ID, raising NotFoundError if it does not exist."""
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return transaction

    def list_transactions(
        self,
        business_id: Optional[int] = None,
        period: Optional[str] = "all",
        type: Optional[str | TransactionType] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters.

        Args:
            business_id: Optional business filter
            period: Period preset or YYYY-MM token
            type: Optional transaction type filter

        Returns:
            Transactions ordered by date, then ID
        """
        start_date, end_date = get_period_range(period)
        return self.db.list_transactions(
            business_id=business_id,
            start_date=start_date,
            end_date=end_date,
            type=TransactionType(type).value if type else None,
        )
