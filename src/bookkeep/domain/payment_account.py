"""Payment account service and balance calculator."""

from decimal import Decimal
from typing import Optional

from bookkeep.database.base import Database
from bookkeep.domain.entities import (
    AccountMovement,
    MovementType,
    PaymentAccount,
    PaymentAccountBalance,
    PaymentAccountType,
    Transaction,
    TransactionType,
)
from bookkeep.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_name,
    payment_account_not_found,
)
from bookkeep.utils.date_parser import get_period_range

ZERO = Decimal("0.00")

DEFAULT_PAYMENT_ACCOUNTS: list[tuple[str, PaymentAccountType]] = [
    ("BCP", PaymentAccountType.BANK),
    ("Interbank", PaymentAccountType.BANK),
    ("Yape", PaymentAccountType.WALLET),
    ("Caja Chica", PaymentAccountType.CASH),
]


def _movements_for(account_name: str, transaction: Transaction) -> list[tuple[MovementType, str]]:
    """Movements a transaction causes on one payment account."""
    movements = []
    if transaction.type == TransactionType.INCOME and transaction.to_account == account_name:
        movements.append((MovementType.INCOME, transaction.description or "Ingreso"))
    if transaction.type == TransactionType.EXPENSE and transaction.from_account == account_name:
        movements.append((MovementType.EXPENSE, transaction.description or "Egreso"))
    if transaction.type == TransactionType.TRANSFER:
        if transaction.from_account == account_name:
            movements.append(
                (MovementType.TRANSFER_OUT, f"Transferencia a {transaction.to_account}")
            )
        if transaction.to_account == account_name:
            movements.append(
                (MovementType.TRANSFER_IN, f"Transferencia desde {transaction.from_account}")
            )
    return movements


class PaymentAccountService:
    """Service for managing payment accounts and replaying their balances."""

    def __init__(self, db: Database):
        """Initialize payment account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_payment_account(
        self, name: str, type: str | PaymentAccountType, currency: str = "PEN"
    ) -> int:
        """Create a payment account.

        Args:
            name: Account name, as written on transactions
            type: "bank", "wallet" or "cash"
            currency: Currency code

        Returns:
            Payment account ID

        Raises:
            ValidationError: If the name is empty or the type unknown
            ConflictError: If an account with the same name exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Payment account name is required", field="name")
        try:
            account_type = PaymentAccountType(type)
        except ValueError:
            raise ValidationError(
                f"Payment account type must be bank, wallet or cash, got '{type}'", field="type"
            )
        if self.db.get_payment_account_by_name(name) is not None:
            raise ConflictError(duplicate_name("Payment account", name))
        return self.db.create_payment_account(
            name=name, type=account_type.value, currency=(currency or "PEN").upper()
        )

    def get_payment_account(self, account_id: int) -> Optional[PaymentAccount]:
        """Get payment account by ID."""
        return self.db.get_payment_account(account_id)

    def get_payment_account_by_name(self, name: str) -> Optional[PaymentAccount]:
        """Get payment account by name."""
        return self.db.get_payment_account_by_name(name)

    def list_payment_accounts(self, include_inactive: bool = False) -> list[PaymentAccount]:
        """List payment accounts ordered by name."""
        return self.db.list_payment_accounts(include_inactive=include_inactive)

    def deactivate_payment_account(self, name: str) -> None:
        """Hide a payment account from balances. Its transactions are kept.

        Raises:
            NotFoundError: If no account has that name
        """
        account = self.db.get_payment_account_by_name(name)
        if account is None:
            raise NotFoundError(payment_account_not_found(name))
        self.db.set_payment_account_active(account.id, False)

    def seed_defaults(self) -> int:
        """Create the stock payment accounts that do not exist yet.

        Returns:
            Number of accounts created
        """
        created = 0
        with self.db.atomic("seed payment accounts"):
            for name, account_type in DEFAULT_PAYMENT_ACCOUNTS:
                if self.db.get_payment_account_by_name(name) is None:
                    self.db.create_payment_account(name=name, type=account_type.value)
                    created += 1
        return created

    def get_payment_account_balances(
        self, business_id: Optional[int] = None, period: Optional[str] = "all"
    ) -> list[PaymentAccountBalance]:
        """Replay transactions into per-account balances and movements.

        Transactions are matched to accounts by name. Incoming amounts
        (income and transfers in) add to the running balance and to
        ``total_income``; outgoing ones (expenses and transfers out) subtract
        and add to ``total_expense``.

        Args:
            business_id: Optional business filter (None for all businesses)
            period: Period preset or YYYY-MM token

        Returns:
            One PaymentAccountBalance per active account, ordered by name
        """
        start_date, end_date = get_period_range(period)
        transactions = self.db.list_transactions(
            business_id=business_id, start_date=start_date, end_date=end_date
        )
        business_names = {b.id: b.name for b in self.db.list_businesses()}

        results = []
        for account in self.db.list_payment_accounts():
            total_income = ZERO
            total_expense = ZERO
            running = ZERO
            movements = []
            for transaction in transactions:
                for movement_type, description in _movements_for(account.name, transaction):
                    if movement_type in (MovementType.INCOME, MovementType.TRANSFER_IN):
                        running += transaction.amount
                        total_income += transaction.amount
                    else:
                        running -= transaction.amount
                        total_expense += transaction.amount
                    movements.append(
                        AccountMovement(
                            date=transaction.date,
                            description=description,
                            type=movement_type,
                            amount=transaction.amount,
                            balance=running,
                            business_name=business_names.get(transaction.business_id, ""),
                            currency=transaction.currency or "PEN",
                        )
                    )
            results.append(
                PaymentAccountBalance(
                    account_name=account.name,
                    account_type=account.type,
                    account_currency=account.currency or "PEN",
                    total_income=total_income,
                    total_expense=total_expense,
                    net_balance=total_income - total_expense,
                    movements=tuple(movements),
                )
            )
        return results
