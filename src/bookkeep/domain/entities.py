"""Domain model entities for bookkeep.

These are pure data classes representing bookkeeping concepts, independent of
database schema. Services and reports only ever hand out these types; the ORM
models stay inside the database package.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Chart of accounts classification."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    INCOME = "income"
    EXPENSE = "expense"


class BalanceSide(str, Enum):
    """Side on which an account normally carries its balance."""

    DEBIT = "debit"
    CREDIT = "credit"


class TransactionType(str, Enum):
    """Kind of cash movement."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class InvoiceType(str, Enum):
    """Sale (output tax) or purchase (input tax credit) invoice."""

    SALE = "sale"
    PURCHASE = "purchase"


class PaymentAccountType(str, Enum):
    """Kind of real-world cash location."""

    BANK = "bank"
    WALLET = "wallet"
    CASH = "cash"


class MovementType(str, Enum):
    """Direction of a payment account movement."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER_IN = "transfer_in"
    TRANSFER_OUT = "transfer_out"


class StatementKind(str, Enum):
    """Financial statement shapes built from account balances."""

    INCOME_STATEMENT = "income-statement"
    BALANCE_SHEET = "balance-sheet"


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry."""

    code: str
    name: str
    account_type: AccountType
    category: str
    normal_balance: BalanceSide
    parent_code: Optional[str] = None


@dataclass(frozen=True)
class Business:
    """Business unit owning transactions, invoices and entries."""

    id: int
    name: str
    color: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class TransactionCategory:
    """Income or expense category selected on a transaction."""

    id: int
    name: str
    type: TransactionType


@dataclass(frozen=True)
class PaymentAccount:
    """Bank account, wallet or cash box."""

    id: int
    name: str
    type: PaymentAccountType
    currency: str
    is_active: bool


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    date: date
    type: TransactionType
    business_id: int
    category_id: Optional[int]
    amount: Decimal
    currency: str
    from_account: Optional[str]
    to_account: Optional[str]
    description: str
    reference: Optional[str]
    is_invoiced: bool
    invoice_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class InvoiceItem:
    """Invoice line item."""

    description: str
    quantity: Decimal
    unit_price: Decimal
    total: Decimal
    id: Optional[int] = None


@dataclass(frozen=True)
class Invoice:
    """Invoice domain entity."""

    id: int
    type: InvoiceType
    date: date
    business_id: int
    client_supplier: str
    ruc: Optional[str]
    invoice_number: str
    subtotal: Decimal
    igv: Decimal
    total: Decimal
    currency: str
    created_at: datetime
    items: tuple[InvoiceItem, ...] = ()


@dataclass(frozen=True)
class JournalEntryLine:
    """One debit or credit line of a journal entry."""

    account_code: str
    account_name: str
    debit: Decimal
    credit: Decimal
    position: int = 0


@dataclass(frozen=True)
class JournalEntry:
    """Balanced set of lines recording one business event."""

    id: int
    date: date
    business_id: int
    description: str
    transaction_id: Optional[int]
    invoice_id: Optional[int]
    idempotency_key: Optional[str]
    created_at: datetime
    lines: tuple[JournalEntryLine, ...] = ()

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), Decimal("0"))

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit


@dataclass(frozen=True)
class PostedTransaction:
    """Result of posting a plain transaction."""

    transaction: Transaction
    entry: JournalEntry


@dataclass(frozen=True)
class PostedInvoicedTransaction:
    """Result of posting a transaction together with its invoice.

    ``invoice`` is None when the request was a transfer, which is never
    invoiced.
    """

    transaction: Transaction
    invoice: Optional[Invoice]
    entry: JournalEntry


@dataclass(frozen=True)
class PostedInvoice:
    """Result of posting an invoice entered directly."""

    invoice: Invoice
    entry: JournalEntry


@dataclass(frozen=True)
class LedgerEntry:
    """One line in an account's general ledger with the balance after it."""

    date: date
    entry_id: int
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal


@dataclass(frozen=True)
class AccountLedger:
    """General ledger for a single account code."""

    code: str
    name: str
    entries: tuple[LedgerEntry, ...]
    total_debit: Decimal
    total_credit: Decimal
    final_balance: Decimal


@dataclass(frozen=True)
class AccountBalance:
    """Statement line: an account and its displayed balance."""

    code: str
    name: str
    account_type: AccountType
    category: str
    balance: Decimal


@dataclass(frozen=True)
class IncomeStatement:
    """Income and expense balances over a period."""

    income_accounts: tuple[AccountBalance, ...]
    expense_accounts: tuple[AccountBalance, ...]
    total_income: Decimal
    total_expenses: Decimal
    net_income: Decimal


@dataclass(frozen=True)
class BalanceSheet:
    """Asset, liability and equity balances as of a date.

    ``is_balanced`` and ``difference`` report the accounting equation check;
    an unbalanced sheet is returned as computed.
    """

    asset_accounts: tuple[AccountBalance, ...]
    liability_accounts: tuple[AccountBalance, ...]
    equity_accounts: tuple[AccountBalance, ...]
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    difference: Decimal
    is_balanced: bool


@dataclass(frozen=True)
class AccountMovement:
    """One transaction as seen from a payment account."""

    date: date
    description: str
    type: MovementType
    amount: Decimal
    balance: Decimal
    business_name: str
    currency: str


@dataclass(frozen=True)
class PaymentAccountBalance:
    """Activity and running balance of one payment account."""

    account_name: str
    account_type: PaymentAccountType
    account_currency: str
    total_income: Decimal
    total_expense: Decimal
    net_balance: Decimal
    movements: tuple[AccountMovement, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class TaxSummary:
    """Output tax, input tax credit and the resulting position."""

    sales_tax: Decimal
    purchase_tax_credit: Decimal
    net_tax_position: Decimal
    currency: str = "PEN"

    @property
    def is_payable(self) -> bool:
        return self.net_tax_position >= 0


MONTH_LABELS = ("Ene", "Feb", "Mar", "Abr", "May", "Jun", "Jul", "Ago", "Sep", "Oct", "Nov", "Dic")


@dataclass(frozen=True)
class MonthlyTotals:
    """Income and expense of one calendar month."""

    month: date
    income: Decimal
    expense: Decimal

    @property
    def label(self) -> str:
        return MONTH_LABELS[self.month.month - 1]


@dataclass(frozen=True)
class BusinessSummary:
    """Headline figures for a period, with the IGV position and a monthly trend.

    Totals come from income and expense transactions; transfers only move
    money between payment accounts and are left out. ``profit_margin`` is a
    percentage of income (zero when there is no income).
    """

    start_date: Optional[date]
    end_date: Optional[date]
    total_income: Decimal
    total_expense: Decimal
    net_profit: Decimal
    profit_margin: Decimal
    tax: TaxSummary
    monthly_trend: tuple[MonthlyTotals, ...] = field(default_factory=tuple)
