"""Posting requests accepted by the posting engine.

Each transaction type is its own request class carrying exactly the fields
that type needs, validated when the request is built. Callers holding loose
input (CLI options, CSV rows) go through ``build_transaction_request``.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import ClassVar, Optional, Sequence, Union

from bookkeep.domain.entities import InvoiceType, TransactionType
from bookkeep.domain.errors import ValidationError
from bookkeep.domain.tax import calculate_tax
from bookkeep.utils.amount_parser import money

DEFAULT_CURRENCY = "PEN"
DEFAULT_CLIENT = "Sin nombre"


def _positive_amount(value, field_name: str = "amount") -> Decimal:
    try:
        amount = money(value)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field_name} must be a number, got {value!r}", field=field_name)
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a number, got {value!r}", field=field_name)
    if amount <= 0:
        raise ValidationError(f"{field_name} must be greater than zero", field=field_name)
    return amount


def _required_text(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required", field=field_name)
    return str(value).strip()


def _payment_account(value: Optional[str], field_name: str, invoiced: bool) -> Optional[str]:
    # Invoiced postings debit receivables or credit payables, never a payment account.
    if invoiced and (value is None or not str(value).strip()):
        return None
    return _required_text(value, field_name)


@dataclass(frozen=True)
class InvoiceFields:
    """Invoice data attached to an invoiced income or expense."""

    invoice_number: str = ""
    client_supplier: str = DEFAULT_CLIENT
    ruc: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class TransactionRequest:
    """Fields shared by every transaction type."""

    type: ClassVar[TransactionType]

    date: date
    business_id: int
    amount: Decimal
    description: str = ""
    reference: Optional[str] = None
    currency: str = DEFAULT_CURRENCY
    idempotency_key: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.date, date):
            raise ValidationError("date must be a date", field="date")
        if self.business_id is None:
            raise ValidationError("business_id is required", field="business_id")
        object.__setattr__(self, "amount", _positive_amount(self.amount))
        object.__setattr__(self, "description", (self.description or "").strip())
        object.__setattr__(self, "currency", _required_text(self.currency, "currency").upper())

    @property
    def is_invoiced(self) -> bool:
        return getattr(self, "invoice", None) is not None


@dataclass(frozen=True, kw_only=True)
class IncomeRequest(TransactionRequest):
    """Money received into a payment account.

    ``to_account`` may be left out when the income is invoiced.
    """

    type: ClassVar[TransactionType] = TransactionType.INCOME

    category_id: int
    to_account: Optional[str] = None
    invoice: Optional[InvoiceFields] = None

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(
            self, "to_account", _payment_account(self.to_account, "to_account", self.is_invoiced)
        )
        if self.category_id is None:
            raise ValidationError("category_id is required for income", field="category_id")


@dataclass(frozen=True, kw_only=True)
class ExpenseRequest(TransactionRequest):
    """Money paid out of a payment account.

    ``from_account`` may be left out when the expense is invoiced.
    """

    type: ClassVar[TransactionType] = TransactionType.EXPENSE

    category_id: int
    from_account: Optional[str] = None
    invoice: Optional[InvoiceFields] = None

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(
            self,
            "from_account",
            _payment_account(self.from_account, "from_account", self.is_invoiced),
        )
        if self.category_id is None:
            raise ValidationError("category_id is required for expenses", field="category_id")


@dataclass(frozen=True, kw_only=True)
class TransferRequest(TransactionRequest):
    """Money moved between two payment accounts."""

    type: ClassVar[TransactionType] = TransactionType.TRANSFER

    from_account: str
    to_account: str

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "from_account", _required_text(self.from_account, "from_account"))
        object.__setattr__(self, "to_account", _required_text(self.to_account, "to_account"))
        if self.from_account == self.to_account:
            raise ValidationError(
                "Transfer source and destination must differ", field="to_account"
            )


AnyTransactionRequest = Union[IncomeRequest, ExpenseRequest, TransferRequest]


def build_transaction_request(
    type: str | TransactionType,
    *,
    date: date,
    business_id: int,
    amount,
    category_id: Optional[int] = None,
    from_account: Optional[str] = None,
    to_account: Optional[str] = None,
    description: Optional[str] = None,
    reference: Optional[str] = None,
    currency: Optional[str] = None,
    idempotency_key: Optional[str] = None,
    is_invoiced: bool = False,
    invoice_number: Optional[str] = None,
    client_supplier: Optional[str] = None,
    ruc: Optional[str] = None,
) -> AnyTransactionRequest:
    """Build the request variant for a transaction type from loose input.

    Fields that do not apply to the type (a category on a transfer, a source
    account on an income) are ignored. Invoice fields only apply to income
    and expense; a request is invoiced when ``is_invoiced`` is set or an
    invoice number is given.

    Raises:
        ValidationError: If the type is unknown or required fields are missing
    """
    try:
        txn_type = TransactionType(type)
    except ValueError:
        raise ValidationError(
            f"Unknown transaction type '{type}'. Expected income, expense or transfer",
            field="type",
        )

    common = dict(
        date=date,
        business_id=business_id,
        amount=amount,
        description=description or "",
        reference=reference or None,
        currency=currency or DEFAULT_CURRENCY,
        idempotency_key=idempotency_key,
    )

    if txn_type == TransactionType.TRANSFER:
        return TransferRequest(from_account=from_account, to_account=to_account, **common)

    invoice = None
    if is_invoiced or invoice_number:
        invoice = InvoiceFields(
            invoice_number=(invoice_number or "").strip(),
            client_supplier=(client_supplier or "").strip() or DEFAULT_CLIENT,
            ruc=ruc or None,
        )

    if txn_type == TransactionType.INCOME:
        return IncomeRequest(
            to_account=to_account, category_id=category_id, invoice=invoice, **common
        )
    return ExpenseRequest(
        from_account=from_account, category_id=category_id, invoice=invoice, **common
    )


@dataclass(frozen=True)
class InvoiceItemRequest:
    """Caller supplied invoice line."""

    description: str
    quantity: Decimal
    unit_price: Decimal

    def __post_init__(self):
        object.__setattr__(self, "description", _required_text(self.description, "description"))
        try:
            quantity = Decimal(str(self.quantity))
        except InvalidOperation:
            raise ValidationError(f"quantity must be a number, got {self.quantity!r}", field="quantity")
        if not quantity.is_finite() or quantity <= 0:
            raise ValidationError("quantity must be greater than zero", field="quantity")
        try:
            unit_price = money(self.unit_price)
        except (InvalidOperation, ValueError):
            raise ValidationError(f"unit_price must be a number, got {self.unit_price!r}", field="unit_price")
        if not unit_price.is_finite():
            raise ValidationError(f"unit_price must be a number, got {self.unit_price!r}", field="unit_price")
        if unit_price < 0:
            raise ValidationError("unit_price cannot be negative", field="unit_price")
        object.__setattr__(self, "quantity", quantity)
        object.__setattr__(self, "unit_price", unit_price)

    @property
    def total(self) -> Decimal:
        return money(self.quantity * self.unit_price)


@dataclass(frozen=True)
class InvoiceRequest:
    """Invoice entered directly, not through a transaction.

    When ``subtotal``, ``igv`` and ``total`` are omitted they are derived
    from the items at the IGV rate. When given, ``total`` must equal
    ``subtotal + igv`` so the journal entry balances.
    """

    type: InvoiceType
    date: date
    business_id: int
    client_supplier: str
    invoice_number: str
    items: Sequence[InvoiceItemRequest]
    ruc: Optional[str] = None
    subtotal: Optional[Decimal] = None
    igv: Optional[Decimal] = None
    total: Optional[Decimal] = None
    currency: str = DEFAULT_CURRENCY
    idempotency_key: Optional[str] = None

    def __post_init__(self):
        try:
            object.__setattr__(self, "type", InvoiceType(self.type))
        except ValueError:
            raise ValidationError(
                f"Unknown invoice type '{self.type}'. Expected sale or purchase", field="type"
            )
        if not isinstance(self.date, date):
            raise ValidationError("date must be a date", field="date")
        if self.business_id is None:
            raise ValidationError("business_id is required", field="business_id")
        object.__setattr__(self, "client_supplier", _required_text(self.client_supplier, "client_supplier"))
        object.__setattr__(self, "invoice_number", _required_text(self.invoice_number, "invoice_number"))
        object.__setattr__(self, "currency", _required_text(self.currency, "currency").upper())
        if not self.items:
            raise ValidationError("An invoice needs at least one item", field="items")
        object.__setattr__(self, "items", tuple(self.items))

        if self.subtotal is None and self.igv is None and self.total is None:
            subtotal = money(sum((item.total for item in self.items), Decimal("0")))
            igv = calculate_tax(subtotal)
            if subtotal <= 0:
                raise ValidationError("Invoice total must be greater than zero", field="items")
            object.__setattr__(self, "subtotal", subtotal)
            object.__setattr__(self, "igv", igv)
            object.__setattr__(self, "total", subtotal + igv)
            return

        if self.subtotal is None or self.igv is None:
            raise ValidationError(
                "subtotal and igv must be given together", field="subtotal"
            )
        subtotal = money(self.subtotal)
        igv = money(self.igv)
        total = money(self.total) if self.total is not None else subtotal + igv
        if subtotal < 0 or igv < 0:
            raise ValidationError("Invoice amounts cannot be negative", field="subtotal")
        if total != subtotal + igv:
            raise ValidationError(
                f"total {total} must equal subtotal {subtotal} + igv {igv}", field="total"
            )
        if total <= 0:
            raise ValidationError("Invoice total must be greater than zero", field="total")
        object.__setattr__(self, "subtotal", subtotal)
        object.__setattr__(self, "igv", igv)
        object.__setattr__(self, "total", total)
