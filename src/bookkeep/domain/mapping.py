"""Account mapping rules.

Decide which chart of accounts codes a transaction debits and credits. The
rules are plain configuration: build them with ``default_mapping_rules`` or
load overrides from JSON with ``load_mapping_rules`` and hand them to the
posting service.

Unknown payment accounts and categories fall back to default codes and log a
warning. With ``strict=True`` they raise ValidationError instead.
"""

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from bookkeep.domain.errors import ValidationError
from bookkeep.domain.requests import (
    AnyTransactionRequest,
    ExpenseRequest,
    IncomeRequest,
    TransferRequest,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryMapping:
    """Debit and credit codes plus the narrative used for a category."""

    debit: str
    credit: str
    label: str


@dataclass(frozen=True)
class InvoiceAccounts:
    """Codes used by the three-line invoice entries."""

    receivable: str = "1212"
    sales: str = "7011"
    output_tax: str = "4011"
    purchases: str = "6011"
    input_tax: str = "4011"
    payable: str = "4212"


@dataclass(frozen=True)
class ResolvedAccounts:
    """Outcome of applying the rules to one transaction."""

    debit_code: str
    credit_code: str
    narrative: str


DEFAULT_PAYMENT_ACCOUNT_CODES: dict[str, str] = {
    "BCP": "1041",
    "Interbank": "1042",
    "Yape": "1043",
    "Caja Chica": "1011",
}

DEFAULT_INCOME_MAPPINGS: dict[int, CategoryMapping] = {
    1: CategoryMapping("1041", "7011", "Venta de productos"),
    2: CategoryMapping("1041", "7041", "Servicios prestados"),
    3: CategoryMapping("1041", "7591", "Delivery"),
    4: CategoryMapping("1041", "7592", "Comisiones"),
    5: CategoryMapping("1041", "7593", "Ingresos extraordinarios"),
    6: CategoryMapping("1041", "7594", "Reembolso de gastos"),
    7: CategoryMapping("1041", "7711", "Ingresos financieros"),
}

DEFAULT_EXPENSE_MAPPINGS: dict[int, CategoryMapping] = {
    8: CategoryMapping("6011", "1041", "Compra de mercadería"),
    9: CategoryMapping("6361", "1041", "Servicios públicos"),
    10: CategoryMapping("6362", "1041", "Internet y teléfono"),
    11: CategoryMapping("6352", "1041", "Alquiler"),
    12: CategoryMapping("6211", "1041", "Sueldos"),
    13: CategoryMapping("6212", "1041", "Honorarios profesionales"),
    14: CategoryMapping("6371", "1041", "Publicidad"),
    15: CategoryMapping("6311", "1041", "Transporte"),
    16: CategoryMapping("6391", "1041", "Comisiones bancarias"),
    17: CategoryMapping("6411", "1041", "Impuestos"),
    18: CategoryMapping("6343", "1041", "Mantenimiento"),
    19: CategoryMapping("3361", "1041", "Equipos"),
    20: CategoryMapping("6563", "1041", "Suministros de oficina"),
    21: CategoryMapping("6521", "1041", "Seguros"),
    22: CategoryMapping("6571", "1041", "Capacitación"),
    23: CategoryMapping("6599", "1041", "Otros gastos operativos"),
}


@dataclass(frozen=True)
class AccountMappingRules:
    """Mapping from (type, category, payment account) to ledger codes."""

    payment_accounts: Mapping[str, str] = field(
        default_factory=lambda: dict(DEFAULT_PAYMENT_ACCOUNT_CODES)
    )
    income: Mapping[int, CategoryMapping] = field(
        default_factory=lambda: dict(DEFAULT_INCOME_MAPPINGS)
    )
    expense: Mapping[int, CategoryMapping] = field(
        default_factory=lambda: dict(DEFAULT_EXPENSE_MAPPINGS)
    )
    default_cash_code: str = "1041"
    default_revenue_code: str = "7011"
    default_expense_code: str = "6599"
    invoice_accounts: InvoiceAccounts = field(default_factory=InvoiceAccounts)
    strict: bool = False

    def _fallback(self, message: str, field_name: str) -> None:
        if self.strict:
            raise ValidationError(message, field=field_name)
        logger.warning(message)

    def payment_account_code(
        self, name: Optional[str], fallback: Optional[str] = None, field_name: str = "account"
    ) -> str:
        """Ledger code for a payment account name.

        Args:
            name: Payment account name as written on the transaction (None when
                the transaction names none)
            fallback: Code to use when the name is unmapped (defaults to the
                default cash code)
            field_name: Request field reported when strict

        Returns:
            Chart of accounts code
        """
        if name is None:
            code = fallback or self.default_cash_code
            self._fallback(f"No payment account given; using {code}", field_name)
            return code
        code = self.payment_accounts.get(name)
        if code is not None:
            return code
        code = fallback or self.default_cash_code
        self._fallback(
            f"Payment account '{name}' has no ledger mapping; using {code}",
            field_name,
        )
        return code

    def resolve(self, request: AnyTransactionRequest) -> ResolvedAccounts:
        """Resolve debit code, credit code and narrative for a request."""
        if isinstance(request, TransferRequest):
            return ResolvedAccounts(
                debit_code=self.payment_account_code(
                    request.to_account, field_name="to_account"
                ),
                credit_code=self.payment_account_code(
                    request.from_account, field_name="from_account"
                ),
                narrative=f"Transferencia de {request.from_account} a {request.to_account}",
            )

        if isinstance(request, IncomeRequest):
            mapping = self.income.get(request.category_id)
            if mapping is None:
                self._fallback(
                    f"Income category {request.category_id} has no mapping; "
                    f"crediting {self.default_revenue_code}",
                    "category_id",
                )
            debit_code = self.payment_account_code(
                request.to_account,
                fallback=mapping.debit if mapping else None,
                field_name="to_account",
            )
            return ResolvedAccounts(
                debit_code=debit_code,
                credit_code=mapping.credit if mapping else self.default_revenue_code,
                narrative=mapping.label if mapping else request.description,
            )

        if isinstance(request, ExpenseRequest):
            mapping = self.expense.get(request.category_id)
            if mapping is None:
                self._fallback(
                    f"Expense category {request.category_id} has no mapping; "
                    f"debiting {self.default_expense_code}",
                    "category_id",
                )
            credit_code = self.payment_account_code(
                request.from_account,
                fallback=mapping.credit if mapping else None,
                field_name="from_account",
            )
            return ResolvedAccounts(
                debit_code=mapping.debit if mapping else self.default_expense_code,
                credit_code=credit_code,
                narrative=mapping.label if mapping else request.description,
            )

        raise TypeError(f"Unsupported request type: {type(request).__name__}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON layout read by ``from_dict``."""
        return {
            "payment_accounts": dict(self.payment_accounts),
            "income": {
                str(k): {"debit": m.debit, "credit": m.credit, "label": m.label}
                for k, m in self.income.items()
            },
            "expense": {
                str(k): {"debit": m.debit, "credit": m.credit, "label": m.label}
                for k, m in self.expense.items()
            },
            "default_cash_code": self.default_cash_code,
            "default_revenue_code": self.default_revenue_code,
            "default_expense_code": self.default_expense_code,
            "invoice_accounts": vars(self.invoice_accounts).copy(),
            "strict": self.strict,
        }

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], base: Optional["AccountMappingRules"] = None
    ) -> "AccountMappingRules":
        """Build rules from a dict, overriding ``base`` (defaults if None).

        Category keys may be strings (as JSON requires) or integers. Tables
        given in ``data`` are merged over the base tables entry by entry.

        Raises:
            ValidationError: If an entry is malformed
        """
        base = base or cls()
        known = {
            "payment_accounts",
            "income",
            "expense",
            "default_cash_code",
            "default_revenue_code",
            "default_expense_code",
            "invoice_accounts",
            "strict",
        }
        unknown = set(data) - known
        if unknown:
            raise ValidationError(
                f"Unknown mapping keys: {', '.join(sorted(unknown))}", field="mapping"
            )

        def category_table(key: str, current: Mapping[int, CategoryMapping]):
            table = dict(current)
            for raw_id, entry in (data.get(key) or {}).items():
                try:
                    table[int(raw_id)] = CategoryMapping(
                        debit=str(entry["debit"]),
                        credit=str(entry["credit"]),
                        label=str(entry.get("label", "")),
                    )
                except (KeyError, TypeError, ValueError) as e:
                    raise ValidationError(
                        f"Invalid {key} mapping for category {raw_id!r}: {e}",
                        field="mapping",
                    )
            return table

        payment_accounts = dict(base.payment_accounts)
        payment_accounts.update(
            {str(k): str(v) for k, v in (data.get("payment_accounts") or {}).items()}
        )

        invoice_accounts = base.invoice_accounts
        if data.get("invoice_accounts"):
            try:
                invoice_accounts = replace(invoice_accounts, **data["invoice_accounts"])
            except TypeError as e:
                raise ValidationError(f"Invalid invoice_accounts: {e}", field="mapping")

        return cls(
            payment_accounts=payment_accounts,
            income=category_table("income", base.income),
            expense=category_table("expense", base.expense),
            default_cash_code=str(data.get("default_cash_code", base.default_cash_code)),
            default_revenue_code=str(data.get("default_revenue_code", base.default_revenue_code)),
            default_expense_code=str(data.get("default_expense_code", base.default_expense_code)),
            invoice_accounts=invoice_accounts,
            strict=bool(data.get("strict", base.strict)),
        )


def default_mapping_rules() -> AccountMappingRules:
    """Return the stock mapping table."""
    return AccountMappingRules()


def load_mapping_rules(path: str | Path) -> AccountMappingRules:
    """Load mapping overrides from a JSON file on top of the defaults.

    Raises:
        FileNotFoundError: If the file does not exist
        ValidationError: If the file is not valid JSON or has bad entries
    """
    mapping_path = Path(path)
    if not mapping_path.exists():
        raise FileNotFoundError(f"Mapping file not found: {path}")
    try:
        data = json.loads(mapping_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(f"Mapping file {path} is not valid JSON: {e}", field="mapping")
    if not isinstance(data, dict):
        raise ValidationError(f"Mapping file {path} must contain an object", field="mapping")
    return AccountMappingRules.from_dict(data)
