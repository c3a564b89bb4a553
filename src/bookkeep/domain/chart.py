"""Chart of accounts service."""

from typing import Optional, Sequence

from bookkeep.database.base import Database
from bookkeep.domain.entities import Account, AccountType, BalanceSide

# (code, name, type, category) rows of the default PCGE-style chart
_DEFAULT_CHART_ROWS = [
    ("1011", "Caja", AccountType.ASSET, "Efectivo y equivalentes"),
    ("1041", "Cuentas corrientes operativas", AccountType.ASSET, "Efectivo y equivalentes"),
    ("1042", "Cuentas corrientes - Interbank", AccountType.ASSET, "Efectivo y equivalentes"),
    ("1043", "Billeteras digitales", AccountType.ASSET, "Efectivo y equivalentes"),
    ("1212", "Facturas por cobrar emitidas en cartera", AccountType.ASSET, "Cuentas por cobrar"),
    ("3361", "Equipos para procesamiento de información", AccountType.ASSET, "Inmuebles, maquinaria y equipo"),
    ("4011", "IGV - Cuenta propia", AccountType.LIABILITY, "Tributos por pagar"),
    ("4212", "Facturas por pagar emitidas", AccountType.LIABILITY, "Cuentas por pagar"),
    ("5011", "Capital social", AccountType.EQUITY, "Capital"),
    ("6011", "Compras de mercaderías", AccountType.EXPENSE, "Compras"),
    ("6211", "Sueldos y salarios", AccountType.EXPENSE, "Gastos de personal"),
    ("6212", "Honorarios", AccountType.EXPENSE, "Gastos de personal"),
    ("6311", "Transporte de carga", AccountType.EXPENSE, "Servicios de terceros"),
    ("6343", "Mantenimiento de equipos", AccountType.EXPENSE, "Servicios de terceros"),
    ("6352", "Alquiler de edificaciones", AccountType.EXPENSE, "Servicios de terceros"),
    ("6361", "Energía eléctrica y agua", AccountType.EXPENSE, "Servicios básicos"),
    ("6362", "Internet y telefonía", AccountType.EXPENSE, "Servicios básicos"),
    ("6371", "Publicidad", AccountType.EXPENSE, "Servicios de terceros"),
    ("6391", "Gastos bancarios", AccountType.EXPENSE, "Servicios de terceros"),
    ("6411", "Impuestos y tributos", AccountType.EXPENSE, "Tributos"),
    ("6521", "Seguros", AccountType.EXPENSE, "Otros gastos de gestión"),
    ("6563", "Suministros de oficina", AccountType.EXPENSE, "Otros gastos de gestión"),
    ("6571", "Capacitación", AccountType.EXPENSE, "Otros gastos de gestión"),
    ("6599", "Otros gastos de gestión", AccountType.EXPENSE, "Otros gastos de gestión"),
    ("7011", "Ventas de mercaderías", AccountType.INCOME, "Ventas"),
    ("7041", "Prestación de servicios", AccountType.INCOME, "Ventas"),
    ("7591", "Ingresos por delivery", AccountType.INCOME, "Otros ingresos de gestión"),
    ("7592", "Comisiones", AccountType.INCOME, "Otros ingresos de gestión"),
    ("7593", "Ingresos extraordinarios", AccountType.INCOME, "Otros ingresos de gestión"),
    ("7594", "Reembolso de gastos", AccountType.INCOME, "Otros ingresos de gestión"),
    ("7711", "Intereses financieros", AccountType.INCOME, "Ingresos financieros"),
]

_NORMAL_BALANCE = {
    AccountType.ASSET: BalanceSide.DEBIT,
    AccountType.EXPENSE: BalanceSide.DEBIT,
    AccountType.LIABILITY: BalanceSide.CREDIT,
    AccountType.EQUITY: BalanceSide.CREDIT,
    AccountType.INCOME: BalanceSide.CREDIT,
}


def _parent_code(code: str) -> Optional[str]:
    # Two-digit PCGE element, e.g. 10 for 1041
    return code[:2] if len(code) > 2 else None


DEFAULT_CHART_OF_ACCOUNTS: list[Account] = [
    Account(
        code=code,
        name=name,
        account_type=account_type,
        category=category,
        normal_balance=_NORMAL_BALANCE[account_type],
        parent_code=_parent_code(code),
    )
    for code, name, account_type, category in _DEFAULT_CHART_ROWS
]


def fallback_account_name(code: str) -> str:
    """Name shown for a code missing from the chart."""
    return f"Cuenta {code}"


class ChartOfAccountsService:
    """Service for the chart of accounts reference data."""

    def __init__(self, db: Database):
        """Initialize chart of accounts service.

        Args:
            db: Database instance
        """
        self.db = db

    def seed_defaults(self) -> int:
        """Insert the default chart, leaving existing codes untouched.

        Returns:
            Number of accounts inserted
        """
        created = 0
        with self.db.atomic("seed chart of accounts"):
            for account in DEFAULT_CHART_OF_ACCOUNTS:
                if self.db.get_account(account.code) is None:
                    self.db.save_account(account)
                    created += 1
        return created

    def get_account(self, code: str) -> Optional[Account]:
        """Get account by code."""
        return self.db.get_account(code)

    def list_accounts(self, account_types: Optional[Sequence[AccountType]] = None) -> list[Account]:
        """List accounts ordered by code.

        Args:
            account_types: Optional account types to keep

        Returns:
            List of account entities
        """
        return self.db.list_accounts(account_types=account_types)

    def account_name(self, code: str) -> str:
        """Current chart name for a code, or ``Cuenta {code}`` if unknown."""
        account = self.db.get_account(code)
        if account is None:
            return fallback_account_name(code)
        return account.name
