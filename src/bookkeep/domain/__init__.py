"""Domain layer for bookkeep application.

Services are resolved lazily: the database layer imports the entity and
error modules of this package, and the services import the database layer.
"""

import importlib

_SERVICES = {
    "BusinessService": "bookkeep.domain.business",
    "CategoryService": "bookkeep.domain.category",
    "ChartOfAccountsService": "bookkeep.domain.chart",
    "CSVImportService": "bookkeep.domain.csv_import",
    "InvoiceService": "bookkeep.domain.invoice",
    "LedgerService": "bookkeep.domain.ledger",
    "PaymentAccountService": "bookkeep.domain.payment_account",
    "PostingService": "bookkeep.domain.posting",
    "SummaryService": "bookkeep.domain.summary",
    "TaxService": "bookkeep.domain.tax",
    "TransactionService": "bookkeep.domain.transaction",
}

__all__ = sorted(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
