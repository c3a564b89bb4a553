"""CSV import domain service."""

import csv
import hashlib
import logging
from collections import Counter
from typing import Any, Mapping, Optional
from pathlib import Path

from bookkeep.database.base import Database
from bookkeep.domain.errors import NotFoundError, ValidationError, business_not_found
from bookkeep.domain.mapping import AccountMappingRules
from bookkeep.domain.posting import PostingService
from bookkeep.domain.requests import build_transaction_request
from bookkeep.utils.date_parser import parse_date
from bookkeep.utils.amount_parser import parse_amount

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "date",
    "type",
    "category_id",
    "amount",
    "currency",
    "from_account",
    "to_account",
    "description",
    "reference",
    "invoice_number",
    "client_supplier",
    "ruc",
    "import_id",
]

REQUIRED_COLUMNS = {"date", "type", "amount"}


def row_digest(values: Mapping[str, Optional[str]]) -> str:
    """Digest of a row's content over the known columns."""
    content = "\x1f".join(values.get(column) or "" for column in CSV_COLUMNS)
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:32]


def import_key(business_id: int, values: Mapping[str, Optional[str]], occurrence: int = 1) -> str:
    """Idempotency key for an imported row.

    An ``import_id`` column identifies the row on its own. Otherwise the key
    is the row content plus how many identical rows came before it in the
    same file, so repeated rows in one file are all imported while a second
    import of the file skips them.
    """
    import_id = values.get("import_id")
    if import_id:
        return f"csv:{business_id}:id:{import_id}"
    return f"csv:{business_id}:{row_digest(values)}:{occurrence}"


class CSVImportService:
    """Service for importing transactions from CSV files."""

    def __init__(self, db: Database, rules: Optional[AccountMappingRules] = None):
        """Initialize CSV import service.

        Args:
            db: Database instance
            rules: Account mapping rules handed to the posting engine
        """
        self.db = db
        self.posting_service = PostingService(db, rules=rules)

    def import_csv(self, csv_file_path: str, business_id: int) -> dict[str, Any]:
        """Import transactions from a CSV file into one business.

        Each row is posted through the posting engine, with its invoice when
        the row has an invoice number. A row that fails is reported and the
        import carries on with the next one.

        Args:
            csv_file_path: Path to CSV file
            business_id: Business the rows belong to

        Returns:
            Dict with import statistics:
            - imported: number of transactions imported
            - skipped: number of rows already imported (same import_id or content)
            - errors: list of error messages

        Raises:
            NotFoundError: If the business does not exist
            ValidationError: If required columns are missing
            FileNotFoundError: If CSV file doesn't exist
        """
        if self.db.get_business(business_id) is None:
            raise NotFoundError(business_not_found(business_id))

        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        imported = 0
        skipped = 0
        errors = []
        seen: Counter[str] = Counter()

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            # Try to detect delimiter
            sample = f.read(1024)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
            except csv.Error:
                delimiter = ","

            reader = csv.DictReader(f, delimiter=delimiter)

            csv_columns = reader.fieldnames
            if csv_columns is None:
                raise ValidationError("CSV file has no columns", field="columns")
            columns = {c.strip().lower() for c in csv_columns}
            missing_columns = REQUIRED_COLUMNS - columns
            if missing_columns:
                raise ValidationError(
                    f"CSV file missing required columns: {', '.join(sorted(missing_columns))}",
                    field="columns",
                )

            for row_num, row in enumerate(reader, start=2):  # Start at 2 (header is row 1)
                values = {
                    (key or "").strip().lower(): (value or "").strip() or None
                    for key, value in row.items()
                }
                try:
                    digest = row_digest(values)
                    seen[digest] += 1
                    key = import_key(business_id, values, seen[digest])
                    if self.db.get_journal_entry_by_idempotency_key(key) is not None:
                        skipped += 1
                        continue

                    for column in ("date", "type", "amount"):
                        if not values.get(column):
                            raise ValidationError(f"Missing {column}", field=column)

                    category_id = values.get("category_id")
                    request = build_transaction_request(
                        values["type"].lower(),
                        date=parse_date(values["date"]),
                        business_id=business_id,
                        amount=parse_amount(values["amount"]),
                        category_id=int(category_id) if category_id else None,
                        from_account=values.get("from_account"),
                        to_account=values.get("to_account"),
                        description=values.get("description"),
                        reference=values.get("reference"),
                        currency=values.get("currency"),
                        idempotency_key=key,
                        invoice_number=values.get("invoice_number"),
                        client_supplier=values.get("client_supplier"),
                        ruc=values.get("ruc"),
                    )
                    self.posting_service.post_invoiced_transaction(request)
                    imported += 1
                except ValueError as e:
                    # Domain errors are ValueErrors too
                    errors.append(f"Row {row_num}: {e}")
                    continue

        logger.info(
            "Imported %s rows from %s (%s skipped, %s errors)",
            imported,
            csv_path.name,
            skipped,
            len(errors),
        )
        return {
            "imported": imported,
            "skipped": skipped,
            "errors": errors,
        }
