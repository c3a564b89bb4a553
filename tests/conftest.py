"""Shared pytest fixtures for bookkeep tests."""

import tempfile
import os
from datetime import date
from pathlib import Path
import pytest

from bookkeep.database.factories import create_sqlite_database
from bookkeep.domain.business import BusinessService
from bookkeep.domain.category import CategoryService
from bookkeep.domain.chart import ChartOfAccountsService
from bookkeep.domain.ledger import LedgerService
from bookkeep.domain.payment_account import PaymentAccountService
from bookkeep.domain.posting import PostingService
from bookkeep.domain.requests import build_transaction_request
from bookkeep.domain.tax import TaxService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def seeded_db(temp_db):
    """Temporary database holding the default chart, categories and payment accounts."""
    ChartOfAccountsService(temp_db).seed_defaults()
    CategoryService(temp_db).seed_defaults()
    PaymentAccountService(temp_db).seed_defaults()
    return temp_db


@pytest.fixture
def business_service(temp_db):
    """Create a BusinessService with a temporary database."""
    return BusinessService(temp_db)


@pytest.fixture
def business(seeded_db):
    """Create a sample business and return it."""
    service = BusinessService(seeded_db)
    business_id = service.create_business("Bodega Central")
    return service.get_business(business_id)


@pytest.fixture
def posting_service(seeded_db):
    """Create a PostingService with the stock mapping rules."""
    return PostingService(seeded_db)


@pytest.fixture
def ledger_service(seeded_db):
    """Create a LedgerService with a seeded database."""
    return LedgerService(seeded_db)


@pytest.fixture
def tax_service(seeded_db):
    """Create a TaxService with a seeded database."""
    return TaxService(seeded_db)


@pytest.fixture
def payment_account_service(seeded_db):
    """Create a PaymentAccountService with a seeded database."""
    return PaymentAccountService(seeded_db)


@pytest.fixture
def make_request(business):
    """Build transaction requests for the sample business."""

    def _make(type="income", **fields):
        fields.setdefault("date", date(2024, 1, 15))
        fields.setdefault("business_id", business.id)
        fields.setdefault("amount", "100.00")
        if type == "income":
            fields.setdefault("category_id", 1)
            fields.setdefault("to_account", "BCP")
        elif type == "expense":
            fields.setdefault("category_id", 11)
            fields.setdefault("from_account", "BCP")
        return build_transaction_request(type, **fields)

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
