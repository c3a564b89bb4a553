"""Tests for ledger and statement aggregation."""

import logging
from datetime import date
from decimal import Decimal

import pytest

from bookkeep.domain.entities import AccountType, JournalEntryLine, StatementKind
from bookkeep.domain.errors import NotFoundError


def _line(code, debit="0", credit="0", name=""):
    return JournalEntryLine(
        account_code=code,
        account_name=name or f"Cuenta {code}",
        debit=Decimal(debit),
        credit=Decimal(credit),
    )


def test_general_ledger_transfer(posting_service, ledger_service, make_request):
    """A transfer shows up once on each side, in the same entry."""
    posted = posting_service.post_transaction(
        make_request("transfer", amount="200", from_account="BCP", to_account="Interbank")
    )

    ledgers = {ledger.code: ledger for ledger in ledger_service.get_general_ledger()}

    assert set(ledgers) == {"1041", "1042"}
    bcp = ledgers["1041"].entries
    interbank = ledgers["1042"].entries
    assert len(bcp) == 1 and len(interbank) == 1
    assert bcp[0].credit == Decimal("200.00")
    assert interbank[0].debit == Decimal("200.00")
    assert bcp[0].entry_id == interbank[0].entry_id == posted.entry.id


def test_general_ledger_running_balance(posting_service, ledger_service, make_request):
    """Running balances follow date order and add debit minus credit."""
    posting_service.post_transaction(
        make_request("expense", amount="400", date=date(2024, 1, 20))
    )
    posting_service.post_transaction(
        make_request("income", amount="1000", date=date(2024, 1, 10))
    )

    [bank] = ledger_service.get_general_ledger(account_code="1041")

    assert [row.date for row in bank.entries] == [date(2024, 1, 10), date(2024, 1, 20)]
    assert [row.balance for row in bank.entries] == [Decimal("1000.00"), Decimal("600.00")]
    assert bank.total_debit == Decimal("1000.00")
    assert bank.total_credit == Decimal("400.00")
    assert bank.final_balance == Decimal("600.00")
    assert bank.name == "Cuentas corrientes operativas"


def test_general_ledger_repeat_reads_match(posting_service, ledger_service, make_request, business):
    """Reading twice with the same filters gives the same ledger, same-day entries by ID."""
    first = posting_service.post_transaction(make_request("income", amount="300"))
    second = posting_service.post_transaction(make_request("expense", amount="120"))
    third = posting_service.post_transaction(make_request("income", amount="45.50"))
    posting_service.post_transaction(
        make_request("transfer", amount="80", from_account="BCP", to_account="Yape")
    )

    filters = dict(business_id=business.id, period="2024-01")
    once = ledger_service.get_general_ledger(**filters)
    twice = ledger_service.get_general_ledger(**filters)

    assert once == twice
    [bank] = [ledger for ledger in once if ledger.code == "1041"]
    assert [row.entry_id for row in bank.entries][:3] == [
        first.entry.id,
        second.entry.id,
        third.entry.id,
    ]
    assert [row.balance for row in bank.entries] == [
        Decimal("300.00"),
        Decimal("180.00"),
        Decimal("225.50"),
        Decimal("145.50"),
    ]


def test_general_ledger_period_filter(posting_service, ledger_service, make_request):
    """Only entries dated inside the period are reported."""
    posting_service.post_transaction(make_request("income", date=date(2024, 1, 10)))
    posting_service.post_transaction(make_request("income", date=date(2024, 2, 10)))

    [bank] = ledger_service.get_general_ledger(period="2024-02", account_code="1041")

    assert len(bank.entries) == 1
    assert bank.entries[0].date == date(2024, 2, 10)


def test_general_ledger_business_filter(seeded_db, posting_service, ledger_service, make_request):
    """Entries of other businesses are left out."""
    other_id = seeded_db.create_business("Otra Empresa")
    posting_service.post_transaction(make_request("income"))
    posting_service.post_transaction(make_request("income", business_id=other_id, amount="50"))

    [bank] = ledger_service.get_general_ledger(business_id=other_id, account_code="1041")

    assert bank.final_balance == Decimal("50.00")


def test_get_journal_entry(posting_service, ledger_service, make_request):
    """Entries are fetched with their lines; missing ones raise."""
    posted = posting_service.post_transaction(make_request("income"))

    entry = ledger_service.get_journal_entry(posted.entry.id)

    assert len(entry.lines) == 2
    with pytest.raises(NotFoundError):
        ledger_service.get_journal_entry(999)


def test_income_statement(posting_service, ledger_service, make_request):
    """Income is shown positive and net income is income less expenses."""
    posting_service.post_transaction(make_request("income", amount="1000"))
    posting_service.post_transaction(make_request("income", amount="300", category_id=2))
    posting_service.post_transaction(make_request("expense", amount="400"))

    statement = ledger_service.get_income_statement()

    assert [(b.code, b.balance) for b in statement.income_accounts] == [
        ("7011", Decimal("1000.00")),
        ("7041", Decimal("300.00")),
    ]
    assert [(b.code, b.balance) for b in statement.expense_accounts] == [
        ("6352", Decimal("400.00")),
    ]
    assert statement.total_income == Decimal("1300.00")
    assert statement.total_expenses == Decimal("400.00")
    assert statement.net_income == Decimal("900.00")


def test_income_statement_excludes_other_periods(posting_service, ledger_service, make_request):
    """Income statement balances only cover the period."""
    posting_service.post_transaction(make_request("income", amount="1000", date=date(2023, 12, 31)))
    posting_service.post_transaction(make_request("income", amount="200", date=date(2024, 1, 2)))

    statement = ledger_service.get_income_statement(period="2024-01")

    assert statement.total_income == Decimal("200.00")


def test_balance_sheet_is_cumulative(posting_service, ledger_service, make_request):
    """Balance sheet balances include everything before the period ends."""
    posting_service.post_transaction(make_request("income", amount="1000", date=date(2023, 12, 31)))
    posting_service.post_transaction(make_request("income", amount="200", date=date(2024, 1, 2)))
    posting_service.post_transaction(make_request("income", amount="50", date=date(2024, 2, 2)))

    sheet = ledger_service.get_balance_sheet(period="2024-01")

    assert sheet.total_assets == Decimal("1200.00")


def test_balance_sheet_signs(seeded_db, ledger_service, business):
    """Liabilities and equity are shown positive; the equation check passes."""
    seeded_db.create_journal_entry(
        date=date(2024, 1, 1),
        business_id=business.id,
        description="Aporte de capital",
        lines=[_line("1041", debit="5000"), _line("5011", credit="5000")],
    )
    seeded_db.create_journal_entry(
        date=date(2024, 1, 2),
        business_id=business.id,
        description="Compra de equipo a crédito",
        lines=[_line("3361", debit="1000"), _line("4212", credit="1000")],
    )

    sheet = ledger_service.get_balance_sheet()

    assert sheet.total_assets == Decimal("6000.00")
    assert sheet.total_liabilities == Decimal("1000.00")
    assert sheet.total_equity == Decimal("5000.00")
    assert sheet.difference == Decimal("0.00")
    assert sheet.is_balanced is True
    assert [b.account_type for b in sheet.equity_accounts] == [AccountType.EQUITY]


def test_balance_sheet_flags_difference(seeded_db, ledger_service, business, caplog):
    """Sheets off by more than a cent are reported and logged, not corrected."""
    seeded_db.create_journal_entry(
        date=date(2024, 1, 1),
        business_id=business.id,
        description="Apertura",
        lines=[
            _line("1041", debit="10000"),
            _line("4212", credit="9999.50"),
            _line("7011", credit="0.50"),
        ],
    )

    with caplog.at_level(logging.WARNING, logger="bookkeep.domain.ledger"):
        sheet = ledger_service.get_balance_sheet()

    assert sheet.total_assets == Decimal("10000.00")
    assert sheet.total_liabilities + sheet.total_equity == Decimal("9999.50")
    assert sheet.difference == Decimal("0.50")
    assert sheet.is_balanced is False
    assert "Balance sheet does not balance" in caplog.text


def test_account_balances_skip_codes_outside_chart(seeded_db, ledger_service, business):
    """Codes missing from the chart do not appear on statements."""
    seeded_db.create_journal_entry(
        date=date(2024, 1, 1),
        business_id=business.id,
        description="Cuenta desconocida",
        lines=[_line("1049", debit="10"), _line("7011", credit="10")],
    )

    balances = ledger_service.get_account_balances(StatementKind.BALANCE_SHEET)
    income = ledger_service.get_account_balances("income-statement")

    assert balances == []
    assert [b.code for b in income] == ["7011"]


def test_unknown_period(ledger_service):
    """Unknown period names are rejected."""
    with pytest.raises(ValueError):
        ledger_service.get_income_statement(period="next-decade")
