"""Tests for the business summary service."""

from datetime import date
from decimal import Decimal

import pytest

from bookkeep.domain.summary import SummaryService


@pytest.fixture
def summary_service(seeded_db):
    """Create a SummaryService with a seeded database."""
    return SummaryService(seeded_db)


@pytest.fixture
def march_activity(posting_service, make_request, business_service):
    """Post a few months of activity for the sample business and one for another."""
    post = posting_service.post_transaction
    post(make_request("expense", amount="50", date=date(2023, 11, 20)))
    post(make_request("income", amount="300", date=date(2024, 2, 10)))
    post(make_request("income", amount="1000", date=date(2024, 3, 5)))
    post(make_request("expense", amount="400", date=date(2024, 3, 8)))
    post(make_request("transfer", amount="200", date=date(2024, 3, 9), from_account="BCP", to_account="Yape"))
    posting_service.post_invoiced_transaction(
        make_request("income", amount="590", date=date(2024, 3, 12), invoice_number="F001-3", to_account=None)
    )
    posting_service.post_invoiced_transaction(
        make_request("expense", amount="118", date=date(2024, 3, 15), invoice_number="E001-4")
    )

    other_id = business_service.create_business("Sucursal Norte")
    post(make_request("income", amount="999", date=date(2024, 3, 5), business_id=other_id))
    return other_id


def test_period_totals(summary_service, business, march_activity):
    """Income and expense exclude transfers; margin is a share of income."""
    summary = summary_service.get_summary(business_id=business.id, period="2024-03")

    assert summary.start_date == date(2024, 3, 1)
    assert summary.end_date == date(2024, 3, 31)
    assert summary.total_income == Decimal("1590.00")
    assert summary.total_expense == Decimal("518.00")
    assert summary.net_profit == Decimal("1072.00")
    assert summary.profit_margin == Decimal("67.42")


def test_tax_figures(summary_service, business, march_activity):
    """The IGV position matches the tax summary for the same scope."""
    summary = summary_service.get_summary(business_id=business.id, period="2024-03")

    assert summary.tax.sales_tax == Decimal("90.00")
    assert summary.tax.purchase_tax_credit == Decimal("18.00")
    assert summary.tax.net_tax_position == Decimal("72.00")


def test_monthly_trend(summary_service, business, march_activity):
    """The trend ends with the period's month and fills quiet months with zeros."""
    summary = summary_service.get_summary(business_id=business.id, period="2024-03")

    trend = summary.monthly_trend
    assert [month.label for month in trend] == ["Nov", "Dic", "Ene", "Feb", "Mar"]
    assert trend[0].month == date(2023, 11, 1)
    assert [(m.income, m.expense) for m in trend] == [
        (Decimal("0.00"), Decimal("50.00")),
        (Decimal("0.00"), Decimal("0.00")),
        (Decimal("0.00"), Decimal("0.00")),
        (Decimal("300.00"), Decimal("0.00")),
        (Decimal("1590.00"), Decimal("518.00")),
    ]


def test_all_businesses(summary_service, march_activity):
    """Without a business filter every business is counted."""
    summary = summary_service.get_summary(period="2024-03", trend_months=1)

    assert summary.total_income == Decimal("2589.00")
    assert len(summary.monthly_trend) == 1
    assert summary.monthly_trend[0].income == Decimal("2589.00")


def test_explicit_trend_end(summary_service, business, march_activity):
    """The trend can be anchored to any month."""
    trend = summary_service.get_monthly_trend(
        business_id=business.id, months=2, as_of=date(2024, 2, 29)
    )

    assert [m.month for m in trend] == [date(2024, 1, 1), date(2024, 2, 1)]
    assert trend[1].income == Decimal("300.00")


def test_no_income_has_zero_margin(summary_service, posting_service, make_request, business):
    """A period with only expenses reports a zero margin, not a division error."""
    posting_service.post_transaction(make_request("expense", amount="80", date=date(2024, 5, 2)))

    summary = summary_service.get_summary(business_id=business.id, period="2024-05")

    assert summary.total_income == Decimal("0.00")
    assert summary.net_profit == Decimal("-80.00")
    assert summary.profit_margin == Decimal("0.00")


def test_invalid_arguments(summary_service):
    """Unknown periods and empty trends are rejected."""
    with pytest.raises(ValueError):
        summary_service.get_summary(period="someday")
    with pytest.raises(ValueError):
        summary_service.get_summary(period="2024-03", trend_months=0)
