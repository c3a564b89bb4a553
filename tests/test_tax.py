"""Tests for IGV arithmetic and the tax summary."""

from datetime import date
from decimal import Decimal

import pytest

from bookkeep.domain.requests import InvoiceItemRequest, InvoiceRequest
from bookkeep.domain.tax import IGV_RATE, calculate_tax, split_tax_inclusive


@pytest.mark.parametrize(
    "amount,subtotal,igv",
    [
        ("118.00", "100.00", "18.00"),
        ("100.00", "84.75", "15.25"),
        ("0.01", "0.01", "0.00"),
        ("999999.99", "847457.62", "152542.37"),
    ],
)
def test_split_tax_inclusive(amount, subtotal, igv):
    """Subtotal is rounded half-up and IGV takes the remainder."""
    result = split_tax_inclusive(Decimal(amount))

    assert result == (Decimal(subtotal), Decimal(igv))
    assert result[0] + result[1] == Decimal(amount)


def test_calculate_tax():
    """Tax on a subtotal rounds half-up to cents."""
    assert IGV_RATE == Decimal("0.18")
    assert calculate_tax(Decimal("100")) == Decimal("18.00")
    assert calculate_tax(Decimal("0.25")) == Decimal("0.05")


def test_tax_summary(tax_service, posting_service, make_request):
    """Sales IGV less purchase credit gives the net position."""
    posting_service.post_invoiced_transaction(
        make_request("income", amount="1180", invoice_number="F001-1")
    )
    posting_service.post_invoiced_transaction(
        make_request("expense", amount="472", invoice_number="E001-1")
    )
    posting_service.post_transaction(make_request("income", amount="5000"))

    summary = tax_service.get_tax_summary()

    assert summary.sales_tax == Decimal("180.00")
    assert summary.purchase_tax_credit == Decimal("72.00")
    assert summary.net_tax_position == Decimal("108.00")
    assert summary.is_payable is True


def test_tax_summary_credit(tax_service, posting_service, business):
    """More input tax than output tax leaves a credit."""
    posting_service.post_standalone_invoice(
        InvoiceRequest(
            type="purchase",
            date=date(2024, 3, 1),
            business_id=business.id,
            client_supplier="Proveedor SAC",
            invoice_number="E001-2",
            items=[InvoiceItemRequest("Laptop", "1", "2000")],
        )
    )

    summary = tax_service.get_tax_summary(period="2024-03")

    assert summary.sales_tax == Decimal("0.00")
    assert summary.purchase_tax_credit == Decimal("360.00")
    assert summary.net_tax_position == Decimal("-360.00")
    assert summary.is_payable is False


def test_tax_summary_period_filter(tax_service, posting_service, make_request):
    """Invoices outside the period are ignored."""
    posting_service.post_invoiced_transaction(
        make_request("income", amount="118", date=date(2024, 1, 31), invoice_number="F001-1")
    )
    posting_service.post_invoiced_transaction(
        make_request("income", amount="236", date=date(2024, 2, 1), invoice_number="F001-2")
    )

    summary = tax_service.get_tax_summary(period="2024-02")

    assert summary.sales_tax == Decimal("36.00")


def test_tax_summary_other_currency(tax_service, posting_service, make_request):
    """Only PEN invoices carry IGV."""
    posting_service.post_invoiced_transaction(
        make_request("income", amount="118", currency="USD", invoice_number="F001-1")
    )

    usd = tax_service.get_tax_summary(currency="usd")
    pen = tax_service.get_tax_summary()

    assert usd.currency == "USD"
    assert usd.sales_tax == usd.purchase_tax_credit == usd.net_tax_position == Decimal("0.00")
    assert pen.sales_tax == Decimal("0.00")
