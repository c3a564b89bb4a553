"""CLI helpers for business and period resolution."""

from __future__ import annotations

from datetime import date

import click
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.domain.business import BusinessService
from bookkeep.utils.business_resolver import resolve_business
from bookkeep.utils.date_parser import PERIOD_PRESETS, get_period_range

PERIOD_HELP = f"Period: {', '.join(PERIOD_PRESETS)} or YYYY-MM"


def resolve_business_or_exit(ctx: click.Context, db, business: str | int | None) -> int | None:
    """Resolve business name or ID, or exit with a CLI error.

    None (no --business given) means all businesses.
    """
    if business is None:
        return None
    try:
        return resolve_business(BusinessService(db), business)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def resolve_period_or_exit(
    ctx: click.Context, period: str | None
) -> tuple[date | None, date | None]:
    """Validate a period string and return its bounds, or exit with a CLI error."""
    try:
        return get_period_range(period)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def format_amount(amount, currency: str = "PEN") -> str:
    """Render an amount with its currency symbol."""
    symbol = {"PEN": "S/", "USD": "$", "EUR": "€"}.get(currency, currency)
    return f"{symbol} {amount:,.2f}"
