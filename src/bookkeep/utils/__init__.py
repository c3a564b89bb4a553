"""Utility functions for bookkeep."""

from bookkeep.utils.date_parser import parse_date, get_period_range
from bookkeep.utils.amount_parser import parse_amount, money

__all__ = ["parse_date", "get_period_range", "parse_amount", "money"]
