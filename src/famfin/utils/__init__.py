"""Utility functions for famfin."""

from famfin.utils.date_parser import parse_date, add_months, month_key
from famfin.utils.amount_parser import parse_currency, format_currency

__all__ = ["parse_date", "add_months", "month_key", "parse_currency", "format_currency"]
