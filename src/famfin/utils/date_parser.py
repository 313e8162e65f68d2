"""Date parsing and month arithmetic utilities."""

from datetime import date, timedelta
from typing import Optional
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

MONTH_ABBREVIATIONS = {
    "pt-BR": ("jan", "fev", "mar", "abr", "mai", "jun", "jul", "ago", "set", "out", "nov", "dez"),
    "en": ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
}


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024", ...) and the
    relative words "today", "yesterday" and "tomorrow".

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def add_months(value: date, months: int) -> date:
    """Advance a date by whole months, keeping the day of month.

    A day that does not exist in the target month rolls forward into the
    following month instead of being clamped: Jan 31 + 1 month is Mar 3
    (Mar 2 in a leap year).
    """
    first_of_target = value.replace(day=1) + relativedelta(months=months)
    return first_of_target + timedelta(days=value.day - 1)


def shift_month(month: int, year: int, offset: int) -> tuple[int, int]:
    """Return (month, year) offset by a number of months."""
    shifted = date(year, month, 1) + relativedelta(months=offset)
    return shifted.month, shifted.year


def month_key(year: int, month: int) -> str:
    """Build the persisted "<year>-<month index>" key (month index is 0-based)."""
    return f"{year}-{month - 1}"


def month_abbreviation(month: int, locale: Optional[str] = None) -> str:
    """Return the short month name for a 1-based month."""
    names = MONTH_ABBREVIATIONS.get(locale or "pt-BR", MONTH_ABBREVIATIONS["en"])
    return names[month - 1]
