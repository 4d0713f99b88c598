"""
Local-date helpers.

Dates travel through the engine as ``YYYY-MM-DD`` strings.  All arithmetic is
done on naive local calendar dates, so a DST change or a west-of-UTC clock
near midnight never shifts a day boundary.
"""

import re
from datetime import date, datetime, timedelta

DATE_FORMAT = "%Y-%m-%d"

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(date_str: str) -> date:
    """Parse a ``YYYY-MM-DD`` string into a local calendar date."""
    return datetime.strptime(date_str, DATE_FORMAT).date()


def format_date(d: date) -> str:
    """Format a calendar date as ``YYYY-MM-DD``."""
    return d.strftime(DATE_FORMAT)


def is_valid_date(date_str: object) -> bool:
    """Return True if *date_str* is a well-formed, existing ``YYYY-MM-DD`` date."""
    if not isinstance(date_str, str) or not _DATE_RE.match(date_str):
        return False
    try:
        parse_date(date_str)
    except ValueError:
        return False
    return True


def today() -> str:
    """Return the local calendar date (no UTC conversion) as ``YYYY-MM-DD``."""
    return format_date(datetime.now().date())


def days_between(a: str, b: str) -> int:
    """
    Whole calendar days from date *a* to date *b*.

    Negative when *b* is before *a*.

    Args:
        a: Start date (YYYY-MM-DD)
        b: End date (YYYY-MM-DD)

    Returns:
        Number of calendar days, floored
    """
    return (parse_date(b) - parse_date(a)).days


def add_days(date_str: str, days: int) -> str:
    """Shift a ``YYYY-MM-DD`` date by *days* calendar days."""
    return format_date(parse_date(date_str) + timedelta(days=days))
