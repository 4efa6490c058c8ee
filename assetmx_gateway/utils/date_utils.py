"""Date manipulation utilities"""

from datetime import date


def months_between(start: date, end: date | None = None) -> int:
    """
    Whole months from start to end, counted on month number only.

    Day-of-month is ignored: 31 Jan -> 1 Feb is one month, 1 Jan -> 31 Jan is zero.
    """
    if end is None:
        end = date.today()
    return (end.year - start.year) * 12 + (end.month - start.month)


def term_years(term_months: int) -> int:
    """Loan term in whole years, rounded up (61 months -> 6 years)"""
    return -(-term_months // 12)
