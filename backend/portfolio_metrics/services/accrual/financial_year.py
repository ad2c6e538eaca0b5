# backend/portfolio_metrics/services/accrual/financial_year.py
"""
Financial year (April–March) helpers.

Months inside a financial year are numbered 0..11 starting at April:

    Apr May Jun Jul Aug Sep Oct Nov Dec Jan Feb Mar
     0   1   2   3   4   5   6   7   8   9  10  11
"""

from datetime import date

from portfolio_metrics.services.accrual.types import FinancialYear
from portfolio_metrics.services.constants import FINANCIAL_YEAR_START_MONTH, MONTHS_PER_YEAR


def financial_year_start_year(d: date) -> int:
    """Calendar year in which the financial year containing `d` starts."""
    return d.year if d.month >= FINANCIAL_YEAR_START_MONTH else d.year - 1


def financial_year_for_start(start_year: int) -> FinancialYear:
    """
    Build the FinancialYear starting in April of `start_year`.

    Example:
        >>> financial_year_for_start(2023).label
        '2023-24'
    """
    end_year = start_year + 1
    return FinancialYear(
        label=f"{start_year}-{str(end_year)[-2:]}",
        start_year=start_year,
        end_year=end_year,
        start=date(start_year, FINANCIAL_YEAR_START_MONTH, 1),
        end=date(end_year, FINANCIAL_YEAR_START_MONTH - 1, 31),
    )


def get_financial_year(d: date) -> FinancialYear:
    """Financial year containing `d` (2024-01-05 -> "2023-24")."""
    return financial_year_for_start(financial_year_start_year(d))


def financial_year_month(d: date) -> int:
    """Zero-based month within the financial year (April = 0, March = 11)."""
    return (d.month - FINANCIAL_YEAR_START_MONTH) % MONTHS_PER_YEAR


def months_elapsed_in_financial_year(d: date) -> int:
    """
    Financial-year months touched up to and including `d`'s month.

    April -> 1, March -> 12. A partially elapsed month counts as elapsed.
    """
    return financial_year_month(d) + 1
