# backend/portfolio_metrics/services/accrual/lump_sum.py
"""
Lump-sum compound interest.

Every deposit compounds independently from its own date:

    Value = P × (1 + r/n)^(n × t),   t = days / 365

where n is the compounding frequency (times per year). The holding's value
is the sum over its deposits. Deposits with t <= 0 (dated on or after the
valuation date) are worth their principal.

All arithmetic is Decimal; fractional exponents use Decimal's correctly
rounded power, so results are reproducible bit for bit.
"""

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from portfolio_metrics.services.accrual.types import Deposit, LumpSumResult
from portfolio_metrics.services.constants import (
    CALENDAR_DAYS_PER_YEAR,
    COMPOUNDING_FREQUENCIES,
    CURRENCY_PRECISION,
    DEFAULT_COMPOUNDING_FREQUENCY,
    DISPLAY_PERCENTAGE_PRECISION,
    ONE_HUNDRED,
    ZERO,
)
from portfolio_metrics.services.exceptions import ValidationError

logger = logging.getLogger(__name__)


def get_compounding_frequency(instrument_type: str) -> int:
    """
    Times per year interest compounds for a fixed-income type.

    Unknown types compound annually.

    Example:
        >>> get_compounding_frequency("FD")
        4
    """
    return COMPOUNDING_FREQUENCIES.get(instrument_type.upper(), DEFAULT_COMPOUNDING_FREQUENCY)


def calculate_compound_value(
        principal: Decimal,
        annual_rate: Decimal,
        deposit_date: date,
        as_of: date,
        compounding_frequency: int = DEFAULT_COMPOUNDING_FREQUENCY,
        days_per_year: int = CALENDAR_DAYS_PER_YEAR,
) -> Decimal:
    """
    Compound one deposit from `deposit_date` to `as_of`.

    Args:
        principal: Amount deposited
        annual_rate: Annual rate as a decimal (0.071 = 7.1%)
        deposit_date: Date the deposit was made
        as_of: Valuation date
        compounding_frequency: n, times per year interest is added
        days_per_year: Day-count divisor

    Returns:
        Unrounded compounded value; the principal itself if t <= 0

    Raises:
        ValidationError: If compounding_frequency is not positive
    """
    if compounding_frequency <= 0:
        raise ValidationError(
            f"Compounding frequency must be positive: {compounding_frequency}",
            field="compounding_frequency",
        )

    days = (as_of - deposit_date).days
    if days <= 0:
        return principal

    n = Decimal(compounding_frequency)
    years = Decimal(days) / Decimal(days_per_year)
    growth = (Decimal("1") + Decimal(annual_rate) / n) ** (n * years)

    return principal * growth


def calculate_lump_sum(
        deposits: Iterable[Deposit],
        annual_rate: Decimal,
        as_of: date,
        compounding_frequency: int = DEFAULT_COMPOUNDING_FREQUENCY,
        days_per_year: int = CALENDAR_DAYS_PER_YEAR,
) -> LumpSumResult:
    """
    Value a set of deposits that each compound independently.

    Returns:
        LumpSumResult with principal, value and interest rounded to
        currency precision
    """
    principal = ZERO
    current_value = ZERO

    for deposit in deposits:
        principal += deposit.amount
        current_value += calculate_compound_value(
            deposit.amount,
            annual_rate,
            deposit.date,
            as_of,
            compounding_frequency,
            days_per_year,
        )

    interest = current_value - principal
    interest_percent = (interest / principal * ONE_HUNDRED) if principal > ZERO else ZERO

    logger.debug(
        f"Lump sum: principal={principal}, value={current_value}, n={compounding_frequency}"
    )

    return LumpSumResult(
        principal=principal.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP),
        current_value=current_value.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP),
        interest=interest.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP),
        interest_percent=interest_percent.quantize(DISPLAY_PERCENTAGE_PRECISION, rounding=ROUND_HALF_UP),
        compounding_frequency=compounding_frequency,
    )
