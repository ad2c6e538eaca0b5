# backend/portfolio_metrics/services/accrual/recurring.py
"""
Recurring-deposit schedule (PPF-style crediting).

Interest is computed monthly on the balance but credited once, at the end of
each financial year (April–March). A deposit earns interest for the month it
was made in only if it lands on or before the cutoff day (the 5th by
default); otherwise it starts earning from the following month.

For each FY from the first deposit's FY through the FY containing `as_of`:

    interest = opening × r × (months_elapsed / 12)
             + Σ_month before_cutoff × r × (months_from_this_month / 12)
             + Σ_month after_cutoff  × r × (months_from_next_month / 12)

    closing  = opening + deposits + interest

where months_elapsed is 12 for a completed FY and the number of FY months
touched so far for the current one, and effective months are clamped to
what is left of the FY (and, in the current FY, to what has elapsed).

The current FY's interest is accrued but NOT credited yet: the reported
current value is the last completed closing balance plus this year's
deposits, and the schedule's last closing balance is the estimated value.
"""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from portfolio_metrics.services.accrual.financial_year import (
    financial_year_for_start,
    financial_year_month,
    financial_year_start_year,
    months_elapsed_in_financial_year,
)
from portfolio_metrics.services.accrual.types import (
    AccrualScheduleEntry,
    Deposit,
    PeriodStatus,
    RecurringScheduleResult,
    RecurringScheduleSummary,
)
from portfolio_metrics.services.constants import (
    CURRENCY_PRECISION,
    DEFAULT_DEPOSIT_CUTOFF_DAY,
    DISPLAY_PERCENTAGE_PRECISION,
    MONTHS_PER_YEAR,
    ONE_HUNDRED,
    ZERO,
)
from portfolio_metrics.services.exceptions import ValidationError

logger = logging.getLogger(__name__)

_MONTHS = Decimal(MONTHS_PER_YEAR)


class _MonthBucket:
    """Deposits of one FY month, split at the cutoff day."""

    __slots__ = ("before_cutoff", "after_cutoff")

    def __init__(self) -> None:
        self.before_cutoff = ZERO
        self.after_cutoff = ZERO


def generate_recurring_schedule(
        deposits: Iterable[Deposit],
        annual_rate: Decimal,
        as_of: date,
        cutoff_day: int = DEFAULT_DEPOSIT_CUTOFF_DAY,
) -> RecurringScheduleResult | None:
    """
    Build the per-financial-year crediting schedule for recurring deposits.

    Args:
        deposits: Deposits in any order; those dated after `as_of` are ignored
        annual_rate: Annual rate as a decimal (0.071 = 7.1%)
        as_of: Valuation date; its FY is the CURRENT period
        cutoff_day: Deposits on or before this day of the month earn
                    interest for that month

    Returns:
        RecurringScheduleResult, or None when there is no deposit on or
        before `as_of`

    Raises:
        ValidationError: If cutoff_day is outside 1..31

    Example:
        10,000 deposited on 2024-01-05 at 7.1%: January is FY month 9, so
        3 months (Jan, Feb, Mar) accrue and FY 2023-24 earns 177.50.
        Deposited on 2024-01-06 instead, only 2 months accrue (118.33).
    """
    if not 1 <= cutoff_day <= 31:
        raise ValidationError(
            f"Deposit cutoff day must be between 1 and 31: {cutoff_day}",
            field="deposit_cutoff_day",
        )

    eligible = sorted(
        (d for d in deposits if d.date <= as_of),
        key=lambda d: d.date,
    )
    if not eligible:
        return None

    rate = Decimal(annual_rate)

    # FY start year -> total deposited, and FY start year -> FY month -> bucket
    totals: dict[int, Decimal] = defaultdict(lambda: ZERO)
    buckets: dict[int, dict[int, _MonthBucket]] = defaultdict(dict)

    for deposit in eligible:
        fy_start = financial_year_start_year(deposit.date)
        totals[fy_start] += deposit.amount
        bucket = buckets[fy_start].setdefault(financial_year_month(deposit.date), _MonthBucket())
        if deposit.date.day <= cutoff_day:
            bucket.before_cutoff += deposit.amount
        else:
            bucket.after_cutoff += deposit.amount

    first_year = financial_year_start_year(eligible[0].date)
    current_year = financial_year_start_year(as_of)

    schedule: list[AccrualScheduleEntry] = []
    opening = ZERO
    total_deposited = ZERO

    for year in range(first_year, current_year + 1):
        fy = financial_year_for_start(year)
        is_current = year == current_year
        months_elapsed = months_elapsed_in_financial_year(as_of) if is_current else MONTHS_PER_YEAR

        deposited = totals.get(year, ZERO)
        total_deposited += deposited

        interest = _interest_for_year(
            opening, buckets.get(year, {}), rate, is_current, months_elapsed
        )
        closing = opening + deposited + interest

        # The schedule stops at as_of's FY, so earlier years are all completed
        status = PeriodStatus.CURRENT if is_current else PeriodStatus.COMPLETED

        schedule.append(AccrualScheduleEntry(
            period_label=fy.label,
            status=status,
            opening_balance=opening,
            deposits_in_period=deposited,
            interest_earned=interest,
            closing_balance=closing,
        ))
        opening = closing

    summary = _summarize(schedule, total_deposited)

    logger.debug(
        f"Recurring schedule: {len(schedule)} FYs, deposited={summary.total_deposited}, "
        f"current_value={summary.current_value}, estimated={summary.estimated_value}"
    )

    return RecurringScheduleResult(schedule=schedule, summary=summary)


def _interest_for_year(
        opening: Decimal,
        months: dict[int, _MonthBucket],
        rate: Decimal,
        is_current: bool,
        months_elapsed: int,
) -> Decimal:
    """Interest earned in one FY on the opening balance and its deposits."""
    interest = opening * rate * Decimal(months_elapsed) / _MONTHS

    for fy_month, bucket in months.items():
        remaining = MONTHS_PER_YEAR - fy_month
        if is_current:
            before_months = max(0, min(remaining, months_elapsed - fy_month))
            after_months = max(0, min(remaining - 1, months_elapsed - fy_month - 1))
        else:
            before_months = remaining
            after_months = max(0, remaining - 1)

        interest += bucket.before_cutoff * rate * Decimal(before_months) / _MONTHS
        interest += bucket.after_cutoff * rate * Decimal(after_months) / _MONTHS

    return interest


def _summarize(
        schedule: list[AccrualScheduleEntry],
        total_deposited: Decimal,
) -> RecurringScheduleSummary:
    completed = [e for e in schedule if e.status == PeriodStatus.COMPLETED]
    current = next((e for e in schedule if e.status == PeriodStatus.CURRENT), None)

    current_deposits = current.deposits_in_period if current else ZERO
    if completed:
        current_value = completed[-1].closing_balance + current_deposits
    else:
        current_value = current_deposits

    total_interest = current_value - total_deposited
    interest_percent = (
        total_interest / total_deposited * ONE_HUNDRED if total_deposited > ZERO else ZERO
    )

    return RecurringScheduleSummary(
        total_deposited=total_deposited.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP),
        total_interest=total_interest.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP),
        current_value=current_value.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP),
        estimated_value=schedule[-1].closing_balance.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP),
        current_period_accrued_interest=(
            current.interest_earned if current else ZERO
        ).quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP),
        interest_percent=interest_percent.quantize(DISPLAY_PERCENTAGE_PRECISION, rounding=ROUND_HALF_UP),
    )
