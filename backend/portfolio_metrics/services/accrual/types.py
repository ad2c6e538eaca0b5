# backend/portfolio_metrics/services/accrual/types.py
"""
Data types for fixed-income accrual.

Type Hierarchy:
    AccrualMode             - LUMP_SUM | RECURRING_SCHEDULE
    PeriodStatus            - COMPLETED | CURRENT | UPCOMING
    FinancialYear           - April–March accounting period
    Deposit                 - One dated principal contribution
    LumpSumResult           - Independently compounded deposits, summed
    AccrualScheduleEntry    - One financial year of a recurring schedule
    RecurringScheduleSummary- Totals of a recurring schedule
    RecurringScheduleResult - Schedule + summary
    AccrualResult           - Mode-independent valuation of one holding
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum


class AccrualMode(str, Enum):
    """
    How a fixed-income holding accrues interest.

    Attributes:
        LUMP_SUM: Each deposit compounds independently at n times per year
        RECURRING_SCHEDULE: Deposits are credited per financial year with
                            the monthly cutoff-day rule
    """
    LUMP_SUM = "lump_sum"
    RECURRING_SCHEDULE = "recurring_schedule"


class PeriodStatus(str, Enum):
    """
    Status of one schedule period relative to the valuation date.

    UPCOMING is reserved for callers projecting future years;
    generate_recurring_schedule never emits it.
    """
    COMPLETED = "completed"
    CURRENT = "current"
    UPCOMING = "upcoming"


@dataclass(frozen=True)
class FinancialYear:
    """
    A financial year running April 1 to March 31.

    Attributes:
        label: Display label, e.g. "2023-24"
        start_year: Calendar year the FY starts in (2023)
        end_year: Calendar year the FY ends in (2024)
        start: April 1 of start_year
        end: March 31 of end_year
    """
    label: str
    start_year: int
    end_year: int
    start: date
    end: date


@dataclass(frozen=True)
class Deposit:
    """A dated principal contribution to a fixed-income holding."""
    date: date
    amount: Decimal


# =============================================================================
# LUMP SUM
# =============================================================================

@dataclass(frozen=True)
class LumpSumResult:
    """
    Result of compounding deposits independently.

    Attributes:
        principal: Sum of all deposits
        current_value: Sum of each deposit's compounded value
        interest: current_value - principal
        interest_percent: interest / principal × 100 (0 if no principal)
        compounding_frequency: n used for every deposit
    """
    principal: Decimal
    current_value: Decimal
    interest: Decimal
    interest_percent: Decimal
    compounding_frequency: int


# =============================================================================
# RECURRING SCHEDULE
# =============================================================================

@dataclass(frozen=True)
class AccrualScheduleEntry:
    """
    One financial year of a recurring-deposit schedule.

    Invariant: closing_balance == opening_balance + deposits_in_period
    + interest_earned, and each entry's closing balance is the next
    entry's opening balance.
    """
    period_label: str
    status: PeriodStatus
    opening_balance: Decimal
    deposits_in_period: Decimal
    interest_earned: Decimal
    closing_balance: Decimal


@dataclass(frozen=True)
class RecurringScheduleSummary:
    """
    Totals of a recurring-deposit schedule.

    Attributes:
        total_deposited: All deposits up to the valuation date
        total_interest: Interest actually credited at completed FY ends
        current_value: Last completed closing balance + current FY deposits
        estimated_value: Closing balance of the last (current) period,
                         i.e. including interest accrued but not credited
        current_period_accrued_interest: Interest of the current FY so far
        interest_percent: total_interest / total_deposited × 100
    """
    total_deposited: Decimal
    total_interest: Decimal
    current_value: Decimal
    estimated_value: Decimal
    current_period_accrued_interest: Decimal
    interest_percent: Decimal


@dataclass(frozen=True)
class RecurringScheduleResult:
    schedule: list[AccrualScheduleEntry]
    summary: RecurringScheduleSummary


# =============================================================================
# COMBINED
# =============================================================================

@dataclass
class AccrualResult:
    """
    Valuation of one fixed-income holding, whatever the accrual mode.

    Attributes:
        mode: Accrual mode that produced the numbers
        instrument_type: e.g. "PPF", "FD"
        principal: Total deposited
        interest: Interest earned (credited interest for schedules)
        current_value: Value to report today
        estimated_value: Value including accrued-not-credited interest
        accrued_interest: Current-period interest not yet credited
        interest_percent: interest / principal × 100
        compounding_frequency: n (lump sum only)
        schedule: Per-FY schedule (recurring mode only)
        needs_transactions: True when a recurring holding was recorded with
                            only a principal, so its value is the principal
        warnings: Data quality notes
    """
    mode: AccrualMode
    instrument_type: str
    principal: Decimal
    interest: Decimal
    current_value: Decimal
    estimated_value: Decimal
    accrued_interest: Decimal
    interest_percent: Decimal
    compounding_frequency: int | None = None
    schedule: list[AccrualScheduleEntry] = field(default_factory=list)
    needs_transactions: bool = False
    warnings: list[str] = field(default_factory=list)
