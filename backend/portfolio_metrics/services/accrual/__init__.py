# backend/portfolio_metrics/services/accrual/__init__.py
"""
Accrual package (AccrualEngine).

Architecture:
    accrual/
    ├── __init__.py        # This file - package exports
    ├── types.py           # AccrualMode, FinancialYear, schedule/result types
    ├── financial_year.py  # April–March calendar helpers
    ├── lump_sum.py        # Independent compounding per deposit
    ├── recurring.py       # FY crediting schedule with the cutoff-day rule
    └── engine.py          # AccrualEngine - mode selection + facade

Usage:
    from portfolio_metrics.services.accrual import AccrualEngine

    result = AccrualEngine().evaluate(instrument, transactions, as_of)
"""

from portfolio_metrics.services.accrual.engine import AccrualEngine, resolve_accrual_mode
from portfolio_metrics.services.accrual.financial_year import (
    financial_year_month,
    get_financial_year,
    months_elapsed_in_financial_year,
)
from portfolio_metrics.services.accrual.lump_sum import (
    calculate_compound_value,
    calculate_lump_sum,
    get_compounding_frequency,
)
from portfolio_metrics.services.accrual.recurring import generate_recurring_schedule
from portfolio_metrics.services.accrual.types import (
    AccrualMode,
    AccrualResult,
    AccrualScheduleEntry,
    Deposit,
    FinancialYear,
    LumpSumResult,
    PeriodStatus,
    RecurringScheduleResult,
    RecurringScheduleSummary,
)

__all__ = [
    # Engine
    "AccrualEngine",
    "resolve_accrual_mode",
    # Types
    "AccrualMode",
    "AccrualResult",
    "AccrualScheduleEntry",
    "Deposit",
    "FinancialYear",
    "LumpSumResult",
    "PeriodStatus",
    "RecurringScheduleResult",
    "RecurringScheduleSummary",
    # Functions
    "calculate_compound_value",
    "calculate_lump_sum",
    "financial_year_month",
    "generate_recurring_schedule",
    "get_compounding_frequency",
    "get_financial_year",
    "months_elapsed_in_financial_year",
]
