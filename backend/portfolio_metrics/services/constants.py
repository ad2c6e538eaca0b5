# backend/portfolio_metrics/services/constants.py
"""
Centralized constants for the portfolio metrics services.

This module provides a single source of truth for the business constants
used across the calculators. Values that users are expected to tune
(tax rates, exemption, thresholds) are only DEFAULTS here; the live values
come from `portfolio_metrics.config.settings` and are passed explicitly into
the pure calculators.

Usage:
    from portfolio_metrics.services.constants import (
        CALENDAR_DAYS_PER_YEAR,
        IRR_MAX_ITERATIONS,
        ZERO,
    )
"""

from decimal import Decimal


# =============================================================================
# FINANCIAL CALENDAR CONSTANTS
# =============================================================================

# Day-count divisor for both XIRR discounting and lump-sum accrual.
# Plain 365 (not 365.25) so results are reproducible across leap years.
CALENDAR_DAYS_PER_YEAR: int = 365

MONTHS_PER_YEAR: int = 12

# Financial year runs April (month 4) to March
FINANCIAL_YEAR_START_MONTH: int = 4


# =============================================================================
# IRR/XIRR CALCULATION SETTINGS
# =============================================================================

# Maximum iterations for Newton-Raphson method in XIRR calculation
IRR_MAX_ITERATIONS: int = 100

# Convergence tolerance on both |NPV| and the step size
IRR_TOLERANCE: float = 1e-7

# Initial guess for IRR iteration (10% annual return)
IRR_INITIAL_GUESS: float = 0.1

# |dNPV/dr| below this is treated as a flat derivative
IRR_DERIVATIVE_EPSILON: float = 1e-10

# Lower bound for the rate so (1 + r) stays positive
IRR_MIN_RATE: float = -0.99


# =============================================================================
# FIXED INCOME
# =============================================================================

# Compounding frequency (times per year) per fixed-income type
COMPOUNDING_FREQUENCIES: dict[str, int] = {
    "PPF": 1,   # Annual
    "FD": 4,    # Quarterly (most banks)
    "RD": 4,    # Quarterly
    "NSC": 1,
    "KVP": 1,
    "EPF": 1,
    "VPF": 1,
    "SSY": 1,
}

DEFAULT_COMPOUNDING_FREQUENCY: int = 1

# Types valued with the financial-year crediting schedule
RECURRING_SCHEDULE_TYPES: frozenset[str] = frozenset({"PPF"})

# Types that normally take periodic deposits; without transactions they
# cannot be valued beyond their principal
RECURRING_DEPOSIT_TYPES: frozenset[str] = frozenset({"PPF", "RD", "EPF", "VPF", "SSY"})

# Interest on these types is tax-exempt
TAX_EXEMPT_INTEREST_TYPES: frozenset[str] = frozenset({"PPF", "EPF", "VPF", "SSY"})

# Deposits on or before this day of the month earn interest for that month
DEFAULT_DEPOSIT_CUTOFF_DAY: int = 5


# =============================================================================
# CAPITAL GAINS DEFAULTS
# =============================================================================

# Holding period (days) that must be EXCEEDED for a gain to be long-term
DEFAULT_LONG_TERM_THRESHOLD_DAYS: int = 365

# 12.5% on long-term gains above the exemption
DEFAULT_LONG_TERM_TAX_RATE: Decimal = Decimal("0.125")

# 20% on short-term gains
DEFAULT_SHORT_TERM_TAX_RATE: Decimal = Decimal("0.20")

# Annual long-term gain exemption
DEFAULT_LONG_TERM_EXEMPTION: Decimal = Decimal("125000")


# =============================================================================
# DECIMAL PRECISION CONSTANTS
# =============================================================================

# Currency amounts: 2 decimal places
CURRENCY_PRECISION: Decimal = Decimal("0.01")

# Rates and fractional quantities: 8 decimal places
SHARE_PRECISION: Decimal = Decimal("0.00000001")

# Display percentage: 2 decimal places (e.g., 12.34%)
DISPLAY_PERCENTAGE_PRECISION: Decimal = Decimal("0.01")


# =============================================================================
# UTILITY CONSTANTS
# =============================================================================

# Type-safe zero for Decimal comparisons
ZERO: Decimal = Decimal("0")

ONE_HUNDRED: Decimal = Decimal("100")
