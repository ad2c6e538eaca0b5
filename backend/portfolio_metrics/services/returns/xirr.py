# backend/portfolio_metrics/services/returns/xirr.py
"""
Return calculation functions (CashFlowSolver).

This module contains pure functions for:
- Extended IRR (XIRR): money-weighted annualized return for cash flows on
  irregular dates (Newton-Raphson solver)
- Building the XIRR cash-flow series from a transaction list plus a
  terminal valuation
- Absolute return and CAGR helpers used alongside XIRR

All functions are stateless. No external dependencies (scipy, numpy).

Formulas:
    XIRR solves: Σ CF_i / (1 + r)^((d_i - d_0) / 365) = 0

    Absolute Return = (Current - Invested) / Invested

    CAGR = (End / Begin)^(1 / years) - 1

Sign convention:
    BUY = outflow (negative), SELL and terminal valuation = inflow (positive).

Precision Note:
    The Newton-Raphson solver operates in float for performance. The final
    rate is converted back to Decimal with 8 decimal places, which is far
    finer than any reported return.
"""

import decimal
import logging
import math
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable

from portfolio_metrics.models import Transaction
from portfolio_metrics.services.constants import (
    CALENDAR_DAYS_PER_YEAR,
    IRR_DERIVATIVE_EPSILON,
    IRR_INITIAL_GUESS,
    IRR_MAX_ITERATIONS,
    IRR_MIN_RATE,
    IRR_TOLERANCE,
    SHARE_PRECISION,
    ZERO,
)
from portfolio_metrics.services.returns.types import (
    CashFlow,
    SolverStatus,
    XirrBreakdown,
    XirrResult,
)
from portfolio_metrics.utils.date_utils import parse_date

logger = logging.getLogger(__name__)


# =============================================================================
# XIRR SOLVER
# =============================================================================

def calculate_xirr(
        cash_flows: list[CashFlow],
        max_iterations: int = IRR_MAX_ITERATIONS,
        tolerance: float = IRR_TOLERANCE,
        initial_guess: float = IRR_INITIAL_GUESS,
        days_per_year: int = CALENDAR_DAYS_PER_YEAR,
) -> XirrResult:
    """
    Calculate Extended Internal Rate of Return (XIRR).

    XIRR is the discount rate that makes the NPV of all cash flows zero:

        Solve for r: Σ CF_i / (1 + r)^((d_i - d_0) / 365) = 0

    Newton-Raphson iteration from `initial_guess`. Stops when |NPV| or
    the step size falls below `tolerance`, after at most
    `max_iterations` iterations. Same-sign series are NOT rejected up
    front; they simply fail to converge and are tagged as such.

    Args:
        cash_flows: List of CashFlow (negative = outflow, positive = inflow)
        max_iterations: Hard cap on solver iterations
        tolerance: Convergence tolerance
        initial_guess: Starting rate (0.1 = 10%)
        days_per_year: Day-count divisor

    Returns:
        XirrResult. With fewer than two cash flows the result is
        NOT_COMPUTABLE with rate 0; a flat derivative returns the current
        estimate tagged DEGENERATE_DERIVATIVE; an exhausted iteration cap
        returns the last estimate tagged MAX_ITERATIONS_EXCEEDED.

    Example:
        cash_flows = [
            CashFlow(date(2024, 1, 1), Decimal("-10000")),
            CashFlow(date(2025, 1, 1), Decimal("11000")),
        ]
        calculate_xirr(cash_flows).rate  # ~0.10
    """
    if len(cash_flows) < 2:
        return XirrResult.not_computable()

    sorted_flows = sorted(cash_flows, key=lambda x: x.date)
    base_date = sorted_flows[0].date

    # (years from first flow, amount) pairs
    flows = [
        ((cf.date - base_date).days / days_per_year, float(cf.amount))
        for cf in sorted_flows
    ]

    rate = float(initial_guess)

    for iteration in range(1, max_iterations + 1):
        try:
            npv, npv_derivative = _npv_and_derivative(flows, rate)
        except (OverflowError, ZeroDivisionError):
            logger.warning(f"XIRR overflowed at rate={rate}; returning current estimate")
            return _to_result(rate, SolverStatus.DEGENERATE_DERIVATIVE, iteration)

        if abs(npv) < tolerance:
            return _to_result(rate, SolverStatus.CONVERGED, iteration)

        if abs(npv_derivative) < IRR_DERIVATIVE_EPSILON:
            logger.warning(f"XIRR derivative is flat at rate={rate}; returning current estimate")
            return _to_result(rate, SolverStatus.DEGENERATE_DERIVATIVE, iteration)

        new_rate = rate - npv / npv_derivative

        if not math.isfinite(new_rate):
            logger.warning(f"XIRR step is not finite at rate={rate}; returning current estimate")
            return _to_result(rate, SolverStatus.DEGENERATE_DERIVATIVE, iteration)

        clamped = new_rate < IRR_MIN_RATE
        if clamped:
            new_rate = IRR_MIN_RATE

        # A step pinned at the lower bound is not convergence
        if not clamped and abs(new_rate - rate) < tolerance:
            return _to_result(new_rate, SolverStatus.CONVERGED, iteration)

        rate = new_rate

    logger.warning(f"XIRR did not converge after {max_iterations} iterations (last rate={rate})")
    return _to_result(rate, SolverStatus.MAX_ITERATIONS_EXCEEDED, max_iterations)


def _npv_and_derivative(
        flows: list[tuple[float, float]],
        rate: float,
) -> tuple[float, float]:
    """
    NPV and dNPV/dr at `rate`.

    Derivative: d/dr [CF / (1+r)^t] = -t * CF / (1+r)^(t+1)
    """
    npv = 0.0
    npv_derivative = 0.0
    base = 1.0 + rate

    for years, amount in flows:
        factor = base ** years
        npv += amount / factor
        npv_derivative -= years * amount / (factor * base)

    return npv, npv_derivative


def _to_result(rate: float, status: SolverStatus, iterations: int) -> XirrResult:
    value = Decimal(str(rate))

    # Degenerate exits can leave estimates far beyond 28 significant digits
    with decimal.localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 1 - SHARE_PRECISION.as_tuple().exponent)
        quantized = value.quantize(SHARE_PRECISION, rounding=ROUND_HALF_UP)

    return XirrResult(rate=quantized, status=status, iterations=iterations)


# =============================================================================
# CASH FLOWS FROM TRANSACTIONS
# =============================================================================

def build_cash_flows(
        transactions: Iterable[Transaction],
        terminal_value: Decimal | None,
        as_of: date | str,
) -> list[CashFlow]:
    """
    Build the XIRR cash-flow series for one holding (or a group of holdings).

    - BUY total amounts become outflows (negative)
    - SELL total amounts become inflows (positive)
    - Records with a non-positive amount are skipped
    - The terminal valuation is appended as an inflow dated `as_of`,
      only when it is positive

    Args:
        transactions: Transactions in any order
        terminal_value: Current value of what is still held
        as_of: Valuation date for the terminal flow

    Returns:
        Cash flows sorted by date (stable for same-day flows)
    """
    valuation_date = parse_date(as_of, field="as_of")
    cash_flows: list[CashFlow] = []

    for txn in transactions:
        amount = txn.total_amount
        if amount is None or amount <= ZERO:
            continue
        cash_flows.append(
            CashFlow(date=txn.date, amount=amount if txn.is_sell else -amount)
        )

    if terminal_value is not None and terminal_value > ZERO:
        cash_flows.append(CashFlow(date=valuation_date, amount=terminal_value))

    return sorted(cash_flows, key=lambda cf: cf.date)


def calculate_xirr_from_transactions(
        transactions: Iterable[Transaction],
        terminal_value: Decimal | None,
        as_of: date | str,
        **solver_options: Any,
) -> XirrResult:
    """
    Calculate XIRR from a transaction list and the current valuation.

    Args:
        transactions: BUY/SELL records
        terminal_value: Current value of the remaining position
        as_of: Valuation date
        **solver_options: Forwarded to calculate_xirr (max_iterations, ...)

    Returns:
        XirrResult (NOT_COMPUTABLE if fewer than two flows result)
    """
    cash_flows = build_cash_flows(transactions, terminal_value, as_of)
    return calculate_xirr(cash_flows, **solver_options)


def explain_xirr(
        transactions: list[Transaction],
        terminal_value: Decimal,
        as_of: date | str,
        **solver_options: Any,
) -> XirrBreakdown:
    """
    Calculate XIRR and return everything that went into it.

    Intended for "why is my return X%?" views: the exact flows, the
    invested/sold totals and the absolute return next to the XIRR.
    """
    cash_flows = build_cash_flows(transactions, terminal_value, as_of)
    xirr = calculate_xirr(cash_flows, **solver_options)

    total_invested = sum(
        (t.total_amount for t in transactions if t.is_buy and t.total_amount > ZERO),
        ZERO,
    )
    total_sold = sum(
        (t.total_amount for t in transactions if t.is_sell and t.total_amount > ZERO),
        ZERO,
    )
    terminal = terminal_value if terminal_value > ZERO else ZERO
    total_return = terminal + total_sold - total_invested

    return XirrBreakdown(
        cash_flows=cash_flows,
        total_invested=total_invested,
        total_sold=total_sold,
        terminal_value=terminal,
        net_invested=total_invested - total_sold,
        total_return=total_return,
        absolute_return=(total_return / total_invested) if total_invested > ZERO else None,
        xirr=xirr,
        first_date=cash_flows[0].date if cash_flows else None,
        last_date=cash_flows[-1].date if cash_flows else None,
        transaction_count=len(transactions),
    )


# =============================================================================
# SIMPLE RETURN HELPERS
# =============================================================================

def calculate_absolute_return(
        invested: Decimal,
        current_value: Decimal,
) -> Decimal | None:
    """
    Absolute (non-annualized) return on invested capital.

    Formula: (Current - Invested) / Invested

    Returns:
        Return as decimal (0.15 = 15%), or None if invested <= 0
    """
    if invested <= ZERO:
        return None

    return (current_value - invested) / invested


def calculate_cagr(
        begin_value: Decimal,
        end_value: Decimal,
        years: Decimal,
) -> Decimal | None:
    """
    Calculate Compound Annual Growth Rate.

    Formula: CAGR = (End / Begin)^(1 / years) - 1

    WARNING: Does NOT adjust for intermediate cash flows. Use XIRR for
    holdings with more than one deposit.

    Returns:
        CAGR as decimal, Decimal("-1") for a total loss, or None if
        begin_value or years is not positive
    """
    if begin_value <= ZERO or years <= ZERO:
        return None

    if end_value <= ZERO:
        return Decimal("-1")

    ratio = end_value / begin_value
    exponent = Decimal("1") / years

    try:
        cagr = ratio ** exponent - Decimal("1")
    except decimal.InvalidOperation:
        # Fallback to float for extreme values
        cagr = Decimal(str(float(ratio) ** float(exponent))) - Decimal("1")

    return cagr
