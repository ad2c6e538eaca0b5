# backend/portfolio_metrics/services/returns/__init__.py
"""
Returns package (CashFlowSolver).

Architecture:
    returns/
    ├── __init__.py   # This file - package exports
    ├── types.py      # CashFlow, SolverStatus, XirrResult, XirrBreakdown
    └── xirr.py       # XIRR solver and cash-flow helpers

Usage:
    from portfolio_metrics.services.returns import calculate_xirr, CashFlow

    result = calculate_xirr([
        CashFlow(date(2023, 1, 1), Decimal("-1000")),
        CashFlow(date(2024, 1, 1), Decimal("1100")),
    ])
    if result.is_reliable:
        print(f"XIRR: {result.percentage:.2f}%")
"""

from portfolio_metrics.services.returns.types import (
    CashFlow,
    SolverStatus,
    XirrBreakdown,
    XirrResult,
)
from portfolio_metrics.services.returns.xirr import (
    build_cash_flows,
    calculate_absolute_return,
    calculate_cagr,
    calculate_xirr,
    calculate_xirr_from_transactions,
    explain_xirr,
)

__all__ = [
    # Types
    "CashFlow",
    "SolverStatus",
    "XirrBreakdown",
    "XirrResult",
    # Functions
    "build_cash_flows",
    "calculate_absolute_return",
    "calculate_cagr",
    "calculate_xirr",
    "calculate_xirr_from_transactions",
    "explain_xirr",
]
