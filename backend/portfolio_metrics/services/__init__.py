# backend/portfolio_metrics/services/__init__.py
"""
Calculation services of the portfolio metrics engine.

Every service here:
- Has NO knowledge of HTTP, persistence or price feeds
- Raises domain-specific exceptions (see exceptions.py)
- Receives all inputs (transactions, metadata, prices, rules) as arguments

Usage:
    from portfolio_metrics.services.portfolio import PortfolioMetricsService
    from portfolio_metrics.services.returns import calculate_xirr
    from portfolio_metrics.services import (
        ServiceError,
        InsufficientLotQuantityError,
    )

Architecture:
    services/
    ├── __init__.py        # This file - exception exports
    ├── exceptions.py      # Domain exceptions
    ├── constants.py       # Business constants and defaults
    ├── returns/           # CashFlowSolver
    │   ├── types.py       # CashFlow, XirrResult, XirrBreakdown
    │   └── xirr.py        # Newton-Raphson XIRR + cash-flow building
    ├── accrual/           # AccrualEngine
    │   ├── types.py       # Accrual modes, schedule and result types
    │   ├── financial_year.py
    │   ├── lump_sum.py    # Independent compounding per deposit
    │   ├── recurring.py   # FY crediting schedule (cutoff-day rule)
    │   └── engine.py      # Mode selection facade
    ├── lots/              # LotTracker
    │   ├── types.py       # Lot, GainRecord, UnrealizedMark
    │   └── tracker.py     # FIFO matching
    ├── tax/               # GainClassifier
    │   ├── types.py       # TaxRules, GainBuckets, summaries
    │   └── classifier.py  # Term classification + flat-rate estimate
    └── portfolio/         # Orchestration
        ├── types.py       # HoldingInput, HoldingMetrics, PortfolioMetrics
        └── service.py     # PortfolioMetricsService

Subpackages are imported explicitly by callers; this module only exports
the exception hierarchy so that importing it never pulls in the calculators.
"""

from portfolio_metrics.services.exceptions import (
    CalculationError,
    InsufficientLotQuantityError,
    InvalidDateError,
    InvalidInstrumentError,
    ServiceError,
    ValidationError,
)

__all__ = [
    "CalculationError",
    "InsufficientLotQuantityError",
    "InvalidDateError",
    "InvalidInstrumentError",
    "ServiceError",
    "ValidationError",
]
