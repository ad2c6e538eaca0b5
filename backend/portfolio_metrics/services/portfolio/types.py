# backend/portfolio_metrics/services/portfolio/types.py
"""
Input and output types of the PortfolioMetricsService.

Type Hierarchy:
    HoldingInput      - One holding: metadata, transaction log, current price
    HoldingMetrics    - Everything computed for one holding
    PortfolioMetrics  - All holdings + portfolio-wide tax and return
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from portfolio_metrics.models import InstrumentMetadata, Transaction
from portfolio_metrics.services.accrual.types import AccrualResult
from portfolio_metrics.services.constants import ZERO
from portfolio_metrics.services.lots.types import LotTrackingResult, UnrealizedMark
from portfolio_metrics.services.returns.types import XirrResult
from portfolio_metrics.services.tax.types import (
    HoldingTaxBreakdown,
    InterestTaxSummary,
    PortfolioTaxSummary,
)


@dataclass(frozen=True)
class HoldingInput:
    """
    One holding as supplied by the caller.

    Attributes:
        holding_id: Caller's identifier (symbol, database id, ...)
        instrument: Instrument metadata; its category picks the pipeline
        transactions: Full transaction history of the holding
        current_price: Latest price per unit (market instruments only).
                       None when no quote is available.
        name: Display name
    """
    holding_id: str
    instrument: InstrumentMetadata
    transactions: tuple[Transaction, ...] = ()
    current_price: Decimal | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "transactions", tuple(self.transactions))


@dataclass
class HoldingMetrics:
    """
    Computed metrics of one holding.

    Attributes:
        holding_id / name / instrument_type: Echoed from the input
        invested: FIFO cost basis of open lots (market) or principal
                  deposited (fixed income)
        current_value: Market value or accrued value; None when a market
                       holding has no current price
        realized_gain: Sum of FIFO realized gains (market only)
        unrealized_gain: current_value - invested (None without a value)
        absolute_return: unrealized_gain / invested (None if not computable)
        xirr: Annualized return over the holding's cash flows
        lots: LotTracker output (market only)
        unrealized_marks: Open lots marked at current_price (market only)
        tax: Capital-gains breakdown (market only)
        accrual: AccrualEngine output (fixed income only)
        warnings: Data quality notes
    """
    holding_id: str
    instrument_type: str
    invested: Decimal
    current_value: Decimal | None
    xirr: XirrResult
    name: str | None = None
    realized_gain: Decimal = ZERO
    unrealized_gain: Decimal | None = None
    absolute_return: Decimal | None = None
    lots: LotTrackingResult | None = None
    unrealized_marks: list[UnrealizedMark] = field(default_factory=list)
    tax: HoldingTaxBreakdown | None = None
    accrual: AccrualResult | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def is_fixed_income(self) -> bool:
        return self.accrual is not None


@dataclass
class PortfolioMetrics:
    """
    Portfolio-wide result of one evaluation.

    Attributes:
        as_of: Valuation date
        holdings: Per-holding metrics in input order
        total_invested: Sum of holding `invested`
        total_current_value: Sum of known holding values
        tax: Capital-gains summary over market holdings
        interest_tax: Fixed-income interest split taxable / exempt
        market_xirr: Combined XIRR of all market holdings
        warnings: Holding warnings, prefixed with the holding id
    """
    as_of: date
    holdings: list[HoldingMetrics]
    total_invested: Decimal
    total_current_value: Decimal
    tax: PortfolioTaxSummary
    interest_tax: InterestTaxSummary
    market_xirr: XirrResult
    warnings: list[str] = field(default_factory=list)

    @property
    def total_gain(self) -> Decimal:
        return self.total_current_value - self.total_invested
