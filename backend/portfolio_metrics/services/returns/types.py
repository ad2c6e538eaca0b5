# backend/portfolio_metrics/services/returns/types.py
"""
Data types for return calculations.

Architecture:
    - CashFlow: Signed, dated money movement (solver input)
    - SolverStatus: How the XIRR solver terminated
    - XirrResult: Tagged solver output (rate + status)
    - XirrBreakdown: Explanation of an XIRR computed from transactions
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum


# =============================================================================
# INPUT TYPES
# =============================================================================

@dataclass(frozen=True)
class CashFlow:
    """
    Represents a cash flow event for XIRR calculations.

    Attributes:
        date: When the cash flow occurred
        amount: Negative = outflow (money invested, i.e. a BUY),
                positive = inflow (SELL proceeds or terminal valuation)
    """
    date: date
    amount: Decimal


# =============================================================================
# RESULT TYPES
# =============================================================================

class SolverStatus(str, Enum):
    """
    Termination reason of the XIRR solver.

    Attributes:
        CONVERGED: |NPV| or the step size fell below tolerance
        MAX_ITERATIONS_EXCEEDED: Iteration cap hit; rate is the last estimate
        DEGENERATE_DERIVATIVE: Derivative too flat (or step non-finite);
                               rate is the estimate at that point
        NOT_COMPUTABLE: Fewer than two cash flows; rate is 0
    """
    CONVERGED = "converged"
    MAX_ITERATIONS_EXCEEDED = "max_iterations_exceeded"
    DEGENERATE_DERIVATIVE = "degenerate_derivative"
    NOT_COMPUTABLE = "not_computable"


@dataclass(frozen=True)
class XirrResult:
    """
    Annualized money-weighted return with its solver status.

    The rate is a decimal (0.15 = 15%). Callers decide whether to show
    or suppress a result that is not `is_reliable`.
    """
    rate: Decimal
    status: SolverStatus
    iterations: int = 0

    @property
    def is_computable(self) -> bool:
        return self.status != SolverStatus.NOT_COMPUTABLE

    @property
    def is_reliable(self) -> bool:
        """True only when the solver actually converged."""
        return self.status == SolverStatus.CONVERGED

    @property
    def percentage(self) -> Decimal:
        """Rate as a percentage (15.3 for 15.3%)."""
        return self.rate * Decimal("100")

    @classmethod
    def not_computable(cls) -> "XirrResult":
        return cls(rate=Decimal("0"), status=SolverStatus.NOT_COMPUTABLE)


@dataclass(frozen=True)
class XirrBreakdown:
    """
    Detailed explanation of an XIRR built from a transaction list.

    Attributes:
        cash_flows: Flows fed to the solver, sorted by date
        total_invested: Sum of BUY amounts
        total_sold: Sum of SELL amounts
        terminal_value: Current valuation used as the final inflow
        net_invested: total_invested - total_sold
        total_return: terminal_value + total_sold - total_invested
        absolute_return: total_return / total_invested (None if nothing invested)
        xirr: Solver result
        first_date: Date of the earliest flow (None if no flows)
        last_date: Date of the latest flow (None if no flows)
        transaction_count: Number of transactions considered
    """
    total_invested: Decimal
    total_sold: Decimal
    terminal_value: Decimal
    net_invested: Decimal
    total_return: Decimal
    absolute_return: Decimal | None
    xirr: XirrResult
    first_date: date | None
    last_date: date | None
    transaction_count: int
    cash_flows: list[CashFlow] = field(default_factory=list)
