# backend/portfolio_metrics/services/portfolio/service.py
"""
PortfolioMetricsService - orchestrator for all derived portfolio metrics.

This is the single entry point that wires the pure calculators together:
- evaluate_holding(): metrics for one holding
- evaluate_portfolio(): all holdings + portfolio tax summary + combined XIRR

Pipelines:
    Market instrument (EQUITY):
        transactions → LotTracker → open lots → mark at current price
                                 ↘ gain records ↘
                                   GainClassifier (per holding)
        transactions + open_quantity × price → XIRR

    Fixed income:
        transactions → AccrualEngine → current value
        transactions + current value → XIRR

Design Principles:
- Rules are resolved from Settings ONCE, at construction, and passed
  explicitly to the calculators
- Full recompute on every call; nothing is cached
- No I/O: prices and metadata are supplied by the caller

Usage:
    from portfolio_metrics.services.portfolio import PortfolioMetricsService

    service = PortfolioMetricsService()
    metrics = service.evaluate_portfolio(holdings, as_of=date(2024, 6, 1))
"""

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable

from portfolio_metrics.config import Settings, settings as default_settings
from portfolio_metrics.models import Transaction, TransactionType
from portfolio_metrics.services.accrual import AccrualEngine
from portfolio_metrics.services.constants import CURRENCY_PRECISION, ZERO
from portfolio_metrics.services.exceptions import ServiceError
from portfolio_metrics.services.lots import LotTracker, mark_open_lots
from portfolio_metrics.services.portfolio.types import (
    HoldingInput,
    HoldingMetrics,
    PortfolioMetrics,
)
from portfolio_metrics.services.returns import (
    XirrResult,
    build_cash_flows,
    calculate_absolute_return,
    calculate_xirr,
)
from portfolio_metrics.services.tax import GainClassifier, TaxRules
from portfolio_metrics.utils.context import (
    get_calculation_context,
    restore_calculation_context,
    set_calculation_context,
)
from portfolio_metrics.utils.date_utils import parse_date

logger = logging.getLogger(__name__)


class PortfolioMetricsService:
    """
    Computes holding and portfolio metrics from explicit inputs.

    Attributes:
        _settings: Settings the rules were resolved from
        _solver_options: XIRR limits and day count
        _accrual_engine: Fixed-income valuation
        _lot_tracker: FIFO matching
        _classifier: Capital-gains classification
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """
        Initialize the service.

        Args:
            settings: Configuration to resolve rules from.
                      If None, uses the module-level settings.
        """
        self._settings = settings or default_settings

        self._solver_options: dict[str, Any] = {
            "max_iterations": self._settings.xirr_max_iterations,
            "tolerance": self._settings.xirr_tolerance,
            "initial_guess": self._settings.xirr_initial_guess,
            "days_per_year": self._settings.days_per_year,
        }
        self._accrual_engine = AccrualEngine(
            days_per_year=self._settings.days_per_year,
            default_cutoff_day=self._settings.deposit_cutoff_day,
        )
        self._lot_tracker = LotTracker()
        self._classifier = GainClassifier(TaxRules.from_settings(self._settings))

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def evaluate_holding(self, holding: HoldingInput, as_of: date | str) -> HoldingMetrics:
        """
        Compute metrics for a single holding.

        Args:
            holding: Metadata, transactions and (market) current price
            as_of: Valuation date

        Returns:
            HoldingMetrics

        Raises:
            InsufficientLotQuantityError: If a SELL exceeds the open lots
            InvalidInstrumentError: If fixed-income metadata is incomplete
            InvalidDateError: If as_of cannot be parsed
        """
        valuation_date = parse_date(as_of, field="as_of")
        previous_context = get_calculation_context()
        set_calculation_context("holding_id", holding.holding_id)

        try:
            metrics = self._evaluate(holding, valuation_date)
        finally:
            restore_calculation_context(previous_context)
        return metrics

    def _evaluate(self, holding: HoldingInput, valuation_date: date) -> HoldingMetrics:
        if holding.instrument.is_fixed_income:
            metrics = self._evaluate_fixed_income(holding, valuation_date)
        else:
            metrics = self._evaluate_market(holding, valuation_date)

        if not metrics.xirr.is_reliable and metrics.xirr.is_computable:
            logger.warning(
                f"XIRR for {holding.holding_id} is unreliable "
                f"({metrics.xirr.status.value} after {metrics.xirr.iterations} iterations)"
            )

        logger.debug(
            f"Evaluated {holding.holding_id}: invested={metrics.invested}, "
            f"value={metrics.current_value}, xirr={metrics.xirr.rate}"
        )
        return metrics

    def evaluate_portfolio(
            self,
            holdings: Iterable[HoldingInput],
            as_of: date | str,
            exemption_used: Decimal = ZERO,
    ) -> PortfolioMetrics:
        """
        Compute metrics for every holding plus portfolio-wide aggregates.

        Args:
            holdings: Holdings to evaluate
            as_of: Valuation date
            exemption_used: Long-term exemption already consumed this period

        Returns:
            PortfolioMetrics

        Raises:
            ServiceError: Any holding error is logged and re-raised; a
                          portfolio is never reported with holdings missing
        """
        valuation_date = parse_date(as_of, field="as_of")
        previous_context = get_calculation_context()
        set_calculation_context("as_of", valuation_date.isoformat())

        holdings = list(holdings)
        try:
            results: list[HoldingMetrics] = []
            for holding in holdings:
                try:
                    results.append(self.evaluate_holding(holding, valuation_date))
                except ServiceError as e:
                    logger.error(f"Could not evaluate holding {holding.holding_id}: {e.message}")
                    raise

            return self._aggregate(holdings, results, valuation_date, exemption_used)
        finally:
            restore_calculation_context(previous_context)

    # =========================================================================
    # PIPELINES
    # =========================================================================

    def _evaluate_market(self, holding: HoldingInput, as_of: date) -> HoldingMetrics:
        transactions = [t for t in holding.transactions if t.date <= as_of]
        lots = self._lot_tracker.process(transactions, holding_id=holding.holding_id)
        warnings: list[str] = []

        invested = lots.cost_basis
        price = holding.current_price

        if price is None:
            if lots.open_quantity > ZERO:
                warnings.append(f"No current price for {holding.holding_id}; value unknown")
                logger.warning(warnings[-1])
                current_value = None
            else:
                current_value = ZERO
            marks = []
        else:
            marks = mark_open_lots(lots.open_lots, price, as_of)
            current_value = lots.open_quantity * price

        tax = self._classifier.classify_holding(
            holding.holding_id, lots.gain_records, marks, name=holding.name
        )
        xirr = calculate_xirr(
            build_cash_flows(transactions, current_value, as_of), **self._solver_options
        )

        unrealized = None if current_value is None else current_value - invested

        return HoldingMetrics(
            holding_id=holding.holding_id,
            name=holding.name,
            instrument_type=holding.instrument.instrument_type,
            invested=_money(invested),
            current_value=None if current_value is None else _money(current_value),
            realized_gain=_money(lots.total_realized),
            unrealized_gain=None if unrealized is None else _money(unrealized),
            absolute_return=(
                None if current_value is None
                else calculate_absolute_return(invested, current_value)
            ),
            xirr=xirr,
            lots=lots,
            unrealized_marks=marks,
            tax=tax,
            warnings=warnings,
        )

    def _evaluate_fixed_income(self, holding: HoldingInput, as_of: date) -> HoldingMetrics:
        accrual = self._accrual_engine.evaluate(holding.instrument, holding.transactions, as_of)
        flows_source = self._deposit_transactions(holding, as_of)

        xirr = calculate_xirr(
            build_cash_flows(flows_source, accrual.current_value, as_of), **self._solver_options
        )

        return HoldingMetrics(
            holding_id=holding.holding_id,
            name=holding.name,
            instrument_type=holding.instrument.instrument_type,
            invested=accrual.principal,
            current_value=accrual.current_value,
            unrealized_gain=accrual.interest,
            absolute_return=calculate_absolute_return(accrual.principal, accrual.current_value),
            xirr=xirr,
            accrual=accrual,
            warnings=list(accrual.warnings),
        )

    @staticmethod
    def _deposit_transactions(holding: HoldingInput, as_of: date) -> list[Transaction]:
        """
        Deposits to feed the XIRR of a fixed-income holding.

        A holding recorded with only a principal and a start date gets one
        synthetic deposit, matching how the AccrualEngine values it.
        """
        deposits = [t for t in holding.transactions if t.is_buy and t.date <= as_of]
        if deposits:
            return deposits

        instrument = holding.instrument
        if instrument.principal and instrument.start_date and instrument.start_date <= as_of:
            return [Transaction(
                kind=TransactionType.BUY,
                quantity=Decimal("1"),
                unit_price=instrument.principal,
                date=instrument.start_date,
            )]
        return []

    # =========================================================================
    # AGGREGATION
    # =========================================================================

    def _aggregate(
            self,
            holdings: list[HoldingInput],
            results: list[HoldingMetrics],
            as_of: date,
            exemption_used: Decimal,
    ) -> PortfolioMetrics:
        market = [m for m in results if not m.is_fixed_income]
        fixed_income = [m for m in results if m.is_fixed_income]

        tax = self._classifier.summarize(
            (m.tax for m in market if m.tax is not None),
            exemption_used=exemption_used,
        )
        interest_tax = self._classifier.classify_interest(
            (m.instrument_type, m.accrual.interest) for m in fixed_income
        )

        warnings = [f"{m.holding_id}: {w}" for m in results for w in m.warnings]

        metrics = PortfolioMetrics(
            as_of=as_of,
            holdings=results,
            total_invested=sum((m.invested for m in results), ZERO),
            total_current_value=sum(
                (m.current_value for m in results if m.current_value is not None), ZERO
            ),
            tax=tax,
            interest_tax=interest_tax,
            market_xirr=self._combined_market_xirr(holdings, results, as_of),
            warnings=warnings,
        )

        logger.info(
            f"Portfolio evaluated: {len(results)} holdings, "
            f"value={metrics.total_current_value}, invested={metrics.total_invested}"
        )
        return metrics

    def _combined_market_xirr(
            self,
            holdings: list[HoldingInput],
            results: list[HoldingMetrics],
            as_of: date,
    ) -> XirrResult:
        """
        XIRR of all market holdings together.

        Holdings without a known value are left out entirely, since their
        flows would count as a total loss.
        """
        transactions: list[Transaction] = []
        terminal = ZERO
        for holding, metrics in zip(holdings, results):
            if metrics.is_fixed_income or metrics.current_value is None:
                continue
            terminal += metrics.current_value
            transactions.extend(t for t in holding.transactions if t.date <= as_of)

        return calculate_xirr(
            build_cash_flows(transactions, terminal, as_of), **self._solver_options
        )


def _money(value: Decimal) -> Decimal:
    return value.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP)
