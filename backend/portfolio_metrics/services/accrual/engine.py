# backend/portfolio_metrics/services/accrual/engine.py
"""
AccrualEngine - single entry point for fixed-income valuation.

Selects the accrual mode from instrument metadata and delegates:
- RECURRING_SCHEDULE (PPF): financial-year crediting schedule
- LUMP_SUM (everything else): each deposit compounds independently

Deposits are the holding's BUY records (opening balances included) dated on
or before the valuation date. SELL records are ignored by accrual.

Holdings recorded without any transaction are still valued:
- a recurring-deposit type (PPF, RD, EPF, VPF, SSY) reports its principal
  and is flagged `needs_transactions`
- any other type is valued as one deposit of the principal on its start date

Usage:
    engine = AccrualEngine()
    result = engine.evaluate(instrument, transactions, as_of=date(2025, 6, 15))
    result.current_value
"""

import logging
from datetime import date
from decimal import ROUND_HALF_UP
from typing import Sequence

from portfolio_metrics.models import InstrumentMetadata, Transaction
from portfolio_metrics.services.accrual.lump_sum import (
    calculate_lump_sum,
    get_compounding_frequency,
)
from portfolio_metrics.services.accrual.recurring import generate_recurring_schedule
from portfolio_metrics.services.accrual.types import AccrualMode, AccrualResult, Deposit
from portfolio_metrics.services.constants import (
    CALENDAR_DAYS_PER_YEAR,
    CURRENCY_PRECISION,
    DEFAULT_DEPOSIT_CUTOFF_DAY,
    RECURRING_DEPOSIT_TYPES,
    RECURRING_SCHEDULE_TYPES,
    ZERO,
)
from portfolio_metrics.services.exceptions import InvalidInstrumentError
from portfolio_metrics.utils.date_utils import parse_date

logger = logging.getLogger(__name__)


def resolve_accrual_mode(instrument: InstrumentMetadata) -> AccrualMode:
    """PPF-style instruments use the FY schedule, everything else lump sum."""
    if instrument.instrument_type in RECURRING_SCHEDULE_TYPES:
        return AccrualMode.RECURRING_SCHEDULE
    return AccrualMode.LUMP_SUM


class AccrualEngine:
    """
    Values fixed-income holdings in either accrual mode.

    Stateless apart from its conventions; safe to share.

    Attributes:
        _days_per_year: Day-count divisor for lump-sum compounding
        _default_cutoff_day: Cutoff day when the instrument has none
    """

    def __init__(
            self,
            days_per_year: int = CALENDAR_DAYS_PER_YEAR,
            default_cutoff_day: int = DEFAULT_DEPOSIT_CUTOFF_DAY,
    ) -> None:
        self._days_per_year = days_per_year
        self._default_cutoff_day = default_cutoff_day

    def evaluate(
            self,
            instrument: InstrumentMetadata,
            transactions: Sequence[Transaction],
            as_of: date | str,
    ) -> AccrualResult:
        """
        Value one fixed-income holding as of a date.

        Args:
            instrument: Fixed-income metadata (type, rate, overrides)
            transactions: The holding's transaction log
            as_of: Valuation date

        Returns:
            AccrualResult for the selected mode

        Raises:
            InvalidInstrumentError: If the instrument is not fixed income
                                    or has no annual rate
            InvalidDateError: If as_of cannot be parsed
        """
        valuation_date = parse_date(as_of, field="as_of")
        self._validate(instrument)

        deposits = self._collect_deposits(transactions, valuation_date)
        mode = resolve_accrual_mode(instrument)

        if not deposits:
            return self._evaluate_without_transactions(instrument, mode, valuation_date)

        if mode == AccrualMode.RECURRING_SCHEDULE:
            return self._evaluate_schedule(instrument, deposits, valuation_date)

        return self._evaluate_lump_sum(instrument, deposits, valuation_date)

    # =========================================================================
    # MODES
    # =========================================================================

    def _evaluate_lump_sum(
            self,
            instrument: InstrumentMetadata,
            deposits: list[Deposit],
            as_of: date,
    ) -> AccrualResult:
        frequency = self._compounding_frequency(instrument)
        lump = calculate_lump_sum(
            deposits,
            instrument.annual_rate,
            as_of,
            compounding_frequency=frequency,
            days_per_year=self._days_per_year,
        )
        return AccrualResult(
            mode=AccrualMode.LUMP_SUM,
            instrument_type=instrument.instrument_type,
            principal=lump.principal,
            interest=lump.interest,
            current_value=lump.current_value,
            estimated_value=lump.current_value,
            accrued_interest=ZERO,
            interest_percent=lump.interest_percent,
            compounding_frequency=frequency,
        )

    def _evaluate_schedule(
            self,
            instrument: InstrumentMetadata,
            deposits: list[Deposit],
            as_of: date,
    ) -> AccrualResult:
        cutoff_day = instrument.deposit_cutoff_day or self._default_cutoff_day
        result = generate_recurring_schedule(
            deposits, instrument.annual_rate, as_of, cutoff_day=cutoff_day
        )
        # deposits were already filtered to as_of, so a schedule always exists
        summary = result.summary
        return AccrualResult(
            mode=AccrualMode.RECURRING_SCHEDULE,
            instrument_type=instrument.instrument_type,
            principal=summary.total_deposited,
            interest=summary.total_interest,
            current_value=summary.current_value,
            estimated_value=summary.estimated_value,
            accrued_interest=summary.current_period_accrued_interest,
            interest_percent=summary.interest_percent,
            schedule=result.schedule,
        )

    def _evaluate_without_transactions(
            self,
            instrument: InstrumentMetadata,
            mode: AccrualMode,
            as_of: date,
    ) -> AccrualResult:
        principal = instrument.principal or ZERO

        if principal > ZERO and instrument.instrument_type not in RECURRING_DEPOSIT_TYPES:
            start = instrument.start_date or as_of
            logger.debug(
                f"{instrument.instrument_type} has no transactions; "
                f"valuing principal {principal} from {start}"
            )
            if start > as_of:
                start = as_of
            return self._evaluate_lump_sum(instrument, [Deposit(start, principal)], as_of)

        principal = principal.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP)
        result = AccrualResult(
            mode=mode,
            instrument_type=instrument.instrument_type,
            principal=principal,
            interest=ZERO,
            current_value=principal,
            estimated_value=principal,
            accrued_interest=ZERO,
            interest_percent=ZERO,
            needs_transactions=instrument.instrument_type in RECURRING_DEPOSIT_TYPES,
        )
        if result.needs_transactions:
            result.warnings.append(
                f"{instrument.instrument_type} holding has no deposits recorded; "
                f"value shown is the principal only"
            )
            logger.warning(result.warnings[-1])
        return result

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _validate(instrument: InstrumentMetadata) -> None:
        if not instrument.is_fixed_income:
            raise InvalidInstrumentError(
                f"Accrual requires a fixed-income instrument, got {instrument.category.value}",
                instrument_type=instrument.instrument_type,
            )
        if instrument.annual_rate is None:
            raise InvalidInstrumentError(
                f"{instrument.instrument_type} holding has no annual interest rate",
                instrument_type=instrument.instrument_type,
            )

    @staticmethod
    def _compounding_frequency(instrument: InstrumentMetadata) -> int:
        if instrument.compounding_frequency:
            return instrument.compounding_frequency
        return get_compounding_frequency(instrument.instrument_type)

    @staticmethod
    def _collect_deposits(
            transactions: Sequence[Transaction],
            as_of: date,
    ) -> list[Deposit]:
        deposits = [
            Deposit(date=t.date, amount=t.total_amount)
            for t in transactions
            if t.is_buy and t.total_amount > ZERO and t.date <= as_of
        ]
        skipped = sum(1 for t in transactions if t.is_buy and t.date > as_of)
        if skipped:
            logger.debug(f"Ignoring {skipped} deposit(s) dated after {as_of}")
        return sorted(deposits, key=lambda d: d.date)
