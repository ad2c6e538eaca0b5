# backend/tests/services/accrual/test_accrual_engine.py
"""
Tests for AccrualEngine mode selection and holding-level valuation.
"""

from datetime import date
from decimal import Decimal

import pytest

from conftest import buy, deposit, sell
from portfolio_metrics.models import InstrumentCategory, InstrumentMetadata
from portfolio_metrics.services.accrual import (
    AccrualEngine,
    AccrualMode,
    resolve_accrual_mode,
)
from portfolio_metrics.services.exceptions import InvalidDateError, InvalidInstrumentError


def fixed_income(instrument_type: str, rate: str = "0.08", **kwargs) -> InstrumentMetadata:
    return InstrumentMetadata(
        category=InstrumentCategory.FIXED_INCOME,
        instrument_type=instrument_type,
        annual_rate=Decimal(rate),
        **kwargs,
    )


@pytest.fixture
def engine() -> AccrualEngine:
    return AccrualEngine()


class TestModeSelection:
    """PPF uses the FY schedule; every other type is lump sum."""

    def test_ppf_is_recurring_schedule(self, ppf_instrument):
        assert resolve_accrual_mode(ppf_instrument) == AccrualMode.RECURRING_SCHEDULE

    @pytest.mark.parametrize("instrument_type", ["FD", "RD", "NSC", "KVP", "EPF", "VPF", "SSY"])
    def test_other_types_are_lump_sum(self, instrument_type):
        assert resolve_accrual_mode(fixed_income(instrument_type)) == AccrualMode.LUMP_SUM


class TestLumpSumEvaluation:
    """Fixed deposits and other lump-sum instruments."""

    def test_fd_compounds_quarterly(self, engine, fd_instrument):
        result = engine.evaluate(
            fd_instrument, [deposit(100000, date(2021, 1, 1))], date(2022, 1, 1)
        )

        assert result.mode == AccrualMode.LUMP_SUM
        assert result.compounding_frequency == 4
        assert result.principal == Decimal("100000.00")
        assert result.current_value == Decimal("108243.22")
        assert result.estimated_value == result.current_value
        assert result.accrued_interest == Decimal("0")
        assert result.schedule == []

    def test_compounding_override(self, engine):
        instrument = fixed_income("FD", compounding_frequency=1)
        result = engine.evaluate(instrument, [deposit(100000, date(2021, 1, 1))], date(2022, 1, 1))

        assert result.current_value == Decimal("108000.00")

    def test_sells_are_ignored(self, engine, fd_instrument):
        deposits_only = engine.evaluate(
            fd_instrument, [deposit(100000, date(2021, 1, 1))], date(2022, 1, 1)
        )
        with_sell = engine.evaluate(
            fd_instrument,
            [deposit(100000, date(2021, 1, 1)), sell(1, 50000, date(2021, 6, 1))],
            date(2022, 1, 1),
        )

        assert with_sell == deposits_only

    def test_deposits_after_valuation_date_are_ignored(self, engine, fd_instrument):
        result = engine.evaluate(
            fd_instrument,
            [deposit(100000, date(2021, 1, 1)), deposit(50000, date(2023, 1, 1))],
            date(2022, 1, 1),
        )

        assert result.principal == Decimal("100000.00")

    def test_opening_balance_is_a_deposit(self, engine, fd_instrument):
        result = engine.evaluate(
            fd_instrument,
            [buy(1, 100000, date(2021, 1, 1), opening=True)],
            date(2022, 1, 1),
        )

        assert result.current_value == Decimal("108243.22")

    def test_string_valuation_date(self, engine, fd_instrument):
        result = engine.evaluate(fd_instrument, [deposit(100000, "2021-01-01")], "2022-01-01")

        assert result.current_value == Decimal("108243.22")


class TestScheduleEvaluation:
    """PPF holdings go through the FY schedule."""

    def test_ppf_uses_schedule(self, engine, ppf_instrument):
        result = engine.evaluate(
            ppf_instrument, [deposit(10000, date(2024, 1, 5))], date(2025, 6, 15)
        )

        assert result.mode == AccrualMode.RECURRING_SCHEDULE
        assert result.principal == Decimal("10000.00")
        assert result.current_value == Decimal("10900.10")
        assert result.estimated_value == Decimal("11093.58")
        assert result.accrued_interest == Decimal("193.48")
        assert len(result.schedule) == 3

    def test_instrument_cutoff_day_overrides_default(self, engine):
        instrument = fixed_income("PPF", rate="0.071", deposit_cutoff_day=10)
        result = engine.evaluate(instrument, [deposit(10000, date(2024, 1, 6))], date(2025, 6, 15))

        assert result.schedule[0].interest_earned == Decimal("177.5")

    def test_engine_default_cutoff_day(self, ppf_instrument):
        engine = AccrualEngine(default_cutoff_day=10)
        result = engine.evaluate(
            ppf_instrument, [deposit(10000, date(2024, 1, 6))], date(2025, 6, 15)
        )

        assert result.schedule[0].interest_earned == Decimal("177.5")


class TestHoldingsWithoutTransactions:
    """Holdings recorded with only a principal."""

    def test_recurring_type_reports_principal(self, engine):
        instrument = fixed_income("PPF", rate="0.071", principal=Decimal("50000"))
        result = engine.evaluate(instrument, [], date(2025, 6, 15))

        assert result.current_value == Decimal("50000.00")
        assert result.interest == Decimal("0")
        assert result.needs_transactions is True
        assert result.warnings

    def test_lump_sum_type_uses_start_date(self, engine):
        instrument = fixed_income(
            "FD", principal=Decimal("100000"), start_date=date(2021, 1, 1)
        )
        result = engine.evaluate(instrument, [], date(2022, 1, 1))

        assert result.current_value == Decimal("108243.22")
        assert result.needs_transactions is False

    def test_no_principal_and_no_transactions(self, engine, fd_instrument):
        result = engine.evaluate(fd_instrument, [], date(2022, 1, 1))

        assert result.current_value == Decimal("0")
        assert result.needs_transactions is False


class TestValidation:
    """Metadata that cannot drive accrual."""

    def test_equity_instrument_raises(self, engine, equity_instrument):
        with pytest.raises(InvalidInstrumentError) as exc_info:
            engine.evaluate(equity_instrument, [], date(2024, 1, 1))

        assert exc_info.value.instrument_type == "STOCK"

    def test_missing_rate_raises(self, engine):
        instrument = InstrumentMetadata(
            category=InstrumentCategory.FIXED_INCOME, instrument_type="FD"
        )

        with pytest.raises(InvalidInstrumentError):
            engine.evaluate(instrument, [deposit(1000, date(2021, 1, 1))], date(2022, 1, 1))

    def test_malformed_valuation_date_raises(self, engine, fd_instrument):
        with pytest.raises(InvalidDateError):
            engine.evaluate(fd_instrument, [], "not-a-date")
