# backend/tests/services/accrual/test_recurring_schedule.py
"""
Unit tests for the recurring-deposit (PPF-style) schedule.

Reference case: 10,000 at 7.1% valued on 2025-06-15.

    Deposit 2024-01-05 (on the cutoff day):
        FY 2023-24: Jan, Feb, Mar accrue          → 10000 × 0.071 × 3/12 = 177.50
        FY 2024-25: full year on 10177.50         → 722.6025
        FY 2025-26: Apr..Jun on 10900.1025        → 193.476819375 (current)

    Deposit 2024-01-06 (after the cutoff day):
        FY 2023-24: Feb, Mar accrue               → 10000 × 0.071 × 2/12 = 118.33
"""

from datetime import date
from decimal import Decimal

import pytest

from portfolio_metrics.services.accrual import (
    Deposit,
    PeriodStatus,
    financial_year_month,
    generate_recurring_schedule,
    get_financial_year,
    months_elapsed_in_financial_year,
)
from portfolio_metrics.services.exceptions import ValidationError

RATE = Decimal("0.071")
AS_OF = date(2025, 6, 15)


# =============================================================================
# FINANCIAL YEAR HELPERS
# =============================================================================

class TestFinancialYear:
    """Tests for April–March financial year helpers."""

    def test_january_belongs_to_previous_start_year(self):
        fy = get_financial_year(date(2024, 1, 5))

        assert fy.label == "2023-24"
        assert fy.start == date(2023, 4, 1)
        assert fy.end == date(2024, 3, 31)

    def test_april_first_starts_new_year(self):
        assert get_financial_year(date(2024, 4, 1)).label == "2024-25"

    def test_march_thirty_first_ends_year(self):
        assert get_financial_year(date(2024, 3, 31)).label == "2023-24"

    def test_century_label(self):
        assert get_financial_year(date(1999, 6, 1)).label == "1999-00"

    @pytest.mark.parametrize("d,expected", [
        (date(2024, 4, 15), 0),
        (date(2024, 12, 1), 8),
        (date(2025, 1, 1), 9),
        (date(2025, 3, 31), 11),
    ])
    def test_financial_year_month(self, d, expected):
        assert financial_year_month(d) == expected

    def test_months_elapsed_counts_partial_month(self):
        assert months_elapsed_in_financial_year(date(2024, 4, 1)) == 1
        assert months_elapsed_in_financial_year(date(2025, 6, 15)) == 3
        assert months_elapsed_in_financial_year(date(2025, 3, 31)) == 12


# =============================================================================
# CUTOFF DAY RULE
# =============================================================================

class TestCutoffDay:
    """The 5th-vs-6th boundary."""

    def test_deposit_on_cutoff_day_earns_that_month(self):
        result = generate_recurring_schedule(
            [Deposit(date(2024, 1, 5), Decimal("10000"))], RATE, AS_OF
        )

        assert result.schedule[0].period_label == "2023-24"
        assert result.schedule[0].interest_earned == Decimal("177.5")

    def test_deposit_after_cutoff_day_starts_next_month(self):
        result = generate_recurring_schedule(
            [Deposit(date(2024, 1, 6), Decimal("10000"))], RATE, AS_OF
        )

        interest = result.schedule[0].interest_earned
        assert interest.quantize(Decimal("0.01")) == Decimal("118.33")

    def test_custom_cutoff_day(self):
        result = generate_recurring_schedule(
            [Deposit(date(2024, 1, 6), Decimal("10000"))], RATE, AS_OF, cutoff_day=10
        )

        assert result.schedule[0].interest_earned == Decimal("177.5")

    def test_march_deposit_after_cutoff_earns_nothing_that_year(self):
        result = generate_recurring_schedule(
            [Deposit(date(2024, 3, 20), Decimal("10000"))], RATE, AS_OF
        )

        assert result.schedule[0].interest_earned == Decimal("0")

    def test_april_deposit_on_time_earns_full_year(self):
        result = generate_recurring_schedule(
            [Deposit(date(2023, 4, 1), Decimal("10000"))], RATE, AS_OF
        )

        assert result.schedule[0].interest_earned == Decimal("710")

    @pytest.mark.parametrize("cutoff_day", [0, 32])
    def test_invalid_cutoff_day_raises(self, cutoff_day):
        with pytest.raises(ValidationError):
            generate_recurring_schedule(
                [Deposit(date(2024, 1, 5), Decimal("10000"))], RATE, AS_OF, cutoff_day=cutoff_day
            )


# =============================================================================
# SCHEDULE STRUCTURE
# =============================================================================

class TestScheduleStructure:
    """Period chaining, statuses and no skipped periods."""

    @pytest.fixture
    def result(self):
        return generate_recurring_schedule(
            [Deposit(date(2024, 1, 5), Decimal("10000"))], RATE, AS_OF
        )

    def test_one_entry_per_financial_year(self, result):
        assert [e.period_label for e in result.schedule] == ["2023-24", "2024-25", "2025-26"]

    def test_statuses(self, result):
        assert [e.status for e in result.schedule] == [
            PeriodStatus.COMPLETED,
            PeriodStatus.COMPLETED,
            PeriodStatus.CURRENT,
        ]

    def test_schedule_ends_at_valuation_year(self):
        """Later deposits never open future periods; the last entry is CURRENT."""
        result = generate_recurring_schedule(
            [
                Deposit(date(2024, 1, 5), Decimal("10000")),
                Deposit(date(2025, 5, 1), Decimal("10000")),
            ],
            RATE,
            date(2025, 3, 31),
        )

        assert [e.period_label for e in result.schedule] == ["2023-24", "2024-25"]
        assert result.schedule[-1].status == PeriodStatus.CURRENT
        assert PeriodStatus.UPCOMING not in {e.status for e in result.schedule}

    def test_closing_balance_chains_into_next_opening(self, result):
        for previous, following in zip(result.schedule, result.schedule[1:]):
            assert previous.closing_balance == following.opening_balance

    def test_closing_equals_opening_plus_deposits_plus_interest(self, result):
        for entry in result.schedule:
            assert entry.closing_balance == (
                entry.opening_balance + entry.deposits_in_period + entry.interest_earned
            )

    def test_first_opening_balance_is_zero(self, result):
        assert result.schedule[0].opening_balance == Decimal("0")

    def test_full_year_interest_on_opening_balance(self, result):
        assert result.schedule[1].interest_earned == Decimal("722.6025")

    def test_current_year_accrues_elapsed_months_only(self, result):
        assert result.schedule[2].interest_earned == Decimal("193.476819375")

    def test_years_without_deposits_are_not_skipped(self):
        result = generate_recurring_schedule(
            [
                Deposit(date(2021, 5, 1), Decimal("5000")),
                Deposit(date(2023, 5, 1), Decimal("5000")),
            ],
            RATE,
            date(2023, 6, 15),
        )

        assert [e.period_label for e in result.schedule] == ["2021-22", "2022-23", "2023-24"]
        assert result.schedule[1].deposits_in_period == Decimal("0")
        assert result.schedule[1].interest_earned > Decimal("0")


# =============================================================================
# SUMMARY
# =============================================================================

class TestScheduleSummary:
    """Credited vs accrued values."""

    def test_summary_values(self):
        result = generate_recurring_schedule(
            [Deposit(date(2024, 1, 5), Decimal("10000"))], RATE, AS_OF
        )
        summary = result.summary

        assert summary.total_deposited == Decimal("10000.00")
        # Last completed closing balance (10900.1025) + no current-year deposits
        assert summary.current_value == Decimal("10900.10")
        assert summary.total_interest == Decimal("900.10")
        assert summary.estimated_value == Decimal("11093.58")
        assert summary.current_period_accrued_interest == Decimal("193.48")
        assert summary.interest_percent == Decimal("9.00")

    def test_current_year_deposits_count_without_interest(self):
        result = generate_recurring_schedule(
            [
                Deposit(date(2024, 1, 5), Decimal("10000")),
                Deposit(date(2025, 4, 5), Decimal("2000")),
            ],
            RATE,
            AS_OF,
        )

        assert result.summary.current_value == Decimal("12900.10")
        assert result.summary.total_deposited == Decimal("12000.00")

    def test_only_current_year_deposits(self):
        result = generate_recurring_schedule(
            [Deposit(date(2025, 4, 5), Decimal("10000"))], RATE, AS_OF
        )

        assert len(result.schedule) == 1
        assert result.summary.current_value == Decimal("10000.00")
        assert result.summary.total_interest == Decimal("0.00")
        # April, May, June accrued but not credited
        assert result.summary.current_period_accrued_interest == Decimal("177.50")

    def test_deposit_in_valuation_month_after_cutoff_accrues_nothing(self):
        result = generate_recurring_schedule(
            [Deposit(date(2025, 6, 10), Decimal("10000"))], RATE, AS_OF
        )

        assert result.summary.current_period_accrued_interest == Decimal("0.00")

    def test_deposits_after_valuation_date_are_ignored(self):
        result = generate_recurring_schedule(
            [
                Deposit(date(2024, 1, 5), Decimal("10000")),
                Deposit(date(2025, 7, 1), Decimal("99999")),
            ],
            RATE,
            AS_OF,
        )

        assert result.summary.total_deposited == Decimal("10000.00")

    def test_no_deposits_returns_none(self):
        assert generate_recurring_schedule([], RATE, AS_OF) is None

    def test_only_future_deposits_returns_none(self):
        assert generate_recurring_schedule(
            [Deposit(date(2026, 1, 1), Decimal("10000"))], RATE, AS_OF
        ) is None

    def test_input_order_does_not_matter(self):
        deposits = [
            Deposit(date(2024, 1, 5), Decimal("10000")),
            Deposit(date(2022, 7, 3), Decimal("3000")),
            Deposit(date(2023, 11, 20), Decimal("1500")),
        ]

        assert generate_recurring_schedule(deposits, RATE, AS_OF) == \
            generate_recurring_schedule(list(reversed(deposits)), RATE, AS_OF)
