# backend/tests/services/accrual/test_lump_sum.py
"""
Unit tests for lump-sum compounding.

Values are chosen so that n × t is an integer and the expected result can
be written down exactly.
"""

from datetime import date
from decimal import Decimal

import pytest

from portfolio_metrics.services.accrual import (
    Deposit,
    calculate_compound_value,
    calculate_lump_sum,
    get_compounding_frequency,
)
from portfolio_metrics.services.exceptions import ValidationError


class TestCompoundingFrequency:
    """Tests for the per-type frequency table."""

    @pytest.mark.parametrize("instrument_type,expected", [
        ("PPF", 1),
        ("FD", 4),
        ("RD", 4),
        ("NSC", 1),
        ("KVP", 1),
        ("EPF", 1),
        ("VPF", 1),
        ("SSY", 1),
    ])
    def test_known_types(self, instrument_type, expected):
        assert get_compounding_frequency(instrument_type) == expected

    def test_lowercase_type(self):
        assert get_compounding_frequency("fd") == 4

    def test_unknown_type_compounds_annually(self):
        assert get_compounding_frequency("BOND") == 1


class TestCalculateCompoundValue:
    """Tests for calculate_compound_value."""

    def test_annual_compounding_over_exactly_one_year(self):
        """n=1 and 365 days gives exactly P × (1 + r)."""
        value = calculate_compound_value(
            principal=Decimal("10000"),
            annual_rate=Decimal("0.071"),
            deposit_date=date(2021, 1, 1),
            as_of=date(2022, 1, 1),
            compounding_frequency=1,
        )

        assert value == Decimal("10710")

    def test_quarterly_compounding_over_one_year(self):
        """100000 at 8% quarterly for a year: 100000 × 1.02⁴."""
        value = calculate_compound_value(
            principal=Decimal("100000"),
            annual_rate=Decimal("0.08"),
            deposit_date=date(2021, 1, 1),
            as_of=date(2022, 1, 1),
            compounding_frequency=4,
        )

        assert value == Decimal("108243.216")

    def test_partial_year_is_between_principal_and_full_year(self):
        value = calculate_compound_value(
            principal=Decimal("10000"),
            annual_rate=Decimal("0.071"),
            deposit_date=date(2021, 1, 1),
            as_of=date(2021, 7, 1),
        )

        assert Decimal("10000") < value < Decimal("10710")

    def test_same_day_returns_principal(self):
        value = calculate_compound_value(
            Decimal("5000"), Decimal("0.07"), date(2024, 1, 1), date(2024, 1, 1)
        )

        assert value == Decimal("5000")

    def test_future_deposit_returns_principal(self):
        value = calculate_compound_value(
            Decimal("5000"), Decimal("0.07"), date(2025, 1, 1), date(2024, 1, 1)
        )

        assert value == Decimal("5000")

    def test_zero_rate(self):
        value = calculate_compound_value(
            Decimal("5000"), Decimal("0"), date(2021, 1, 1), date(2023, 1, 1)
        )

        assert value == Decimal("5000")

    def test_non_positive_frequency_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            calculate_compound_value(
                Decimal("5000"), Decimal("0.07"), date(2021, 1, 1), date(2022, 1, 1),
                compounding_frequency=0,
            )

        assert exc_info.value.field == "compounding_frequency"


class TestCalculateLumpSum:
    """Tests for calculate_lump_sum."""

    def test_deposits_compound_independently(self):
        result = calculate_lump_sum(
            [
                Deposit(date(2021, 1, 1), Decimal("10000")),
                Deposit(date(2022, 1, 1), Decimal("5000")),
            ],
            annual_rate=Decimal("0.071"),
            as_of=date(2022, 1, 1),
        )

        # Second deposit has t = 0
        assert result.principal == Decimal("15000.00")
        assert result.current_value == Decimal("15710.00")
        assert result.interest == Decimal("710.00")
        assert result.interest_percent == Decimal("4.73")
        assert result.compounding_frequency == 1

    def test_no_deposits(self):
        result = calculate_lump_sum([], annual_rate=Decimal("0.07"), as_of=date(2024, 1, 1))

        assert result.principal == Decimal("0")
        assert result.current_value == Decimal("0")
        assert result.interest_percent == Decimal("0")

    def test_values_are_rounded_to_currency(self):
        result = calculate_lump_sum(
            [Deposit(date(2021, 1, 1), Decimal("100000"))],
            annual_rate=Decimal("0.08"),
            as_of=date(2022, 1, 1),
            compounding_frequency=4,
        )

        assert result.current_value == Decimal("108243.22")
        assert result.interest == Decimal("8243.22")
