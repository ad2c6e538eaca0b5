# tests/test_models.py
"""
Tests for the engine's input records.
"""

from datetime import date
from decimal import Decimal

import pytest

from portfolio_metrics.models import (
    InstrumentCategory,
    InstrumentMetadata,
    Transaction,
    TransactionType,
)
from portfolio_metrics.services.exceptions import InvalidDateError, ValidationError


class TestTransaction:
    """Tests for the Transaction dataclass."""

    def test_total_amount_defaults_to_quantity_times_price(self):
        txn = Transaction(TransactionType.BUY, Decimal("3"), Decimal("2.5"), date(2024, 1, 1))

        assert txn.total_amount == Decimal("7.5")
        assert txn.is_buy
        assert not txn.is_sell

    def test_string_inputs_are_coerced(self):
        txn = Transaction("SELL", Decimal("1"), Decimal("10"), "2024-01-05")

        assert txn.kind == TransactionType.SELL
        assert txn.date == date(2024, 1, 5)

    def test_malformed_date_fails_fast(self):
        with pytest.raises(InvalidDateError):
            Transaction(TransactionType.BUY, Decimal("1"), Decimal("10"), "05-01-2024")

    @pytest.mark.parametrize("field,kwargs", [
        ("quantity", {"quantity": Decimal("-1")}),
        ("unit_price", {"unit_price": Decimal("-1")}),
        ("total_amount", {"total_amount": Decimal("-1")}),
    ])
    def test_negative_values_rejected(self, field, kwargs):
        values = {
            "kind": TransactionType.BUY,
            "quantity": Decimal("1"),
            "unit_price": Decimal("10"),
            "date": date(2024, 1, 1),
        }
        values.update(kwargs)

        with pytest.raises(ValidationError) as exc_info:
            Transaction(**values)

        assert exc_info.value.field == field

    def test_is_immutable(self):
        txn = Transaction(TransactionType.BUY, Decimal("1"), Decimal("10"), date(2024, 1, 1))

        with pytest.raises(AttributeError):
            txn.quantity = Decimal("2")


class TestInstrumentMetadata:
    """Tests for the InstrumentMetadata dataclass."""

    def test_type_is_normalized(self):
        instrument = InstrumentMetadata(InstrumentCategory.FIXED_INCOME, " ppf ")

        assert instrument.instrument_type == "PPF"
        assert instrument.is_fixed_income
        assert not instrument.uses_fifo

    def test_equity_uses_fifo(self):
        instrument = InstrumentMetadata("EQUITY", "STOCK")

        assert instrument.category == InstrumentCategory.EQUITY
        assert instrument.uses_fifo

    def test_start_date_is_parsed(self):
        instrument = InstrumentMetadata("FIXED_INCOME", "FD", start_date="2023-06-02")

        assert instrument.start_date == date(2023, 6, 2)
