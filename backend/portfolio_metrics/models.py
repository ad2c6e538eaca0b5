# backend/portfolio_metrics/models.py
"""
Domain input records shared by every calculator.

These are the engine's view of what the (out-of-scope) persistence and
import layers hand over: immutable transaction records and instrument
metadata. They are plain frozen dataclasses, NOT ORM models and NOT
Pydantic schemas (those live in portfolio_metrics/schemas for validating
raw inbound payloads).

Design Principles:
- Immutable (frozen=True): calculators never mutate their inputs
- Decimal for ALL financial values
- date (not datetime) for transaction dates; malformed dates fail fast
"""

import enum
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from portfolio_metrics.services.exceptions import ValidationError
from portfolio_metrics.utils.date_utils import parse_date


class TransactionType(str, enum.Enum):
    BUY = "BUY"
    SELL = "SELL"


class InstrumentCategory(str, enum.Enum):
    """
    Broad instrument family. Decides which pipeline a holding takes:
    EQUITY holdings go through FIFO lot tracking, FIXED_INCOME holdings
    through interest accrual.
    """
    EQUITY = "EQUITY"
    FIXED_INCOME = "FIXED_INCOME"


class FixedIncomeType(str, enum.Enum):
    PPF = "PPF"     # Public Provident Fund (FY crediting schedule)
    FD = "FD"       # Fixed Deposit
    RD = "RD"       # Recurring Deposit
    NSC = "NSC"     # National Savings Certificate
    KVP = "KVP"     # Kisan Vikas Patra
    EPF = "EPF"     # Employees' Provident Fund
    VPF = "VPF"     # Voluntary Provident Fund
    SSY = "SSY"     # Sukanya Samriddhi Yojana


@dataclass(frozen=True)
class Transaction:
    """
    A single recorded BUY or SELL.

    Attributes:
        kind: BUY or SELL
        quantity: Units traded (>= 0; fixed-income deposits commonly use 1)
        unit_price: Price per unit
        total_amount: Cash amount of the trade. Defaults to
                      quantity × unit_price when omitted.
        date: Trade date (ISO strings and datetimes are coerced)
        note: Free-text note from the user
        is_opening_balance: True for records that carry a pre-existing
                            position into the log. They are BUYs for every
                            calculation.

    Raises:
        InvalidDateError: If date cannot be parsed
        ValidationError: If quantity, price or amount is negative
    """

    kind: TransactionType
    quantity: Decimal
    unit_price: Decimal
    date: date
    total_amount: Decimal | None = None
    note: str | None = None
    is_opening_balance: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", parse_date(self.date, field="date"))
        object.__setattr__(self, "kind", TransactionType(self.kind))

        if self.quantity < 0:
            raise ValidationError(
                f"Transaction quantity cannot be negative: {self.quantity}",
                field="quantity",
            )
        if self.unit_price < 0:
            raise ValidationError(
                f"Transaction unit price cannot be negative: {self.unit_price}",
                field="unit_price",
            )

        if self.total_amount is None:
            object.__setattr__(self, "total_amount", self.quantity * self.unit_price)
        elif self.total_amount < 0:
            raise ValidationError(
                f"Transaction total amount cannot be negative: {self.total_amount}",
                field="total_amount",
            )

    @property
    def is_buy(self) -> bool:
        return self.kind == TransactionType.BUY

    @property
    def is_sell(self) -> bool:
        return self.kind == TransactionType.SELL


@dataclass(frozen=True)
class InstrumentMetadata:
    """
    Metadata describing the instrument a holding is invested in.

    Attributes:
        category: EQUITY or FIXED_INCOME (selects the pipeline)
        instrument_type: Sub-type, e.g. "STOCK", "MUTUAL_FUND", "PPF", "FD".
                         For fixed income it selects the compounding
                         frequency and the accrual mode.
        annual_rate: Annual interest rate as a decimal (0.071 = 7.1%).
                     Required for fixed income.
        compounding_frequency: Overrides the per-type frequency table
        principal: Principal for fixed-income holdings recorded without
                   transactions
        start_date: Deposit date for such holdings
        deposit_cutoff_day: Overrides the default recurring-deposit
                            cutoff day (5th of the month)
    """

    category: InstrumentCategory
    instrument_type: str
    annual_rate: Decimal | None = None
    compounding_frequency: int | None = None
    principal: Decimal | None = None
    start_date: date | None = None
    deposit_cutoff_day: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", InstrumentCategory(self.category))
        object.__setattr__(self, "instrument_type", self.instrument_type.strip().upper())
        if self.start_date is not None:
            object.__setattr__(self, "start_date", parse_date(self.start_date, field="start_date"))

    @property
    def uses_fifo(self) -> bool:
        """True if the holding's gains are attributed through FIFO lots."""
        return self.category == InstrumentCategory.EQUITY

    @property
    def is_fixed_income(self) -> bool:
        return self.category == InstrumentCategory.FIXED_INCOME
