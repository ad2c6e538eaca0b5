# backend/portfolio_metrics/schemas/transactions.py
"""
Pydantic schemas for inbound transaction and instrument records.

These schemas sit at the boundary between loosely-typed input (CSV rows,
JSON payloads, database dicts) and the engine's frozen dataclasses:
- TransactionRecord -> models.Transaction
- InstrumentRecord  -> models.InstrumentMetadata

Validation layers:
- Field constraints: type, sign, numeric limits
- Field validators: normalization (uppercase, trim, legacy spellings)
- Model validators: cross-field rules

IMPORTANT: All financial values use Decimal for precision.
Never use float for money!
"""

import datetime as dt
from decimal import Decimal
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from portfolio_metrics.models import (
    InstrumentCategory,
    InstrumentMetadata,
    Transaction,
    TransactionType,
)
from portfolio_metrics.schemas.validators import (
    KIND_ALIASES,
    OPENING_BALANCE_KINDS,
    normalize_kind,
    validate_instrument_type,
    validate_record_date,
)


# =============================================================================
# TRANSACTION RECORD
# =============================================================================

class TransactionRecord(BaseModel):
    """
    One raw BUY/SELL record.

    Accepts the field spellings used by exports ("type", "price",
    "transaction_date") as well as the engine's own names.
    """

    kind: str = Field(
        default="BUY",
        validation_alias=AliasChoices("kind", "type", "transaction_type"),
        description="BUY, SELL, DEPOSIT, WITHDRAWAL or OPENING_BALANCE",
        examples=["BUY", "SELL"]
    )

    date: dt.date = Field(
        ...,
        validation_alias=AliasChoices("date", "transaction_date"),
        description="Trade date (ISO date or datetime)",
        examples=["2024-01-05", "2024-01-05T10:30:00"]
    )

    quantity: Decimal = Field(
        default=Decimal("1"),
        ge=0,
        description="Units traded (fixed-income deposits use 1)",
        examples=["10", "0.5"]
    )

    unit_price: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        validation_alias=AliasChoices("unit_price", "price", "price_per_unit"),
        description="Price per unit",
        examples=["150.50"]
    )

    total_amount: Decimal | None = Field(
        default=None,
        ge=0,
        description="Cash amount; defaults to quantity × unit_price",
        examples=["1505.00"]
    )

    note: str | None = Field(
        default=None,
        max_length=500,
        validation_alias=AliasChoices("note", "notes"),
    )

    is_opening_balance: bool = Field(
        default=False,
        description="Carries a pre-existing position into the log"
    )

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    # =========================================================================
    # FIELD VALIDATORS (Normalization & Validation)
    # =========================================================================

    @field_validator('kind', mode='before')
    @classmethod
    def validate_kind(cls, v: Any) -> str:
        return normalize_kind(v)

    @field_validator('date', mode='before')
    @classmethod
    def validate_date(cls, v: Any) -> dt.date:
        return validate_record_date(v)

    @model_validator(mode='after')
    def validate_amounts(self) -> "TransactionRecord":
        """Require some amount: either a total or a unit price."""
        if self.total_amount is None and self.unit_price == 0 and self.quantity > 0:
            raise ValueError("Either total_amount or unit_price must be provided")
        if self.kind in OPENING_BALANCE_KINDS:
            self.is_opening_balance = True
        return self

    # =========================================================================
    # CONVERSION
    # =========================================================================

    def to_domain(self) -> Transaction:
        """Convert to the engine's immutable Transaction."""
        return Transaction(
            kind=TransactionType(KIND_ALIASES[self.kind]),
            quantity=self.quantity,
            unit_price=self.unit_price,
            date=self.date,
            total_amount=self.total_amount,
            note=self.note,
            is_opening_balance=self.is_opening_balance,
        )


# =============================================================================
# INSTRUMENT RECORD
# =============================================================================

class InstrumentRecord(BaseModel):
    """
    Raw instrument metadata.

    The rate can be sent either as a decimal fraction (annual_rate=0.071)
    or as a percentage (interest_rate=7.1); percentages are converted.
    """

    category: InstrumentCategory = Field(
        ...,
        description="EQUITY or FIXED_INCOME"
    )

    instrument_type: str = Field(
        ...,
        validation_alias=AliasChoices("instrument_type", "asset_type"),
        examples=["STOCK", "MUTUAL_FUND", "PPF", "FD"]
    )

    annual_rate: Decimal | None = Field(
        default=None,
        ge=0,
        le=1,
        description="Annual rate as a decimal fraction (0.071 = 7.1%)"
    )

    interest_rate: Decimal | None = Field(
        default=None,
        ge=0,
        le=100,
        description="Annual rate as a percentage (7.1 = 7.1%)"
    )

    compounding_frequency: int | None = Field(default=None, ge=1, le=365)
    principal: Decimal | None = Field(default=None, ge=0)
    start_date: dt.date | None = None
    deposit_cutoff_day: int | None = Field(default=None, ge=1, le=31)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('category', mode='before')
    @classmethod
    def normalize_category(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator('instrument_type')
    @classmethod
    def normalize_instrument_type(cls, v: str) -> str:
        return validate_instrument_type(v)

    @field_validator('start_date', mode='before')
    @classmethod
    def validate_start_date(cls, v: Any) -> dt.date | None:
        if v is None or v == "":
            return None
        return validate_record_date(v, field_name="start_date")

    @model_validator(mode='after')
    def validate_rate(self) -> "InstrumentRecord":
        """Fixed income needs exactly one rate; a percentage is converted."""
        if self.annual_rate is None and self.interest_rate is not None:
            self.annual_rate = self.interest_rate / Decimal("100")
        if self.category == InstrumentCategory.FIXED_INCOME and self.annual_rate is None:
            raise ValueError("Fixed-income instruments require annual_rate or interest_rate")
        return self

    def to_domain(self) -> InstrumentMetadata:
        """Convert to the engine's immutable InstrumentMetadata."""
        return InstrumentMetadata(
            category=self.category,
            instrument_type=self.instrument_type,
            annual_rate=self.annual_rate,
            compounding_frequency=self.compounding_frequency,
            principal=self.principal,
            start_date=self.start_date,
            deposit_cutoff_day=self.deposit_cutoff_day,
        )
