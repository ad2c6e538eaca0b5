# backend/portfolio_metrics/schemas/validators.py
"""
Reusable validation functions for Pydantic schemas.

This module provides:
- Date coercion with the engine's parsing rules
- Transaction kind normalization (case, legacy spellings)
- Instrument type normalization

Pydantic only turns ValueError into a validation error, so every function
here raises ValueError, never a service exception.
"""

import re
from datetime import date
from typing import Any

from portfolio_metrics.services.exceptions import InvalidDateError
from portfolio_metrics.utils.date_utils import parse_date

# =============================================================================
# CONSTANTS
# =============================================================================

# Instrument type: 1-20 chars, uppercase letters, digits and underscores
INSTRUMENT_TYPE_PATTERN = re.compile(r'^[A-Z][A-Z0-9_]{0,19}$')

# Kinds accepted on input and the engine kind they map to
KIND_ALIASES = {
    "BUY": "BUY",
    "DEPOSIT": "BUY",
    "OPENING": "BUY",
    "OPENING_BALANCE": "BUY",
    "SELL": "SELL",
    "WITHDRAWAL": "SELL",
}

# Kinds that mark a carried-in position
OPENING_BALANCE_KINDS = {"OPENING", "OPENING_BALANCE"}

MIN_VALID_DATE = date(1900, 1, 1)


# =============================================================================
# DATE VALIDATION
# =============================================================================

def validate_record_date(value: Any, field_name: str = "date") -> date:
    """
    Coerce a raw date (ISO string, date, datetime) to a date.

    Raises:
        ValueError: If the value is not a date or is before 1900-01-01
    """
    try:
        parsed = parse_date(value, field=field_name)
    except InvalidDateError as e:
        raise ValueError(e.message) from e

    if parsed < MIN_VALID_DATE:
        raise ValueError(f"{field_name} cannot be before {MIN_VALID_DATE}")
    return parsed


# =============================================================================
# KIND VALIDATION
# =============================================================================

def normalize_kind(value: Any) -> str:
    """
    Normalize a transaction kind.

    A missing kind is a BUY; deposits and opening balances are BUYs,
    withdrawals are SELLs.

    Raises:
        ValueError: If the kind is not recognized
    """
    if value is None:
        return "BUY"

    normalized = str(getattr(value, "value", value)).strip().upper()
    if not normalized:
        return "BUY"

    if normalized not in KIND_ALIASES:
        raise ValueError(
            f"Invalid transaction kind: '{value}'. "
            f"Expected one of: {', '.join(sorted(KIND_ALIASES))}"
        )
    return normalized


# =============================================================================
# INSTRUMENT VALIDATION
# =============================================================================

def validate_instrument_type(value: str) -> str:
    """
    Validate and normalize an instrument type ("ppf " -> "PPF").

    Raises:
        ValueError: If the type is empty or malformed
    """
    if not value or not value.strip():
        raise ValueError("Instrument type cannot be empty")

    normalized = value.strip().upper()
    if not INSTRUMENT_TYPE_PATTERN.match(normalized):
        raise ValueError(
            f"Invalid instrument type: '{normalized}'. "
            "Use letters, digits and underscores (e.g., PPF, MUTUAL_FUND)"
        )
    return normalized
