# backend/portfolio_metrics/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO transport
or presentation knowledge. The calling layer is responsible for turning them
into user-facing messages (e.g., "could not compute return for this holding").

All errors here are structural/input errors. Nothing in the engine performs
I/O, so nothing is retryable.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    │   ├── InvalidDateError
    │   └── InvalidInstrumentError
    └── CalculationError
        └── InsufficientLotQuantityError

Non-computable XIRR (fewer than two cash flows) and non-convergent XIRR are
NOT exceptions: they are reported through XirrResult.status.
"""

from datetime import date
from decimal import Decimal
from typing import Any


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when input validation fails.

    Attributes:
        field: The field that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidDateError(ValidationError):
    """
    Raised when a date input is malformed or missing.

    Fails fast so no not-a-date value reaches day-count arithmetic.

    Attributes:
        value: The raw value that could not be parsed
    """

    def __init__(self, value: Any, field: str | None = None) -> None:
        self.value = value
        label = f" for '{field}'" if field else ""
        super().__init__(
            f"Invalid date{label}: {value!r}. Expected an ISO date (YYYY-MM-DD)",
            field=field,
        )


class InvalidInstrumentError(ValidationError):
    """
    Raised when instrument metadata cannot drive a calculation.

    Example: asking the accrual engine to value an equity holding, or a
    fixed-income holding without an interest rate.
    """

    def __init__(self, message: str, instrument_type: str | None = None) -> None:
        self.instrument_type = instrument_type
        super().__init__(message, field="instrument")


# =============================================================================
# CALCULATION ERRORS
# =============================================================================


class CalculationError(ServiceError):
    """Base exception for inputs that are well-formed but not computable."""

    pass


class InsufficientLotQuantityError(CalculationError):
    """
    Raised when a SELL exceeds the quantity held in open lots.

    Attributes:
        sale_date: Date of the offending SELL
        requested: Quantity the SELL asked for
        available: Open-lot quantity at the time of the SELL
    """

    def __init__(
            self,
            sale_date: date,
            requested: Decimal,
            available: Decimal,
            holding_id: str | None = None,
    ) -> None:
        self.sale_date = sale_date
        self.requested = requested
        self.available = available
        self.holding_id = holding_id
        holding = f" for holding '{holding_id}'" if holding_id else ""
        super().__init__(
            f"Cannot sell {requested} units on {sale_date}{holding}: "
            f"only {available} units held in open lots"
        )

    @property
    def shortfall(self) -> Decimal:
        """Quantity the SELL could not be matched against."""
        return self.requested - self.available
