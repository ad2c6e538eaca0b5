# backend/portfolio_metrics/config.py
"""
Engine configuration using Pydantic Settings.

Loads configuration from environment variables with validation:
- ENVIRONMENT: Runtime mode (development, test, production)
- LOG_LEVEL / LOG_FORMAT: Logging setup (see portfolio_metrics.utils.logging)
- Capital gains rules: threshold, tax rates, annual exemption
- Accrual conventions: day-count divisor, deposit cutoff day
- XIRR solver limits

The calculators never read this module directly. The orchestrator
(PortfolioMetricsService) resolves these values once and passes them into
the pure calculators as explicit arguments, so every calculation stays
reproducible from its inputs alone.

Usage:
    from portfolio_metrics.config import settings

    rules = TaxRules.from_settings(settings)
"""
from decimal import Decimal
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio_metrics.services.constants import (
    CALENDAR_DAYS_PER_YEAR,
    DEFAULT_DEPOSIT_CUTOFF_DAY,
    DEFAULT_LONG_TERM_EXEMPTION,
    DEFAULT_LONG_TERM_TAX_RATE,
    DEFAULT_LONG_TERM_THRESHOLD_DAYS,
    DEFAULT_SHORT_TERM_TAX_RATE,
    IRR_INITIAL_GUESS,
    IRR_MAX_ITERATIONS,
    IRR_TOLERANCE,
)


# Optional .env in project root (parent of backend/)
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_PROJECT_ROOT = _BACKEND_DIR.parent
_ENV_FILE = _PROJECT_ROOT / ".env"

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    Environment variables:
        - ENVIRONMENT: Runtime environment (development, test, production)
        - LOG_LEVEL: Logging level (default: "INFO")
        - LOG_FORMAT: "text" or "json" (default: "text")

    Capital gains (all optional, defaults in services/constants.py):
        - LONG_TERM_THRESHOLD_DAYS: Holding days that must be exceeded (365)
        - LONG_TERM_TAX_RATE: Flat rate on taxable long-term gains (0.125)
        - SHORT_TERM_TAX_RATE: Flat rate on short-term gains (0.20)
        - LONG_TERM_EXEMPTION: Annual long-term exemption amount (125000)

    Accrual / solver:
        - DAYS_PER_YEAR: Day-count divisor (365)
        - DEPOSIT_CUTOFF_DAY: Default recurring-deposit cutoff day (5)
        - XIRR_MAX_ITERATIONS / XIRR_TOLERANCE / XIRR_INITIAL_GUESS
    """

    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Runtime environment (development, test, production)"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_format: Literal["text", "json"] = Field(
        default="text",
        description="Log output format (text for humans, json for aggregation)"
    )

    app_name: str = "Portfolio Metrics Engine"

    # =========================================================================
    # CAPITAL GAINS
    # =========================================================================
    long_term_threshold_days: int = Field(
        default=DEFAULT_LONG_TERM_THRESHOLD_DAYS,
        ge=1,
        description="Holding period in days that must be exceeded for long-term treatment"
    )
    long_term_tax_rate: Decimal = Field(
        default=DEFAULT_LONG_TERM_TAX_RATE,
        ge=0,
        le=1,
        description="Flat tax rate on taxable long-term gains (0.125 = 12.5%)"
    )
    short_term_tax_rate: Decimal = Field(
        default=DEFAULT_SHORT_TERM_TAX_RATE,
        ge=0,
        le=1,
        description="Flat tax rate on short-term gains (0.20 = 20%)"
    )
    long_term_exemption: Decimal = Field(
        default=DEFAULT_LONG_TERM_EXEMPTION,
        ge=0,
        description="Annual long-term gain exemption amount"
    )

    # =========================================================================
    # ACCRUAL CONVENTIONS
    # =========================================================================
    days_per_year: int = Field(
        default=CALENDAR_DAYS_PER_YEAR,
        ge=360,
        le=366,
        description="Day-count divisor for accrual and XIRR discounting"
    )
    deposit_cutoff_day: int = Field(
        default=DEFAULT_DEPOSIT_CUTOFF_DAY,
        ge=1,
        le=31,
        description="Deposits on or before this day earn interest for that month"
    )

    # =========================================================================
    # XIRR SOLVER
    # =========================================================================
    xirr_max_iterations: int = Field(
        default=IRR_MAX_ITERATIONS,
        ge=1,
        le=1000,
        description="Hard cap on Newton-Raphson iterations"
    )
    xirr_tolerance: float = Field(
        default=IRR_TOLERANCE,
        gt=0,
        description="Convergence tolerance for |NPV| and step size"
    )
    xirr_initial_guess: float = Field(
        default=IRR_INITIAL_GUESS,
        gt=-0.99,
        description="Starting rate for the solver (0.1 = 10%)"
    )

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_log_level(self) -> "Settings":
        """Normalize LOG_LEVEL and reject unknown levels at startup."""
        normalized = self.log_level.strip().upper()
        if normalized not in _VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid LOG_LEVEL: '{self.log_level}'. "
                f"Valid levels are: {', '.join(sorted(_VALID_LOG_LEVELS))}"
            )
        object.__setattr__(self, "log_level", normalized)
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


# Create single instance
settings = Settings()
