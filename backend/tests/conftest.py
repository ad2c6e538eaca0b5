# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Transaction factories (buy, sell)
- Instrument metadata fixtures (equity, PPF, FD)
- Settings and service fixtures
- Context cleanup so correlation IDs never leak between tests
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date
from decimal import Decimal
from typing import Iterator

import pytest

from portfolio_metrics.config import Settings
from portfolio_metrics.models import (
    InstrumentCategory,
    InstrumentMetadata,
    Transaction,
    TransactionType,
)
from portfolio_metrics.services.portfolio import PortfolioMetricsService
from portfolio_metrics.utils.context import clear_calculation_context, clear_correlation_id


# =============================================================================
# TRANSACTION FACTORIES
# =============================================================================

def buy(
        quantity: str | int,
        price: str | int,
        on: date | str,
        total: str | None = None,
        opening: bool = False,
) -> Transaction:
    """Build a BUY record; amounts given as str/int for exact Decimals."""
    return Transaction(
        kind=TransactionType.BUY,
        quantity=Decimal(str(quantity)),
        unit_price=Decimal(str(price)),
        date=on,
        total_amount=Decimal(total) if total is not None else None,
        is_opening_balance=opening,
    )


def sell(quantity: str | int, price: str | int, on: date | str) -> Transaction:
    """Build a SELL record."""
    return Transaction(
        kind=TransactionType.SELL,
        quantity=Decimal(str(quantity)),
        unit_price=Decimal(str(price)),
        date=on,
    )


def deposit(amount: str | int, on: date | str) -> Transaction:
    """Build a fixed-income deposit (BUY of one unit)."""
    return buy(1, amount, on)


@pytest.fixture
def scenario_transactions() -> list[Transaction]:
    """Buy 10@100, Buy 10@120, Sell 15@150 - realized 650 under FIFO."""
    return [
        buy(10, 100, date(2023, 1, 1)),
        buy(10, 120, date(2023, 6, 1)),
        sell(15, 150, date(2024, 1, 1)),
    ]


# =============================================================================
# INSTRUMENT FIXTURES
# =============================================================================

@pytest.fixture
def equity_instrument() -> InstrumentMetadata:
    return InstrumentMetadata(category=InstrumentCategory.EQUITY, instrument_type="STOCK")


@pytest.fixture
def ppf_instrument() -> InstrumentMetadata:
    return InstrumentMetadata(
        category=InstrumentCategory.FIXED_INCOME,
        instrument_type="PPF",
        annual_rate=Decimal("0.071"),
    )


@pytest.fixture
def fd_instrument() -> InstrumentMetadata:
    return InstrumentMetadata(
        category=InstrumentCategory.FIXED_INCOME,
        instrument_type="FD",
        annual_rate=Decimal("0.08"),
    )


# =============================================================================
# SETTINGS & SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings with default rules, independent of the environment."""
    return Settings(
        environment="test",
        long_term_threshold_days=365,
        long_term_tax_rate=Decimal("0.125"),
        short_term_tax_rate=Decimal("0.20"),
        long_term_exemption=Decimal("125000"),
        days_per_year=365,
        deposit_cutoff_day=5,
    )


@pytest.fixture
def service(test_settings: Settings) -> PortfolioMetricsService:
    return PortfolioMetricsService(settings=test_settings)


@pytest.fixture(autouse=True)
def clean_context() -> Iterator[None]:
    """Reset correlation ID and calculation context around every test."""
    clear_correlation_id()
    clear_calculation_context()
    yield
    clear_correlation_id()
    clear_calculation_context()
