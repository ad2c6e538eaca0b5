# backend/portfolio_metrics/utils/__init__.py
"""
Utility modules for the portfolio metrics engine.

This package contains cross-cutting utilities used throughout the engine:
- logging: Logging configuration and setup with correlation ID support
- context: Caller-supplied correlation IDs for log tracing
- date_utils: Date parsing and day-count helpers

Usage:
    from portfolio_metrics.utils import setup_logging
    from portfolio_metrics.utils import get_correlation_id, set_correlation_id
    from portfolio_metrics.utils.date_utils import parse_date
"""

from portfolio_metrics.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
    get_calculation_context,
    set_calculation_context,
    clear_calculation_context,
    restore_calculation_context,
)
from portfolio_metrics.utils.logging import setup_logging

__all__ = [
    # Logging
    "setup_logging",
    # Context
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "get_calculation_context",
    "set_calculation_context",
    "clear_calculation_context",
    "restore_calculation_context",
]
