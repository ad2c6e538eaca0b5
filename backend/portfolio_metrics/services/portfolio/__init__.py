# backend/portfolio_metrics/services/portfolio/__init__.py
"""
Portfolio package - orchestration of all calculators.

Architecture:
    portfolio/
    ├── __init__.py   # This file - package exports
    ├── types.py      # HoldingInput, HoldingMetrics, PortfolioMetrics
    └── service.py    # PortfolioMetricsService

Usage:
    from portfolio_metrics.services.portfolio import (
        HoldingInput,
        PortfolioMetricsService,
    )
"""

from portfolio_metrics.services.portfolio.service import PortfolioMetricsService
from portfolio_metrics.services.portfolio.types import (
    HoldingInput,
    HoldingMetrics,
    PortfolioMetrics,
)

__all__ = [
    "HoldingInput",
    "HoldingMetrics",
    "PortfolioMetrics",
    "PortfolioMetricsService",
]
