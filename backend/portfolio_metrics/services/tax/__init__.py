# backend/portfolio_metrics/services/tax/__init__.py
"""
Tax package (GainClassifier).

Architecture:
    tax/
    ├── __init__.py     # This file - package exports
    ├── types.py        # TaxRules, GainBuckets, TaxEstimate, summaries
    └── classifier.py   # GainClassifier

Usage:
    from portfolio_metrics.services.tax import GainClassifier, TaxRules

    classifier = GainClassifier(TaxRules())
"""

from portfolio_metrics.services.tax.classifier import GainClassifier
from portfolio_metrics.services.tax.types import (
    GainBuckets,
    GainTerm,
    HoldingTaxBreakdown,
    InterestTaxSummary,
    PortfolioTaxSummary,
    TaxEstimate,
    TaxRules,
)

__all__ = [
    "GainBuckets",
    "GainClassifier",
    "GainTerm",
    "HoldingTaxBreakdown",
    "InterestTaxSummary",
    "PortfolioTaxSummary",
    "TaxEstimate",
    "TaxRules",
]
