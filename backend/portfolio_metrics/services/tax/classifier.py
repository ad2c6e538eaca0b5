# backend/portfolio_metrics/services/tax/classifier.py
"""
GainClassifier - capital-gains bucketing and flat-rate tax estimate.

Pure aggregation over gain records produced by the LotTracker:
- classify each realized record / unrealized mark as long- or short-term
  (long-term only when the holding period EXCEEDS the threshold)
- bucket gains and losses separately, per holding and portfolio-wide
- apply the annual long-term exemption, realized gains first
- multiply each taxable bucket by its flat rate

No gain is computed here; amounts come in already realized or marked.

Usage:
    classifier = GainClassifier(TaxRules.from_settings(settings))
    breakdown = classifier.classify_holding("INFY", result.gain_records, marks)
    summary = classifier.summarize([breakdown], exemption_used=Decimal("20000"))
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from portfolio_metrics.services.constants import (
    CURRENCY_PRECISION,
    DISPLAY_PERCENTAGE_PRECISION,
    ONE_HUNDRED,
    TAX_EXEMPT_INTEREST_TYPES,
    ZERO,
)
from portfolio_metrics.services.exceptions import ValidationError
from portfolio_metrics.services.lots.types import GainRecord, UnrealizedMark
from portfolio_metrics.services.tax.types import (
    GainBuckets,
    HoldingTaxBreakdown,
    InterestTaxSummary,
    PortfolioTaxSummary,
    TaxEstimate,
    TaxRules,
)

logger = logging.getLogger(__name__)


class GainClassifier:
    """
    Classifies gains by holding period and estimates the tax on them.

    Attributes:
        rules: Threshold, rates and exemption to apply
    """

    def __init__(self, rules: TaxRules | None = None) -> None:
        self.rules = rules or TaxRules()

    # =========================================================================
    # PER HOLDING
    # =========================================================================

    def classify_holding(
            self,
            holding_id: str,
            gain_records: Iterable[GainRecord] = (),
            unrealized_marks: Iterable[UnrealizedMark] = (),
            name: str | None = None,
    ) -> HoldingTaxBreakdown:
        """
        Bucket one holding's realized and unrealized amounts by term.

        Args:
            holding_id: Caller's identifier
            gain_records: Realized slices from LotTracker.process
            unrealized_marks: Open lots marked at the current price
            name: Display name

        Returns:
            HoldingTaxBreakdown
        """
        realized = GainBuckets()
        for record in gain_records:
            realized = realized.add(
                self.rules.term_for(record.holding_period_days), record.realized_amount
            )

        unrealized = GainBuckets()
        for mark in unrealized_marks:
            unrealized = unrealized.add(
                self.rules.term_for(mark.holding_period_days), mark.unrealized_amount
            )

        return HoldingTaxBreakdown(
            holding_id=holding_id,
            name=name,
            realized=realized,
            unrealized=unrealized,
        )

    # =========================================================================
    # PORTFOLIO
    # =========================================================================

    def summarize(
            self,
            holdings: Iterable[HoldingTaxBreakdown],
            exemption_used: Decimal = ZERO,
    ) -> PortfolioTaxSummary:
        """
        Aggregate holdings and estimate the liability.

        Args:
            holdings: Per-holding breakdowns
            exemption_used: Exemption already consumed this period outside
                            these holdings

        Returns:
            PortfolioTaxSummary

        Raises:
            ValidationError: If exemption_used is negative
        """
        if exemption_used < ZERO:
            raise ValidationError(
                f"Exemption already used cannot be negative: {exemption_used}",
                field="exemption_used",
            )

        holdings = list(holdings)
        realized = sum((h.realized for h in holdings), GainBuckets())
        unrealized = sum((h.unrealized for h in holdings), GainBuckets())

        limit = self.rules.long_term_exemption
        prior_used = min(exemption_used, limit)
        available = limit - prior_used

        realized_tax = self.estimate_tax(realized, available)
        available -= realized_tax.exemption_applied
        unrealized_tax = self.estimate_tax(unrealized, available)

        used = prior_used + realized_tax.exemption_applied + unrealized_tax.exemption_applied
        used_percent = (used / limit * ONE_HUNDRED) if limit > ZERO else ZERO

        ordered = sorted(holdings, key=lambda h: abs(h.net_gain), reverse=True)

        summary = PortfolioTaxSummary(
            realized=realized,
            unrealized=unrealized,
            realized_tax=realized_tax,
            unrealized_tax=unrealized_tax,
            exemption_limit=limit,
            exemption_used=used,
            exemption_remaining=limit - used,
            exemption_used_percent=used_percent.quantize(
                DISPLAY_PERCENTAGE_PRECISION, rounding=ROUND_HALF_UP
            ),
            long_term_holding_count=sum(1 for h in holdings if h.has_long_term_gain),
            short_term_holding_count=sum(1 for h in holdings if h.has_short_term_gain),
            holdings=ordered,
        )

        logger.debug(
            f"Tax summary: {len(holdings)} holdings, realized tax={realized_tax.total_tax}, "
            f"unrealized tax={unrealized_tax.total_tax}, exemption used={used}"
        )

        return summary

    def estimate_tax(
            self,
            buckets: GainBuckets,
            exemption_available: Decimal,
    ) -> TaxEstimate:
        """
        Flat-rate liability on one bucket set.

        Args:
            buckets: Gains by term
            exemption_available: Long-term exemption still unused

        Returns:
            TaxEstimate with tax amounts rounded to currency precision
        """
        available = max(ZERO, exemption_available)
        exemption_applied = min(buckets.long_term_gain, available)
        taxable_long_term = buckets.long_term_gain - exemption_applied

        long_term_tax = taxable_long_term * self.rules.long_term_tax_rate
        short_term_tax = buckets.short_term_gain * self.rules.short_term_tax_rate

        return TaxEstimate(
            long_term_gain=buckets.long_term_gain,
            exemption_applied=exemption_applied,
            taxable_long_term_gain=taxable_long_term,
            long_term_tax=long_term_tax.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP),
            short_term_gain=buckets.short_term_gain,
            short_term_tax=short_term_tax.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP),
        )

    # =========================================================================
    # FIXED INCOME INTEREST
    # =========================================================================

    @staticmethod
    def classify_interest(
            interest_by_type: Iterable[tuple[str, Decimal]],
    ) -> InterestTaxSummary:
        """
        Split fixed-income interest into taxable and exempt.

        Args:
            interest_by_type: (instrument_type, interest) pairs, one per holding

        Returns:
            InterestTaxSummary; PPF, EPF, VPF and SSY interest is exempt
        """
        taxable = ZERO
        exempt = ZERO
        for instrument_type, interest in interest_by_type:
            if instrument_type.upper() in TAX_EXEMPT_INTEREST_TYPES:
                exempt += interest
            else:
                taxable += interest
        return InterestTaxSummary(taxable_interest=taxable, exempt_interest=exempt)
