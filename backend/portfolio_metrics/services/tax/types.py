# backend/portfolio_metrics/services/tax/types.py
"""
Data types for capital-gains classification.

Type Hierarchy:
    GainTerm              - LONG_TERM | SHORT_TERM
    TaxRules              - Threshold, flat rates and annual exemption
    GainBuckets           - Gains and losses split by term (losses positive)
    HoldingTaxBreakdown   - Realized + unrealized buckets of one holding
    TaxEstimate           - Exemption and flat-rate liability for one bucket set
    PortfolioTaxSummary   - Portfolio-wide aggregation
    InterestTaxSummary    - Fixed-income interest split taxable / exempt

Gains and losses are never netted against each other inside a bucket set:
a loss is stored as a positive magnitude in its own field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from portfolio_metrics.services.constants import (
    DEFAULT_LONG_TERM_EXEMPTION,
    DEFAULT_LONG_TERM_TAX_RATE,
    DEFAULT_LONG_TERM_THRESHOLD_DAYS,
    DEFAULT_SHORT_TERM_TAX_RATE,
    ZERO,
)

if TYPE_CHECKING:
    from portfolio_metrics.config import Settings


class GainTerm(str, Enum):
    LONG_TERM = "long_term"
    SHORT_TERM = "short_term"


@dataclass(frozen=True)
class TaxRules:
    """
    Capital-gains rules applied by the GainClassifier.

    Attributes:
        long_term_threshold_days: A gain is long-term only when its holding
                                  period EXCEEDS this many days
        long_term_tax_rate: Flat rate on taxable long-term gains (0.125)
        short_term_tax_rate: Flat rate on short-term gains (0.20)
        long_term_exemption: Annual long-term amount excluded from tax
    """
    long_term_threshold_days: int = DEFAULT_LONG_TERM_THRESHOLD_DAYS
    long_term_tax_rate: Decimal = DEFAULT_LONG_TERM_TAX_RATE
    short_term_tax_rate: Decimal = DEFAULT_SHORT_TERM_TAX_RATE
    long_term_exemption: Decimal = DEFAULT_LONG_TERM_EXEMPTION

    @classmethod
    def from_settings(cls, settings: Settings) -> TaxRules:
        return cls(
            long_term_threshold_days=settings.long_term_threshold_days,
            long_term_tax_rate=settings.long_term_tax_rate,
            short_term_tax_rate=settings.short_term_tax_rate,
            long_term_exemption=settings.long_term_exemption,
        )

    def term_for(self, holding_period_days: int) -> GainTerm:
        """Exactly `long_term_threshold_days` is still short-term."""
        if holding_period_days > self.long_term_threshold_days:
            return GainTerm.LONG_TERM
        return GainTerm.SHORT_TERM


@dataclass(frozen=True)
class GainBuckets:
    """
    Gains and losses by term. All four amounts are >= 0.
    """
    long_term_gain: Decimal = ZERO
    long_term_loss: Decimal = ZERO
    short_term_gain: Decimal = ZERO
    short_term_loss: Decimal = ZERO

    def __add__(self, other: GainBuckets) -> GainBuckets:
        return GainBuckets(
            long_term_gain=self.long_term_gain + other.long_term_gain,
            long_term_loss=self.long_term_loss + other.long_term_loss,
            short_term_gain=self.short_term_gain + other.short_term_gain,
            short_term_loss=self.short_term_loss + other.short_term_loss,
        )

    def add(self, term: GainTerm, amount: Decimal) -> GainBuckets:
        """Return new buckets with `amount` filed as a gain or a loss of `term`."""
        if amount == ZERO:
            return self
        is_gain = amount > ZERO
        if term == GainTerm.LONG_TERM:
            if is_gain:
                return GainBuckets(self.long_term_gain + amount, self.long_term_loss,
                                   self.short_term_gain, self.short_term_loss)
            return GainBuckets(self.long_term_gain, self.long_term_loss - amount,
                               self.short_term_gain, self.short_term_loss)
        if is_gain:
            return GainBuckets(self.long_term_gain, self.long_term_loss,
                               self.short_term_gain + amount, self.short_term_loss)
        return GainBuckets(self.long_term_gain, self.long_term_loss,
                           self.short_term_gain, self.short_term_loss - amount)

    @property
    def total_gain(self) -> Decimal:
        return self.long_term_gain + self.short_term_gain

    @property
    def total_loss(self) -> Decimal:
        return self.long_term_loss + self.short_term_loss

    @property
    def net_gain(self) -> Decimal:
        return self.total_gain - self.total_loss

    @property
    def is_empty(self) -> bool:
        return self.total_gain == ZERO and self.total_loss == ZERO


@dataclass(frozen=True)
class HoldingTaxBreakdown:
    """
    Gains of one holding by term.

    Attributes:
        holding_id: Caller's identifier
        name: Display name (optional)
        realized: Buckets from consumed lots
        unrealized: Buckets from open lots marked at the current price
    """
    holding_id: str
    realized: GainBuckets
    unrealized: GainBuckets
    name: str | None = None

    @property
    def combined(self) -> GainBuckets:
        return self.realized + self.unrealized

    @property
    def net_gain(self) -> Decimal:
        return self.combined.net_gain

    @property
    def has_long_term_gain(self) -> bool:
        return self.combined.long_term_gain > ZERO

    @property
    def has_short_term_gain(self) -> bool:
        return self.combined.short_term_gain > ZERO


@dataclass(frozen=True)
class TaxEstimate:
    """
    Flat-rate liability for one set of buckets.

    Formula:
        exemption_applied = min(long_term_gain, exemption_available)
        taxable_long_term_gain = long_term_gain - exemption_applied
        long_term_tax = taxable_long_term_gain × long_term_rate
        short_term_tax = short_term_gain × short_term_rate

    Losses do not offset gains.
    """
    long_term_gain: Decimal
    exemption_applied: Decimal
    taxable_long_term_gain: Decimal
    long_term_tax: Decimal
    short_term_gain: Decimal
    short_term_tax: Decimal

    @property
    def total_tax(self) -> Decimal:
        return self.long_term_tax + self.short_term_tax


@dataclass(frozen=True)
class PortfolioTaxSummary:
    """
    Portfolio-wide capital-gains picture.

    Realized gains consume the exemption first; the unrealized estimate
    ("tax if sold today") uses what is left.

    Attributes:
        realized: Sum of realized buckets over holdings
        unrealized: Sum of unrealized buckets over holdings
        realized_tax: Liability on realized gains
        unrealized_tax: Liability if open positions were sold at as_of
        exemption_limit: Annual exemption from the rules
        exemption_used: Prior usage + exemption applied here
        exemption_remaining: exemption_limit - exemption_used
        exemption_used_percent: exemption_used / exemption_limit × 100
        long_term_holding_count: Holdings with any long-term gain
        short_term_holding_count: Holdings with any short-term gain
        holdings: Per-holding breakdown, largest |net gain| first
    """
    realized: GainBuckets
    unrealized: GainBuckets
    realized_tax: TaxEstimate
    unrealized_tax: TaxEstimate
    exemption_limit: Decimal
    exemption_used: Decimal
    exemption_remaining: Decimal
    exemption_used_percent: Decimal
    long_term_holding_count: int
    short_term_holding_count: int
    holdings: list[HoldingTaxBreakdown] = field(default_factory=list)

    @property
    def total_estimated_tax(self) -> Decimal:
        return self.realized_tax.total_tax + self.unrealized_tax.total_tax


@dataclass(frozen=True)
class InterestTaxSummary:
    """
    Fixed-income interest split by tax treatment.

    Attributes:
        taxable_interest: Interest taxed at the holder's slab rate (FD, RD, ...)
        exempt_interest: Interest from exempt schemes (PPF, EPF, VPF, SSY)
    """
    taxable_interest: Decimal
    exempt_interest: Decimal

    @property
    def total_interest(self) -> Decimal:
        return self.taxable_interest + self.exempt_interest
