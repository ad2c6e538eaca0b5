# backend/portfolio_metrics/services/lots/types.py
"""
Data types for FIFO lot tracking.

Type Hierarchy:
    Lot                 - Remaining unsold quantity of one purchase
    GainRecord          - Realized gain of one lot slice consumed by a SELL
    UnrealizedMark      - Paper gain of one open lot at a price
    LotTrackingResult   - Open lots + gain records of one tracker run

Design Principles:
- Decimal for ALL quantities and money
- All types are frozen; a partly consumed lot is replaced by a new Lot
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from portfolio_metrics.services.constants import ZERO


@dataclass(frozen=True)
class Lot:
    """
    Unsold remainder of one purchase.

    Attributes:
        acquisition_date: Date of the BUY
        quantity: Units still held (never negative)
        unit_cost: Purchase price per unit
    """
    acquisition_date: date
    quantity: Decimal
    unit_cost: Decimal

    @property
    def cost_basis(self) -> Decimal:
        return self.quantity * self.unit_cost


@dataclass(frozen=True)
class GainRecord:
    """
    Gain realized on the part of one lot consumed by one SELL.

    A SELL that spans several lots yields one record per lot touched.

    Attributes:
        realized_amount: consumed_quantity × (sale_unit_price - unit_cost)
        holding_period_days: sale_date - acquisition_date in days
        consumed_quantity: Units taken from the lot
        sale_date: Date of the SELL
        acquisition_date: Date of the consumed lot's BUY
        unit_cost: Purchase price per unit of the lot
        sale_unit_price: Sale price per unit
    """
    realized_amount: Decimal
    holding_period_days: int
    consumed_quantity: Decimal
    sale_date: date
    acquisition_date: date
    unit_cost: Decimal
    sale_unit_price: Decimal

    @property
    def cost_basis(self) -> Decimal:
        return self.consumed_quantity * self.unit_cost

    @property
    def proceeds(self) -> Decimal:
        return self.consumed_quantity * self.sale_unit_price


@dataclass(frozen=True)
class UnrealizedMark:
    """
    Paper gain of one open lot marked at a current price.

    Attributes:
        acquisition_date: Date of the lot's BUY
        quantity: Units in the lot
        unit_cost: Purchase price per unit
        current_price: Price the lot is marked at
        unrealized_amount: quantity × (current_price - unit_cost)
        holding_period_days: as_of - acquisition_date in days
    """
    acquisition_date: date
    quantity: Decimal
    unit_cost: Decimal
    current_price: Decimal
    unrealized_amount: Decimal
    holding_period_days: int

    @property
    def market_value(self) -> Decimal:
        return self.quantity * self.current_price


@dataclass
class LotTrackingResult:
    """
    Output of one LotTracker run.

    Attributes:
        open_lots: Remaining lots, oldest first
        gain_records: One record per lot slice consumed, in sale order
    """
    open_lots: list[Lot] = field(default_factory=list)
    gain_records: list[GainRecord] = field(default_factory=list)

    @property
    def total_realized(self) -> Decimal:
        return sum((g.realized_amount for g in self.gain_records), ZERO)

    @property
    def open_quantity(self) -> Decimal:
        return sum((lot.quantity for lot in self.open_lots), ZERO)

    @property
    def cost_basis(self) -> Decimal:
        """FIFO cost basis of what is still held."""
        return sum((lot.cost_basis for lot in self.open_lots), ZERO)

    @property
    def average_unit_cost(self) -> Decimal | None:
        quantity = self.open_quantity
        if quantity == ZERO:
            return None
        return self.cost_basis / quantity
