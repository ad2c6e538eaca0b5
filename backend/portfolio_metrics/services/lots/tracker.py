# backend/portfolio_metrics/services/lots/tracker.py
"""
FIFO lot tracking.

Replays a holding's transactions in date order:
- BUY (and opening balance) appends a lot to the back of the queue
- SELL consumes from the front: a lot with quantity <= what is still to be
  sold is removed entirely, otherwise it is reduced and consumption stops

Each lot touched by a SELL produces one GainRecord:

    realized = qty × sale_price - qty × unit_cost
    holding_period_days = sale_date - acquisition_date

Conservation: open quantity == total bought - total sold, and a SELL larger
than the open quantity raises InsufficientLotQuantityError instead of being
partially matched.
"""

import logging
from collections import deque
from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from portfolio_metrics.models import Transaction
from portfolio_metrics.services.constants import ZERO
from portfolio_metrics.services.exceptions import InsufficientLotQuantityError
from portfolio_metrics.services.lots.types import (
    GainRecord,
    Lot,
    LotTrackingResult,
    UnrealizedMark,
)
from portfolio_metrics.utils.date_utils import days_between, parse_date

logger = logging.getLogger(__name__)


class LotTracker:
    """
    First-in-first-out matcher of SELLs against open lots.

    Stateless between calls: every `process` builds its own lot queue from
    the full history.
    """

    def process(
            self,
            transactions: Iterable[Transaction],
            holding_id: str | None = None,
    ) -> LotTrackingResult:
        """
        Replay transactions and return open lots and realized gains.

        Args:
            transactions: The holding's BUY/SELL records in any order.
                          Same-day records keep their input order.
            holding_id: Used in error messages and logs only

        Returns:
            LotTrackingResult

        Raises:
            InsufficientLotQuantityError: If a SELL exceeds the open quantity
        """
        ordered = sorted(transactions, key=lambda t: t.date)
        lots: deque[Lot] = deque()
        gain_records: list[GainRecord] = []

        for txn in ordered:
            if txn.quantity <= ZERO:
                continue

            if txn.is_buy:
                lots.append(Lot(
                    acquisition_date=txn.date,
                    quantity=txn.quantity,
                    unit_cost=txn.unit_price,
                ))
            elif txn.is_sell:
                gain_records.extend(self._consume(lots, txn, holding_id))

        logger.debug(
            f"Lot tracking{f' for {holding_id}' if holding_id else ''}: "
            f"{len(ordered)} transactions, {len(lots)} open lots, "
            f"{len(gain_records)} gain records"
        )

        return LotTrackingResult(open_lots=list(lots), gain_records=gain_records)

    @staticmethod
    def _consume(
            lots: deque[Lot],
            sale: Transaction,
            holding_id: str | None,
    ) -> list[GainRecord]:
        """Take `sale.quantity` from the front of the queue (mutates lots)."""
        available = sum((lot.quantity for lot in lots), ZERO)
        if sale.quantity > available:
            raise InsufficientLotQuantityError(
                sale_date=sale.date,
                requested=sale.quantity,
                available=available,
                holding_id=holding_id,
            )

        records: list[GainRecord] = []
        remaining = sale.quantity

        while remaining > ZERO:
            lot = lots[0]
            if lot.quantity <= remaining:
                consumed = lot.quantity
                lots.popleft()
            else:
                consumed = remaining
                lots[0] = Lot(lot.acquisition_date, lot.quantity - consumed, lot.unit_cost)

            remaining -= consumed
            records.append(GainRecord(
                realized_amount=consumed * sale.unit_price - consumed * lot.unit_cost,
                holding_period_days=days_between(lot.acquisition_date, sale.date),
                consumed_quantity=consumed,
                sale_date=sale.date,
                acquisition_date=lot.acquisition_date,
                unit_cost=lot.unit_cost,
                sale_unit_price=sale.unit_price,
            ))

        return records


def mark_open_lots(
        lots: Sequence[Lot],
        current_price: Decimal,
        as_of: date | str,
) -> list[UnrealizedMark]:
    """
    Mark open lots at a current price.

    Args:
        lots: Open lots (e.g. LotTrackingResult.open_lots)
        current_price: Externally supplied price per unit
        as_of: Date the holding period is measured to

    Returns:
        One UnrealizedMark per lot, in lot order
    """
    valuation_date = parse_date(as_of, field="as_of")
    return [
        UnrealizedMark(
            acquisition_date=lot.acquisition_date,
            quantity=lot.quantity,
            unit_cost=lot.unit_cost,
            current_price=current_price,
            unrealized_amount=lot.quantity * current_price - lot.quantity * lot.unit_cost,
            holding_period_days=days_between(lot.acquisition_date, valuation_date),
        )
        for lot in lots
    ]
