# backend/portfolio_metrics/schemas/__init__.py
"""
Pydantic schemas for validating inbound records.

- transactions: TransactionRecord and InstrumentRecord, convertible to the
  engine's frozen dataclasses with `.to_domain()`
- validators: Reusable validation functions (dates, kinds, instrument types)

Usage:
    from portfolio_metrics.schemas import TransactionRecord

    txn = TransactionRecord.model_validate(row).to_domain()
"""

from portfolio_metrics.schemas.transactions import InstrumentRecord, TransactionRecord

__all__ = [
    "InstrumentRecord",
    "TransactionRecord",
]
