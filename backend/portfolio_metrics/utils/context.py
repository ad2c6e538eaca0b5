# backend/portfolio_metrics/utils/context.py
"""
Calculation context management for the portfolio metrics engine.

The engine itself is stateless. This module only lets the CALLER attach
a correlation ID (request ID, batch ID, ...) to the current execution
context so that every log line emitted by the calculators can be traced
back to the call that produced it.

Uses Python's contextvars, so concurrent calls in separate threads or
asyncio tasks each see their own value.

Usage:
    from portfolio_metrics.utils.context import set_correlation_id

    set_correlation_id("nightly-batch-2024-06-01")
    service.evaluate_portfolio(holdings, as_of=date(2024, 6, 1))
    clear_correlation_id()
"""

from contextvars import ContextVar
from typing import Any

# =============================================================================
# CONTEXT VARIABLES
# =============================================================================

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)

_calculation_context_var: ContextVar[dict[str, Any] | None] = ContextVar(
    "calculation_context", default=None
)


# =============================================================================
# CORRELATION ID
# =============================================================================

def get_correlation_id() -> str | None:
    """
    Get the current correlation ID.

    Returns:
        The correlation ID for the current context, or None if not set.
    """
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """
    Set the correlation ID for the current context.

    Args:
        correlation_id: Identifier of the call being traced
    """
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID."""
    _correlation_id_var.set(None)


# =============================================================================
# EXTENDED CONTEXT
# =============================================================================

def get_calculation_context() -> dict[str, Any]:
    """
    Get a copy of the calculation context dictionary.

    Returns:
        Dictionary containing all context data (empty if none was set).
    """
    return dict(_calculation_context_var.get() or {})


def set_calculation_context(key: str, value: Any) -> None:
    """
    Set a value in the calculation context.

    Args:
        key: Context key
        value: Context value
    """
    ctx = get_calculation_context()
    ctx[key] = value
    _calculation_context_var.set(ctx)


def clear_calculation_context() -> None:
    """Clear all calculation context."""
    _calculation_context_var.set(None)


def restore_calculation_context(context: dict[str, Any]) -> None:
    """
    Replace the calculation context with a previously saved copy.

    Args:
        context: Dictionary returned by get_calculation_context()
    """
    _calculation_context_var.set(dict(context) or None)
