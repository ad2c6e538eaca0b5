# backend/portfolio_metrics/utils/logging.py
"""
Logging configuration for the portfolio metrics engine.

The calculators only ever call logging.getLogger(__name__); they never
configure handlers. An application embedding the engine either calls
setup_logging() once at startup or leaves logging to its own configuration.

What setup_logging() adds on top of plain logging:
- LOG_LEVEL / LOG_FORMAT from Settings (text or json)
- CalculationContextFilter, which stamps every record with the caller's
  correlation ID and the holding / valuation date being computed
  (see utils/context.py)

Text output:
    2024-06-01 10:30:00 | WARNING  | batch-42 | INFY | portfolio_metrics.services.portfolio.service | XIRR for INFY is unreliable ...

JSON output (one object per line):
    {
        "timestamp": "2024-06-01T10:30:00.123+00:00",
        "level": "WARNING",
        "logger": "portfolio_metrics.services.portfolio.service",
        "correlation_id": "batch-42",
        "message": "XIRR for INFY is unreliable (max_iterations_exceeded after 100 iterations)",
        "context": {"as_of": "2024-06-01", "holding_id": "INFY"},
        "extra": { ... }
    }

Log Levels:
    DEBUG   - Per-holding steps, lot consumption, schedule periods
    INFO    - Portfolio-level summaries
    WARNING - Unreliable results (solver did not converge, missing prices)
    ERROR   - Holdings that could not be evaluated
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

from portfolio_metrics.config import settings
from portfolio_metrics.utils.context import get_calculation_context, get_correlation_id

# =============================================================================
# CONSTANTS
# =============================================================================

TEXT_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(correlation_id)s | %(holding_id)s | "
    "%(name)s | %(message)s"
)
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NO_CORRELATION_ID = "no-correlation-id"
NO_HOLDING = "-"

LOG_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# LogRecord attributes that never go into the JSON "extra" block
_RESERVED_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime", "correlation_id", "holding_id", "calculation_context"}


# =============================================================================
# CONTEXT FILTER
# =============================================================================

class CalculationContextFilter(logging.Filter):
    """
    Copies the caller's context onto each record.

    Adds:
        correlation_id: Caller-supplied ID, or NO_CORRELATION_ID
        holding_id: Holding being evaluated, or NO_HOLDING
        calculation_context: Full context dict (used by JsonFormatter)
    """

    def filter(self, record: logging.LogRecord) -> bool:
        context = get_calculation_context()
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        record.holding_id = context.get("holding_id", NO_HOLDING)
        record.calculation_context = context
        return True


# =============================================================================
# JSON FORMATTER
# =============================================================================

class JsonFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "correlation_id": getattr(record, "correlation_id", NO_CORRELATION_ID),
            "message": record.getMessage(),
        }

        # Records that did not pass through the filter read the live context
        context = getattr(record, "calculation_context", None)
        if context is None:
            context = get_calculation_context()
        if context:
            log_entry["context"] = {key: str(value) for key, value in context.items()}

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra = {
            key: _json_safe(value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_ATTRS
        }
        if extra:
            log_entry["extra"] = extra

        return json.dumps(log_entry)


def _json_safe(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


# =============================================================================
# SETUP
# =============================================================================

def setup_logging(
        level: str | None = None,
        log_format: str | None = None,
        stream: TextIO | None = None,
) -> None:
    """
    Install a single root handler with the engine's format and filter.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
               Defaults to settings.log_level.
        log_format: 'text' or 'json'. Defaults to settings.log_format.
        stream: Output stream. Defaults to stdout.

    Example:
        setup_logging(level="DEBUG", log_format="json")
    """
    level_name = level or settings.log_level
    format_type = (log_format or settings.log_format).lower()

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)
    handler.addFilter(CalculationContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(_get_log_level(level_name))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={level_name}, format={format_type}"
    )


def _get_log_level(level_str: str) -> int:
    """
    Map a level name to its logging constant.

    Raises:
        ValueError: If level_str is not a known level
    """
    normalized = level_str.strip().upper()
    if normalized not in LOG_LEVELS:
        raise ValueError(
            f"Invalid log level: '{level_str}'. Valid levels are: {', '.join(LOG_LEVELS)}"
        )
    return LOG_LEVELS[normalized]
