"""
Centralized logging configuration for the ATH tracking system.

All components log through structlog with key/value context (symbol,
attempt, error) so batch runs can be audited per instrument.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


# Third-party loggers that are noisy at INFO during provider requests
PROVIDER_LOGGERS = ("yfinance", "urllib3", "peewee")


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None,
    provider_level: str = "WARNING"
) -> None:
    """
    Configure structlog for the watchlist engine and its provider adapter.

    Args:
        level: Logging level for ath_app (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: Emit one JSON object per event instead of console output
        include_timestamp: Add an ISO timestamp to every event
        include_caller: Add the emitting filename and line number
        extra_processors: Additional structlog processors, run before rendering
        provider_level: Level for the market data library loggers
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"
    )

    for name in PROVIDER_LOGGERS:
        logging.getLogger(name).setLevel(getattr(logging, provider_level.upper()))

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_batch_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for batch retrieval events.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structlog logger carrying the batch retrieval subsystem tag
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="batch_retrieval",
        audit_trail=True
    )


def log_peak_resolution(
    logger: FilteringBoundLogger,
    symbol: str,
    peak_price: float,
    peak_date: str,
    confidence: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a resolved peak with standardized format.

    Args:
        logger: Structlog logger instance
        symbol: Instrument symbol
        peak_price: Resolved peak price
        peak_date: ISO date of the peak
        confidence: "resolved" or "fallback"
        context: Additional context data
    """
    bound_logger = logger.bind(
        symbol=symbol,
        peak_price=peak_price,
        peak_date=peak_date,
        confidence=confidence,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Peak resolved")


def log_fallback(
    logger: FilteringBoundLogger,
    symbol: str,
    reason: str,
    attempts: int = 0,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log that a symbol fell through to its fallback peak.

    Args:
        logger: Structlog logger instance
        symbol: Instrument symbol
        reason: Why the provider path was abandoned
        attempts: Provider attempts made before falling back
        context: Additional context data
    """
    bound_logger = logger.bind(
        symbol=symbol,
        reason=reason,
        attempts=attempts,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.warning("Using fallback peak")
