"""
Error classification for peak resolution and watchlist retrieval.

Separates recoverable per-symbol data problems from provider-wide failures
that must be surfaced to the caller.
"""

from .data_quality import (
    DataQualityError,
    MissingDataError,
    MalformedDataError,
    ParseError,
)
from .system_failures import (
    SystemFailureError,
    ProviderUnavailableError,
    SymbolNotFoundError,
)
from .recovery import (
    RecoverableError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "MissingDataError",
    "MalformedDataError",
    "ParseError",
    # System Failures
    "SystemFailureError",
    "ProviderUnavailableError",
    "SymbolNotFoundError",
    # Recovery Categories
    "RecoverableError",
]
