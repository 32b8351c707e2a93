"""
System failure error classifications.

These exceptions are surfaced to the caller of a batch or detail request
because no meaningful partial result exists.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class ProviderUnavailableError(SystemFailureError):
    """The market data provider failed for the whole request."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 symbols: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.symbols = symbols or []


class SymbolNotFoundError(SystemFailureError):
    """The provider returned no quote for the requested symbol."""

    def __init__(self, message: str, symbol: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol
