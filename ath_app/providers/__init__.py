"""
Market data provider port and adapters.

The yfinance adapter is imported from its own module so that the port and
reference table stay importable without the provider library.
"""

from .base import MarketDataProvider
from .reference import REFERENCE_TABLE, ReferenceEntry, get_reference

__all__ = ["MarketDataProvider", "REFERENCE_TABLE", "ReferenceEntry", "get_reference"]
