"""
Port (interface) for market data providers.

Adapters must return canonical models; raw provider payloads never leave
the adapter.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..data.models import ChartPoint, ChartRange, DetailedQuote, QuoteSnapshot, SymbolSeries


class MarketDataProvider(ABC):
    """External source of price history and live quotes."""

    @abstractmethod
    def get_weekly_history(self, symbol: str) -> SymbolSeries:
        """
        Weekly bars from inception to now.

        Raises:
            Any provider/transport exception on failure. An empty series is a
            valid (if unusable) result.
        """

    @abstractmethod
    def get_quotes(self, symbols: list[str]) -> list[QuoteSnapshot]:
        """Live quote snapshots; may omit symbols the provider does not know."""

    @abstractmethod
    def get_detailed_quote(self, symbol: str) -> Optional[DetailedQuote]:
        """Extended quote for one symbol, None if the symbol is unknown."""

    @abstractmethod
    def get_chart(self, symbol: str, chart_range: ChartRange) -> list[ChartPoint]:
        """Close prices over the lookback window, oldest first."""
