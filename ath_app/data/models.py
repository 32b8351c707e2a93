"""
Canonical data models for provider price data and derived watchlist metrics.

This module defines immutable data structures that represent validated
provider data after boundary parsing, and the records computed from it.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class PeakConfidence(Enum):
    """How a peak record was obtained."""
    RESOLVED = "resolved"
    FALLBACK = "fallback"


class AssetType(Enum):
    """Instrument classification used for filtering."""
    ETF = "etf"
    STOCK = "stock"
    CRYPTO = "crypto"
    MATERIALS = "materials"


class ChartRange(Enum):
    """Lookback windows for detail charts."""
    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    ONE_YEAR = "1Y"
    FIVE_YEARS = "5Y"


@dataclass(frozen=True)
class PricePoint:
    """One weekly bar. Any price field may be missing in provider data."""
    date: datetime                      # UTC bar timestamp
    high: Optional[float]
    close: Optional[float]
    adjusted_close: Optional[float]

    @property
    def is_complete(self) -> bool:
        """True if high, close and adjusted close are all present."""
        return (self.high is not None and
                self.close is not None and
                self.adjusted_close is not None)


@dataclass(frozen=True)
class SymbolSeries:
    """Chronological weekly history for one symbol."""
    symbol: str
    points: tuple[PricePoint, ...] = ()

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        return not self.points


@dataclass(frozen=True)
class PeakRecord:
    """Resolved all-time high for one symbol."""
    symbol: str
    peak_price: float
    peak_date: datetime
    confidence: PeakConfidence = PeakConfidence.RESOLVED

    @property
    def is_fallback(self) -> bool:
        return self.confidence is PeakConfidence.FALLBACK


@dataclass(frozen=True)
class QuoteSnapshot:
    """Live quote fields needed for watchlist metrics."""
    symbol: str
    name: str
    current_price: float
    currency: str = "USD"
    daily_change_percent: Optional[float] = None
    dividend_yield: Optional[float] = None
    expense_ratio: Optional[float] = None


@dataclass(frozen=True)
class DetailedQuote:
    """Extended quote fields shown on the single-symbol detail view."""
    symbol: str
    short_name: str
    long_name: Optional[str]
    regular_market_price: float
    regular_market_change: float
    regular_market_change_percent: float
    regular_market_day_high: float
    regular_market_day_low: float
    regular_market_open: float
    regular_market_previous_close: float
    regular_market_volume: int
    average_daily_volume_3_month: Optional[int]
    average_daily_volume_10_day: Optional[int]
    fifty_two_week_high: float
    fifty_two_week_low: float
    fifty_day_average: Optional[float]
    two_hundred_day_average: Optional[float]
    market_cap: Optional[float]
    trailing_pe: Optional[float]
    forward_pe: Optional[float]
    beta: Optional[float]
    eps_trailing_twelve_months: Optional[float]
    price_to_book: Optional[float]
    dividend_yield: Optional[float]
    net_expense_ratio: Optional[float]
    currency: str = "USD"
    exchange: str = "Unknown"
    exchange_timezone_name: str = "America/New_York"
    market_state: str = "CLOSED"
    quote_type: str = "EQUITY"

    def to_snapshot(self) -> QuoteSnapshot:
        """The subset of fields used for peak merging and metrics."""
        return QuoteSnapshot(
            symbol=self.symbol,
            name=self.short_name,
            current_price=self.regular_market_price,
            currency=self.currency,
            daily_change_percent=self.regular_market_change_percent,
            dividend_yield=self.dividend_yield,
            expense_ratio=self.net_expense_ratio,
        )

    def to_dict(self) -> dict[str, Any]:
        return dict(self.__dict__)


@dataclass(frozen=True)
class ChartPoint:
    """Single close price on a detail chart."""
    timestamp_ms: int
    date: datetime
    price: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp_ms,
            "date": self.date.isoformat(),
            "price": self.price,
        }


@dataclass(frozen=True)
class DerivedMetrics:
    """Distance-from-peak metrics for one instrument, rebuilt on every request."""
    symbol: str
    name: str
    current_price: float
    peak_price: float
    peak_date: datetime
    percent_down: float
    percent_to_peak: float
    is_near_peak: bool
    asset_type: AssetType
    currency: str = "USD"
    daily_change_percent: Optional[float] = None
    dividend_yield: Optional[float] = None
    expense_ratio: Optional[float] = None
    confidence: PeakConfidence = PeakConfidence.RESOLVED

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation for the presentation layer."""
        return {
            "symbol": self.symbol,
            "name": self.name,
            "current_price": self.current_price,
            "peak_price": self.peak_price,
            "peak_date": self.peak_date.isoformat(),
            "percent_down": self.percent_down,
            "percent_to_peak": self.percent_to_peak,
            "is_near_peak": self.is_near_peak,
            "asset_type": self.asset_type.value,
            "currency": self.currency,
            "daily_change_percent": self.daily_change_percent,
            "dividend_yield": self.dividend_yield,
            "expense_ratio": self.expense_ratio,
            "confidence": self.confidence.value,
        }


@dataclass(frozen=True)
class StockDetail:
    """Single-symbol detail payload."""
    quote: DetailedQuote
    chart_data: list[ChartPoint]
    peak_price: float
    peak_date: datetime
    confidence: PeakConfidence = PeakConfidence.RESOLVED

    def to_dict(self) -> dict[str, Any]:
        return {
            "quote": self.quote.to_dict(),
            "chart_data": [point.to_dict() for point in self.chart_data],
            "peak_price": self.peak_price,
            "peak_date": self.peak_date.isoformat(),
            "confidence": self.confidence.value,
        }
