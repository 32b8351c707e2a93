"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from ath_app.data.models import (
    ChartPoint,
    ChartRange,
    DetailedQuote,
    PricePoint,
    QuoteSnapshot,
    SymbolSeries,
)
from ath_app.providers.base import MarketDataProvider


START = datetime(2020, 1, 6, tzinfo=timezone.utc)
NOW = datetime(2025, 6, 2, 14, 30, tzinfo=timezone.utc)


def make_series(symbol: str, highs: List[float], ratio: float = 1.02,
                adjustment: float = 1.0) -> SymbolSeries:
    """Weekly series whose closes sit `ratio` below each high."""
    points = []
    for i, high in enumerate(highs):
        close = high / ratio
        points.append(PricePoint(
            date=START + timedelta(weeks=i),
            high=high,
            close=close,
            adjusted_close=close * adjustment,
        ))
    return SymbolSeries(symbol=symbol, points=tuple(points))


def make_quote(symbol: str, price: float, change: Optional[float] = 0.5,
               expense_ratio: Optional[float] = None, name: Optional[str] = None) -> QuoteSnapshot:
    return QuoteSnapshot(
        symbol=symbol,
        name=name or f"{symbol} Inc.",
        current_price=price,
        daily_change_percent=change,
        expense_ratio=expense_ratio,
    )


def make_detailed_quote(symbol: str, price: float) -> DetailedQuote:
    return DetailedQuote(
        symbol=symbol,
        short_name=f"{symbol} Inc.",
        long_name=None,
        regular_market_price=price,
        regular_market_change=1.0,
        regular_market_change_percent=0.8,
        regular_market_day_high=price + 1,
        regular_market_day_low=price - 1,
        regular_market_open=price,
        regular_market_previous_close=price - 1,
        regular_market_volume=1000,
        average_daily_volume_3_month=None,
        average_daily_volume_10_day=None,
        fifty_two_week_high=price + 10,
        fifty_two_week_low=price - 10,
        fifty_day_average=None,
        two_hundred_day_average=None,
        market_cap=None,
        trailing_pe=None,
        forward_pe=None,
        beta=None,
        eps_trailing_twelve_months=None,
        price_to_book=None,
        dividend_yield=None,
        net_expense_ratio=None,
    )


class FakeProvider(MarketDataProvider):
    """
    Scripted provider.

    `failures` maps a symbol to the number of history calls that raise
    before the series is returned.
    """

    def __init__(self, series: Optional[Dict[str, SymbolSeries]] = None,
                 quotes: Optional[Dict[str, QuoteSnapshot]] = None,
                 failures: Optional[Dict[str, int]] = None,
                 quote_failures: int = 0):
        self.series = series or {}
        self.quotes = quotes or {}
        self.failures = dict(failures or {})
        self.quote_failures = quote_failures
        self.history_calls: List[str] = []
        self.quote_calls = 0
        self.detail_quotes: Dict[str, DetailedQuote] = {}
        self.detail_error: Optional[Exception] = None
        self.charts: Dict[str, List[ChartPoint]] = {}
        self.chart_error: Optional[Exception] = None
        self.chart_ranges: List[ChartRange] = []

    def get_weekly_history(self, symbol: str) -> SymbolSeries:
        self.history_calls.append(symbol)
        if self.failures.get(symbol, 0) > 0:
            self.failures[symbol] -= 1
            raise ConnectionError(f"history unavailable for {symbol}")
        return self.series.get(symbol, SymbolSeries(symbol=symbol))

    def get_quotes(self, symbols: List[str]) -> List[QuoteSnapshot]:
        self.quote_calls += 1
        if self.quote_failures > 0:
            self.quote_failures -= 1
            raise ConnectionError("quote endpoint unavailable")
        return [self.quotes[s] for s in symbols if s in self.quotes]

    def get_detailed_quote(self, symbol: str) -> Optional[DetailedQuote]:
        if self.detail_error is not None:
            raise self.detail_error
        return self.detail_quotes.get(symbol)

    def get_chart(self, symbol: str, chart_range: ChartRange) -> List[ChartPoint]:
        self.chart_ranges.append(chart_range)
        if self.chart_error is not None:
            raise self.chart_error
        return self.charts.get(symbol, [])


@pytest.fixture
def now() -> datetime:
    """Fixed request timestamp."""
    return NOW


@pytest.fixture
def no_sleep():
    """Sleep replacement that records requested delays."""
    delays = []

    def sleep(seconds: float) -> None:
        delays.append(seconds)

    sleep.delays = delays
    return sleep


@pytest.fixture
def fake_provider() -> FakeProvider:
    """Provider with healthy data for three symbols."""
    return FakeProvider(
        series={
            "AAA": make_series("AAA", [50.0, 80.0, 120.0, 110.0]),
            "BBB": make_series("BBB", [20.0, 30.0, 25.0]),
            "CCC": make_series("CCC", [300.0, 280.0, 260.0]),
        },
        quotes={
            "AAA": make_quote("AAA", 100.0, change=1.5),
            "BBB": make_quote("BBB", 29.0, change=-2.0),
            "CCC": make_quote("CCC", 150.0, change=0.2, expense_ratio=0.09),
        },
    )


@pytest.fixture
def sample_history_rows() -> List[Dict]:
    """Raw weekly rows in provider field names."""
    return [
        {"date": "2024-01-08T00:00:00Z", "high": 105.0, "close": 100.0, "adjclose": 98.0},
        {"date": 1704067200, "high": 104.0, "close": 101.0, "adjclose": 99.0},
        {"date": "2024-01-15", "high": None, "close": 102.0, "adjclose": 100.0},
    ]
