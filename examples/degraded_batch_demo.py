#!/usr/bin/env python3
"""
Degraded Batch Demo - ATH Watchlist Engine

Runs the engine against a scripted in-process provider, no network needed.
Demonstrates:
- Split-artifact correction in a weekly history
- Per-symbol retry and fallback when one history keeps failing
- The freshness override when a live price exceeds the recorded peak

Run: python examples/degraded_batch_demo.py
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from ath_app.config.defaults import get_default_config
from ath_app.data.models import (
    ChartPoint,
    ChartRange,
    DetailedQuote,
    PricePoint,
    QuoteSnapshot,
    SymbolSeries,
)
from ath_app.engine import WatchlistEngine
from ath_app.logging import configure_logging
from ath_app.providers.base import MarketDataProvider
from ath_app.utils.formatting import format_currency

START = datetime(2021, 1, 4, tzinfo=timezone.utc)


def weekly_series(symbol: str, highs: List[float], spike_at: Optional[int] = None) -> SymbolSeries:
    """Weekly bars with a 2% intraday premium; optionally one unadjusted 4:1 high."""
    points = []
    for i, high in enumerate(highs):
        close = high / 1.02
        raw_high = high * 4 if i == spike_at else high
        points.append(PricePoint(START + timedelta(weeks=i), raw_high, close, close))
    return SymbolSeries(symbol, tuple(points))


class ScriptedProvider(MarketDataProvider):
    """In-process provider with one permanently failing history."""

    def __init__(self):
        self.series: Dict[str, SymbolSeries] = {
            "SPLT": weekly_series("SPLT", [40.0 + i for i in range(15)], spike_at=2),
            "HIGH": weekly_series("HIGH", [10.0, 11.0, 12.0]),
        }
        self.quotes: Dict[str, QuoteSnapshot] = {
            "SPLT": QuoteSnapshot("SPLT", "Split Corp", 50.0, daily_change_percent=0.4),
            "HIGH": QuoteSnapshot("HIGH", "New High Inc.", 12.5, daily_change_percent=2.1),
            "DOWN": QuoteSnapshot("DOWN", "Flaky Data Co.", 8.0, daily_change_percent=-1.3),
        }

    def get_weekly_history(self, symbol: str) -> SymbolSeries:
        if symbol == "DOWN":
            raise ConnectionError("upstream timeout")
        return self.series.get(symbol, SymbolSeries(symbol))

    def get_quotes(self, symbols: List[str]) -> List[QuoteSnapshot]:
        return [self.quotes[s] for s in symbols if s in self.quotes]

    def get_detailed_quote(self, symbol: str) -> Optional[DetailedQuote]:
        return None

    def get_chart(self, symbol: str, chart_range: ChartRange) -> List[ChartPoint]:
        return []


def main() -> None:
    """Run the offline demo."""
    configure_logging(level="INFO")

    engine = WatchlistEngine(
        provider=ScriptedProvider(),
        config=get_default_config(),
        sleep=lambda seconds: None,
    )

    metrics = engine.get_watchlist_metrics(["SPLT", "HIGH", "DOWN"], threshold=1.0)

    print("\n📋 Results")
    for item in metrics:
        print(f"  {item.symbol:<5} price {format_currency(item.current_price):>8}  "
              f"peak {format_currency(item.peak_price):>8}  "
              f"down {item.percent_down:5.2f}%  "
              f"near={item.is_near_peak!s:<5}  confidence={item.confidence.value}")

    by_symbol = {item.symbol: item for item in metrics}
    assert len(metrics) == 3
    assert by_symbol["SPLT"].peak_price < 100, "split artifact should be corrected"
    assert by_symbol["HIGH"].percent_down == 0.0, "live price should set a new peak"
    assert by_symbol["DOWN"].confidence.value == "fallback"

    print("\n✅ Degraded batch handled: all symbols present, failure isolated")


if __name__ == "__main__":
    main()
