#!/usr/bin/env python3
"""
Basic Usage Example - ATH Watchlist Engine

This script fetches live data from Yahoo Finance for the default watchlist
and shows how to:
- Initialize the engine with a peak cache
- Build distance-from-peak metrics for a watchlist
- Sort, filter and summarize the result
- Load the detail view for one symbol

Run: python examples/basic_usage.py [SYMBOL ...]
"""

import sys

from ath_app.data.models import AssetType
from ath_app.engine import WatchlistEngine
from ath_app.errors import ProviderUnavailableError, SymbolNotFoundError
from ath_app.logging import configure_logging
from ath_app.metrics.aggregation import count_by_asset_type
from ath_app.metrics.sorting import SortDirection, SortField
from ath_app.persistence import InMemoryPeakCache
from ath_app.utils.formatting import format_currency, format_percent


def print_watchlist(engine: WatchlistEngine, metrics) -> None:
    """Print the watchlist table, deepest discount first."""
    print(f"\n{'Symbol':<10} {'Price':>14} {'Peak':>14} {'Down':>9} {'To peak':>9}  Flags")
    print("-" * 72)

    for item in engine.get_view(metrics, SortField.PERCENT_DOWN, SortDirection.DESC):
        flags = []
        if item.is_near_peak:
            flags.append("near ATH")
        if item.confidence.value == "fallback":
            flags.append("fallback")
        print(f"{item.symbol:<10} "
              f"{format_currency(item.current_price, item.currency):>14} "
              f"{format_currency(item.peak_price, item.currency):>14} "
              f"{-item.percent_down:>8.2f}% "
              f"{format_percent(item.percent_to_peak):>9}  "
              f"{', '.join(flags)}")


def print_summary(engine: WatchlistEngine, metrics) -> None:
    """Print summary cards for all instruments and for ETFs only."""
    summary = engine.get_summary(metrics)
    if summary is None:
        print("\nNo instruments to summarize")
        return

    print("\n📊 Summary")
    print(f"  Deepest discount : {summary.deepest_discount.symbol} "
          f"(-{summary.deepest_discount.percent_down:.1f}%)")
    if summary.nearest_peak is not None:
        print(f"  Closest to ATH   : {summary.nearest_peak.symbol} "
              f"(-{summary.nearest_peak.percent_down:.1f}%)")
    print(f"  At / near ATH    : {summary.at_peak_count} of {summary.total_count}")
    if summary.top_performer is not None:
        print(f"  Top performer    : {summary.top_performer.symbol} "
              f"({format_percent(summary.top_performer.daily_change_percent)})")
        print(f"  Worst performer  : {summary.worst_performer.symbol} "
              f"({format_percent(summary.worst_performer.daily_change_percent)})")
    print(f"  Average down     : -{summary.average_percent_down:.1f}%")

    etf_summary = engine.get_summary(metrics, {AssetType.ETF})
    if etf_summary is not None:
        print(f"  ETF average down : -{etf_summary.average_percent_down:.1f}%")

    print(f"  By type          : {count_by_asset_type(metrics)}")


def main() -> None:
    """Run the example against live data."""
    configure_logging(level="WARNING")

    symbols = [s for s in sys.argv[1:] if not s.startswith("-")] or None
    engine = WatchlistEngine(cache=InMemoryPeakCache())

    print("🚀 ATH Watchlist - live data from Yahoo Finance")

    try:
        metrics = engine.get_watchlist_metrics(symbols, threshold=1.0)
    except ProviderUnavailableError as e:
        print(f"❌ Provider unavailable ({e.operation}): {e}")
        sys.exit(1)

    print_watchlist(engine, metrics)
    print_summary(engine, metrics)

    if metrics:
        symbol = metrics[0].symbol
        try:
            detail = engine.get_stock_detail(symbol, "1Y")
        except (ProviderUnavailableError, SymbolNotFoundError) as e:
            print(f"\n⚠️  Detail view unavailable for {symbol}: {e}")
            return

        print(f"\n🔎 {detail.quote.short_name} ({symbol})")
        print(f"  Price      : {format_currency(detail.quote.regular_market_price, detail.quote.currency)}")
        print(f"  ATH        : {format_currency(detail.peak_price, detail.quote.currency)} "
              f"on {detail.peak_date.date().isoformat()}")
        print(f"  52w range  : {detail.quote.fifty_two_week_low:.2f} - "
              f"{detail.quote.fifty_two_week_high:.2f}")
        print(f"  Chart      : {len(detail.chart_data)} points over 1Y")


if __name__ == "__main__":
    main()
