"""
Main watchlist engine coordinator.

Orchestrates the peak tracking pipeline, running the live quote request
alongside the paced peak batch and combining both into derived metrics.

Provider → Parsers → SeriesCorrector → PeakResolver → BatchRetriever
         → MetricsEngine → Aggregation / Sort & Filter
"""

import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

import structlog

from .config.defaults import DEFAULT_SYMBOLS, AppConfig, get_default_config
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator, coerce_range, coerce_threshold
from .data.models import (
    AssetType,
    ChartPoint,
    ChartRange,
    DerivedMetrics,
    DetailedQuote,
    QuoteSnapshot,
    StockDetail,
)
from .errors import (
    DataQualityError,
    ProviderUnavailableError,
    RecoverableError,
    SymbolNotFoundError,
)
from .metrics.aggregation import WatchlistSummary, summarize
from .metrics.calculator import build_derived_metrics
from .metrics.peak import PeakResolver, merge_with_quote, refine_fallback
from .metrics.sorting import SortDirection, SortField, matches_type, sort_and_filter
from .persistence.peak_cache import PeakCache
from .providers.base import MarketDataProvider
from .retrieval.batch import BatchRetriever, normalize_symbols
from .retrieval.pacing import RequestPacer
from .retrieval.retry import call_with_retry
from .utils.time import now_utc

logger = structlog.get_logger(__name__)


class WatchlistEngine:
    """
    Main coordinator for the all-time-high tracking system.

    Serves the three outputs of the presentation layer: batch derived
    metrics for a watchlist, summary statistics, and a single-symbol detail
    payload.
    """

    def __init__(
        self,
        provider: Optional[MarketDataProvider] = None,
        config: Optional[AppConfig] = None,
        config_dir: Optional[Path] = None,
        config_overrides: Optional[dict[str, Any]] = None,
        cache: Optional[PeakCache] = None,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        """Initialize the engine and its components."""
        self.logger = logger
        self.config = config or self._load_config(config_dir, config_overrides)

        self._sleep = sleep
        self.pacer = RequestPacer(
            capacity=self.config.batch.concurrency,
            pause_ms=self.config.batch.pause_ms,
            sleep=sleep,
        )

        if provider is None:
            from .providers.yfinance_provider import YFinanceProvider
            provider = YFinanceProvider(self.config.provider, pacer=self.pacer)

        self.provider = provider
        self.resolver = PeakResolver(
            params=self.config.correction,
            default_price=self.config.provider.fallback_peak_price,
        )
        self.retriever = BatchRetriever(
            provider=provider,
            resolver=self.resolver,
            params=self.config.batch,
            cache=cache,
            cache_params=self.config.cache,
            sleep=sleep,
            pacer=self.pacer,
        )

        self.logger.info("Watchlist engine initialized",
                         provider=type(provider).__name__,
                         cache_enabled=cache is not None)

    def _load_config(self, config_dir: Optional[Path],
                     overrides: Optional[dict[str, Any]]) -> AppConfig:
        """Load configuration, falling back to defaults if it does not validate."""
        loader = ConfigLoader.create(config_dir)
        merged = loader.merge_config(overrides)

        errors = ConfigValidator.validate_config(merged)
        if errors:
            self.logger.error(
                "Configuration validation failed, using defaults",
                errors=[f"{err.field}: {err.message} (got: {err.value})" for err in errors]
            )
            return get_default_config()

        return loader.load(overrides)

    def get_watchlist_metrics(
        self,
        symbols: Optional[Iterable[str]] = None,
        threshold: Any = None,
        now: Optional[datetime] = None
    ) -> list[DerivedMetrics]:
        """
        Build derived metrics for a watchlist.

        Args:
            symbols: Symbols to track; defaults to the standard watchlist
            threshold: Near-peak cutoff in percent; malformed values use the default
            now: Timestamp for peaks set by the live price

        Returns:
            Derived metrics in request order; symbols without a quote are omitted

        Raises:
            ProviderUnavailableError: If the quote request failed, or every history
                request failed and no quote came back either
        """
        ordered = normalize_symbols(DEFAULT_SYMBOLS if symbols is None else symbols)
        if not ordered:
            return []

        effective_threshold = self._threshold(threshold)
        now = now or now_utc()

        with ThreadPoolExecutor(max_workers=2) as pool:
            quotes_future = pool.submit(self._fetch_quotes, ordered)
            batch_future = pool.submit(self.retriever.retrieve, ordered, now)
            batch = batch_future.result()
            quotes = quotes_future.result()

        if batch.all_failed and not quotes:
            raise ProviderUnavailableError(
                "No quote or price history available for any requested symbol",
                operation="weekly_history",
                symbols=ordered,
            )

        quote_map = {quote.symbol: quote for quote in quotes}
        missing = [s for s in ordered if s not in quote_map]
        if missing:
            self.logger.warning("Provider returned no quote for symbols", symbols=missing)

        metrics = []
        for symbol in ordered:
            quote = quote_map.get(symbol)
            if quote is None:
                continue

            peak = batch.peaks.get(symbol) or self.resolver.fallback(symbol, quote.current_price, now)
            peak = refine_fallback(peak, quote, self.config.provider.fallback_peak_price, now)
            peak = merge_with_quote(peak, quote, now)
            metrics.append(build_derived_metrics(quote, peak, effective_threshold))

        return metrics

    def get_symbol_metrics(self, symbol: str, threshold: Any = None,
                           now: Optional[datetime] = None) -> DerivedMetrics:
        """
        Derived metrics for one symbol.

        Raises:
            ValueError: If symbol is blank
            SymbolNotFoundError: If the provider has no quote for the symbol
            ProviderUnavailableError: If the provider failed outright
        """
        normalized = normalize_symbols([symbol])
        if not normalized:
            raise ValueError("symbol must be a non-empty string")

        metrics = self.get_watchlist_metrics(normalized, threshold, now)
        if not metrics:
            raise SymbolNotFoundError(f"No data found for symbol: {normalized[0]}",
                                      symbol=normalized[0])
        return metrics[0]

    def get_summary(self, metrics: Iterable[DerivedMetrics],
                    asset_types: Optional[Iterable[AssetType]] = None) -> Optional[WatchlistSummary]:
        """Summary statistics, optionally restricted to some asset types."""
        types = set(asset_types or ())
        return summarize([item for item in metrics if matches_type(item, types)])

    def get_view(
        self,
        metrics: Iterable[DerivedMetrics],
        sort_field: SortField = SortField.PERCENT_DOWN,
        direction: SortDirection = SortDirection.ASC,
        text_query: Optional[str] = None,
        asset_types: Optional[Iterable[AssetType]] = None
    ) -> list[DerivedMetrics]:
        """Sorted and filtered rows for display."""
        return sort_and_filter(metrics, sort_field, direction, text_query, asset_types)

    def get_stock_detail(self, symbol: str, chart_range: Any = None,
                         now: Optional[datetime] = None) -> StockDetail:
        """
        Detail payload for one symbol: extended quote, chart and peak.

        Args:
            symbol: Symbol to look up
            chart_range: One of 1D, 1W, 1M, 1Y, 5Y; anything else uses the default
            now: Timestamp for a peak set by the live price

        Raises:
            ValueError: If symbol is blank
            SymbolNotFoundError: If the provider has no quote for the symbol
            ProviderUnavailableError: If the quote request failed
        """
        normalized = normalize_symbols([symbol])
        if not normalized:
            raise ValueError("symbol must be a non-empty string")
        symbol = normalized[0]

        effective_range = coerce_range(chart_range, self.config.chart)
        requested = chart_range.value if isinstance(chart_range, ChartRange) else str(chart_range)
        if chart_range is not None and effective_range.value != requested.strip().upper():
            self.logger.warning("Invalid chart range, using default",
                                requested=requested, range=effective_range.value)
        now = now or now_utc()

        with ThreadPoolExecutor(max_workers=3) as pool:
            quote_future = pool.submit(self._fetch_detailed_quote, symbol)
            chart_future = pool.submit(self._fetch_chart, symbol, effective_range)
            batch_future = pool.submit(self.retriever.retrieve, [symbol], now)
            batch = batch_future.result()
            chart = chart_future.result()
            quote = quote_future.result()

        if quote is None:
            raise SymbolNotFoundError(f"No data found for symbol: {symbol}", symbol=symbol)

        snapshot = quote.to_snapshot()
        peak = refine_fallback(batch.peaks[symbol], snapshot,
                               self.config.provider.fallback_peak_price, now)
        peak = merge_with_quote(peak, snapshot, now)

        return StockDetail(
            quote=quote,
            chart_data=chart,
            peak_price=peak.peak_price,
            peak_date=peak.peak_date,
            confidence=peak.confidence,
        )

    def _threshold(self, threshold: Any) -> float:
        effective = coerce_threshold(threshold, self.config.threshold)
        if threshold is not None and effective != _as_float(threshold):
            self.logger.warning("Invalid near-peak threshold, using default",
                                requested=str(threshold), threshold=effective)
        return effective

    def _retry(self, fn: Callable[[], Any], operation: str, symbols: list[str]) -> Any:
        return call_with_retry(
            fn,
            max_attempts=self.config.batch.max_attempts,
            backoff_ms=self.config.batch.backoff_ms,
            sleep=self._sleep,
            context={"operation": operation, "symbol_count": len(symbols)},
        )

    def _fetch_quotes(self, symbols: list[str]) -> list[QuoteSnapshot]:
        """Single multi-symbol quote request; total failure is surfaced."""
        try:
            return self._retry(lambda: self.provider.get_quotes(symbols), "quotes", symbols)
        except (RecoverableError, DataQualityError) as e:
            self.logger.error("Quote request failed", symbols=symbols, error=str(e))
            raise ProviderUnavailableError(
                f"Quote provider unavailable: {e}", operation="quotes", symbols=symbols
            ) from e

    def _fetch_detailed_quote(self, symbol: str) -> Optional[DetailedQuote]:
        try:
            return self._retry(lambda: self.provider.get_detailed_quote(symbol),
                               "detailed_quote", [symbol])
        except (RecoverableError, DataQualityError) as e:
            self.logger.error("Detailed quote request failed", symbol=symbol, error=str(e))
            raise ProviderUnavailableError(
                f"Quote provider unavailable: {e}", operation="detailed_quote", symbols=[symbol]
            ) from e

    def _fetch_chart(self, symbol: str, chart_range: ChartRange) -> list[ChartPoint]:
        """Chart series; failures degrade to an empty chart."""
        try:
            return self._retry(lambda: self.provider.get_chart(symbol, chart_range),
                               "chart", [symbol])
        except (RecoverableError, DataQualityError) as e:
            self.logger.warning("Chart request failed, returning empty chart",
                                symbol=symbol, range=chart_range.value, error=str(e))
            return []


def _as_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
