"""
Batch peak retrieval for a watchlist.

Resolves one PeakRecord per symbol through a paced, retried provider call
and never lets one symbol's failure escape the batch.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, Optional

from ..config.defaults import BatchParams, CacheParams
from ..data.models import PeakRecord, SymbolSeries
from ..errors import DataQualityError, RecoverableError
from ..logging.config import get_batch_logger, log_fallback, log_peak_resolution
from ..metrics.peak import PeakResolver
from ..persistence.peak_cache import PeakCache
from ..providers.base import MarketDataProvider
from .pacing import RequestPacer
from .retry import call_with_retry

logger = get_batch_logger(__name__)


def normalize_symbols(symbols: Iterable[str]) -> list[str]:
    """
    Strip, upper-case and de-duplicate symbols, keeping first-seen order.

    Blank entries are dropped.
    """
    seen = set()
    normalized = []

    for symbol in symbols:
        if not isinstance(symbol, str):
            continue
        cleaned = symbol.strip().upper()
        if cleaned and cleaned not in seen:
            seen.add(cleaned)
            normalized.append(cleaned)

    return normalized


@dataclass
class BatchResult:
    """Peaks for every requested symbol plus provider bookkeeping."""
    peaks: dict[str, PeakRecord] = field(default_factory=dict)
    provider_failures: set[str] = field(default_factory=set)   # Symbols whose provider calls kept failing
    cache_hits: set[str] = field(default_factory=set)

    @property
    def all_failed(self) -> bool:
        """True if every symbol's provider call failed (and the batch was not empty)."""
        return bool(self.peaks) and self.provider_failures == set(self.peaks)

    @property
    def fallback_symbols(self) -> list[str]:
        return [s for s, record in self.peaks.items() if record.is_fallback]


class BatchRetriever:
    """Sequences per-symbol peak resolution against a rate-limited provider."""

    def __init__(
        self,
        provider: MarketDataProvider,
        resolver: Optional[PeakResolver] = None,
        params: Optional[BatchParams] = None,
        cache: Optional[PeakCache] = None,
        cache_params: Optional[CacheParams] = None,
        sleep: Callable[[float], Any] = time.sleep,
        pacer: Optional[RequestPacer] = None
    ) -> None:
        self.provider = provider
        self.resolver = resolver or PeakResolver()
        self.params = params or BatchParams()
        self.cache = cache
        self.cache_ttl = timedelta(days=(cache_params or CacheParams()).ttl_days)
        self._sleep = sleep
        self.pacer = pacer or RequestPacer(
            capacity=self.params.concurrency,
            pause_ms=self.params.pause_ms,
            sleep=sleep,
        )

    def retrieve(self, symbols: Iterable[str], now: Optional[datetime] = None) -> BatchResult:
        """
        Resolve peaks for a batch of symbols.

        Args:
            symbols: Symbols to resolve; normalized and de-duplicated first
            now: Timestamp used for fallback peaks without a reference date

        Returns:
            BatchResult covering every normalized symbol exactly once
        """
        ordered = normalize_symbols(symbols)
        result = BatchResult()

        if not ordered:
            return result

        logger.info("Starting peak batch", symbol_count=len(ordered),
                    concurrency=self.pacer.capacity)

        if self.pacer.capacity == 1:
            outcomes = [self._resolve_symbol(symbol, now) for symbol in ordered]
        else:
            with ThreadPoolExecutor(max_workers=self.pacer.capacity) as pool:
                outcomes = list(pool.map(lambda s: self._resolve_symbol(s, now), ordered))

        for symbol, (record, provider_failed, cached) in zip(ordered, outcomes):
            result.peaks[symbol] = record
            if provider_failed:
                result.provider_failures.add(symbol)
            if cached:
                result.cache_hits.add(symbol)

        logger.info(
            "Peak batch complete",
            symbol_count=len(ordered),
            fallbacks=len(result.fallback_symbols),
            provider_failures=len(result.provider_failures),
            cache_hits=len(result.cache_hits),
        )
        return result

    def retrieve_peaks(self, symbols: Iterable[str],
                       now: Optional[datetime] = None) -> dict[str, PeakRecord]:
        """Symbol -> PeakRecord map for a batch."""
        return self.retrieve(symbols, now).peaks

    def _resolve_symbol(self, symbol: str,
                        now: Optional[datetime]) -> tuple[PeakRecord, bool, bool]:
        """Resolve one symbol. Returns (record, provider_failed, from_cache)."""
        if self.cache is not None:
            cached = self.cache.get(symbol)
            if cached is not None:
                logger.debug("Peak cache hit", symbol=symbol)
                return cached, False, True

        try:
            series = self._fetch_history(symbol)

        except RecoverableError as e:
            log_fallback(logger, symbol, reason="provider_error",
                         attempts=e.retry_count, context={"error": str(e.__cause__ or e)})
            return self.resolver.fallback(symbol, now=now), True, False

        except DataQualityError as e:
            log_fallback(logger, symbol, reason="malformed_history", context={"error": str(e)})
            return self.resolver.fallback(symbol, now=now), False, False

        try:
            record = self.resolver.resolve(series, now=now)
        except Exception as e:
            logger.error("Peak resolution failed", symbol=symbol, error=str(e))
            return self.resolver.fallback(symbol, now=now), False, False

        if record.is_fallback:
            log_fallback(logger, symbol, reason="no_usable_history",
                         context={"points": len(series)})
            return record, False, False

        log_peak_resolution(logger, symbol, record.peak_price,
                            record.peak_date.isoformat(), record.confidence.value)

        if self.cache is not None:
            self.cache.put(symbol, record, self.cache_ttl)

        return record, False, False

    def _fetch_history(self, symbol: str) -> SymbolSeries:
        """Weekly history through the pacer, retried with linear backoff."""
        return call_with_retry(
            lambda: self.pacer.run(lambda: self.provider.get_weekly_history(symbol)),
            max_attempts=self.params.max_attempts,
            backoff_ms=self.params.backoff_ms,
            sleep=self._sleep,
            context={"symbol": symbol, "operation": "weekly_history"},
        )
