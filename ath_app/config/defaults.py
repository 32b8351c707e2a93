"""Default configuration parameters for peak resolution and watchlist retrieval."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CorrectionParams:
    """Split-inconsistency correction parameters."""
    recent_window: int = 10                  # Points used for the baseline high/close ratio
    default_baseline_ratio: float = 1.02     # Baseline when no recent point is usable
    split_ratio_multiplier: float = 2.0      # Ratio above baseline * this is an artifact


@dataclass(frozen=True)
class BatchParams:
    """Provider pacing and retry parameters."""
    pause_ms: int = 50                       # Pause after each provider request
    max_attempts: int = 2                    # Provider attempts per symbol
    backoff_ms: int = 500                    # Linear backoff unit between attempts
    concurrency: int = 1                     # Simultaneous provider requests


@dataclass(frozen=True)
class ThresholdParams:
    """Near-peak badge threshold, in percent below peak."""
    default: float = 1.0
    minimum: float = 0.0
    maximum: float = 10.0


@dataclass(frozen=True)
class CacheParams:
    """Peak cache parameters."""
    ttl_days: int = 7


@dataclass(frozen=True)
class ProviderParams:
    """Market data provider parameters."""
    history_start: str = "1970-01-01"
    history_interval: str = "1wk"
    default_currency: str = "USD"
    fallback_peak_price: float = 100.0


@dataclass(frozen=True)
class ChartParams:
    """Detail chart parameters."""
    default_range: str = "1M"


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration."""
    correction: CorrectionParams
    batch: BatchParams
    threshold: ThresholdParams
    cache: CacheParams
    provider: ProviderParams
    chart: ChartParams


DEFAULT_SYMBOLS = (
    "VOO",
    "QQQ",
    "XLP",
    "XLK",
    "XLY",
    "AAPL",
    "NVDA",
    "MSFT",
    "BTC-USD",
    "ETH-USD",
    "GC=F",   # Gold
    "SI=F",   # Silver
    "CL=F",   # Crude Oil
)


def get_default_config() -> AppConfig:
    """Get the default configuration instance."""
    return AppConfig(
        correction=CorrectionParams(),
        batch=BatchParams(),
        threshold=ThresholdParams(),
        cache=CacheParams(),
        provider=ProviderParams(),
        chart=ChartParams(),
    )
