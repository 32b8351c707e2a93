"""Distance-from-peak metrics and asset classification"""

import math
import re
from typing import Optional

from ..data.models import AssetType, DerivedMetrics, PeakRecord, QuoteSnapshot

CRYPTO_SYMBOLS = frozenset({
    "BTC-USD", "ETH-USD", "SOL-USD", "XRP-USD", "DOGE-USD",
    "ADA-USD", "BNB-USD", "LTC-USD", "DOT-USD", "AVAX-USD",
})

# BASE-QUOTE where QUOTE is a currency and BASE has no further delimiter
CRYPTO_PAIR_PATTERN = re.compile(r"^[A-Z0-9]+-(USD|USDT|USDC|EUR|GBP|JPY|CAD|AUD|BTC|ETH)$")

COMMODITY_SYMBOLS = frozenset({
    "GC=F",   # Gold
    "SI=F",   # Silver
    "CL=F",   # Crude Oil
    "BZ=F",   # Brent Crude
    "NG=F",   # Natural Gas
    "HG=F",   # Copper
    "PL=F",   # Platinum
    "PA=F",   # Palladium
})

FUTURES_PATTERN = re.compile(r"^[A-Z0-9]+=F$")


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def calculate_percent_down(current_price: float, peak_price: float) -> float:
    """
    Calculate how far the current price sits below the peak

    percent_down = (peak - current) / peak * 100

    Returns:
        Percentage below peak, 0.0 if the peak is not positive
    """
    if not peak_price > 0:
        return 0.0

    return _finite_or_zero((peak_price - current_price) / peak_price * 100.0)


def calculate_percent_to_peak(current_price: float, peak_price: float) -> float:
    """
    Calculate the gain needed for the current price to reach the peak

    percent_to_peak = (peak - current) / current * 100

    Returns:
        Required gain in percent, 0.0 if the current price is not positive
    """
    if not current_price > 0:
        return 0.0

    return _finite_or_zero((peak_price - current_price) / current_price * 100.0)


def is_near_peak(percent_down: float, threshold: float) -> bool:
    """True if 0 <= percent_down <= threshold."""
    return 0.0 <= percent_down <= threshold


def classify_asset_type(symbol: str, expense_ratio: Optional[float] = None) -> AssetType:
    """
    Classify an instrument

    Precedence: crypto pattern, then commodity/futures pattern, then
    ETF if an expense ratio is present, else stock.
    """
    normalized = symbol.strip().upper()

    if normalized in CRYPTO_SYMBOLS or CRYPTO_PAIR_PATTERN.match(normalized):
        return AssetType.CRYPTO

    if normalized in COMMODITY_SYMBOLS or FUTURES_PATTERN.match(normalized):
        return AssetType.MATERIALS

    if expense_ratio is not None:
        return AssetType.ETF

    return AssetType.STOCK


def build_derived_metrics(quote: QuoteSnapshot, peak: PeakRecord,
                          threshold: float) -> DerivedMetrics:
    """
    Combine a live quote with a resolved peak

    Pure and deterministic. The peak is used as given; callers merge it with
    the quote first so that percent_down is never negative.

    Args:
        quote: Live quote snapshot
        peak: Peak record for the same symbol
        threshold: Near-peak cutoff in percent

    Returns:
        DerivedMetrics for the instrument
    """
    percent_down = calculate_percent_down(quote.current_price, peak.peak_price)
    percent_to_peak = calculate_percent_to_peak(quote.current_price, peak.peak_price)

    return DerivedMetrics(
        symbol=quote.symbol,
        name=quote.name or quote.symbol,
        current_price=quote.current_price,
        peak_price=peak.peak_price,
        peak_date=peak.peak_date,
        percent_down=percent_down,
        percent_to_peak=percent_to_peak,
        is_near_peak=is_near_peak(percent_down, threshold),
        asset_type=classify_asset_type(quote.symbol, quote.expense_ratio),
        currency=quote.currency or "USD",
        daily_change_percent=quote.daily_change_percent,
        dividend_yield=quote.dividend_yield,
        expense_ratio=quote.expense_ratio,
        confidence=peak.confidence,
    )
