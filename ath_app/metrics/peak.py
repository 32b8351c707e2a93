"""All-time-high resolution from corrected weekly history"""

from datetime import datetime
from typing import Optional

import structlog

from ..config.defaults import CorrectionParams
from ..data.models import PeakConfidence, PeakRecord, QuoteSnapshot, SymbolSeries
from ..providers.reference import get_reference
from ..utils.time import now_utc
from .correction import CorrectedPoint, SeriesCorrector

logger = structlog.get_logger(__name__)

DEFAULT_FALLBACK_PEAK = 100.0


def find_peak(symbol: str, corrected: list[CorrectedPoint]) -> Optional[PeakRecord]:
    """
    Find the maximum adjusted high

    Args:
        symbol: Instrument symbol
        corrected: Corrected points from SeriesCorrector

    Returns:
        Resolved PeakRecord, or None if there is no positive candidate
    """
    best: Optional[CorrectedPoint] = None
    for point in corrected:
        if best is None or point.adjusted_high > best.adjusted_high:
            best = point

    if best is None or best.adjusted_high <= 0:
        return None

    return PeakRecord(
        symbol=symbol,
        peak_price=best.adjusted_high,
        peak_date=best.date,
        confidence=PeakConfidence.RESOLVED,
    )


def merge_with_quote(record: PeakRecord, quote: Optional[QuoteSnapshot],
                     now: Optional[datetime] = None) -> PeakRecord:
    """
    Apply the freshness override

    If the live price is at or above the recorded peak, the live price is the
    new peak, dated now. Confidence is kept as-is.

    Args:
        record: Peak from history or fallback
        quote: Live quote for the same symbol, if any
        now: Timestamp for a new peak, defaults to current UTC time

    Returns:
        PeakRecord whose peak_price is never below the live price
    """
    if quote is None or quote.current_price < record.peak_price:
        return record

    return PeakRecord(
        symbol=record.symbol,
        peak_price=quote.current_price,
        peak_date=now or now_utc(),
        confidence=record.confidence,
    )


def fallback_peak(symbol: str, current_price: Optional[float] = None,
                  default_price: float = DEFAULT_FALLBACK_PEAK,
                  now: Optional[datetime] = None) -> PeakRecord:
    """
    Build a well-formed fallback peak

    Precedence: static reference entry, then the live price, then default_price.
    """
    reference = get_reference(symbol)
    if reference is not None:
        return PeakRecord(
            symbol=symbol,
            peak_price=reference.peak_price,
            peak_date=reference.peak_date,
            confidence=PeakConfidence.FALLBACK,
        )

    if current_price is not None and current_price > 0:
        price = current_price
    else:
        price = default_price

    return PeakRecord(
        symbol=symbol,
        peak_price=price,
        peak_date=now or now_utc(),
        confidence=PeakConfidence.FALLBACK,
    )


def refine_fallback(record: PeakRecord, quote: Optional[QuoteSnapshot],
                    default_price: float = DEFAULT_FALLBACK_PEAK,
                    now: Optional[datetime] = None) -> PeakRecord:
    """
    Rebuild a fallback made without a live price once the quote is known

    Batch fallbacks are built before quotes arrive, so a symbol with no
    reference entry carries default_price. With the quote in hand the live
    price is a better stand-in.
    """
    if not record.is_fallback or quote is None or get_reference(record.symbol) is not None:
        return record

    return fallback_peak(record.symbol, quote.current_price, default_price, now)


class PeakResolver:
    """Resolves one PeakRecord per symbol from its weekly history"""

    def __init__(self, params: Optional[CorrectionParams] = None,
                 default_price: float = DEFAULT_FALLBACK_PEAK):
        self.corrector = SeriesCorrector(params)
        self.default_price = default_price

    def resolve(self, series: SymbolSeries, quote: Optional[QuoteSnapshot] = None,
                now: Optional[datetime] = None) -> PeakRecord:
        """
        Resolve the peak for one series

        Never raises: an empty or unusable series yields a fallback record.

        Args:
            series: Weekly history for one symbol
            quote: Optional live quote for the freshness override
            now: Timestamp used for new or fallback peaks

        Returns:
            PeakRecord for series.symbol
        """
        corrected = self.corrector.correct(series)
        record = find_peak(series.symbol, corrected)

        if record is None:
            logger.info(
                "No usable history, using fallback peak",
                symbol=series.symbol,
                points=len(series),
            )
            current_price = quote.current_price if quote is not None else None
            return merge_with_quote(self.fallback(series.symbol, current_price, now), quote, now)

        artifacts = sum(1 for p in corrected if p.split_artifact)
        if artifacts:
            logger.debug(
                "Corrected split-inconsistent highs",
                symbol=series.symbol,
                artifacts=artifacts,
            )

        return merge_with_quote(record, quote, now)

    def fallback(self, symbol: str, current_price: Optional[float] = None,
                 now: Optional[datetime] = None) -> PeakRecord:
        """Fallback record using this resolver's default price."""
        return fallback_peak(symbol, current_price, self.default_price, now)
