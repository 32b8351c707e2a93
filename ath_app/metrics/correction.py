"""Split-inconsistency correction for weekly high prices"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..config.defaults import CorrectionParams
from ..data.models import PricePoint, SymbolSeries


@dataclass(frozen=True)
class CorrectedPoint:
    """Adjusted high for one weekly bar"""
    date: datetime
    adjusted_high: float
    split_artifact: bool = False   # True if the raw high was rebased by an inferred split factor


def calculate_baseline_ratio(points: tuple[PricePoint, ...], window: int = 10,
                             default: float = 1.02) -> float:
    """
    Calculate the normal high/close ratio from the most recent bars

    The provider's recent bars are assumed to be consistently adjusted, so
    their average intraday premium is the yardstick for older bars.

    Args:
        points: Chronological price points
        window: Number of trailing points to inspect
        default: Ratio used when no trailing point is usable

    Returns:
        Mean high/close ratio of usable trailing points
    """
    recent = points[-window:] if window > 0 else ()
    ratios = [
        p.high / p.close
        for p in recent
        if p.high is not None and p.close is not None and p.close > 0
    ]

    if not ratios:
        return default

    return sum(ratios) / len(ratios)


def correct_point(point: PricePoint, baseline_ratio: float,
                  split_multiplier: float = 2.0) -> Optional[CorrectedPoint]:
    """
    Correct one bar's high price

    If high/close exceeds split_multiplier * baseline, the high was most
    likely left unadjusted for a split while close was adjusted. The split
    factor is inferred as ratio / baseline and divided out. Otherwise the
    bar's own adjusted_close / close factor is applied to the high.

    Args:
        point: Price point to correct
        baseline_ratio: Normal high/close ratio for this instrument
        split_multiplier: Artifact detection multiplier

    Returns:
        CorrectedPoint, or None if the bar lacks a usable high/close/adjusted close
    """
    if not point.is_complete or point.close <= 0:
        return None

    ratio = point.high / point.close

    if ratio > baseline_ratio * split_multiplier:
        inferred_split_factor = ratio / baseline_ratio
        return CorrectedPoint(
            date=point.date,
            adjusted_high=point.high / inferred_split_factor,
            split_artifact=True,
        )

    return CorrectedPoint(
        date=point.date,
        adjusted_high=point.high * (point.adjusted_close / point.close),
    )


class SeriesCorrector:
    """Produces split-consistent adjusted highs for a weekly series"""

    def __init__(self, params: Optional[CorrectionParams] = None):
        self.params = params or CorrectionParams()

    def correct(self, series: SymbolSeries) -> list[CorrectedPoint]:
        """
        Correct every usable bar in a series

        Args:
            series: Chronological weekly history

        Returns:
            Corrected points in series order; bars with missing fields are omitted
        """
        if series.is_empty:
            return []

        baseline = calculate_baseline_ratio(
            series.points,
            window=self.params.recent_window,
            default=self.params.default_baseline_ratio,
        )

        corrected = []
        for point in series.points:
            result = correct_point(point, baseline, self.params.split_ratio_multiplier)
            if result is not None:
                corrected.append(result)

        return corrected
