"""Watchlist summary statistics"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from ..data.models import AssetType, DerivedMetrics


@dataclass(frozen=True)
class WatchlistSummary:
    """Cross-instrument statistics for a (possibly filtered) watchlist"""
    deepest_discount: DerivedMetrics
    nearest_peak: Optional[DerivedMetrics]
    at_peak_count: int
    top_performer: Optional[DerivedMetrics]
    worst_performer: Optional[DerivedMetrics]
    average_percent_down: float
    total_count: int

    def to_dict(self) -> dict[str, Any]:
        def _dump(item: Optional[DerivedMetrics]) -> Optional[dict[str, Any]]:
            return item.to_dict() if item is not None else None

        return {
            "deepest_discount": _dump(self.deepest_discount),
            "nearest_peak": _dump(self.nearest_peak),
            "at_peak_count": self.at_peak_count,
            "top_performer": _dump(self.top_performer),
            "worst_performer": _dump(self.worst_performer),
            "average_percent_down": self.average_percent_down,
            "total_count": self.total_count,
        }


def summarize(metrics: Iterable[DerivedMetrics]) -> Optional[WatchlistSummary]:
    """
    Summarize a collection of derived metrics

    Ties are resolved in favour of the first element encountered.

    Args:
        metrics: Derived metrics, in display order

    Returns:
        WatchlistSummary, or None for an empty collection
    """
    items = list(metrics)
    if not items:
        return None

    deepest = items[0]
    nearest: Optional[DerivedMetrics] = None
    top: Optional[DerivedMetrics] = None
    worst: Optional[DerivedMetrics] = None
    at_peak = 0
    total_down = 0.0

    for item in items:
        total_down += item.percent_down

        if item.percent_down > deepest.percent_down:
            deepest = item

        # Instruments exactly at their peak are counted below, not ranked here
        if item.percent_down > 0 and (nearest is None or item.percent_down < nearest.percent_down):
            nearest = item

        if item.is_near_peak or item.percent_down == 0:
            at_peak += 1

        change = item.daily_change_percent
        if change is not None:
            if top is None or change > top.daily_change_percent:
                top = item
            if worst is None or change < worst.daily_change_percent:
                worst = item

    return WatchlistSummary(
        deepest_discount=deepest,
        nearest_peak=nearest,
        at_peak_count=at_peak,
        top_performer=top,
        worst_performer=worst,
        average_percent_down=total_down / len(items),
        total_count=len(items),
    )


def count_by_asset_type(metrics: Iterable[DerivedMetrics]) -> dict[str, int]:
    """
    Count instruments per asset type for filter controls

    Returns:
        Mapping with an "all" total and one entry per asset type value
    """
    counts = {"all": 0}
    counts.update({asset_type.value: 0 for asset_type in AssetType})

    for item in metrics:
        counts["all"] += 1
        counts[item.asset_type.value] += 1

    return counts
