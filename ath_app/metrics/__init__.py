"""Peak resolution, derived metrics and watchlist aggregation"""

from .aggregation import WatchlistSummary, count_by_asset_type, summarize
from .calculator import (
    build_derived_metrics,
    calculate_percent_down,
    calculate_percent_to_peak,
    classify_asset_type,
    is_near_peak,
)
from .correction import SeriesCorrector, calculate_baseline_ratio
from .peak import PeakResolver, fallback_peak, find_peak, merge_with_quote
from .sorting import SortDirection, SortField, sort_and_filter

__all__ = [
    "SeriesCorrector",
    "PeakResolver",
    "WatchlistSummary",
    "build_derived_metrics",
    "calculate_baseline_ratio",
    "calculate_percent_down",
    "calculate_percent_to_peak",
    "classify_asset_type",
    "count_by_asset_type",
    "fallback_peak",
    "find_peak",
    "is_near_peak",
    "merge_with_quote",
    "sort_and_filter",
    "summarize",
    "SortDirection",
    "SortField",
]
