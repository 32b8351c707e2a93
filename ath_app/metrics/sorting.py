"""Watchlist sorting and filtering"""

from enum import Enum
from typing import Iterable, Optional

from ..data.models import AssetType, DerivedMetrics


class SortField(Enum):
    """Sortable DerivedMetrics attributes"""
    SYMBOL = "symbol"
    NAME = "name"
    CURRENT_PRICE = "current_price"
    PEAK_PRICE = "peak_price"
    PERCENT_DOWN = "percent_down"
    PERCENT_TO_PEAK = "percent_to_peak"
    DAILY_CHANGE_PERCENT = "daily_change_percent"
    DIVIDEND_YIELD = "dividend_yield"
    EXPENSE_RATIO = "expense_ratio"


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"


STRING_FIELDS = frozenset({SortField.SYMBOL, SortField.NAME})

DEFAULT_SORT_FIELD = SortField.PERCENT_DOWN
DEFAULT_SORT_DIRECTION = SortDirection.ASC


def toggle_direction(current_field: SortField, current_direction: SortDirection,
                     clicked_field: SortField) -> SortDirection:
    """
    Direction after the caller re-selects a sort field

    Selecting the active ascending field flips to descending; anything else
    starts ascending.
    """
    if clicked_field == current_field and current_direction is SortDirection.ASC:
        return SortDirection.DESC
    return SortDirection.ASC


def matches_query(item: DerivedMetrics, text_query: Optional[str]) -> bool:
    """Case-insensitive substring match on symbol or name."""
    if not text_query:
        return True

    query = text_query.casefold()
    return query in item.symbol.casefold() or query in item.name.casefold()


def matches_type(item: DerivedMetrics, type_filter: Optional[Iterable[AssetType]]) -> bool:
    """Asset-type set membership; an empty filter matches everything."""
    if not type_filter:
        return True
    return item.asset_type in set(type_filter)


def sort_metrics(items: Iterable[DerivedMetrics], sort_field: SortField = DEFAULT_SORT_FIELD,
                 direction: SortDirection = DEFAULT_SORT_DIRECTION) -> list[DerivedMetrics]:
    """
    Stable sort by one field

    Strings compare case-insensitively, numbers numerically. Missing (None)
    values always sort last, whatever the direction.
    """
    attribute = sort_field.value
    present = []
    missing = []

    for item in items:
        if getattr(item, attribute) is None:
            missing.append(item)
        else:
            present.append(item)

    if sort_field in STRING_FIELDS:
        def key(item):
            return getattr(item, attribute).casefold()
    else:
        def key(item):
            return getattr(item, attribute)

    ordered = sorted(present, key=key, reverse=direction is SortDirection.DESC)
    return ordered + missing


def sort_and_filter(collection: Iterable[DerivedMetrics],
                    sort_field: SortField = DEFAULT_SORT_FIELD,
                    direction: SortDirection = DEFAULT_SORT_DIRECTION,
                    text_query: Optional[str] = None,
                    type_filter: Optional[Iterable[AssetType]] = None) -> list[DerivedMetrics]:
    """
    Filter by asset type and text query, then sort

    Args:
        collection: Derived metrics to display
        sort_field: Field to order by
        direction: Ascending or descending
        text_query: Free-text search on symbol or name
        type_filter: Asset types to keep; empty or None keeps all

    Returns:
        New list; the input is not modified
    """
    types = set(type_filter) if type_filter else set()

    filtered = [
        item for item in collection
        if matches_type(item, types) and matches_query(item, text_query)
    ]

    return sort_metrics(filtered, sort_field, direction)
