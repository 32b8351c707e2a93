"""
Static reference values used when the provider cannot supply a peak.

Values are best-effort snapshots, not live data. They only keep a batch
renderable when a symbol's history is unavailable.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class ReferenceEntry:
    """Reference price and peak for one symbol."""
    name: str
    price: float
    peak_price: float
    peak_date: datetime


def _utc(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


REFERENCE_TABLE: dict[str, ReferenceEntry] = {
    "VOO": ReferenceEntry("Vanguard S&P 500 ETF", 548.23, 563.95, _utc(2025, 1, 10)),
    "QQQ": ReferenceEntry("Invesco QQQ Trust", 525.67, 542.81, _utc(2024, 12, 16)),
    "XLP": ReferenceEntry("Consumer Staples Select Sector", 81.45, 83.22, _utc(2025, 1, 8)),
    "XLK": ReferenceEntry("Technology Select Sector", 228.90, 240.76, _utc(2024, 12, 16)),
    "XLY": ReferenceEntry("Consumer Discretionary Select", 212.34, 225.48, _utc(2024, 11, 29)),
    "AAPL": ReferenceEntry("Apple Inc.", 229.87, 260.10, _utc(2024, 12, 26)),
    "NVDA": ReferenceEntry("NVIDIA Corporation", 136.24, 152.89, _utc(2025, 1, 6)),
    "MSFT": ReferenceEntry("Microsoft Corporation", 425.22, 468.35, _utc(2024, 7, 5)),
}


def get_reference(symbol: str) -> Optional[ReferenceEntry]:
    """Look up the reference entry for a symbol (case-insensitive)."""
    return REFERENCE_TABLE.get(symbol.strip().upper())
