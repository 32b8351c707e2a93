"""
Rate-limited retrieval of peak data for a watchlist.

Provider requests are paced through a bounded-concurrency pacer, retried
with linear backoff, and isolated per symbol behind fallback records.
"""

from .batch import BatchResult, BatchRetriever, normalize_symbols
from .pacing import RequestPacer
from .retry import call_with_retry

__all__ = [
    "BatchResult",
    "BatchRetriever",
    "RequestPacer",
    "call_with_retry",
    "normalize_symbols",
]
