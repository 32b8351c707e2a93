"""
Peak caching interface.

Only an in-memory implementation ships; nothing survives a process
restart.
"""

from .peak_cache import InMemoryPeakCache, PeakCache

__all__ = ["InMemoryPeakCache", "PeakCache"]
