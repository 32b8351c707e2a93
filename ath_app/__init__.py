"""
ATH App - All-Time-High Distance Tracker

Tracks a watchlist of instruments and reports how far each one trades below
its split-adjusted all-time high. Resolves peak prices from noisy weekly
provider history, paces provider requests, and aggregates watchlist
statistics.
"""

__version__ = "0.1.0"
__author__ = "ATH App Team"
