"""
Utility functions module.

Common helpers for time handling and display formatting shared across
the system.

Time Semantics:
- All timestamps are aware UTC datetimes
- Peak dates come from provider bars, except when a live price sets a new
  peak, in which case the wall-clock time of the request is used
"""
