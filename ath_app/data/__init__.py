"""
Provider data models and boundary parsing.

Handles conversion of raw provider history and quote payloads into the
canonical, immutable models consumed by peak resolution and metrics.
"""
