"""
Logging configuration and utilities for the ATH tracking system.
"""
from .config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
