"""
Recovery strategy classifications for error handling.

These help categorize errors by their recovery characteristics and guide
the retry and fallback strategy.
"""


class RecoverableError(Exception):
    """A transient failure that kept failing after every allowed attempt."""

    def __init__(self, message: str, retry_count: int = 0,
                 max_retries: int = 2, **kwargs):
        super().__init__(message)
        self.retry_count = retry_count
        self.max_retries = max_retries
        self.recoverable = True
