"""Tests for logging helpers used by batch retrieval."""

from unittest.mock import Mock, patch

from ath_app.logging.config import (
    configure_logging,
    get_batch_logger,
    log_fallback,
    log_peak_resolution,
)


class TestLoggingHelpers:
    """Test standardized log entries."""

    def test_peak_resolution_entry(self):
        """Resolved peaks are logged at info with their fields bound."""
        logger = Mock()
        bound = logger.bind.return_value

        log_peak_resolution(logger, "AAPL", 260.1, "2024-12-26T00:00:00+00:00", "resolved")

        logger.bind.assert_called_once_with(
            symbol="AAPL",
            peak_price=260.1,
            peak_date="2024-12-26T00:00:00+00:00",
            confidence="resolved",
        )
        bound.info.assert_called_once_with("Peak resolved")

    def test_fallback_entry_with_context(self):
        """Fallbacks are logged at warning with optional context."""
        logger = Mock()
        bound = logger.bind.return_value
        with_context = bound.bind.return_value

        log_fallback(logger, "B", reason="provider_error", attempts=2,
                     context={"error": "timeout"})

        logger.bind.assert_called_once_with(symbol="B", reason="provider_error", attempts=2)
        bound.bind.assert_called_once_with(context={"error": "timeout"})
        with_context.warning.assert_called_once_with("Using fallback peak")

    def test_batch_logger_binding(self):
        """The batch logger carries its subsystem tag."""
        with patch("ath_app.logging.config.get_logger") as mock_get:
            get_batch_logger("ath_app.retrieval.batch")

        mock_get.return_value.bind.assert_called_once_with(
            subsystem="batch_retrieval", audit_trail=True
        )

    def test_configure_logging_json(self):
        """JSON configuration installs a JSON renderer last."""
        with patch("ath_app.logging.config.structlog.configure") as mock_configure:
            configure_logging(level="DEBUG", format_json=True, include_caller=True)

        processors = mock_configure.call_args.kwargs["processors"]
        assert type(processors[-1]).__name__ == "JSONRenderer"

    def test_provider_loggers_quieted(self):
        """Market data library loggers get their own level."""
        import logging

        with patch("ath_app.logging.config.structlog.configure"):
            configure_logging(level="DEBUG", provider_level="ERROR")

        assert logging.getLogger("yfinance").level == logging.ERROR
        assert logging.getLogger("urllib3").level == logging.ERROR
