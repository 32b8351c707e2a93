"""Tests for display formatting helpers."""

import pytest

from ath_app.utils.formatting import format_currency, format_percent


class TestFormatting:
    """Test currency and percentage formatting."""

    @pytest.mark.parametrize("value,currency,expected", [
        (229.87, "USD", "$229.87"),
        (1234567.891, "USD", "$1,234,567.89"),
        (10, "eur", "€10.00"),
        (-5.5, "GBP", "-£5.50"),
        (99.0, "CHF", "CHF 99.00"),
    ])
    def test_format_currency(self, value, currency, expected):
        """Prices render with symbol, grouping and two decimals."""
        assert format_currency(value, currency) == expected

    @pytest.mark.parametrize("value,expected", [
        (1.25, "+1.25%"),
        (0.0, "+0.00%"),
        (-3.4, "-3.40%"),
    ])
    def test_format_percent(self, value, expected):
        """Percentages always carry a sign."""
        assert format_percent(value) == expected
