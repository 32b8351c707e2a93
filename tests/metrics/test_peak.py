"""Tests for peak resolution, freshness override and fallbacks."""

import pytest
from datetime import datetime, timezone

from ath_app.data.models import PeakConfidence, PeakRecord, SymbolSeries
from ath_app.metrics.correction import CorrectedPoint
from ath_app.metrics.peak import (
    PeakResolver,
    fallback_peak,
    find_peak,
    merge_with_quote,
    refine_fallback,
)
from ath_app.providers.reference import REFERENCE_TABLE

from conftest import NOW, make_quote, make_series


class TestFindPeak:
    """Test maximum selection over corrected points."""

    def test_first_maximum_wins(self):
        """Ties keep the earliest date."""
        d1 = datetime(2024, 1, 1, tzinfo=timezone.utc)
        d2 = datetime(2024, 2, 1, tzinfo=timezone.utc)
        record = find_peak("TIE", [CorrectedPoint(d1, 50.0), CorrectedPoint(d2, 50.0)])
        assert record.peak_date == d1
        assert record.confidence is PeakConfidence.RESOLVED

    def test_no_candidates(self):
        """An empty candidate list has no peak."""
        assert find_peak("NONE", []) is None

    def test_non_positive_maximum(self):
        """A peak must be strictly positive."""
        d = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert find_peak("ZERO", [CorrectedPoint(d, 0.0)]) is None


class TestMergeWithQuote:
    """Test the freshness override."""

    def test_live_price_above_peak_becomes_peak(self):
        """264 against a recorded 260.10 makes 264 the peak, dated now."""
        record = PeakRecord("AAPL", 260.10, datetime(2024, 12, 26, tzinfo=timezone.utc))
        merged = merge_with_quote(record, make_quote("AAPL", 264.0), NOW)
        assert merged.peak_price == 264.0
        assert merged.peak_date == NOW

    def test_live_price_equal_to_peak(self):
        """Equality also re-dates the peak."""
        record = PeakRecord("EQ", 100.0, datetime(2024, 1, 1, tzinfo=timezone.utc))
        merged = merge_with_quote(record, make_quote("EQ", 100.0), NOW)
        assert merged.peak_date == NOW

    def test_live_price_below_peak_unchanged(self):
        """A lower live price leaves the record alone."""
        record = PeakRecord("LOW", 260.10, datetime(2024, 12, 26, tzinfo=timezone.utc))
        assert merge_with_quote(record, make_quote("LOW", 229.87), NOW) is record

    def test_no_quote(self):
        """Without a quote the record is returned as-is."""
        record = PeakRecord("NQ", 10.0, NOW)
        assert merge_with_quote(record, None, NOW) is record

    def test_confidence_preserved(self):
        """A fallback record stays a fallback after merging."""
        record = PeakRecord("FB", 10.0, NOW, PeakConfidence.FALLBACK)
        merged = merge_with_quote(record, make_quote("FB", 12.0), NOW)
        assert merged.confidence is PeakConfidence.FALLBACK


class TestFallbackPeak:
    """Test fallback construction precedence."""

    def test_reference_entry_first(self):
        """A symbol in the reference table uses its reference peak."""
        record = fallback_peak("aapl", current_price=1.0, now=NOW)
        assert record.peak_price == REFERENCE_TABLE["AAPL"].peak_price
        assert record.peak_date == REFERENCE_TABLE["AAPL"].peak_date
        assert record.is_fallback

    def test_current_price_second(self):
        """Unknown symbols use the live price when available."""
        record = fallback_peak("ZZZZ", current_price=42.0, now=NOW)
        assert record.peak_price == 42.0
        assert record.peak_date == NOW

    @pytest.mark.parametrize("price", [None, 0.0, -3.0])
    def test_default_last(self, price):
        """Without a usable live price the default is used."""
        record = fallback_peak("ZZZZ", current_price=price, default_price=100.0, now=NOW)
        assert record.peak_price == 100.0
        assert record.confidence is PeakConfidence.FALLBACK

    def test_refine_uses_quote_price(self):
        """A default-priced fallback is rebuilt from the live quote."""
        record = fallback_peak("ZZZZ", now=NOW)
        refined = refine_fallback(record, make_quote("ZZZZ", 37.5), now=NOW)
        assert refined.peak_price == 37.5
        assert refined.is_fallback

    def test_refine_ignores_resolved_and_reference(self):
        """Resolved records and reference fallbacks are not rebuilt."""
        resolved = PeakRecord("ZZZZ", 80.0, NOW)
        assert refine_fallback(resolved, make_quote("ZZZZ", 37.5), now=NOW) is resolved

        reference = fallback_peak("MSFT", now=NOW)
        assert refine_fallback(reference, make_quote("MSFT", 37.5), now=NOW) is reference


class TestPeakResolver:
    """Test end-to-end resolution for one series."""

    def test_resolves_maximum_adjusted_high(self):
        """The largest adjusted high becomes the peak."""
        series = make_series("AAA", [50.0, 120.0, 110.0])
        record = PeakResolver().resolve(series, now=NOW)
        assert record.peak_price == pytest.approx(120.0)
        assert record.peak_date == series.points[1].date
        assert record.confidence is PeakConfidence.RESOLVED

    def test_applies_dividend_adjustment(self):
        """Highs are scaled by each bar's adjustment factor."""
        series = make_series("DIV", [100.0, 90.0], adjustment=0.5)
        assert PeakResolver().resolve(series, now=NOW).peak_price == pytest.approx(50.0)

    def test_empty_series_falls_back(self):
        """An empty series never raises; it yields a fallback."""
        record = PeakResolver().resolve(SymbolSeries(symbol="NVDA"), now=NOW)
        assert record.is_fallback
        assert record.peak_price == REFERENCE_TABLE["NVDA"].peak_price

    def test_fallback_merged_with_quote(self):
        """A fallback below the live price is lifted to it."""
        record = PeakResolver().resolve(SymbolSeries(symbol="AAPL"),
                                        quote=make_quote("AAPL", 300.0), now=NOW)
        assert record.peak_price == 300.0
        assert record.is_fallback

    def test_quote_above_history_overrides(self):
        """Peak is never below the current price."""
        series = make_series("AAA", [50.0, 120.0])
        record = PeakResolver().resolve(series, quote=make_quote("AAA", 130.0), now=NOW)
        assert record.peak_price == 130.0
        assert record.peak_date == NOW

    def test_custom_default_price(self):
        """The resolver's default price is used for unknown symbols."""
        record = PeakResolver(default_price=55.0).fallback("ZZZZ", now=NOW)
        assert record.peak_price == 55.0
