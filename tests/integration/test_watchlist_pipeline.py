"""
Integration tests for the full watchlist pipeline.

Exercises provider adapter -> parsers -> correction -> peak resolution ->
batch retrieval -> metrics with only the yfinance module patched.
"""

import math
import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock, PropertyMock, patch

import pandas as pd

from ath_app.config.defaults import get_default_config
from ath_app.data.models import PeakConfidence
from ath_app.engine import WatchlistEngine
from ath_app.errors import ProviderUnavailableError


def _weekly_frame(highs, spike_at=None) -> pd.DataFrame:
    index = pd.date_range("2022-01-03", periods=len(highs), freq="7D", tz="UTC")
    closes = [h / 1.02 for h in highs]
    raw_highs = [h * 4 if i == spike_at else h for i, h in enumerate(highs)]
    return pd.DataFrame({"High": raw_highs, "Close": closes, "Adj Close": closes}, index=index)


def _ticker(info, history=None, history_error=None):
    ticker = MagicMock()
    ticker.info = info
    ticker.fast_info = SimpleNamespace(last_price=None)
    if history_error is not None:
        ticker.history.side_effect = history_error
    else:
        ticker.history.return_value = history if history is not None else pd.DataFrame()
    return ticker


@pytest.fixture
def yahoo():
    """Patched yfinance with a split stock, an ETF, a failing history and a dead symbol."""
    tickers = {
        "SPLT": _ticker({"symbol": "SPLT", "shortName": "Split Corp", "regularMarketPrice": 45.0,
                         "regularMarketChangePercent": 0.4},
                        _weekly_frame([40.0 + i for i in range(15)], spike_at=3)),
        "FUND": _ticker({"symbol": "FUND", "shortName": "Index Fund", "regularMarketPrice": 99.5,
                         "regularMarketChangePercent": -0.2, "netExpenseRatio": 0.05},
                        _weekly_frame([90.0, 95.0, 100.0, 98.0])),
        "FAIL": _ticker({"symbol": "FAIL", "shortName": "Flaky Co", "regularMarketPrice": 12.0},
                        history_error=ConnectionError("timeout")),
    }
    down = MagicMock()
    down.history.side_effect = ConnectionError("timeout")
    type(down).info = PropertyMock(side_effect=ConnectionError("timeout"))
    tickers["DOWN"] = down

    with patch("ath_app.providers.yfinance_provider.yf") as mock_yf:
        mock_yf.Ticker.side_effect = lambda symbol: tickers[symbol]
        mock_yf.Tickers.side_effect = lambda joined: SimpleNamespace(
            tickers={s: tickers[s] for s in joined.split()}
        )
        yield tickers


def _engine(no_sleep) -> WatchlistEngine:
    return WatchlistEngine(config=get_default_config(), sleep=no_sleep)


class TestWatchlistPipeline:
    """End-to-end watchlist behavior."""

    def test_partial_failure_batch(self, yahoo, no_sleep):
        """Every symbol is present; the failing one is a fallback."""
        metrics = _engine(no_sleep).get_watchlist_metrics(["SPLT", "FUND", "FAIL"], threshold=1.0)

        by_symbol = {m.symbol: m for m in metrics}
        assert list(by_symbol) == ["SPLT", "FUND", "FAIL"]

        # 4:1 unadjusted spike is rebased, the real peak is the last week's 54
        assert by_symbol["SPLT"].peak_price == pytest.approx(54.0)
        assert by_symbol["SPLT"].percent_down == pytest.approx(9 / 54 * 100)

        assert by_symbol["FUND"].peak_price == pytest.approx(100.0)
        assert by_symbol["FUND"].is_near_peak is True
        assert by_symbol["FUND"].asset_type.value == "etf"

        assert by_symbol["FAIL"].confidence is PeakConfidence.FALLBACK
        assert yahoo["FAIL"].history.call_count == 2

    def test_summary_over_pipeline(self, yahoo, no_sleep):
        """Summary statistics are computed from pipeline output."""
        engine = _engine(no_sleep)
        summary = engine.get_summary(engine.get_watchlist_metrics(["SPLT", "FUND"]))

        assert summary.deepest_discount.symbol == "SPLT"
        assert summary.nearest_peak.symbol == "FUND"
        assert summary.top_performer.symbol == "SPLT"

    def test_history_outage_with_live_quote(self, yahoo, no_sleep):
        """A lone symbol whose history fails still gets a fallback row."""
        [row] = _engine(no_sleep).get_watchlist_metrics(["FAIL"])

        assert row.confidence is PeakConfidence.FALLBACK
        assert row.peak_price == pytest.approx(12.0)
        assert row.percent_down == 0

    def test_total_outage(self, yahoo, no_sleep):
        """Failing quotes and histories surface as an explicit error."""
        with pytest.raises(ProviderUnavailableError) as exc_info:
            _engine(no_sleep).get_watchlist_metrics(["DOWN"])

        assert exc_info.value.operation == "quotes"

    def test_requests_share_one_pacer(self, yahoo, no_sleep):
        """Quote and history requests are paced together."""
        engine = _engine(no_sleep)
        engine.get_watchlist_metrics(["SPLT", "FUND"])

        # two quote requests plus two history requests
        assert engine.pacer.request_count == 4

    def test_detail_payload(self, yahoo, no_sleep):
        """The detail payload serializes with the resolved peak."""
        detail = _engine(no_sleep).get_stock_detail("FUND", "5Y").to_dict()

        assert detail["quote"]["symbol"] == "FUND"
        assert detail["peak_price"] == pytest.approx(100.0)
        assert detail["confidence"] == "resolved"
        assert all(not math.isnan(p["price"]) for p in detail["chart_data"])
