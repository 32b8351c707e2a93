"""
Infrastructure adapter: yfinance -> MarketDataProvider.

All yfinance-specific details (Ticker.info, fast_info, history()) are
confined here; payloads are validated by ath_app.data.parsers before they
leave the adapter.
"""

from typing import Any, Optional

import pandas as pd
import structlog
import yfinance as yf

from ..config.defaults import ProviderParams
from ..data.models import ChartPoint, ChartRange, DetailedQuote, QuoteSnapshot, SymbolSeries
from ..data.parsers import (
    parse_chart_points,
    parse_detailed_quote,
    parse_quote,
    parse_symbol_series,
)
from ..errors import DataQualityError, MissingDataError
from ..retrieval.pacing import RequestPacer
from ..utils.time import now_utc, range_start
from .base import MarketDataProvider

logger = structlog.get_logger(__name__)

CHART_INTERVALS = {
    ChartRange.ONE_DAY: "5m",
    ChartRange.ONE_WEEK: "1d",
    ChartRange.ONE_MONTH: "1d",
    ChartRange.ONE_YEAR: "1d",
    ChartRange.FIVE_YEARS: "1wk",
}


def _frame_rows(frame: pd.DataFrame, columns: dict[str, str]) -> list[dict[str, Any]]:
    """Convert a history DataFrame into plain rows keyed by our field names."""
    rows = []
    for index, row in frame.iterrows():
        record = {"date": index.to_pydatetime() if hasattr(index, "to_pydatetime") else index}
        for source, target in columns.items():
            value = row.get(source)
            record[target] = None if pd.isna(value) else value
        rows.append(record)
    return rows


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and pd.isna(value))


class YFinanceProvider(MarketDataProvider):
    """
    Fetches history and quotes from Yahoo Finance via the yfinance library.

    Quote and chart requests go through `pacer`. Weekly history is paced by
    the caller (BatchRetriever), so sharing one pacer between the two keeps
    every request to Yahoo under the same limit.
    """

    def __init__(self, params: Optional[ProviderParams] = None,
                 pacer: Optional[RequestPacer] = None):
        self.params = params or ProviderParams()
        self.pacer = pacer or RequestPacer()

    def get_weekly_history(self, symbol: str) -> SymbolSeries:
        ticker = yf.Ticker(symbol)
        history = ticker.history(
            start=self.params.history_start,
            interval=self.params.history_interval,
            auto_adjust=False,
            actions=False,
        )

        if history is None or history.empty:
            logger.info("Provider returned no history", symbol=symbol)
            return SymbolSeries(symbol=symbol)

        rows = _frame_rows(history, {"High": "high", "Close": "close", "Adj Close": "adjclose"})
        return parse_symbol_series(symbol, rows)

    def get_quotes(self, symbols: list[str]) -> list[QuoteSnapshot]:
        if not symbols:
            return []

        tickers = yf.Tickers(" ".join(symbols))
        quotes = []
        last_error: Optional[Exception] = None

        for symbol in symbols:
            try:
                ticker = tickers.tickers[symbol]
                payload = self.pacer.run(lambda: self._quote_payload(ticker, symbol))
            except Exception as e:
                last_error = e
                logger.warning("Quote request failed", symbol=symbol, error=str(e))
                continue

            if payload is None:
                logger.warning("Provider returned no quote", symbol=symbol)
                continue

            try:
                quotes.append(parse_quote(payload, self.params.default_currency))
            except DataQualityError as e:
                logger.warning("Discarding unusable quote", symbol=symbol, error=str(e))

        if not quotes and last_error is not None:
            raise last_error

        return quotes

    def get_detailed_quote(self, symbol: str) -> Optional[DetailedQuote]:
        ticker = yf.Ticker(symbol)
        payload = self.pacer.run(lambda: self._quote_payload(ticker, symbol))
        if payload is None:
            return None

        try:
            return parse_detailed_quote(payload, self.params.default_currency)
        except MissingDataError as e:
            logger.warning("Discarding quote without a price", symbol=symbol, error=str(e))
            return None

    def get_chart(self, symbol: str, chart_range: ChartRange) -> list[ChartPoint]:
        now = now_utc()
        ticker = yf.Ticker(symbol)
        history = self.pacer.run(lambda: ticker.history(
            start=range_start(chart_range, now),
            end=now,
            interval=CHART_INTERVALS[chart_range],
        ))

        if history is None or history.empty:
            return []

        return parse_chart_points(_frame_rows(history, {"Close": "close"}))

    def _quote_payload(self, ticker: Any, symbol: str) -> Optional[dict[str, Any]]:
        """Quote fields from Ticker.info, topped up from fast_info when missing."""
        info = dict(ticker.info or {})

        if _missing(info.get("regularMarketPrice")):
            fast_info = ticker.fast_info
            try:
                last_price = fast_info.last_price
            except (KeyError, AttributeError, TypeError):
                last_price = None
            if _missing(last_price):
                return None
            info["regularMarketPrice"] = last_price

        info["symbol"] = (info.get("symbol") or symbol).upper()
        return info

