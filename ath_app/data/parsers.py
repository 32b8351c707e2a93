"""
Provider payload parsers.

Converts loosely-typed provider rows and quote dictionaries into the
canonical models in one place, so the rest of the pipeline can rely on
documented Optional[float] fields instead of checking raw values itself.
"""

import math
from datetime import date, datetime, timezone
from typing import Any, Iterable, Optional

import structlog

from ..errors import MissingDataError, ParseError
from .models import ChartPoint, DetailedQuote, PricePoint, QuoteSnapshot, SymbolSeries

logger = structlog.get_logger(__name__)

# Epoch values above this are treated as milliseconds
_MS_EPOCH_CUTOFF = 100_000_000_000


def parse_optional_float(value: Any, field: str) -> Optional[float]:
    """
    Parse a numeric provider field that may be absent.

    Args:
        value: Raw field value
        field: Field name used in error messages

    Returns:
        Float value, or None for missing, NaN or infinite values

    Raises:
        ParseError: If the value is present but not numeric
    """
    if value is None:
        return None

    if isinstance(value, bool):
        raise ParseError(f"Boolean is not a valid value for {field}", field=field,
                         raw_data=str(value))

    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            value = float(value)
        except ValueError:
            raise ParseError(f"Invalid numeric value for {field}: {value!r}", field=field,
                             raw_data=value, expected_format="number")

    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ParseError(f"Invalid numeric value for {field}: {value!r}", field=field,
                         raw_data=str(value), expected_format="number")

    if not math.isfinite(number):
        return None

    return number


def parse_optional_int(value: Any, field: str) -> Optional[int]:
    """Parse an integer provider field that may be absent."""
    number = parse_optional_float(value, field)
    return int(number) if number is not None else None


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a provider timestamp into an aware UTC datetime.

    Accepts datetimes (including pandas Timestamps), dates, epoch seconds or
    milliseconds, and ISO-8601 strings.

    Raises:
        ParseError: If the timestamp is missing or unparseable
    """
    if value is None:
        raise ParseError("Timestamp is required", field="date")

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value):
            raise ParseError(f"Invalid timestamp: {value!r}", field="date")
        seconds = value / 1000 if abs(value) >= _MS_EPOCH_CUTOFF else value
        return datetime.fromtimestamp(seconds, tz=timezone.utc)

    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ParseError(f"Invalid timestamp: {value!r}", field="date",
                             raw_data=value, expected_format="ISO-8601")
        return parse_timestamp(parsed)

    raise ParseError(f"Unsupported timestamp type: {type(value).__name__}", field="date",
                     raw_data=str(value))


def parse_price_point(row: dict[str, Any]) -> PricePoint:
    """
    Parse one weekly bar.

    Expected keys: date, high, close, adjclose (adjusted_close is accepted
    as an alias). Price keys may be missing or null.
    """
    adjusted = row.get("adjclose", row.get("adjusted_close"))
    return PricePoint(
        date=parse_timestamp(row.get("date")),
        high=parse_optional_float(row.get("high"), "high"),
        close=parse_optional_float(row.get("close"), "close"),
        adjusted_close=parse_optional_float(adjusted, "adjclose"),
    )


def parse_symbol_series(symbol: str, rows: Iterable[dict[str, Any]]) -> SymbolSeries:
    """
    Parse a weekly history into a chronological SymbolSeries.

    Rows that cannot be parsed are dropped and counted in the log; a series
    with only bad rows comes back empty rather than raising.
    """
    points = []
    rejected = 0

    for row in rows:
        try:
            points.append(parse_price_point(row))
        except ParseError as e:
            rejected += 1
            logger.debug("Dropping unparseable history row", symbol=symbol, error=str(e))

    if rejected:
        logger.warning("Dropped unparseable history rows", symbol=symbol,
                       rejected=rejected, kept=len(points))

    points.sort(key=lambda p: p.date)
    return SymbolSeries(symbol=symbol, points=tuple(points))


def parse_quote(raw: dict[str, Any], default_currency: str = "USD") -> QuoteSnapshot:
    """
    Parse a live quote dictionary (provider field names) into a QuoteSnapshot.

    Raises:
        ParseError: If the symbol is missing or a numeric field is malformed
        MissingDataError: If there is no positive market price
    """
    symbol = raw.get("symbol")
    if not symbol or not isinstance(symbol, str):
        raise ParseError("Quote is missing its symbol", field="symbol", raw_data=str(raw)[:200])

    symbol = symbol.upper()

    return QuoteSnapshot(
        symbol=symbol,
        name=raw.get("shortName") or raw.get("longName") or symbol,
        current_price=_market_price(raw, symbol),
        currency=raw.get("currency") or default_currency,
        daily_change_percent=parse_optional_float(
            raw.get("regularMarketChangePercent"), "regularMarketChangePercent"),
        dividend_yield=parse_optional_float(raw.get("dividendYield"), "dividendYield"),
        expense_ratio=parse_optional_float(raw.get("netExpenseRatio"), "netExpenseRatio"),
    )


def parse_detailed_quote(raw: dict[str, Any], default_currency: str = "USD") -> DetailedQuote:
    """Parse an extended quote dictionary into a DetailedQuote."""
    symbol = raw.get("symbol")
    if not symbol or not isinstance(symbol, str):
        raise ParseError("Quote is missing its symbol", field="symbol", raw_data=str(raw)[:200])

    symbol = symbol.upper()
    price = _market_price(raw, symbol)

    def required(key: str) -> float:
        return parse_optional_float(raw.get(key), key) or 0.0

    def optional(key: str) -> Optional[float]:
        return parse_optional_float(raw.get(key), key)

    return DetailedQuote(
        symbol=symbol,
        short_name=raw.get("shortName") or symbol,
        long_name=raw.get("longName") or None,
        regular_market_price=price,
        regular_market_change=required("regularMarketChange"),
        regular_market_change_percent=required("regularMarketChangePercent"),
        regular_market_day_high=required("regularMarketDayHigh"),
        regular_market_day_low=required("regularMarketDayLow"),
        regular_market_open=required("regularMarketOpen"),
        regular_market_previous_close=required("regularMarketPreviousClose"),
        regular_market_volume=parse_optional_int(
            raw.get("regularMarketVolume"), "regularMarketVolume") or 0,
        average_daily_volume_3_month=parse_optional_int(
            raw.get("averageDailyVolume3Month"), "averageDailyVolume3Month"),
        average_daily_volume_10_day=parse_optional_int(
            raw.get("averageDailyVolume10Day"), "averageDailyVolume10Day"),
        fifty_two_week_high=required("fiftyTwoWeekHigh"),
        fifty_two_week_low=required("fiftyTwoWeekLow"),
        fifty_day_average=optional("fiftyDayAverage"),
        two_hundred_day_average=optional("twoHundredDayAverage"),
        market_cap=optional("marketCap"),
        trailing_pe=optional("trailingPE"),
        forward_pe=optional("forwardPE"),
        beta=optional("beta"),
        eps_trailing_twelve_months=optional("epsTrailingTwelveMonths"),
        price_to_book=optional("priceToBook"),
        dividend_yield=optional("dividendYield"),
        net_expense_ratio=optional("netExpenseRatio"),
        currency=raw.get("currency") or default_currency,
        exchange=raw.get("fullExchangeName") or raw.get("exchange") or "Unknown",
        exchange_timezone_name=raw.get("exchangeTimezoneName") or "America/New_York",
        market_state=raw.get("marketState") or "CLOSED",
        quote_type=raw.get("quoteType") or "EQUITY",
    )


def _market_price(raw: dict[str, Any], symbol: str) -> float:
    """The live price; a quote without a positive one is unusable."""
    price = parse_optional_float(raw.get("regularMarketPrice"), "regularMarketPrice")
    if price is None or price <= 0:
        raise MissingDataError(f"Quote for {symbol} has no usable market price",
                               data_type="regularMarketPrice", symbol=symbol)
    return price


def parse_chart_points(rows: Iterable[dict[str, Any]]) -> list[ChartPoint]:
    """Parse chart rows (date, close), dropping rows without a close price."""
    points = []

    for row in rows:
        price = parse_optional_float(row.get("close"), "close")
        if price is None:
            continue
        ts = parse_timestamp(row.get("date"))
        points.append(ChartPoint(
            timestamp_ms=int(ts.timestamp() * 1000),
            date=ts,
            price=price,
        ))

    return points
