"""Bithumb response normalization.

Pure functions turning raw Bithumb JSON fragments into the canonical model
in `core.types`. Anything the venue does not send stays None; nothing is
coerced to zero.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from cex.bithumb.api import endpoints
from core.errors import BadResponse
from core.types import Balance, Balances, Market, OrderBook, PriceLevel, Ticker, Trade

logger = logging.getLogger(__name__)

RecordKey = Union[str, int]

_TRADE_TIME_WIDTH = 8  # HH:MM:SS


def to_decimal(value: Any, key: RecordKey = "value") -> Optional[Decimal]:
    """Return ``value`` as Decimal, or None if missing, blank or not a number."""
    if value is None or value == "":
        return None
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        logger.debug("Ignoring non-numeric %s=%r", key, value)
        return None
    if not result.is_finite():
        return None
    return result


def safe_decimal(raw: Mapping[str, Any], key: str) -> Optional[Decimal]:
    return to_decimal(raw.get(key), key)


def _required_decimal(raw: Mapping[str, Any], key: str) -> Decimal:
    value = safe_decimal(raw, key)
    if value is None:
        raise BadResponse(endpoints.EXCHANGE_ID, key, f"trade record has no usable `{key}`: {raw!r}")
    return value


def safe_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(str(value))
    except ValueError:
        logger.debug("Ignoring non-integer timestamp %r", value)
        return None


def iso8601(timestamp: Optional[int]) -> Optional[str]:
    """Render epoch milliseconds as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    if timestamp is None:
        return None
    dt = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{timestamp % 1000:03d}Z"


def parse_ticker(raw: Mapping[str, Any], market: Optional[Market] = None) -> Ticker:
    timestamp = safe_int(raw.get("date"))
    return Ticker(
        symbol=market.symbol if market else None,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        high=safe_decimal(raw, "max_price"),
        low=safe_decimal(raw, "min_price"),
        bid=safe_decimal(raw, "buy_price"),
        ask=safe_decimal(raw, "sell_price"),
        open=safe_decimal(raw, "opening_price"),
        close=safe_decimal(raw, "closing_price"),
        last=safe_decimal(raw, "last_trade"),
        average=safe_decimal(raw, "average_price"),
        base_volume=safe_decimal(raw, "volume_1day"),
        # vwap, first, change, percentage and quote_volume are not derivable
        raw=raw,
    )


def _level(record: Any, price_key: RecordKey, amount_key: RecordKey) -> Optional[PriceLevel]:
    try:
        price = to_decimal(record[price_key], price_key)
        amount = to_decimal(record[amount_key], amount_key)
    except (KeyError, IndexError, TypeError):
        price = amount = None
    if price is None or amount is None:
        logger.debug("Skipping unusable order book level %r", record)
        return None
    return price, amount


def _levels(records: Any, price_key: RecordKey, amount_key: RecordKey) -> list[PriceLevel]:
    levels = (_level(record, price_key, amount_key) for record in records or ())
    return [level for level in levels if level is not None]


def _ordered(levels: list[PriceLevel], *, descending: bool, side: str) -> tuple[PriceLevel, ...]:
    prices = [price for price, _ in levels]
    expected = sorted(prices, reverse=descending)
    if prices != expected:
        logger.warning("Order book %s arrived out of order, re-sorting %d levels", side, len(levels))
        levels = sorted(levels, key=lambda level: level[0], reverse=descending)
    return tuple(levels)


def parse_order_book(
    raw: Mapping[str, Any],
    timestamp: Optional[int] = None,
    bids_key: str = "bids",
    asks_key: str = "asks",
    price_key: RecordKey = 0,
    amount_key: RecordKey = 1,
    symbol: Optional[str] = None,
) -> OrderBook:
    """Reshape two arrays of price/amount records into an OrderBook.

    Records may be mappings (string keys) or sequences (integer keys).
    Source order is kept as long as bids descend and asks ascend. Levels
    without a usable price or amount are dropped.
    """
    bids = _levels(raw.get(bids_key), price_key, amount_key)
    asks = _levels(raw.get(asks_key), price_key, amount_key)
    return OrderBook(
        symbol=symbol,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        bids=_ordered(bids, descending=True, side="bids"),
        asks=_ordered(asks, descending=False, side="asks"),
        raw=raw,
    )


def pad_trade_time(time_part: str) -> str:
    """Left-pad an ``H:MM:SS`` time to ``HH:MM:SS``; full-width input is returned as is.

    Bithumb drops the leading zero of single digit hours.
    """
    if len(time_part) < _TRADE_TIME_WIDTH:
        return "0" + time_part
    return time_part


def parse_trade_timestamp(transaction_date: str) -> int:
    """Parse ``YYYY-MM-DD H:MM:SS`` (UTC) into epoch milliseconds."""
    date_part, time_part = transaction_date.strip().split(" ", 1)
    stamp = f"{date_part} {pad_trade_time(time_part.strip())}"
    dt = datetime.strptime(stamp, "%Y-%m-%d %H:%M:%S").replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def parse_trade(raw: Mapping[str, Any], market: Market) -> Trade:
    """Map one ``recent_transactions`` record; raises BadResponse if a required field is unusable."""
    transaction_date = raw.get("transaction_date")
    try:
        timestamp = parse_trade_timestamp(str(transaction_date))
    except ValueError as exc:
        raise BadResponse(
            endpoints.EXCHANGE_ID,
            "transaction_date",
            f"trade record has no usable `transaction_date`: {transaction_date!r}",
        ) from exc
    return Trade(
        id=None,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        symbol=market.symbol,
        side="sell" if raw.get("type") == "ask" else "buy",
        price=_required_decimal(raw, "price"),
        amount=_required_decimal(raw, "units_traded"),
        raw=raw,
    )


def parse_trades(
    raws: Iterable[Mapping[str, Any]],
    market: Market,
    since: Optional[int] = None,
    limit: Optional[int] = None,
) -> list[Trade]:
    """Parse, sort oldest-first, drop trades before ``since`` and keep at most ``limit``."""
    trades = sorted((parse_trade(raw, market) for raw in raws), key=lambda trade: trade.timestamp)
    if since is not None:
        trades = [trade for trade in trades if trade.timestamp >= since]
    if limit is not None:
        trades = trades[:limit]
    return trades


def parse_balance(
    raw: Mapping[str, Any],
    currencies: Sequence[str],
    info: Optional[Mapping[str, Any]] = None,
) -> Balances:
    """Collect ``total_x`` / ``in_use_x`` / ``available_x`` for every known currency.

    A currency with none of the three keys is left out rather than zeroed;
    the venue omits currencies it does not list for the account.
    """
    result: dict[str, Balance] = {}
    for currency in currencies:
        lower = currency.lower()
        keys = (f"total_{lower}", f"in_use_{lower}", f"available_{lower}")
        if not any(key in raw for key in keys):
            continue
        result[currency] = Balance(
            currency=currency,
            total=safe_decimal(raw, keys[0]),
            used=safe_decimal(raw, keys[1]),
            free=safe_decimal(raw, keys[2]),
        )
    return Balances(currencies=result, raw=info if info is not None else raw)
