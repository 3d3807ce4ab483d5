"""Market data: catalog building and response normalization."""

from core.market_data.bithumb_markets import MarketCache, build_market, fetch_markets
from core.market_data.bithumb_normalizer import (
    parse_balance,
    parse_order_book,
    parse_ticker,
    parse_trade,
    parse_trades,
)

__all__ = [
    "MarketCache",
    "build_market",
    "fetch_markets",
    "parse_balance",
    "parse_order_book",
    "parse_ticker",
    "parse_trade",
    "parse_trades",
]
