"""
Bithumb exchange adapter
========================

Canonical trading-data and order-management interface over the Bithumb
REST API (see `core.execution.interfaces.ExchangeAdapter`).

Usage:
    from cex.bithumb.exchange import create_exchange

    exchange = create_exchange()          # reads BITHUMB_API_KEY / BITHUMB_API_SECRET
    ticker = exchange.fetch_ticker("BTC/KRW")
    order = exchange.create_order("BTC/KRW", "limit", "buy", Decimal("0.01"), Decimal("50000000"))
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from cex.bithumb.api import endpoints
from cex.bithumb.api.bithumb_client import BithumbClient
from core.execution.bithumb_live import BithumbOrderManager
from core.market_data.bithumb_markets import MarketCache, fetch_markets
from core.market_data.bithumb_normalizer import (
    parse_balance,
    parse_order_book,
    parse_ticker,
    parse_trades,
    safe_int,
)
from core.types import (
    Balances,
    CancelRequest,
    Market,
    OrderBook,
    OrderResult,
    Ticker,
    Trade,
    WithdrawalResult,
    WithdrawRequest,
)


logger = logging.getLogger(__name__)


class BithumbExchange:
    """Bithumb (KR) spot exchange adapter."""

    id = endpoints.EXCHANGE_ID
    name = endpoints.EXCHANGE_NAME
    countries = endpoints.COUNTRIES
    rate_limit_ms = endpoints.RATE_LIMIT_MS
    has: Mapping[str, bool] = {
        "fetchMarkets": True,
        "fetchTicker": True,
        "fetchTickers": True,
        "fetchOrderBook": True,
        "fetchTrades": True,
        "fetchBalance": True,
        "createOrder": True,
        "cancelOrder": True,
        "withdraw": True,
    }
    urls: Mapping[str, Any] = {
        "api": {"public": endpoints.PUBLIC_URL, "private": endpoints.PRIVATE_URL},
        "www": endpoints.WWW_URL,
        "doc": endpoints.DOC_URL,
    }

    def __init__(self, client: BithumbClient, markets: Optional[MarketCache] = None) -> None:
        self.client = client
        self.markets = markets or MarketCache(client)
        self.orders = BithumbOrderManager(client=client, markets=self.markets)

    # ==================== Markets ====================

    def fetch_markets(self) -> list[Market]:
        return fetch_markets(self.client)

    def load_markets(self, reload: bool = False) -> dict[str, Market]:
        return self.markets.load(reload=reload)

    def market(self, symbol: str) -> Market:
        return self.markets.market(symbol)

    # ==================== Market data ====================

    def fetch_ticker(self, symbol: str) -> Ticker:
        market = self.market(symbol)
        response = self.client.get_ticker(market.base)
        return parse_ticker(response["data"], market)

    def fetch_tickers(self, symbols: Optional[Iterable[str]] = None) -> dict[str, Ticker]:
        """All tickers from one bulk call, keyed by symbol (raw id for unknown instruments)."""
        self.markets.load()
        response = self.client.get_ticker_all()
        data = dict(response["data"])
        timestamp = data.pop(endpoints.DATE_SENTINEL, None)

        result: dict[str, Ticker] = {}
        for market_id, raw in data.items():
            market = self.markets.by_id.get(market_id)
            if market is None:
                logger.debug("Ticker for %s has no cached market", market_id)
            key = market.symbol if market else market_id
            result[key] = parse_ticker({**raw, "date": timestamp}, market)

        if symbols is not None:
            wanted = set(symbols)
            result = {symbol: ticker for symbol, ticker in result.items() if symbol in wanted}
        return result

    def fetch_order_book(self, symbol: str, limit: Optional[int] = None) -> OrderBook:
        market = self.market(symbol)
        count = endpoints.ORDER_BOOK_MAX_COUNT
        if limit is not None:
            count = min(limit, count)
        response = self.client.get_orderbook(market.base, count=count)
        book = response["data"]
        return parse_order_book(
            book,
            safe_int(book.get("timestamp")),
            "bids",
            "asks",
            "price",
            "quantity",
            symbol=market.symbol,
        )

    def fetch_trades(self, symbol: str, since: Optional[int] = None, limit: Optional[int] = None) -> list[Trade]:
        market = self.market(symbol)
        count = endpoints.RECENT_TRADES_MAX_COUNT
        if limit is not None:
            count = min(limit, count)
        response = self.client.get_recent_transactions(market.base, count=count)
        return parse_trades(response["data"], market, since=since, limit=limit)

    # ==================== Account ====================

    def fetch_balance(self) -> Balances:
        self.markets.load()
        response = self.client.get_balance("ALL")
        return parse_balance(response.get("data") or {}, self.markets.currencies, info=response)

    def create_order(
        self,
        symbol: str,
        order_type: str,
        side: str,
        amount: Decimal,
        price: Optional[Decimal] = None,
    ) -> OrderResult:
        return self.orders.create_order(symbol, order_type, side, amount, price)

    def cancel_order(
        self,
        order_id: str,
        symbol: Optional[str] = None,
        *,
        side: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> Mapping[str, Any]:
        return self.orders.cancel_order(
            CancelRequest(id=order_id, side=side, currency=currency, symbol=symbol)  # type: ignore[arg-type]
        )

    def withdraw(
        self,
        currency: str,
        amount: Decimal,
        address: str,
        tag: Optional[str] = None,
        *,
        destination: Optional[str] = None,
    ) -> WithdrawalResult:
        return self.orders.withdraw(
            WithdrawRequest(currency=currency, amount=amount, address=address, tag=tag, destination=destination)
        )

    def close(self) -> None:
        self.client.close()


def create_exchange(*, api_key: Optional[str] = None, api_secret: Optional[str] = None) -> BithumbExchange:
    """
    Create a BithumbExchange instance.

    Args:
        api_key: API key (optional, will use BITHUMB_API_KEY env var if not provided)
        api_secret: API secret (optional, will use BITHUMB_API_SECRET env var if not provided)

    Returns:
        BithumbExchange instance (public endpoints work without credentials)
    """
    return BithumbExchange(BithumbClient(api_key=api_key, api_secret=api_secret))
