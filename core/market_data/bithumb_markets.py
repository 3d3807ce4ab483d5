"""Bithumb market catalog.

Builds canonical markets from the bulk ticker payload and keeps them in a
symbol/id cache used to resolve user symbols.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from cex.bithumb.api import endpoints
from core.errors import BadSymbol
from core.types import Market


logger = logging.getLogger(__name__)


@runtime_checkable
class TickerAllSource(Protocol):
    """Anything that can return the raw ``ticker/all`` envelope."""

    def get_ticker_all(self) -> Mapping[str, Any]:
        """Return the validated ``ticker/all`` envelope."""


def build_market(market_id: str, raw: Optional[Mapping[str, Any]] = None) -> Market:
    base = market_id
    quote = endpoints.SETTLEMENT_CURRENCY
    return Market(
        id=market_id,
        symbol=f"{base}/{quote}",
        base=base,
        quote=quote,
        taker_fee=endpoints.TAKER_FEE,
        maker_fee=endpoints.MAKER_FEE,
        raw=raw,
    )


def fetch_markets(client: TickerAllSource) -> list[Market]:
    """One KRW market per instrument key of ``ticker/all``, skipping the ``date`` key.

    Precision and limits are not published by the venue and stay unknown.
    Transport errors propagate.
    """
    response = client.get_ticker_all()
    data = response.get("data") or {}
    return [
        build_market(market_id, raw)
        for market_id, raw in data.items()
        if market_id != endpoints.DATE_SENTINEL
    ]


class MarketCache:
    """Lazily loaded ``symbol -> Market`` / ``id -> Market`` lookup."""

    def __init__(self, client: TickerAllSource) -> None:
        self._client = client
        self._lock = threading.Lock()
        self.by_symbol: dict[str, Market] = {}
        self.by_id: dict[str, Market] = {}
        self.currencies: list[str] = []
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, reload: bool = False) -> dict[str, Market]:
        with self._lock:
            if self._loaded and not reload:
                return self.by_symbol
            markets = fetch_markets(self._client)
            self.by_symbol = {market.symbol: market for market in markets}
            self.by_id = {market.id: market for market in markets}
            currencies: dict[str, None] = {}
            for market in markets:
                currencies.setdefault(market.base)
                currencies.setdefault(market.quote)
            self.currencies = list(currencies)
            self._loaded = True
            logger.info("Loaded %d Bithumb markets", len(markets))
            return self.by_symbol

    def market(self, symbol: str) -> Market:
        """Resolve a canonical symbol (``BTC/KRW``) or venue id (``BTC``)."""
        self.load()
        if symbol in self.by_symbol:
            return self.by_symbol[symbol]
        if symbol in self.by_id:
            return self.by_id[symbol]
        raise BadSymbol(endpoints.EXCHANGE_ID, f"does not have market symbol {symbol}")
