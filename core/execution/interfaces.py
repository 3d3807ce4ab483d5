from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Protocol, runtime_checkable

from core.types import Balances, Market, OrderBook, OrderResult, Ticker, Trade, WithdrawalResult


@runtime_checkable
class ExchangeAdapter(Protocol):
    """Unified interface for live exchange adapters.

    Implementations may use blocking I/O; callers should offload to a thread
    executor when used from async contexts.
    """

    id: str

    def load_markets(self, reload: bool = False) -> dict[str, Market]:
        """Fetch the market catalog once and cache it."""

    def fetch_ticker(self, symbol: str) -> Ticker:
        ...

    def fetch_tickers(self, symbols: Optional[Iterable[str]] = None) -> dict[str, Ticker]:
        ...

    def fetch_order_book(self, symbol: str, limit: Optional[int] = None) -> OrderBook:
        ...

    def fetch_trades(self, symbol: str, since: Optional[int] = None, limit: Optional[int] = None) -> list[Trade]:
        ...

    def fetch_balance(self) -> Balances:
        ...

    def create_order(
        self,
        symbol: str,
        order_type: str,
        side: str,
        amount: Decimal,
        price: Optional[Decimal] = None,
    ) -> OrderResult:
        """Create an order. A missing `id` on the result means none was returned, not failure."""

    def cancel_order(
        self,
        order_id: str,
        symbol: Optional[str] = None,
        *,
        side: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> Mapping[str, Any]:
        """Cancel an order; `side` and `currency` are required by some venues."""

    def withdraw(
        self,
        currency: str,
        amount: Decimal,
        address: str,
        tag: Optional[str] = None,
        *,
        destination: Optional[str] = None,
    ) -> WithdrawalResult:
        ...
